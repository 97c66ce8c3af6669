from dataclasses import dataclass
from typing import Dict, Union

from pycardano import PlutusData


# Mint validator redeemers
@dataclass
class Mint(PlutusData):
    CONSTR_ID = 0


@dataclass
class Burn(PlutusData):
    CONSTR_ID = 1


# Store validator redeemers
@dataclass
class UpdateStore(PlutusData):
    CONSTR_ID = 0


@dataclass
class RemoveStore(PlutusData):
    CONSTR_ID = 1


RedeemerMint = Union[Mint, Burn]
RedeemerStore = Union[UpdateStore, RemoveStore]

CIP68_DATUM_VERSION = 1


@dataclass
class Cip68Datum(PlutusData):
    CONSTR_ID = 0
    metadata: Dict[bytes, bytes]  # UTF-8 keys, UTF-8 values (raw key hash for _pk)
    version: int
