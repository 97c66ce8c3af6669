"""
Builder Instructions

Immutable instruction values accumulated by the lifecycle operations and
handed to the transaction builder in one pass.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import pycardano as pc


# A script is either embedded or referenced through the UTxO that carries it
ScriptSource = Union[pc.PlutusV3Script, pc.UTxO]

# (unit, quantity) pairs; "lovelace" is the ADA unit
Amounts = Tuple[Tuple[str, int], ...]


@dataclass(frozen=True)
class SpendInput:
    """Spend a key-locked UTxO"""

    utxo: pc.UTxO


@dataclass(frozen=True)
class SpendScriptInput:
    """Spend a script-locked UTxO whose inline datum is already present"""

    utxo: pc.UTxO
    script: ScriptSource
    redeemer: pc.PlutusData


@dataclass(frozen=True)
class MintAsset:
    """Mint (positive quantity) or burn (negative quantity) a unit"""

    unit: str
    quantity: int
    script: ScriptSource
    redeemer: pc.PlutusData


@dataclass(frozen=True)
class PayToAddress:
    """Produce an output; lovelace is topped up to the minimum when absent"""

    address: str
    amounts: Amounts
    datum: Optional[pc.PlutusData] = None
    reference_script: Optional[pc.PlutusV3Script] = None


@dataclass(frozen=True)
class RequireSigner:
    payment_key_hash: str


@dataclass(frozen=True)
class SetCollateral:
    utxo: pc.UTxO


@dataclass(frozen=True)
class SetChangeAddress:
    address: str


@dataclass(frozen=True)
class SetNetwork:
    network: pc.Network


Instruction = Union[
    SpendInput,
    SpendScriptInput,
    MintAsset,
    PayToAddress,
    RequireSigner,
    SetCollateral,
    SetChangeAddress,
    SetNetwork,
]
