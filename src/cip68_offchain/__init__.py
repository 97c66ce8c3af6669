"""
CIP68 Off-chain Library

Builds unsigned Cardano transactions that mint, burn and update CIP68
reference/user token pairs. Contains the batch decision logic separated from
wallet, chain query and transaction builder concerns.
"""

from .app import Cip68App
from .chain_context import CardanoChainContext
from .config import Cip68Settings
from .contracts import Cip68Contracts, ContractManager, ScriptKind
from .errors import (
    BatchRejected,
    Cip68Error,
    CollateralNotFoundError,
    ContractNotFoundError,
    InvalidHexInput,
    InvalidQuantity,
    MalformedDatum,
    MixedMintNotSupported,
    NotAssetOwner,
    StoreUtxoNotFound,
)
from .schemas import AssetRequest
from .tokens import TokenOperations
from .transactions import CardanoTransactions
from .wallet import CardanoWallet


__all__ = [
    "AssetRequest",
    "BatchRejected",
    "CardanoChainContext",
    "CardanoTransactions",
    "CardanoWallet",
    "Cip68App",
    "Cip68Contracts",
    "Cip68Error",
    "Cip68Settings",
    "CollateralNotFoundError",
    "ContractManager",
    "ContractNotFoundError",
    "InvalidHexInput",
    "InvalidQuantity",
    "MalformedDatum",
    "MixedMintNotSupported",
    "NotAssetOwner",
    "ScriptKind",
    "StoreUtxoNotFound",
    "TokenOperations",
]
