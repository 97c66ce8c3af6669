"""
CIP68 Error Types

Typed failures raised by the asset lifecycle operations. Every error aborts the
whole batch before any instruction reaches the transaction builder.
"""

from typing import List, Sequence


class Cip68Error(Exception):
    """Base exception for CIP68 lifecycle errors"""

    pass


class MixedMintNotSupported(Cip68Error):
    """Mint batch contains both new and already existing assets"""

    def __init__(self, asset_names: Sequence[str]):
        self.asset_names = list(asset_names)
        super().__init__(
            "Transaction only supports either minting new or existing assets. "
            f"Assets already exist: {', '.join(self.asset_names)}"
        )


class NotAssetOwner(Cip68Error):
    """Caller key hash does not match the owner recorded in the reference datum"""

    def __init__(self, asset_name: str):
        self.asset_name = asset_name
        super().__init__(f"{asset_name} is owned by another key")


class StoreUtxoNotFound(Cip68Error):
    """No live reference UTxO exists for the asset"""

    def __init__(self, asset_name: str):
        self.asset_name = asset_name
        super().__init__(f"Store UTxO not found for {asset_name}")


class InvalidQuantity(Cip68Error):
    """Requested quantity has the wrong sign for the operation"""

    def __init__(self, asset_name: str, quantity: int, operation: str):
        self.asset_name = asset_name
        self.quantity = quantity
        expected = "positive" if operation == "mint" else "negative"
        super().__init__(f"{operation} quantity for {asset_name} must be {expected}, got {quantity}")


class MalformedDatum(Cip68Error):
    """Inline datum did not decode as a constructor record"""

    pass


class InvalidHexInput(Cip68Error):
    """Odd-length or non-hex string supplied where hex was required"""

    pass


class BatchRejected(Cip68Error):
    """Several assets of one batch failed; carries every failure"""

    def __init__(self, errors: Sequence[Cip68Error]):
        self.errors: List[Cip68Error] = list(errors)
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(f"{len(self.errors)} assets rejected: {details}")


class ContractNotFoundError(Cip68Error):
    """Validator title not present in the Plutus blueprint"""

    pass


class CollateralNotFoundError(Cip68Error):
    """Wallet holds no pure-ADA UTxO usable as collateral"""

    pass


def raise_collected(errors: Sequence[Cip68Error]) -> None:
    """Raise the collected batch failures, if any"""
    if not errors:
        return
    if len(errors) == 1:
        raise errors[0]
    raise BatchRejected(errors)
