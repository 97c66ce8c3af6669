"""
Asset Classification

Decides whether a mint batch creates new CIP68 assets or mints more user
tokens against existing ones. Batches mixing both are rejected.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import pycardano as pc

from .datum import get_owner_pkh, inline_datum_cbor
from .errors import Cip68Error, MalformedDatum, NotAssetOwner, raise_collected


logger = logging.getLogger(__name__)

# (asset name, StoreUtxo or None) for each requested asset, in request order
StoreLookup = Tuple[str, Optional[pc.UTxO]]


@dataclass(frozen=True)
class AllNew:
    pass


@dataclass(frozen=True)
class AllExisting:
    pass


@dataclass(frozen=True)
class Mixed:
    existing: Tuple[str, ...]


Classification = Union[AllNew, AllExisting, Mixed]


def has_store_datum(utxo: Optional[pc.UTxO]) -> bool:
    """A StoreUtxo counts as live only when it carries an inline datum"""
    if utxo is None:
        return False
    payload = inline_datum_cbor(utxo)
    return bool(payload)


class AssetClassifier:
    """Classifies mint batches and checks ownership of existing assets"""

    def classify(self, lookups: Sequence[StoreLookup]) -> Classification:
        """
        Classify a batch from its StoreUtxo lookups

        Args:
            lookups: One (asset name, StoreUtxo or None) pair per requested asset

        Returns:
            AllNew, AllExisting, or Mixed naming the assets that already exist

        Raises:
            ValueError: If the batch is empty
        """
        if not lookups:
            raise ValueError("Cannot classify an empty batch")

        existing = tuple(name for name, utxo in lookups if has_store_datum(utxo))
        logger.debug(f"Classified batch of {len(lookups)}: {len(existing)} existing")

        if not existing:
            return AllNew()
        if len(existing) == len(lookups):
            return AllExisting()
        return Mixed(existing=existing)

    def check_ownership(self, lookups: Sequence[StoreLookup], owner_pkh: str) -> None:
        """
        Verify the caller owns every existing asset of the batch

        Args:
            lookups: Lookups of an AllExisting batch
            owner_pkh: Caller payment key hash (hex)

        Raises:
            NotAssetOwner: If one asset records another owner
            BatchRejected: If several assets fail either check
            MalformedDatum: If the only failing asset has an undecodable datum
        """
        errors: List[Cip68Error] = []
        for asset_name, utxo in lookups:
            try:
                recorded = get_owner_pkh(inline_datum_cbor(utxo))
            except MalformedDatum as e:
                errors.append(MalformedDatum(f"Reference datum of {asset_name} is malformed: {e}"))
                continue
            if recorded is None or recorded.lower() != owner_pkh.lower():
                errors.append(NotAssetOwner(asset_name))
        raise_collected(errors)
