"""
Burn Resolution

Decides whether a burn request retires the asset (reference token included)
or only reduces the caller's user token balance.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Union

import pycardano as pc

from .contracts import Cip68Contracts
from .instructions import Instruction, MintAsset, PayToAddress, SpendScriptInput
from .naming import reference_unit, unit_quantity, user_unit
from .types import Burn, RemoveStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FullBurn:
    quantity: int


@dataclass(frozen=True)
class PartialBurn:
    quantity: int
    remaining: int


BurnDecision = Union[FullBurn, PartialBurn]


def held_quantity(utxos: Iterable[pc.UTxO], unit: str) -> int:
    """Total quantity of a unit across UTxOs"""
    return sum(unit_quantity(utxo, unit) for utxo in utxos)


class BurnResolver:
    """Chooses between full and partial burn and emits the matching instructions"""

    def __init__(self, contracts: Cip68Contracts):
        self.contracts = contracts

    def resolve(self, quantity: int, held_total: int) -> BurnDecision:
        """
        Args:
            quantity: Requested burn quantity (negative)
            held_total: User token quantity currently held by the caller

        Returns:
            FullBurn only when the request burns exactly the held total.
            Over-burns yield a PartialBurn and fail when the transaction is balanced.
        """
        if -quantity == held_total:
            return FullBurn(quantity=quantity)
        return PartialBurn(quantity=quantity, remaining=held_total + quantity)

    def instructions(
        self,
        asset_name: str,
        decision: BurnDecision,
        store_utxo: pc.UTxO,
        owner_address: str,
    ) -> List[Instruction]:
        """
        Builder instructions for a resolved burn

        Args:
            asset_name: Logical asset name
            decision: Result of resolve()
            store_utxo: Reference token UTxO at the store address
            owner_address: Caller address receiving the remaining balance
        """
        policy_id = self.contracts.policy_id
        user_token = user_unit(policy_id, asset_name)
        burn_user = MintAsset(
            unit=user_token,
            quantity=decision.quantity,
            script=self.contracts.mint_script,
            redeemer=Burn(),
        )

        if isinstance(decision, FullBurn):
            logger.debug(f"Full burn of {asset_name}: retiring reference token")
            return [
                burn_user,
                MintAsset(
                    unit=reference_unit(policy_id, asset_name),
                    quantity=-1,
                    script=self.contracts.mint_script,
                    redeemer=Burn(),
                ),
                SpendScriptInput(
                    utxo=store_utxo,
                    script=self.contracts.store_script,
                    redeemer=RemoveStore(),
                ),
            ]

        logger.debug(f"Partial burn of {asset_name}: {decision.remaining} left")
        return [
            burn_user,
            PayToAddress(address=owner_address, amounts=((user_token, decision.remaining),)),
        ]
