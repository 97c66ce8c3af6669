"""
Cardano Transaction Operations

Turns an ordered sequence of builder instructions into an unsigned
transaction using the PyCardano transaction builder.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

import pycardano as pc

from .instructions import (
    Amounts,
    Instruction,
    MintAsset,
    PayToAddress,
    RequireSigner,
    SetChangeAddress,
    SetCollateral,
    SetNetwork,
    SpendInput,
    SpendScriptInput,
)
from .naming import LOVELACE_UNIT, from_hex, split_unit


logger = logging.getLogger(__name__)


def amounts_to_value(amounts: Amounts) -> pc.Value:
    """
    Convert (unit, quantity) pairs into a PyCardano value

    Quantities of the same unit are summed.
    """
    coin = 0
    tokens: Dict[bytes, Dict[bytes, int]] = {}
    for unit, quantity in amounts:
        if unit == LOVELACE_UNIT:
            coin += quantity
            continue
        policy_id, asset_name = split_unit(unit)
        policy_tokens = tokens.setdefault(policy_id, {})
        policy_tokens[asset_name] = policy_tokens.get(asset_name, 0) + quantity

    if not tokens:
        return pc.Value(coin)
    return pc.Value(coin, pc.MultiAsset.from_primitive(tokens))


class CardanoTransactions:
    """Builds unsigned transactions from builder instructions"""

    def __init__(self, context: pc.ChainContext):
        """
        Initialize transaction builder

        Args:
            context: PyCardano chain context (protocol parameters, UTxOs, evaluation)
        """
        self.context = context

    def _output(self, instruction: PayToAddress) -> pc.TransactionOutput:
        address = pc.Address.from_primitive(instruction.address)
        value = amounts_to_value(instruction.amounts)
        output = pc.TransactionOutput(
            address,
            value,
            datum=instruction.datum,
            script=instruction.reference_script,
        )
        if value.coin == 0:
            # Top up to the minimum lovelace the ledger requires for this output
            output.amount.coin = pc.min_lovelace_post_alonzo(output, self.context)
        return output

    def build_unsigned(self, instructions: Sequence[Instruction]) -> pc.Transaction:
        """
        Apply instructions to a transaction builder and build the transaction

        Args:
            instructions: Ordered builder instructions

        Returns:
            Unsigned transaction with script witnesses and redeemers attached

        Raises:
            ValueError: If no change address is given or the network does not match
        """
        builder = pc.TransactionBuilder(self.context)
        mint: Dict[bytes, Dict[bytes, int]] = {}
        minting_policies: Set[bytes] = set()
        required_signers: List[pc.VerificationKeyHash] = []
        change_address: Optional[pc.Address] = None

        for instruction in instructions:
            if isinstance(instruction, SpendInput):
                builder.add_input(instruction.utxo)

            elif isinstance(instruction, SpendScriptInput):
                builder.add_script_input(
                    instruction.utxo,
                    script=instruction.script,
                    redeemer=pc.Redeemer(instruction.redeemer),
                )

            elif isinstance(instruction, MintAsset):
                policy_id, asset_name = split_unit(instruction.unit)
                policy_tokens = mint.setdefault(policy_id, {})
                policy_tokens[asset_name] = policy_tokens.get(asset_name, 0) + instruction.quantity
                # One redeemer per policy
                if policy_id not in minting_policies:
                    minting_policies.add(policy_id)
                    builder.add_minting_script(
                        script=instruction.script, redeemer=pc.Redeemer(instruction.redeemer)
                    )

            elif isinstance(instruction, PayToAddress):
                builder.add_output(self._output(instruction))

            elif isinstance(instruction, RequireSigner):
                required_signers.append(pc.VerificationKeyHash(from_hex(instruction.payment_key_hash)))

            elif isinstance(instruction, SetCollateral):
                builder.collaterals.append(instruction.utxo)

            elif isinstance(instruction, SetChangeAddress):
                change_address = pc.Address.from_primitive(instruction.address)

            elif isinstance(instruction, SetNetwork):
                if self.context.network != instruction.network:
                    raise ValueError(
                        f"Chain context is on {self.context.network}, transaction targets {instruction.network}"
                    )

            else:
                raise TypeError(f"Unknown builder instruction: {instruction!r}")

        if change_address is None:
            raise ValueError("A change address instruction is required")

        minted = {
            policy_id: {name: quantity for name, quantity in tokens.items() if quantity != 0}
            for policy_id, tokens in mint.items()
        }
        minted = {policy_id: tokens for policy_id, tokens in minted.items() if tokens}
        if minted:
            builder.mint = pc.MultiAsset.from_primitive(minted)
        if required_signers:
            builder.required_signers = required_signers

        # Coin selection from the caller's own UTxOs
        builder.add_input_address(change_address)

        tx_body = builder.build(change_address=change_address)
        witness_set = builder.build_witness_set()
        logger.info(f"Built unsigned transaction {tx_body.hash().hex()} from {len(instructions)} instructions")
        return pc.Transaction(tx_body, witness_set)
