"""
Token Operations

CIP68 asset lifecycle: mint, burn and update reference/user token pairs, and
publish the validators as reference scripts.

Each operation looks up chain state for every requested asset concurrently,
rejects the whole batch on any failure, then assembles an ordered list of
builder instructions and returns the unsigned transaction built from it.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Iterable, List, Optional, Sequence, Tuple, Union

import pycardano as pc

from .aggregation import OutputAggregator
from .burn import BurnResolver, held_quantity
from .chain_context import CardanoChainContext
from .classifier import AllExisting, AllNew, AssetClassifier, Mixed
from .config import Cip68Settings
from .contracts import ContractManager, ScriptKind
from .datum import metadata_to_datum
from .errors import Cip68Error, InvalidQuantity, MixedMintNotSupported, StoreUtxoNotFound, raise_collected
from .instructions import (
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
from .naming import LOVELACE_UNIT, reference_unit, user_unit
from .schemas import AssetRequest, coerce_batch
from .transactions import CardanoTransactions
from .types import Mint, UpdateStore
from .wallet import CardanoWallet, select_collateral


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletTxContext:
    """Caller details every transaction needs: signer, collateral, change address"""

    address: str
    payment_key_hash: str
    collateral: pc.UTxO
    network: pc.Network


async def gather_batch(branches: Sequence[Awaitable[Any]]) -> List[Any]:
    """
    Run per-asset branches concurrently and join their results in order

    Lookup errors propagate as raised. Lifecycle errors from all branches are
    collected and reported together once every branch has finished.
    """
    results = await asyncio.gather(*branches, return_exceptions=True)
    errors: List[Cip68Error] = []
    for result in results:
        if isinstance(result, Cip68Error):
            errors.append(result)
        elif isinstance(result, BaseException):
            raise result
    raise_collected(errors)
    return list(results)


def check_quantity_signs(requests: Sequence[AssetRequest], operation: str) -> None:
    """Mint quantities must be positive, burn quantities negative"""
    sign = 1 if operation == "mint" else -1
    raise_collected(
        [
            InvalidQuantity(request.asset_name, request.quantity_value, operation)
            for request in requests
            if request.quantity_value * sign <= 0
        ]
    )


class TokenOperations:
    """Manages CIP68 minting, burning, updating and reference script publication"""

    def __init__(
        self,
        wallet: CardanoWallet,
        chain_context: CardanoChainContext,
        contract_manager: ContractManager,
        transactions: CardanoTransactions,
        settings: Cip68Settings,
    ):
        """
        Initialize token operations

        Args:
            wallet: CardanoWallet paying for and signing the transactions
            chain_context: CardanoChainContext used for UTxO queries
            contract_manager: ContractManager providing the CIP68 validators
            transactions: CardanoTransactions turning instructions into transactions
            settings: Cip68Settings instance
        """
        self.wallet = wallet
        self.chain_context = chain_context
        self.transactions = transactions
        self.settings = settings
        self.contracts = contract_manager.get_contracts()
        self.classifier = AssetClassifier()
        self.burn_resolver = BurnResolver(self.contracts)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _get_wallet_for_tx(self) -> WalletTxContext:
        address = self.wallet.get_address(0)
        utxos = self.chain_context.utxos(address)
        return WalletTxContext(
            address=str(address),
            payment_key_hash=self.wallet.get_payment_verification_key_hash().hex(),
            collateral=select_collateral(utxos, self.settings.collateral_min_lovelace),
            network=self.contracts.network,
        )

    def _furniture(self, wallet_tx: WalletTxContext) -> List[Instruction]:
        return [
            RequireSigner(wallet_tx.payment_key_hash),
            SetCollateral(wallet_tx.collateral),
            SetChangeAddress(wallet_tx.address),
            SetNetwork(wallet_tx.network),
        ]

    async def _find_store_utxo(self, request: AssetRequest) -> Optional[pc.UTxO]:
        """StoreUtxo by explicit creating transaction when given, else by current chain state"""
        unit = reference_unit(self.contracts.policy_id, request.asset_name)
        store_address = self.contracts.store_address
        if request.tx_hash:
            return await asyncio.to_thread(
                self.chain_context.fetch_utxo_by_tx_hash, store_address, request.tx_hash, None, unit
            )
        return await asyncio.to_thread(self.chain_context.fetch_utxo_by_unit, store_address, unit)

    async def _require_store_utxo(self, request: AssetRequest) -> pc.UTxO:
        store_utxo = await self._find_store_utxo(request)
        if store_utxo is None:
            raise StoreUtxoNotFound(request.asset_name)
        return store_utxo

    async def _build(self, operation: str, instructions: List[Instruction]) -> pc.Transaction:
        logger.info(f"Assembling {operation} transaction from {len(instructions)} instructions")
        return await asyncio.to_thread(self.transactions.build_unsigned, instructions)

    # ------------------------------------------------------------------
    # Mint
    # ------------------------------------------------------------------

    async def plan_mint(
        self, batch: Iterable[Union[AssetRequest, dict]], anchor_utxo: Optional[pc.UTxO] = None
    ) -> List[Instruction]:
        """
        Builder instructions for minting a batch

        A batch of new assets mints both CIP68 tokens of each asset and locks the
        reference token with its metadata at the store address. A batch of
        existing assets mints more user tokens, provided the caller owns them.

        Args:
            batch: Asset requests
            anchor_utxo: Optional UTxO to spend as mint anchor

        Raises:
            InvalidQuantity / BatchRejected: If a quantity is not positive
            MixedMintNotSupported: If the batch mixes new and existing assets
            NotAssetOwner / BatchRejected: If the caller does not own existing assets
        """
        requests = coerce_batch(batch)
        check_quantity_signs(requests, "mint")
        wallet_tx = await asyncio.to_thread(self._get_wallet_for_tx)

        store_utxos = await gather_batch([self._find_store_utxo(request) for request in requests])
        lookups = [(request.asset_name, utxo) for request, utxo in zip(requests, store_utxos)]

        classification = self.classifier.classify(lookups)
        if isinstance(classification, Mixed):
            raise MixedMintNotSupported(classification.existing)
        if isinstance(classification, AllExisting):
            self.classifier.check_ownership(lookups, wallet_tx.payment_key_hash)

        instructions: List[Instruction] = []
        if anchor_utxo is not None:
            instructions.append(SpendInput(anchor_utxo))

        # Per-asset results are joined in request order
        aggregator = OutputAggregator(default_receiver=wallet_tx.address)
        for request in requests:
            branch_instructions, branch_outputs = self._mint_branch(
                request, isinstance(classification, AllNew), wallet_tx.address
            )
            instructions.extend(branch_instructions)
            aggregator.merge(branch_outputs)

        instructions.extend(aggregator.to_instructions())
        instructions.extend(self._furniture(wallet_tx))
        return instructions

    def _mint_branch(
        self, request: AssetRequest, create_reference: bool, default_receiver: str
    ) -> Tuple[List[Instruction], OutputAggregator]:
        policy_id = self.contracts.policy_id
        user_token = user_unit(policy_id, request.asset_name)
        instructions: List[Instruction] = [
            MintAsset(
                unit=user_token,
                quantity=request.quantity_value,
                script=self.contracts.mint_script,
                redeemer=Mint(),
            )
        ]
        if create_reference:
            reference_token = reference_unit(policy_id, request.asset_name)
            instructions.append(
                MintAsset(unit=reference_token, quantity=1, script=self.contracts.mint_script, redeemer=Mint())
            )
            instructions.append(
                PayToAddress(
                    address=self.contracts.store_address,
                    amounts=((reference_token, 1),),
                    datum=metadata_to_datum(request.metadata),
                )
            )

        outputs = OutputAggregator(default_receiver=default_receiver)
        outputs.add(request.receiver, user_token, request.quantity_value)
        return instructions, outputs

    async def mint(
        self, batch: Iterable[Union[AssetRequest, dict]], anchor_utxo: Optional[pc.UTxO] = None
    ) -> pc.Transaction:
        """
        Mint CIP68 assets

        Returns:
            Unsigned transaction
        """
        instructions = await self.plan_mint(batch, anchor_utxo)
        return await self._build("mint", instructions)

    # ------------------------------------------------------------------
    # Burn
    # ------------------------------------------------------------------

    async def _resolve_burn(self, request: AssetRequest, owner_address: str) -> Tuple[int, pc.UTxO]:
        user_token = user_unit(self.contracts.policy_id, request.asset_name)
        user_utxos, store_utxo = await asyncio.gather(
            asyncio.to_thread(self.chain_context.fetch_utxos_by_unit, owner_address, user_token),
            self._require_store_utxo(request),
        )
        return held_quantity(user_utxos, user_token), store_utxo

    async def plan_burn(self, batch: Iterable[Union[AssetRequest, dict]]) -> List[Instruction]:
        """
        Builder instructions for burning a batch

        Burning the whole held quantity also burns the reference token and spends
        its StoreUtxo; anything else only reduces the caller's user token balance.

        Raises:
            InvalidQuantity / BatchRejected: If a quantity is not negative
            StoreUtxoNotFound / BatchRejected: If an asset has no live StoreUtxo
        """
        requests = coerce_batch(batch)
        check_quantity_signs(requests, "burn")
        wallet_tx = await asyncio.to_thread(self._get_wallet_for_tx)

        resolved = await gather_batch([self._resolve_burn(request, wallet_tx.address) for request in requests])

        instructions: List[Instruction] = []
        for request, (held_total, store_utxo) in zip(requests, resolved):
            decision = self.burn_resolver.resolve(request.quantity_value, held_total)
            instructions.extend(
                self.burn_resolver.instructions(request.asset_name, decision, store_utxo, wallet_tx.address)
            )

        instructions.extend(self._furniture(wallet_tx))
        return instructions

    async def burn(self, batch: Iterable[Union[AssetRequest, dict]]) -> pc.Transaction:
        """
        Burn CIP68 assets

        Returns:
            Unsigned transaction
        """
        instructions = await self.plan_burn(batch)
        return await self._build("burn", instructions)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def plan_update(self, batch: Iterable[Union[AssetRequest, dict]]) -> List[Instruction]:
        """
        Builder instructions for replacing the metadata of a batch

        Each StoreUtxo is spent and recreated at the store address with the same
        reference token and a new inline datum. Token quantities do not change.

        Raises:
            StoreUtxoNotFound / BatchRejected: If an asset has no live StoreUtxo
            InvalidHexInput: If a new owner field is not hex
        """
        requests = coerce_batch(batch)
        wallet_tx = await asyncio.to_thread(self._get_wallet_for_tx)

        store_utxos = await gather_batch([self._require_store_utxo(request) for request in requests])

        instructions: List[Instruction] = []
        for request, store_utxo in zip(requests, store_utxos):
            instructions.append(
                SpendScriptInput(utxo=store_utxo, script=self.contracts.store_script, redeemer=UpdateStore())
            )
            instructions.append(
                PayToAddress(
                    address=self.contracts.store_address,
                    amounts=((reference_unit(self.contracts.policy_id, request.asset_name), 1),),
                    datum=metadata_to_datum(request.metadata),
                )
            )

        instructions.extend(self._furniture(wallet_tx))
        return instructions

    async def update(self, batch: Iterable[Union[AssetRequest, dict]]) -> pc.Transaction:
        """
        Update CIP68 asset metadata

        Returns:
            Unsigned transaction
        """
        instructions = await self.plan_update(batch)
        return await self._build("update", instructions)

    # ------------------------------------------------------------------
    # Reference scripts
    # ------------------------------------------------------------------

    async def plan_reference_script(
        self, address: str, script_kind: Union[ScriptKind, str]
    ) -> List[Instruction]:
        """
        Builder instructions locking a validator as reference script at an address

        Args:
            address: Address receiving the reference script output
            script_kind: ScriptKind.MINT or ScriptKind.STORE
        """
        kind = ScriptKind(script_kind)
        wallet_tx = await asyncio.to_thread(self._get_wallet_for_tx)
        return [
            SpendInput(wallet_tx.collateral),
            PayToAddress(
                address=address,
                amounts=((LOVELACE_UNIT, self.settings.reference_script_lovelace),),
                reference_script=self.contracts.plutus_script(kind),
            ),
            SetChangeAddress(wallet_tx.address),
            SetCollateral(wallet_tx.collateral),
            SetNetwork(wallet_tx.network),
        ]

    async def publish_reference_script(self, address: str, script_kind: Union[ScriptKind, str]) -> pc.Transaction:
        """
        Publish the mint or store validator as a reference script

        Returns:
            Unsigned transaction
        """
        instructions = await self.plan_reference_script(address, script_kind)
        return await self._build(f"{ScriptKind(script_kind).value} reference script", instructions)
