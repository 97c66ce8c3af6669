"""
Cardano Chain Context Management

Handles network configuration, blockchain connection setup and the UTxO
queries the CIP68 lifecycle operations rely on.
"""

import logging
from typing import List, Optional, Union

from blockfrost import ApiUrls
import pycardano as pc

from .config import Cip68Settings
from .naming import unit_quantity


logger = logging.getLogger(__name__)

AddressLike = Union[str, pc.Address]


class CardanoChainContext:
    """Manages Cardano chain context and network configuration"""

    def __init__(self, network: str = "testnet", blockfrost_api_key: str = None):
        """
        Initialize chain context

        Args:
            network: Network type ("testnet" or "mainnet")
            blockfrost_api_key: BlockFrost API key for chain queries
        """
        self.network = network
        self.blockfrost_api_key = blockfrost_api_key

        # Set network configuration
        if network == "testnet":
            self.base_url = ApiUrls.preview.value
            self.cardano_network = pc.Network.TESTNET
            self.cardanoscan = "https://preview.cardanoscan.io"
        else:
            self.base_url = ApiUrls.mainnet.value
            self.cardano_network = pc.Network.MAINNET
            self.cardanoscan = "https://cardanoscan.io"

        # Initialize chain context
        self.context = self._get_chain_context()

    @classmethod
    def from_settings(cls, settings: Cip68Settings) -> "CardanoChainContext":
        return cls(network=settings.network, blockfrost_api_key=settings.blockfrost_api_key)

    def _get_chain_context(self) -> pc.ChainContext:
        """
        Create PyCardano chain context

        Returns:
            PyCardano chain context for transaction operations
        """
        if not self.blockfrost_api_key:
            raise ValueError("BlockFrost API key required for chain context")

        return pc.BlockFrostChainContext(project_id=self.blockfrost_api_key, base_url=self.base_url)

    def get_context(self) -> pc.ChainContext:
        """Get the chain context"""
        return self.context

    # ------------------------------------------------------------------
    # UTxO queries
    # ------------------------------------------------------------------

    def utxos(self, address: AddressLike) -> List[pc.UTxO]:
        return self.context.utxos(address)

    def fetch_utxos_by_unit(self, address: AddressLike, unit: str) -> List[pc.UTxO]:
        """
        All UTxOs at an address holding a unit

        Args:
            address: Address to query
            unit: Policy id hex followed by asset name hex

        Returns:
            Matching UTxOs, possibly empty
        """
        return [utxo for utxo in self.utxos(address) if unit_quantity(utxo, unit) > 0]

    def fetch_utxo_by_unit(self, address: AddressLike, unit: str) -> Optional[pc.UTxO]:
        """First UTxO at an address holding a unit, None if there is none"""
        utxos = self.fetch_utxos_by_unit(address, unit)
        return utxos[0] if utxos else None

    def fetch_utxo_by_tx_hash(
        self,
        address: AddressLike,
        tx_hash: str,
        output_index: Optional[int] = None,
        unit: Optional[str] = None,
    ) -> Optional[pc.UTxO]:
        """
        UTxO at an address created by a given transaction

        Args:
            address: Address to query
            tx_hash: Hex hash of the creating transaction
            output_index: Output index, or None for any output of the transaction
            unit: Only consider outputs holding this unit

        Returns:
            First matching UTxO, None if spent or never created
        """
        for utxo in self.utxos(address):
            if utxo.input.transaction_id.payload.hex() != tx_hash.lower():
                continue
            if output_index is not None and utxo.input.index != output_index:
                continue
            if unit is None or unit_quantity(utxo, unit) > 0:
                return utxo
        logger.warning(f"No UTxO from transaction {tx_hash} at {address}")
        return None

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit_transaction(self, signed_tx: pc.Transaction) -> str:
        """
        Submit a signed transaction to the network

        Returns:
            Transaction ID
        """
        self.context.submit_tx(signed_tx)
        tx_id = signed_tx.id.payload.hex()
        logger.info(f"Submitted transaction {tx_id}")
        return tx_id

    def get_explorer_url(self, tx_id: str) -> str:
        """
        Get explorer URL for transaction

        Args:
            tx_id: Transaction ID

        Returns:
            Explorer URL for the transaction
        """
        return f"{self.cardanoscan}/transaction/{tx_id}"
