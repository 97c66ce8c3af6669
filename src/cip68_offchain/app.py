"""
CIP68 Application Wiring

Builds the wallet, chain context, contracts and transaction builder from the
environment and exposes the lifecycle operations together with signing and
submission.
"""

import logging
import pathlib
from typing import Optional, Union

import pycardano as pc
from dotenv import load_dotenv

from .chain_context import CardanoChainContext
from .config import PROJECT_ROOT, Cip68Settings
from .contracts import ContractManager
from .tokens import TokenOperations
from .transactions import CardanoTransactions
from .wallet import CardanoWallet


logger = logging.getLogger(__name__)


class Cip68App:
    """Wires every collaborator of the CIP68 lifecycle operations"""

    def __init__(self, settings: Optional[Cip68Settings] = None, env_file: Union[str, pathlib.Path, None] = None):
        """
        Args:
            settings: Explicit settings; loaded from the environment when omitted
            env_file: .env file exported to the process environment before loading settings
        """
        if settings is None:
            load_dotenv(env_file or PROJECT_ROOT / ".env")
            settings = Cip68Settings()
        if not settings.wallet_mnemonic:
            raise ValueError("Wallet mnemonic not provided in environment variables")

        self.settings = settings
        self.chain_context = CardanoChainContext.from_settings(settings)
        self.wallet = CardanoWallet(settings.wallet_mnemonic, settings.network)
        self.contract_manager = ContractManager(self.chain_context, settings)
        self.transactions = CardanoTransactions(self.chain_context.get_context())
        self.operations = TokenOperations(
            self.wallet, self.chain_context, self.contract_manager, self.transactions, settings
        )
        logger.info(f"CIP68 app ready on {settings.network} for {self.wallet.get_address(0)}")

    def sign_and_submit(self, tx: pc.Transaction) -> str:
        """
        Sign an unsigned lifecycle transaction with the main key and submit it

        Returns:
            Transaction ID
        """
        signed = self.wallet.sign_transaction(tx)
        tx_id = self.chain_context.submit_transaction(signed)
        logger.info(f"Explorer: {self.chain_context.get_explorer_url(tx_id)}")
        return tx_id
