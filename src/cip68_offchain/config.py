"""
CIP68 Configuration

Environment-specific settings load from the .env file at the project root.
Validator titles and lovelace amounts default to the deployed blueprint layout.
"""

from pathlib import Path
from typing import Optional, Tuple

import pycardano as pc
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the project root directory (two levels up from src/cip68_offchain/)
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Cip68Settings(BaseSettings):
    """
    Settings for the CIP68 asset lifecycle operations

    Secrets (Blockfrost key, mnemonic) come from the environment only.
    """

    # ============================================================================
    # Network
    # ============================================================================

    network: str = "testnet"  # testnet, mainnet
    blockfrost_api_key: Optional[str] = None
    wallet_mnemonic: Optional[str] = None

    # ============================================================================
    # Contracts
    # ============================================================================

    blueprint_path: Path = PROJECT_ROOT / "plutus.json"
    mint_validator_title: str = "mint.mint.mint"
    store_validator_title: str = "store.store.spend"

    # Published reference scripts, as "<tx_hash>#<output_index>"
    reference_script_address: Optional[str] = None
    mint_reference_utxo: Optional[str] = None
    store_reference_utxo: Optional[str] = None

    # ============================================================================
    # Transaction amounts (lovelace)
    # ============================================================================

    reference_script_lovelace: int = 20_000_000
    collateral_min_lovelace: int = 5_000_000

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"), env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("network")
    @classmethod
    def validate_network(cls, value: str) -> str:
        value = value.lower()
        if value not in ("testnet", "mainnet"):
            raise ValueError(f"network must be 'testnet' or 'mainnet', got {value!r}")
        return value

    @property
    def cardano_network(self) -> pc.Network:
        return pc.Network.MAINNET if self.network == "mainnet" else pc.Network.TESTNET

    @property
    def is_mainnet(self) -> bool:
        return self.network == "mainnet"


def parse_out_ref(out_ref: str) -> Tuple[str, int]:
    """
    Split "<tx_hash>#<output_index>" into its parts

    Raises:
        ValueError: If the reference is not in that format
    """
    tx_hash, separator, index = out_ref.partition("#")
    if not separator or not tx_hash or not index.isdigit():
        raise ValueError(f"Output reference must look like '<tx_hash>#<index>', got {out_ref!r}")
    return tx_hash, int(index)
