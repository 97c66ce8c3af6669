"""
Contract Management

Loads the CIP68 mint and store validators from a Plutus blueprint and derives
the policy id and store address the lifecycle operations work against.
"""

import json
import logging
import pathlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import pycardano as pc

from .config import Cip68Settings, parse_out_ref
from .errors import ContractNotFoundError


logger = logging.getLogger(__name__)


class ScriptKind(str, Enum):
    """Validators that can be published as reference scripts"""

    MINT = "mint"
    STORE = "store"


@dataclass(frozen=True)
class Cip68Contracts:
    """Validators and derived identifiers, threaded into every operation"""

    mint_plutus_script: pc.PlutusV3Script
    store_plutus_script: pc.PlutusV3Script
    network: pc.Network
    mint_reference_utxo: Optional[pc.UTxO] = None
    store_reference_utxo: Optional[pc.UTxO] = None

    @property
    def policy_id(self) -> str:
        return pc.plutus_script_hash(self.mint_plutus_script).payload.hex()

    @property
    def store_address(self) -> str:
        store_hash = pc.plutus_script_hash(self.store_plutus_script)
        return str(pc.Address(payment_part=store_hash, network=self.network))

    @property
    def mint_script(self) -> Union[pc.PlutusV3Script, pc.UTxO]:
        """Mint validator, by reference when it has been published"""
        return self.mint_reference_utxo or self.mint_plutus_script

    @property
    def store_script(self) -> Union[pc.PlutusV3Script, pc.UTxO]:
        """Store validator, by reference when it has been published"""
        return self.store_reference_utxo or self.store_plutus_script

    def plutus_script(self, kind: ScriptKind) -> pc.PlutusV3Script:
        if kind == ScriptKind.MINT:
            return self.mint_plutus_script
        return self.store_plutus_script


def load_blueprint(blueprint_path: Union[str, pathlib.Path]) -> Dict[str, Any]:
    """Load a CIP57 Plutus blueprint (plutus.json)"""
    with open(blueprint_path, "r") as f:
        return json.load(f)


def read_validator(blueprint: Dict[str, Any], title: str) -> pc.PlutusV3Script:
    """
    Read the compiled code of a validator from a blueprint

    Args:
        blueprint: Parsed blueprint
        title: Validator title, e.g. "mint.mint.mint"

    Returns:
        Plutus V3 script

    Raises:
        ContractNotFoundError: If no validator has the title
    """
    for validator in blueprint.get("validators", []):
        if validator.get("title") == title:
            return pc.PlutusV3Script(bytes.fromhex(validator["compiledCode"]))
    raise ContractNotFoundError(f"{title} validator not found.")


class ContractManager:
    """Manages the CIP68 validators and their published reference scripts"""

    def __init__(self, chain_context, settings: Cip68Settings):
        """
        Initialize contract manager

        Args:
            chain_context: CardanoChainContext (or any object with the same UTxO queries)
            settings: Cip68Settings instance
        """
        self.chain_context = chain_context
        self.settings = settings
        self._contracts: Optional[Cip68Contracts] = None

    def _resolve_reference_utxo(self, out_ref: Optional[str]) -> Optional[pc.UTxO]:
        if not out_ref:
            return None
        if not self.settings.reference_script_address:
            raise ValueError("reference_script_address is required to use published reference scripts")

        tx_hash, output_index = parse_out_ref(out_ref)
        utxo = self.chain_context.fetch_utxo_by_tx_hash(
            self.settings.reference_script_address, tx_hash, output_index
        )
        if utxo is None or utxo.output.script is None:
            raise ContractNotFoundError(f"Reference script UTxO {out_ref} not found or carries no script")
        return utxo

    def get_contracts(self) -> Cip68Contracts:
        """
        Load validators from the blueprint (once) and resolve reference scripts

        Returns:
            Cip68Contracts for the configured network
        """
        if self._contracts is None:
            blueprint = load_blueprint(self.settings.blueprint_path)
            self._contracts = Cip68Contracts(
                mint_plutus_script=read_validator(blueprint, self.settings.mint_validator_title),
                store_plutus_script=read_validator(blueprint, self.settings.store_validator_title),
                network=self.settings.cardano_network,
                mint_reference_utxo=self._resolve_reference_utxo(self.settings.mint_reference_utxo),
                store_reference_utxo=self._resolve_reference_utxo(self.settings.store_reference_utxo),
            )
            logger.info(
                f"Loaded CIP68 contracts: policy {self._contracts.policy_id}, "
                f"store {self._contracts.store_address}"
            )
        return self._contracts
