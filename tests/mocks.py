"""
Mock Services for CIP68 Testing

Provides in-memory implementations of the chain, wallet and contract
collaborators for isolated testing.
"""

from typing import Dict, List, Optional

import pycardano as pc

from cip68_offchain.chain_context import CardanoChainContext
from cip68_offchain.contracts import Cip68Contracts
from cip68_offchain.transactions import amounts_to_value


MINT_SCRIPT = pc.PlutusV3Script(bytes.fromhex("4e4d01000033222220051200120011"))
STORE_SCRIPT = pc.PlutusV3Script(bytes.fromhex("4e4d01000033222220051200120022"))

OWNER_PKH = "c" * 56
OTHER_PKH = "d" * 56


def make_address(pkh_hex: str, network: pc.Network = pc.Network.TESTNET) -> str:
    """Enterprise address string for a payment key hash"""
    return str(pc.Address(payment_part=pc.VerificationKeyHash(bytes.fromhex(pkh_hex)), network=network))


def make_utxo(
    tx_hash: str,
    index: int,
    address: str,
    coin: int = 2_000_000,
    tokens: Optional[Dict[str, int]] = None,
    datum: Optional[pc.PlutusData] = None,
    script: Optional[pc.PlutusV3Script] = None,
) -> pc.UTxO:
    """Build a UTxO holding lovelace, optional tokens (by unit) and an optional inline datum"""
    amounts = (("lovelace", coin),) + tuple((tokens or {}).items())
    output = pc.TransactionOutput(
        pc.Address.from_primitive(address),
        amounts_to_value(amounts),
        datum=datum,
        script=script,
    )
    tx_in = pc.TransactionInput(pc.TransactionId(bytes.fromhex(tx_hash)), index)
    return pc.UTxO(tx_in, output)


class OfflineChainContext(pc.ChainContext):
    """PyCardano chain context with fixed protocol parameters and in-memory UTxOs"""

    def __init__(self, utxos_by_address: Dict[str, List[pc.UTxO]], network: pc.Network = pc.Network.TESTNET):
        self._utxos_by_address = utxos_by_address
        self._network = network

    @property
    def protocol_param(self) -> pc.ProtocolParameters:
        return pc.ProtocolParameters(
            min_fee_constant=155381,
            min_fee_coefficient=44,
            max_block_size=90112,
            max_tx_size=16384,
            max_block_header_size=1100,
            key_deposit=2000000,
            pool_deposit=500000000,
            pool_influence=0.3,
            monetary_expansion=0.003,
            treasury_expansion=0.2,
            decentralization_param=0,
            extra_entropy="",
            protocol_major_version=9,
            protocol_minor_version=0,
            min_utxo=1000000,
            min_pool_cost=170000000,
            price_mem=0.0577,
            price_step=0.0000721,
            max_tx_ex_mem=14000000,
            max_tx_ex_steps=10000000000,
            max_block_ex_mem=62000000,
            max_block_ex_steps=20000000000,
            max_val_size=5000,
            collateral_percent=150,
            max_collateral_inputs=3,
            coins_per_utxo_word=4310,
            coins_per_utxo_byte=4310,
            cost_models={},
            maximum_reference_scripts_size={"bytes": 204800},
            min_fee_reference_scripts={"base": 15, "range": 25600, "multiplier": 1.2},
        )

    @property
    def genesis_param(self) -> pc.GenesisParameters:
        return pc.GenesisParameters(
            active_slots_coefficient=0.05,
            update_quorum=5,
            max_lovelace_supply=45000000000000000,
            network_magic=2,
            epoch_length=86400,
            system_start=1666656000,
            slots_per_kes_period=129600,
            slot_length=1,
            max_kes_evolutions=62,
            security_param=432,
        )

    @property
    def network(self) -> pc.Network:
        return self._network

    @property
    def epoch(self) -> int:
        return 500

    @property
    def last_block_slot(self) -> int:
        return 50_000_000

    def utxos(self, address) -> List[pc.UTxO]:
        return list(self._utxos_by_address.get(str(address), []))

    def _utxos(self, address: str) -> List[pc.UTxO]:
        return self.utxos(address)

    def submit_tx_cbor(self, cbor):
        raise NotImplementedError("Offline chain context cannot submit")

    def evaluate_tx(self, tx: pc.Transaction) -> Dict[str, pc.ExecutionUnits]:
        return self.evaluate_tx_cbor(tx.to_cbor())

    def evaluate_tx_cbor(self, cbor) -> Dict[str, pc.ExecutionUnits]:
        # Same budget for every mint and spend redeemer a test transaction can carry
        units = {}
        for index in range(16):
            units[f"mint:{index}"] = pc.ExecutionUnits(200_000, 80_000_000)
            units[f"spend:{index}"] = pc.ExecutionUnits(200_000, 80_000_000)
        return units


class MockChainContext(CardanoChainContext):
    """Chain context serving UTxOs from memory instead of Blockfrost"""

    def __init__(self, network: str = "testnet"):
        self.network = network
        self.cardano_network = pc.Network.TESTNET if network == "testnet" else pc.Network.MAINNET
        self.cardanoscan = "https://preview.cardanoscan.io"
        self.base_url = ""
        self.blockfrost_api_key = None
        self._utxos: Dict[str, List[pc.UTxO]] = {}
        self.context = OfflineChainContext(self._utxos, self.cardano_network)
        self.queried: List[str] = []

    def add_utxo(self, utxo: pc.UTxO) -> pc.UTxO:
        self._utxos.setdefault(str(utxo.output.address), []).append(utxo)
        return utxo

    def utxos(self, address) -> List[pc.UTxO]:
        self.queried.append(str(address))
        return list(self._utxos.get(str(address), []))


class MockWallet:
    """Wallet with a fixed key hash; never signs"""

    def __init__(self, pkh_hex: str = OWNER_PKH, network: pc.Network = pc.Network.TESTNET):
        self.pkh = bytes.fromhex(pkh_hex)
        self.address = pc.Address(payment_part=pc.VerificationKeyHash(self.pkh), network=network)

    def get_address(self, index: int = 0) -> pc.Address:
        return self.address

    def get_payment_verification_key_hash(self) -> bytes:
        return self.pkh


class MockContractManager:
    """Contract manager returning fixed test validators"""

    def __init__(self, contracts: Optional[Cip68Contracts] = None):
        self.contracts = contracts or Cip68Contracts(
            mint_plutus_script=MINT_SCRIPT,
            store_plutus_script=STORE_SCRIPT,
            network=pc.Network.TESTNET,
        )

    def get_contracts(self) -> Cip68Contracts:
        return self.contracts


TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


def make_blueprint() -> dict:
    """Minimal CIP57 blueprint holding the test validators"""
    return {
        "preamble": {"title": "cip68", "plutusVersion": "v3"},
        "validators": [
            {"title": "mint.mint.mint", "compiledCode": MINT_SCRIPT.hex()},
            {"title": "store.store.spend", "compiledCode": STORE_SCRIPT.hex()},
        ],
    }
