"""
Pytest configuration for CIP68 tests

Fixtures shared by the off-chain tests. No test touches the network.
"""

from unittest.mock import MagicMock

import pytest

from cip68_offchain.config import Cip68Settings
from cip68_offchain.tokens import TokenOperations

from tests.mocks import (
    OWNER_PKH,
    MockChainContext,
    MockContractManager,
    MockWallet,
    make_address,
    make_utxo,
)


@pytest.fixture
def sample_tx_hash():
    """Sample transaction hash for testing"""
    return "a" * 64


@pytest.fixture
def sample_pkh():
    """Sample public key hash for testing"""
    return OWNER_PKH


@pytest.fixture
def settings():
    """Settings that ignore any local .env file"""
    return Cip68Settings(_env_file=None, blockfrost_api_key=None, wallet_mnemonic=None)


@pytest.fixture
def chain():
    """In-memory chain with one collateral-sized UTxO for the owner wallet"""
    mock_chain = MockChainContext()
    mock_chain.add_utxo(make_utxo("f" * 64, 0, make_address(OWNER_PKH), coin=10_000_000))
    return mock_chain


@pytest.fixture
def wallet():
    return MockWallet()


@pytest.fixture
def contract_manager():
    return MockContractManager()


@pytest.fixture
def transactions():
    """Builder collaborator stand-in returning a sentinel transaction"""
    builder = MagicMock()
    builder.build_unsigned.return_value = "unsigned-tx"
    return builder


@pytest.fixture
def operations(wallet, chain, contract_manager, transactions, settings):
    return TokenOperations(wallet, chain, contract_manager, transactions, settings)
