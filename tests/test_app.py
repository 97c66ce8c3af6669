"""
Tests for application wiring
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from cip68_offchain.app import Cip68App
from cip68_offchain.config import Cip68Settings
from cip68_offchain.tokens import TokenOperations

from tests.mocks import TEST_MNEMONIC, make_blueprint


class TestCip68App:
    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path):
        self.blueprint_path = tmp_path / "plutus.json"
        self.blueprint_path.write_text(json.dumps(make_blueprint()))

    def settings(self, **overrides):
        values = dict(
            _env_file=None,
            blockfrost_api_key="previewKey",
            wallet_mnemonic=TEST_MNEMONIC,
            blueprint_path=self.blueprint_path,
        )
        values.update(overrides)
        return Cip68Settings(**values)

    @patch("pycardano.BlockFrostChainContext")
    def test_wiring(self, context_cls):
        app = Cip68App(self.settings())

        assert isinstance(app.operations, TokenOperations)
        assert app.transactions.context is context_cls.return_value
        assert app.operations.contracts.policy_id == app.contract_manager.get_contracts().policy_id

    def test_mnemonic_required(self):
        with pytest.raises(ValueError):
            Cip68App(self.settings(wallet_mnemonic=None))

    @patch("pycardano.BlockFrostChainContext")
    def test_sign_and_submit(self, context_cls):
        app = Cip68App(self.settings())
        app.wallet = MagicMock()
        app.chain_context = MagicMock()
        app.chain_context.submit_transaction.return_value = "ab" * 32

        assert app.sign_and_submit("unsigned") == "ab" * 32
        app.wallet.sign_transaction.assert_called_once_with("unsigned")
        app.chain_context.submit_transaction.assert_called_once_with(app.wallet.sign_transaction.return_value)
