"""
Tests for CIP67/CIP68 naming helpers
"""

import hashlib

import pytest

from cip68_offchain.errors import InvalidHexInput
from cip68_offchain.naming import (
    CIP68_REFERENCE_LABEL,
    CIP68_USER_LABEL,
    from_hex,
    label_prefix,
    reference_unit,
    split_unit,
    string_to_hex,
    unique_asset_name,
    unit_quantity,
    user_unit,
)

from tests.mocks import OWNER_PKH, make_address, make_utxo


POLICY_ID = "b" * 56


class TestLabels:
    def test_reference_label_prefix(self):
        assert label_prefix(CIP68_REFERENCE_LABEL) == "000643b0"

    def test_user_label_prefix(self):
        assert label_prefix(CIP68_USER_LABEL) == "000de140"

    def test_label_out_of_range(self):
        with pytest.raises(ValueError):
            label_prefix(0x10000)

    def test_units(self):
        assert reference_unit(POLICY_ID, "a1") == POLICY_ID + "000643b0" + "6131"
        assert user_unit(POLICY_ID, "a1") == POLICY_ID + "000de140" + "6131"

    def test_units_utf8(self):
        assert user_unit(POLICY_ID, "ñ").endswith("c3b1")
        assert string_to_hex("ñ") == "c3b1"


class TestHex:
    def test_from_hex(self):
        assert from_hex("00ff") == b"\x00\xff"

    @pytest.mark.parametrize("value", ["abc", "zz", "0g"])
    def test_invalid_hex(self, value):
        with pytest.raises(InvalidHexInput):
            from_hex(value)

    def test_split_unit(self):
        policy, name = split_unit(POLICY_ID + "6131")
        assert policy == bytes.fromhex(POLICY_ID)
        assert name == b"a1"

    def test_split_unit_too_short(self):
        with pytest.raises(ValueError):
            split_unit("abcd")


class TestUnitQuantity:
    def setup_method(self):
        self.unit = user_unit(POLICY_ID, "a1")
        self.utxo = make_utxo(
            "a" * 64, 0, make_address(OWNER_PKH), coin=3_000_000, tokens={self.unit: 5}
        )

    def test_token_quantity(self):
        assert unit_quantity(self.utxo, self.unit) == 5

    def test_lovelace(self):
        assert unit_quantity(self.utxo, "lovelace") == 3_000_000

    def test_missing_unit(self):
        assert unit_quantity(self.utxo, user_unit(POLICY_ID, "other")) == 0

    def test_pure_ada_utxo(self):
        utxo = make_utxo("a" * 64, 1, make_address(OWNER_PKH))
        assert unit_quantity(utxo, self.unit) == 0


class TestUniqueAssetName:
    def setup_method(self):
        self.address = make_address(OWNER_PKH)

    def test_deterministic(self):
        utxo = make_utxo("a" * 64, 3, self.address)
        assert unique_asset_name(utxo) == unique_asset_name(make_utxo("a" * 64, 3, self.address))

    def test_layout(self):
        name = unique_asset_name(make_utxo("a" * 64, 3, self.address))
        digest = hashlib.sha3_256(bytes.fromhex("a" * 64)).hexdigest()
        assert len(name) == 56
        assert name.startswith("03")
        assert name[2:] == digest[:54]

    def test_index_changes_name(self):
        first = unique_asset_name(make_utxo("a" * 64, 0, self.address))
        second = unique_asset_name(make_utxo("a" * 64, 1, self.address))
        assert first != second

    def test_index_must_fit_in_one_byte(self):
        with pytest.raises(ValueError):
            unique_asset_name(make_utxo("a" * 64, 256, self.address))
