"""
CIP68 Asset Naming

Deterministic asset name derivation and CIP67/CIP68 unit helpers.
A unit is the hex policy id followed by the hex asset name, where CIP68 asset
names carry a 4-byte label prefix (100 for reference tokens, 222 for user tokens).
"""

import hashlib
from typing import Tuple

import pycardano as pc

from .errors import InvalidHexInput


CIP68_REFERENCE_LABEL = 100
CIP68_USER_LABEL = 222
LOVELACE_UNIT = "lovelace"
POLICY_ID_HEX_LENGTH = 56
UNIQUE_NAME_DIGEST_BYTES = 27


def from_hex(value: str) -> bytes:
    """
    Decode a hex string

    Raises:
        InvalidHexInput: If the string has odd length or non-hex characters
    """
    if len(value) % 2 != 0:
        raise InvalidHexInput(f"Hex string must have an even number of characters: {value!r}")
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise InvalidHexInput(f"Invalid hex string {value!r}: {e}") from e


def string_to_hex(value: str) -> str:
    return value.encode("utf-8").hex()


def _crc8(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ 0x07) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
    return crc


def label_prefix(label: int) -> str:
    """
    CIP67 asset name prefix for a label: 0000 | label (16 bits) | crc8 | 0000

    Args:
        label: Label number (0..65535)

    Returns:
        8 hex characters, e.g. "000643b0" for label 100
    """
    if not 0 <= label <= 0xFFFF:
        raise ValueError(f"CIP67 label out of range: {label}")
    label_hex = f"{label:04x}"
    checksum = _crc8(bytes.fromhex(label_hex))
    return f"0{label_hex}{checksum:02x}0"


def cip68_asset_name(label: int, asset_name: str) -> str:
    """Hex asset name of the labeled token for a logical asset name"""
    return label_prefix(label) + string_to_hex(asset_name)


def reference_unit(policy_id: str, asset_name: str) -> str:
    return policy_id + cip68_asset_name(CIP68_REFERENCE_LABEL, asset_name)


def user_unit(policy_id: str, asset_name: str) -> str:
    return policy_id + cip68_asset_name(CIP68_USER_LABEL, asset_name)


def split_unit(unit: str) -> Tuple[bytes, bytes]:
    """
    Split a unit into policy id and asset name bytes

    Raises:
        InvalidHexInput: If the unit is not valid hex
        ValueError: If the unit is shorter than a policy id
    """
    if len(unit) < POLICY_ID_HEX_LENGTH:
        raise ValueError(f"Unit too short to hold a policy id: {unit}")
    return from_hex(unit[:POLICY_ID_HEX_LENGTH]), from_hex(unit[POLICY_ID_HEX_LENGTH:])


def unit_quantity(utxo: pc.UTxO, unit: str) -> int:
    """Quantity of a unit held by a UTxO"""
    if unit == LOVELACE_UNIT:
        return utxo.output.amount.coin

    policy_id, asset_name = split_unit(unit)
    multi_asset = utxo.output.amount.multi_asset
    if not multi_asset:
        return 0

    total = 0
    for pi, assets in multi_asset.data.items():
        if pi.payload != policy_id:
            continue
        for name, quantity in assets.data.items():
            if name.payload == asset_name:
                total += quantity
    return total


def unique_asset_name(utxo: pc.UTxO) -> str:
    """
    Derive a unique asset name from the UTxO spent as anchor of a mint.

    The name is one byte holding the output index followed by the first 27
    bytes of the SHA3-256 digest of the transaction hash. Since a UTxO can only
    be spent once, no two mints can derive the same name.

    Args:
        utxo: UTxO used to generate the asset name

    Returns:
        Hex encoded 28-byte asset name
    """
    index = utxo.input.index
    if not 0 <= index <= 0xFF:
        raise ValueError(f"Output index {index} does not fit in one byte")
    digest = hashlib.sha3_256(utxo.input.transaction_id.payload).digest()
    return bytes([index]).hex() + digest[:UNIQUE_NAME_DIGEST_BYTES].hex()
