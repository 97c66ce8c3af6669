"""
CIP68 Datum Handling

Encodes caller metadata as the CIP68 inline datum of a reference token and
reads it back, including extraction of the owner key hash stored under `_pk`.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Dict, List, Optional, Union

import pycardano as pc
from cbor2 import CBORTag

from .errors import InvalidHexInput, MalformedDatum
from .naming import from_hex
from .types import CIP68_DATUM_VERSION, Cip68Datum


OWNER_FIELD = "_pk"

# Plutus constructor tags for alternatives 0-6 and 7-127
_CONSTR_TAGS = set(range(121, 128)) | set(range(1280, 1401))
_LOWER_HEX = re.compile(r"(?:[0-9a-f]{2})*")


def owner_bytes(value: str) -> bytes:
    """
    Raw key hash bytes of an owner field value

    Only lowercase hex is accepted, the spelling the datum decodes back to.

    Raises:
        InvalidHexInput: If the value is not lowercase hex
    """
    if not _LOWER_HEX.fullmatch(value):
        raise InvalidHexInput(f"Owner key hash must be lowercase hex: {value!r}")
    return from_hex(value)


def metadata_to_datum(metadata: Dict[str, str]) -> Cip68Datum:
    """
    Build the CIP68 datum for a metadata mapping

    Keys and values are stored as UTF-8 bytes, except the owner field whose
    hex key hash is stored as raw bytes.

    Raises:
        InvalidHexInput: If the owner field is not lowercase hex
    """
    encoded = {}
    for key, value in metadata.items():
        if key == OWNER_FIELD:
            encoded[key.encode("utf-8")] = owner_bytes(value)
        else:
            encoded[key.encode("utf-8")] = value.encode("utf-8")
    return Cip68Datum(metadata=encoded, version=CIP68_DATUM_VERSION)


def _metadata_fields(payload: Union[bytes, str]) -> Mapping:
    try:
        raw = pc.RawPlutusData.from_cbor(payload)
    except (pc.DeserializeException, ValueError, TypeError) as e:
        raise MalformedDatum(f"Datum is not a constructor record: {e}") from e

    tag = raw.data
    if not isinstance(tag, CBORTag) or tag.tag not in _CONSTR_TAGS:
        raise MalformedDatum("Datum is not a constructor record")

    value = tag.value
    is_field_list = isinstance(value, Sequence) and not isinstance(value, (bytes, str))
    fields: List = list(value) if is_field_list else []
    if not fields or not isinstance(fields[0], Mapping):
        raise MalformedDatum("Constructor record does not start with a metadata map")
    return fields[0]


def get_owner_pkh(payload: Union[bytes, str]) -> Optional[str]:
    """
    Extract the owner public key hash from a reference token inline datum

    Args:
        payload: CBOR bytes (or hex) of the inline datum

    Returns:
        Hex key hash bound to `_pk`, or None if the field is absent

    Raises:
        MalformedDatum: If the payload is not a constructor record with a metadata map
    """
    for key, value in _metadata_fields(payload).items():
        if isinstance(key, bytes) and key.decode("utf-8", errors="replace") == OWNER_FIELD:
            if not isinstance(value, bytes):
                raise MalformedDatum(f"Owner field holds {type(value).__name__}, expected bytes")
            return value.hex()
    return None


def datum_to_metadata(payload: Union[bytes, str]) -> Dict[str, str]:
    """
    Decode a CIP68 datum back into the metadata mapping it was built from

    Raises:
        MalformedDatum: If the datum holds anything but byte string pairs
    """
    metadata = {}
    for key, value in _metadata_fields(payload).items():
        if not isinstance(key, bytes) or not isinstance(value, bytes):
            raise MalformedDatum("Metadata entries must be byte strings")
        name = key.decode("utf-8", errors="replace")
        if name == OWNER_FIELD:
            metadata[name] = value.hex()
        else:
            try:
                metadata[name] = value.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedDatum(f"Metadata value for {name} is not UTF-8") from e
    return metadata


def inline_datum_cbor(utxo: pc.UTxO) -> Optional[bytes]:
    """CBOR bytes of the inline datum of a UTxO, None if it carries none"""
    datum = utxo.output.datum
    if datum is None:
        return None
    if isinstance(datum, bytes):
        return datum
    raw_cbor = getattr(datum, "cbor", None)
    if isinstance(raw_cbor, bytes):
        return raw_cbor
    encoded = datum.to_cbor()
    return bytes.fromhex(encoded) if isinstance(encoded, str) else encoded
