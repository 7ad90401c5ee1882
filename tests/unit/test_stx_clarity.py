"""
Unit tests for Clarity value helpers.

Tests cover:
- c32check address encoding and decoding
- Clarity literal serialization for read-only call arguments
- Clarity result deserialization
"""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

import stx_clarity as clarity  # noqa: E402
from stx_errors import ValidationError  # noqa: E402

HASH160 = b"\x11" * 20
ADDRESS = clarity.c32_address(22, HASH160)


# ---------------------------------------------------------------------------
# c32check
# ---------------------------------------------------------------------------


def test_c32_address_mainnet_prefix():
    assert ADDRESS.startswith("SP")
    assert clarity.c32_address(26, HASH160).startswith("ST")


def test_decode_c32_address_roundtrip():
    version, hash160 = clarity.decode_c32_address(ADDRESS)
    assert version == 22
    assert hash160 == HASH160


def test_decode_c32_address_zero_hash():
    address = clarity.c32_address(26, bytes(20))
    assert clarity.decode_c32_address(address) == (26, bytes(20))


def test_decode_c32_address_bad_checksum():
    last = ADDRESS[-1]
    tampered = ADDRESS[:-1] + ("1" if last != "1" else "2")
    with pytest.raises(ValueError):
        clarity.decode_c32_address(tampered)


def test_decode_c32_address_rejects_garbage():
    with pytest.raises(ValueError):
        clarity.decode_c32_address("not-an-address")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def test_serialize_uint():
    assert clarity.serialize_clarity_value("u1").hex() == "01" + "00" * 15 + "01"


def test_serialize_negative_int():
    assert clarity.serialize_clarity_value("i-1").hex() == "00" + "ff" * 16


def test_serialize_bools_and_none():
    assert clarity.serialize_clarity_value("true") == b"\x03"
    assert clarity.serialize_clarity_value("false") == b"\x04"
    assert clarity.serialize_clarity_value("none") == b"\x09"


def test_serialize_string_ascii():
    assert clarity.serialize_clarity_value('"hi"').hex() == "0d000000026869"


def test_serialize_string_utf8():
    assert clarity.serialize_clarity_value('u"hi"').hex() == "0e000000026869"


def test_serialize_buffer():
    assert clarity.serialize_clarity_value("0xabcd").hex() == "0200000002abcd"


def test_serialize_standard_principal():
    raw = clarity.serialize_clarity_value("'" + ADDRESS)
    assert raw == bytes([0x05, 22]) + HASH160


def test_serialize_contract_principal():
    raw = clarity.serialize_clarity_value(f"'{ADDRESS}.my-token")
    assert raw == bytes([0x06, 22]) + HASH160 + bytes([8]) + b"my-token"


def test_serialize_unsupported_literal():
    with pytest.raises(ValidationError):
        clarity.serialize_clarity_value("banana")


def test_serialize_invalid_principal():
    with pytest.raises(ValidationError):
        clarity.serialize_clarity_value("'SPNOTREAL")


def test_encode_function_args_passes_hex_through():
    encoded = clarity.encode_function_args(["0x0100", "true"])
    assert encoded == ["0x0100", "0x03"]


def test_principal_arg():
    assert clarity.principal_arg(ADDRESS) == "0x0516" + HASH160.hex()


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


def _uint(n):
    return "01" + n.to_bytes(16, "big").hex()


def test_deserialize_ok_uint():
    value = clarity.deserialize_clarity_value("0x07" + _uint(5))
    assert value == clarity.ClarityWrapped("ok", 5)
    assert clarity.unwrap_clarity_value(value) == 5


def test_deserialize_err_stays_wrapped():
    value = clarity.deserialize_clarity_value("0x08" + _uint(1))
    assert clarity.unwrap_clarity_value(value) == clarity.ClarityWrapped("err", 1)


def test_deserialize_ok_some_string():
    value = clarity.deserialize_clarity_value("0x070a0e000000026869")
    assert clarity.unwrap_clarity_value(value) == "hi"


def test_deserialize_none():
    assert clarity.deserialize_clarity_value("09") is None


def test_deserialize_tuple_and_list():
    raw = "0c00000001" + "0161" + "0b00000002" + _uint(1) + "03"
    assert clarity.deserialize_clarity_value(raw) == {"a": [1, True]}


def test_deserialize_principal():
    raw = bytes([0x05, 22]) + HASH160
    assert clarity.deserialize_clarity_value(raw) == ADDRESS


def test_deserialize_rejects_trailing_bytes():
    with pytest.raises(ValueError):
        clarity.deserialize_clarity_value("0x0303")


def test_deserialize_rejects_truncated_value():
    with pytest.raises(ValueError):
        clarity.deserialize_clarity_value("0x01ff")


def test_deserialize_rejects_unknown_prefix():
    with pytest.raises(ValueError):
        clarity.deserialize_clarity_value("0xff")
