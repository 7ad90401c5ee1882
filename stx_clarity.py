"""
Clarity value helpers for read-only contract calls.

Implements:
- c32check address encoding/decoding
- Clarity literal serialization (hex arguments for /v2/contracts/call-read)
- Clarity value deserialization (hex results from /v2/contracts/call-read)
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass
from typing import Any

from stx_errors import ValidationError

# c32 alphabet (Crockford base32 variant)
C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

# Clarity type prefixes
CV_INT = 0x00
CV_UINT = 0x01
CV_BUFFER = 0x02
CV_TRUE = 0x03
CV_FALSE = 0x04
CV_STANDARD_PRINCIPAL = 0x05
CV_CONTRACT_PRINCIPAL = 0x06
CV_RESPONSE_OK = 0x07
CV_RESPONSE_ERR = 0x08
CV_NONE = 0x09
CV_SOME = 0x0A
CV_LIST = 0x0B
CV_TUPLE = 0x0C
CV_STRING_ASCII = 0x0D
CV_STRING_UTF8 = 0x0E


# ---------------------------------------------------------------------------
# c32check address encoding
# ---------------------------------------------------------------------------


def _c32_encode(data: bytes) -> str:
    """Encode bytes to c32 string."""
    if not data:
        return ""
    num = int.from_bytes(data, "big")
    leading_zeros = len(data) - len(data.lstrip(b"\x00"))

    result = []
    while num > 0:
        num, remainder = divmod(num, 32)
        result.append(C32_ALPHABET[remainder])
    result.extend(C32_ALPHABET[0] * leading_zeros)
    return "".join(reversed(result))


def _c32_decode(c32_str: str) -> bytes:
    """Decode a c32 string to bytes."""
    c32_str = c32_str.upper()
    leading_zeros = len(c32_str) - len(c32_str.lstrip(C32_ALPHABET[0]))

    num = 0
    for ch in c32_str:
        idx = C32_ALPHABET.find(ch)
        if idx < 0:
            raise ValueError(f"Invalid c32 character: {ch!r}")
        num = num * 32 + idx

    if num == 0:
        return b"\x00" * max(leading_zeros, 1)

    body = num.to_bytes((num.bit_length() + 7) // 8, "big")
    return b"\x00" * leading_zeros + body


def _c32_checksum(version: int, data: bytes) -> bytes:
    """Compute c32check checksum (double SHA256 of version + data)."""
    payload = bytes([version]) + data
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:4]


def c32_address(version: int, hash160_bytes: bytes) -> str:
    """
    Encode a Stacks address from version byte and hash160.

    Returns a c32check-encoded address string like 'SP...' or 'ST...'.
    """
    checksum = _c32_checksum(version, hash160_bytes)
    return "S" + C32_ALPHABET[version] + _c32_encode(hash160_bytes + checksum)


def decode_c32_address(address: str) -> tuple[int, bytes]:
    """Decode a c32check address into version byte and hash160 bytes."""
    if not address or len(address) < 5 or address[0] != "S":
        raise ValueError(f"Invalid Stacks address: {address}")

    version = C32_ALPHABET.find(address[1].upper())
    if version < 0:
        raise ValueError(f"Invalid Stacks address version: {address}")

    decoded = _c32_decode(address[2:])
    if len(decoded) < 4:
        raise ValueError(f"Invalid Stacks address (too short): {address}")

    hash160_bytes = decoded[:-4]
    checksum = decoded[-4:]
    if len(hash160_bytes) < 20:
        hash160_bytes = b"\x00" * (20 - len(hash160_bytes)) + hash160_bytes
    elif len(hash160_bytes) > 20:
        hash160_bytes = hash160_bytes[-20:]

    if checksum != _c32_checksum(version, hash160_bytes):
        raise ValueError(f"Invalid Stacks address checksum: {address}")

    return version, hash160_bytes


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _serialize_principal(principal: str) -> bytes:
    address, _, contract_name = principal.partition(".")
    version, hash160 = decode_c32_address(address)
    if not contract_name:
        return bytes([CV_STANDARD_PRINCIPAL, version]) + hash160
    name = contract_name.encode("ascii")
    return bytes([CV_CONTRACT_PRINCIPAL, version]) + hash160 + struct.pack("B", len(name)) + name


def serialize_clarity_value(val_str: str) -> bytes:
    """
    Serialize a Clarity value from string representation.

    Supported:
    - uNNN -> uint
    - iNNN / i-NNN -> int
    - true/false -> bool
    - none -> none
    - 'SPADDR... -> standard principal, 'SPADDR....name -> contract principal
    - 0x... -> buffer
    - "text" -> string-ascii, u"text" -> string-utf8
    """
    val_str = val_str.strip()

    try:
        if val_str.startswith("u") and val_str[1:].isdigit():
            return bytes([CV_UINT]) + int(val_str[1:]).to_bytes(16, "big")

        if val_str.startswith("i") and val_str[1:].lstrip("-").isdigit():
            return bytes([CV_INT]) + int(val_str[1:]).to_bytes(16, "big", signed=True)

        if val_str == "true":
            return bytes([CV_TRUE])
        if val_str == "false":
            return bytes([CV_FALSE])
        if val_str == "none":
            return bytes([CV_NONE])

        if val_str.startswith("'"):
            return _serialize_principal(val_str[1:])

        if val_str.startswith("0x"):
            buf = bytes.fromhex(val_str[2:])
            return bytes([CV_BUFFER]) + struct.pack(">I", len(buf)) + buf

        if len(val_str) >= 2 and val_str.startswith('"') and val_str.endswith('"'):
            s = val_str[1:-1].encode("ascii")
            return bytes([CV_STRING_ASCII]) + struct.pack(">I", len(s)) + s

        if len(val_str) >= 3 and val_str.startswith('u"') and val_str.endswith('"'):
            s = val_str[2:-1].encode("utf-8")
            return bytes([CV_STRING_UTF8]) + struct.pack(">I", len(s)) + s
    except (ValueError, OverflowError, UnicodeEncodeError) as exc:
        raise ValidationError(f"Invalid Clarity value {val_str!r}: {exc}") from exc

    raise ValidationError(f"Unsupported Clarity value: {val_str!r}")


def encode_function_args(function_args: list[str]) -> list[str]:
    """
    Hex-encode read-only call arguments.

    Arguments already serialized (0x-prefixed hex) pass through unchanged;
    everything else is parsed as a Clarity literal.
    """
    encoded = []
    for arg in function_args:
        arg = arg.strip()
        if arg.startswith("0x"):
            encoded.append(arg)
        else:
            encoded.append("0x" + serialize_clarity_value(arg).hex())
    return encoded


def principal_arg(address: str) -> str:
    """Hex-encode a principal (standard or contract) as a call argument."""
    return "0x" + _serialize_principal(address).hex()


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClarityWrapped:
    """A response or optional wrapper: kind is 'ok', 'err' or 'some'."""

    kind: str
    value: Any


def _take(raw: bytes, pos: int, size: int) -> bytes:
    end = pos + size
    if end > len(raw):
        raise ValueError("Truncated Clarity value")
    return raw[pos:end]


def _read_u32(raw: bytes, pos: int) -> int:
    return struct.unpack(">I", _take(raw, pos, 4))[0]


def _read_value(raw: bytes, pos: int) -> tuple[Any, int]:
    tag = _take(raw, pos, 1)[0]
    pos += 1

    if tag == CV_INT:
        return int.from_bytes(_take(raw, pos, 16), "big", signed=True), pos + 16
    if tag == CV_UINT:
        return int.from_bytes(_take(raw, pos, 16), "big"), pos + 16
    if tag == CV_BUFFER:
        size = _read_u32(raw, pos)
        return "0x" + _take(raw, pos + 4, size).hex(), pos + 4 + size
    if tag == CV_TRUE:
        return True, pos
    if tag == CV_FALSE:
        return False, pos
    if tag in (CV_STANDARD_PRINCIPAL, CV_CONTRACT_PRINCIPAL):
        version = _take(raw, pos, 1)[0]
        address = c32_address(version, _take(raw, pos + 1, 20))
        pos += 21
        if tag == CV_STANDARD_PRINCIPAL:
            return address, pos
        size = _take(raw, pos, 1)[0]
        name = _take(raw, pos + 1, size).decode("ascii")
        return f"{address}.{name}", pos + 1 + size
    if tag in (CV_RESPONSE_OK, CV_RESPONSE_ERR, CV_SOME):
        kind = {CV_RESPONSE_OK: "ok", CV_RESPONSE_ERR: "err", CV_SOME: "some"}[tag]
        inner, pos = _read_value(raw, pos)
        return ClarityWrapped(kind, inner), pos
    if tag == CV_NONE:
        return None, pos
    if tag == CV_LIST:
        count = _read_u32(raw, pos)
        pos += 4
        items = []
        for _ in range(count):
            item, pos = _read_value(raw, pos)
            items.append(item)
        return items, pos
    if tag == CV_TUPLE:
        count = _read_u32(raw, pos)
        pos += 4
        fields = {}
        for _ in range(count):
            size = _take(raw, pos, 1)[0]
            key = _take(raw, pos + 1, size).decode("ascii")
            fields[key], pos = _read_value(raw, pos + 1 + size)
        return fields, pos
    if tag in (CV_STRING_ASCII, CV_STRING_UTF8):
        size = _read_u32(raw, pos)
        text = _take(raw, pos + 4, size).decode("ascii" if tag == CV_STRING_ASCII else "utf-8")
        return text, pos + 4 + size

    raise ValueError(f"Unknown Clarity type prefix: 0x{tag:02x}")


def deserialize_clarity_value(data: str | bytes) -> Any:
    """
    Decode a hex-serialized Clarity value into Python values.

    ok/err/some become ClarityWrapped, none becomes None, tuples become dicts.
    """
    if isinstance(data, str):
        data = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    value, end = _read_value(data, 0)
    if end != len(data):
        raise ValueError("Trailing bytes after Clarity value")
    return value


def unwrap_clarity_value(value: Any) -> Any:
    """Strip (ok ...) and (some ...) wrappers; (err ...) is left as is."""
    while isinstance(value, ClarityWrapped) and value.kind in ("ok", "some"):
        value = value.value
    return value
