"""
Encoding utilities for hex, base64 and fixed-width integers
"""

import base64
import binascii
import re

from setto_crypto.exceptions import EncodingError

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")

WORD_HEX_LENGTH = 64


def strip_0x(hex_str: str) -> str:
    """Remove a leading 0x / 0X prefix if present"""
    if hex_str[:2] in ("0x", "0X"):
        return hex_str[2:]
    return hex_str


def is_hex(hex_str: str) -> bool:
    """Return True if *hex_str* (prefix optional) only contains hex digits"""
    return bool(_HEX_RE.match(strip_0x(hex_str)))


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """Convert bytes to hex string"""
    hex_str = data.hex()
    return f"0x{hex_str}" if prefix else hex_str


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string to bytes

    Raises:
        EncodingError: If the string has an odd length or non-hex characters
    """
    body = strip_0x(hex_str)
    if len(body) % 2:
        raise EncodingError(f"Hex string has odd length: {len(body)}")
    if not _HEX_RE.match(body):
        raise EncodingError("Hex string contains non-hex characters")
    return bytes.fromhex(body)


def pad_hex_left(hex_body: str, width: int = WORD_HEX_LENGTH) -> str:
    """Left-pad a hex body (no prefix) with zeros to *width* characters"""
    if len(hex_body) > width:
        raise EncodingError(f"Hex value is {len(hex_body)} chars, exceeds width {width}")
    return hex_body.rjust(width, "0")


def int_to_word(value: int) -> str:
    """Encode a non-negative integer as one 32-byte ABI word (64 hex chars)"""
    if value < 0:
        raise EncodingError(f"Cannot encode negative integer: {value}")
    if value >= 1 << 256:
        raise EncodingError("Integer does not fit in 256 bits")
    return format(value, "064x")


def parse_hex_int(hex_str: str) -> int:
    """Parse a 0x-prefixed quantity (e.g. eth_chainId reply) into an int"""
    body = strip_0x(hex_str)
    if not body or not _HEX_RE.match(body):
        raise EncodingError(f"Invalid hex quantity: {hex_str!r}")
    return int(body, 16)


def parse_uint(value: int | str) -> int:
    """Accept an int, decimal string or 0x-hex string and return a non-negative int"""
    if isinstance(value, bool):
        raise EncodingError("Boolean is not a valid integer amount")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        raw = value.strip()
        try:
            result = parse_hex_int(raw) if raw[:2] in ("0x", "0X") else int(raw, 10)
        except ValueError as e:
            raise EncodingError(f"Invalid integer string: {value!r}") from e
    else:
        raise EncodingError(f"Unsupported integer type: {type(value).__name__}")
    if result < 0:
        raise EncodingError(f"Unsigned integer cannot be negative: {value}")
    return result


def bytes_to_base64(data: bytes) -> str:
    """Encode bytes to base64"""
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(data: str) -> bytes:
    """Decode base64 to bytes

    Raises:
        EncodingError: If *data* is not valid base64
    """
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 data: {e}") from e
