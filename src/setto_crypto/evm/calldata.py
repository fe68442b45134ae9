"""
Static call data encoding

Only fixed call shapes are supported: a 4-byte selector followed by zero or
more address arguments, each left-padded to one 32-byte word.
"""

import re
from typing import Any

from pydantic import BaseModel

from setto_crypto.abi import (
    ALLOWANCE_SELECTOR,
    EIP712_DOMAIN_SELECTOR,
    NAME_SELECTOR,
    NONCES_SELECTOR,
    PERMIT2_ALLOWANCE_SELECTOR,
    VERSION_SELECTOR,
)
from setto_crypto.encoding import pad_hex_left, strip_0x
from setto_crypto.exceptions import EncodingError

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_SELECTOR_RE = re.compile(r"^0x[0-9a-fA-F]{8}$")


class CallRequest(BaseModel):
    """eth_call transaction object, sent verbatim to the transport"""

    to: str
    data: str

    def to_params(self, block: str = "latest") -> list[Any]:
        """Build the params list for an eth_call request"""
        return [{"to": self.to, "data": self.data}, block]


def is_evm_address(address: str) -> bool:
    """Return True for a 0x-prefixed 20-byte hex address (any checksum casing)"""
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))


def validate_address(address: str, field_name: str = "address") -> str:
    """Return *address* unchanged, or raise EncodingError if malformed"""
    if not isinstance(address, str):
        raise EncodingError(f"{field_name}: invalid address type {type(address).__name__}")
    if not address.startswith("0x") or len(address) != 42:
        raise EncodingError(f"{field_name}: invalid address length {address!r}")
    if not _ADDRESS_RE.match(address):
        raise EncodingError(f"{field_name}: invalid address charset {address!r}")
    return address


def address_to_word(address: str) -> str:
    """Encode an address as a 64-char, lowercase, left-zero-padded ABI word"""
    validate_address(address)
    return pad_hex_left(strip_0x(address).lower())


def encode_call(selector: str, *addresses: str) -> str:
    """Build call data: selector ++ one padded word per address argument"""
    if not _SELECTOR_RE.match(selector):
        raise EncodingError(f"Invalid function selector: {selector!r}")
    return selector.lower() + "".join(address_to_word(a) for a in addresses)


def encode_nonces_call(owner: str) -> str:
    return encode_call(NONCES_SELECTOR, owner)


def encode_name_call() -> str:
    return encode_call(NAME_SELECTOR)


def encode_version_call() -> str:
    return encode_call(VERSION_SELECTOR)


def encode_eip712_domain_call() -> str:
    return encode_call(EIP712_DOMAIN_SELECTOR)


def encode_allowance_call(owner: str, spender: str) -> str:
    """ERC-20 allowance(owner, spender)"""
    return encode_call(ALLOWANCE_SELECTOR, owner, spender)


def encode_permit2_allowance_call(owner: str, token: str, spender: str) -> str:
    """Permit2 allowance(owner, token, spender)"""
    return encode_call(PERMIT2_ALLOWANCE_SELECTOR, owner, token, spender)


def build_call(to: str, data: str) -> CallRequest:
    """Validate the target address and wrap call data in a CallRequest"""
    return CallRequest(to=validate_address(to, "to"), data=data)
