"""
ABI return data decoding

Decodes the handful of return shapes this package needs (fixed-width
unsigned integers, dynamic strings, the EIP-5267 ``eip712Domain()`` tuple and
the Permit2 allowance tuple) without a general ABI coder.

Layout reminder: every value occupies 32-byte words. Static values are
right-aligned in one word. A dynamic value is referenced by a head word
holding a byte offset to a ``[length][data]`` block, data padded to a word
boundary. Every read is bounds checked; malformed data raises DecodeError
instead of being truncated.
"""

import logging

from setto_crypto.encoding import hex_to_bytes
from setto_crypto.evm.types import EIP712Domain, Permit2Allowance
from setto_crypto.exceptions import DecodeError, EncodingError

logger = logging.getLogger(__name__)

WORD_SIZE = 32


class AbiReader:
    """Bounds-checked reader over ABI-encoded return data"""

    def __init__(self, data: bytes | str) -> None:
        if isinstance(data, str):
            try:
                data = hex_to_bytes(data)
            except EncodingError as e:
                raise DecodeError(f"Return data is not valid hex: {e}", data) from e
        self._data = data

    def __len__(self) -> int:
        return len(self._data)

    def read_bytes(self, offset: int, length: int) -> bytes:
        """Read *length* raw bytes starting at byte *offset*"""
        if offset < 0 or length < 0:
            raise DecodeError(f"Negative read: offset={offset}, length={length}")
        end = offset + length
        if end > len(self._data):
            raise DecodeError(
                f"Read of {length} bytes at offset {offset} runs past "
                f"end of data ({len(self._data)} bytes)"
            )
        return self._data[offset:end]

    def read_word(self, offset: int) -> bytes:
        return self.read_bytes(offset, WORD_SIZE)

    def read_uint(self, offset: int, bits: int = 256) -> int:
        """Read an unsigned integer of *bits* width from the word at *offset*

        Any non-zero bit above the declared width means the contract returned
        something other than the expected type.
        """
        value = int.from_bytes(self.read_word(offset), "big")
        if value >> bits:
            raise DecodeError(f"Value at offset {offset} does not fit in uint{bits}: {value:#x}")
        return value

    def read_address(self, offset: int) -> str:
        return "0x" + format(self.read_uint(offset, 160), "040x")

    def read_string(self, head_offset: int) -> str:
        """Follow the offset stored at *head_offset* and decode the string there"""
        data_offset = self.read_uint(head_offset)
        if data_offset % WORD_SIZE:
            raise DecodeError(f"Dynamic offset {data_offset} is not word aligned")
        length = self.read_uint(data_offset)
        raw = self.read_bytes(data_offset + WORD_SIZE, length)
        # One character per byte, no multi-byte decoding
        return raw.decode("latin-1")


def decode_uint(result: str, bits: int = 256) -> int:
    """Decode a single fixed-width unsigned integer return value"""
    reader = AbiReader(result)
    if len(reader) == 0:
        raise DecodeError("Empty return data (no contract at address?)", result)
    if len(reader) != WORD_SIZE:
        raise DecodeError(f"Expected one 32-byte word, got {len(reader)} bytes", result)
    return reader.read_uint(0, bits)


def decode_string(result: str) -> str:
    """Decode a single dynamic ``string`` return value (e.g. name(), version())"""
    return AbiReader(result).read_string(0)


def decode_permit2_allowance(result: str) -> Permit2Allowance:
    """Decode Permit2 allowance() -> (uint160 amount, uint48 expiration, uint48 nonce)"""
    reader = AbiReader(result)
    return Permit2Allowance(
        amount=reader.read_uint(0, 160),
        expiration=reader.read_uint(WORD_SIZE, 48),
        nonce=reader.read_uint(2 * WORD_SIZE, 48),
    )


def decode_eip712_domain(result: str, token_address: str) -> EIP712Domain:
    """Decode the EIP-5267 eip712Domain() return tuple

    Layout: (bytes1 fields, string name, string version, uint256 chainId,
    address verifyingContract, bytes32 salt, uint256[] extensions).
    Salt and extensions are not used by EIP-2612 domains and are skipped.
    The domain is bound to *token_address*, the contract that was called.
    """
    reader = AbiReader(result)
    name = reader.read_string(1 * WORD_SIZE)
    version = reader.read_string(2 * WORD_SIZE)
    chain_id = reader.read_uint(3 * WORD_SIZE)
    verifying_contract = reader.read_address(4 * WORD_SIZE)

    if verifying_contract.lower() != token_address.lower():
        logger.debug(
            "eip712Domain verifyingContract differs from token address",
            extra={"token": token_address, "verifying_contract": verifying_contract},
        )

    return EIP712Domain(
        name=name,
        version=version,
        chainId=chain_id,
        verifyingContract=token_address,
    )
