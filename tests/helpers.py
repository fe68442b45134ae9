"""
Shared test helpers: ABI return data builders and a mock EIP-1193 provider
"""

from unittest.mock import AsyncMock

TOKEN_ADDRESS = "0x5425890298aed601595a70ab815c96711a31bc65"
OWNER_ADDRESS = "0x1111111111111111111111111111111111111111"
SPENDER_ADDRESS = "0x2222222222222222222222222222222222222222"

FIXED_NOW = 1_700_000_000


def word(value: int) -> str:
    """One ABI word (64 hex chars) holding *value*"""
    return format(value, "064x")


def string_block(text: str) -> str:
    """ABI [length][data] block for *text*, data right-padded to a word"""
    data = text.encode("latin-1").hex()
    padded_len = ((len(data) + 63) // 64) * 64 if data else 0
    return word(len(text.encode("latin-1"))) + data.ljust(padded_len, "0")


def encode_string_result(text: str) -> str:
    """Return data of a function returning a single string"""
    return "0x" + word(0x20) + string_block(text)


def encode_eip712_domain_result(
    name: str,
    version: str,
    chain_id: int,
    verifying_contract: str,
) -> str:
    """Return data of EIP-5267 eip712Domain()"""
    head_size = 7 * 32
    name_block = string_block(name)
    version_block = string_block(version)
    name_offset = head_size
    version_offset = name_offset + len(name_block) // 2
    extensions_offset = version_offset + len(version_block) // 2
    head = (
        "0f".ljust(64, "0")
        + word(name_offset)
        + word(version_offset)
        + word(chain_id)
        + verifying_contract[2:].lower().rjust(64, "0")
        + word(0)
        + word(extensions_offset)
    )
    return "0x" + head + name_block + version_block + word(0)


def make_rpc_provider(responses: dict):
    """
    Build a mock EIP-1193 provider.

    *responses* maps a method name (or ``eth_call:<selector>``) to a return
    value or an exception instance.
    """

    async def request(method, params=None):
        key = method
        if method == "eth_call":
            key = f"eth_call:{params[0]['data'][:10]}"
        result = responses.get(key, responses.get(method))
        if isinstance(result, Exception):
            raise result
        if result is None:
            raise RuntimeError(f"execution reverted: {key}")
        return result

    provider = AsyncMock()
    provider.request.side_effect = request
    return provider


