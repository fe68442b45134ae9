"""
EIP-712 domain resolution for EIP-2612 tokens

Tokens disagree on their domain version (USDC uses "2", most tokens "1"),
so the domain is always read from the token instead of being hardcoded.
Nothing here is cached; callers signing repeatedly for one token should
keep the resolved domain themselves.
"""

import logging

from setto_crypto.config import SigningConfig
from setto_crypto.evm.calldata import (
    build_call,
    encode_eip712_domain_call,
    encode_name_call,
    encode_version_call,
)
from setto_crypto.evm.decoder import decode_eip712_domain, decode_string
from setto_crypto.evm.provider import EIP1193Provider, eth_call, get_chain_id
from setto_crypto.evm.types import EIP712Domain
from setto_crypto.exceptions import DecodeError, DomainResolutionError, RpcError

logger = logging.getLogger(__name__)


async def get_token_name(provider: EIP1193Provider, token_address: str) -> str:
    """
    Read an ERC-20 token's name().

    Args:
        provider: EIP-1193 provider
        token_address: Token contract address

    Returns:
        Token name, e.g. "USD Coin"
    """
    call = build_call(token_address, encode_name_call())
    return decode_string(await eth_call(provider, call))


async def get_token_version(provider: EIP1193Provider, token_address: str) -> str:
    """Read a token's version(), defaulting to "1" when it is missing or unreadable"""
    call = build_call(token_address, encode_version_call())
    try:
        return decode_string(await eth_call(provider, call))
    except (RpcError, DecodeError) as e:
        logger.warning(
            "version() unavailable, using default permit version",
            extra={
                "token": token_address,
                "default_version": SigningConfig.DEFAULT_PERMIT_VERSION,
                "error": str(e),
            },
        )
        return SigningConfig.DEFAULT_PERMIT_VERSION


async def get_eip712_domain(provider: EIP1193Provider, token_address: str) -> EIP712Domain:
    """
    Resolve the EIP-712 domain of a token.

    Tries EIP-5267 eip712Domain() first (one round trip). If the token does
    not implement it, falls back to name(), version() and eth_chainId.

    Args:
        provider: EIP-1193 provider
        token_address: Token contract address, used as verifyingContract

    Returns:
        EIP712Domain with name, version, chainId and verifyingContract

    Raises:
        EncodingError: If token_address is malformed
        DomainResolutionError: If the fallback lookups fail as well
    """
    call = build_call(token_address, encode_eip712_domain_call())
    try:
        return decode_eip712_domain(await eth_call(provider, call), token_address)
    except (RpcError, DecodeError) as e:
        logger.warning(
            "eip712Domain() unavailable, resolving domain field by field",
            extra={"token": token_address, "error": str(e)},
        )

    try:
        name = await get_token_name(provider, token_address)
        version = await get_token_version(provider, token_address)
        chain_id = await get_chain_id(provider)
    except (RpcError, DecodeError) as e:
        raise DomainResolutionError(token_address, str(e)) from e

    return EIP712Domain(
        name=name,
        version=version,
        chainId=chain_id,
        verifyingContract=token_address,
    )
