"""
ERC-20 Permit (EIP-2612)

Nonce and allowance queries plus EIP-712 Permit signing through an
EIP-1193 provider.

Nonce race: two concurrent sign_erc20_permit calls for the same
(owner, token) read the same on-chain nonce, and only one of the resulting
signatures can ever be submitted. Callers must serialize permit signing per
(owner, token).
"""

import logging
import time
from typing import Any

from setto_crypto.abi import EIP712_DOMAIN_TYPE, ERC20_PERMIT_TYPES, PERMIT_PRIMARY_TYPE
from setto_crypto.config import SigningConfig
from setto_crypto.encoding import parse_uint
from setto_crypto.evm.allowance import is_permit_valid, is_sufficient
from setto_crypto.evm.calldata import (
    build_call,
    encode_allowance_call,
    encode_nonces_call,
    validate_address,
)
from setto_crypto.evm.decoder import decode_uint
from setto_crypto.evm.domain import get_eip712_domain
from setto_crypto.evm.provider import (
    EIP1193Provider,
    eth_call,
    get_accounts,
    sign_typed_data_v4,
)
from setto_crypto.evm.signature import parse_signature
from setto_crypto.evm.types import (
    EIP712Domain,
    ERC20AllowanceInfo,
    ERC20PermitSignature,
    PermitMessage,
    SignERC20PermitResult,
)
from setto_crypto.exceptions import ValidationError, WalletConnectionError

logger = logging.getLogger(__name__)

__all__ = [
    "get_erc20_nonce",
    "get_erc20_allowance",
    "check_erc20_allowance",
    "build_permit_typed_data",
    "sign_erc20_permit",
    "is_permit_valid",
]


async def get_erc20_nonce(
    provider: EIP1193Provider,
    token_address: str,
    owner_address: str,
) -> int:
    """
    Read the current EIP-2612 nonces(owner) of a token.

    Args:
        provider: EIP-1193 provider
        token_address: Token contract address
        owner_address: Permit owner

    Returns:
        Current nonce
    """
    call = build_call(token_address, encode_nonces_call(owner_address))
    return decode_uint(await eth_call(provider, call))


async def get_erc20_allowance(
    provider: EIP1193Provider,
    token_address: str,
    owner_address: str,
    spender_address: str,
) -> int:
    """Read ERC-20 allowance(owner, spender) in the token's smallest unit"""
    call = build_call(token_address, encode_allowance_call(owner_address, spender_address))
    return decode_uint(await eth_call(provider, call))


async def check_erc20_allowance(
    provider: EIP1193Provider,
    token_address: str,
    owner_address: str,
    spender_address: str,
    required_amount: int | str,
) -> ERC20AllowanceInfo:
    """
    Read an ERC-20 allowance and compare it against *required_amount*.

    Example::

        info = await check_erc20_allowance(provider, token, owner, spender, "1000000")
        # ERC20AllowanceInfo(allowance=5000000, is_sufficient=True)
    """
    allowance = await get_erc20_allowance(provider, token_address, owner_address, spender_address)
    return ERC20AllowanceInfo(
        allowance=allowance,
        isSufficient=is_sufficient(allowance, required_amount),
    )


def build_permit_typed_data(domain: EIP712Domain, message: PermitMessage) -> dict[str, Any]:
    """Assemble the eth_signTypedData_v4 payload for an EIP-2612 Permit"""
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPE,
            **ERC20_PERMIT_TYPES,
        },
        "primaryType": PERMIT_PRIMARY_TYPE,
        "domain": domain.to_typed_data(),
        "message": message.model_dump(),
    }


async def _resolve_signer(provider: EIP1193Provider) -> str:
    accounts = await get_accounts(provider, request_access=True)
    if not accounts:
        raise WalletConnectionError("No connected accounts")
    return accounts[0]


async def sign_erc20_permit(
    provider: EIP1193Provider,
    chain_id: int,
    token_address: str,
    spender_address: str,
    value: int | str,
    nonce: int,
    *,
    token_name: str | None = None,
    deadline_minutes: int = SigningConfig.PERMIT_DEADLINE_MINUTES,
    signer_address: str | None = None,
) -> SignERC20PermitResult:
    """
    Sign an EIP-2612 Permit through the wallet behind *provider*.

    The domain name and version are read from the token (see
    get_eip712_domain); chain_id is the caller's.

    Args:
        provider: EIP-1193 provider
        chain_id: Chain ID placed in the EIP-712 domain
        token_address: Token contract (verifyingContract)
        spender_address: Spender being approved
        value: Amount in the token's smallest unit
        nonce: Current nonces(owner) value, see get_erc20_nonce
        token_name: Expected token name; the on-chain name is used for signing
        deadline_minutes: Signature lifetime (default: 60)
        signer_address: Owner address; defaults to the first connected account

    Returns:
        SignERC20PermitResult with (v, r, s), value, deadline and signer

    Raises:
        EncodingError: On malformed addresses or amounts
        WalletConnectionError: If no signer is given and no account is connected
        DomainResolutionError: If the token's domain cannot be read
        RpcError: If the wallet rejects the request
        DecodeError: If the wallet returns a malformed signature

    Example::

        result = await sign_erc20_permit(
            provider,
            chain_id=43113,
            token_address="0x...",
            spender_address="0x...",
            value="1000000",  # 1 USDC (6 decimals)
            nonce=await get_erc20_nonce(provider, token, owner),
        )
    """
    validate_address(token_address, "token_address")
    validate_address(spender_address, "spender_address")
    amount = parse_uint(value)
    if nonce < 0:
        raise ValidationError(f"nonce must be non-negative, got {nonce}")

    now = int(time.time())
    deadline = now + deadline_minutes * 60

    if not signer_address:
        signer_address = await _resolve_signer(provider)
    validate_address(signer_address, "signer_address")

    resolved = await get_eip712_domain(provider, token_address)
    if token_name is not None and token_name != resolved.name:
        logger.debug(
            "Token name differs from on-chain EIP-712 name",
            extra={"token": token_address, "given": token_name, "on_chain": resolved.name},
        )
    domain = resolved.model_copy(update={"chain_id": chain_id})

    message = PermitMessage(
        owner=signer_address,
        spender=spender_address,
        value=str(amount),
        nonce=nonce,
        deadline=deadline,
    )
    typed_data = build_permit_typed_data(domain, message)

    logger.info(
        "Signing EIP-2612 permit: owner=%s, spender=%s, value=%s, token=%s, version=%s",
        signer_address,
        spender_address,
        amount,
        token_address,
        domain.version,
    )

    signature = await sign_typed_data_v4(provider, signer_address, typed_data)
    parsed = parse_signature(signature)

    return SignERC20PermitResult(
        permitSignature=ERC20PermitSignature(
            value=str(amount),
            deadline=deadline,
            v=parsed.v,
            r=parsed.r,
            s=parsed.s,
        ),
        signerAddress=signer_address,
        typedData=typed_data,
    )
