"""
Uniswap Permit2 (PermitSingle)

Allowance queries against the Permit2 singleton and EIP-712 PermitSingle
signing. The Permit2 domain has no version field.
"""

import logging
import time
from typing import Any

from setto_crypto.abi import (
    PERMIT2_EIP712_DOMAIN_TYPE,
    PERMIT_SINGLE_PRIMARY_TYPE,
    PERMIT_SINGLE_TYPES,
)
from setto_crypto.config import SigningConfig
from setto_crypto.encoding import parse_uint
from setto_crypto.evm.allowance import is_allowance_sufficient, is_signature_valid
from setto_crypto.evm.calldata import build_call, encode_permit2_allowance_call, validate_address
from setto_crypto.evm.decoder import decode_permit2_allowance
from setto_crypto.evm.provider import EIP1193Provider, eth_call, sign_typed_data_v4
from setto_crypto.evm.signature import parse_signature
from setto_crypto.evm.types import (
    UINT48_MAX,
    UINT160_MAX,
    Permit2Allowance,
    PermitDetails,
    PermitSingle,
    SignPermit2Result,
)
from setto_crypto.exceptions import ValidationError

logger = logging.getLogger(__name__)

__all__ = [
    "check_permit2_allowance",
    "build_permit_single_typed_data",
    "sign_permit2",
    "is_allowance_sufficient",
    "is_signature_valid",
]


async def check_permit2_allowance(
    provider: EIP1193Provider,
    owner_address: str,
    token_address: str,
    spender_address: str,
    *,
    permit2_address: str | None = None,
    chain_id: int | None = None,
) -> Permit2Allowance:
    """
    Read Permit2 allowance(owner, token, spender).

    Args:
        provider: EIP-1193 provider
        owner_address: Token owner
        token_address: ERC-20 token
        spender_address: Spender the allowance was granted to
        permit2_address: Permit2 contract; resolved from chain_id when omitted
        chain_id: Chain ID used to pick the Permit2 deployment (default:
            canonical address)

    Returns:
        Permit2Allowance with amount (uint160), expiration and nonce (uint48)
    """
    data = encode_permit2_allowance_call(owner_address, token_address, spender_address)
    if permit2_address is None:
        permit2_address = (
            SigningConfig.get_permit2_address(chain_id)
            if chain_id is not None
            else SigningConfig.PERMIT2_ADDRESS
        )
    call = build_call(permit2_address, data)
    return decode_permit2_allowance(await eth_call(provider, call))


def build_permit_single_typed_data(
    chain_id: int,
    permit2_address: str,
    permit_single: PermitSingle,
) -> dict[str, Any]:
    """Assemble the eth_signTypedData_v4 payload for a Permit2 PermitSingle"""
    return {
        "types": {
            "EIP712Domain": PERMIT2_EIP712_DOMAIN_TYPE,
            **PERMIT_SINGLE_TYPES,
        },
        "primaryType": PERMIT_SINGLE_PRIMARY_TYPE,
        "domain": {
            "name": SigningConfig.PERMIT2_DOMAIN_NAME,
            "chainId": chain_id,
            "verifyingContract": permit2_address,
        },
        "message": permit_single.model_dump(by_alias=True),
    }


async def sign_permit2(
    provider: EIP1193Provider,
    chain_id: int,
    token_address: str,
    spender_address: str,
    allowance_amount: int | str,
    nonce: int,
    signer_address: str,
    *,
    permit2_address: str | None = None,
    expiration_days: int = SigningConfig.PERMIT2_EXPIRATION_DAYS,
    sig_deadline_minutes: int = SigningConfig.PERMIT2_SIG_DEADLINE_MINUTES,
) -> SignPermit2Result:
    """
    Sign a Permit2 PermitSingle through the wallet behind *provider*.

    Args:
        provider: EIP-1193 provider
        chain_id: Chain ID placed in the EIP-712 domain
        token_address: ERC-20 token
        spender_address: Spender being approved
        allowance_amount: Amount (uint160) in the token's smallest unit
        nonce: Current Permit2 nonce, see check_permit2_allowance
        signer_address: Owner address (required)
        permit2_address: Permit2 contract (default: deployment for chain_id)
        expiration_days: Allowance lifetime (default: 30 days)
        sig_deadline_minutes: Signature lifetime (default: 5 minutes)

    Returns:
        SignPermit2Result with the signed PermitSingle and raw signature

    Raises:
        ValidationError: If signer_address is missing or a value overflows
            its uint160 / uint48 field
        RpcError: If the wallet rejects the request
        DecodeError: If the wallet returns a malformed signature
    """
    if not signer_address:
        raise ValidationError("signer_address is required for Permit2 signing")
    validate_address(signer_address, "signer_address")
    validate_address(token_address, "token_address")
    validate_address(spender_address, "spender_address")
    if permit2_address is None:
        permit2_address = SigningConfig.get_permit2_address(chain_id)
    validate_address(permit2_address, "permit2_address")

    amount = parse_uint(allowance_amount)
    if amount > UINT160_MAX:
        raise ValidationError(f"allowance_amount does not fit in uint160: {amount}")
    if nonce < 0 or nonce > UINT48_MAX:
        raise ValidationError(f"nonce does not fit in uint48: {nonce}")

    now = int(time.time())
    expiration = now + expiration_days * 86400
    sig_deadline = now + sig_deadline_minutes * 60
    if expiration > UINT48_MAX:
        raise ValidationError(f"expiration does not fit in uint48: {expiration}")

    permit_single = PermitSingle(
        details=PermitDetails(
            token=token_address,
            amount=str(amount),
            expiration=expiration,
            nonce=nonce,
        ),
        spender=spender_address,
        sigDeadline=sig_deadline,
    )
    typed_data = build_permit_single_typed_data(chain_id, permit2_address, permit_single)

    logger.info(
        "Signing Permit2 PermitSingle: owner=%s, spender=%s, amount=%s, token=%s, chain=%s",
        signer_address,
        spender_address,
        amount,
        token_address,
        chain_id,
    )

    signature = await sign_typed_data_v4(provider, signer_address, typed_data)
    # Reject malformed signatures before handing them back
    parse_signature(signature)

    return SignPermit2Result(
        permitSingle=permit_single,
        signature=signature,
        signerAddress=signer_address,
    )
