"""
Permit2 PermitSingle tests
"""

import json
from unittest.mock import patch

import pytest

from setto_crypto.config import SigningConfig
from setto_crypto.evm.permit2 import (
    build_permit_single_typed_data,
    check_permit2_allowance,
    is_allowance_sufficient,
    is_signature_valid,
    sign_permit2,
)
from setto_crypto.evm.provider import LocalAccountProvider
from setto_crypto.evm.signature import recover_typed_data_signer
from setto_crypto.evm.types import UINT160_MAX, Permit2Allowance, PermitDetails, PermitSingle
from setto_crypto.exceptions import DecodeError, ValidationError

from helpers import (
    FIXED_NOW,
    OWNER_ADDRESS,
    SPENDER_ADDRESS,
    TOKEN_ADDRESS,
    make_rpc_provider,
    word,
)

SIGNATURE = "0x" + "11" * 32 + "22" * 32 + "1b"
ZKSYNC_PERMIT2 = "0x0000000000225e31D15943971F47aD3022F714Fa"


@pytest.mark.anyio
async def test_check_permit2_allowance():
    provider = make_rpc_provider(
        {"eth_call:0x927da105": "0x" + word(5_000_000) + word(FIXED_NOW + 86400) + word(2)}
    )
    allowance = await check_permit2_allowance(
        provider, OWNER_ADDRESS, TOKEN_ADDRESS, SPENDER_ADDRESS
    )
    assert allowance == Permit2Allowance(amount=5_000_000, expiration=FIXED_NOW + 86400, nonce=2)

    _, params = provider.request.await_args.args
    assert params[0]["to"] == SigningConfig.PERMIT2_ADDRESS
    assert params[0]["data"].startswith("0x927da105")


@pytest.mark.anyio
async def test_check_permit2_allowance_custom_contract():
    permit2 = "0x" + "33" * 20
    provider = make_rpc_provider({"eth_call:0x927da105": "0x" + word(0) * 3})
    await check_permit2_allowance(
        provider, OWNER_ADDRESS, TOKEN_ADDRESS, SPENDER_ADDRESS, permit2_address=permit2
    )
    _, params = provider.request.await_args.args
    assert params[0]["to"] == permit2


@pytest.mark.anyio
async def test_check_permit2_allowance_uses_chain_deployment():
    provider = make_rpc_provider({"eth_call:0x927da105": "0x" + word(0) * 3})
    await check_permit2_allowance(
        provider, OWNER_ADDRESS, TOKEN_ADDRESS, SPENDER_ADDRESS, chain_id=324
    )
    _, params = provider.request.await_args.args
    assert params[0]["to"] == ZKSYNC_PERMIT2

    # An explicit contract wins over the chain table
    permit2 = "0x" + "33" * 20
    await check_permit2_allowance(
        provider,
        OWNER_ADDRESS,
        TOKEN_ADDRESS,
        SPENDER_ADDRESS,
        permit2_address=permit2,
        chain_id=324,
    )
    _, params = provider.request.await_args.args
    assert params[0]["to"] == permit2

@pytest.mark.anyio
async def test_check_permit2_allowance_truncated():
    provider = make_rpc_provider({"eth_call:0x927da105": "0x" + word(1) + word(2)})
    with pytest.raises(DecodeError):
        await check_permit2_allowance(provider, OWNER_ADDRESS, TOKEN_ADDRESS, SPENDER_ADDRESS)


def test_build_permit_single_typed_data_domain_has_no_version():
    permit_single = PermitSingle(
        details=PermitDetails(token=TOKEN_ADDRESS, amount="100", expiration=10, nonce=0),
        spender=SPENDER_ADDRESS,
        sigDeadline=20,
    )
    typed_data = build_permit_single_typed_data(8453, SigningConfig.PERMIT2_ADDRESS, permit_single)

    assert typed_data["primaryType"] == "PermitSingle"
    assert typed_data["domain"] == {
        "name": "Permit2",
        "chainId": 8453,
        "verifyingContract": SigningConfig.PERMIT2_ADDRESS,
    }
    assert "version" not in [f["name"] for f in typed_data["types"]["EIP712Domain"]]
    assert typed_data["message"] == {
        "details": {"token": TOKEN_ADDRESS, "amount": "100", "expiration": 10, "nonce": 0},
        "spender": SPENDER_ADDRESS,
        "sigDeadline": 20,
    }
    amount_field = next(f for f in typed_data["types"]["PermitDetails"] if f["name"] == "amount")
    assert amount_field["type"] == "uint160"


@pytest.mark.anyio
async def test_sign_permit2_deadlines():
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})

    with patch("time.time", return_value=float(FIXED_NOW)):
        result = await sign_permit2(
            provider,
            chain_id=8453,
            token_address=TOKEN_ADDRESS,
            spender_address=SPENDER_ADDRESS,
            allowance_amount="1000000",
            nonce=0,
            signer_address=OWNER_ADDRESS,
        )

    details = result.permit_single.details
    assert details.amount == "1000000"
    assert details.expiration == FIXED_NOW + 30 * 86400
    assert details.nonce == 0
    assert result.permit_single.sig_deadline == FIXED_NOW + 5 * 60
    assert result.signature == SIGNATURE
    assert result.signer_address == OWNER_ADDRESS

    method, (signer, payload) = provider.request.await_args.args
    assert method == "eth_signTypedData_v4"
    assert signer == OWNER_ADDRESS
    assert json.loads(payload)["message"]["sigDeadline"] == FIXED_NOW + 300


@pytest.mark.anyio
async def test_sign_permit2_domain_follows_chain():
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})
    await sign_permit2(
        provider, 324, TOKEN_ADDRESS, SPENDER_ADDRESS, "1000000", 0, OWNER_ADDRESS
    )
    _, (_, payload) = provider.request.await_args.args
    domain = json.loads(payload)["domain"]
    assert domain["verifyingContract"] == ZKSYNC_PERMIT2
    assert domain["chainId"] == 324

    await sign_permit2(
        provider, 8453, TOKEN_ADDRESS, SPENDER_ADDRESS, "1000000", 0, OWNER_ADDRESS
    )
    _, (_, payload) = provider.request.await_args.args
    assert json.loads(payload)["domain"]["verifyingContract"] == SigningConfig.PERMIT2_ADDRESS


@pytest.mark.anyio
async def test_sign_permit2_explicit_contract_overrides_chain():
    permit2 = "0x" + "33" * 20
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})
    await sign_permit2(
        provider,
        324,
        TOKEN_ADDRESS,
        SPENDER_ADDRESS,
        "1000000",
        0,
        OWNER_ADDRESS,
        permit2_address=permit2,
    )
    _, (_, payload) = provider.request.await_args.args
    assert json.loads(payload)["domain"]["verifyingContract"] == permit2

@pytest.mark.anyio
async def test_sign_permit2_custom_lifetimes():
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})
    with patch("time.time", return_value=float(FIXED_NOW)):
        result = await sign_permit2(
            provider,
            8453,
            TOKEN_ADDRESS,
            SPENDER_ADDRESS,
            1,
            0,
            OWNER_ADDRESS,
            expiration_days=1,
            sig_deadline_minutes=10,
        )
    assert result.permit_single.details.expiration == FIXED_NOW + 86400
    assert result.permit_single.sig_deadline == FIXED_NOW + 600


@pytest.mark.anyio
@pytest.mark.parametrize("signer", [None, ""])
async def test_sign_permit2_requires_signer(signer):
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})
    with pytest.raises(ValidationError, match="signer_address"):
        await sign_permit2(provider, 8453, TOKEN_ADDRESS, SPENDER_ADDRESS, 1, 0, signer)
    provider.request.assert_not_awaited()


@pytest.mark.anyio
async def test_sign_permit2_amount_overflow():
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})
    with pytest.raises(ValidationError, match="uint160"):
        await sign_permit2(
            provider, 8453, TOKEN_ADDRESS, SPENDER_ADDRESS, UINT160_MAX + 1, 0, OWNER_ADDRESS
        )


@pytest.mark.anyio
async def test_sign_permit2_nonce_overflow():
    provider = make_rpc_provider({"eth_signTypedData_v4": SIGNATURE})
    with pytest.raises(ValidationError, match="uint48"):
        await sign_permit2(
            provider, 8453, TOKEN_ADDRESS, SPENDER_ADDRESS, 1, 1 << 48, OWNER_ADDRESS
        )


@pytest.mark.anyio
async def test_sign_permit2_rejects_malformed_signature():
    provider = make_rpc_provider({"eth_signTypedData_v4": "0xdeadbeef"})
    with pytest.raises(DecodeError):
        await sign_permit2(provider, 8453, TOKEN_ADDRESS, SPENDER_ADDRESS, 1, 0, OWNER_ADDRESS)


@pytest.mark.anyio
async def test_sign_permit2_with_local_account(mock_evm_private_key):
    provider = LocalAccountProvider(mock_evm_private_key)
    result = await sign_permit2(
        provider,
        8453,
        TOKEN_ADDRESS,
        SPENDER_ADDRESS,
        "1000000",
        0,
        provider.address,
    )
    typed_data = build_permit_single_typed_data(
        8453, SigningConfig.PERMIT2_ADDRESS, result.permit_single
    )
    assert recover_typed_data_signer(typed_data, result.signature) == provider.address


def test_is_allowance_sufficient():
    with patch("time.time", return_value=float(FIXED_NOW)):
        fresh = Permit2Allowance(amount=5_000_000, expiration=FIXED_NOW + 3600, nonce=0)
        assert is_allowance_sufficient(fresh, 1_000_000) is True
        assert is_allowance_sufficient(fresh, "5000001") is False


def test_is_allowance_sufficient_expiring_soon():
    """Enough amount but expiring inside the 1800s buffer is insufficient"""
    with patch("time.time", return_value=float(FIXED_NOW)):
        expiring = Permit2Allowance(amount=5_000_000, expiration=FIXED_NOW + 1799, nonce=0)
        assert is_allowance_sufficient(expiring, 1_000_000) is False
        at_buffer = Permit2Allowance(amount=5_000_000, expiration=FIXED_NOW + 1800, nonce=0)
        assert is_allowance_sufficient(at_buffer, 1_000_000) is True


def test_is_signature_valid():
    with patch("time.time", return_value=float(FIXED_NOW)):
        assert is_signature_valid(FIXED_NOW + 300) is True
        assert is_signature_valid(FIXED_NOW + 30) is False
