"""
Solana address, capability and model tests
"""

import base58
import pytest

from setto_crypto.exceptions import UnsupportedCapabilityError
from setto_crypto.svm.address import is_valid_solana_address
from setto_crypto.svm.constants import SPL_TOKEN_2022_PROGRAM_ID, SPL_TOKEN_PROGRAM_ID
from setto_crypto.svm.types import (
    DelegateAllowance,
    SignedTxResult,
    WalletCapability,
    provider_capabilities,
    require_capability,
)


class SignOnly:
    async def sign_transaction(self, transaction):
        return transaction


class SignAndSend(SignOnly):
    async def sign_and_send_transaction(self, transaction):
        return {"signature": "sig"}


@pytest.mark.parametrize(
    "address",
    [
        SPL_TOKEN_PROGRAM_ID,
        SPL_TOKEN_2022_PROGRAM_ID,
        base58.b58encode(bytes(range(32))).decode(),
    ],
)
def test_valid_solana_addresses(address):
    assert is_valid_solana_address(address) is True


@pytest.mark.parametrize(
    "address",
    [
        "",
        "0x1111111111111111111111111111111111111111",
        "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5D0",
        base58.b58encode(bytes(31) + b"\x01" * 2).decode(),
        None,
    ],
)
def test_invalid_solana_addresses(address):
    assert is_valid_solana_address(address) is False


def test_provider_capabilities():
    assert provider_capabilities(SignOnly()) == frozenset({WalletCapability.SIGN})
    assert provider_capabilities(SignAndSend()) == frozenset(
        {WalletCapability.SIGN, WalletCapability.SIGN_AND_SEND}
    )
    assert provider_capabilities(object()) == frozenset()


def test_require_capability():
    require_capability(SignAndSend(), WalletCapability.SIGN_AND_SEND)
    with pytest.raises(UnsupportedCapabilityError, match="sign_and_send"):
        require_capability(SignOnly(), WalletCapability.SIGN_AND_SEND)


def test_signed_tx_result_aliases():
    result = SignedTxResult(signedTx="AQID", signerAddress=SPL_TOKEN_PROGRAM_ID)
    assert result.model_dump(by_alias=True) == {
        "signedTx": "AQID",
        "signerAddress": SPL_TOKEN_PROGRAM_ID,
    }
    assert SignedTxResult(signed_tx="AQID", signer_address="x").signed_tx == "AQID"


def test_delegate_allowance():
    allowance = DelegateAllowance(approved=True, delegatedAmount="1000000", delegatePda="pda")
    assert allowance.delegated_amount == "1000000"
    assert allowance.delegate_pda == "pda"
