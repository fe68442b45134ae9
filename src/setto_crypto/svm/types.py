"""
Type definitions for Solana delegate signing
"""

from enum import Enum
from typing import Any, FrozenSet, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from setto_crypto.exceptions import UnsupportedCapabilityError


@runtime_checkable
class SolanaProvider(Protocol):
    """Injected Solana wallet (Phantom, Solflare, ...)

    ``public_key`` is any object whose ``str()`` is the base58 address, or
    None while disconnected. ``sign_and_send_transaction`` is optional; use
    provider_capabilities() to find out what a provider can do.
    """

    is_connected: bool
    public_key: Any

    async def connect(self) -> Any: ...

    async def sign_transaction(self, transaction: Any) -> Any: ...


class WalletCapability(str, Enum):
    """Operations a Solana wallet provider may support"""

    SIGN = "sign"
    SIGN_AND_SEND = "sign_and_send"


_CAPABILITY_METHODS = {
    WalletCapability.SIGN: "sign_transaction",
    WalletCapability.SIGN_AND_SEND: "sign_and_send_transaction",
}


def provider_capabilities(provider: Any) -> FrozenSet[WalletCapability]:
    """Return the set of capabilities *provider* implements"""
    return frozenset(
        capability
        for capability, method in _CAPABILITY_METHODS.items()
        if callable(getattr(provider, method, None))
    )


def require_capability(provider: Any, capability: WalletCapability) -> None:
    """Raise UnsupportedCapabilityError if *provider* lacks *capability*"""
    if capability not in provider_capabilities(provider):
        raise UnsupportedCapabilityError(
            f"{type(provider).__name__} does not support {capability.value}"
        )


class DelegatePaymentTxResponse(BaseModel):
    """Unsigned delegate + payment transaction issued by the server

    Formerly named DelegateApproveTxResponse; the shape is unchanged.
    """

    unsigned_tx: str
    blockhash: str
    blockhash_expires_at: int = Field(description="Unix ms")
    delegate_pda: str
    payment_id: str
    approve_amount: str
    fee_amount: str


class SignedTxResult(BaseModel):
    """Signed transaction (base64) and the address that signed it"""

    signed_tx: str = Field(alias="signedTx")
    signer_address: str = Field(alias="signerAddress")

    class Config:
        populate_by_name = True


class DelegateAllowance(BaseModel):
    """On-chain SPL Token delegate state, read-only"""

    approved: bool
    delegated_amount: str = Field(alias="delegatedAmount")
    delegate_pda: str = Field(alias="delegatePda")

    class Config:
        populate_by_name = True
