"""
Solana SPL Token delegate signing
"""

from setto_crypto.encoding import base64_to_bytes, bytes_to_base64
from setto_crypto.svm.address import is_valid_solana_address
from setto_crypto.svm.constants import (
    SPL_TOKEN_2022_PROGRAM_ID,
    SPL_TOKEN_PROGRAM_ID,
    SUPPORTED_WALLETS,
)
from setto_crypto.svm.signing import (
    connect_solana_wallet,
    default_wallet_registry,
    find_connected_provider,
    is_blockhash_valid,
    sign_and_send_delegate_tx,
    sign_delegate_payment_tx,
    sign_delegate_tx,
    sign_delegate_tx_with_transaction,
)
from setto_crypto.svm.types import (
    DelegateAllowance,
    DelegatePaymentTxResponse,
    SignedTxResult,
    SolanaProvider,
    WalletCapability,
    provider_capabilities,
    require_capability,
)

__all__ = [
    "SPL_TOKEN_PROGRAM_ID",
    "SPL_TOKEN_2022_PROGRAM_ID",
    "SUPPORTED_WALLETS",
    "SolanaProvider",
    "WalletCapability",
    "provider_capabilities",
    "require_capability",
    "DelegatePaymentTxResponse",
    "SignedTxResult",
    "DelegateAllowance",
    "sign_delegate_tx",
    "sign_delegate_tx_with_transaction",
    "sign_delegate_payment_tx",
    "sign_and_send_delegate_tx",
    "find_connected_provider",
    "connect_solana_wallet",
    "default_wallet_registry",
    "is_blockhash_valid",
    "is_valid_solana_address",
    "base64_to_bytes",
    "bytes_to_base64",
]
