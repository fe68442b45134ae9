"""
setto_crypto - Cryptographic signing utilities for payment transactions

EIP-2612 permit and Uniswap Permit2 typed-data signing for EVM chains, and
SPL Token delegate transaction signing for Solana.
"""

__version__ = "0.1.0"

from setto_crypto.exceptions import (
    CryptoUtilsError,
    ValidationError,
    EncodingError,
    DecodeError,
    WalletConnectionError,
    WalletMismatchError,
    UnsupportedCapabilityError,
    RpcError,
    DomainResolutionError,
    StaleDataError,
)
from setto_crypto.config import SigningConfig
from setto_crypto.abi import (
    ERC20_PERMIT_ABI,
    ERC20_PERMIT_TYPES,
    PERMIT2_ALLOWANCE_ABI,
    PERMIT_SINGLE_TYPES,
    NONCES_SELECTOR,
    NAME_SELECTOR,
    VERSION_SELECTOR,
    ALLOWANCE_SELECTOR,
    EIP712_DOMAIN_SELECTOR,
    PERMIT2_ALLOWANCE_SELECTOR,
)
from setto_crypto.encoding import base64_to_bytes, bytes_to_base64
from setto_crypto.evm import (
    EIP1193Provider,
    JsonRpcProvider,
    LocalAccountProvider,
    get_erc20_nonce,
    get_token_name,
    get_token_version,
    get_eip712_domain,
    get_erc20_allowance,
    check_erc20_allowance,
    sign_erc20_permit,
    is_permit_valid,
    check_permit2_allowance,
    sign_permit2,
    is_allowance_sufficient,
    is_signature_valid,
    parse_signature,
    recover_typed_data_signer,
)
from setto_crypto.svm import (
    SPL_TOKEN_PROGRAM_ID,
    SPL_TOKEN_2022_PROGRAM_ID,
    SUPPORTED_WALLETS,
    sign_delegate_tx,
    sign_delegate_tx_with_transaction,
    find_connected_provider,
    connect_solana_wallet,
    default_wallet_registry,
    is_blockhash_valid,
)

PERMIT2_ADDRESS = SigningConfig.PERMIT2_ADDRESS
PERMIT2_DOMAIN_NAME = SigningConfig.PERMIT2_DOMAIN_NAME

__all__ = [
    "__version__",
    # Exceptions
    "CryptoUtilsError",
    "ValidationError",
    "EncodingError",
    "DecodeError",
    "WalletConnectionError",
    "WalletMismatchError",
    "UnsupportedCapabilityError",
    "RpcError",
    "DomainResolutionError",
    "StaleDataError",
    # Config and constants
    "SigningConfig",
    "PERMIT2_ADDRESS",
    "PERMIT2_DOMAIN_NAME",
    "ERC20_PERMIT_ABI",
    "ERC20_PERMIT_TYPES",
    "PERMIT2_ALLOWANCE_ABI",
    "PERMIT_SINGLE_TYPES",
    "NONCES_SELECTOR",
    "NAME_SELECTOR",
    "VERSION_SELECTOR",
    "ALLOWANCE_SELECTOR",
    "EIP712_DOMAIN_SELECTOR",
    "PERMIT2_ALLOWANCE_SELECTOR",
    # EVM
    "EIP1193Provider",
    "JsonRpcProvider",
    "LocalAccountProvider",
    "get_erc20_nonce",
    "get_token_name",
    "get_token_version",
    "get_eip712_domain",
    "get_erc20_allowance",
    "check_erc20_allowance",
    "sign_erc20_permit",
    "is_permit_valid",
    "check_permit2_allowance",
    "sign_permit2",
    "is_allowance_sufficient",
    "is_signature_valid",
    "parse_signature",
    "recover_typed_data_signer",
    # SVM
    "SPL_TOKEN_PROGRAM_ID",
    "SPL_TOKEN_2022_PROGRAM_ID",
    "SUPPORTED_WALLETS",
    "sign_delegate_tx",
    "sign_delegate_tx_with_transaction",
    "find_connected_provider",
    "connect_solana_wallet",
    "default_wallet_registry",
    "is_blockhash_valid",
    "base64_to_bytes",
    "bytes_to_base64",
]
