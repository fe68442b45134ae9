"""
EVM permit signing: EIP-2612 and Uniswap Permit2
"""

from setto_crypto.evm.allowance import (
    is_allowance_sufficient,
    is_permit_valid,
    is_signature_valid,
    is_sufficient,
    require_valid_deadline,
)
from setto_crypto.evm.domain import get_eip712_domain, get_token_name, get_token_version
from setto_crypto.evm.permit import (
    build_permit_typed_data,
    check_erc20_allowance,
    get_erc20_allowance,
    get_erc20_nonce,
    sign_erc20_permit,
)
from setto_crypto.evm.permit2 import (
    build_permit_single_typed_data,
    check_permit2_allowance,
    sign_permit2,
)
from setto_crypto.evm.provider import EIP1193Provider, JsonRpcProvider, LocalAccountProvider
from setto_crypto.evm.signature import parse_signature, recover_typed_data_signer
from setto_crypto.evm.types import (
    EcdsaSignature,
    EIP712Domain,
    ERC20AllowanceInfo,
    ERC20PermitSignature,
    Permit2Allowance,
    PermitDetails,
    PermitMessage,
    PermitSingle,
    SignERC20PermitResult,
    SignPermit2Result,
)

__all__ = [
    # Providers
    "EIP1193Provider",
    "JsonRpcProvider",
    "LocalAccountProvider",
    # EIP-2612
    "get_erc20_nonce",
    "get_token_name",
    "get_token_version",
    "get_eip712_domain",
    "get_erc20_allowance",
    "check_erc20_allowance",
    "build_permit_typed_data",
    "sign_erc20_permit",
    "is_permit_valid",
    # Permit2
    "check_permit2_allowance",
    "build_permit_single_typed_data",
    "sign_permit2",
    "is_allowance_sufficient",
    "is_signature_valid",
    # Shared
    "is_sufficient",
    "require_valid_deadline",
    "parse_signature",
    "recover_typed_data_signer",
    # Types
    "EIP712Domain",
    "PermitMessage",
    "EcdsaSignature",
    "ERC20PermitSignature",
    "SignERC20PermitResult",
    "ERC20AllowanceInfo",
    "Permit2Allowance",
    "PermitDetails",
    "PermitSingle",
    "SignPermit2Result",
]
