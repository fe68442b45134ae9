"""
Signing Configuration
Centralized defaults for deadlines, buffers and contract addresses
"""

from types import MappingProxyType
from typing import Mapping

from setto_crypto.exceptions import ValidationError


class SigningConfig:
    """Defaults shared by the EVM and SVM signing helpers"""

    # Uniswap Permit2 singleton, same address on every chain it was deployed
    # to with the deterministic deployer
    PERMIT2_ADDRESS = "0x000000000022D473030F116dDEE9F6B43aC78BA3"

    # Chains where Permit2 lives somewhere else
    PERMIT2_ADDRESSES: Mapping[int, str] = MappingProxyType(
        {
            324: "0x0000000000225e31D15943971F47aD3022F714Fa",  # zkSync Era
        }
    )

    PERMIT2_DOMAIN_NAME = "Permit2"

    # EIP-712 domain version used when a token exposes neither
    # eip712Domain() nor version()
    DEFAULT_PERMIT_VERSION = "1"

    # Observed domain versions, for reference only. Signing always resolves
    # the version on-chain.
    KNOWN_PERMIT_VERSIONS: Mapping[str, str] = {
        "USDC": "2",
        "EURC": "2",
        "DAI": "1",
    }

    # Deadlines
    PERMIT_DEADLINE_MINUTES = 60
    PERMIT2_SIG_DEADLINE_MINUTES = 5
    PERMIT2_EXPIRATION_DAYS = 30

    # Freshness buffers
    SIGNATURE_BUFFER_SECONDS = 30
    PERMIT2_ALLOWANCE_BUFFER_SECONDS = 1800
    BLOCKHASH_BUFFER_MS = 10_000

    # JSON-RPC transport
    RPC_TIMEOUT_SECONDS = 30.0

    @classmethod
    def get_permit2_address(cls, chain_id: int) -> str:
        """Get Permit2 contract address for a chain

        Args:
            chain_id: EVM chain ID

        Returns:
            Permit2 address (checksummed hex)

        Raises:
            ValidationError: If chain_id is not a positive integer
        """
        if chain_id < 1:
            raise ValidationError(f"Invalid chain id: {chain_id}")
        return cls.PERMIT2_ADDRESSES.get(chain_id, cls.PERMIT2_ADDRESS)
