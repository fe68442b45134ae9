"""
Pytest configuration and fixtures
"""

import pytest

from helpers import TOKEN_ADDRESS, encode_eip712_domain_result, make_rpc_provider


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def mock_evm_private_key():
    """Private key used for local signing in tests"""
    return "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


@pytest.fixture
def usdc_domain_provider():
    """Provider for a token implementing eip712Domain() with version "2" """
    return make_rpc_provider(
        {
            "eth_call:0x84b0196e": encode_eip712_domain_result(
                "USD Coin", "2", 43113, TOKEN_ADDRESS
            ),
            "eth_chainId": "0xa869",
        }
    )
