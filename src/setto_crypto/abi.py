"""
Shared ABI definitions, function selectors and EIP-712 types
"""

from typing import Any, List

# Function selectors: first 4 bytes of keccak256(<canonical signature>)
NONCES_SELECTOR = "0x7ecebe00"  # nonces(address)
NAME_SELECTOR = "0x06fdde03"  # name()
VERSION_SELECTOR = "0x54fd4d50"  # version()
ALLOWANCE_SELECTOR = "0xdd62ed3e"  # allowance(address,address)
EIP712_DOMAIN_SELECTOR = "0x84b0196e"  # eip712Domain()
PERMIT2_ALLOWANCE_SELECTOR = "0x927da105"  # allowance(address,address,address)

PERMIT_PRIMARY_TYPE = "Permit"
PERMIT_SINGLE_PRIMARY_TYPE = "PermitSingle"

# EIP-712 domain with version (EIP-2612 tokens)
EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# Permit2 domain: keccak256("EIP712Domain(string name,uint256 chainId,address verifyingContract)")
# NO version field!
PERMIT2_EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

ERC20_PERMIT_TYPES: dict[str, list[dict[str, str]]] = {
    "Permit": [
        {"name": "owner", "type": "address"},
        {"name": "spender", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
    ],
}

PERMIT_SINGLE_TYPES: dict[str, list[dict[str, str]]] = {
    "PermitSingle": [
        {"name": "details", "type": "PermitDetails"},
        {"name": "spender", "type": "address"},
        {"name": "sigDeadline", "type": "uint256"},
    ],
    "PermitDetails": [
        {"name": "token", "type": "address"},
        {"name": "amount", "type": "uint160"},
        {"name": "expiration", "type": "uint48"},
        {"name": "nonce", "type": "uint48"},
    ],
}

# ERC-20 Permit ABI (nonces, DOMAIN_SEPARATOR, name, version, allowance, eip712Domain)
ERC20_PERMIT_ABI: List[dict[str, Any]] = [
    {
        "name": "nonces",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "DOMAIN_SEPARATOR",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "name": "name",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "name": "version",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "eip712Domain",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "fields", "type": "bytes1"},
            {"name": "name", "type": "string"},
            {"name": "version", "type": "string"},
            {"name": "chainId", "type": "uint256"},
            {"name": "verifyingContract", "type": "address"},
            {"name": "salt", "type": "bytes32"},
            {"name": "extensions", "type": "uint256[]"},
        ],
    },
]

# Permit2.allowance(owner, token, spender) -> (uint160 amount, uint48 expiration, uint48 nonce)
PERMIT2_ALLOWANCE_ABI: List[dict[str, Any]] = [
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "token", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [
            {"name": "amount", "type": "uint160"},
            {"name": "expiration", "type": "uint48"},
            {"name": "nonce", "type": "uint48"},
        ],
    },
]
