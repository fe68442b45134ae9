"""
SVM constants: SPL Token program ids and known wallet providers
"""

from typing import List, Tuple

SPL_TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
SPL_TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"

SUPPORTED_WALLETS: Tuple[str, ...] = (
    "phantom",
    "solflare",
    "okxwallet",
    "coinbaseSolana",
    "backpack",
)

# (wallet name, attribute path on the host object), in discovery order
WALLET_PROVIDER_PATHS: List[Tuple[str, str]] = [
    ("phantom", "phantom.solana"),
    ("solflare", "solflare"),
    ("okxwallet", "okxwallet.solana"),
    ("coinbaseSolana", "coinbaseSolana"),
    ("backpack", "backpack.solana"),
]

# Only these wallets get an explicit connect() attempt
CONNECT_CANDIDATES = 2
