"""
Solana address validation
"""

import base58

SOLANA_PUBKEY_LENGTH = 32


def is_valid_solana_address(address: str) -> bool:
    """Return True if *address* is base58 and decodes to a 32-byte public key"""
    if not isinstance(address, str) or not 32 <= len(address) <= 44:
        return False
    try:
        decoded = base58.b58decode(address)
    except ValueError:
        return False
    return len(decoded) == SOLANA_PUBKEY_LENGTH
