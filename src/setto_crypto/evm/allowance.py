"""
Allowance and deadline evaluation

Pure functions over already-decoded values. Amounts are compared as Python
integers, never as floats.
"""

import time

from setto_crypto.config import SigningConfig
from setto_crypto.encoding import parse_uint
from setto_crypto.evm.types import Permit2Allowance
from setto_crypto.exceptions import StaleDataError


def _now() -> int:
    return int(time.time())


def is_sufficient(allowance: int | str, required_amount: int | str) -> bool:
    """Return True if an ERC-20 allowance covers *required_amount*"""
    return parse_uint(allowance) >= parse_uint(required_amount)


def is_allowance_sufficient(
    allowance: Permit2Allowance,
    required_amount: int | str,
    buffer_seconds: int = SigningConfig.PERMIT2_ALLOWANCE_BUFFER_SECONDS,
) -> bool:
    """
    Check a Permit2 allowance against an amount and an expiration buffer.

    Args:
        allowance: Decoded Permit2 allowance
        required_amount: Amount the spender needs
        buffer_seconds: Minimum remaining lifetime (default: 1800s)

    Returns:
        True if the amount is covered and the allowance does not expire
        within the buffer
    """
    if allowance.amount < parse_uint(required_amount):
        return False
    if allowance.expiration < _now() + buffer_seconds:
        return False
    return True


def is_permit_valid(
    deadline: int,
    buffer_seconds: int = SigningConfig.SIGNATURE_BUFFER_SECONDS,
) -> bool:
    """Return True if an EIP-2612 permit deadline is still ahead of now + buffer"""
    return deadline > _now() + buffer_seconds


def is_signature_valid(
    sig_deadline: int,
    buffer_seconds: int = SigningConfig.SIGNATURE_BUFFER_SECONDS,
) -> bool:
    """Return True if a Permit2 signature deadline is still ahead of now + buffer"""
    return sig_deadline > _now() + buffer_seconds


def require_valid_deadline(
    deadline: int,
    buffer_seconds: int = SigningConfig.SIGNATURE_BUFFER_SECONDS,
) -> None:
    """Raise StaleDataError if *deadline* (unix seconds) is within the buffer"""
    if not is_permit_valid(deadline, buffer_seconds):
        raise StaleDataError(
            f"Deadline {deadline} expires within {buffer_seconds}s (now={_now()})"
        )
