"""
setto_crypto custom exception hierarchy
"""


class CryptoUtilsError(Exception):
    """setto_crypto base exception"""

    pass


class ValidationError(CryptoUtilsError):
    """Caller input is malformed (address, hex, signature length)"""

    pass


class EncodingError(ValidationError):
    """Value cannot be encoded (bad address, hex or base64 input)"""

    pass


class DecodeError(ValidationError):
    """Return data or signature bytes do not match the expected layout"""

    def __init__(self, reason: str, data: str | None = None):
        self.reason = reason
        self.data = data
        super().__init__(reason)


class WalletConnectionError(CryptoUtilsError):
    """No connected wallet, or no wallet matching the expected address"""

    pass


class WalletMismatchError(WalletConnectionError):
    """Connected wallet reports a different address than expected"""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Wallet address mismatch. Expected: {expected}, Got: {actual}")


class UnsupportedCapabilityError(CryptoUtilsError):
    """Wallet provider does not support the requested operation"""

    pass


class RpcError(CryptoUtilsError):
    """Provider call was rejected or returned malformed data"""

    def __init__(self, method: str, message: str, code: int | None = None):
        self.method = method
        self.code = code
        super().__init__(f"{method} failed: {message}")


class DomainResolutionError(CryptoUtilsError):
    """All lookup paths for the EIP-712 domain failed"""

    def __init__(self, token_address: str, message: str):
        self.token_address = token_address
        super().__init__(f"Could not resolve EIP-712 domain for {token_address}: {message}")


class StaleDataError(CryptoUtilsError):
    """Nonce, deadline or blockhash no longer valid at use time"""

    pass
