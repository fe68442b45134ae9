"""
Solana delegate transaction signing

Signing is delegated to an injected wallet provider; this module only
checks connection state and signer identity, serializes the signed
transaction and re-encodes it as base64. Solana transaction internals are
left to the caller's transaction library (e.g. solders).

Wallet discovery works on an explicit, ordered registry of
``(name, provider)`` pairs instead of a browser ``window`` object; see
default_wallet_registry().
"""

import logging
import time
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from setto_crypto.config import SigningConfig
from setto_crypto.encoding import base64_to_bytes, bytes_to_base64
from setto_crypto.exceptions import StaleDataError, WalletConnectionError, WalletMismatchError
from setto_crypto.svm.constants import CONNECT_CANDIDATES, WALLET_PROVIDER_PATHS
from setto_crypto.svm.types import (
    DelegatePaymentTxResponse,
    SignedTxResult,
    SolanaProvider,
    WalletCapability,
    require_capability,
)

logger = logging.getLogger(__name__)

WalletRegistry = Sequence[Tuple[str, Optional[SolanaProvider]]]


def _address_of(provider: Any) -> str | None:
    if isinstance(provider, Mapping):
        public_key = provider.get("public_key", provider.get("publicKey"))
    else:
        public_key = getattr(provider, "public_key", None)
    return str(public_key) if public_key is not None else None


def _is_connected(provider: Any) -> bool:
    if isinstance(provider, Mapping):
        return bool(provider.get("is_connected", provider.get("isConnected", False)))
    return bool(getattr(provider, "is_connected", False))


def _require_connected(provider: SolanaProvider) -> str:
    """Return the connected address or raise WalletConnectionError"""
    address = _address_of(provider)
    if not _is_connected(provider) or not address:
        raise WalletConnectionError("Wallet not connected")
    return address


def _serialize(transaction: Any) -> bytes:
    """Serialize a signed transaction (solana-py style serialize() or solders bytes())"""
    serialize = getattr(transaction, "serialize", None)
    if callable(serialize):
        return bytes(serialize())
    return bytes(transaction)


def is_blockhash_valid(
    expires_at_ms: int,
    buffer_ms: int = SigningConfig.BLOCKHASH_BUFFER_MS,
) -> bool:
    """
    Check that a blockhash will not expire within *buffer_ms*.

    Args:
        expires_at_ms: Blockhash expiry (Unix ms)
        buffer_ms: Safety margin (default: 10000ms)

    Returns:
        True if the blockhash is still usable
    """
    return expires_at_ms > int(time.time() * 1000) + buffer_ms


async def sign_delegate_tx_with_transaction(
    provider: SolanaProvider,
    transaction: Any,
    *,
    expected_signer: str | None = None,
) -> SignedTxResult:
    """
    Sign a delegate transaction object with the connected wallet.

    Args:
        provider: Connected Solana wallet provider
        transaction: Transaction object understood by the wallet
        expected_signer: Base58 address the wallet must be connected as

    Returns:
        SignedTxResult with the base64 signed transaction and signer address

    Raises:
        WalletConnectionError: If the wallet is not connected
        WalletMismatchError: If the wallet address differs from expected_signer
        UnsupportedCapabilityError: If the wallet cannot sign transactions
    """
    signer_address = _require_connected(provider)
    if expected_signer and signer_address != expected_signer:
        raise WalletMismatchError(expected_signer, signer_address)
    require_capability(provider, WalletCapability.SIGN)

    logger.info("Requesting Solana transaction signature", extra={"signer": signer_address})
    signed = await provider.sign_transaction(transaction)
    signed_tx = bytes_to_base64(_serialize(signed))

    return SignedTxResult(signedTx=signed_tx, signerAddress=signer_address)


async def sign_delegate_tx(
    provider: SolanaProvider,
    unsigned_tx_base64: str,
    transaction_decoder: Callable[[bytes], Any],
    *,
    expected_signer: str | None = None,
    blockhash_expires_at: int | None = None,
) -> SignedTxResult:
    """
    Sign a server-issued base64 transaction.

    *transaction_decoder* turns raw bytes into the transaction object the
    wallet expects, e.g. ``solders.transaction.VersionedTransaction.from_bytes``.

    Args:
        provider: Connected Solana wallet provider
        unsigned_tx_base64: Unsigned transaction (base64)
        transaction_decoder: Callable building a transaction from bytes
        expected_signer: Base58 address the wallet must be connected as
        blockhash_expires_at: Blockhash expiry (Unix ms); checked if given

    Raises:
        StaleDataError: If the blockhash expires within the default buffer
        EncodingError: If unsigned_tx_base64 is not valid base64
    """
    if blockhash_expires_at is not None and not is_blockhash_valid(blockhash_expires_at):
        raise StaleDataError(f"Blockhash expired or expiring (expires_at={blockhash_expires_at})")

    # Identity checks run before the decoder sees any bytes
    signer_address = _require_connected(provider)
    if expected_signer and signer_address != expected_signer:
        raise WalletMismatchError(expected_signer, signer_address)

    transaction = transaction_decoder(base64_to_bytes(unsigned_tx_base64))
    return await sign_delegate_tx_with_transaction(
        provider, transaction, expected_signer=expected_signer
    )


async def sign_delegate_payment_tx(
    provider: SolanaProvider,
    envelope: DelegatePaymentTxResponse,
    transaction_decoder: Callable[[bytes], Any],
    *,
    expected_signer: str | None = None,
) -> SignedTxResult:
    """Sign the transaction of a DelegatePaymentTxResponse after checking its blockhash"""
    logger.debug(
        "Signing delegate payment transaction",
        extra={"payment_id": envelope.payment_id, "delegate_pda": envelope.delegate_pda},
    )
    return await sign_delegate_tx(
        provider,
        envelope.unsigned_tx,
        transaction_decoder,
        expected_signer=expected_signer,
        blockhash_expires_at=envelope.blockhash_expires_at,
    )


async def sign_and_send_delegate_tx(provider: SolanaProvider, transaction: Any) -> str:
    """
    Let the wallet sign and submit *transaction* itself.

    Returns:
        Transaction signature reported by the wallet

    Raises:
        UnsupportedCapabilityError: If the wallet has no sign_and_send_transaction
    """
    signer_address = _require_connected(provider)
    require_capability(provider, WalletCapability.SIGN_AND_SEND)

    logger.info("Requesting Solana sign-and-send", extra={"signer": signer_address})
    result = await provider.sign_and_send_transaction(transaction)  # type: ignore[attr-defined]
    if isinstance(result, Mapping):
        return str(result["signature"])
    return str(getattr(result, "signature", result))


def _resolve_path(host: Any, path: str) -> Any:
    node = host
    for part in path.split("."):
        if node is None:
            return None
        if isinstance(node, Mapping):
            node = node.get(part)
        else:
            node = getattr(node, part, None)
    return node


def default_wallet_registry(host: Any) -> List[Tuple[str, Optional[SolanaProvider]]]:
    """
    Build the ordered wallet registry from a host object or mapping.

    Looks up phantom.solana, solflare, okxwallet.solana, coinbaseSolana and
    backpack.solana, in that order. Missing wallets map to None.
    """
    return [(name, _resolve_path(host, path)) for name, path in WALLET_PROVIDER_PATHS]


def find_connected_provider(
    registry: WalletRegistry,
    expected_address: str,
) -> Optional[SolanaProvider]:
    """
    Return the first connected provider whose address equals *expected_address*.

    Args:
        registry: Ordered (name, provider) pairs
        expected_address: Base58 wallet address

    Returns:
        Matching provider, or None
    """
    for name, provider in registry:
        if provider is None:
            continue
        try:
            matches = _is_connected(provider) and _address_of(provider) == expected_address
        except Exception as e:
            logger.debug("Skipping unusable wallet", extra={"wallet": name, "error": str(e)})
            continue
        if matches:
            logger.debug("Found connected wallet", extra={"wallet": name})
            return provider
    return None


async def connect_solana_wallet(
    registry: WalletRegistry,
    expected_address: str,
) -> SolanaProvider:
    """
    Return a provider connected as *expected_address*, connecting if needed.

    Already connected providers are checked first. Otherwise connect() is
    tried on the first two registry entries (Phantom, Solflare by default).

    Raises:
        WalletMismatchError: If a wallet connected with a different address
        WalletConnectionError: If no wallet could be connected
    """
    connected = find_connected_provider(registry, expected_address)
    if connected is not None:
        return connected

    mismatched: str | None = None
    for name, provider in list(registry)[:CONNECT_CANDIDATES]:
        if provider is None:
            continue
        try:
            response = await provider.connect()
        except Exception as e:
            logger.warning("Wallet connect failed", extra={"wallet": name, "error": str(e)})
            continue

        address = _address_of(response) or _address_of(provider)
        if address == expected_address:
            logger.info("Connected wallet", extra={"wallet": name, "address": address})
            return provider
        logger.warning(
            "Connected wallet has unexpected address",
            extra={"wallet": name, "expected": expected_address, "actual": address},
        )
        mismatched = address or mismatched

    if mismatched is not None:
        raise WalletMismatchError(expected_address, mismatched)
    raise WalletConnectionError(
        f"Could not find wallet with address: {expected_address}. "
        "Please connect the correct wallet."
    )
