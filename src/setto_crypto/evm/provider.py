"""
EIP-1193 provider contract and JSON-RPC helpers

Anything with an ``async request(method, params=None)`` method can be used
as a provider: a browser wallet bridge, ``JsonRpcProvider`` for plain HTTP
endpoints, or ``LocalAccountProvider`` for in-process signing.
"""

import itertools
import json
import logging
from typing import Any, Protocol, runtime_checkable

import httpx
from eth_utils import is_address, is_same_address

from setto_crypto.config import SigningConfig
from setto_crypto.encoding import is_hex, parse_hex_int
from setto_crypto.evm.calldata import CallRequest
from setto_crypto.evm.signature import normalize_typed_data
from setto_crypto.exceptions import CryptoUtilsError, EncodingError, RpcError

logger = logging.getLogger(__name__)


@runtime_checkable
class EIP1193Provider(Protocol):
    """Minimal EIP-1193 provider"""

    async def request(self, method: str, params: list[Any] | None = None) -> Any: ...


async def _request(provider: EIP1193Provider, method: str, params: list[Any] | None = None) -> Any:
    """Forward a request, mapping foreign exceptions to RpcError"""
    try:
        return await provider.request(method, params)
    except CryptoUtilsError:
        raise
    except Exception as e:
        raise RpcError(method, str(e)) from e


async def eth_call(provider: EIP1193Provider, call: CallRequest) -> str:
    """Execute eth_call against the latest block and return the raw hex result"""
    logger.debug("eth_call", extra={"to": call.to, "data": call.data[:10]})
    result = await _request(provider, "eth_call", call.to_params())
    if not isinstance(result, str) or not result.startswith("0x") or not is_hex(result):
        raise RpcError("eth_call", f"malformed result {result!r}")
    return result


async def get_chain_id(provider: EIP1193Provider) -> int:
    """Query eth_chainId"""
    result = await _request(provider, "eth_chainId")
    if isinstance(result, int):
        return result
    try:
        return parse_hex_int(result)
    except (EncodingError, TypeError) as e:
        raise RpcError("eth_chainId", f"malformed result {result!r}") from e


async def get_accounts(provider: EIP1193Provider, request_access: bool = True) -> list[str]:
    """Return connected accounts, prompting for access only when none are connected"""
    accounts = await _request(provider, "eth_accounts") or []
    if not accounts and request_access:
        logger.debug("No connected accounts, requesting access")
        accounts = await _request(provider, "eth_requestAccounts") or []
    if not isinstance(accounts, list):
        raise RpcError("eth_accounts", f"malformed result {accounts!r}")
    return accounts


async def sign_typed_data_v4(
    provider: EIP1193Provider,
    signer_address: str,
    typed_data: dict[str, Any],
) -> str:
    """Request an eth_signTypedData_v4 signature. May open a wallet prompt."""
    logger.info(
        "Requesting typed data signature",
        extra={"signer": signer_address, "primary_type": typed_data.get("primaryType")},
    )
    signature = await _request(
        provider, "eth_signTypedData_v4", [signer_address, json.dumps(typed_data)]
    )
    if not isinstance(signature, str):
        raise RpcError("eth_signTypedData_v4", f"malformed result {signature!r}")
    return signature


class JsonRpcProvider:
    """
    EIP-1193 style provider backed by an HTTP JSON-RPC endpoint.

    Suitable for read calls (eth_call, eth_chainId). There is no retry or
    backoff; failures surface as RpcError.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = SigningConfig.RPC_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize JSON-RPC provider.

        Args:
            url: JSON-RPC endpoint URL
            headers: Custom HTTP headers (e.g., Authorization)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._url = url
        self._headers = headers or {}
        self._timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "JsonRpcProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def request(self, method: str, params: list[Any] | None = None) -> Any:
        client = await self._get_client()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            response = await client.post(self._url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise RpcError(method, f"transport error: {e}") from e
        except ValueError as e:
            raise RpcError(method, "response is not valid JSON") from e

        if not isinstance(body, dict):
            raise RpcError(method, "response is not a JSON object")
        error = body.get("error")
        if error:
            if not isinstance(error, dict):
                raise RpcError(method, str(error))
            raise RpcError(method, error.get("message", "unknown error"), error.get("code"))
        if "result" not in body:
            raise RpcError(method, "response has neither result nor error")
        return body["result"]


class LocalAccountProvider:
    """
    Provider that signs with an in-process private key via eth_account.

    Answers eth_accounts, eth_requestAccounts and eth_signTypedData_v4 itself
    and forwards every other method to *upstream*.
    """

    def __init__(
        self,
        private_key: str,
        upstream: EIP1193Provider | None = None,
        chain_id: int | None = None,
    ) -> None:
        from eth_account import Account

        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        self._account = Account.from_key(private_key)
        self._upstream = upstream
        self._chain_id = chain_id
        logger.debug("LocalAccountProvider initialized", extra={"address": self.address})

    @property
    def address(self) -> str:
        return self._account.address

    async def request(self, method: str, params: list[Any] | None = None) -> Any:
        if method in ("eth_accounts", "eth_requestAccounts"):
            return [self.address]
        if method == "eth_signTypedData_v4":
            return self._sign_typed_data(params or [])
        if method == "eth_chainId" and self._chain_id is not None:
            return hex(self._chain_id)
        if self._upstream is None:
            raise RpcError(method, "no upstream provider configured")
        return await self._upstream.request(method, params)

    def _sign_typed_data(self, params: list[Any]) -> str:
        if len(params) != 2:
            raise RpcError("eth_signTypedData_v4", "expected [address, typedData]")
        address, payload = params
        if not is_address(address) or not is_same_address(address, self.address):
            raise RpcError("eth_signTypedData_v4", f"unknown signer {address}")
        typed_data = json.loads(payload) if isinstance(payload, str) else payload
        try:
            from eth_account import Account
            from eth_account.messages import encode_typed_data

            encoded = encode_typed_data(full_message=normalize_typed_data(typed_data))
            signed = Account.sign_message(encoded, private_key=self._account.key)
        except Exception as e:
            raise RpcError("eth_signTypedData_v4", f"failed to sign typed data: {e}") from e
        signature = signed.signature.hex()
        return signature if signature.startswith("0x") else "0x" + signature
