"""
Thin JSON-RPC client for local and remote Ethereum nodes.

Each call is a single HTTP POST round trip. Transport problems and remote
``error`` members are mapped to internal exceptions that the tool layer turns
into safe, user-facing messages.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from foundry_mcp.metrics import MetricsRecorder, default_metrics

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
REQUEST_ID = 1
LOCAL_HOST = "127.0.0.1"


class RpcError(Exception):
    """Base exception for JSON-RPC failures."""

    def __init__(self, message: str, *, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class RpcUnreachableError(RpcError):
    """Raised when the endpoint cannot be reached."""


class RpcRemoteError(RpcError):
    """Raised when the node answers with a JSON-RPC ``error`` member."""


class RpcResponseError(RpcError):
    """Raised when the response body is not a JSON-RPC object."""


def local_url(port: int) -> str:
    """Endpoint of a node listening on ``port`` on this machine."""
    return f"http://{LOCAL_HOST}:{port}"


def to_quantity(value: Any) -> str:
    """
    Encode a count, timestamp or amount as a ``0x``-prefixed hex quantity.

    Integers and decimal strings are converted; strings that already carry a
    ``0x`` prefix pass through unchanged.
    """
    if isinstance(value, bool):
        raise ValueError("Expected an integer quantity, got a boolean.")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("Quantities must be non-negative.")
        return hex(value)
    if isinstance(value, str):
        stripped = value.strip()
        if stripped[:2].lower() == "0x":
            return stripped
        if stripped.isdigit():
            return hex(int(stripped))
    raise ValueError(f"Invalid quantity: {value!r}")


class JsonRpcClient:
    """Async JSON-RPC client; one request per call, no retries."""

    def __init__(
        self,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
        metrics: MetricsRecorder = default_metrics,
    ) -> None:
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None
        self._metrics = metrics

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _parse_response(self, response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError as exc:
            raise RpcResponseError(
                f"Invalid JSON-RPC response (HTTP {response.status_code})."
            ) from exc

        if not isinstance(data, dict):
            raise RpcResponseError("Invalid JSON-RPC response.")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                message = error.get("message")
                code = error.get("code")
                raise RpcRemoteError(
                    str(message) if message else "Unknown JSON-RPC error.",
                    code=code if isinstance(code, int) else None,
                )
            raise RpcRemoteError(str(error))

        return data.get("result")

    async def call(self, url: str, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Invoke ``method`` on the node at ``url`` and return its ``result``.

        Raises:
            RpcUnreachableError: the HTTP request could not be completed.
            RpcRemoteError: the node returned an ``error`` member.
            RpcResponseError: the body was not a JSON-RPC object.
        """
        payload = {
            "jsonrpc": JSONRPC_VERSION,
            "id": REQUEST_ID,
            "method": method,
            "params": list(params or []),
        }
        client = await self._get_client()
        try:
            response = await client.post(url, json=payload)
        except httpx.RequestError as exc:
            logger.warning("RPC endpoint unreachable url=%s method=%s", url, method)
            self._metrics.record_rpc(method, success=False)
            raise RpcUnreachableError(f"Could not reach {url}: {exc}") from exc

        try:
            result = self._parse_response(response)
        except RpcError:
            self._metrics.record_rpc(method, success=False)
            raise
        self._metrics.record_rpc(method, success=True)
        return result
