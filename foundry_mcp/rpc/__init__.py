"""JSON-RPC client wrappers for Ethereum nodes."""

from .client import (
    JsonRpcClient,
    RpcError,
    RpcRemoteError,
    RpcResponseError,
    RpcUnreachableError,
    local_url,
    to_quantity,
)

__all__ = [
    "JsonRpcClient",
    "RpcError",
    "RpcRemoteError",
    "RpcResponseError",
    "RpcUnreachableError",
    "local_url",
    "to_quantity",
]
