"""
JSON-RPC method dispatch shared by the HTTP and stdio transports.

Supported methods:
  - initialize, ping
  - tools/list (alias list_tools), tools/call (alias call_tool)
  - resources/list, resources/templates/list, resources/read
  - prompts/list, prompts/get
  - notifications/* (no response)
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

from foundry_mcp import mcp
from foundry_mcp.context import ToolContext
from foundry_mcp.metrics import default_metrics
from foundry_mcp.prompts import PromptError, get_prompt, list_prompts
from foundry_mcp.resources import ResourceNotFound, list_resource_templates, list_resources, read_resource

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "foundry-mcp-server"
MCP_SERVER_VERSION = APP_VERSION

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


def _jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def parse_error_payload() -> Dict[str, Any]:
    return _jsonrpc_error_payload(None, PARSE_ERROR, "Parse error")


def invalid_request_payload() -> Dict[str, Any]:
    return _jsonrpc_error_payload(None, INVALID_REQUEST, "Invalid request")


def _log_tool_result(tool_name: str, result: Any, request_id: Optional[str] = None) -> None:
    if isinstance(result, dict) and result.get("error"):
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            result.get("error"),
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": result.get("error")},
        )
        default_metrics.record_tool(tool_name, success=False)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True)


def _wrap_tool_result(result: Any) -> Dict[str, Any]:
    """
    Shape tool outputs into the MCP content array.
    """
    # Tool-level errors are returned in-band with the isError flag.
    if isinstance(result, dict) and "error" in result:
        message = result.get("error") or "Error"
        return {
            "content": [{"type": "text", "text": str(message)}],
            "isError": True,
            "structuredContent": result,
        }

    if isinstance(result, str):
        return {"content": [{"type": "text", "text": result}]}

    try:
        text_repr = json.dumps(result, ensure_ascii=True)
    except (TypeError, ValueError):
        text_repr = str(result)
    return {"content": [{"type": "text", "text": text_repr}], "structuredContent": result}


def is_notification(method: Any) -> bool:
    return isinstance(method, str) and (method.startswith("notifications/") or method == "initialized")


async def handle_request(
    body: Any, ctx: ToolContext, request_id: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Process one decoded JSON-RPC message.

    Returns:
        The response payload, or None for notifications.
    """
    start_time = time.time()

    def _respond(payload: Dict[str, Any], *, outcome: str, method: Any = None, tool: Optional[str] = None) -> Dict[str, Any]:
        duration_ms = (time.time() - start_time) * 1000
        error_code = payload.get("error", {}).get("code") if "error" in payload else None
        logger.debug(
            "mcp outcome=%s method=%s tool=%s id=%s duration_ms=%.2f error_code=%s",
            outcome,
            method,
            tool,
            payload.get("id"),
            duration_ms,
            error_code,
            extra={"request_id": request_id, "tool": tool, "error": error_code},
        )
        return payload

    if not isinstance(body, dict):
        return _respond(invalid_request_payload(), outcome="error")

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        return _respond(_jsonrpc_error_payload(rpc_id, INVALID_PARAMS, "Invalid params"), outcome="error", method=method)

    if not method or not isinstance(method, str):
        return _respond(_jsonrpc_error_payload(rpc_id, INVALID_REQUEST, "Invalid request"), outcome="error")

    if is_notification(method):
        logger.debug("mcp notification method=%s request_id=%s", method, request_id, extra={"request_id": request_id})
        return None

    def _ok(result: Any, tool: Optional[str] = None) -> Dict[str, Any]:
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method=method, tool=tool)

    def _fail(code: int, message: str, tool: Optional[str] = None) -> Dict[str, Any]:
        return _respond(_jsonrpc_error_payload(rpc_id, code, message), outcome="error", method=method, tool=tool)

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            return _fail(INVALID_PARAMS, "Invalid params")
        return _ok(
            {
                "protocolVersion": protocol_version,
                "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
                "capabilities": {
                    "tools": {"listChanged": False},
                    "resources": {"listChanged": False, "subscribe": False},
                    "prompts": {"listChanged": False},
                },
            }
        )

    if method == "ping":
        return _ok({})

    if method in ("list_tools", "tools/list"):
        return _ok({"tools": mcp.list_tools()})

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            return _fail(INVALID_PARAMS, "Invalid params")
        if not isinstance(tool_params, dict):
            return _fail(INVALID_PARAMS, "Invalid params", tool=tool_name)
        result = await mcp.call_tool(tool_name, tool_params, ctx)
        _log_tool_result(tool_name, result, request_id)
        return _ok(_wrap_tool_result(result), tool=tool_name)

    if method == "resources/list":
        return _ok({"resources": list_resources()})

    if method == "resources/templates/list":
        return _ok({"resourceTemplates": list_resource_templates()})

    if method == "resources/read":
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri:
            return _fail(INVALID_PARAMS, "Invalid params")
        try:
            return _ok(await read_resource(uri, ctx))
        except ResourceNotFound:
            return _fail(INVALID_PARAMS, f"Resource not found: {uri}")

    if method == "prompts/list":
        return _ok({"prompts": list_prompts()})

    if method == "prompts/get":
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(name, str) or (arguments is not None and not isinstance(arguments, dict)):
            return _fail(INVALID_PARAMS, "Invalid params")
        try:
            return _ok(get_prompt(name, arguments))
        except PromptError as exc:
            return _fail(INVALID_PARAMS, str(exc))

    return _fail(METHOD_NOT_FOUND, "Method not found")
