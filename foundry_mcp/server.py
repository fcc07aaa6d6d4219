"""FastAPI application exposing the Foundry MCP surface over HTTP."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from foundry_mcp import gateway, mcp
from foundry_mcp.config import default_config
from foundry_mcp.context import ToolContext
from foundry_mcp.logs import configure_logging
from foundry_mcp.metrics import default_metrics

logger = logging.getLogger(__name__)
configure_logging(default_config)

HEALTH_STATUS = {"status": "ok"}
APP_VERSION = gateway.APP_VERSION
MCP_SERVER_NAME = gateway.MCP_SERVER_NAME
MCP_SERVER_VERSION = gateway.MCP_SERVER_VERSION

context = ToolContext(config=default_config)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Foundry MCP server starting project=%s", default_config.project_path)
    yield
    # Stops tracked anvil nodes and closes HTTP clients.
    await context.aclose()


app = FastAPI(
    title="Foundry MCP Server",
    description="Foundry toolchain (forge, cast, anvil, chisel) for LLM agents.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/nodes")
async def nodes() -> JSONResponse:
    """Anvil nodes currently tracked by this server."""
    return JSONResponse(content={"nodes": context.registry.snapshot()})


@app.post("/tools/{tool_name}")
async def call_tool_route(tool_name: str, request: Request) -> JSONResponse:
    """Call one tool with the JSON request body as its arguments."""
    request_id = getattr(request.state, "request_id", None)
    if tool_name not in mcp.TOOL_REGISTRY and tool_name not in mcp.TOOL_ALIASES:
        return JSONResponse(status_code=404, content={"error": f"Unknown tool: {tool_name}"})

    raw = await request.body()
    try:
        params: Any = json.loads(raw) if raw else {}
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON."})
    if not isinstance(params, dict):
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object."})

    result = await mcp.call_tool(tool_name, params, context)
    gateway._log_tool_result(tool_name, result, request_id)
    return JSONResponse(content=result)


@app.post("/mcp")
async def mcp_gateway(request: Request) -> Response:
    """JSON-RPC endpoint for MCP clients; see ``foundry_mcp.gateway``."""
    request_id = getattr(request.state, "request_id", None)
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content=gateway.parse_error_payload())

    if not isinstance(body, dict):
        return JSONResponse(status_code=400, content=gateway.invalid_request_payload())

    payload: Dict[str, Any] | None = await gateway.handle_request(body, context, request_id)
    if payload is None:
        # Notifications get no JSON-RPC response body.
        return Response(status_code=204)
    return JSONResponse(content=payload)


# Run with: uvicorn foundry_mcp.server:app  (or: python -m foundry_mcp --transport http)
