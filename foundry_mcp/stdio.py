"""
Line-delimited JSON-RPC over stdin/stdout.

One JSON object per line in, one response per line out. Notifications get no
reply. Logging goes to stderr so stdout carries protocol messages only.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from foundry_mcp import gateway
from foundry_mcp.config import FoundryConfig, default_config
from foundry_mcp.context import ToolContext
from foundry_mcp.logs import configure_logging

logger = logging.getLogger(__name__)


def write_message(stream: TextIO, payload: Dict[str, Any]) -> None:
    stream.write(json.dumps(payload) + "\n")
    stream.flush()


async def handle_line(line: str, ctx: ToolContext) -> Optional[Dict[str, Any]]:
    try:
        body = json.loads(line)
    except ValueError:
        return gateway.parse_error_payload()
    return await gateway.handle_request(body, ctx)


async def serve(ctx: ToolContext, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    """Answer requests until ``stdin`` reaches EOF."""
    loop = asyncio.get_running_loop()
    while True:
        # readline blocks, so keep it off the event loop.
        line = await loop.run_in_executor(None, stdin.readline)
        if not line:
            break
        if not line.strip():
            continue
        response = await handle_line(line, ctx)
        if response is not None:
            write_message(stdout, response)


async def _run(ctx: ToolContext) -> None:
    try:
        await serve(ctx)
    finally:
        await ctx.aclose()


def run(config: FoundryConfig = default_config) -> None:
    configure_logging(config)
    logger.info("Foundry MCP server started on stdio project=%s", config.project_path)
    if config.rpc_url:
        logger.info("Default RPC URL: %s", config.rpc_url)
    asyncio.run(_run(ToolContext(config=config)))
