"""Helpers shared by the forge/cast/anvil/chisel tool modules."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

from foundry_mcp.context import ToolContext
from foundry_mcp.process import CommandResult, format_output
from foundry_mcp.rpc import local_url
from foundry_mcp.tools.validators import (
    is_valid_address,
    is_valid_private_key,
    is_valid_url,
)

ToolResult = Union[str, Dict[str, Any]]


def resolve_rpc_url(ctx: ToolContext, rpc_url: Optional[str]) -> Optional[str]:
    return rpc_url or ctx.rpc_url


def resolve_private_key(ctx: ToolContext, private_key: Optional[str]) -> Optional[str]:
    return private_key or ctx.private_key


def node_url(ctx: ToolContext, rpc_url: Optional[str] = None, port: Optional[int] = None) -> str:
    """
    Pick the endpoint for a node-control call.

    Explicit URL first, then the local port, then the configured default,
    then the conventional local node.
    """
    if rpc_url:
        return rpc_url
    if port:
        return local_url(port)
    return ctx.rpc_url or local_url(ctx.config.default_anvil_port)


def command_response(result: CommandResult) -> ToolResult:
    """Formatted text on success; ``{"error": text}`` so callers flag failures."""
    text = format_output(result)
    if result.success:
        return text
    return {"error": text}


def check_url(value: Optional[str], label: str = "RPC URL") -> Optional[Dict[str, str]]:
    if value is not None and not is_valid_url(value):
        return {"error": f"Invalid {label}."}
    return None


def check_private_key(value: Optional[str]) -> Optional[Dict[str, str]]:
    if value is not None and not is_valid_private_key(value):
        return {"error": "Invalid private key (must be 32 bytes hex)."}
    return None


def check_address(value: Optional[str], label: str = "address") -> Optional[Dict[str, str]]:
    if not is_valid_address(value):
        return {"error": f"Invalid Ethereum {label}."}
    return None


def first_error(*checks: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    for check in checks:
        if check is not None:
            return check
    return None


async def run_forge(ctx: ToolContext, args: Sequence[str]) -> ToolResult:
    result = await ctx.runner.run(ctx.config.forge_bin, list(args), ctx.project_path)
    return command_response(result)


async def run_cast(ctx: ToolContext, args: Sequence[str]) -> ToolResult:
    result = await ctx.runner.run(ctx.config.cast_bin, list(args))
    return command_response(result)


async def run_chisel(ctx: ToolContext, args: Sequence[str]) -> ToolResult:
    result = await ctx.runner.run(ctx.config.chisel_bin, list(args))
    return command_response(result)
