"""Help, version and command discovery for the four Foundry binaries."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from foundry_mcp.context import ToolContext
from foundry_mcp.tools.common import ToolResult, command_response

LISTABLE_TOOLS = ("forge", "cast", "chisel")


def _binary(ctx: ToolContext, tool: str) -> str:
    return {
        "forge": ctx.config.forge_bin,
        "cast": ctx.config.cast_bin,
        "anvil": ctx.config.anvil_bin,
        "chisel": ctx.config.chisel_bin,
    }[tool]


def _help_args(subcommand: Optional[str]) -> List[str]:
    # "wallet sign" -> ["wallet", "sign", "--help"]
    if subcommand and subcommand.strip():
        return [*subcommand.split(), "--help"]
    return ["--help"]


async def _help(ctx: ToolContext, tool: str, subcommand: Optional[str] = None) -> ToolResult:
    if subcommand is not None and not isinstance(subcommand, str):
        return {"error": "subcommand must be a string."}
    result = await ctx.runner.run(_binary(ctx, tool), _help_args(subcommand))
    return command_response(result)


async def forge_help(ctx: ToolContext, subcommand: Optional[str] = None) -> ToolResult:
    """Help for forge or a nested subcommand such as ``test`` or ``script``."""
    return await _help(ctx, "forge", subcommand)


async def cast_help(ctx: ToolContext, subcommand: Optional[str] = None) -> ToolResult:
    """Help for cast or a nested subcommand such as ``wallet sign``."""
    return await _help(ctx, "cast", subcommand)


async def anvil_help(ctx: ToolContext) -> ToolResult:
    """anvil has no subcommands; this is the full flag reference."""
    return await _help(ctx, "anvil")


async def chisel_help(ctx: ToolContext, subcommand: Optional[str] = None) -> ToolResult:
    return await _help(ctx, "chisel", subcommand)


async def foundry_version(ctx: ToolContext) -> ToolResult:
    names = ("forge", "cast", "anvil", "chisel")
    results = await asyncio.gather(*(ctx.runner.run(_binary(ctx, name), ["--version"]) for name in names))
    lines = []
    for name, result in zip(names, results):
        version = result.stdout if result.success and result.stdout else "not installed"
        lines.append(f"{name.capitalize()}: {version}")
    return "\n".join(lines)


async def foundry_list_commands(ctx: ToolContext, tool: str) -> ToolResult:
    """
    List the subcommands a binary advertises in its ``--help`` output.

    Parsing is best effort; see ``foundry_mcp.help_parser``.
    """
    if tool not in LISTABLE_TOOLS:
        return {"error": f"Invalid tool. Expected one of: {', '.join(LISTABLE_TOOLS)}."}
    result = await ctx.runner.run(_binary(ctx, tool), ["--help"])
    if not result.success:
        return {"error": f"Error: {result.stderr or result.stdout or f'exit code {result.exit_code}'}"}

    commands = ctx.scanner.scan(result.stdout)
    listing = "\n".join(f"  - {command}" for command in commands)
    return (
        f"Available {tool} commands:\n{listing}\n\n"
        f"Use {tool}_help with a subcommand to get detailed help."
    )
