"""chisel tools: evaluate Solidity snippets and manage saved REPL sessions."""

from __future__ import annotations

from typing import List, Optional

from foundry_mcp.context import ToolContext
from foundry_mcp.process import CommandResult
from foundry_mcp.shell_pipe import pipe_expression, pipe_source
from foundry_mcp.tools.common import ToolResult, check_url, resolve_rpc_url, run_chisel
from foundry_mcp.tools.validators import is_non_empty_string

# Markers chisel prints in front of an evaluated value.
RESULT_MARKERS = ("Type:", "├", "└")
EVAL_PLACEHOLDER = "Expression evaluated (no output)"
RUN_PLACEHOLDER = "Code executed successfully"


def _fork_args(ctx: ToolContext, fork_url: Optional[str]) -> List[str]:
    url = resolve_rpc_url(ctx, fork_url)
    return ["--fork-url", url] if url else []


def extract_result(stdout: str) -> str:
    """Keep the value block chisel prints, dropping the banner and prompts."""
    lines = [line for line in stdout.splitlines() if line.strip()]
    for index, line in enumerate(lines):
        if any(marker in line for marker in RESULT_MARKERS):
            return "\n".join(lines[index:])
    return stdout.strip()


def _failure(result: CommandResult) -> dict:
    return {"error": f"Error: {result.stderr or result.stdout or f'exit code {result.exit_code}'}"}


async def chisel_eval(ctx: ToolContext, code: str, fork_url: Optional[str] = None) -> ToolResult:
    """
    Evaluate one Solidity expression.

    Args:
        code: Expression such as ``uint256(1) << 8``.
        fork_url: Fork endpoint; defaults to the configured RPC URL.

    Returns:
        The evaluated value block, or an error dict when chisel fails.
    """
    if not is_non_empty_string(code):
        return {"error": "Solidity code is required."}
    error = check_url(fork_url, "fork URL")
    if error:
        return error
    result = await pipe_expression(
        ctx.runner,
        code,
        ctx.config.chisel_bin,
        _fork_args(ctx, fork_url),
        shell=ctx.config.shell,
    )
    if not result.success:
        return _failure(result)
    return extract_result(result.stdout) or EVAL_PLACEHOLDER


async def chisel_run(ctx: ToolContext, code: str, fork_url: Optional[str] = None) -> ToolResult:
    """Run several statements in one session and return the full transcript."""
    if not is_non_empty_string(code):
        return {"error": "Solidity code is required."}
    error = check_url(fork_url, "fork URL")
    if error:
        return error
    result = await pipe_source(
        ctx.runner,
        code,
        ctx.config.chisel_bin,
        _fork_args(ctx, fork_url),
        shell=ctx.config.shell,
    )
    if not result.success:
        return _failure(result)
    return result.stdout or RUN_PLACEHOLDER


async def chisel_list(ctx: ToolContext) -> ToolResult:
    return await run_chisel(ctx, ["list"])


async def chisel_load(ctx: ToolContext, id: str) -> ToolResult:
    if not is_non_empty_string(id):
        return {"error": "Session id is required."}
    return await run_chisel(ctx, ["load", id])


async def chisel_view(ctx: ToolContext, id: str) -> ToolResult:
    if not is_non_empty_string(id):
        return {"error": "Session id is required."}
    return await run_chisel(ctx, ["view", id])


async def chisel_clear_cache(ctx: ToolContext) -> ToolResult:
    return await run_chisel(ctx, ["clear-cache"])
