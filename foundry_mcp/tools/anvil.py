"""
anvil tools: local node lifecycle and node-control RPCs.

start/stop/status drive the ``NodeRegistry`` held by the tool context; every
other tool is a single JSON-RPC call against a node endpoint chosen by
``node_url``. RPC failures are reported as ``{"error": ...}`` dicts and never
raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from foundry_mcp.context import ToolContext
from foundry_mcp.nodes import NodeInstance
from foundry_mcp.process import build_args
from foundry_mcp.rpc import RpcError, local_url, to_quantity
from foundry_mcp.tools.common import ToolResult, check_address, check_url, first_error, node_url
from foundry_mcp.tools.validators import (
    is_hex_data,
    is_non_empty_string,
    is_non_negative_int,
    is_positive_int,
)

logger = logging.getLogger(__name__)

MAX_PORT = 65535
Quantity = Union[int, str]


def _check_port(port: Optional[int]) -> Optional[Dict[str, str]]:
    if port is not None and not (is_positive_int(port) and port <= MAX_PORT):
        return {"error": f"port must be an integer between 1 and {MAX_PORT}."}
    return None


def _check_positive(value: Any, label: str) -> Optional[Dict[str, str]]:
    if value is not None and not is_positive_int(value):
        return {"error": f"{label} must be a positive integer."}
    return None


async def _chain_id(ctx: ToolContext, port: int) -> Any:
    """Return the node's chain id; raises ``RpcError`` when nothing answers."""
    return await ctx.rpc.call(local_url(port), "eth_chainId")


# Lifecycle


async def anvil_start(
    ctx: ToolContext,
    port: Optional[int] = None,
    fork_url: Optional[str] = None,
    fork_block_number: Optional[int] = None,
    accounts: Optional[int] = None,
    balance: Optional[Union[int, float]] = None,
    block_time: Optional[int] = None,
    chain_id: Optional[int] = None,
    gas_limit: Optional[int] = None,
    gas_price: Optional[int] = None,
    mnemonic: Optional[str] = None,
    no_mining: Optional[bool] = None,
    silent: Optional[bool] = None,
) -> ToolResult:
    """
    Spawn a local anvil node and track it once it answers ``eth_chainId``.

    Args:
        port: Listening port, default 8545.
        fork_url / fork_block_number: Fork a remote chain, optionally pinned.
        accounts, balance, block_time, chain_id, gas_limit, gas_price,
        mnemonic, no_mining, silent: Passed through as anvil flags.

    Returns:
        Start report with PID and chain id, "already running" text for a
        tracked port, or an error dict when the node never came up.
    """
    error = first_error(
        _check_port(port),
        check_url(fork_url, "fork URL"),
        _check_positive(fork_block_number, "fork_block_number"),
        _check_positive(accounts, "accounts"),
        _check_positive(block_time, "block_time"),
        _check_positive(chain_id, "chain_id"),
        _check_positive(gas_limit, "gas_limit"),
    )
    if error:
        return error
    if balance is not None and (isinstance(balance, bool) or not isinstance(balance, (int, float)) or balance <= 0):
        return {"error": "balance must be a positive number."}
    if isinstance(balance, float) and balance.is_integer():
        balance = int(balance)
    if gas_price is not None and not is_non_negative_int(gas_price):
        return {"error": "gas_price must be a non-negative integer."}

    port = port or ctx.config.default_anvil_port
    if port in ctx.registry:
        return f"Anvil is already running on port {port}"

    args = build_args(
        {
            "port": port,
            "fork-url": fork_url,
            "fork-block-number": fork_block_number,
            "accounts": accounts,
            "balance": balance,
            "block-time": block_time,
            "chain-id": chain_id,
            "gas-limit": gas_limit,
            "gas-price": gas_price,
            "mnemonic": mnemonic,
            "no-mining": no_mining,
            "silent": silent,
        }
    )
    try:
        process = await ctx.runner.spawn(ctx.config.anvil_bin, args)
    except OSError as exc:
        logger.warning("anvil spawn failed port=%s: %s", port, exc)
        return {"error": f"Failed to start Anvil on port {port}: {exc}"}

    await asyncio.sleep(ctx.config.anvil_startup_delay)

    try:
        chain = await _chain_id(ctx, port)
    except RpcError as exc:
        logger.warning("anvil did not answer on port=%s: %s", port, exc)
        await ctx.runner.kill(process)
        return {"error": f"Failed to start Anvil on port {port}. Check if the port is available."}

    if port in ctx.registry:
        # Another start won the port during warm-up.
        await ctx.runner.kill(process)
        return f"Anvil is already running on port {port}"

    ctx.registry.register(NodeInstance(port=port, pid=process.pid, fork_url=fork_url, process=process))
    return f"Anvil started successfully on port {port}\nPID: {process.pid}\nChain ID: {chain}"


async def anvil_stop(ctx: ToolContext, port: Optional[int] = None) -> ToolResult:
    error = _check_port(port)
    if error:
        return error
    port = port or ctx.config.default_anvil_port
    instance = ctx.registry.get(port)
    if instance is None:
        return f"No Anvil instance tracked on port {port}"

    try:
        ctx.runner.terminate(instance.pid)
    except OSError as exc:
        ctx.registry.remove(port)
        return {"error": f"Error stopping Anvil: {exc}"}
    ctx.registry.remove(port)
    return f"Anvil stopped on port {port}"


async def anvil_status(ctx: ToolContext, port: Optional[int] = None) -> ToolResult:
    """
    Report liveness for one port, or for every tracked node.

    Tracked nodes that stop answering are dropped from the registry.
    """
    error = _check_port(port)
    if error:
        return error

    if port:
        instance = ctx.registry.get(port)
        try:
            chain = await _chain_id(ctx, port)
        except RpcError:
            if instance is None:
                return f"No Anvil instance running on port {port}"
            ctx.registry.remove(port)
            return f"Anvil on port {port} is not responding (removed from tracking)"
        if instance is None:
            return f"Anvil running on port {port} (untracked)\nChain ID: {chain}"
        return (
            f"Anvil running on port {port}\nPID: {instance.pid}\nChain ID: {chain}\n"
            f"Fork URL: {instance.fork_url or 'none'}"
        )

    if not len(ctx.registry):
        return "No tracked Anvil instances"

    lines: List[str] = []
    for instance in ctx.registry:
        try:
            chain = await _chain_id(ctx, instance.port)
        except RpcError:
            ctx.registry.remove(instance.port)
            lines.append(f"Port {instance.port}: Not responding (removed)")
            continue
        lines.append(f"Port {instance.port}: Running (PID: {instance.pid}, Chain ID: {chain})")
    return "\n".join(lines)


# Node control


async def anvil_mine(
    ctx: ToolContext,
    blocks: int = 1,
    interval: Optional[int] = None,
    rpc_url: Optional[str] = None,
    port: Optional[int] = None,
) -> ToolResult:
    error = first_error(
        _check_positive(blocks, "blocks"),
        _check_positive(interval, "interval"),
        check_url(rpc_url),
        _check_port(port),
    )
    if error:
        return error
    if blocks is None:
        blocks = 1
    params = [to_quantity(blocks)]
    if interval:
        params.append(to_quantity(interval))
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_mine", params)
    except RpcError as exc:
        return {"error": f"Error mining blocks: {exc}"}
    return f"Mined {blocks} block(s)"


async def anvil_set_balance(
    ctx: ToolContext,
    address: str,
    balance: Quantity,
    rpc_url: Optional[str] = None,
    port: Optional[int] = None,
) -> ToolResult:
    """Set an account balance; ``balance`` is wei as decimal or 0x-hex."""
    error = first_error(check_address(address), check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        amount = to_quantity(balance)
    except ValueError:
        return {"error": "balance must be a wei amount in decimal or 0x-prefixed hex."}
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_setBalance", [address, amount])
    except RpcError as exc:
        return {"error": f"Error setting balance: {exc}"}
    return f"Set balance of {address} to {balance} wei"


async def anvil_set_code(
    ctx: ToolContext,
    address: str,
    code: str,
    rpc_url: Optional[str] = None,
    port: Optional[int] = None,
) -> ToolResult:
    error = first_error(check_address(address), check_url(rpc_url), _check_port(port))
    if error:
        return error
    if not is_hex_data(code):
        return {"error": "code must be 0x-prefixed hex bytecode."}
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_setCode", [address, code])
    except RpcError as exc:
        return {"error": f"Error setting code: {exc}"}
    return f"Set code at {address}"


async def anvil_set_storage_at(
    ctx: ToolContext,
    address: str,
    slot: str,
    value: str,
    rpc_url: Optional[str] = None,
    port: Optional[int] = None,
) -> ToolResult:
    error = first_error(check_address(address), check_url(rpc_url), _check_port(port))
    if error:
        return error
    if not is_non_empty_string(slot) or not is_hex_data(value):
        return {"error": "slot is required and value must be 0x-prefixed hex."}
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_setStorageAt", [address, slot, value])
    except RpcError as exc:
        return {"error": f"Error setting storage: {exc}"}
    return f"Set storage at {address}[{slot}] = {value}"


async def anvil_impersonate_account(
    ctx: ToolContext, address: str, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    error = first_error(check_address(address), check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_impersonateAccount", [address])
    except RpcError as exc:
        return {"error": f"Error impersonating: {exc}"}
    return f"Now impersonating {address}"


async def anvil_stop_impersonating_account(
    ctx: ToolContext, address: str, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    error = first_error(check_address(address), check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_stopImpersonatingAccount", [address])
    except RpcError as exc:
        return {"error": f"Error stopping impersonation: {exc}"}
    return f"Stopped impersonating {address}"


async def anvil_snapshot(
    ctx: ToolContext, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    error = first_error(check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        snapshot_id = await ctx.rpc.call(node_url(ctx, rpc_url, port), "evm_snapshot")
    except RpcError as exc:
        return {"error": f"Error creating snapshot: {exc}"}
    return f"Snapshot created with ID: {snapshot_id}"


async def anvil_revert(
    ctx: ToolContext,
    snapshot_id: Quantity,
    rpc_url: Optional[str] = None,
    port: Optional[int] = None,
) -> ToolResult:
    """Restore a snapshot. Snapshot ids are single-use on anvil."""
    error = first_error(check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        identifier = to_quantity(snapshot_id)
    except ValueError:
        return {"error": "snapshot_id must be a snapshot id as returned by anvil_snapshot."}
    try:
        reverted = await ctx.rpc.call(node_url(ctx, rpc_url, port), "evm_revert", [identifier])
    except RpcError as exc:
        return {"error": f"Error reverting: {exc}"}
    if not reverted:
        return {"error": f"Failed to revert to snapshot {snapshot_id}"}
    return f"Reverted to snapshot {snapshot_id}"


async def anvil_set_next_block_timestamp(
    ctx: ToolContext, timestamp: int, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    error = first_error(_check_positive(timestamp, "timestamp"), check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        await ctx.rpc.call(
            node_url(ctx, rpc_url, port), "evm_setNextBlockTimestamp", [to_quantity(timestamp)]
        )
    except RpcError as exc:
        return {"error": f"Error setting next block timestamp: {exc}"}
    return f"Next block timestamp set to {timestamp}"


async def anvil_increase_time(
    ctx: ToolContext, seconds: int, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    error = first_error(_check_positive(seconds, "seconds"), check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "evm_increaseTime", [to_quantity(seconds)])
    except RpcError as exc:
        return {"error": f"Error increasing time: {exc}"}
    return f"Time increased by {seconds} seconds"


async def anvil_set_automine(
    ctx: ToolContext, enabled: bool, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    if not isinstance(enabled, bool):
        return {"error": "enabled must be a boolean."}
    error = first_error(check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "evm_setAutomine", [enabled])
    except RpcError as exc:
        return {"error": f"Error setting automine: {exc}"}
    return f"Auto-mining {'enabled' if enabled else 'disabled'}"


async def anvil_reset(
    ctx: ToolContext,
    fork_url: Optional[str] = None,
    fork_block_number: Optional[int] = None,
    rpc_url: Optional[str] = None,
    port: Optional[int] = None,
) -> ToolResult:
    """Reset the node, optionally re-forking from ``fork_url``."""
    error = first_error(
        check_url(fork_url, "fork URL"),
        _check_positive(fork_block_number, "fork_block_number"),
        check_url(rpc_url),
        _check_port(port),
    )
    if error:
        return error
    if fork_block_number and not fork_url:
        return {"error": "fork_block_number requires fork_url."}

    options: Dict[str, Any] = {}
    if fork_url:
        forking: Dict[str, Any] = {"jsonRpcUrl": fork_url}
        if fork_block_number:
            forking["blockNumber"] = fork_block_number
        options["forking"] = forking
    try:
        await ctx.rpc.call(node_url(ctx, rpc_url, port), "anvil_reset", [options])
    except RpcError as exc:
        return {"error": f"Error resetting: {exc}"}
    if not fork_url:
        return "Reset to empty state"
    suffix = f" at block {fork_block_number}" if fork_block_number else ""
    return f"Reset fork to {fork_url}{suffix}"


async def anvil_get_accounts(
    ctx: ToolContext, rpc_url: Optional[str] = None, port: Optional[int] = None
) -> ToolResult:
    error = first_error(check_url(rpc_url), _check_port(port))
    if error:
        return error
    try:
        accounts = await ctx.rpc.call(node_url(ctx, rpc_url, port), "eth_accounts")
    except RpcError as exc:
        return {"error": f"Error fetching accounts: {exc}"}
    return "Accounts:\n" + "\n".join(str(account) for account in accounts or [])
