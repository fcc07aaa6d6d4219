"""
Tool registry for the MCP surface.

Maps tool names to their implementations and declared input schemas. The
registry is closed: anything not listed here cannot be called. Transport
concerns (JSON-RPC framing, HTTP, stdio) live in ``gateway``/``server``/``stdio``.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from foundry_mcp import tools
from foundry_mcp.context import ToolContext
from foundry_mcp.tools.forge import COVERAGE_REPORTS, INSPECT_FIELDS
from foundry_mcp.tools.help import LISTABLE_TOOLS
from foundry_mcp.tools.cast import NUMBER_BASES
from foundry_mcp.tools.validators import (
    ADDRESS_REGEX,
    ETH_UNITS,
    HEX_DATA_REGEX,
    MAX_VERBOSITY,
    PRIVATE_KEY_REGEX,
    TX_HASH_REGEX,
)

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = ADDRESS_REGEX.pattern
TX_HASH_PATTERN = TX_HASH_REGEX.pattern
HEX_PATTERN = HEX_DATA_REGEX.pattern


def _string(description: str, **extra: Any) -> Dict[str, Any]:
    return {"type": "string", "description": description, **extra}


def _integer(description: str, minimum: Optional[int] = None, maximum: Optional[int] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "integer", "description": description}
    if minimum is not None:
        schema["minimum"] = minimum
    if maximum is not None:
        schema["maximum"] = maximum
    return schema


def _boolean(description: str) -> Dict[str, Any]:
    return {"type": "boolean", "description": description}


def _string_list(description: str, **item_extra: Any) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string", **item_extra}, "description": description}


def _enum(description: str, values: Iterable[str]) -> Dict[str, Any]:
    return {"type": "string", "enum": list(values), "description": description}


RPC_URL = _string("RPC endpoint; defaults to the configured RPC_URL", format="uri")
FORK_URL = _string("Endpoint to fork from", format="uri")
PRIVATE_KEY = _string("Signing key; defaults to the configured PRIVATE_KEY", pattern=PRIVATE_KEY_REGEX.pattern)
ADDRESS = _string("20-byte hex address", pattern=ADDRESS_PATTERN)
TX_HASH = _string("Transaction hash", pattern=TX_HASH_PATTERN)
BLOCK = {"type": ["integer", "string"], "description": "Block number, hash, or tag (latest, earliest, pending, safe, finalized)"}
QUANTITY = {"type": ["integer", "string"], "description": "Decimal or 0x-prefixed hex quantity"}
VERBOSITY = _integer("Verbosity level, rendered as -v..-vvvvv", 0, MAX_VERBOSITY)
PORT = _integer("Local anvil port", 1, 65535)
NODE_PORT = _integer("Local anvil port to target when rpc_url is omitted", 1, 65535)
SIG = _string("Function signature, e.g. transfer(address,uint256)", minLength=1)
ARGS = _string_list("Positional arguments")
UNIT = _enum("Ether unit", sorted(ETH_UNITS))
CONTRACT = _string("Contract name or path:Name", minLength=1)


ToolCallable = Callable[..., Awaitable[Any]]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    callable: ToolCallable


def _tool(
    func: ToolCallable,
    description: str,
    properties: Optional[Dict[str, Any]] = None,
    required: Iterable[str] = (),
) -> ToolDefinition:
    return ToolDefinition(
        name=func.__name__,
        description=description,
        input_schema={
            "type": "object",
            "properties": properties or {},
            "required": list(required),
            "additionalProperties": False,
        },
        callable=func,
    )


_FORGE_TOOLS = [
    _tool(
        tools.forge_init,
        "Initialize a new Foundry project.",
        {
            "name": _string("Project name/directory", minLength=1),
            "template": _string("Template repository URL"),
            "vscode": _boolean("Create VSCode settings"),
            "force": _boolean("Initialize in a non-empty directory"),
        },
        ["name"],
    ),
    _tool(
        tools.forge_build,
        "Compile the project's Solidity contracts.",
        {
            "optimize": _boolean("Enable the optimizer"),
            "optimizer_runs": _integer("Optimizer runs", 1),
            "via_ir": _boolean("Use the IR-based code generator"),
            "force": _boolean("Force recompilation"),
            "sizes": _boolean("Print contract sizes"),
        },
    ),
    _tool(
        tools.forge_test,
        "Run the project's Solidity tests.",
        {
            "match_test": _string("Test name pattern"),
            "match_contract": _string("Contract name pattern"),
            "match_path": _string("File path glob"),
            "fork_url": FORK_URL,
            "fork_block_number": _integer("Fork block number", 1),
            "verbosity": VERBOSITY,
            "gas_report": _boolean("Print a gas report"),
            "fuzz_runs": _integer("Number of fuzz runs", 1),
        },
    ),
    _tool(
        tools.forge_coverage,
        "Generate a test coverage report.",
        {
            "report": _enum("Report type", COVERAGE_REPORTS),
            "ir_minimum": _boolean("Compile with minimal IR optimization"),
        },
    ),
    _tool(
        tools.forge_script,
        "Execute a Solidity deployment or automation script.",
        {
            "script": _string("Script path, e.g. script/Deploy.s.sol", minLength=1),
            "sig": _string("Function signature to call (default run())"),
            "rpc_url": RPC_URL,
            "broadcast": _boolean("Broadcast the transactions"),
            "verify": _boolean("Verify deployed contracts"),
            "resume": _boolean("Resume a failed broadcast"),
            "slow": _boolean("Wait for each receipt before sending the next"),
            "private_key": PRIVATE_KEY,
            "verbosity": VERBOSITY,
        },
        ["script"],
    ),
    _tool(
        tools.forge_create,
        "Deploy a single contract.",
        {
            "contract": CONTRACT,
            "constructor_args": _string_list("Constructor arguments"),
            "rpc_url": RPC_URL,
            "private_key": PRIVATE_KEY,
            "broadcast": _boolean("Broadcast the deployment"),
            "verify": _boolean("Verify after deployment"),
            "etherscan_api_key": _string("Etherscan API key"),
            "legacy": _boolean("Use legacy transactions"),
        },
        ["contract"],
    ),
    _tool(
        tools.forge_verify,
        "Verify a deployed contract on a block explorer.",
        {
            "address": ADDRESS,
            "contract": CONTRACT,
            "chain": {"type": ["integer", "string"], "description": "Chain name or id"},
            "etherscan_api_key": _string("Etherscan API key"),
            "constructor_args": _string("ABI-encoded constructor arguments", pattern=HEX_PATTERN),
            "watch": _boolean("Poll until verification finishes"),
        },
        ["address", "contract"],
    ),
    _tool(
        tools.forge_flatten,
        "Flatten a source file and its imports into one file.",
        {"contract": _string("Source file to flatten", minLength=1), "output": _string("Output file path")},
        ["contract"],
    ),
    _tool(
        tools.forge_inspect,
        "Inspect a compiled contract (ABI, bytecode, storage layout, ...).",
        {
            "contract": CONTRACT,
            "field": _enum("Artifact field", INSPECT_FIELDS),
            "pretty": _boolean("Pretty-print JSON output"),
        },
        ["contract", "field"],
    ),
    _tool(tools.forge_remappings, "Show the project's import remappings."),
    _tool(tools.forge_tree, "Show the dependency tree.", {"no_dedupe": _boolean("Do not dedupe dependencies")}),
    _tool(tools.forge_clean, "Remove build artifacts and cache."),
    _tool(
        tools.forge_install,
        "Install a git dependency.",
        {
            "dependency": _string("Dependency, e.g. openzeppelin/openzeppelin-contracts", minLength=1),
            "no_commit": _boolean("Do not commit the change"),
            "no_git": _boolean("Skip git operations"),
        },
        ["dependency"],
    ),
    _tool(tools.forge_update, "Update dependencies.", {"dependency": _string("Single dependency to update")}),
    _tool(
        tools.forge_fmt,
        "Format Solidity sources.",
        {"check": _boolean("Only check formatting"), "raw": _boolean("Print formatted output")},
    ),
    _tool(
        tools.forge_snapshot,
        "Create or compare gas snapshots.",
        {
            "diff": _string("Snapshot file to diff against"),
            "check": _string("Snapshot file to check against"),
            "match_test": _string("Test name pattern"),
        },
    ),
    _tool(
        tools.forge_doc,
        "Generate documentation from NatSpec.",
        {"build": _boolean("Build the book"), "serve": _boolean("Serve locally"), "out": _string("Output directory")},
    ),
    _tool(tools.forge_selectors, "List function selectors.", {"contract": CONTRACT}),
    _tool(
        tools.forge_bind,
        "Generate Rust bindings.",
        {"bindings_path": _string("Output path"), "crate_name": _string("Crate name")},
    ),
]

_CAST_TOOLS = [
    _tool(
        tools.cast_block,
        "Get information about a block.",
        {"block": BLOCK, "full": _boolean("Include full transactions"), "json": _boolean("JSON output"), "rpc_url": RPC_URL},
    ),
    _tool(tools.cast_block_number, "Get the latest block number.", {"rpc_url": RPC_URL}),
    _tool(tools.cast_chain, "Get the symbolic chain name.", {"rpc_url": RPC_URL}),
    _tool(tools.cast_chain_id, "Get the chain id.", {"rpc_url": RPC_URL}),
    _tool(tools.cast_client, "Get the node client version.", {"rpc_url": RPC_URL}),
    _tool(tools.cast_gas_price, "Get the current gas price.", {"rpc_url": RPC_URL}),
    _tool(tools.cast_base_fee, "Get the base fee of a block.", {"block": BLOCK, "rpc_url": RPC_URL}),
    _tool(tools.cast_age, "Get a block's timestamp as a date.", {"block": BLOCK, "rpc_url": RPC_URL}),
    _tool(
        tools.cast_balance,
        "Get the balance of an address or ENS name.",
        {"address": _string("Address or ENS name", minLength=1), "ether": _boolean("Show in ether"), "rpc_url": RPC_URL},
        ["address"],
    ),
    _tool(
        tools.cast_nonce,
        "Get the nonce of an address.",
        {"address": _string("Address or ENS name", minLength=1), "rpc_url": RPC_URL},
        ["address"],
    ),
    _tool(tools.cast_code, "Get the runtime bytecode at an address.", {"address": ADDRESS, "rpc_url": RPC_URL}, ["address"]),
    _tool(
        tools.cast_storage,
        "Read a storage slot.",
        {"address": ADDRESS, "slot": _string("Slot number or hex", minLength=1), "rpc_url": RPC_URL},
        ["address", "slot"],
    ),
    _tool(
        tools.cast_call,
        "Call a contract function without sending a transaction.",
        {
            "to": _string("Target address or ENS name", minLength=1),
            "sig": SIG,
            "args": ARGS,
            "from_address": ADDRESS,
            "block": BLOCK,
            "rpc_url": RPC_URL,
        },
        ["to", "sig"],
    ),
    _tool(
        tools.cast_send,
        "Sign and send a transaction.",
        {
            "to": _string("Target address or ENS name", minLength=1),
            "sig": SIG,
            "args": ARGS,
            "value": _string("Value to send, e.g. 1ether"),
            "rpc_url": RPC_URL,
            "private_key": PRIVATE_KEY,
            "legacy": _boolean("Use legacy transactions"),
            "json": _boolean("JSON output"),
        },
        ["to", "sig"],
    ),
    _tool(
        tools.cast_publish,
        "Publish a signed raw transaction.",
        {"tx": _string("Signed transaction", pattern=HEX_PATTERN), "rpc_url": RPC_URL},
        ["tx"],
    ),
    _tool(
        tools.cast_tx,
        "Get a transaction.",
        {"tx_hash": TX_HASH, "json": _boolean("JSON output"), "rpc_url": RPC_URL},
        ["tx_hash"],
    ),
    _tool(
        tools.cast_receipt,
        "Get a transaction receipt.",
        {"tx_hash": TX_HASH, "json": _boolean("JSON output"), "rpc_url": RPC_URL},
        ["tx_hash"],
    ),
    _tool(
        tools.cast_run,
        "Replay a transaction locally and print its trace.",
        {"tx_hash": TX_HASH, "debug": _boolean("Open the debugger"), "rpc_url": RPC_URL},
        ["tx_hash"],
    ),
    _tool(
        tools.cast_estimate,
        "Estimate gas for a transaction.",
        {
            "to": _string("Target address", minLength=1),
            "sig": SIG,
            "args": ARGS,
            "value": _string("Value to send"),
            "rpc_url": RPC_URL,
        },
        ["to"],
    ),
    _tool(
        tools.cast_logs,
        "Query event logs.",
        {
            "sig": _string("Event signature or topic0"),
            "address": ADDRESS,
            "from_block": BLOCK,
            "to_block": BLOCK,
            "topics": _string_list("Additional topic filters"),
            "json": _boolean("JSON output"),
            "rpc_url": RPC_URL,
        },
    ),
    _tool(tools.cast_abi_encode, "ABI-encode arguments.", {"sig": SIG, "args": ARGS}, ["sig", "args"]),
    _tool(
        tools.cast_abi_decode,
        "ABI-decode output (or input) data.",
        {
            "sig": SIG,
            "data": _string("Hex data", pattern=HEX_PATTERN),
            "input": _boolean("Decode as input data"),
        },
        ["sig", "data"],
    ),
    _tool(tools.cast_calldata, "Encode a function call as calldata.", {"sig": SIG, "args": ARGS}, ["sig"]),
    _tool(
        tools.cast_calldata_decode,
        "Decode calldata with a function signature.",
        {"sig": SIG, "calldata": _string("Calldata", pattern=HEX_PATTERN)},
        ["sig", "calldata"],
    ),
    _tool(tools.cast_sig, "Get the 4-byte selector of a function signature.", {"sig": SIG}, ["sig"]),
    _tool(
        tools.cast_sig_event,
        "Get the topic0 hash of an event signature.",
        {"sig": _string("Event signature", minLength=1)},
        ["sig"],
    ),
    _tool(
        tools.cast_4byte,
        "Look up function signatures for a selector.",
        {"selector": _string("4-byte selector, e.g. 0xa9059cbb", pattern=HEX_PATTERN)},
        ["selector"],
    ),
    _tool(
        tools.cast_4byte_decode,
        "Decode calldata by looking up its selector.",
        {"calldata": _string("Calldata", pattern=HEX_PATTERN)},
        ["calldata"],
    ),
    _tool(tools.cast_to_wei, "Convert a value to wei.", {"value": _string("Value"), "unit": UNIT}, ["value"]),
    _tool(tools.cast_from_wei, "Convert wei to another unit.", {"value": _string("Wei amount"), "unit": UNIT}, ["value"]),
    _tool(tools.cast_to_hex, "Convert a number to hex.", {"value": _string("Value")}, ["value"]),
    _tool(tools.cast_to_dec, "Convert hex to decimal.", {"value": _string("Hex value")}, ["value"]),
    _tool(
        tools.cast_to_base,
        "Convert a number to another base.",
        {"value": _string("Value"), "base": _enum("Target base", NUMBER_BASES)},
        ["value", "base"],
    ),
    _tool(tools.cast_keccak, "Hash data with keccak256.", {"data": _string("String or 0x hex")}, ["data"]),
    _tool(
        tools.cast_resolve_name,
        "Resolve an ENS name.",
        {"name": _string("ENS name", minLength=1), "rpc_url": RPC_URL},
        ["name"],
    ),
    _tool(tools.cast_lookup_address, "Reverse-resolve an address to ENS.", {"address": ADDRESS, "rpc_url": RPC_URL}, ["address"]),
    _tool(
        tools.cast_compute_address,
        "Compute a CREATE deployment address.",
        {"address": ADDRESS, "nonce": _integer("Deployer nonce", 0), "rpc_url": RPC_URL},
        ["address"],
    ),
    _tool(
        tools.cast_create2,
        "Compute or mine a CREATE2 address.",
        {
            "starts_with": _string("Desired address prefix"),
            "ends_with": _string("Desired address suffix"),
            "deployer": ADDRESS,
            "init_code_hash": _string("Init code hash", pattern=HEX_PATTERN),
            "salt": _string("Salt", pattern=HEX_PATTERN),
        },
    ),
    _tool(
        tools.cast_interface,
        "Generate a Solidity interface from an ABI.",
        {
            "address_or_path": _string("Contract address or ABI file path", minLength=1),
            "name": _string("Interface name"),
            "rpc_url": RPC_URL,
        },
        ["address_or_path"],
    ),
    _tool(tools.cast_format_bytes32, "Encode a string as bytes32.", {"value": _string("String")}, ["value"]),
    _tool(
        tools.cast_parse_bytes32,
        "Decode bytes32 to a string.",
        {"value": _string("bytes32 hex", pattern=HEX_PATTERN)},
        ["value"],
    ),
    _tool(
        tools.cast_concat_hex,
        "Concatenate hex strings.",
        {"values": _string_list("Hex values", pattern=HEX_PATTERN)},
        ["values"],
    ),
    _tool(tools.cast_wallet_new, "Generate a random wallet.", {"json": _boolean("JSON output")}),
    _tool(tools.cast_wallet_address, "Derive the address of a private key.", {"private_key": PRIVATE_KEY}),
    _tool(
        tools.cast_wallet_sign,
        "Sign a message.",
        {"message": _string("Message"), "private_key": PRIVATE_KEY},
        ["message"],
    ),
]

_NODE_TARGET = {"rpc_url": RPC_URL, "port": NODE_PORT}

_ANVIL_TOOLS = [
    _tool(
        tools.anvil_start,
        "Start a local anvil node and track it by port.",
        {
            "port": PORT,
            "fork_url": FORK_URL,
            "fork_block_number": _integer("Fork block number", 1),
            "accounts": _integer("Number of dev accounts", 1),
            "balance": {"type": "number", "exclusiveMinimum": 0, "description": "ETH per dev account"},
            "block_time": _integer("Block time in seconds", 1),
            "chain_id": _integer("Chain id", 1),
            "gas_limit": _integer("Block gas limit", 1),
            "gas_price": _integer("Gas price in wei", 0),
            "mnemonic": _string("BIP39 mnemonic"),
            "no_mining": _boolean("Disable auto-mining"),
            "silent": _boolean("Suppress startup output"),
        },
    ),
    _tool(tools.anvil_stop, "Stop a tracked anvil node.", {"port": PORT}),
    _tool(tools.anvil_status, "Check one anvil port, or every tracked node.", {"port": PORT}),
    _tool(
        tools.anvil_mine,
        "Mine one or more blocks.",
        {"blocks": _integer("Blocks to mine", 1), "interval": _integer("Seconds between blocks", 1), **_NODE_TARGET},
    ),
    _tool(
        tools.anvil_set_balance,
        "Set the balance of an address.",
        {"address": ADDRESS, "balance": QUANTITY, **_NODE_TARGET},
        ["address", "balance"],
    ),
    _tool(
        tools.anvil_set_code,
        "Set the bytecode at an address.",
        {"address": ADDRESS, "code": _string("Bytecode", pattern=HEX_PATTERN), **_NODE_TARGET},
        ["address", "code"],
    ),
    _tool(
        tools.anvil_set_storage_at,
        "Set a storage slot.",
        {
            "address": ADDRESS,
            "slot": _string("Slot", minLength=1),
            "value": _string("32-byte value", pattern=HEX_PATTERN),
            **_NODE_TARGET,
        },
        ["address", "slot", "value"],
    ),
    _tool(
        tools.anvil_impersonate_account,
        "Send transactions as an address without its key.",
        {"address": ADDRESS, **_NODE_TARGET},
        ["address"],
    ),
    _tool(
        tools.anvil_stop_impersonating_account,
        "Stop impersonating an address.",
        {"address": ADDRESS, **_NODE_TARGET},
        ["address"],
    ),
    _tool(tools.anvil_snapshot, "Snapshot the node state.", dict(_NODE_TARGET)),
    _tool(
        tools.anvil_revert,
        "Revert to a snapshot.",
        {"snapshot_id": QUANTITY, **_NODE_TARGET},
        ["snapshot_id"],
    ),
    _tool(
        tools.anvil_set_next_block_timestamp,
        "Set the timestamp of the next block.",
        {"timestamp": _integer("Unix timestamp", 1), **_NODE_TARGET},
        ["timestamp"],
    ),
    _tool(
        tools.anvil_increase_time,
        "Advance the chain clock.",
        {"seconds": _integer("Seconds to add", 1), **_NODE_TARGET},
        ["seconds"],
    ),
    _tool(
        tools.anvil_set_automine,
        "Enable or disable auto-mining.",
        {"enabled": _boolean("Auto-mine each transaction"), **_NODE_TARGET},
        ["enabled"],
    ),
    _tool(
        tools.anvil_reset,
        "Reset the node, optionally to a new fork.",
        {"fork_url": FORK_URL, "fork_block_number": _integer("Fork block number", 1), **_NODE_TARGET},
    ),
    _tool(tools.anvil_get_accounts, "List the node's dev accounts.", dict(_NODE_TARGET)),
]

_CHISEL_TOOLS = [
    _tool(
        tools.chisel_eval,
        "Evaluate a Solidity expression.",
        {"code": _string("Solidity expression", minLength=1), "fork_url": FORK_URL},
        ["code"],
    ),
    _tool(
        tools.chisel_run,
        "Run several Solidity statements in one session.",
        {"code": _string("Solidity statements", minLength=1), "fork_url": FORK_URL},
        ["code"],
    ),
    _tool(tools.chisel_list, "List saved chisel sessions."),
    _tool(tools.chisel_load, "Load a saved chisel session.", {"id": _string("Session id", minLength=1)}, ["id"]),
    _tool(tools.chisel_view, "View a saved chisel session.", {"id": _string("Session id", minLength=1)}, ["id"]),
    _tool(tools.chisel_clear_cache, "Clear the chisel cache."),
]

_SUBCOMMAND = {"subcommand": _string("Subcommand(s), e.g. 'test' or 'wallet sign'")}

_HELP_TOOLS = [
    _tool(tools.forge_help, "Show forge help, optionally for a subcommand.", dict(_SUBCOMMAND)),
    _tool(tools.cast_help, "Show cast help, optionally for a subcommand.", dict(_SUBCOMMAND)),
    _tool(tools.anvil_help, "Show anvil's full flag reference."),
    _tool(tools.chisel_help, "Show chisel help, optionally for a subcommand.", dict(_SUBCOMMAND)),
    _tool(tools.foundry_version, "Show the installed version of each Foundry binary."),
    _tool(
        tools.foundry_list_commands,
        "List the subcommands a Foundry binary advertises.",
        {"tool": _enum("Binary", LISTABLE_TOOLS)},
        ["tool"],
    ),
]

TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    definition.name: definition
    for definition in (*_FORGE_TOOLS, *_CAST_TOOLS, *_ANVIL_TOOLS, *_CHISEL_TOOLS, *_HELP_TOOLS)
}

# camelCase names for the node-control tools, accepted by call_tool only.
TOOL_ALIASES: Dict[str, str] = {
    "anvil_setBalance": "anvil_set_balance",
    "anvil_setCode": "anvil_set_code",
    "anvil_setStorageAt": "anvil_set_storage_at",
    "anvil_impersonateAccount": "anvil_impersonate_account",
    "anvil_stopImpersonatingAccount": "anvil_stop_impersonating_account",
    "anvil_setNextBlockTimestamp": "anvil_set_next_block_timestamp",
    "anvil_increaseTime": "anvil_increase_time",
    "anvil_setAutomine": "anvil_set_automine",
    "anvil_getAccounts": "anvil_get_accounts",
}


def list_tools() -> List[Dict[str, Any]]:
    """Return the tool catalogue in MCP ``tools/list`` shape."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


async def call_tool(tool_name: str, params: Optional[Dict[str, Any]], ctx: ToolContext) -> Any:
    """Dispatch to a tool by name with ``ctx`` as its first argument."""
    params = params or {}
    tool = TOOL_REGISTRY.get(TOOL_ALIASES.get(tool_name, tool_name))
    if tool is None:
        return {"error": f"Unknown tool: {tool_name}"}

    # Reject unknown or missing parameters before anything runs.
    try:
        bound = inspect.signature(tool.callable).bind(ctx, **params)
    except TypeError:
        return {"error": "Invalid parameters."}

    try:
        return await tool.callable(*bound.args, **bound.kwargs)
    except Exception:
        logger.exception("Unexpected error in tool=%s", tool_name, extra={"tool": tool_name})
        return {"error": "Unexpected error while calling tool."}
