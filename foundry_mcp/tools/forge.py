"""forge tools: build, test, deploy and inspect contracts in the project directory."""

from __future__ import annotations

from typing import List, Optional, Union

from foundry_mcp.context import ToolContext
from foundry_mcp.process import build_args
from foundry_mcp.tools.common import (
    ToolResult,
    check_address,
    check_private_key,
    check_url,
    first_error,
    resolve_private_key,
    resolve_rpc_url,
    run_forge,
)
from foundry_mcp.tools.validators import (
    MAX_VERBOSITY,
    is_non_empty_string,
    is_non_negative_int,
    is_positive_int,
    is_string_list,
    is_valid_contract,
    verbosity_flag,
)

COVERAGE_REPORTS = ("summary", "lcov", "debug", "bytecode")
INSPECT_FIELDS = (
    "abi",
    "bytecode",
    "deployedBytecode",
    "assembly",
    "assemblyOptimized",
    "methodIdentifiers",
    "gasEstimates",
    "storageLayout",
    "devdoc",
    "userdoc",
    "metadata",
    "ir",
    "irOptimized",
    "ewasm",
    "errors",
    "events",
)


def _check_positive(value: Optional[int], label: str) -> Optional[dict]:
    if value is not None and not is_positive_int(value):
        return {"error": f"{label} must be a positive integer."}
    return None


def _check_verbosity(level: Optional[int]) -> Optional[dict]:
    if level is None:
        return None
    if not is_non_negative_int(level) or level > MAX_VERBOSITY:
        return {"error": f"Verbosity must be an integer between 0 and {MAX_VERBOSITY}."}
    return None


def _check_contract(contract: Optional[str]) -> Optional[dict]:
    if not is_valid_contract(contract):
        return {"error": "Invalid contract name."}
    return None


def _check_path(value: Optional[str], label: str = "File path") -> Optional[dict]:
    if not is_non_empty_string(value):
        return {"error": f"{label} is required."}
    return None


def _with_verbosity(args: List[str], level: Optional[int]) -> List[str]:
    flag = verbosity_flag(level)
    if flag:
        args.append(flag)
    return args


async def forge_init(
    ctx: ToolContext,
    name: str,
    template: Optional[str] = None,
    vscode: Optional[bool] = None,
    force: Optional[bool] = None,
) -> ToolResult:
    """Create a new Foundry project directory inside the project path."""
    error = _check_path(name, "Project name")
    if error:
        return error
    args = build_args({"template": template, "vscode": vscode, "force": force})
    return await run_forge(ctx, ["init", *args, name])


async def forge_build(
    ctx: ToolContext,
    optimize: Optional[bool] = None,
    optimizer_runs: Optional[int] = None,
    via_ir: Optional[bool] = None,
    force: Optional[bool] = None,
    sizes: Optional[bool] = None,
) -> ToolResult:
    error = _check_positive(optimizer_runs, "optimizer_runs")
    if error:
        return error
    args = build_args(
        {
            "optimize": optimize,
            "optimizer-runs": optimizer_runs,
            "via-ir": via_ir,
            "force": force,
            "sizes": sizes,
        }
    )
    return await run_forge(ctx, ["build", *args])


async def forge_test(
    ctx: ToolContext,
    match_test: Optional[str] = None,
    match_contract: Optional[str] = None,
    match_path: Optional[str] = None,
    fork_url: Optional[str] = None,
    fork_block_number: Optional[int] = None,
    verbosity: Optional[int] = None,
    gas_report: Optional[bool] = None,
    fuzz_runs: Optional[int] = None,
) -> ToolResult:
    """
    Run the project's Solidity tests.

    Args:
        match_test / match_contract / match_path: forge filter patterns.
        fork_url: Run against a fork of this endpoint.
        verbosity: 0-5, rendered as ``-v``..``-vvvvv``.
        gas_report: Print the gas report table.
        fuzz_runs: Override the configured fuzz run count.

    Returns:
        forge output, or an error dict when validation or the run fails.
    """
    error = first_error(
        check_url(fork_url, "fork URL"),
        _check_positive(fork_block_number, "fork_block_number"),
        _check_verbosity(verbosity),
        _check_positive(fuzz_runs, "fuzz_runs"),
    )
    if error:
        return error
    args = build_args(
        {
            "match-test": match_test,
            "match-contract": match_contract,
            "match-path": match_path,
            "fork-url": fork_url,
            "fork-block-number": fork_block_number,
            "gas-report": gas_report,
            "fuzz-runs": fuzz_runs,
        }
    )
    return await run_forge(ctx, _with_verbosity(["test", *args], verbosity))


async def forge_coverage(
    ctx: ToolContext,
    report: Optional[str] = None,
    ir_minimum: Optional[bool] = None,
) -> ToolResult:
    if report is not None and report not in COVERAGE_REPORTS:
        return {"error": f"Invalid report type. Expected one of: {', '.join(COVERAGE_REPORTS)}."}
    args = build_args({"report": report, "ir-minimum": ir_minimum})
    return await run_forge(ctx, ["coverage", *args])


async def forge_script(
    ctx: ToolContext,
    script: str,
    sig: Optional[str] = None,
    rpc_url: Optional[str] = None,
    broadcast: Optional[bool] = None,
    verify: Optional[bool] = None,
    resume: Optional[bool] = None,
    slow: Optional[bool] = None,
    private_key: Optional[str] = None,
    verbosity: Optional[int] = None,
) -> ToolResult:
    """Run a Solidity script; broadcasting uses the default key unless one is given."""
    error = first_error(
        _check_path(script, "Script path"),
        check_url(rpc_url),
        check_private_key(private_key),
        _check_verbosity(verbosity),
    )
    if error:
        return error
    args = build_args(
        {
            "sig": sig,
            "rpc-url": resolve_rpc_url(ctx, rpc_url),
            "broadcast": broadcast,
            "verify": verify,
            "resume": resume,
            "slow": slow,
            "private-key": resolve_private_key(ctx, private_key),
        }
    )
    return await run_forge(ctx, _with_verbosity(["script", script, *args], verbosity))


async def forge_create(
    ctx: ToolContext,
    contract: str,
    constructor_args: Optional[List[str]] = None,
    rpc_url: Optional[str] = None,
    private_key: Optional[str] = None,
    broadcast: Optional[bool] = None,
    verify: Optional[bool] = None,
    etherscan_api_key: Optional[str] = None,
    legacy: Optional[bool] = None,
) -> ToolResult:
    error = first_error(
        _check_contract(contract),
        check_url(rpc_url),
        check_private_key(private_key),
    )
    if error:
        return error
    if constructor_args is not None and not is_string_list(constructor_args):
        return {"error": "constructor_args must be a list of strings."}

    args = build_args(
        {
            "rpc-url": resolve_rpc_url(ctx, rpc_url),
            "private-key": resolve_private_key(ctx, private_key),
            "broadcast": broadcast,
            "verify": verify,
            "etherscan-api-key": etherscan_api_key,
            "legacy": legacy,
        }
    )
    # --constructor-args is variadic, so it has to come last.
    if constructor_args:
        args.extend(["--constructor-args", *constructor_args])
    return await run_forge(ctx, ["create", contract, *args])


async def forge_verify(
    ctx: ToolContext,
    address: str,
    contract: str,
    chain: Optional[Union[int, str]] = None,
    etherscan_api_key: Optional[str] = None,
    constructor_args: Optional[str] = None,
    watch: Optional[bool] = None,
) -> ToolResult:
    error = first_error(check_address(address, "contract address"), _check_contract(contract))
    if error:
        return error
    if chain is not None and not (is_positive_int(chain) or is_non_empty_string(chain)):
        return {"error": "chain must be a chain name or positive chain id."}
    args = build_args(
        {
            "chain": chain,
            "etherscan-api-key": etherscan_api_key,
            "constructor-args": constructor_args,
            "watch": watch,
        }
    )
    return await run_forge(ctx, ["verify-contract", address, contract, *args])


async def forge_flatten(ctx: ToolContext, contract: str, output: Optional[str] = None) -> ToolResult:
    error = _check_path(contract, "Contract path")
    if error:
        return error
    return await run_forge(ctx, ["flatten", contract, *build_args({"o": output})])


async def forge_inspect(
    ctx: ToolContext,
    contract: str,
    field: str,
    pretty: Optional[bool] = None,
) -> ToolResult:
    error = _check_contract(contract)
    if error:
        return error
    if field not in INSPECT_FIELDS:
        return {"error": f"Invalid inspect field: {field}."}
    return await run_forge(ctx, ["inspect", contract, field, *build_args({"pretty": pretty})])


async def forge_remappings(ctx: ToolContext) -> ToolResult:
    return await run_forge(ctx, ["remappings"])


async def forge_tree(ctx: ToolContext, no_dedupe: Optional[bool] = None) -> ToolResult:
    return await run_forge(ctx, ["tree", *build_args({"no-dedupe": no_dedupe})])


async def forge_clean(ctx: ToolContext) -> ToolResult:
    return await run_forge(ctx, ["clean"])


async def forge_install(
    ctx: ToolContext,
    dependency: str,
    no_commit: Optional[bool] = None,
    no_git: Optional[bool] = None,
) -> ToolResult:
    """Install a git dependency, e.g. ``openzeppelin/openzeppelin-contracts``."""
    error = _check_path(dependency, "Dependency")
    if error:
        return error
    args = build_args({"no-commit": no_commit, "no-git": no_git})
    return await run_forge(ctx, ["install", dependency, *args])


async def forge_update(ctx: ToolContext, dependency: Optional[str] = None) -> ToolResult:
    args = [dependency] if dependency else []
    return await run_forge(ctx, ["update", *args])


async def forge_fmt(ctx: ToolContext, check: Optional[bool] = None, raw: Optional[bool] = None) -> ToolResult:
    return await run_forge(ctx, ["fmt", *build_args({"check": check, "raw": raw})])


async def forge_snapshot(
    ctx: ToolContext,
    diff: Optional[str] = None,
    check: Optional[str] = None,
    match_test: Optional[str] = None,
) -> ToolResult:
    args = build_args({"diff": diff, "check": check, "match-test": match_test})
    return await run_forge(ctx, ["snapshot", *args])


async def forge_doc(
    ctx: ToolContext,
    build: Optional[bool] = None,
    serve: Optional[bool] = None,
    out: Optional[str] = None,
) -> ToolResult:
    return await run_forge(ctx, ["doc", *build_args({"build": build, "serve": serve, "out": out})])


async def forge_selectors(ctx: ToolContext, contract: Optional[str] = None) -> ToolResult:
    if contract is not None:
        error = _check_contract(contract)
        if error:
            return error
    args = [contract] if contract else []
    return await run_forge(ctx, ["selectors", "list", *args])


async def forge_bind(
    ctx: ToolContext,
    bindings_path: Optional[str] = None,
    crate_name: Optional[str] = None,
) -> ToolResult:
    args = build_args({"bindings-path": bindings_path, "crate-name": crate_name})
    return await run_forge(ctx, ["bind", *args])
