"""cast tools: chain queries, transactions, ABI encoding and unit utilities."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

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
    run_cast,
)
from foundry_mcp.tools.validators import (
    ETH_UNITS,
    is_hex_data,
    is_non_empty_string,
    is_non_negative_int,
    is_string_list,
    is_valid_address,
    is_valid_block_id,
    is_valid_tx_hash,
)

BlockId = Union[int, str]
NUMBER_BASES = ("2", "8", "10", "16")


def _rpc_flags(ctx: ToolContext, rpc_url: Optional[str], **options: Any) -> List[str]:
    # rpc-url goes last so positional arguments can be prepended freely.
    options["rpc-url"] = resolve_rpc_url(ctx, rpc_url)
    return build_args(options)


def _require(value: Any, label: str) -> Optional[Dict[str, str]]:
    if not is_non_empty_string(value):
        return {"error": f"{label} is required."}
    return None


def _check_block(block: Optional[BlockId]) -> Optional[Dict[str, str]]:
    if block is not None and not is_valid_block_id(block):
        return {"error": "Invalid block identifier."}
    return None


def _check_hex(value: Optional[str], label: str) -> Optional[Dict[str, str]]:
    if not is_hex_data(value):
        return {"error": f"Invalid hex data for {label}."}
    return None


def _check_tx_hash(value: Optional[str]) -> Optional[Dict[str, str]]:
    if not is_valid_tx_hash(value):
        return {"error": "Invalid transaction hash."}
    return None


def _check_args(values: Optional[List[str]], label: str = "args") -> Optional[Dict[str, str]]:
    if values is not None and not is_string_list(values):
        return {"error": f"{label} must be a list of strings."}
    return None


def _check_unit(unit: Optional[str]) -> Optional[Dict[str, str]]:
    if unit is not None and unit not in ETH_UNITS:
        return {"error": f"Invalid unit. Expected one of: {', '.join(sorted(ETH_UNITS))}."}
    return None


def _block_arg(block: Optional[BlockId]) -> List[str]:
    return [] if block is None else [str(block)]


# Block & chain


async def cast_block(
    ctx: ToolContext,
    block: Optional[BlockId] = None,
    full: Optional[bool] = None,
    json: Optional[bool] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    error = first_error(_check_block(block), check_url(rpc_url))
    if error:
        return error
    flags = _rpc_flags(ctx, rpc_url, full=full, json=json)
    return await run_cast(ctx, ["block", *_block_arg(block), *flags])


async def cast_block_number(ctx: ToolContext, rpc_url: Optional[str] = None) -> ToolResult:
    error = check_url(rpc_url)
    if error:
        return error
    return await run_cast(ctx, ["block-number", *_rpc_flags(ctx, rpc_url)])


async def cast_chain(ctx: ToolContext, rpc_url: Optional[str] = None) -> ToolResult:
    error = check_url(rpc_url)
    if error:
        return error
    return await run_cast(ctx, ["chain", *_rpc_flags(ctx, rpc_url)])


async def cast_chain_id(ctx: ToolContext, rpc_url: Optional[str] = None) -> ToolResult:
    error = check_url(rpc_url)
    if error:
        return error
    return await run_cast(ctx, ["chain-id", *_rpc_flags(ctx, rpc_url)])


async def cast_client(ctx: ToolContext, rpc_url: Optional[str] = None) -> ToolResult:
    error = check_url(rpc_url)
    if error:
        return error
    return await run_cast(ctx, ["client", *_rpc_flags(ctx, rpc_url)])


async def cast_gas_price(ctx: ToolContext, rpc_url: Optional[str] = None) -> ToolResult:
    error = check_url(rpc_url)
    if error:
        return error
    return await run_cast(ctx, ["gas-price", *_rpc_flags(ctx, rpc_url)])


async def cast_base_fee(
    ctx: ToolContext, block: Optional[BlockId] = None, rpc_url: Optional[str] = None
) -> ToolResult:
    error = first_error(_check_block(block), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["base-fee", *_block_arg(block), *_rpc_flags(ctx, rpc_url)])


async def cast_age(
    ctx: ToolContext, block: Optional[BlockId] = None, rpc_url: Optional[str] = None
) -> ToolResult:
    """Timestamp of a block as a human-readable date."""
    error = first_error(_check_block(block), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["age", *_block_arg(block), *_rpc_flags(ctx, rpc_url)])


# Accounts


async def cast_balance(
    ctx: ToolContext,
    address: str,
    ether: Optional[bool] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    """Balance of an address or ENS name, in wei unless ``ether`` is set."""
    error = first_error(_require(address, "Address"), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["balance", address, *_rpc_flags(ctx, rpc_url, ether=ether)])


async def cast_nonce(ctx: ToolContext, address: str, rpc_url: Optional[str] = None) -> ToolResult:
    error = first_error(_require(address, "Address"), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["nonce", address, *_rpc_flags(ctx, rpc_url)])


async def cast_code(ctx: ToolContext, address: str, rpc_url: Optional[str] = None) -> ToolResult:
    error = first_error(check_address(address, "contract address"), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["code", address, *_rpc_flags(ctx, rpc_url)])


async def cast_storage(
    ctx: ToolContext, address: str, slot: str, rpc_url: Optional[str] = None
) -> ToolResult:
    error = first_error(
        check_address(address, "contract address"),
        _require(slot, "Storage slot"),
        check_url(rpc_url),
    )
    if error:
        return error
    return await run_cast(ctx, ["storage", address, slot, *_rpc_flags(ctx, rpc_url)])


# Transactions


async def cast_call(
    ctx: ToolContext,
    to: str,
    sig: str,
    args: Optional[List[str]] = None,
    from_address: Optional[str] = None,
    block: Optional[BlockId] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    """
    Read-only contract call (``eth_call``).

    Args:
        to: Target contract address or ENS name.
        sig: Function signature, e.g. ``balanceOf(address)``.
        args: Positional function arguments.
        from_address: Caller address for the simulated call.
        block: Block to evaluate against.
        rpc_url: Endpoint; falls back to the configured default.
    """
    error = first_error(
        _require(to, "Target address"),
        _require(sig, "Function signature"),
        _check_args(args),
        None if from_address is None else check_address(from_address, "sender address"),
        _check_block(block),
        check_url(rpc_url),
    )
    if error:
        return error
    flags = _rpc_flags(ctx, rpc_url, **{"from": from_address, "block": block})
    return await run_cast(ctx, ["call", to, sig, *(args or []), *flags])


async def cast_send(
    ctx: ToolContext,
    to: str,
    sig: str,
    args: Optional[List[str]] = None,
    value: Optional[str] = None,
    rpc_url: Optional[str] = None,
    private_key: Optional[str] = None,
    legacy: Optional[bool] = None,
    json: Optional[bool] = None,
) -> ToolResult:
    """Sign and send a transaction; the key falls back to the configured default."""
    error = first_error(
        _require(to, "Target address"),
        _require(sig, "Function signature"),
        _check_args(args),
        check_url(rpc_url),
        check_private_key(private_key),
    )
    if error:
        return error
    flags = _rpc_flags(
        ctx,
        rpc_url,
        value=value,
        **{"private-key": resolve_private_key(ctx, private_key)},
        legacy=legacy,
        json=json,
    )
    return await run_cast(ctx, ["send", to, sig, *(args or []), *flags])


async def cast_publish(ctx: ToolContext, tx: str, rpc_url: Optional[str] = None) -> ToolResult:
    error = first_error(_check_hex(tx, "tx"), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["publish", tx, *_rpc_flags(ctx, rpc_url)])


async def cast_tx(
    ctx: ToolContext, tx_hash: str, json: Optional[bool] = None, rpc_url: Optional[str] = None
) -> ToolResult:
    error = first_error(_check_tx_hash(tx_hash), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["tx", tx_hash, *_rpc_flags(ctx, rpc_url, json=json)])


async def cast_receipt(
    ctx: ToolContext, tx_hash: str, json: Optional[bool] = None, rpc_url: Optional[str] = None
) -> ToolResult:
    error = first_error(_check_tx_hash(tx_hash), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["receipt", tx_hash, *_rpc_flags(ctx, rpc_url, json=json)])


async def cast_run(
    ctx: ToolContext, tx_hash: str, debug: Optional[bool] = None, rpc_url: Optional[str] = None
) -> ToolResult:
    """Replay a mined transaction locally and print its trace."""
    error = first_error(_check_tx_hash(tx_hash), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["run", tx_hash, *_rpc_flags(ctx, rpc_url, debug=debug)])


async def cast_estimate(
    ctx: ToolContext,
    to: str,
    sig: Optional[str] = None,
    args: Optional[List[str]] = None,
    value: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    error = first_error(_require(to, "Target address"), _check_args(args), check_url(rpc_url))
    if error:
        return error
    positional = [to]
    if sig:
        positional.extend([sig, *(args or [])])
    return await run_cast(ctx, ["estimate", *positional, *_rpc_flags(ctx, rpc_url, value=value)])


async def cast_logs(
    ctx: ToolContext,
    sig: Optional[str] = None,
    address: Optional[str] = None,
    from_block: Optional[BlockId] = None,
    to_block: Optional[BlockId] = None,
    topics: Optional[List[str]] = None,
    json: Optional[bool] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    """Query logs by event signature (or topic0) plus further topic filters."""
    error = first_error(
        None if address is None else check_address(address, "contract address"),
        _check_block(from_block),
        _check_block(to_block),
        _check_args(topics, "topics"),
        check_url(rpc_url),
    )
    if error:
        return error
    if topics and not sig:
        return {"error": "topics require an event signature or topic0 in sig."}
    positional = [sig, *(topics or [])] if sig else []
    flags = _rpc_flags(
        ctx,
        rpc_url,
        address=address,
        **{"from-block": from_block, "to-block": to_block},
        json=json,
    )
    return await run_cast(ctx, ["logs", *positional, *flags])


# Encoding


async def cast_abi_encode(ctx: ToolContext, sig: str, args: List[str]) -> ToolResult:
    error = first_error(_require(sig, "Function signature"), _check_args(args))
    if error:
        return error
    return await run_cast(ctx, ["abi-encode", sig, *(args or [])])


async def cast_abi_decode(
    ctx: ToolContext, sig: str, data: str, input: Optional[bool] = None
) -> ToolResult:
    error = first_error(_require(sig, "Function signature"), _check_hex(data, "data"))
    if error:
        return error
    return await run_cast(ctx, ["abi-decode", sig, data, *build_args({"input": input})])


async def cast_calldata(ctx: ToolContext, sig: str, args: Optional[List[str]] = None) -> ToolResult:
    error = first_error(_require(sig, "Function signature"), _check_args(args))
    if error:
        return error
    return await run_cast(ctx, ["calldata", sig, *(args or [])])


async def cast_calldata_decode(ctx: ToolContext, sig: str, calldata: str) -> ToolResult:
    error = first_error(_require(sig, "Function signature"), _check_hex(calldata, "calldata"))
    if error:
        return error
    return await run_cast(ctx, ["calldata-decode", sig, calldata])


async def cast_sig(ctx: ToolContext, sig: str) -> ToolResult:
    error = _require(sig, "Function signature")
    if error:
        return error
    return await run_cast(ctx, ["sig", sig])


async def cast_sig_event(ctx: ToolContext, sig: str) -> ToolResult:
    error = _require(sig, "Event signature")
    if error:
        return error
    return await run_cast(ctx, ["sig-event", sig])


async def cast_4byte(ctx: ToolContext, selector: str) -> ToolResult:
    error = _check_hex(selector, "selector")
    if error:
        return error
    return await run_cast(ctx, ["4byte", selector])


async def cast_4byte_decode(ctx: ToolContext, calldata: str) -> ToolResult:
    error = _check_hex(calldata, "calldata")
    if error:
        return error
    return await run_cast(ctx, ["4byte-decode", calldata])


# Conversions and utilities


async def cast_to_wei(ctx: ToolContext, value: str, unit: Optional[str] = None) -> ToolResult:
    error = first_error(_require(value, "Value"), _check_unit(unit))
    if error:
        return error
    return await run_cast(ctx, ["to-wei", value, *([unit] if unit else [])])


async def cast_from_wei(ctx: ToolContext, value: str, unit: Optional[str] = None) -> ToolResult:
    error = first_error(_require(value, "Value"), _check_unit(unit))
    if error:
        return error
    return await run_cast(ctx, ["from-wei", value, *([unit] if unit else [])])


async def cast_to_hex(ctx: ToolContext, value: str) -> ToolResult:
    error = _require(value, "Value")
    if error:
        return error
    return await run_cast(ctx, ["to-hex", value])


async def cast_to_dec(ctx: ToolContext, value: str) -> ToolResult:
    error = _require(value, "Value")
    if error:
        return error
    return await run_cast(ctx, ["to-dec", value])


async def cast_to_base(ctx: ToolContext, value: str, base: Union[str, int]) -> ToolResult:
    error = _require(value, "Value")
    if error:
        return error
    if str(base) not in NUMBER_BASES:
        return {"error": f"Invalid base. Expected one of: {', '.join(NUMBER_BASES)}."}
    return await run_cast(ctx, ["to-base", value, str(base)])


async def cast_keccak(ctx: ToolContext, data: str) -> ToolResult:
    if not isinstance(data, str):
        return {"error": "data must be a string."}
    return await run_cast(ctx, ["keccak", data])


async def cast_resolve_name(ctx: ToolContext, name: str, rpc_url: Optional[str] = None) -> ToolResult:
    error = first_error(_require(name, "ENS name"), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["resolve-name", name, *_rpc_flags(ctx, rpc_url)])


async def cast_lookup_address(
    ctx: ToolContext, address: str, rpc_url: Optional[str] = None
) -> ToolResult:
    error = first_error(check_address(address), check_url(rpc_url))
    if error:
        return error
    return await run_cast(ctx, ["lookup-address", address, *_rpc_flags(ctx, rpc_url)])


async def cast_compute_address(
    ctx: ToolContext,
    address: str,
    nonce: Optional[int] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    """CREATE address for a deployer; the nonce is fetched over RPC when omitted."""
    error = first_error(check_address(address, "deployer address"), check_url(rpc_url))
    if error:
        return error
    if nonce is not None and not is_non_negative_int(nonce):
        return {"error": "nonce must be a non-negative integer."}
    return await run_cast(ctx, ["compute-address", address, *_rpc_flags(ctx, rpc_url, nonce=nonce)])


async def cast_create2(
    ctx: ToolContext,
    starts_with: Optional[str] = None,
    ends_with: Optional[str] = None,
    deployer: Optional[str] = None,
    init_code_hash: Optional[str] = None,
    salt: Optional[str] = None,
) -> ToolResult:
    if deployer is not None:
        error = check_address(deployer, "deployer address")
        if error:
            return error
    for label, value in (("init_code_hash", init_code_hash), ("salt", salt)):
        if value is not None:
            error = _check_hex(value, label)
            if error:
                return error
    args = build_args(
        {
            "starts-with": starts_with,
            "ends-with": ends_with,
            "deployer": deployer,
            "init-code-hash": init_code_hash,
            "salt": salt,
        }
    )
    return await run_cast(ctx, ["create2", *args])


async def cast_interface(
    ctx: ToolContext,
    address_or_path: str,
    name: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> ToolResult:
    error = first_error(_require(address_or_path, "address_or_path"), check_url(rpc_url))
    if error:
        return error
    flags = build_args({"n": name})
    if is_valid_address(address_or_path):
        flags.extend(_rpc_flags(ctx, rpc_url))
    return await run_cast(ctx, ["interface", address_or_path, *flags])


async def cast_format_bytes32(ctx: ToolContext, value: str) -> ToolResult:
    if not isinstance(value, str):
        return {"error": "value must be a string."}
    return await run_cast(ctx, ["format-bytes32-string", value])


async def cast_parse_bytes32(ctx: ToolContext, value: str) -> ToolResult:
    error = _check_hex(value, "value")
    if error:
        return error
    return await run_cast(ctx, ["parse-bytes32-string", value])


async def cast_concat_hex(ctx: ToolContext, values: List[str]) -> ToolResult:
    if not is_string_list(values) or not values:
        return {"error": "values must be a non-empty list of hex strings."}
    for value in values:
        if not is_hex_data(value):
            return {"error": f"Invalid hex value: {value}"}
    return await run_cast(ctx, ["concat-hex", *values])


# Wallet


async def cast_wallet_new(ctx: ToolContext, json: Optional[bool] = None) -> ToolResult:
    return await run_cast(ctx, ["wallet", "new", *build_args({"json": json})])


async def cast_wallet_address(ctx: ToolContext, private_key: Optional[str] = None) -> ToolResult:
    error = check_private_key(private_key)
    if error:
        return error
    key = resolve_private_key(ctx, private_key)
    if not key:
        return {"error": "Private key is required."}
    return await run_cast(ctx, ["wallet", "address", "--private-key", key])


async def cast_wallet_sign(
    ctx: ToolContext, message: str, private_key: Optional[str] = None
) -> ToolResult:
    if not isinstance(message, str):
        return {"error": "message must be a string."}
    error = check_private_key(private_key)
    if error:
        return error
    key = resolve_private_key(ctx, private_key)
    if not key:
        return {"error": "Private key is required."}
    return await run_cast(ctx, ["wallet", "sign", message, "--private-key", key])
