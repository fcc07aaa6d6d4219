import pytest

from foundry_mcp.process import CommandResult
from foundry_mcp.tools.cast import (
    cast_abi_decode,
    cast_balance,
    cast_block,
    cast_call,
    cast_calldata_decode,
    cast_concat_hex,
    cast_create2,
    cast_estimate,
    cast_from_wei,
    cast_interface,
    cast_logs,
    cast_send,
    cast_to_base,
    cast_tx,
    cast_wallet_address,
    cast_wallet_sign,
)

RPC = "http://127.0.0.1:8545"
KEY = "0x" + "ab" * 32
TOKEN = "0x" + "11" * 20
HOLDER = "0x" + "22" * 20
TX_HASH = "0x" + "33" * 32
TRANSFER_TOPIC = "0x" + "dd" * 32


@pytest.mark.asyncio
async def test_cast_never_sets_cwd(ctx, runner):
    await cast_block(ctx, "latest", rpc_url=RPC)
    assert runner.calls[0]["program"] == "cast"
    assert runner.calls[0]["cwd"] is None
    assert runner.last_args == ["block", "latest", "--rpc-url", RPC]


@pytest.mark.asyncio
async def test_rpc_url_falls_back_to_config(ctx, runner):
    ctx.config.rpc_url = RPC
    await cast_balance(ctx, HOLDER, ether=True)
    assert runner.last_args == ["balance", HOLDER, "--ether", "--rpc-url", RPC]


@pytest.mark.asyncio
async def test_rpc_url_omitted_when_unset(ctx, runner):
    await cast_balance(ctx, HOLDER)
    assert runner.last_args == ["balance", HOLDER]


@pytest.mark.asyncio
async def test_invalid_rpc_url_rejected_before_run(ctx, runner):
    assert await cast_balance(ctx, HOLDER, rpc_url="ftp://node") == {"error": "Invalid RPC URL."}
    assert await cast_block(ctx, block="yesterday") == {"error": "Invalid block identifier."}
    assert runner.calls == []


@pytest.mark.asyncio
async def test_cast_call_arguments_then_flags(ctx, runner):
    await cast_call(
        ctx,
        TOKEN,
        "balanceOf(address)(uint256)",
        args=[HOLDER],
        from_address=HOLDER,
        block=19000000,
        rpc_url=RPC,
    )
    assert runner.last_args == [
        "call",
        TOKEN,
        "balanceOf(address)(uint256)",
        HOLDER,
        "--from",
        HOLDER,
        "--block",
        "19000000",
        "--rpc-url",
        RPC,
    ]


@pytest.mark.asyncio
async def test_cast_call_rejects_non_list_args(ctx, runner):
    result = await cast_call(ctx, TOKEN, "totalSupply()", args="1")
    assert result == {"error": "args must be a list of strings."}
    assert runner.calls == []


@pytest.mark.asyncio
async def test_cast_send_uses_default_key(ctx, runner):
    ctx.config.private_key = KEY
    await cast_send(ctx, TOKEN, "transfer(address,uint256)", args=[HOLDER, "1"], value="0", rpc_url=RPC)
    assert runner.last_args == [
        "send",
        TOKEN,
        "transfer(address,uint256)",
        HOLDER,
        "1",
        "--value",
        "0",
        "--private-key",
        KEY,
        "--rpc-url",
        RPC,
    ]


@pytest.mark.asyncio
async def test_cast_tx_requires_hash(ctx, runner):
    assert await cast_tx(ctx, "0x1234") == {"error": "Invalid transaction hash."}
    await cast_tx(ctx, TX_HASH, json=True)
    assert runner.last_args == ["tx", TX_HASH, "--json"]


@pytest.mark.asyncio
async def test_cast_estimate_without_signature(ctx, runner):
    await cast_estimate(ctx, TOKEN, value="1ether")
    assert runner.last_args == ["estimate", TOKEN, "--value", "1ether"]


@pytest.mark.asyncio
async def test_cast_logs_topics_are_positional(ctx, runner):
    await cast_logs(
        ctx,
        sig="Transfer(address,address,uint256)",
        address=TOKEN,
        from_block=1,
        to_block="latest",
        topics=[TRANSFER_TOPIC],
        rpc_url=RPC,
    )
    assert runner.last_args == [
        "logs",
        "Transfer(address,address,uint256)",
        TRANSFER_TOPIC,
        "--address",
        TOKEN,
        "--from-block",
        "1",
        "--to-block",
        "latest",
        "--rpc-url",
        RPC,
    ]


@pytest.mark.asyncio
async def test_cast_logs_topics_need_signature(ctx, runner):
    result = await cast_logs(ctx, topics=[TRANSFER_TOPIC])
    assert "error" in result
    assert runner.calls == []


@pytest.mark.asyncio
async def test_cast_abi_decode_checks_hex(ctx, runner):
    assert await cast_abi_decode(ctx, "f()(uint256)", "zz") == {"error": "Invalid hex data for data."}
    await cast_abi_decode(ctx, "f()(uint256)", "0x01", input=True)
    assert runner.last_args == ["abi-decode", "f()(uint256)", "0x01", "--input"]


@pytest.mark.asyncio
async def test_cast_calldata_decode_command_name(ctx, runner):
    await cast_calldata_decode(ctx, "transfer(address,uint256)", "0xa9059cbb")
    assert runner.last_args == ["calldata-decode", "transfer(address,uint256)", "0xa9059cbb"]


@pytest.mark.asyncio
async def test_cast_units_and_bases(ctx, runner):
    assert "Invalid unit" in (await cast_from_wei(ctx, "1", unit="bitcoin"))["error"]
    await cast_from_wei(ctx, "1000000000", unit="gwei")
    assert runner.last_args == ["from-wei", "1000000000", "gwei"]
    assert "Invalid base" in (await cast_to_base(ctx, "255", 3))["error"]
    await cast_to_base(ctx, "255", 16)
    assert runner.last_args == ["to-base", "255", "16"]


@pytest.mark.asyncio
async def test_cast_create2_flags(ctx, runner):
    await cast_create2(ctx, starts_with="dead", deployer=HOLDER)
    assert runner.last_args == ["create2", "--starts-with", "dead", "--deployer", HOLDER]
    assert await cast_create2(ctx, salt="nothex") == {"error": "Invalid hex data for salt."}


@pytest.mark.asyncio
async def test_cast_interface_rpc_only_for_addresses(ctx, runner):
    ctx.config.rpc_url = RPC
    await cast_interface(ctx, "out/Token.sol/Token.json", name="IToken")
    assert runner.last_args == ["interface", "out/Token.sol/Token.json", "-n", "IToken"]
    await cast_interface(ctx, TOKEN)
    assert runner.last_args == ["interface", TOKEN, "--rpc-url", RPC]


@pytest.mark.asyncio
async def test_cast_concat_hex_validates_every_value(ctx, runner):
    assert await cast_concat_hex(ctx, ["0x01", "02"]) == {"error": "Invalid hex value: 02"}
    assert "error" in await cast_concat_hex(ctx, [])
    await cast_concat_hex(ctx, ["0x01", "0x02"])
    assert runner.last_args == ["concat-hex", "0x01", "0x02"]


@pytest.mark.asyncio
async def test_wallet_tools_require_a_key(ctx, runner):
    assert await cast_wallet_address(ctx) == {"error": "Private key is required."}
    assert await cast_wallet_sign(ctx, "hello") == {"error": "Private key is required."}
    assert runner.calls == []


@pytest.mark.asyncio
async def test_wallet_sign_with_configured_key(ctx, runner):
    ctx.config.private_key = KEY
    runner.queue(CommandResult.from_exit(0, "0xsignature"))
    assert await cast_wallet_sign(ctx, "hello") == "0xsignature"
    assert runner.last_args == ["wallet", "sign", "hello", "--private-key", KEY]
