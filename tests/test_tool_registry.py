import inspect

import pytest

from foundry_mcp import mcp, tools


def test_every_exported_tool_is_registered():
    assert set(mcp.TOOL_REGISTRY) == set(tools.__all__)


def test_schemas_match_signatures():
    for name, definition in mcp.TOOL_REGISTRY.items():
        parameters = list(inspect.signature(definition.callable).parameters)
        assert parameters[0] == "ctx", name
        properties = definition.input_schema["properties"]
        assert set(properties) == set(parameters[1:]), name
        assert set(definition.input_schema["required"]) <= set(properties), name


def test_list_tools_shape():
    listed = mcp.list_tools()
    assert len(listed) == len(mcp.TOOL_REGISTRY)
    assert all(set(tool) == {"name", "description", "inputSchema"} for tool in listed)


@pytest.mark.asyncio
async def test_call_tool_unknown(ctx):
    assert await mcp.call_tool("nope", {}, ctx) == {"error": "Unknown tool: nope"}


@pytest.mark.asyncio
async def test_call_tool_missing_required(ctx, runner):
    assert await mcp.call_tool("cast_sig", {}, ctx) == {"error": "Invalid parameters."}
    assert runner.calls == []


@pytest.mark.asyncio
async def test_call_tool_hides_unexpected_exceptions(ctx, runner):
    async def explode(program, args=(), cwd=None):
        raise RuntimeError("secret detail")

    runner.run = explode
    result = await mcp.call_tool("forge_clean", None, ctx)
    assert result == {"error": "Unexpected error while calling tool."}


def test_aliases_point_at_registered_tools():
    for alias, target in mcp.TOOL_ALIASES.items():
        assert target in mcp.TOOL_REGISTRY, alias
        assert alias not in mcp.TOOL_REGISTRY


def test_aliases_not_listed():
    names = {tool["name"] for tool in mcp.list_tools()}
    assert names.isdisjoint(mcp.TOOL_ALIASES)


@pytest.mark.asyncio
async def test_call_tool_accepts_camel_case_alias(ctx, rpc):
    holder = "0x" + "11" * 20
    result = await mcp.call_tool("anvil_setBalance", {"address": holder, "balance": "0x10"}, ctx)
    assert result == f"Set balance of {holder} to 0x10 wei"
    assert rpc.calls[-1]["method"] == "anvil_setBalance"
    assert rpc.calls[-1]["params"] == [holder, "0x10"]
