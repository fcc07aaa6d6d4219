import pytest
from fastapi.testclient import TestClient

from foundry_mcp import server as srv
from foundry_mcp.gateway import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    handle_request,
)
from foundry_mcp.metrics import default_metrics
from foundry_mcp.process import CommandResult
from foundry_mcp.server import MCP_SERVER_NAME, MCP_SERVER_VERSION, app


@pytest.fixture
def client(monkeypatch, ctx):
    monkeypatch.setattr(srv, "context", ctx)
    return TestClient(app)


def test_mcp_initialize(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 10,
            "method": "initialize",
            "params": {
                "protocolVersion": "2025-03-26",
                "capabilities": {},
                "clientInfo": {"name": "test-client", "version": "0.0.0"},
            },
        },
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert result["serverInfo"] == {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION}
    assert result["capabilities"]["tools"]["listChanged"] is False
    assert "resources" in result["capabilities"]
    assert "prompts" in result["capabilities"]


def test_mcp_initialize_requires_protocol_version(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}})
    assert resp.json()["error"]["code"] == INVALID_PARAMS


def test_mcp_tools_list(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 3, "method": "tools/list"})
    tools = resp.json()["result"]["tools"]
    names = {tool["name"] for tool in tools}
    assert {"forge_build", "cast_call", "anvil_start", "chisel_eval", "foundry_version"} <= names
    mine = next(tool for tool in tools if tool["name"] == "anvil_mine")
    assert mine["inputSchema"]["type"] == "object"
    assert "port" in mine["inputSchema"]["properties"]


def test_mcp_tools_call_success(client, runner):
    runner.queue(CommandResult.from_exit(0, "0x0000000000000000000000000000000000000000000000000000000000000100"))
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 4,
            "method": "tools/call",
            "params": {"name": "cast_abi_encode", "arguments": {"sig": "f(uint256)", "args": ["256"]}},
        },
    )
    body = resp.json()
    assert body["id"] == 4
    content = body["result"]["content"][0]
    assert content["type"] == "text"
    assert content["text"].endswith("100")
    assert "isError" not in body["result"]
    assert default_metrics.snapshot()["tool_success"] == {"cast_abi_encode": 1}


def test_mcp_tools_call_tool_error_in_band(client):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 5,
            "method": "call_tool",
            "params": {"tool": "cast_tx", "params": {"tx_hash": "0x1"}},
        },
    )
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"] == "Invalid transaction hash."
    assert default_metrics.snapshot()["tool_error"] == {"cast_tx": 1}


def test_mcp_tools_call_unknown_params(client, runner):
    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 6,
            "method": "tools/call",
            "params": {"name": "forge_build", "arguments": {"optimise": True}},
        },
    )
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"] == "Invalid parameters."
    assert runner.calls == []


def test_mcp_unknown_tool(client):
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 7, "method": "tools/call", "params": {"name": "rm_rf", "arguments": {}}},
    )
    assert resp.json()["result"]["content"][0]["text"] == "Unknown tool: rm_rf"


def test_mcp_parse_error(client):
    resp = client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == PARSE_ERROR


def test_mcp_non_object_body(client):
    resp = client.post("/mcp", json=[1, 2, 3])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == INVALID_REQUEST


def test_mcp_notification_has_no_body(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 204
    assert resp.content == b""


def test_mcp_method_not_found(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 8, "method": "sampling/createMessage"})
    assert resp.json()["error"]["code"] == METHOD_NOT_FOUND


def test_mcp_resources_and_prompts(client):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 9, "method": "resources/list"})
    assert any(r["uri"] == "foundry://docs" for r in resp.json()["result"]["resources"])

    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 10, "method": "resources/templates/list"})
    assert resp.json()["result"]["resourceTemplates"]

    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 11, "method": "resources/read", "params": {"uri": "foundry://missing"}},
    )
    assert resp.json()["error"] == {"code": INVALID_PARAMS, "message": "Resource not found: foundry://missing"}

    resp = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 12,
            "method": "prompts/get",
            "params": {"name": "explain_storage", "arguments": {"contract_name": "Vault"}},
        },
    )
    assert "Vault" in resp.json()["result"]["messages"][0]["content"]["text"]

    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 13, "method": "prompts/get", "params": {"name": "explain_storage"}},
    )
    assert resp.json()["error"]["code"] == INVALID_PARAMS


@pytest.mark.asyncio
async def test_handle_request_direct(ctx):
    assert await handle_request({"jsonrpc": "2.0", "id": 1, "method": "ping"}, ctx) == {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {},
    }
    assert await handle_request({"jsonrpc": "2.0", "method": "notifications/cancelled"}, ctx) is None
    bad_params = await handle_request({"jsonrpc": "2.0", "id": 2, "method": "tools/list", "params": [1]}, ctx)
    assert bad_params["error"]["code"] == INVALID_PARAMS
    not_a_dict = await handle_request("ping", ctx)
    assert not_a_dict["error"]["code"] == INVALID_REQUEST
