import pytest
from fastapi.testclient import TestClient

from foundry_mcp import server as srv
from foundry_mcp.nodes import NodeInstance
from foundry_mcp.server import app


@pytest.fixture
def client(monkeypatch, ctx):
    monkeypatch.setattr(srv, "context", ctx)
    return TestClient(app)


def test_health_route(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json().get("status") == "ok"
    assert "X-Request-ID" in resp.headers


def test_metrics_counts_requests(client):
    client.get("/health")
    resp = client.get("/metrics")
    body = resp.json()
    assert body["requests"] >= 2
    assert "tool_success" in body
    assert "rpc_calls" in body


def test_nodes_route_lists_tracked_nodes(client, ctx):
    assert client.get("/nodes").json() == {"nodes": []}
    ctx.registry.register(NodeInstance(port=8545, pid=99, fork_url="https://eth.example"))
    nodes = client.get("/nodes").json()["nodes"]
    assert nodes[0]["port"] == 8545
    assert nodes[0]["pid"] == 99
    assert nodes[0]["forkUrl"] == "https://eth.example"


def test_tool_route_success(client, runner):
    resp = client.post("/tools/cast_sig", json={"sig": "transfer(address,uint256)"})
    assert resp.status_code == 200
    assert resp.json() == "ok"
    assert runner.last_args == ["sig", "transfer(address,uint256)"]


def test_tool_route_without_body(client, runner):
    resp = client.post("/tools/forge_clean")
    assert resp.status_code == 200
    assert runner.last_args == ["clean"]


def test_tool_route_validation_error(client):
    resp = client.post("/tools/cast_code", json={"address": "nope"})
    assert resp.status_code == 200
    assert resp.json() == {"error": "Invalid Ethereum contract address."}


def test_tool_route_unknown_tool(client):
    resp = client.post("/tools/does_not_exist", json={})
    assert resp.status_code == 404


def test_tool_route_accepts_camel_case_alias(client, rpc):
    resp = client.post("/tools/anvil_getAccounts", json={})
    assert resp.status_code == 200
    assert rpc.calls[-1]["method"] == "eth_accounts"


def test_tool_route_bad_body(client):
    resp = client.post("/tools/cast_sig", json=["transfer()"])
    assert resp.status_code == 400
    resp = client.post("/tools/cast_sig", content=b"{oops", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
