import io
import json

import pytest

from foundry_mcp import stdio
from foundry_mcp.gateway import PARSE_ERROR


def _responses(stdout: io.StringIO):
    return [json.loads(line) for line in stdout.getvalue().splitlines()]


@pytest.mark.asyncio
async def test_serve_answers_each_request_line(ctx):
    requests = [
        {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"protocolVersion": "2025-03-26"}},
        {"jsonrpc": "2.0", "method": "notifications/initialized"},
        {"jsonrpc": "2.0", "id": 2, "method": "ping"},
    ]
    stdin = io.StringIO("\n".join(json.dumps(r) for r in requests) + "\n\n")
    stdout = io.StringIO()
    await stdio.serve(ctx, stdin=stdin, stdout=stdout)
    responses = _responses(stdout)
    assert [r["id"] for r in responses] == [1, 2]
    assert responses[0]["result"]["serverInfo"]["name"] == "foundry-mcp-server"


@pytest.mark.asyncio
async def test_serve_reports_parse_errors_and_continues(ctx):
    stdin = io.StringIO('not json\n{"jsonrpc": "2.0", "id": 3, "method": "tools/list"}\n')
    stdout = io.StringIO()
    await stdio.serve(ctx, stdin=stdin, stdout=stdout)
    responses = _responses(stdout)
    assert responses[0]["error"]["code"] == PARSE_ERROR
    assert responses[1]["id"] == 3
    assert responses[1]["result"]["tools"]


@pytest.mark.asyncio
async def test_serve_calls_tools(ctx, runner):
    line = json.dumps(
        {
            "jsonrpc": "2.0",
            "id": 4,
            "method": "tools/call",
            "params": {"name": "cast_to_hex", "arguments": {"value": "255"}},
        }
    )
    stdout = io.StringIO()
    await stdio.serve(ctx, stdin=io.StringIO(line + "\n"), stdout=stdout)
    assert runner.last_args == ["to-hex", "255"]
    assert _responses(stdout)[0]["result"]["content"][0]["text"] == "ok"


@pytest.mark.asyncio
async def test_serve_stops_at_eof(ctx):
    stdout = io.StringIO()
    await stdio.serve(ctx, stdin=io.StringIO(""), stdout=stdout)
    assert stdout.getvalue() == ""
