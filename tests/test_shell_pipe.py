import re
from pathlib import Path

import pytest

from foundry_mcp.shell_pipe import pipe_expression, pipe_source, single_quote, source_file


def test_single_quote_escapes_embedded_quotes():
    assert single_quote("plain") == "'plain'"
    assert single_quote("it's") == "'it'\\''s'"


def test_source_file_removed_after_error():
    with pytest.raises(RuntimeError):
        with source_file("uint x = 1;") as path:
            assert path.read_text(encoding="utf-8") == "uint x = 1;"
            raise RuntimeError("stop")
    assert not path.exists()


@pytest.mark.asyncio
async def test_pipe_expression_builds_shell_command(runner):
    await pipe_expression(runner, "uint256(1) << 8", "chisel", ["--fork-url", "http://x"], shell="bash")
    call = runner.calls[-1]
    assert call["program"] == "bash"
    assert call["args"][0] == "-c"
    assert call["args"][1] == "echo 'uint256(1) << 8' | 'chisel' '--fork-url' 'http://x'"


@pytest.mark.asyncio
async def test_pipe_expression_quotes_hostile_input(runner):
    await pipe_expression(runner, "'; rm -rf / #", "chisel")
    command = runner.calls[-1]["args"][1]
    assert command.startswith("echo ''\\''; rm -rf / #' |")


@pytest.mark.asyncio
async def test_pipe_source_cleans_up_temp_file(runner):
    await pipe_source(runner, "uint a = 1;\nuint b = a + 1;", "chisel")
    command = runner.calls[-1]["args"][1]
    match = re.match(r"cat '([^']+)' \| 'chisel'$", command)
    assert match is not None
    assert not Path(match.group(1)).exists()
