import json
import logging

import pytest

from foundry_mcp.config import FoundryConfig
from foundry_mcp.logs import JsonFormatter, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_resolve_level():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("nonsense") == logging.INFO


def test_json_formatter_includes_extras():
    record = logging.LogRecord("foundry_mcp.test", logging.WARNING, __file__, 1, "tool failed", None, None)
    record.tool = "cast_call"
    record.request_id = "abc"
    payload = json.loads(JsonFormatter().format(record))
    assert payload == {
        "level": "WARNING",
        "message": "tool failed",
        "name": "foundry_mcp.test",
        "tool": "cast_call",
        "request_id": "abc",
    }


def test_configure_logging_writes_to_stderr(capsys):
    configure_logging(FoundryConfig(log_level="INFO", log_format="json"))
    logging.getLogger("foundry_mcp.test").info("hello", extra={"tool": "forge_build"})
    captured = capsys.readouterr()
    assert captured.out == ""
    line = json.loads(captured.err.strip().splitlines()[-1])
    assert line["message"] == "hello"
    assert line["tool"] == "forge_build"


def test_configure_logging_plain_format(capsys):
    configure_logging(FoundryConfig(log_level="WARNING", log_format="plain"))
    logger = logging.getLogger("foundry_mcp.test")
    logger.info("quiet")
    logger.warning("loud")
    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "WARNING foundry_mcp.test: loud" in err
