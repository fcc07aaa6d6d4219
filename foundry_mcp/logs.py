"""Process-wide logging setup shared by the HTTP and stdio transports."""

from __future__ import annotations

import json
import logging
import sys

from foundry_mcp.config import FoundryConfig, default_config

EXTRA_FIELDS = ("tool", "request_id", "error")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def resolve_level(name: str) -> int:
    level = getattr(logging, name.upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(config: FoundryConfig = default_config) -> None:
    """
    Install a single stderr handler on the root logger.

    stdout is reserved for the stdio transport, so nothing is logged there.
    """
    handler = logging.StreamHandler(sys.stderr)
    if config.log_format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=resolve_level(config.log_level), handlers=[handler], force=True)
