"""
Configuration helpers for the Foundry MCP server.

This module centralizes the ambient defaults every tool call may fall back on:
the default RPC endpoint, the signing key, the project directory, binary
names and a few timing knobs. Values are read from the environment once at
import. No secrets are stored in the repository; the private key is read from
the environment or a local file if present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Default endpoints
DEFAULT_ANVIL_PORT = 8545
DEFAULT_RPC_URL = os.getenv("RPC_URL") or None
DEFAULT_PROJECT_PATH = os.getenv("FOUNDRY_PROJECT") or os.getcwd()
DEFAULT_DOCS_URL = os.getenv("FOUNDRY_DOCS_URL", "https://getfoundry.sh/llms-full.txt")
DEFAULT_DOCS_BASE_URL = "https://getfoundry.sh"

# Private key handling
PRIVATE_KEY_ENV_VAR = "PRIVATE_KEY"
PRIVATE_KEY_FILE_ENV_VAR = "PRIVATE_KEY_FILE"


def _load_float(env_var: str, default: float) -> float:
    raw_value = os.getenv(env_var)
    if raw_value:
        try:
            return float(raw_value)
        except ValueError:
            return default
    return default


def _load_timeout() -> float:
    return _load_float("FOUNDRY_MCP_HTTP_TIMEOUT", 10.0)


DEFAULT_TIMEOUT = _load_timeout()
DEFAULT_ANVIL_STARTUP_DELAY = _load_float("ANVIL_STARTUP_DELAY", 1.0)
DEFAULT_DOCS_CACHE_TTL = _load_float("FOUNDRY_DOCS_CACHE_TTL", 60.0 * 60.0)

# Binaries
FORGE_BIN = os.getenv("FORGE_BIN", "forge")
CAST_BIN = os.getenv("CAST_BIN", "cast")
ANVIL_BIN = os.getenv("ANVIL_BIN", "anvil")
CHISEL_BIN = os.getenv("CHISEL_BIN", "chisel")
SHELL_BIN = os.getenv("FOUNDRY_MCP_SHELL", "bash")

LOG_LEVEL = os.getenv("FOUNDRY_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("FOUNDRY_MCP_LOG_FORMAT", "json")  # json or plain


def load_private_key() -> Optional[str]:
    """
    Load the default signing key from environment or a local file.

    Returns:
        The key string if available, otherwise None. The key is never logged
        or echoed back to callers.
    """
    env_key = os.getenv(PRIVATE_KEY_ENV_VAR)
    if env_key:
        return env_key.strip()

    key_path = os.getenv(PRIVATE_KEY_FILE_ENV_VAR)
    if key_path:
        path = Path(key_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(slots=True)
class FoundryConfig:
    """Runtime configuration shared by every tool call."""

    rpc_url: Optional[str] = DEFAULT_RPC_URL
    private_key: Optional[str] = load_private_key()
    project_path: str = DEFAULT_PROJECT_PATH
    forge_bin: str = FORGE_BIN
    cast_bin: str = CAST_BIN
    anvil_bin: str = ANVIL_BIN
    chisel_bin: str = CHISEL_BIN
    shell: str = SHELL_BIN
    default_anvil_port: int = DEFAULT_ANVIL_PORT
    anvil_startup_delay: float = DEFAULT_ANVIL_STARTUP_DELAY
    docs_url: str = DEFAULT_DOCS_URL
    docs_base_url: str = DEFAULT_DOCS_BASE_URL
    docs_cache_ttl: float = DEFAULT_DOCS_CACHE_TTL
    http_timeout: float = DEFAULT_TIMEOUT
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT

    def __repr__(self) -> str:
        # Keep the signing key out of tracebacks and debug logs.
        return (
            f"FoundryConfig(rpc_url={self.rpc_url!r}, project_path={self.project_path!r}, "
            f"private_key={('set' if self.private_key else None)!r})"
        )


default_config = FoundryConfig()
