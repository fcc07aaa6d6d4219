"""Shared validation helpers for Foundry MCP tools."""

from __future__ import annotations

import re
from typing import Any, Optional
from urllib.parse import urlparse

# 20-byte account address, 0x-prefixed.
ADDRESS_REGEX = re.compile(r"^0x[a-fA-F0-9]{40}$")
# 32-byte transaction hash.
TX_HASH_REGEX = re.compile(r"^0x[a-fA-F0-9]{64}$")
HEX_DATA_REGEX = re.compile(r"^0x[a-fA-F0-9]*$")
# 32-byte key, prefix optional.
PRIVATE_KEY_REGEX = re.compile(r"^(0x)?[a-fA-F0-9]{64}$")
# Bare contract name or "path/to/File.sol:Name".
CONTRACT_REGEX = re.compile(r"^(?:[^:\s]+:)?[A-Za-z_][A-Za-z0-9_]*$")

URL_SCHEMES = {"http", "https", "ws", "wss"}
BLOCK_TAGS = {"latest", "earliest", "pending", "safe", "finalized"}
ETH_UNITS = {"wei", "gwei", "ether", "kwei", "mwei", "szabo", "finney"}
MAX_VERBOSITY = 5


def is_valid_address(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(ADDRESS_REGEX.fullmatch(value.strip()))


def is_valid_tx_hash(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(TX_HASH_REGEX.fullmatch(value.strip()))


def is_hex_data(value: Optional[str]) -> bool:
    if not isinstance(value, str):
        return False
    return bool(HEX_DATA_REGEX.fullmatch(value.strip()))


def is_valid_private_key(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(PRIVATE_KEY_REGEX.fullmatch(value.strip()))


def is_valid_url(value: Optional[str]) -> bool:
    """Accept absolute http(s)/ws(s) URLs with a host."""
    if not value or not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in URL_SCHEMES and bool(parsed.netloc)


def is_valid_contract(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(CONTRACT_REGEX.fullmatch(value.strip()))


def is_valid_block_id(value: Any) -> bool:
    """Block number, 32-byte block hash, or one of the standard tags."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, str):
        stripped = value.strip()
        return stripped in BLOCK_TAGS or stripped.isdigit() or bool(TX_HASH_REGEX.fullmatch(stripped))
    return False


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def verbosity_flag(level: Optional[int]) -> Optional[str]:
    """Map a 0-5 verbosity level to forge's stacked ``-vvv`` flag."""
    if not level:
        return None
    return "-" + "v" * level
