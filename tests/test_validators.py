import pytest

from foundry_mcp.tools.validators import (
    is_hex_data,
    is_valid_address,
    is_valid_block_id,
    is_valid_contract,
    is_valid_private_key,
    is_valid_tx_hash,
    is_valid_url,
    verbosity_flag,
)


@pytest.mark.parametrize(
    "address, expected",
    [
        ("0x" + "a" * 40, True),
        ("0x" + "A1" * 20, True),
        ("0x" + "a" * 39, False),
        ("a" * 42, False),
        ("vitalik.eth", False),
        (None, False),
    ],
)
def test_is_valid_address(address, expected):
    assert is_valid_address(address) is expected


def test_tx_hash_and_hex():
    assert is_valid_tx_hash("0x" + "f" * 64)
    assert not is_valid_tx_hash("0x" + "f" * 63)
    assert is_hex_data("0x")
    assert is_hex_data("0xdeadBEEF")
    assert not is_hex_data("deadbeef")


def test_private_key_prefix_optional():
    assert is_valid_private_key("0x" + "1" * 64)
    assert is_valid_private_key("1" * 64)
    assert not is_valid_private_key("0x1234")


@pytest.mark.parametrize(
    "url, expected",
    [
        ("http://127.0.0.1:8545", True),
        ("https://eth.llamarpc.com", True),
        ("wss://node.example/ws", True),
        ("ftp://node.example", False),
        ("localhost:8545", False),
        ("", False),
    ],
)
def test_is_valid_url(url, expected):
    assert is_valid_url(url) is expected


def test_contract_names():
    assert is_valid_contract("Token")
    assert is_valid_contract("src/Token.sol:Token")
    assert not is_valid_contract("Token; rm -rf /")
    assert not is_valid_contract("1Token")


def test_block_ids():
    assert is_valid_block_id(0)
    assert is_valid_block_id("finalized")
    assert is_valid_block_id("123")
    assert not is_valid_block_id(-1)
    assert not is_valid_block_id(True)
    assert not is_valid_block_id("tomorrow")


def test_verbosity_flag():
    assert verbosity_flag(None) is None
    assert verbosity_flag(0) is None
    assert verbosity_flag(4) == "-vvvv"
