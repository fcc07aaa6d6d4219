"""Agent-facing tool implementations. Each takes a ``ToolContext`` first."""

from .forge import (
    forge_init,
    forge_build,
    forge_test,
    forge_coverage,
    forge_script,
    forge_create,
    forge_verify,
    forge_flatten,
    forge_inspect,
    forge_remappings,
    forge_tree,
    forge_clean,
    forge_install,
    forge_update,
    forge_fmt,
    forge_snapshot,
    forge_doc,
    forge_selectors,
    forge_bind,
)
from .cast import (
    cast_block,
    cast_block_number,
    cast_chain,
    cast_chain_id,
    cast_client,
    cast_gas_price,
    cast_base_fee,
    cast_age,
    cast_balance,
    cast_nonce,
    cast_code,
    cast_storage,
    cast_call,
    cast_send,
    cast_publish,
    cast_tx,
    cast_receipt,
    cast_run,
    cast_estimate,
    cast_logs,
    cast_abi_encode,
    cast_abi_decode,
    cast_calldata,
    cast_calldata_decode,
    cast_sig,
    cast_sig_event,
    cast_4byte,
    cast_4byte_decode,
    cast_to_wei,
    cast_from_wei,
    cast_to_hex,
    cast_to_dec,
    cast_to_base,
    cast_keccak,
    cast_resolve_name,
    cast_lookup_address,
    cast_compute_address,
    cast_create2,
    cast_interface,
    cast_format_bytes32,
    cast_parse_bytes32,
    cast_concat_hex,
    cast_wallet_new,
    cast_wallet_address,
    cast_wallet_sign,
)
from .anvil import (
    anvil_start,
    anvil_stop,
    anvil_status,
    anvil_mine,
    anvil_set_balance,
    anvil_set_code,
    anvil_set_storage_at,
    anvil_impersonate_account,
    anvil_stop_impersonating_account,
    anvil_snapshot,
    anvil_revert,
    anvil_set_next_block_timestamp,
    anvil_increase_time,
    anvil_set_automine,
    anvil_reset,
    anvil_get_accounts,
)
from .chisel import (
    chisel_eval,
    chisel_run,
    chisel_list,
    chisel_load,
    chisel_view,
    chisel_clear_cache,
)
from .help import (
    forge_help,
    cast_help,
    anvil_help,
    chisel_help,
    foundry_version,
    foundry_list_commands,
)

__all__ = [
    "forge_init",
    "forge_build",
    "forge_test",
    "forge_coverage",
    "forge_script",
    "forge_create",
    "forge_verify",
    "forge_flatten",
    "forge_inspect",
    "forge_remappings",
    "forge_tree",
    "forge_clean",
    "forge_install",
    "forge_update",
    "forge_fmt",
    "forge_snapshot",
    "forge_doc",
    "forge_selectors",
    "forge_bind",
    "cast_block",
    "cast_block_number",
    "cast_chain",
    "cast_chain_id",
    "cast_client",
    "cast_gas_price",
    "cast_base_fee",
    "cast_age",
    "cast_balance",
    "cast_nonce",
    "cast_code",
    "cast_storage",
    "cast_call",
    "cast_send",
    "cast_publish",
    "cast_tx",
    "cast_receipt",
    "cast_run",
    "cast_estimate",
    "cast_logs",
    "cast_abi_encode",
    "cast_abi_decode",
    "cast_calldata",
    "cast_calldata_decode",
    "cast_sig",
    "cast_sig_event",
    "cast_4byte",
    "cast_4byte_decode",
    "cast_to_wei",
    "cast_from_wei",
    "cast_to_hex",
    "cast_to_dec",
    "cast_to_base",
    "cast_keccak",
    "cast_resolve_name",
    "cast_lookup_address",
    "cast_compute_address",
    "cast_create2",
    "cast_interface",
    "cast_format_bytes32",
    "cast_parse_bytes32",
    "cast_concat_hex",
    "cast_wallet_new",
    "cast_wallet_address",
    "cast_wallet_sign",
    "anvil_start",
    "anvil_stop",
    "anvil_status",
    "anvil_mine",
    "anvil_set_balance",
    "anvil_set_code",
    "anvil_set_storage_at",
    "anvil_impersonate_account",
    "anvil_stop_impersonating_account",
    "anvil_snapshot",
    "anvil_revert",
    "anvil_set_next_block_timestamp",
    "anvil_increase_time",
    "anvil_set_automine",
    "anvil_reset",
    "anvil_get_accounts",
    "chisel_eval",
    "chisel_run",
    "chisel_list",
    "chisel_load",
    "chisel_view",
    "chisel_clear_cache",
    "forge_help",
    "cast_help",
    "anvil_help",
    "chisel_help",
    "foundry_version",
    "foundry_list_commands",
]
