from foundry_mcp.help_parser import SectionCommandScanner, default_scanner

FORGE_HELP = """Build, test, fuzz, debug and deploy Solidity contracts

Usage: forge <COMMAND>

Commands:
  bind        Generate Rust bindings for smart contracts
  build       Build the project's smart contracts [aliases: b, compile]
  test        Run the project's tests [aliases: t]
  help        Print this message or the help of the given subcommand(s)

Options:
  -h, --help     Print help
"""


def test_scan_collects_section_entries():
    assert default_scanner.scan(FORGE_HELP) == ["bind", "build", "test", "help"]


def test_scan_stops_at_options_header():
    text = "Commands:\n  one  first\nOptions:\n  -h  Print help\n"
    assert default_scanner.scan(text) == ["one"]


def test_scan_accepts_subcommands_header():
    text = "SUBCOMMANDS listed below\nSubcommands:\n    load   Load a session\n    view   View a session\n"
    assert default_scanner.scan(text) == ["load", "view"]


def test_scan_without_section_is_empty():
    assert default_scanner.scan("Usage: anvil [OPTIONS]\n\nOptions:\n  -p, --port <NUM>\n") == []


def test_custom_headers():
    scanner = SectionCommandScanner(headers=("Tasks:",), terminator="Flags:")
    assert scanner.scan("Tasks:\n  deploy  Ship it\nFlags:\n  -x\n") == ["deploy"]
