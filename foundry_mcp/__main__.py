"""Command-line entry point: ``python -m foundry_mcp`` or ``foundry-mcp``."""

from __future__ import annotations

import argparse
from typing import List, Optional

from foundry_mcp.config import default_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="foundry-mcp",
        description="Serve the Foundry toolchain to MCP clients",
    )
    parser.add_argument(
        "--transport",
        choices=("stdio", "http"),
        default="stdio",
        help="stdio for local MCP clients, http for the FastAPI app",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind address")
    parser.add_argument("--port", type=int, default=8000, help="HTTP port")
    parser.add_argument(
        "--project",
        dest="project_path",
        default=None,
        help="Foundry project directory (defaults to FOUNDRY_PROJECT or the cwd)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    if args.project_path:
        default_config.project_path = args.project_path

    if args.transport == "http":
        import uvicorn

        uvicorn.run(
            "foundry_mcp.server:app",
            host=args.host,
            port=args.port,
            log_config=None,
        )
        return 0

    from foundry_mcp import stdio

    stdio.run(default_config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
