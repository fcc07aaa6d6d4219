"""
Foundry MCP server package.

This package exposes the Foundry toolchain (forge, cast, anvil, chisel) as
LLM-friendly tools over MCP JSON-RPC. See DESIGN.md for full details.
"""

__version__ = "0.1.0"

__all__ = ["config", "__version__"]
