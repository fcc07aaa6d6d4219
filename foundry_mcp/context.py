"""
Per-process state handed to every tool call.

Transports build one ``ToolContext`` at startup; tests build a fresh one per
case with stub runners and RPC clients.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from foundry_mcp.config import FoundryConfig, default_config
from foundry_mcp.docs import DocsCache
from foundry_mcp.help_parser import CommandScanner, default_scanner
from foundry_mcp.nodes import NodeRegistry
from foundry_mcp.process import ProcessRunner
from foundry_mcp.rpc import JsonRpcClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolContext:
    config: FoundryConfig = field(default_factory=lambda: default_config)
    runner: ProcessRunner = field(default_factory=ProcessRunner)
    rpc: JsonRpcClient = field(default_factory=JsonRpcClient)
    registry: NodeRegistry = field(default_factory=NodeRegistry)
    docs: Optional[DocsCache] = None
    scanner: CommandScanner = default_scanner

    def __post_init__(self) -> None:
        if self.docs is None:
            self.docs = DocsCache(
                self.config.docs_url,
                ttl_seconds=self.config.docs_cache_ttl,
                timeout=self.config.http_timeout,
            )

    @property
    def rpc_url(self) -> Optional[str]:
        return self.config.rpc_url

    @property
    def private_key(self) -> Optional[str]:
        return self.config.private_key

    @property
    def project_path(self) -> str:
        return self.config.project_path

    async def aclose(self) -> None:
        """Release HTTP clients and stop any nodes still tracked."""
        for instance in list(self.registry):
            try:
                self.runner.terminate(instance.pid)
            except OSError as exc:
                logger.warning("Could not stop anvil port=%s pid=%s: %s", instance.port, instance.pid, exc)
            self.registry.remove(instance.port)
        await self.rpc.aclose()
        if self.docs is not None:
            await self.docs.aclose()
