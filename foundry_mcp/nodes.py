"""In-memory table of anvil nodes started by this server, keyed by port."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NodeInstance:
    port: int
    pid: int
    fork_url: Optional[str] = None
    started_at: float = field(default_factory=time.time, compare=False)
    process: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "port": self.port,
            "pid": self.pid,
            "forkUrl": self.fork_url,
            "startedAt": self.started_at,
        }


class NodeRegistry:
    """Tracks at most one running node per port. Not persisted."""

    def __init__(self) -> None:
        self._instances: Dict[int, NodeInstance] = {}

    def __contains__(self, port: object) -> bool:
        return port in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[NodeInstance]:
        return iter(list(self._instances.values()))

    def get(self, port: int) -> Optional[NodeInstance]:
        return self._instances.get(port)

    def register(self, instance: NodeInstance) -> None:
        if instance.port in self._instances:
            raise ValueError(f"Port {instance.port} is already tracked.")
        self._instances[instance.port] = instance
        logger.info("node registered port=%s pid=%s", instance.port, instance.pid)

    def remove(self, port: int) -> Optional[NodeInstance]:
        instance = self._instances.pop(port, None)
        if instance is not None:
            logger.info("node removed port=%s pid=%s", port, instance.pid)
        return instance

    def ports(self) -> List[int]:
        return sorted(self._instances)

    def snapshot(self) -> List[Dict[str, Any]]:
        return [self._instances[port].to_dict() for port in self.ports()]
