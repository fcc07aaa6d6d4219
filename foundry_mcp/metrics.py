"""
In-process counters for requests, tool outcomes, subprocesses and RPC calls.

Single process only; nothing is aggregated across workers.
"""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Dict

SERIES = (
    "tool_success",
    "tool_error",
    "commands",
    "command_failures",
    "rpc_calls",
    "rpc_failures",
)


class MetricsRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._requests = 0
        self._durations_ms: Dict[str, float] = {}
        self._series: Dict[str, Counter[str]] = {name: Counter() for name in SERIES}

    def _bump(self, series: str, key: str) -> None:
        # Caller holds the lock.
        self._series[series][key] += 1

    def incr_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_duration(self, request_id: str, duration_ms: float) -> None:
        with self._lock:
            self._durations_ms[request_id] = duration_ms

    def record_tool(self, tool: str, *, success: bool) -> None:
        with self._lock:
            self._bump("tool_success" if success else "tool_error", tool)

    def record_command(self, program: str, exit_code: int) -> None:
        with self._lock:
            self._bump("commands", program)
            if exit_code != 0:
                self._bump("command_failures", program)

    def record_rpc(self, method: str, *, success: bool) -> None:
        with self._lock:
            self._bump("rpc_calls", method)
            if not success:
                self._bump("rpc_failures", method)

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            data: Dict[str, object] = {"requests": self._requests}
            data.update({name: dict(counter) for name, counter in self._series.items()})
            data["recent_request_durations_ms"] = dict(self._durations_ms)
            return data

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._durations_ms.clear()
            for counter in self._series.values():
                counter.clear()


default_metrics = MetricsRecorder()
