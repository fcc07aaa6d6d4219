"""
Subprocess execution for the Foundry binaries.

``build_args`` turns an option mapping into argv tokens, ``ProcessRunner``
spawns programs and normalizes what they print, and ``format_output`` renders
a ``CommandResult`` as the text handed back to callers. Programs are always
started from an argument vector, never through a shell.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from foundry_mcp.metrics import MetricsRecorder, default_metrics

logger = logging.getLogger(__name__)

# Forces plain output so downstream text is stable.
NO_COLOR_ENV = {"NO_COLOR": "1", "FORCE_COLOR": "0"}

SUCCESS_PLACEHOLDER = "Command completed successfully."

# Flags whose following token is a secret.
SECRET_FLAGS = frozenset({"--private-key", "--mnemonic"})
REDACTED = "***"


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Normalized outcome of one subprocess invocation."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int

    @classmethod
    def from_exit(cls, exit_code: int, stdout: str = "", stderr: str = "") -> "CommandResult":
        return cls(
            success=exit_code == 0,
            stdout=stdout.strip(),
            stderr=stderr.strip(),
            exit_code=exit_code,
        )

    @classmethod
    def failure(cls, message: str, exit_code: int = 1) -> "CommandResult":
        return cls(success=False, stdout="", stderr=message, exit_code=exit_code)


def build_args(options: Mapping[str, Any]) -> List[str]:
    """
    Serialize named options into command-line tokens, in mapping order.

    One-letter names become short flags (``-x``), everything else a long flag
    (``--name``). ``True`` yields the bare flag, ``False``/``None`` nothing,
    any other value the flag followed by ``str(value)``.
    """
    args: List[str] = []
    for key, value in options.items():
        if value is None or value is False:
            continue
        flag = f"-{key}" if len(key) == 1 else f"--{key}"
        if value is True:
            args.append(flag)
        else:
            args.extend([flag, str(value)])
    return args


def format_output(result: CommandResult) -> str:
    """Render a command result as a single text block."""
    if result.success:
        return result.stdout or SUCCESS_PLACEHOLDER

    parts: List[str] = []
    if result.stderr:
        parts.append(f"Error: {result.stderr}")
    if result.stdout:
        parts.append(f"Output: {result.stdout}")
    parts.append(f"Exit code: {result.exit_code}")
    return "\n".join(parts)


def _redact(argv: Sequence[str]) -> List[str]:
    """Copy of ``argv`` safe for logging, with secret flag values masked."""
    masked = list(argv)
    for index, token in enumerate(masked[:-1]):
        if token in SECRET_FLAGS:
            masked[index + 1] = REDACTED
    return masked


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class ProcessRunner:
    """Async subprocess runner that never raises for ordinary failures."""

    def __init__(
        self,
        *,
        env_overrides: Optional[Mapping[str, str]] = None,
        metrics: MetricsRecorder = default_metrics,
    ) -> None:
        self._env_overrides: Dict[str, str] = dict(NO_COLOR_ENV)
        if env_overrides:
            self._env_overrides.update(env_overrides)
        self._metrics = metrics

    def build_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self._env_overrides)
        return env

    async def run(
        self, program: str, args: Sequence[str] = (), cwd: Optional[str] = None
    ) -> CommandResult:
        """
        Run ``program`` to completion and capture its output.

        Args:
            program: Executable name or path.
            args: Argument vector (not including the program).
            cwd: Working directory; defaults to the server's own.

        Returns:
            CommandResult with trimmed stdout/stderr. Spawn failures are
            reported as ``exit_code=1`` with the reason in ``stderr``.
        """
        argv = [program, *args]
        logger.debug("exec argv=%s cwd=%s", _redact(argv), cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                env=self.build_env(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout_bytes, stderr_bytes = await process.communicate()
        except (OSError, ValueError) as exc:
            logger.warning("Failed to spawn %s: %s", program, exc)
            self._metrics.record_command(program, 1)
            return CommandResult.failure(str(exc) or exc.__class__.__name__)

        exit_code = process.returncode if process.returncode is not None else 1
        self._metrics.record_command(program, exit_code)
        return CommandResult.from_exit(exit_code, _decode(stdout_bytes), _decode(stderr_bytes))

    async def spawn(
        self, program: str, args: Sequence[str] = (), cwd: Optional[str] = None
    ) -> asyncio.subprocess.Process:
        """
        Start a long-running background process and return its handle.

        Output is discarded so the child never blocks on a full pipe. Spawn
        errors propagate as ``OSError``.
        """
        argv = [program, *args]
        logger.info("spawn argv=%s", _redact(argv))
        return await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            env=self.build_env(),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )

    async def kill(self, process: asyncio.subprocess.Process) -> None:
        """Forcibly stop a spawned process and reap it."""
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()

    def terminate(self, pid: int) -> None:
        """Send SIGTERM to ``pid``; raises ``OSError`` when delivery fails."""
        os.kill(pid, signal.SIGTERM)
