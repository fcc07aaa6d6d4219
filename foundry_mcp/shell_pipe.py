"""
Shell piping for the chisel REPL.

chisel reads Solidity from standard input, so evaluate/run are the only calls
that go through ``bash -c``. Everything that builds a shell string lives here;
no other module should import these helpers.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Sequence

from foundry_mcp.process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)


def single_quote(text: str) -> str:
    """Quote ``text`` for POSIX shells, escaping embedded quotes as ``'\\''``."""
    return "'" + text.replace("'", "'\\''") + "'"


def _command_line(program: str, args: Sequence[str]) -> str:
    return " ".join([single_quote(program), *(single_quote(arg) for arg in args)])


@contextlib.contextmanager
def source_file(source: str, *, suffix: str = ".sol") -> Iterator[Path]:
    """Write ``source`` to a temporary file that is removed on every exit path."""
    fd, raw_path = tempfile.mkstemp(prefix="chisel_", suffix=suffix)
    path = Path(raw_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(source)
        yield path
    finally:
        path.unlink(missing_ok=True)


async def pipe_expression(
    runner: ProcessRunner,
    expression: str,
    program: str,
    args: Sequence[str] = (),
    *,
    shell: str = "bash",
    cwd: Optional[str] = None,
) -> CommandResult:
    """Echo a single expression into ``program`` through the shell."""
    command = f"echo {single_quote(expression)} | {_command_line(program, args)}"
    return await runner.run(shell, ["-c", command], cwd)


async def pipe_source(
    runner: ProcessRunner,
    source: str,
    program: str,
    args: Sequence[str] = (),
    *,
    shell: str = "bash",
    cwd: Optional[str] = None,
) -> CommandResult:
    """Feed multi-line ``source`` into ``program`` via a temporary file."""
    with source_file(source) as path:
        command = f"cat {single_quote(str(path))} | {_command_line(program, args)}"
        logger.debug("piping %d bytes of source into %s", len(source), program)
        return await runner.run(shell, ["-c", command], cwd)
