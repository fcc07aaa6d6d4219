"""
Best-effort extraction of subcommand names from ``--help`` output.

The grammar is deliberately narrow: a header line containing ``Commands:`` or
``Subcommands:``, followed by indented entries whose first token is the
command name, ended by a blank line or a line starting with ``Options:``.
Callers depend on the ``CommandScanner`` protocol so the heuristic can be
swapped without touching them.
"""

from __future__ import annotations

import re
from typing import List, Protocol, Sequence

_ENTRY_REGEX = re.compile(r"^\s+(\S+)")


class CommandScanner(Protocol):
    def scan(self, help_text: str) -> List[str]:
        ...


class SectionCommandScanner:
    def __init__(
        self,
        headers: Sequence[str] = ("Commands:", "Subcommands:"),
        terminator: str = "Options:",
    ) -> None:
        self.headers = tuple(headers)
        self.terminator = terminator

    def scan(self, help_text: str) -> List[str]:
        commands: List[str] = []
        in_section = False
        for line in help_text.splitlines():
            if any(header in line for header in self.headers):
                in_section = True
                continue
            if not in_section:
                continue
            if not line.strip() or line.startswith(self.terminator):
                in_section = False
                continue
            match = _ENTRY_REGEX.match(line)
            if match:
                commands.append(match.group(1))
        return commands


default_scanner = SectionCommandScanner()
