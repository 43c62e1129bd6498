"""Invoke prettier on the content of a single code block."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

from fencefmt.config import DEFAULT_PRINT_WIDTH
from fencefmt.errors import FormatterNotFoundError

logger = logging.getLogger(__name__)

# Languages whose prettier parser has a different name.
_PROFILES = {
    "javascript": "babel",
    "js": "babel",
    "jsx": "babel",
    "ts": "typescript",
    "yml": "yaml",
    "md": "markdown",
}


def language_to_profile(language: str) -> str:
    """Map a fence language tag to a prettier parser name."""
    return _PROFILES.get(language, language)


@dataclass
class FormatResult:
    """Outcome of one formatter invocation."""

    ok: bool
    output: str = ""
    diagnostic: str = ""
    returncode: int = 0


class Formatter(Protocol):
    def run(self, text: str, profile: str, *, check: bool = False) -> FormatResult: ...

    def ensure_available(self) -> None: ...


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.rstrip()
    return ""


class PrettierFormatter:
    """Runs ``prettier --parser <profile>`` once per call, reading stdin."""

    def __init__(self, command: str = "prettier", *, print_width: int = DEFAULT_PRINT_WIDTH) -> None:
        self.command = command
        self.print_width = print_width

    def ensure_available(self) -> None:
        """Raise FormatterNotFoundError unless the command is on PATH."""
        argv = shlex.split(self.command)
        if not argv or shutil.which(argv[0]) is None:
            raise FormatterNotFoundError(self.command)

    def build_command(self, profile: str, *, check: bool = False) -> list[str]:
        cmd = [*shlex.split(self.command), "--parser", profile, "--print-width", str(self.print_width)]
        if check:
            cmd.append("--check")
        return cmd

    def run(self, text: str, profile: str, *, check: bool = False) -> FormatResult:
        """Format *text*, or with *check* only report whether it is canonical."""
        cmd = self.build_command(profile, check=check)
        logger.debug("running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, input=text, capture_output=True, text=True)
        except FileNotFoundError:
            raise FormatterNotFoundError(self.command)

        if result.returncode != 0:
            diagnostic = first_line(result.stderr) or first_line(result.stdout)
            if not diagnostic:
                diagnostic = f"formatter exited with status {result.returncode}"
            return FormatResult(ok=False, diagnostic=diagnostic, returncode=result.returncode)

        return FormatResult(ok=True, output="" if check else result.stdout)
