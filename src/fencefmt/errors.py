"""Error types and colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass
class Diagnostic:
    """A problem found in a document, pointing at one line."""

    severity: Severity
    message: str
    file: str = ""
    line: int = 0
    source_line: str | None = None
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics as ``severity: message`` with a location arrow."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        lines.append(
            f"{self._c(color)}{diag.severity.value}{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        if diag.file:
            loc = f"{diag.file}:{diag.line}" if diag.line else diag.file
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {loc}")
            if diag.source_line is not None:
                gutter = f"{diag.line:>4}"
                lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {diag.source_line}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class ConfigError(Exception):
    """Unsupported language, bad search path or malformed config file."""


class FormatterNotFoundError(Exception):
    """Raised when the formatter executable cannot be started."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"formatter '{command}' not found (install prettier)")
