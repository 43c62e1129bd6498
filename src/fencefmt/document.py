"""In-place editable text documents and the code blocks inside them."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodeBlock:
    """A fenced block; content lines lie strictly between the two fences."""

    start_line: int
    end_line: int
    language: str
    indent: str

    @property
    def content_range(self) -> range:
        return range(self.start_line + 1, self.end_line)

    def __str__(self) -> str:
        return f"{self.language} block at {self.start_line}-{self.end_line}"


def split_lines(content: str) -> tuple[list[str], list[str]]:
    """Split *content* on ``\\n`` only, returning lines and their terminators.

    A ``\\r`` before the ``\\n`` belongs to the terminator. Characters such as
    form feed or U+2028 stay inside the line. The last terminator is empty
    when the text does not end in a newline.
    """
    lines: list[str] = []
    endings: list[str] = []
    pieces = content.split("\n")
    for piece in pieces[:-1]:
        if piece.endswith("\r"):
            lines.append(piece[:-1])
            endings.append("\r\n")
        else:
            lines.append(piece)
            endings.append("\n")
    if pieces[-1]:
        lines.append(pieces[-1])
        endings.append("")
    return lines, endings


class Document:
    """A text file loaded as 1-indexed lines.

    Line numbers handed out by scanning are only meaningful until the next
    mutation; every mutating method invalidates all lines after the point of
    change. Untouched lines are written back with their own terminators;
    new lines get the terminator of the first line.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        with open(self.path, newline="") as f:
            content = f.read()
        self.lines, self.endings = split_lines(content)
        self.newline = self.endings[0] if self.endings and self.endings[0] else "\n"

    def __len__(self) -> int:
        return len(self.lines)

    def __str__(self) -> str:
        return str(self.path)

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return ""

    def block_lines(self, block: CodeBlock) -> list[str]:
        """The content lines of *block*, fences excluded."""
        return self.lines[block.start_line : block.end_line - 1]

    def text(self) -> str:
        last = len(self.lines) - 1
        return "".join(
            line + (ending or (self.newline if n != last else ""))
            for n, (line, ending) in enumerate(zip(self.lines, self.endings))
        )

    def replace_block_contents(self, block: CodeBlock, new_lines: list[str]) -> None:
        """Replace everything strictly between the fences of *block*.

        Afterwards every line number greater than ``block.start_line`` is
        stale. Lines up to and including the opening fence keep their
        numbers, so the next block is found by scanning from
        ``block.start_line + 1``.
        """
        lines = list(self.lines)
        endings = list(self.endings)
        lines[block.start_line : block.end_line - 1] = new_lines
        endings[block.start_line : block.end_line - 1] = [self.newline] * len(new_lines)
        self._commit(lines, endings)
        logger.debug(
            "%s: replaced lines %d-%d with %d line(s)",
            self.path, block.start_line + 1, block.end_line - 1, len(new_lines),
        )

    def insert_after(self, line: int, text: str) -> None:
        """Insert a single line directly below line number *line*."""
        lines = list(self.lines)
        endings = list(self.endings)
        lines.insert(line, text)
        endings.insert(line, self.newline)
        self._commit(lines, endings)

    def delete_line(self, line: int) -> None:
        lines = list(self.lines)
        endings = list(self.endings)
        del lines[line - 1]
        del endings[line - 1]
        self._commit(lines, endings)

    def _commit(self, lines: list[str], endings: list[str]) -> None:
        """Adopt *lines* and save; on failure keep the previous lines."""
        previous = self.lines, self.endings
        self.lines, self.endings = lines, endings
        try:
            self.save()
        except BaseException:
            self.lines, self.endings = previous
            raise

    def save(self) -> None:
        """Write the document back, replacing the file in one step."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w", newline="") as f:
                f.write(self.text())
            if self.path.exists():
                os.chmod(tmp_name, self.path.stat().st_mode & 0o7777)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise
