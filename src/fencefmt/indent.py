"""Strip and reapply a block's literal indent prefix."""

from __future__ import annotations


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def strip_indent(lines: list[str], prefix: str) -> list[str]:
    """Remove *prefix* from each line that starts with it.

    Lines with ragged indentation are passed through untouched.
    """
    if not prefix:
        return list(lines)
    return [line[len(prefix):] if line.startswith(prefix) else line for line in lines]


def reapply_indent(lines: list[str], prefix: str) -> list[str]:
    return [prefix + line for line in lines]
