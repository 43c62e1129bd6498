"""Per-block dispositioning: leave, rewrite, or flag with an error marker."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from fencefmt.config import ERROR_PATTERN, ERROR_PREFIX, FenceConfig
from fencefmt.document import CodeBlock, Document, split_lines
from fencefmt.formatter import Formatter, language_to_profile
from fencefmt.indent import reapply_indent, strip_indent
from fencefmt.scanner import find_block

logger = logging.getLogger(__name__)


class FormatOutcome(Enum):
    OK = "OK"
    CHANGED = "CHANGED"
    REJECTED = "ERROR"
    ALREADY_FLAGGED = "SKIPPING (has error)"


@dataclass(frozen=True)
class BlockReport:
    start_line: int
    language: str
    outcome: FormatOutcome
    diagnostic: str = ""

    def __str__(self) -> str:
        return f"Block at {self.start_line}: {self.outcome.value}"


def marker_text(diagnostic: str) -> str:
    """The marker line for *diagnostic*, without indentation."""
    diagnostic = diagnostic.strip()
    if ERROR_PATTERN.match(diagnostic):
        return diagnostic
    return f"{ERROR_PREFIX} {diagnostic}"


def is_annotated(document: Document, block: CodeBlock) -> bool:
    """True if the line right below the opening fence is an error marker."""
    if block.end_line - block.start_line < 2:
        return False
    return bool(ERROR_PATTERN.search(document.line_at(block.start_line + 1)))


def annotate(document: Document, block: CodeBlock, diagnostic: str) -> None:
    document.insert_after(block.start_line, block.indent + marker_text(diagnostic))


def _block_text(lines: list[str]) -> str:
    return "".join(line + "\n" for line in lines)


def format_block(
    document: Document,
    start: int,
    config: FenceConfig,
    formatter: Formatter,
    *,
    check_only: bool = False,
) -> BlockReport | None:
    """Format the block whose opening fence is the next one at or after *start*.

    With *check_only* the outcome is computed but the document is left alone.
    Returns None if no complete block is found.
    """
    block = find_block(document, start, config)
    if block is None:
        return None

    if is_annotated(document, block):
        return BlockReport(block.start_line, block.language, FormatOutcome.ALREADY_FLAGGED)

    profile = language_to_profile(block.language)
    text = _block_text(strip_indent(document.block_lines(block), block.indent))

    formatted = formatter.run(text, profile)
    if not formatted.ok:
        logger.info("%s:%d: %s", document, block.start_line, formatted.diagnostic)
        if not check_only:
            annotate(document, block, formatted.diagnostic)
        return BlockReport(
            block.start_line, block.language, FormatOutcome.REJECTED, formatted.diagnostic,
        )

    if formatter.run(text, profile, check=True).ok:
        return BlockReport(block.start_line, block.language, FormatOutcome.OK)

    if not check_only:
        new_lines = reapply_indent(split_lines(formatted.output)[0], block.indent)
        document.replace_block_contents(block, new_lines)
    return BlockReport(block.start_line, block.language, FormatOutcome.CHANGED)


def format_document(
    document: Document,
    config: FenceConfig,
    formatter: Formatter,
    *,
    check_only: bool = False,
) -> list[BlockReport]:
    """Disposition every block of *document* in line order."""
    reports: list[BlockReport] = []
    line = 1
    while (report := format_block(document, line, config, formatter, check_only=check_only)) is not None:
        reports.append(report)
        # Rewrites only move lines after the opening fence.
        line = report.start_line + 1
    return reports
