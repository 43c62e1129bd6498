"""Forward-only search for fences and error markers in a document."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from fencefmt.config import BLOCK_END_PATTERN, ERROR_PATTERN, FenceConfig
from fencefmt.document import CodeBlock, Document
from fencefmt.indent import leading_whitespace

logger = logging.getLogger(__name__)


def find_next(document: Document, start: int, pattern: re.Pattern[str]) -> int | None:
    """Return the first line at or after *start* matching *pattern*."""
    for n in range(max(start, 1), len(document) + 1):
        if pattern.search(document.line_at(n)):
            return n
    return None


def find_block_start(document: Document, start: int, config: FenceConfig) -> int | None:
    return find_next(document, start, config.block_start_pattern)


def find_block_end(document: Document, start: int) -> int | None:
    return find_next(document, start, BLOCK_END_PATTERN)


def find_error(document: Document, start: int) -> int | None:
    return find_next(document, start, ERROR_PATTERN)


def block_language(fence: str) -> str:
    """The language tag of an opening fence line."""
    return fence.strip()[3:].strip()


def find_block(document: Document, start: int, config: FenceConfig) -> CodeBlock | None:
    """Locate the next complete block whose opening fence is at or after *start*.

    Returns None when there is no further opening fence, or when the next
    one is never closed.
    """
    block_start = find_block_start(document, start, config)
    if block_start is None:
        return None
    block_end = find_block_end(document, block_start + 1)
    if block_end is None:
        logger.warning("%s:%d: unterminated code block", document, block_start)
        return None
    fence = document.line_at(block_start)
    return CodeBlock(
        start_line=block_start,
        end_line=block_end,
        language=block_language(fence),
        indent=leading_whitespace(fence),
    )


def iter_blocks(document: Document, config: FenceConfig) -> Iterator[CodeBlock]:
    """Yield every block in order.

    The document must not be mutated while iterating; callers that rewrite
    blocks rescan with find_block instead.
    """
    line = 1
    while (block := find_block(document, line, config)) is not None:
        yield block
        line = block.start_line + 1


def count_blocks(document: Document, config: FenceConfig) -> int:
    return sum(1 for line in document.lines if config.block_start_pattern.search(line))


def count_errors(document: Document) -> int:
    return sum(1 for line in document.lines if ERROR_PATTERN.search(line))
