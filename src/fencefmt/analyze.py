"""Read-only reporting on the blocks of a document."""

from __future__ import annotations

from dataclasses import dataclass

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from fencefmt.annotator import is_annotated
from fencefmt.config import FenceConfig
from fencefmt.document import CodeBlock, Document
from fencefmt.scanner import iter_blocks


@dataclass(frozen=True)
class BlockInfo:
    block: CodeBlock
    content_lines: int
    flagged: bool
    marker: str = ""

    def __str__(self) -> str:
        b = self.block
        status = "flagged" if self.flagged else "clean"
        return (
            f"{b.start_line:>5}-{b.end_line:<5} {b.language:<12} "
            f"{self.content_lines:>4} line(s)  {status}"
        )


def analyze_document(document: Document, config: FenceConfig) -> list[BlockInfo]:
    infos: list[BlockInfo] = []
    for block in iter_blocks(document, config):
        flagged = is_annotated(document, block)
        content = document.block_lines(block)
        infos.append(BlockInfo(
            block=block,
            content_lines=len(content) - (1 if flagged else 0),
            flagged=flagged,
            marker=content[0].strip() if flagged else "",
        ))
    return infos


def render_block(document: Document, block: CodeBlock, *, color: bool = True) -> str:
    """Block content with line numbers, syntax highlighted for a terminal."""
    lines = document.block_lines(block)
    source = "\n".join(lines) + "\n"
    if color:
        try:
            lexer = get_lexer_by_name(block.language, stripnl=False)
        except ClassNotFound:
            lexer = TextLexer(stripnl=False)
        source = highlight(source, lexer, TerminalFormatter())
    rendered = source.split("\n")[: len(lines)]
    width = len(str(block.end_line))
    return "\n".join(
        f"{n:>{width}} | {text}" for n, text in zip(block.content_range, rendered)
    )
