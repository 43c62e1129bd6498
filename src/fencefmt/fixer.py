"""Interactive resolution of blocks carrying an error marker.

The loop is a small state machine::

    SCANNING -> EDITING -> REFORMATTING -> RESOLVED -> SCANNING
                                        -> STILL_ERRORING -> DECIDING -> SCANNING | QUIT

It ends in DONE once no marker is left after the current position. The
editor and the decision source are injected so the loop can run without a
terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

import click

from fencefmt.analyze import render_block
from fencefmt.annotator import format_block
from fencefmt.config import FenceConfig
from fencefmt.document import CodeBlock, Document, split_lines
from fencefmt.formatter import Formatter
from fencefmt.indent import reapply_indent, strip_indent
from fencefmt.scanner import find_block, find_error

logger = logging.getLogger(__name__)


class FixState(Enum):
    SCANNING = auto()
    EDITING = auto()
    REFORMATTING = auto()
    RESOLVED = auto()
    STILL_ERRORING = auto()
    DECIDING = auto()
    QUIT = auto()
    DONE = auto()


class Choice(Enum):
    EDIT_AGAIN = "y"
    SKIP = "s"
    IGNORE = "i"
    QUIT = "q"


PROMPT = " Edit again? [y/s/i/q] (yes/skip/ignore/quit) "


def parse_choice(key: str) -> Choice | None:
    """Map a keystroke to a choice; anything but y/s/i/q gives None."""
    try:
        return Choice(key.lower())
    except ValueError:
        return None


class Editor(Protocol):
    def edit(self, text: str, language: str) -> str: ...


class Prompt(Protocol):
    def choose(self, document: Document, block: CodeBlock) -> Choice: ...


# File extensions that let editors pick the right syntax mode.
_EXTENSIONS = {
    "yaml": ".yaml",
    "javascript": ".js",
    "typescript": ".ts",
    "json": ".json",
    "css": ".css",
    "scss": ".scss",
    "less": ".less",
    "markdown": ".md",
    "graphql": ".graphql",
    "html": ".html",
    "vue": ".vue",
}


class ClickEditor:
    """Edits text in $VISUAL/$EDITOR through a temporary file."""

    def __init__(self, editor: str | None = None) -> None:
        self.editor = editor

    def edit(self, text: str, language: str) -> str:
        edited = click.edit(
            text,
            editor=self.editor,
            extension=_EXTENSIONS.get(language, ".txt"),
            require_save=False,
        )
        return text if edited is None else edited


class ClickPrompt:
    """Reads single keystrokes until one of y/s/i/q is typed."""

    def __init__(self, *, show_block: bool = True) -> None:
        self.show_block = show_block

    def choose(self, document: Document, block: CodeBlock) -> Choice:
        click.echo(f">> Block at line {block.start_line} still has errors.", err=True)
        if self.show_block:
            click.echo(render_block(document, block), err=True)
        while True:
            click.echo(PROMPT, nl=False, err=True)
            key = click.getchar()
            click.echo(err=True)
            choice = parse_choice(key)
            if choice is not None:
                return choice
            click.echo("Please type y or s or i or q", err=True)


@dataclass
class FixResult:
    resolved: int = 0
    skipped: int = 0
    ignored: int = 0
    quit: bool = False


class FixLoop:
    """Walks the error markers of one document, editing and reformatting."""

    def __init__(
        self,
        document: Document,
        config: FenceConfig,
        formatter: Formatter,
        editor: Editor,
        prompt: Prompt,
    ) -> None:
        self.document = document
        self.config = config
        self.formatter = formatter
        self.editor = editor
        self.prompt = prompt
        self.state = FixState.SCANNING
        self.result = FixResult()

    def run(self) -> FixResult:
        marker = find_error(self.document, 1)
        if marker is not None:
            # Nothing is edited unless the block can be reformatted afterwards.
            self.formatter.ensure_available()
        while marker is not None:
            self.state = FixState.SCANNING
            block = self._flagged_block(marker)
            if block is None:
                logger.warning(
                    "%s:%d: error marker is not inside a %s block, skipping",
                    self.document, marker, "/".join(self.config.languages),
                )
                marker = find_error(self.document, marker + 1)
                continue

            self._edit(block)
            self.state = FixState.REFORMATTING
            format_block(self.document, block.start_line, self.config, self.formatter)

            new_marker = find_error(self.document, marker)
            if new_marker != marker:
                self.state = FixState.RESOLVED
                self.result.resolved += 1
                marker = new_marker
                continue

            self.state = FixState.STILL_ERRORING
            marker = self._decide(marker)

        if self.state is not FixState.QUIT:
            self.state = FixState.DONE
        return self.result

    def _flagged_block(self, marker: int) -> CodeBlock | None:
        block = find_block(self.document, marker - 1, self.config)
        if block is None or block.start_line != marker - 1:
            return None
        return block

    def _edit(self, block: CodeBlock) -> None:
        self.state = FixState.EDITING
        # Drop the marker; replacing the block content removes it from the file.
        content = self.document.block_lines(block)[1:]
        text = "".join(line + "\n" for line in strip_indent(content, block.indent))
        edited = self.editor.edit(text, block.language)
        new_lines = reapply_indent(split_lines(edited)[0], block.indent)
        self.document.replace_block_contents(block, new_lines)

    def _decide(self, marker: int) -> int | None:
        """Ask what to do with a block that still errors; return the next marker."""
        self.state = FixState.DECIDING
        block = find_block(self.document, marker - 1, self.config)
        choice = self.prompt.choose(self.document, block)
        logger.debug("%s:%d: user chose %s", self.document, marker - 1, choice.name)

        if choice is Choice.EDIT_AGAIN:
            return marker
        if choice is Choice.SKIP:
            self.result.skipped += 1
            return find_error(self.document, marker + 1)
        if choice is Choice.IGNORE:
            self.result.ignored += 1
            self.document.delete_line(marker)
            return find_error(self.document, marker)
        self.state = FixState.QUIT
        self.result.quit = True
        return None
