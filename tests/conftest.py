"""Shared pytest fixtures for the fencefmt test suite.

The fakes stand in for prettier, the user's editor and the keyboard so the
suite runs without external programs or a terminal.
"""

from __future__ import annotations

import logging
import re

import pytest

from fencefmt.config import FenceConfig
from fencefmt.document import Document
from fencefmt.fixer import Choice
from fencefmt.formatter import FormatResult

_PAIR = re.compile(r"^(\s*)([\w-]+):\s*(\S.*)$")


class FakeFormatter:
    """A tiny YAML-ish prettier: ``key:   value`` becomes ``key: value``.

    Any non-blank line without a key/value pair is a syntax error.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, bool]] = []

    def canonical(self, text: str) -> str | None:
        out = []
        for n, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                out.append("")
                continue
            m = _PAIR.match(line)
            if m is None:
                return None
            out.append(f"{m.group(1)}{m.group(2)}: {m.group(3).rstrip()}")
        return "".join(line + "\n" for line in out)

    def ensure_available(self) -> None:
        pass

    def run(self, text: str, profile: str, *, check: bool = False) -> FormatResult:
        self.calls.append((text, profile, check))
        canonical = self.canonical(text)
        if canonical is None:
            return FormatResult(
                ok=False,
                diagnostic="[error] stdin: SyntaxError: Implicit map keys need to be followed by map values (1:1)",
                returncode=2,
            )
        if check:
            return FormatResult(ok=canonical == text, returncode=0 if canonical == text else 1)
        return FormatResult(ok=True, output=canonical)


class FakeEditor:
    """Returns canned edits in order and records what it was shown."""

    def __init__(self, edits: list[str]) -> None:
        self.edits = list(edits)
        self.seen: list[tuple[str, str]] = []

    def edit(self, text: str, language: str) -> str:
        self.seen.append((text, language))
        if not self.edits:
            return text
        return self.edits.pop(0)


class FakePrompt:
    """Answers persistent-error prompts from a script of choices."""

    def __init__(self, choices: list[Choice]) -> None:
        self.choices = list(choices)
        self.asked: list[int] = []

    def choose(self, document, block) -> Choice:
        self.asked.append(block.start_line)
        return self.choices.pop(0)


@pytest.fixture
def config():
    return FenceConfig(languages=("yaml",))


@pytest.fixture
def formatter():
    return FakeFormatter()


@pytest.fixture
def make_editor():
    return FakeEditor


@pytest.fixture
def make_prompt():
    return FakePrompt


@pytest.fixture
def make_doc(tmp_path):
    """Write *text* to a markdown file and load it as a Document."""

    def _make(text: str, name: str = "doc.md") -> Document:
        path = tmp_path / name
        path.write_text(text)
        return Document(path)

    return _make


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI runs attach a handler to the runner's stderr; drop it afterwards."""
    yield
    logger = logging.getLogger("fencefmt")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
