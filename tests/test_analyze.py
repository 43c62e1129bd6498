"""Tests for block analysis and rendering."""

from __future__ import annotations

from fencefmt.analyze import analyze_document, render_block
from fencefmt.scanner import find_block

DOC = (
    "```yaml\n"
    "a: 1\n"
    "b: 2\n"
    "```\n"
    "  ```yaml\n"
    "  [error] stdin: SyntaxError: bad\n"
    "  nope\n"
    "  ```\n"
)


class TestAnalyze:
    def test_blocks(self, make_doc, config):
        infos = analyze_document(make_doc(DOC), config)
        assert [(i.block.start_line, i.content_lines, i.flagged) for i in infos] == [
            (1, 2, False),
            (5, 1, True),
        ]
        assert infos[1].marker == "[error] stdin: SyntaxError: bad"

    def test_str(self, make_doc, config):
        info = analyze_document(make_doc(DOC), config)[1]
        text = str(info)
        assert "5-8" in text
        assert "yaml" in text
        assert "flagged" in text

    def test_render_plain(self, make_doc, config):
        doc = make_doc(DOC)
        rendered = render_block(doc, find_block(doc, 1, config), color=False)
        assert rendered == "2 | a: 1\n3 | b: 2"

    def test_render_keeps_blank_lines(self, make_doc, config):
        doc = make_doc("```yaml\n\na: 1\n\n```\n")
        rendered = render_block(doc, find_block(doc, 1, config), color=False)
        assert rendered.splitlines() == ["2 | ", "3 | a: 1", "4 | "]

    def test_render_highlighted(self, make_doc, config):
        doc = make_doc(DOC)
        rendered = render_block(doc, find_block(doc, 1, config))
        lines = rendered.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("2 | ")
        assert "a" in lines[0]

    def test_render_unknown_language(self, make_doc):
        from fencefmt.config import FenceConfig

        config = FenceConfig(languages=("vue",))
        doc = make_doc("```vue\n<template/>\n```\n")
        assert "template" in render_block(doc, find_block(doc, 1, config))

    def test_render_empty_block(self, make_doc, config):
        doc = make_doc("```yaml\n```\n")
        assert render_block(doc, find_block(doc, 1, config)) == ""
