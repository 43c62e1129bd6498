"""fencefmt: format fenced code blocks in Markdown documents."""

__version__ = "0.1.0"
