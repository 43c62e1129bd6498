"""Candidate file discovery."""

from __future__ import annotations

from pathlib import Path

from fencefmt.errors import ConfigError


def find_files(search_path: Path, pattern: str = "*.md") -> list[Path]:
    """Every file under *search_path* matching *pattern*, or the path itself."""
    path = Path(search_path)
    if path.is_dir():
        return sorted(p for p in path.rglob(pattern) if p.is_file())
    if path.is_file():
        return [path]
    raise ConfigError(f"Bad path: {search_path}")
