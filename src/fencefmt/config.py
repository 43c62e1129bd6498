"""TOML config loading for .fencefmt.toml."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, replace
from functools import cached_property
from pathlib import Path

from fencefmt.errors import ConfigError

CONFIG_NAME = ".fencefmt.toml"

SUPPORTED_LANGUAGES = (
    "yaml",
    "javascript",
    "typescript",
    "json",
    "css",
    "scss",
    "less",
    "markdown",
    "graphql",
    "html",
    "vue",
)

DEFAULT_LANGUAGES = ("yaml",)
DEFAULT_PRINT_WIDTH = 200

ERROR_PREFIX = "[error] stdin:"
ERROR_PATTERN = re.compile(r"^\s*\[error\] stdin:")
BLOCK_END_PATTERN = re.compile(r"^\s*```\s*$")


@dataclass(frozen=True)
class FenceConfig:
    languages: tuple[str, ...] = DEFAULT_LANGUAGES
    search_path: Path = Path(".")
    pattern: str = "*.md"
    print_width: int = DEFAULT_PRINT_WIDTH
    formatter: str = "prettier"
    editor: str | None = None

    @cached_property
    def block_start_pattern(self) -> re.Pattern[str]:
        """Opening fence tagged with one of the configured languages."""
        alternation = "|".join(re.escape(lang) for lang in self.languages)
        return re.compile(rf"^\s*```({alternation})\s*$")

    def override(self, **changes: object) -> FenceConfig:
        """Return a copy with the non-None *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def parse_languages(value: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Split a comma-separated language list and validate each entry."""
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    languages = tuple(item.strip() for item in items if item.strip())
    if not languages:
        raise ConfigError("no languages given")
    for language in languages:
        if language not in SUPPORTED_LANGUAGES:
            raise ConfigError(f"Unsupported language: {language}")
    return languages


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find .fencefmt.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path | None) -> FenceConfig:
    """Parse a .fencefmt.toml file into a FenceConfig; None gives defaults."""
    config = FenceConfig()
    if path is None:
        return config

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e

    section = data.get("fencefmt", {})
    if not isinstance(section, dict):
        raise ConfigError(f"invalid config {path}: [fencefmt] must be a table")

    languages = section.get("languages")
    search_path = section.get("path")
    if search_path is not None:
        # Relative paths are relative to the directory holding the config file.
        search_path = Path(path).parent / search_path
    print_width = section.get("print_width")
    if print_width is not None and not isinstance(print_width, int):
        raise ConfigError(f"invalid config {path}: print_width must be an integer")

    return config.override(
        languages=parse_languages(languages) if languages is not None else None,
        search_path=search_path,
        pattern=section.get("pattern"),
        print_width=print_width,
        formatter=section.get("formatter"),
        editor=section.get("editor"),
    )
