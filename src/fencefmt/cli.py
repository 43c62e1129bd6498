"""fencefmt command line interface."""

from __future__ import annotations

from pathlib import Path

import click

from fencefmt import __version__
from fencefmt.analyze import analyze_document, render_block
from fencefmt.annotator import FormatOutcome, format_document
from fencefmt.config import FenceConfig, find_config, load_config, parse_languages
from fencefmt.document import Document
from fencefmt.errors import (
    ConfigError,
    Diagnostic,
    DiagnosticRenderer,
    FormatterNotFoundError,
    Severity,
)
from fencefmt.files import find_files
from fencefmt.fixer import ClickEditor, ClickPrompt, FixLoop
from fencefmt.formatter import PrettierFormatter
from fencefmt.log import configure_logging
from fencefmt.scanner import count_blocks, count_errors


class _Group(click.Group):
    """Click group that exits with status 1 on usage errors."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _fail(message: str) -> None:
    click.echo(f"error: {message}", err=True)
    raise SystemExit(1)


def _resolve_config(config_file: str | None) -> FenceConfig:
    if config_file is not None:
        return load_config(Path(config_file))
    try:
        return load_config(find_config())
    except FileNotFoundError:
        return load_config(None)


def _candidate_files(config: FenceConfig) -> list[Path]:
    try:
        return find_files(config.search_path, config.pattern)
    except ConfigError as e:
        _fail(str(e))


def _formatter(config: FenceConfig) -> PrettierFormatter:
    return PrettierFormatter(config.formatter, print_width=config.print_width)


@click.group(cls=_Group, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="fencefmt")
@click.option(
    "-l", "--languages", metavar="LANGUAGES",
    help='Process blocks with these languages, comma-separated (default: "yaml").',
)
@click.option("-p", "--path", "search_path", metavar="PATH", help="Path to files (default: '.').")
@click.option(
    "-c", "--config", "config_file", type=click.Path(dir_okay=False),
    help="Config file (default: nearest .fencefmt.toml).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    languages: str | None,
    search_path: str | None,
    config_file: str | None,
    verbose: bool,
) -> None:
    """Format fenced code blocks in Markdown files with prettier.

    \b
    Example:
      fencefmt -l yaml,javascript,typescript format
    """
    configure_logging(verbose)
    try:
        config = _resolve_config(config_file)
        config = config.override(
            languages=parse_languages(languages) if languages is not None else None,
            search_path=Path(search_path) if search_path is not None else None,
        )
    except (ConfigError, FileNotFoundError) as e:
        _fail(str(e))
    if not config.search_path.exists():
        _fail(f"Bad path: {config.search_path}")
    ctx.obj = config


@main.command(name="format")
@click.option("--check", is_flag=True, help="Report blocks that would change without writing.")
@click.pass_obj
def format_cmd(config: FenceConfig, check: bool) -> None:
    """Format files."""
    formatter = _formatter(config)
    renderer = DiagnosticRenderer(color=True)
    needs_formatting = False

    for path in _candidate_files(config):
        document = Document(path)
        blocks = count_blocks(document, config)
        if not blocks:
            continue
        click.echo(f"About to format {path} with {blocks} code blocks")
        try:
            reports = format_document(document, config, formatter, check_only=check)
        except FormatterNotFoundError as e:
            _fail(str(e))

        for report in reports:
            click.echo(str(report))
            if report.outcome is FormatOutcome.REJECTED:
                diag = Diagnostic(
                    Severity.ERROR, report.diagnostic, file=str(path), line=report.start_line,
                    notes=["run `fencefmt fix` to edit the block"],
                )
                click.echo(renderer.render(diag), err=True)
            if report.outcome is not FormatOutcome.OK:
                needs_formatting = True

    click.echo("Done!")
    if check and needs_formatting:
        raise SystemExit(1)


@main.command()
@click.option("-y", "--yes", is_flag=True, help="Do not ask before fixing each file.")
@click.pass_obj
def fix(config: FenceConfig, yes: bool) -> None:
    """Fix errors in files."""
    files = _candidate_files(config)
    flagged = [(path, count_errors(Document(path))) for path in files]
    flagged = [(path, count) for path, count in flagged if count]

    if not flagged:
        click.echo("No errors to fix")
        return

    click.echo("Errors:")
    for path, count in flagged:
        click.echo(f"{path}:{count}")

    formatter = _formatter(config)
    editor = ClickEditor(config.editor)
    prompt = ClickPrompt()

    for path, _ in flagged:
        document = Document(path)
        click.echo(f"About to process {count_errors(document)} errors in {path}")
        if not yes and not click.confirm("OK?", default=True):
            continue

        try:
            result = FixLoop(document, config, formatter, editor, prompt).run()
        except FormatterNotFoundError as e:
            _fail(str(e))

        click.echo(
            f"{path}: {result.resolved} resolved, {result.skipped} skipped, "
            f"{result.ignored} ignored"
        )
        if result.quit:
            click.echo("Quit")
            return

    click.echo("Done!")


@main.command()
@click.option("--show", is_flag=True, help="Print the content of flagged blocks.")
@click.pass_obj
def analyze(config: FenceConfig, show: bool) -> None:
    """Display info about blocks in files."""
    total = flagged = 0
    for path in _candidate_files(config):
        document = Document(path)
        infos = analyze_document(document, config)
        if not infos:
            continue
        click.echo(f"{path}: {len(infos)} code blocks")
        for info in infos:
            click.echo(f"  {info}")
            if info.flagged:
                click.echo(f"        {info.marker}")
                if show:
                    click.echo(render_block(document, info.block))
        total += len(infos)
        flagged += sum(1 for info in infos if info.flagged)

    click.echo(f"{total} blocks, {flagged} with errors")
