"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdspec.config import Settings, load_config
from mdspec.core.diagnostics import Diagnostic, Reporter, Severity
from mdspec.core.pipeline import run_convert, run_renumber, run_sections


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _configure_logging(settings: Settings, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _echo_diagnostic(diagnostic: Diagnostic) -> None:
    # The heading trace is only interesting in verbose logs.
    if diagnostic.severity != Severity.info:
        typer.echo(str(diagnostic), err=True)


def convert_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to convert")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    max_line: Annotated[Optional[int], typer.Option("--max-line-length", help="Longest code line before a warning")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict", help="Exit 1 when errors were reported")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    """Convert Markdown sources into structured document JSON."""
    settings = _settings(overrides={
        "output_dir": out, "parser_config": parser,
        "max_code_line_length": max_line, "strict": strict,
    })
    _configure_logging(settings, verbose)
    output_dir = Path(settings.output_dir)
    reporter = Reporter(sink=_echo_diagnostic)

    try:
        results = run_convert(path, settings, output_dir, reporter)
    except ValueError as e:
        _fail("Conversion failed", e)
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")

    errors = reporter.count(Severity.error)
    warnings = reporter.count(Severity.warning)
    typer.echo(f"Converted {len(results)} document(s) to {output_dir}/ - {errors} error(s), {warnings} warning(s)")
    if settings.strict and errors:
        raise typer.Exit(1)


def sections_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to scan")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Print the section table: number, title and url of every heading."""
    settings = _settings(overrides={"parser_config": parser})
    try:
        sections = run_sections(path, settings.parser_config, Reporter(sink=_echo_diagnostic))
    except ValueError as e:
        _fail("Cannot build section table", e)
    for section in sections:
        typer.echo(f"{section.number or '-':<8} {section.title_without_number}  {section.url}")


def renumber_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to update")],
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report changes without writing files")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Rewrite §N section references as links to their sections."""
    settings = _settings(overrides={"parser_config": parser})
    reporter = Reporter(sink=_echo_diagnostic)
    try:
        changed = run_renumber(path, settings.parser_config, dry_run=dry_run, reporter=reporter)
    except ValueError as e:
        _fail("Renumbering failed", e)
    verb = "would update" if dry_run else "updated"
    for p in changed:
        typer.echo(f"  {verb}: {p}")
    typer.echo(f"{len(changed)} file(s) {verb}, {reporter.count(Severity.error)} error(s)")
    if settings.strict and reporter.count(Severity.error):
        raise typer.Exit(1)
