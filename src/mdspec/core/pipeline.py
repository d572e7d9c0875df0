"""Pipeline step functions: convert, section listing and reference renumbering"""

import logging
from pathlib import Path

from mdspec.config import Settings
from mdspec.core.context import ConversionContext
from mdspec.core.diagnostics import Diagnostic, Reporter
from mdspec.core.document import ConvertedDocument
from mdspec.core.parse import discover_files, parse_file
from mdspec.core.references import ReferenceUpdater, build_link_map
from mdspec.core.sections import SectionRef, build_section_table
from mdspec.core.walker import TreeWalker


logger = logging.getLogger(__name__)

NUMBERING_FILE = "numbering.json"


def _parse_all(path: str, parser_config: str) -> list:
    files = discover_files(Path(path))
    if not files:
        raise ValueError(f"No .md files found under {path}")
    return [parse_file(p, parser_config) for p in files]


def run_sections(path: str, parser_config: str, reporter: Reporter = None) -> list[SectionRef]:
    """Parse every file under path and return the section table, in document order."""
    return build_section_table(_parse_all(path, parser_config), reporter)


def run_convert(
    path: str,
    settings: Settings,
    output_dir: Path,
    reporter: Reporter = None,
    ) -> list[tuple[str, Path]]:
    """Convert every .md file under path with one shared context.

    Writes one ConvertedDocument JSON per source file plus the numbering
    definitions of the whole run. Returns (source_name, json_file) pairs.
    Raises ValueError for unreadable input or a path without Markdown files.
    """
    reporter = reporter or Reporter()
    documents = _parse_all(path, settings.parser_config)
    sections = build_section_table(documents, reporter)
    context = ConversionContext(sections, reporter, settings)
    logger.info("converting %d file(s), %d section(s)", len(documents), len(sections))

    output_dir.mkdir(parents=True, exist_ok=True)
    results = []
    for document in documents:
        first = len(context.reporter.diagnostics)
        blocks = list(TreeWalker(document, context).convert())
        diagnostics: list[Diagnostic] = context.reporter.diagnostics[first:]
        converted = ConvertedDocument(filename=document.filename, blocks=blocks, diagnostics=diagnostics)
        out_file = output_dir / f"{Path(document.filename).stem}.json"
        out_file.write_text(converted.model_dump_json(indent=2))
        results.append((document.filename, out_file))

    (output_dir / NUMBERING_FILE).write_text(context.numbering.model_dump_json(indent=2))
    return results


def run_renumber(
    path: str,
    parser_config: str,
    dry_run: bool = False,
    reporter: Reporter = None,
    ) -> list[Path]:
    """Rewrite §N references in every file under path. Returns the files that changed."""
    files = discover_files(Path(path))
    reporter = reporter or Reporter()
    sections = build_section_table((parse_file(p, parser_config) for p in files), reporter)
    updater = ReferenceUpdater(build_link_map(sections), reporter)
    return [p for p in files if updater.update_file(p, dry_run=dry_run)]
