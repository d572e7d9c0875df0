"""Rewrite plain §N section references in Markdown sources as links"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel

from mdspec.core.diagnostics import DiagnosticCode, Location, Reporter
from mdspec.core.sections import SectionRef


logger = logging.getLogger(__name__)

SECTION_SIGN = "§"
REFERENCE_RE = re.compile(r'§[A-Za-z0-9.\-]*')


class SectionLink(BaseModel):
    reference: str      # "§12.3"
    url: str            # "expressions.md#123-foo"

    @property
    def markdown(self) -> str:
        return f"[{self.reference}]({self.url})"


def build_link_map(sections: Iterable[SectionRef]) -> dict[str, SectionLink]:
    """Map "§<number>" to its link for every numbered section."""
    links = {}
    for section in sections:
        if section.number is None:
            continue
        reference = f"{SECTION_SIGN}{section.number}"
        links[reference] = SectionLink(reference=reference, url=section.url)
    return links


class ReferenceUpdater:
    """Replaces §N references line by line; existing [§N](...) links are refreshed in place."""

    def __init__(self, links: dict[str, SectionLink], reporter: Reporter = None):
        self.links = links
        self.reporter = reporter or Reporter()

    def process_line(self, line: str, location: Location = None) -> str:
        if SECTION_SIGN not in line:
            return line
        out = []
        index = 0
        for m in REFERENCE_RE.finditer(line):
            start, end = m.start(), m.end()
            if start < index:
                continue
            # A trailing '.' ends the sentence, not the reference.
            if line[end - 1] == ".":
                end -= 1
            reference = line[start:end]
            if len(reference) <= 1:
                continue

            link = self.links.get(reference)
            if link is None:
                self.reporter.error(DiagnosticCode.REFERENCE_NOT_FOUND, f"`{reference}` not found", location=location)
                continue

            out.append(line[index:start])
            replace_end = end
            if start > 0 and line[start - 1] == "[":
                existing_end = self._existing_link_end(line, end)
                if existing_end is None:
                    self.reporter.error(
                        DiagnosticCode.MALFORMED_REFERENCE,
                        f"Unexpected link text after `[{reference}`",
                        location=location,
                    )
                else:
                    out[-1] = out[-1][:-1]
                    replace_end = existing_end
            out.append(link.markdown)
            index = replace_end
        out.append(line[index:])
        return "".join(out)

    @staticmethod
    def _existing_link_end(line: str, end: int) -> Optional[int]:
        if line[end:end + 2] != "](":
            return None
        close = line.find(")", end + 2)
        return None if close == -1 else close + 1

    def update_file(self, path: Path, dry_run: bool = False) -> bool:
        """Update references in path. Returns True when the content changed.

        The file is only rewritten when something changed and dry_run is off.
        """
        try:
            original = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ValueError(f"Cannot read {path}: {e}") from e

        lines = original.split("\n")
        updated = "\n".join(
            self.process_line(line, Location(file=path.name, line=number))
            for number, line in enumerate(lines, start=1)
        )
        changed = updated != original
        if changed and not dry_run:
            path.write_text(updated, encoding="utf-8")
            logger.info("updated references in %s", path)
        return changed
