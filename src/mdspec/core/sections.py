"""Section table: url, number and bookmark for every heading"""

import re
from pathlib import PurePosixPath
from typing import Iterable, Optional

from pydantic import BaseModel

from mdspec.core.diagnostics import DiagnosticCode, Location, Reporter
from mdspec.core.nodes import Heading, MarkdownDocument, plain_text
from mdspec.core.utils.slug import anchor_slug, bookmark_name


# "7", "7.1.2", or annex numbers such as "A.3"; a bare "A" is too ambiguous.
SECTION_NUMBER_RE = re.compile(r'^(\d+(?:\.\d+)*|[A-Z](?:\.\d+)+)\s+(.+)$')


class SectionRef(BaseModel):
    url: str
    title: str
    title_without_number: str
    number: Optional[str] = None
    bookmark_name: str


def section_url(filename: str, title: str) -> str:
    return f"{filename}#{anchor_slug(title)}"


def section_ref(filename: str, title: str) -> SectionRef:
    """Derive the SectionRef for a heading title in filename."""
    title = title.strip()
    m = SECTION_NUMBER_RE.match(title)
    number, without_number = (m.group(1), m.group(2)) if m else (None, title)
    return SectionRef(
        url=section_url(filename, title),
        title=title,
        title_without_number=without_number,
        number=number,
        bookmark_name=bookmark_name(PurePosixPath(filename).stem, anchor_slug(title)),
    )


def build_section_table(documents: Iterable[MarkdownDocument], reporter: Reporter = None) -> list[SectionRef]:
    """Collect SectionRefs for top-level headings across documents, in order.

    A heading whose url is already taken is reported and left out; the
    first heading keeps the url.
    """
    reporter = reporter or Reporter()
    sections: list[SectionRef] = []
    seen: dict[str, SectionRef] = {}
    for doc in documents:
        for block in doc.paragraphs:
            if not isinstance(block, Heading):
                continue
            ref = section_ref(doc.filename, plain_text(block.body))
            if ref.url in seen:
                reporter.error(
                    DiagnosticCode.DUPLICATE_SECTION,
                    f"Duplicate section url {ref.url!r} ({seen[ref.url].title!r} and {ref.title!r})",
                    location=Location(file=doc.filename, line=block.line),
                )
                continue
            seen[ref.url] = ref
            sections.append(ref)
    return sections
