"""Shared state of one conversion run"""

import re
from typing import Iterable, Optional

from mdspec.config import Settings
from mdspec.core.diagnostics import Location, Reporter
from mdspec.core.document import NumberingPart
from mdspec.core.sections import SectionRef
from mdspec.core.terms import ItalicUse, TermIndexer, TermRef


class ConversionContext:
    """Bookmark counter, term table, section table and list numbering for one run.

    One context may be shared by several documents converted in sequence so
    that bookmark ids stay unique and terms defined in one file link from the
    next. It is not safe to use from more than one thread.
    """

    def __init__(
        self,
        sections: Iterable[SectionRef] = (),
        reporter: Reporter = None,
        settings: Settings = None,
        ):
        self.settings = settings or Settings()
        self.reporter = reporter or Reporter()
        self.sections: dict[str, SectionRef] = {s.url: s for s in sections}
        self.max_bookmark_id = 0
        self.terms: dict[str, TermRef] = {}
        self.term_index = TermIndexer()
        self.italics: list[ItalicUse] = []
        self.numbering = NumberingPart()

    def next_bookmark_id(self) -> int:
        self.max_bookmark_id += 1
        return self.max_bookmark_id

    def define_term(self, text: str, location: Location) -> Optional[TermRef]:
        """Register a term; returns the earlier definition instead if one exists."""
        existing = self.terms.get(text)
        if existing is not None:
            return existing
        slug = re.sub(r"[^A-Za-z0-9]+", "_", text).strip("_")
        self.terms[text] = TermRef(
            text=text,
            bookmark_name=f"_Term{len(self.terms) + 1}_{slug}",
            location=location,
        )
        self.term_index.invalidate()
        return None

    def find_section(self, url: str, filename: str = None) -> Optional[SectionRef]:
        """Resolve a link target; `#anchor` targets are relative to filename."""
        if url in self.sections:
            return self.sections[url]
        if filename and url.startswith("#"):
            return self.sections.get(f"{filename}{url}")
        return None
