"""Multi-pattern search of literal text for defined terms"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel

from mdspec.core.diagnostics import Location


class TermRef(BaseModel):
    text: str
    bookmark_name: str
    location: Location


class ItalicUse(BaseModel):
    text: str
    kind: str               # "italic" | "term"
    location: Location


@dataclass(frozen=True)
class Needle:
    """A slice of the searched text; `term` is None for the gaps between matches."""
    start: int
    length: int
    term: Optional[str] = None


class TermIndexer:
    """Finds term occurrences with one compiled alternation over all term texts.

    The pattern is rebuilt lazily after `invalidate()`, which the context calls
    whenever a term is added. Longer terms are tried first, so at any position
    the longest defined term wins; matches never overlap.
    """

    def __init__(self):
        self._pattern: Optional[re.Pattern] = None
        self.rebuilds = 0

    def invalidate(self) -> None:
        self._pattern = None

    def _compile(self, keys: Iterable[str]) -> Optional[re.Pattern]:
        ordered = sorted((k for k in keys if k), key=lambda k: (-len(k), k))
        self.rebuilds += 1
        if not ordered:
            return None
        return re.compile("|".join(re.escape(k) for k in ordered))

    def find(self, text: str, keys: Iterable[str]) -> Iterator[Needle]:
        """Yield term matches and the plain gaps between them, covering all of text."""
        if self._pattern is None:
            self._pattern = self._compile(keys)
        if self._pattern is None:
            if text:
                yield Needle(0, len(text))
            return

        index = 0
        for m in self._pattern.finditer(text):
            if m.start() > index:
                yield Needle(index, m.start() - index)
            yield Needle(m.start(), m.end() - m.start(), m.group())
            index = m.end()
        if index < len(text):
            yield Needle(index, len(text) - index)
