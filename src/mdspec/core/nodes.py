"""Immutable Markdown node model consumed by the converter"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


# --- inline spans ---

@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Strong:
    body: tuple["Span", ...]


@dataclass(frozen=True)
class Emphasis:
    body: tuple["Span", ...]


@dataclass(frozen=True)
class InlineCode:
    code: str


@dataclass(frozen=True)
class Math:
    code: str


@dataclass(frozen=True)
class DirectLink:
    body: tuple["Span", ...]
    link: str
    title: Optional[str] = None


@dataclass(frozen=True)
class IndirectLink:
    """Reference-style link; `key` is looked up in MarkdownDocument.defined_links."""
    body: tuple["Span", ...]
    original: str
    key: str


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class UnsupportedSpan:
    """Inline construct the dialect has no rendering for (images, strikethrough, ...)."""
    kind: str


Span = Union[Literal, Strong, Emphasis, InlineCode, Math, DirectLink, IndirectLink, HardBreak, UnsupportedSpan]


# --- blocks ---

class Alignment(str, Enum):
    default = "default"
    left = "left"
    center = "center"
    right = "right"


@dataclass(frozen=True)
class Heading:
    size: int
    body: tuple[Span, ...]
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Paragraph:
    body: tuple[Span, ...]
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class SpanBlock:
    """Paragraph of a tight list item (no paragraph break in the source)."""
    body: tuple[Span, ...]
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class QuotedBlock:
    paragraphs: tuple["Block", ...]
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[tuple["Block", ...], ...]
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class CodeBlock:
    code: str
    language: str = ""
    line: Optional[int] = field(default=None, compare=False)


TableCell = tuple["Block", ...]
TableRow = tuple[TableCell, ...]


@dataclass(frozen=True)
class TableBlock:
    headers: Optional[TableRow]
    alignments: tuple[Alignment, ...]
    rows: tuple[TableRow, ...]
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class InlineHtmlBlock:
    code: str
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class UnsupportedBlock:
    kind: str
    line: Optional[int] = field(default=None, compare=False)


Block = Union[
    Heading, Paragraph, SpanBlock, QuotedBlock, ListBlock, CodeBlock,
    TableBlock, InlineHtmlBlock, UnsupportedBlock,
]


@dataclass(frozen=True)
class MarkdownDocument:
    """Parsed source file: top-level blocks plus link reference definitions."""
    filename: str
    paragraphs: tuple[Block, ...]
    defined_links: dict[str, tuple[str, Optional[str]]] = field(default_factory=dict)


def plain_text(spans: tuple[Span, ...]) -> str:
    """Concatenate the visible text of spans, ignoring styling."""
    parts = []
    for span in spans:
        match span:
            case Literal(text=text):
                parts.append(text)
            case InlineCode(code=code) | Math(code=code):
                parts.append(code)
            case Strong(body=body) | Emphasis(body=body) | DirectLink(body=body) | IndirectLink(body=body):
                parts.append(plain_text(body))
    return "".join(parts)
