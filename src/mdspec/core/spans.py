"""Inline span conversion: styled runs, term definitions and uses, links"""

from typing import Iterable, Iterator, Optional, Sequence

from mdspec.core.context import ConversionContext
from mdspec.core.diagnostics import DiagnosticCode
from mdspec.core.document import (
    CODE_EMBEDDED,
    HYPERLINK_STYLE,
    TERM_UNDERLINE_COLOR,
    BookmarkEnd,
    BookmarkStart,
    Break,
    Hyperlink,
    Inline,
    Run,
    RunProperties,
)
from mdspec.core.nodes import (
    DirectLink,
    Emphasis,
    HardBreak,
    IndirectLink,
    InlineCode,
    Literal,
    Math,
    Span,
    Strong,
    UnsupportedSpan,
)
from mdspec.core.terms import ItalicUse
from mdspec.core.text import normalize_code, split_by_vertical_position


QUOTE_MARKER = "> "
END_MARKERS = ("end note", "end example")
COMMENT_ARTIFACT = "\n<!--"


def term_definition(span: Span) -> Optional[str]:
    """Return the term text if span is bold-italic around a single literal.

    `***term***` reaches us either as Strong(Emphasis(Literal)) or, from
    CommonMark parsers, as Emphasis(Strong(Literal)); both define a term.
    """
    match span:
        case Strong(body=(Emphasis(body=(Literal(text=text),)),)):
            return text
        case Emphasis(body=(Strong(body=(Literal(text=text),)),)):
            return text
    return None


def _styled(runs: Iterable[Inline], bold: bool = False, italic: bool = False) -> Iterator[Inline]:
    """Layer bold/italic on top of whatever style the runs already carry."""
    for element in runs:
        targets = element.runs if isinstance(element, Hyperlink) else [element]
        for run in targets:
            if isinstance(run, Run):
                run.props.bold = run.props.bold or bold
                run.props.italic = run.props.italic or italic
        yield element


class SpanRenderer:
    def __init__(
        self,
        context: ConversionContext,
        filename: str = None,
        defined_links: dict[str, tuple[str, Optional[str]]] = None,
        ):
        self.context = context
        self.reporter = context.reporter
        self.filename = filename
        self.defined_links = defined_links or {}

    def render_all(self, spans: Sequence[Span], nested: bool = False, in_list: bool = False) -> list[Inline]:
        """Render spans in order; a trailing break is dropped."""
        elements: list[Inline] = []
        for span in spans:
            elements.extend(self.render(span, nested, in_list))
        if elements and isinstance(elements[-1], Break):
            elements.pop()
        return elements

    def render(self, span: Span, nested: bool = False, in_list: bool = False) -> Iterator[Inline]:
        # A note or example embedded in a list item ends with *end note* / *end example*.
        if in_list and isinstance(span, Emphasis):
            match span.body:
                case (Literal(text=text),) if text in END_MARKERS:
                    yield from self.render(span, nested, in_list=False)
                    yield Break()
                    return

        match span:
            case Literal(text=text):
                if text.startswith(COMMENT_ARTIFACT):
                    return
                yield from self._literal(text, nested, in_list)
            case Strong() | Emphasis():
                yield from self._styled_span(span, nested)
            case InlineCode(code=code):
                for text, position in split_by_vertical_position(normalize_code(code)):
                    yield Run(text=text, props=RunProperties(style=CODE_EMBEDDED, vertical=position))
            case Math(code=code):
                yield Run(text=normalize_code(code), props=RunProperties(style=CODE_EMBEDDED))
            case DirectLink(body=body, link=link, title=title):
                yield from self._link(body, link, title or "")
            case IndirectLink(body=body, key=key):
                url, title = self.defined_links.get(key, ("", None))
                yield from self._link(body, url, title or "")
            case HardBreak():
                # Only ever produced by stray trailing spaces in the sources.
                return
            case UnsupportedSpan(kind=kind):
                self.reporter.error(DiagnosticCode.UNRECOGNIZED_SPAN, f"Unrecognized markdown element {kind}")
                yield Run(text=f"[{kind}]")
            case _:
                name = type(span).__name__
                self.reporter.error(DiagnosticCode.UNRECOGNIZED_SPAN, f"Unrecognized markdown element {name}")
                yield Run(text=f"[{name}]")

    def _literal(self, text: str, nested: bool, in_list: bool) -> Iterator[Inline]:
        if in_list:
            if text == QUOTE_MARKER:
                yield Break()
                return
            if text.endswith("\n" + QUOTE_MARKER):
                yield Run(text=text[:-len("\n" + QUOTE_MARKER)])
                yield Break()
                return

        if nested or not self.context.terms:
            yield Run(text=text)
            return

        terms = self.context.terms
        for needle in self.context.term_index.find(text, terms.keys()):
            s = text[needle.start:needle.start + needle.length]
            if needle.term is None:
                yield Run(text=s)
                continue
            self.context.italics.append(self._italic_use(s, "term"))
            props = RunProperties(underline="dotted", underline_color=TERM_UNDERLINE_COLOR)
            yield Hyperlink(anchor=terms[needle.term].bookmark_name, runs=[Run(text=s, props=props)])

    def _styled_span(self, span: Strong | Emphasis, nested: bool) -> Iterator[Inline]:
        term = None if nested else term_definition(span)
        if term is not None:
            yield from self._term_definition(term)
            return

        if not nested and isinstance(span, Emphasis):
            match span.body:
                case (Literal(text=text),):
                    self.context.italics.append(self._italic_use(text, "italic"))
                case _:
                    self.reporter.error(DiagnosticCode.ODD_EMPHASIS, "something odd inside emphasis")

        children = self.render_all(span.body, nested=True)
        yield from _styled(children, bold=isinstance(span, Strong), italic=isinstance(span, Emphasis))

    def _term_definition(self, term: str) -> Iterator[Inline]:
        location = self.reporter.location
        previous = self.context.define_term(term, location)
        if previous is not None:
            self.reporter.warning(DiagnosticCode.TERM_REDEFINED, f"Term '{term}' defined a second time")
            self.reporter.warning(
                DiagnosticCode.TERM_PREVIOUS_DEF,
                f"Here was the previous definition of term '{term}'",
                location=previous.location,
            )
            # The bookmark name already belongs to the first definition.
            yield Run(text=term, props=RunProperties(bold=True, italic=True))
            return
        bookmark_id = self.context.next_bookmark_id()
        yield BookmarkStart(name=self.context.terms[term].bookmark_name, id=bookmark_id)
        yield Run(text=term, props=RunProperties(bold=True, italic=True))
        yield BookmarkEnd(id=bookmark_id)

    def _link(self, body: Sequence[Span], url: str, title: str) -> Iterator[Inline]:
        match body:
            case (Literal(text=text),):
                anchor = text
            case (InlineCode(code=code),):
                anchor = code
            case _:
                self.reporter.error(DiagnosticCode.BAD_LINK_ANCHOR, "Link anchor must be Literal or InlineCode")
                return

        section = self.context.find_section(url, self.filename)
        if section is not None:
            # Links to numbered sections must read "§<number>"; annexes and
            # other unnumbered targets keep whatever text the author wrote.
            if section.number is not None:
                expected = f"§{section.number}"
                if anchor != expected:
                    self.reporter.warning(
                        DiagnosticCode.ANCHOR_MISMATCH,
                        f"Mismatch: link anchor is '{anchor}', should be '{expected}'",
                    )
            yield Hyperlink(anchor=section.bookmark_name, runs=[Run(text=anchor)])
        elif url.startswith(("http:", "https:")):
            runs = [e for e in self.render_all(body, nested=True) if isinstance(e, Run)]
            for run in runs:
                run.props.style = HYPERLINK_STYLE
            yield Hyperlink(target=url, tooltip=title, runs=runs)
        elif url:
            self.reporter.error(
                DiagnosticCode.UNRECOGNIZED_URL,
                f"Hyperlink url '{url}' unrecognized - not a recognized heading, and not http",
            )

    def _italic_use(self, text: str, kind: str) -> ItalicUse:
        return ItalicUse(text=text, kind=kind, location=self.reporter.location)
