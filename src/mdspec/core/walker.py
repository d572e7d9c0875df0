"""Depth-first conversion of Markdown blocks into structured document blocks"""

import logging
from typing import Iterable, Iterator

from mdspec.core import custom_blocks
from mdspec.core.colorize import CSHARP, PLAIN, VB, Colorizer, DefaultColorizer
from mdspec.core.context import ConversionContext
from mdspec.core.diagnostics import DiagnosticCode
from mdspec.core.document import (
    CODE_STYLE,
    HEADING_STYLE,
    LIST_PARAGRAPH,
    Block,
    BookmarkEnd,
    BookmarkStart,
    Break,
    NumberingRef,
    Paragraph,
    ParagraphProperties,
    Run,
    RunProperties,
    Table,
)
from mdspec.core.lists import MAX_LEVEL, FlatItem, flatten_list, register_numbering, rewrite_code_items
from mdspec.core.nodes import (
    Block as MarkdownBlock,
    CodeBlock,
    Heading,
    InlineHtmlBlock,
    ListBlock,
    Literal,
    MarkdownDocument,
    QuotedBlock,
    SpanBlock,
    TableBlock,
    UnsupportedBlock,
    plain_text,
)
from mdspec.core.nodes import Paragraph as MarkdownParagraph
from mdspec.core.sections import section_ref, section_url
from mdspec.core.spans import SpanRenderer
from mdspec.core.tables import TableBuilder
from mdspec.core.text import normalize_code


logger = logging.getLogger(__name__)

LANGUAGES = {
    "csharp": CSHARP, "c#": CSHARP, "cs": CSHARP,
    "vb": VB, "vbnet": VB, "vb.net": VB,
    "": PLAIN, "console": PLAIN, "xml": PLAIN, "ANTLR": PLAIN,
}


class TreeWalker:
    """Converts one MarkdownDocument into output blocks, lazily and in document order.

    Nothing here raises on bad input: problems are reported through the
    context's reporter and a substitute (or nothing) is emitted instead.
    """

    def __init__(self, document: MarkdownDocument, context: ConversionContext, colorizer: Colorizer = None):
        self.document = document
        self.filename = document.filename
        self.context = context
        self.reporter = context.reporter
        self.settings = context.settings
        self.colorizer = colorizer or DefaultColorizer()
        self.spans = SpanRenderer(context, document.filename, document.defined_links)
        self.tables = TableBuilder(self.convert_blocks, self.reporter, self.settings.table_indentation)

    def convert(self) -> Iterator[Block]:
        self.reporter.current_file = self.filename
        self.reporter.current_line = None
        logger.debug("converting %s (%d blocks)", self.filename, len(self.document.paragraphs))
        yield from self.convert_blocks(self.document.paragraphs)

    def convert_blocks(self, blocks: Iterable[MarkdownBlock]) -> Iterator[Block]:
        for block in blocks:
            yield from self.convert_block(block)

    def convert_block(self, block: MarkdownBlock) -> Iterator[Block]:
        if getattr(block, "line", None) is not None:
            self.reporter.current_line = block.line

        match block:
            case Heading():
                yield self._heading(block)
            case MarkdownParagraph(body=body) | SpanBlock(body=body):
                yield Paragraph(content=self.spans.render_all(body))
            case QuotedBlock():
                yield from self._quoted(block)
            case ListBlock():
                yield from self._list(block)
            case CodeBlock():
                yield self._code(block)
            case TableBlock():
                yield from self.tables.build(block)
            case InlineHtmlBlock() if (block_id := custom_blocks.custom_block_id(block)) is not None:
                yield from custom_blocks.generate(block_id, block, self.reporter)
            case InlineHtmlBlock() if block.code.startswith("<!--"):
                return
            case UnsupportedBlock(kind=kind):
                yield self._unrecognized(kind)
            case _:
                yield self._unrecognized(type(block).__name__)

    def _unrecognized(self, kind: str) -> Paragraph:
        self.reporter.error(DiagnosticCode.UNRECOGNIZED_BLOCK, f"Unrecognized markdown element {kind}")
        return Paragraph(content=[Run(text=f"[{kind}]")])

    # --- headings ---

    def _heading(self, block: Heading) -> Paragraph:
        title = plain_text(block.body)
        url = section_url(self.filename, title)
        section = self.context.sections.get(url)
        if section is None:
            self.reporter.error(DiagnosticCode.UNKNOWN_SECTION, f"No section table entry for {url}")
            section = section_ref(self.filename, title)

        props = ParagraphProperties(style=HEADING_STYLE.format(level=block.size))
        if section.number is None:
            props.numbering = NumberingRef(level=0, instance_id=0)

        bookmark_id = self.context.next_bookmark_id()
        content = [BookmarkStart(name=section.bookmark_name, id=bookmark_id)]
        content.extend(self.spans.render(Literal(section.title_without_number)))
        content.append(BookmarkEnd(id=bookmark_id))

        path = section.url.split("#", 1)[0]
        self.reporter.log(
            DiagnosticCode.HEADING_TRACE,
            f"{path} {'#' * block.size} {section.title} [{section.number or ''}]",
        )
        return Paragraph(props=props, content=content)

    # --- notes and examples ---

    def _quoted(self, block: QuotedBlock) -> Iterator[Block]:
        step = self.settings.initial_indentation
        indented_lists: set[int] = set()
        for element in self.convert_blocks(block.paragraphs):
            match element:
                case Paragraph():
                    props = element.ensure_props()
                    numbering = props.numbering
                    if numbering is not None and numbering.instance_id != 0:
                        # List indentation lives in the numbering levels; shift each list once.
                        if numbering.instance_id not in indented_lists:
                            indented_lists.add(numbering.instance_id)
                            self._shift_numbering(numbering.instance_id, step)
                    else:
                        props.indent_left = step
                    yield element
                case Table():
                    element.props.indentation = step
                    yield element
                case _:
                    self.reporter.error(
                        DiagnosticCode.UNSUPPORTED_IN_QUOTE,
                        f"Unhandled element type in quoted block: {type(element).__name__}",
                    )

    def _shift_numbering(self, instance_id: int, step: int) -> None:
        abstract = self.context.numbering.abstract_for_instance(instance_id)
        if abstract is None:
            return
        for level in abstract.levels:
            level.indent_left += step

    # --- lists ---

    def _indent(self, level: int) -> int:
        return self.settings.initial_indentation + level * self.settings.list_level_indentation

    def _list(self, block: ListBlock) -> Iterator[Block]:
        flat = flatten_list(rewrite_code_items(block), self.reporter)
        instance_id = register_numbering(
            flat,
            self.context.numbering,
            self.settings.initial_indentation,
            self.settings.list_level_indentation,
        )
        for item in flat:
            yield from self._list_item(item, instance_id)

    def _list_item(self, item: FlatItem, instance_id: int) -> Iterator[Block]:
        content = item.content
        match content:
            case MarkdownParagraph(body=body) | SpanBlock(body=body):
                if item.has_bullet:
                    props = ParagraphProperties(
                        style=LIST_PARAGRAPH,
                        numbering=NumberingRef(level=min(item.level, MAX_LEVEL), instance_id=instance_id),
                    )
                else:
                    props = ParagraphProperties(indent_left=self._indent(item.level))
                yield Paragraph(props=props, content=self.spans.render_all(body, in_list=True))
            case QuotedBlock() | CodeBlock():
                for element in self.convert_block(content):
                    if isinstance(element, Paragraph):
                        element.ensure_props().indent_left = self._indent(item.level)
                    yield element
            case TableBlock():
                for element in self.convert_block(content):
                    if isinstance(element, Table):
                        element.props.indentation = self._indent(item.level)
                    yield element
            case InlineHtmlBlock() if (block_id := custom_blocks.custom_block_id(content)) is not None:
                yield from custom_blocks.generate(block_id, content, self.reporter)
            case _:
                self.reporter.error(
                    DiagnosticCode.UNEXPECTED_LIST_ITEM,
                    f"Unexpected item in list '{type(content).__name__}'",
                )

    # --- code ---

    def _code(self, block: CodeBlock) -> Paragraph:
        code = normalize_code(block.code)
        language = LANGUAGES.get(block.language)
        if language is None:
            self.reporter.error(DiagnosticCode.UNKNOWN_LANGUAGE, f"unrecognized language {block.language}")
            language = PLAIN

        limit = self.settings.max_code_line_length
        content = []
        for offset, line in enumerate(self.colorizer.colorize(language, code)):
            if line.length > limit:
                self.reporter.warning(
                    DiagnosticCode.CODE_LINE_TOO_LONG,
                    f"Line length {line.length} > maximum {limit}",
                    line_offset=offset,
                )
            if offset > 0:
                content.append(Break())
            for word in line.words:
                props = RunProperties(color=word.color, italic=word.italic)
                content.append(Run(text=word.text, props=props))
        return Paragraph(props=ParagraphProperties(style=CODE_STYLE), content=content)

