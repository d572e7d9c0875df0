"""List flattening, validation and numbering-scheme registration"""

from dataclasses import dataclass
from typing import Iterator

from mdspec.core.custom_blocks import custom_block_id
from mdspec.core.diagnostics import DiagnosticCode, Reporter
from mdspec.core.document import AbstractNumbering, NumberFormat, NumberingInstance, NumberingLevel, NumberingPart
from mdspec.core.nodes import (
    Block,
    CodeBlock,
    InlineCode,
    InlineHtmlBlock,
    ListBlock,
    Literal,
    Paragraph,
    QuotedBlock,
    SpanBlock,
    TableBlock,
)


MAX_LEVEL = 3
LEVEL_COUNT = MAX_LEVEL + 1

# Fenced code inside a list item reaches us as inline code starting with this.
CODE_ITEM_PREFIX = "csharp\n"
CODE_ITEM_LANGUAGE = "csharp"

# A list paragraph starting with this token is pulled back to the outermost level.
INDENT_RESET_MARKER = "ceci-n'est-pas-une-indent"

BULLET_GLYPHS = ("·", "o", "·", "o")
BULLET_FONTS = {"·": "Symbol", "o": "Courier New"}
ORDERED_FORMATS = (
    NumberFormat.decimal,
    NumberFormat.lower_letter,
    NumberFormat.lower_roman,
    NumberFormat.lower_roman,
)


@dataclass
class FlatItem:
    level: int
    has_bullet: bool        # first paragraph of its list item
    is_ordered: bool
    content: Block


# --- normalization ---

def _split_code_items(block: Paragraph | SpanBlock) -> Iterator[Block]:
    """Split a paragraph around inline code that is really a fenced code block."""
    kind = type(block)
    pending = []
    for span in block.body:
        if isinstance(span, InlineCode) and span.code.startswith(CODE_ITEM_PREFIX):
            if pending:
                yield kind(tuple(pending), line=block.line)
                pending = []
            yield CodeBlock(span.code[len(CODE_ITEM_PREFIX):], CODE_ITEM_LANGUAGE, line=block.line)
        else:
            pending.append(span)
    if pending:
        yield kind(tuple(pending), line=block.line)


def rewrite_code_items(block: ListBlock) -> ListBlock:
    """Turn inline code carrying the code-item prefix into real code blocks, one level deep."""
    items = []
    for item in block.items:
        rewritten = []
        for paragraph in item:
            if isinstance(paragraph, (Paragraph, SpanBlock)):
                rewritten.extend(_split_code_items(paragraph))
            else:
                rewritten.append(paragraph)
        items.append(tuple(rewritten))
    return ListBlock(block.ordered, tuple(items), line=block.line)


def _reset_indent(paragraph: Block, level: int) -> tuple[Block, int]:
    if not isinstance(paragraph, Paragraph) or not paragraph.body:
        return paragraph, level
    first = paragraph.body[0]
    if not isinstance(first, Literal) or not first.text.startswith(INDENT_RESET_MARKER):
        return paragraph, level
    body = (Literal(first.text[len(INDENT_RESET_MARKER):]),) + paragraph.body[1:]
    return Paragraph(body, line=paragraph.line), 0


# --- flattening ---

def _flatten(block: ListBlock, level: int, reporter: Reporter) -> Iterator[FlatItem]:
    for item in block.items:
        for index, paragraph in enumerate(item):
            match paragraph:
                case Paragraph() | SpanBlock():
                    content, item_level = _reset_indent(paragraph, level)
                    yield FlatItem(item_level, index == 0, block.ordered, content)
                case QuotedBlock() | CodeBlock() | TableBlock():
                    yield FlatItem(level, False, block.ordered, paragraph)
                case ListBlock():
                    yield from _flatten(paragraph, level + 1, reporter)
                case InlineHtmlBlock() if custom_block_id(paragraph) is not None:
                    yield FlatItem(level, False, block.ordered, paragraph)
                case _:
                    reporter.error(
                        DiagnosticCode.UNSUPPORTED_LIST_ITEM,
                        f"nothing fancy allowed in lists - specifically not '{type(paragraph).__name__}'",
                    )


def flatten_list(block: ListBlock, reporter: Reporter) -> list[FlatItem]:
    """Flatten nested lists into leveled items in document order, then validate them.

    Each switch between ordered and unordered items at one level is reported
    once, as is each item nested deeper than four levels; flattening always
    completes.
    """
    flat = list(_flatten(block, 0, reporter))
    last_style: dict[int, bool] = {}
    for item in flat:
        previous = last_style.get(item.level)
        if previous is not None and previous != item.is_ordered:
            reporter.error(DiagnosticCode.MIXED_LIST_ORDERING, "List can't mix ordered and unordered items at same level")
        last_style[item.level] = item.is_ordered
        if item.level > MAX_LEVEL:
            reporter.error(DiagnosticCode.LIST_TOO_DEEP, f"Can't have more than {LEVEL_COUNT} levels in a list")
    return flat


# --- numbering ---

def level_spec(level: int, ordered: bool, initial: int, step: int) -> NumberingLevel:
    if ordered:
        fmt, text, font = ORDERED_FORMATS[level], f"%{level + 1}.", None
    else:
        glyph = BULLET_GLYPHS[level]
        fmt, text, font = NumberFormat.bullet, glyph, BULLET_FONTS[glyph]
    return NumberingLevel(
        index=level,
        format=fmt,
        text=text,
        indent_left=initial + step * level,
        hanging=step,
        symbol_font=font,
    )


def register_numbering(flat: list[FlatItem], numbering: NumberingPart, initial: int, step: int) -> int:
    """Register a fresh abstract definition and instance for one list; returns the instance id.

    Every source list gets its own pair, even when an identical one exists,
    so that each list restarts its numbering.
    """
    ordered = [False] * LEVEL_COUNT
    for item in flat:
        if item.level <= MAX_LEVEL and item.is_ordered:
            ordered[item.level] = True

    abstract = AbstractNumbering(
        id=numbering.next_abstract_id(),
        levels=[level_spec(level, ordered[level], initial, step) for level in range(LEVEL_COUNT)],
    )
    numbering.abstracts.append(abstract)
    instance = NumberingInstance(id=numbering.next_instance_id(), abstract_id=abstract.id)
    numbering.instances.append(instance)
    return instance.id
