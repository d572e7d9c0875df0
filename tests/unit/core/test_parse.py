"""Unit tests for core/parse.py"""

import pytest

from mdspec.core.nodes import (
    Alignment,
    CodeBlock,
    DirectLink,
    Emphasis,
    HardBreak,
    Heading,
    InlineCode,
    InlineHtmlBlock,
    ListBlock,
    Literal,
    Paragraph,
    QuotedBlock,
    SpanBlock,
    Strong,
    TableBlock,
    UnsupportedBlock,
    UnsupportedSpan,
)
from mdspec.core.parse import discover_files, parse_dir, parse_file, parse_text


def _blocks(markdown: str):
    return parse_text(markdown, "test.md").paragraphs


# --- discovery ---

def test_discover_files_single(tmp_path):
    """discover_files returns a list with one file when given a file path."""
    f = tmp_path / "doc.md"
    f.write_text("# Hello")
    assert discover_files(f) == [f]


def test_discover_files_non_md_skipped(tmp_path):
    """discover_files ignores files that aren't .md."""
    (tmp_path / "notes.txt").write_text("text")
    (tmp_path / "page.mdx").write_text("text")
    assert discover_files(tmp_path) == []


def test_discover_files_sorted_recursive(tmp_path):
    """discover_files finds .md files recursively, in sorted order."""
    (tmp_path / "b.md").write_text("b")
    sub = tmp_path / "a"
    sub.mkdir()
    (sub / "c.md").write_text("c")
    assert discover_files(tmp_path) == [sub / "c.md", tmp_path / "b.md"]


def test_parse_file_uses_file_name(tmp_path):
    """Documents are named by their file name, without directories."""
    sub = tmp_path / "spec"
    sub.mkdir()
    f = sub / "basic-concepts.md"
    f.write_text("# 7 Basic concepts\n")
    doc = parse_file(f)
    assert doc.filename == "basic-concepts.md"
    assert isinstance(doc.paragraphs[0], Heading)


def test_parse_file_unreadable(tmp_path):
    """A missing file is reported as ValueError."""
    with pytest.raises(ValueError, match="Cannot read"):
        parse_file(tmp_path / "missing.md")


def test_parse_dir(tmp_path):
    """parse_dir parses every discovered file."""
    (tmp_path / "a.md").write_text("a\n")
    (tmp_path / "b.md").write_text("b\n")
    assert [d.filename for d in parse_dir(tmp_path)] == ["a.md", "b.md"]


# --- blocks ---

def test_heading_and_line_numbers():
    """Headings keep their level; blocks record their 1-based source line."""
    heading, paragraph = _blocks("## 1.2 Scope\n\nText.\n")
    assert heading == Heading(2, (Literal("1.2 Scope"),))
    assert heading.line == 1
    assert paragraph.line == 3


def test_text_and_softbreaks_merge_into_one_literal():
    """Adjacent text, soft breaks and inline HTML form a single literal."""
    (paragraph,) = _blocks("one\ntwo <b>three\n")
    assert paragraph.body == (Literal("one\ntwo <b>three"),)


def test_inline_spans():
    """Emphasis, strong, code, links and hard breaks map to their span types."""
    (paragraph,) = _blocks("*a* **b** `c` [d](https://e.com \"T\")  \nf\n")
    assert paragraph.body == (
        Emphasis((Literal("a"),)),
        Literal(" "),
        Strong((Literal("b"),)),
        Literal(" "),
        InlineCode("c"),
        Literal(" "),
        DirectLink((Literal("d"),), "https://e.com", "T"),
        HardBreak(),
        Literal("f"),
    )


def test_bold_italic_nesting():
    """***x*** reaches the converter as emphasis around strong."""
    (paragraph,) = _blocks("***x***\n")
    assert paragraph.body == (Emphasis((Strong((Literal("x"),)),)),)


def _literals(spans):
    for span in spans:
        yield from _literals(getattr(span, "body", ()))
        if isinstance(span, Literal):
            yield span


@pytest.mark.parametrize("markdown", ["***x***\n", "A *__x__* b\n"])
def test_nested_emphasis_has_no_empty_literals(markdown):
    """Empty text tokens around nested emphasis never become empty literals."""
    (paragraph,) = _blocks(markdown)
    assert all(literal.text for literal in _literals(paragraph.body))


def test_underscore_bold_inside_italic():
    """*__x__* mid-sentence is emphasis around strong with no padding."""
    (paragraph,) = _blocks("A *__x__* b\n")
    assert paragraph.body == (Literal("A "), Emphasis((Strong((Literal("x"),)),)), Literal(" b"))


def test_unsupported_spans():
    """Images and strikethrough are unsupported spans."""
    (paragraph,) = _blocks("![alt](a.png) ~~gone~~\n")
    assert UnsupportedSpan("image") in paragraph.body
    assert UnsupportedSpan("s") in paragraph.body


def test_tight_list_items_are_span_blocks():
    """Tight list paragraphs become SpanBlocks."""
    (block,) = _blocks("- a\n- b\n")
    assert block == ListBlock(False, ((SpanBlock((Literal("a"),)),), (SpanBlock((Literal("b"),)),)))


def test_loose_ordered_list_items_are_paragraphs():
    """Loose list paragraphs stay Paragraphs; ordered lists are flagged."""
    (block,) = _blocks("1. a\n\n2. b\n")
    assert block.ordered
    assert block.items[0] == (Paragraph((Literal("a"),)),)


def test_nested_list():
    """A nested list is a block inside its parent item."""
    (block,) = _blocks("- a\n  - b\n")
    first_item = block.items[0]
    assert isinstance(first_item[1], ListBlock)


def test_blockquote():
    """Block quotes wrap their blocks."""
    (block,) = _blocks("> Note\n>\n> more\n")
    assert isinstance(block, QuotedBlock)
    assert len(block.paragraphs) == 2


def test_fence_language_and_trailing_newline():
    """Fence info becomes the language; the final newline is dropped."""
    (block,) = _blocks("```csharp title\nint x;\nint y;\n```\n")
    assert block == CodeBlock("int x;\nint y;", "csharp")


def test_indented_code_has_no_language():
    """Indented code is a CodeBlock with an empty language."""
    (block,) = _blocks("    x = 1\n")
    assert block == CodeBlock("x = 1", "")


def test_table():
    """Tables keep header, per-column alignment and rows."""
    (block,) = _blocks("| A | B | C |\n|:--|:-:|---|\n| 1 |  | 3 |\n")
    assert isinstance(block, TableBlock)
    assert block.alignments == (Alignment.left, Alignment.center, Alignment.default)
    assert block.headers[0] == (Paragraph((Literal("A"),)),)
    assert block.rows[0][1] == ()


def test_custom_marker_merged_with_following_html():
    """A custom block marker and the HTML after it become one block."""
    blocks = _blocks("<!-- Custom Word conversion: function_members -->\n<table>\n<tr><td>x</td></tr>\n</table>\n")
    assert len(blocks) == 1
    assert isinstance(blocks[0], InlineHtmlBlock)
    assert blocks[0].code.startswith("<!-- Custom Word conversion: function_members -->\n<table>")
    assert blocks[0].code.endswith("</table>")


def test_custom_marker_alone():
    """A marker followed by ordinary text stays a block of its own."""
    blocks = _blocks("<!-- Custom Word conversion: test -->\n\nText.\n")
    assert blocks[0] == InlineHtmlBlock("<!-- Custom Word conversion: test -->")
    assert isinstance(blocks[1], Paragraph)


def test_custom_marker_not_merged_across_blank_line():
    """HTML separated from a marker by a blank line is a block of its own."""
    blocks = _blocks("<!-- Custom Word conversion: nope -->\n\n<div>raw</div>\n")
    assert blocks == (
        InlineHtmlBlock("<!-- Custom Word conversion: nope -->", line=1),
        InlineHtmlBlock("<div>raw</div>", line=3),
    )


def test_thematic_break_unsupported():
    """Blocks outside the dialect are UnsupportedBlocks."""
    (block,) = _blocks("***\n")
    assert block == UnsupportedBlock("hr")


def test_reference_definitions():
    """Link reference definitions are collected as defined links."""
    doc = parse_text('[x][ref]\n\n[ref]: https://e.com "Title"\n', "test.md")
    assert list(doc.defined_links.values()) == [("https://e.com", "Title")]
