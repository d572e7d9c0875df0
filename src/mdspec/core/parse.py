"""File discovery and markdown-it tokenization into the Markdown node model"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdspec.core.custom_blocks import CUSTOM_BLOCK_RE
from mdspec.core.nodes import (
    Alignment,
    Block,
    CodeBlock,
    DirectLink,
    Emphasis,
    HardBreak,
    Heading,
    InlineCode,
    InlineHtmlBlock,
    ListBlock,
    Literal,
    MarkdownDocument,
    Paragraph,
    QuotedBlock,
    Span,
    SpanBlock,
    Strong,
    TableBlock,
    UnsupportedBlock,
    UnsupportedSpan,
)


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md'}

# Inline tokens whose text is concatenated into a single Literal.
_TEXT_TOKENS = {'text': None, 'softbreak': '\n', 'html_inline': None}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def parse_text(text: str, filename: str, parser_config: str = 'gfm-like') -> MarkdownDocument:
    """Parse Markdown source into a MarkdownDocument named filename."""
    env: dict = {}
    tokens = _make_parser(parser_config).parse(text, env)
    root = SyntaxTreeNode(tokens)
    defined_links = {
        key: (ref.get('href', ''), ref.get('title') or None)
        for key, ref in env.get('references', {}).items()
    }
    return MarkdownDocument(
        filename=filename,
        paragraphs=tuple(_blocks(root.children)),
        defined_links=defined_links,
    )


def parse_file(path: Path, parser_config: str = 'gfm-like') -> MarkdownDocument:
    """Parse a single markdown file; the document is named by the file name."""
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Cannot read {path}: {e}") from e
    logger.debug("parsing %s", path)
    return parse_text(text, path.name, parser_config)


def parse_dir(path: Path, parser_config: str = 'gfm-like') -> list[MarkdownDocument]:
    """Parse all .md files under path (file or directory)."""
    return [parse_file(p, parser_config) for p in discover_files(path)]


# --- blocks ---

def _line(node: SyntaxTreeNode) -> Optional[int]:
    return node.map[0] + 1 if node.map else None


def _adjacent(marker_end: Optional[int], node: SyntaxTreeNode) -> bool:
    return marker_end is not None and node.map is not None and node.map[0] == marker_end


def _blocks(nodes: Iterable[SyntaxTreeNode]) -> Iterable[Block]:
    pending_custom: Optional[InlineHtmlBlock] = None
    marker_end: Optional[int] = None
    for node in nodes:
        block = _block(node)
        # A custom block marker is a comment; the HTML it introduces starts on the next line.
        if pending_custom is not None:
            if isinstance(block, InlineHtmlBlock) and _adjacent(marker_end, node):
                block = InlineHtmlBlock(f"{pending_custom.code}\n{block.code}", line=pending_custom.line)
                pending_custom = None
                yield block
                continue
            yield pending_custom
            pending_custom = None
        if isinstance(block, InlineHtmlBlock) and CUSTOM_BLOCK_RE.match(block.code):
            pending_custom = block
            marker_end = node.map[1] if node.map else None
            continue
        yield block
    if pending_custom is not None:
        yield pending_custom


def _block(node: SyntaxTreeNode) -> Block:
    line = _line(node)
    match node.type:
        case 'heading':
            return Heading(int(node.tag[1:]), _inline_body(node), line=line)
        case 'paragraph':
            kind = SpanBlock if node.hidden else Paragraph
            return kind(_inline_body(node), line=line)
        case 'blockquote':
            return QuotedBlock(tuple(_blocks(node.children)), line=line)
        case 'bullet_list' | 'ordered_list':
            items = tuple(tuple(_blocks(item.children)) for item in node.children)
            return ListBlock(node.type == 'ordered_list', items, line=line)
        case 'fence':
            language = node.info.strip().split(maxsplit=1)[0] if node.info.strip() else ""
            return CodeBlock(_chomp(node.content), language, line=line)
        case 'code_block':
            return CodeBlock(_chomp(node.content), "", line=line)
        case 'table':
            return _table(node)
        case 'html_block':
            return InlineHtmlBlock(_chomp(node.content), line=line)
    return UnsupportedBlock(node.type, line=line)


def _chomp(text: str) -> str:
    return text[:-1] if text.endswith('\n') else text


def _alignment(cell: SyntaxTreeNode) -> Alignment:
    style = cell.attrs.get('style', '')
    if isinstance(style, str) and style.startswith('text-align:'):
        try:
            return Alignment(style[len('text-align:'):])
        except ValueError:
            pass
    return Alignment.default


def _cell(cell: SyntaxTreeNode) -> tuple[Block, ...]:
    body = _inline_body(cell)
    return (Paragraph(body, line=_line(cell)),) if body else ()


def _table(node: SyntaxTreeNode) -> TableBlock:
    header = None
    alignments: tuple[Alignment, ...] = ()
    rows = []
    for section in node.children:
        for tr in section.children:
            cells = tuple(_cell(c) for c in tr.children)
            if section.type == 'thead':
                header = cells
                alignments = tuple(_alignment(c) for c in tr.children)
            else:
                rows.append(cells)
    return TableBlock(header, alignments, tuple(rows), line=_line(node))


# --- inline spans ---

def _inline_body(node: SyntaxTreeNode) -> tuple[Span, ...]:
    for child in node.children:
        if child.type == 'inline':
            return _spans(child.children)
    return ()


def _spans(nodes: Iterable[SyntaxTreeNode]) -> tuple[Span, ...]:
    spans: list[Span] = []
    text: list[str] = []

    def flush():
        joined = "".join(text)
        text.clear()
        if joined:
            spans.append(Literal(joined))

    for node in nodes:
        if node.type in _TEXT_TOKENS:
            text.append(_TEXT_TOKENS[node.type] or node.content)
            continue
        flush()
        spans.append(_span(node))
    flush()
    return tuple(spans)


def _span(node: SyntaxTreeNode) -> Span:
    match node.type:
        case 'strong':
            return Strong(_spans(node.children))
        case 'em':
            return Emphasis(_spans(node.children))
        case 'code_inline':
            return InlineCode(node.content)
        case 'hardbreak':
            return HardBreak()
        case 'link':
            href = node.attrs.get('href', '')
            title = node.attrs.get('title')
            return DirectLink(_spans(node.children), str(href), str(title) if title else None)
    return UnsupportedSpan(node.type)
