"""Custom blocks: HTML comments that request structures Markdown can't express"""

import re
from typing import Callable, Optional

from mdspec.core.diagnostics import DiagnosticCode, Reporter
from mdspec.core.document import Block, Paragraph, Run
from mdspec.core.nodes import InlineHtmlBlock
from mdspec.core.tables import function_members_table, single_cell_table


CUSTOM_BLOCK_RE = re.compile(r'^<!-- Custom Word conversion: ([a-z0-9_]+) -->')


def custom_block_id(block: InlineHtmlBlock) -> Optional[str]:
    m = CUSTOM_BLOCK_RE.match(block.code)
    return m.group(1) if m else None


def _placeholder(text: str) -> Callable[[InlineHtmlBlock, Reporter], list[Block]]:
    return lambda block, reporter: [Paragraph(content=[Run(text=text)])]


GENERATORS: dict[str, Callable[[InlineHtmlBlock, Reporter], list[Block]]] = {
    "function_members": lambda block, reporter: function_members_table(block.code, reporter),
    "format_strings_1": _placeholder("FIXME: Replace with first format strings table"),
    "format_strings_2": _placeholder("FIXME: Replace with second format strings table"),
    "test":             lambda block, reporter: single_cell_table(),
}


def generate(block_id: str, block: InlineHtmlBlock, reporter: Reporter) -> list[Block]:
    generator = GENERATORS.get(block_id)
    if generator is None:
        reporter.error(DiagnosticCode.UNKNOWN_CUSTOM_BLOCK, f"Invalid custom block ID: {block_id}")
        return [Paragraph(content=[Run(text=f"Custom block {block_id}")])]
    return generator(block, reporter)
