"""Table construction from Markdown tables and from embedded HTML fragments"""

from typing import Callable, Iterable, Optional, Sequence

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from mdspec.core.diagnostics import DiagnosticCode, Reporter
from mdspec.core.document import (
    CODE_EMBEDDED,
    TABLE_CELL_STYLE,
    TABLE_LINE_AFTER,
    TABLE_LINE_BEFORE,
    Block,
    Justification,
    Paragraph,
    ParagraphProperties,
    Run,
    RunProperties,
    Table,
    TableCell,
    TableCellProperties,
    TableProperties,
    TableRow,
    VerticalMerge,
)
from mdspec.core.nodes import Alignment, Emphasis, InlineCode, Literal, Strong, TableBlock
from mdspec.core.nodes import Paragraph as MarkdownParagraph
from mdspec.core.nodes import TableCell as MarkdownCell
from mdspec.core.text import normalize_code


TABLE_INDENTATION = 360
FUNCTION_MEMBERS_WIDTH = 9000

_JUSTIFICATION = {
    Alignment.center: Justification.center,
    Alignment.right: Justification.right,
}


def create_table(indentation: int, width: int = None) -> Table:
    return Table(props=TableProperties(indentation=indentation, width=width))


def table_elements(table: Table) -> list[Block]:
    """Surround a table with the zero-height paragraphs that control spacing."""
    return [
        Paragraph(props=ParagraphProperties(style=TABLE_LINE_BEFORE), content=[Run(text="")]),
        table,
        Paragraph(props=ParagraphProperties(style=TABLE_LINE_AFTER), content=[Run(text="")]),
    ]


def create_cell(paragraph: Paragraph, justification: Justification = Justification.center) -> TableCell:
    props = paragraph.ensure_props()
    props.style = TABLE_CELL_STYLE
    props.justification = justification
    return TableCell(content=[paragraph])


def rewrite_bold_code_cell(cell: MarkdownCell) -> MarkdownCell:
    """Rewrite `*` + Emphasis(InlineCode) + `*` into Strong(InlineCode).

    Authors write bold code in a cell as ***`code`***, which the parser reads as
    emphasised code between two literal asterisks (the closing one
    sometimes ends up inside the emphasis).
    """
    if not cell or not isinstance(cell[0], MarkdownParagraph):
        return cell
    match cell[0].body:
        case (Literal(text="*"), Emphasis(body=(InlineCode() as code,)), Literal(text="*")):
            return (MarkdownParagraph((Strong((code,)),), line=cell[0].line),)
        case (Literal(text="*"), Emphasis(body=(InlineCode() as code, Literal(text="*")))):
            return (MarkdownParagraph((Strong((code,)),), line=cell[0].line),)
    return cell


def _is_empty_row(row: Sequence[MarkdownCell]) -> bool:
    return not any(len(cell) > 0 for cell in row)


class TableBuilder:
    """Builds table blocks; cell contents are converted through `convert_blocks`."""

    def __init__(
        self,
        convert_blocks: Callable[[Sequence], Iterable[Block]],
        reporter: Reporter,
        indentation: int = TABLE_INDENTATION,
        ):
        self.convert_blocks = convert_blocks
        self.reporter = reporter
        self.indentation = indentation

    def build(self, block: TableBlock) -> list[Block]:
        header = block.headers
        if header is None:
            self.reporter.error(DiagnosticCode.MISSING_TABLE_HEADER, "Github requires all tables to have header rows")
        elif _is_empty_row(header):
            # An empty header only satisfies the Markdown syntax.
            header = None

        columns = len(block.alignments)
        rows = ([header] if header is not None else []) + list(block.rows)
        table = create_table(self.indentation)
        for source_row in rows:
            row = TableRow()
            for index, cell in enumerate(source_row[:columns]):
                row.cells.append(self._cell(rewrite_bold_code_cell(cell), block.alignments[index]))
            table.rows.append(row)
        return table_elements(table)

    def _cell(self, cell: MarkdownCell, alignment: Alignment) -> TableCell:
        result = TableCell()
        for element in self.convert_blocks(cell):
            if isinstance(element, Paragraph):
                element.props = ParagraphProperties(
                    style=TABLE_CELL_STYLE,
                    justification=_JUSTIFICATION.get(alignment),
                )
            result.content.append(element)
        if not result.content:
            result.content.append(Paragraph(props=ParagraphProperties(spacing_after=0), content=[Run(text="")]))
        return result


# --- HTML fragments ---

def function_members_table(html: str, reporter: Reporter) -> list[Block]:
    """Build the function members table from its HTML source.

    Only `tr`, `th`, `td`, `code` and text are understood. A `rowspan` on the
    first cell of a row starts a vertical merge; the following rows of the
    group get an empty continuation cell in front of their own cells.
    """
    soup = BeautifulSoup(html, "html.parser")
    source = soup.find("table")
    if source is None:
        reporter.error(DiagnosticCode.MEMBERS_WITHOUT_TABLE, "Function members block contains no table")
        return []

    table = create_table(TABLE_INDENTATION, width=FUNCTION_MEMBERS_WIDTH)
    rows_left_to_merge = 0
    for source_row in source.find_all("tr"):
        source_cells = source_row.find_all(["th", "td"], recursive=False)
        cells = [_html_cell(c, reporter) for c in source_cells]

        row_span = _row_span(source_cells[0]) if source_cells else None
        if row_span is not None:
            rows_left_to_merge = row_span - 1
            cells[0].props = TableCellProperties(vertical_merge=VerticalMerge.restart)
        elif rows_left_to_merge > 0:
            continuation = create_cell(Paragraph(), Justification.left)
            continuation.props = TableCellProperties(vertical_merge=VerticalMerge.continue_)
            cells.insert(0, continuation)
            rows_left_to_merge -= 1
        table.rows.append(TableRow(cells=cells))
    return table_elements(table)


def _row_span(cell: Tag) -> Optional[int]:
    value = cell.get("rowspan")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _html_cell(cell: Tag, reporter: Reporter) -> TableCell:
    if cell.name == "th":
        run = Run(text=cell.get_text(), props=RunProperties(bold=True))
        return create_cell(Paragraph(content=[run]), Justification.left)
    runs = []
    for node in cell.children:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            runs.append(Run(text=str(node)))
        elif isinstance(node, Tag) and node.name == "code":
            runs.append(Run(text=normalize_code(node.get_text()), props=RunProperties(style=CODE_EMBEDDED)))
        else:
            reporter.error(
                DiagnosticCode.UNEXPECTED_MEMBER_NODE,
                f"Unexpected node {getattr(node, 'name', type(node).__name__)} in function members table",
            )
    return create_cell(Paragraph(content=runs), Justification.left)


def single_cell_table() -> list[Block]:
    """Single-row, single-cell table exercising the custom block path."""
    table = create_table(900, width=8000)
    cell = create_cell(Paragraph(content=[Run(text="Normal cell")]))
    table.rows.append(TableRow(cells=[cell]))
    return table_elements(table)
