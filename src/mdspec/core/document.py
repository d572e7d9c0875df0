"""Structured output model: paragraphs, runs, tables and list numbering"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from mdspec.core.diagnostics import Diagnostic


# Paragraph, run and table style ids expected in the target template.
HEADING_STYLE     = "Heading{level}"
LIST_PARAGRAPH    = "ListParagraph"
CODE_STYLE        = "Code"
CODE_EMBEDDED     = "CodeEmbedded"
HYPERLINK_STYLE   = "Hyperlink"
TABLE_CELL_STYLE  = "TableCellNormal"
TABLE_LINE_BEFORE = "TableLineBefore"
TABLE_LINE_AFTER  = "TableLineAfter"
TABLE_GRID        = "TableGrid"

TERM_UNDERLINE_COLOR = "4BACC6"


class VerticalPosition(str, Enum):
    baseline = "baseline"
    subscript = "subscript"
    superscript = "superscript"


class Justification(str, Enum):
    left = "left"
    center = "center"
    right = "right"


class RunProperties(BaseModel):
    style:     Optional[str] = None
    bold:      bool = False
    italic:    bool = False
    color:     Optional[str] = None           # RRGGBB
    vertical:  VerticalPosition = VerticalPosition.baseline
    underline: Optional[str] = None           # e.g. "dotted"
    underline_color: Optional[str] = None


class Run(BaseModel):
    kind: Literal["run"] = "run"
    text: str
    props: RunProperties = Field(default_factory=RunProperties)


class Break(BaseModel):
    kind: Literal["break"] = "break"


class BookmarkStart(BaseModel):
    kind: Literal["bookmark_start"] = "bookmark_start"
    name: str
    id: int


class BookmarkEnd(BaseModel):
    kind: Literal["bookmark_end"] = "bookmark_end"
    id: int


class Hyperlink(BaseModel):
    """Link to a bookmark in the document (`anchor`) or to an external `target`."""
    kind: Literal["hyperlink"] = "hyperlink"
    anchor:  Optional[str] = None
    target:  Optional[str] = None
    tooltip: Optional[str] = None
    runs: list[Run] = Field(default_factory=list)


Inline = Annotated[Union[Run, Break, BookmarkStart, BookmarkEnd, Hyperlink], Field(discriminator="kind")]


class NumberingRef(BaseModel):
    level: int
    instance_id: int


class ParagraphProperties(BaseModel):
    style:          Optional[str] = None
    numbering:      Optional[NumberingRef] = None
    indent_left:    Optional[int] = None
    justification:  Optional[Justification] = None
    spacing_after:  Optional[int] = None


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    props: Optional[ParagraphProperties] = None
    content: list[Inline] = Field(default_factory=list)

    def ensure_props(self) -> ParagraphProperties:
        if self.props is None:
            self.props = ParagraphProperties()
        return self.props

    @property
    def text(self) -> str:
        """Visible text, hyperlink runs included; breaks read as newlines."""
        parts = []
        for item in self.content:
            if isinstance(item, Run):
                parts.append(item.text)
            elif isinstance(item, Hyperlink):
                parts.extend(r.text for r in item.runs)
            elif isinstance(item, Break):
                parts.append("\n")
        return "".join(parts)


class VerticalMerge(str, Enum):
    restart = "restart"
    continue_ = "continue"


class TableCellProperties(BaseModel):
    vertical_merge: Optional[VerticalMerge] = None


class TableCell(BaseModel):
    props: Optional[TableCellProperties] = None
    content: list["Block"] = Field(default_factory=list)


class TableRow(BaseModel):
    cells: list[TableCell] = Field(default_factory=list)


class TableProperties(BaseModel):
    style:       str = TABLE_GRID
    borders:     str = "single"
    indentation: int
    width:       Optional[int] = None


class Table(BaseModel):
    kind: Literal["table"] = "table"
    props: TableProperties
    rows: list[TableRow] = Field(default_factory=list)


Block = Annotated[Union[Paragraph, Table], Field(discriminator="kind")]

TableCell.model_rebuild()
TableRow.model_rebuild()
Table.model_rebuild()


# --- list numbering ---

class NumberFormat(str, Enum):
    bullet = "bullet"
    decimal = "decimal"
    lower_letter = "lowerLetter"
    lower_roman = "lowerRoman"


class NumberingLevel(BaseModel):
    index: int
    format: NumberFormat
    text: str
    start: int = 1
    indent_left: int
    hanging: int
    symbol_font: Optional[str] = None


class AbstractNumbering(BaseModel):
    id: int
    multi_level: bool = True
    levels: list[NumberingLevel]


class NumberingInstance(BaseModel):
    id: int
    abstract_id: int


class NumberingPart(BaseModel):
    """Every list definition registered while converting, in registration order."""
    abstracts: list[AbstractNumbering] = Field(default_factory=list)
    instances: list[NumberingInstance] = Field(default_factory=list)

    def next_abstract_id(self) -> int:
        return max((a.id for a in self.abstracts), default=0) + 1

    def next_instance_id(self) -> int:
        return max((i.id for i in self.instances), default=0) + 1

    def abstract_for_instance(self, instance_id: int) -> Optional[AbstractNumbering]:
        instance = next((i for i in self.instances if i.id == instance_id), None)
        if instance is None:
            return None
        return next((a for a in self.abstracts if a.id == instance.abstract_id), None)


class ConvertedDocument(BaseModel):
    """One converted source file, as written by the pipeline."""
    filename: str
    blocks: list[Block] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
