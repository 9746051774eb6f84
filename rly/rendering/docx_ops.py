"""
Word-processor emit operations

The DOCX renderer does not touch python-docx. It produces an ordered
sequence of these immutable operations, and DocxAdapter replays them
against a python-docx Document. Keeping the ordering logic on this side
means renderer output can be inspected and tested without building a file.

Paragraph-level ops (StartParagraph, CaptionInsert, TableInsert) open a
new paragraph or table; inline ops (TextRun, LineBreak, Hyperlink,
Bookmark, PictureInsert) apply to the most recently opened paragraph.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from config.constants import DOCX_TABLE_STYLE
from rly.rendering.xref import XrefIndex


@dataclass(frozen=True)
class DocxOp:
    """Base class for emit operations."""
    pass


# ============================================================================
# Document-level
# ============================================================================

@dataclass(frozen=True)
class SetCoreProperties(DocxOp):
    title: Optional[str] = None
    author: Optional[str] = None


@dataclass(frozen=True)
class SetPageHeader(DocxOp):
    """Text shown in the page header of every page."""
    text: str


# ============================================================================
# Paragraph-level
# ============================================================================

@dataclass(frozen=True)
class StartParagraph(DocxOp):
    style: Optional[str] = None
    alignment: Optional[str] = None  # "left", "center", "right", "justify"


@dataclass(frozen=True)
class CaptionInsert(DocxOp):
    """Caption paragraph: "<label> <SEQ number>: <title>"."""
    label: str  # "Figure" or "Table"
    number: int
    title: str = ""


@dataclass(frozen=True)
class TableInsert(DocxOp):
    """
    Table with one run sequence per cell.

    rows[r][c] is a tuple of inline ops for that cell.
    """
    rows: Tuple[Tuple[Tuple[DocxOp, ...], ...], ...]
    header_rows: int = 1
    style: Optional[str] = DOCX_TABLE_STYLE


# ============================================================================
# Inline
# ============================================================================

@dataclass(frozen=True)
class TextRun(DocxOp):
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    font_name: Optional[str] = None
    size_pt: Optional[float] = None
    superscript: bool = False


@dataclass(frozen=True)
class LineBreak(DocxOp):
    pass


@dataclass(frozen=True)
class Hyperlink(DocxOp):
    """Internal link to a bookmark; display text comes from the xref index."""
    anchor: str
    tag: str  # reference tag letter (P, f, t, s, S)


@dataclass(frozen=True)
class Bookmark(DocxOp):
    """Bookmark spanning the current paragraph."""
    name: str


@dataclass(frozen=True)
class PictureInsert(DocxOp):
    """Inline picture, scaled down to the text width if wider."""
    path: str


# ============================================================================
# Result
# ============================================================================

@dataclass(frozen=True)
class DocxArtifact:
    """Renderer output: the op sequence plus the cross-reference index."""
    ops: Tuple[DocxOp, ...]
    index: XrefIndex

    def __len__(self) -> int:
        return len(self.ops)

    def of_type(self, op_type) -> Tuple[DocxOp, ...]:
        return tuple(op for op in self.ops if isinstance(op, op_type))
