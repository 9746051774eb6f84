"""
DOCX Adapter - Replays emit operations with python-docx

This is the only module that talks to python-docx. It walks a DocxArtifact
in order, keeping a single piece of state (the paragraph inline ops write
into), and builds the .docx object model.

Architecture:
    Document → DocxRenderer → DocxArtifact (ops) → DocxAdapter → .docx file

Word features used:
    - Built-in styles (Title, Subtitle, Heading N, List Bullet, List Number,
      Caption, Table Grid)
    - SEQ fields in captions so Word can renumber figures and tables
    - Bookmarks keyed by cross-reference labels
    - Internal hyperlinks (w:hyperlink w:anchor) to those bookmarks
    - Repeating table header rows (w:tblHeader)

Usage:
    from rly.rendering.docx_adapter import render_docx

    artifact = DocxRenderer().render(document)
    render_docx(artifact, Path("report.docx"))
"""

import logging
from pathlib import Path
from typing import Optional, Union

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt

from config.constants import DOCX_BODY_FONT, DOCX_HYPERLINK_COLOR
from rly.rendering.docx_ops import (
    Bookmark,
    CaptionInsert,
    DocxArtifact,
    DocxOp,
    Hyperlink,
    LineBreak,
    PictureInsert,
    SetCoreProperties,
    SetPageHeader,
    StartParagraph,
    TableInsert,
    TextRun,
)
from rly.rendering.xref import XrefIndex

logger = logging.getLogger(__name__)

ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


class DocxAdapter:
    """
    Builds a python-docx Document from emit operations.

    Usage:
        doc = DocxAdapter().build(artifact)
        doc.save("report.docx")
    """

    def __init__(self):
        self.doc = None
        self.index: Optional[XrefIndex] = None
        self._paragraph = None
        self._bookmark_id = 0

    def build(self, artifact: DocxArtifact):
        """Replay every op of the artifact onto a fresh Document."""
        self.doc = Document()
        self.index = artifact.index
        self._paragraph = None
        self._bookmark_id = 0

        self.doc.styles['Normal'].font.name = DOCX_BODY_FONT

        for op in artifact.ops:
            self._apply(op)

        logger.debug(f"Replayed {len(artifact)} operations")
        return self.doc

    def save(self, artifact: DocxArtifact, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        doc = self.build(artifact)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            doc.save(str(output_path))
        except OSError as e:
            logger.error(f"Failed to save DOCX: {e}")
            raise
        logger.info(f"DOCX saved: {output_path}")
        return output_path

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _apply(self, op: DocxOp) -> None:
        if isinstance(op, SetCoreProperties):
            props = self.doc.core_properties
            props.title = op.title or ""
            props.author = op.author or ""
        elif isinstance(op, SetPageHeader):
            self.doc.sections[0].header.paragraphs[0].text = op.text
        elif isinstance(op, StartParagraph):
            self._start_paragraph(op)
        elif isinstance(op, CaptionInsert):
            self._insert_caption(op)
        elif isinstance(op, TableInsert):
            self._insert_table(op)
        elif isinstance(op, Bookmark):
            self._add_bookmark(self._current_paragraph(), op.name)
        elif isinstance(op, PictureInsert):
            self._insert_picture(op)
        else:
            self._apply_inline(self._current_paragraph(), op)

    def _current_paragraph(self):
        if self._paragraph is None:
            self._paragraph = self.doc.add_paragraph()
        return self._paragraph

    # ------------------------------------------------------------------
    # Paragraph-level
    # ------------------------------------------------------------------

    def _start_paragraph(self, op: StartParagraph) -> None:
        self._paragraph = self.doc.add_paragraph(style=op.style) if op.style else self.doc.add_paragraph()
        if op.alignment:
            self._paragraph.alignment = ALIGNMENTS[op.alignment]

    def _insert_caption(self, op: CaptionInsert) -> None:
        """Caption paragraph with a SEQ field: "Figure {SEQ Figure}: title"."""
        p = self.doc.add_paragraph(style="Caption")
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p.add_run(f"{op.label} ")
        _insert_seq_field(p, op.label, op.number)
        if op.title:
            p.add_run(f": {op.title}")
        self._paragraph = p

    def _insert_table(self, op: TableInsert) -> None:
        ncols = len(op.rows[0]) if op.rows else 0
        table = self.doc.add_table(rows=len(op.rows), cols=ncols)
        if op.style:
            table.style = op.style

        for r, row in enumerate(op.rows):
            for c, cell_ops in enumerate(row):
                paragraph = table.cell(r, c).paragraphs[0]
                for cell_op in cell_ops:
                    self._apply_inline(paragraph, cell_op)

        for r in range(min(op.header_rows, len(op.rows))):
            _mark_header_row(table.rows[r])

        self._paragraph = None

    def _insert_picture(self, op: PictureInsert) -> None:
        """Inline picture, scaled down to the usable text width."""
        run = self._current_paragraph().add_run()
        shape = run.add_picture(op.path)

        section = self.doc.sections[-1]
        usable = section.page_width - section.left_margin - section.right_margin
        if shape.width > usable:
            shape.height = int(shape.height * usable / shape.width)
            shape.width = usable

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def _apply_inline(self, paragraph, op: DocxOp) -> None:
        if isinstance(op, TextRun):
            run = paragraph.add_run(op.text)
            if op.bold:
                run.bold = True
            if op.italic:
                run.italic = True
            if op.underline:
                run.underline = True
            if op.font_name:
                run.font.name = op.font_name
            if op.size_pt:
                run.font.size = Pt(op.size_pt)
            if op.superscript:
                run.font.superscript = True
        elif isinstance(op, LineBreak):
            paragraph.add_run().add_break()
        elif isinstance(op, Hyperlink):
            display = self.index.display_text(op.tag, op.anchor) if self.index is not None else op.anchor
            _add_internal_hyperlink(paragraph, op.anchor, display)
        else:
            raise TypeError(f"Not an inline operation: {op!r}")

    def _add_bookmark(self, paragraph, name: str) -> None:
        """Bookmark spanning the whole paragraph."""
        bookmark_id = str(self._bookmark_id)
        self._bookmark_id += 1

        start = OxmlElement('w:bookmarkStart')
        start.set(qn('w:id'), bookmark_id)
        start.set(qn('w:name'), name)
        end = OxmlElement('w:bookmarkEnd')
        end.set(qn('w:id'), bookmark_id)

        p = paragraph._p
        if p.pPr is not None:
            p.pPr.addnext(start)
        else:
            p.insert(0, start)
        p.append(end)


# ============================================================================
# OpenXML helpers
# ============================================================================

def _insert_seq_field(paragraph, label: str, number: int) -> None:
    """
    Insert a SEQ field (Word's caption counter) into a paragraph.

    The cached result is the renderer's number, so the document reads
    correctly before Word updates its fields.
    """
    run = paragraph.add_run()
    fldChar_begin = OxmlElement('w:fldChar')
    fldChar_begin.set(qn('w:fldCharType'), 'begin')

    instrText = OxmlElement('w:instrText')
    instrText.set(qn('xml:space'), 'preserve')
    instrText.text = f' SEQ {label} \\* ARABIC '

    fldChar_separate = OxmlElement('w:fldChar')
    fldChar_separate.set(qn('w:fldCharType'), 'separate')

    run._r.append(fldChar_begin)
    run._r.append(instrText)
    run._r.append(fldChar_separate)

    paragraph.add_run(str(number))

    fldChar_end = OxmlElement('w:fldChar')
    fldChar_end.set(qn('w:fldCharType'), 'end')
    run = paragraph.add_run()
    run._r.append(fldChar_end)


def _mark_header_row(row) -> None:
    """Repeat this row at the top of each page the table spans."""
    trPr = row._tr.get_or_add_trPr()
    tbl_header = OxmlElement('w:tblHeader')
    tbl_header.set(qn('w:val'), 'true')
    trPr.append(tbl_header)


def _add_internal_hyperlink(paragraph, anchor: str, text: str) -> None:
    """Hyperlink to a bookmark in the same document."""
    hyperlink = OxmlElement('w:hyperlink')
    hyperlink.set(qn('w:anchor'), anchor)

    run = OxmlElement('w:r')
    rPr = OxmlElement('w:rPr')
    color = OxmlElement('w:color')
    color.set(qn('w:val'), DOCX_HYPERLINK_COLOR)
    underline = OxmlElement('w:u')
    underline.set(qn('w:val'), 'single')
    rPr.append(color)
    rPr.append(underline)
    run.append(rPr)

    t = OxmlElement('w:t')
    t.set(qn('xml:space'), 'preserve')
    t.text = text
    run.append(t)

    hyperlink.append(run)
    paragraph._p.append(hyperlink)


# ============================================================================
# Convenience Functions
# ============================================================================

def render_docx(artifact: DocxArtifact, output_path: Union[str, Path]) -> Path:
    """Replay an artifact and save it as .docx."""
    return DocxAdapter().save(artifact, output_path)
