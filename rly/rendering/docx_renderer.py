"""
DOCX Renderer - Document → word-processor emit operations

Produces a DocxArtifact (ops + cross-reference index) that DocxAdapter
replays with python-docx. Inline tags become run properties:

    e, i  → italic          c, v → monospace
    b     → bold            F    → small superscript
    u     → underline       m    → math font, italic
    P, f, t, s, S → internal hyperlink to the label's bookmark
"""

import logging
from typing import Dict, List, Optional, Tuple

from config.constants import (
    DOCX_CODE_FONT,
    DOCX_CODE_SIZE_PT,
    DOCX_FOOTNOTE_SIZE_PT,
    DOCX_MATH_FONT,
    DOCX_MAX_HEADING_LEVEL,
    DOCX_TABLE_STYLE,
)
from rly.document_model import (
    Bullet,
    Document,
    Enumeration,
    Header,
    Heading,
    Insert,
    Paragraph,
    RawEmbed,
    Table,
    Table2,
    Tabular,
    Verbatim,
)
from rly.rendering.base_renderer import BaseRenderer
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
from rly.rendering.inline import scan
from rly.rendering.xref import XrefIndex

logger = logging.getLogger(__name__)

Ops = List[DocxOp]

# Run properties per inline tag
RUN_STYLES: Dict[str, dict] = {
    'e': {'italic': True},
    'i': {'italic': True},
    'b': {'bold': True},
    'u': {'underline': True},
    'c': {'font_name': DOCX_CODE_FONT},
    'v': {'font_name': DOCX_CODE_FONT},
    'F': {'superscript': True, 'size_pt': DOCX_FOOTNOTE_SIZE_PT},
    'm': {'font_name': DOCX_MATH_FONT, 'italic': True},
}

BODY_ALIGNMENT = "justify"


def inline_ops(text: str) -> Tuple[DocxOp, ...]:
    """Turn inline-tagged text into runs and hyperlinks."""
    ops: List[DocxOp] = []
    for span in scan(text):
        if span.tag is None:
            ops.append(TextRun(span.text))
        elif span.is_reference:
            ops.append(Hyperlink(anchor=span.text, tag=span.tag))
        else:
            ops.append(TextRun(span.text, **RUN_STYLES[span.tag]))
    return tuple(ops)


class DocxRenderer(BaseRenderer):
    """
    Renders a Document as a sequence of word-processor operations.

    Usage:
        artifact = DocxRenderer().render(document)
        render_docx(artifact, "report.docx")
    """

    formats = ("doc",)
    figure_kind = "png"

    def _cells(self, rows) -> Tuple[Tuple[Tuple[DocxOp, ...], ...], ...]:
        return tuple(tuple(inline_ops(cell) for cell in row) for row in rows)

    def render_header(self, header: Optional[Header]) -> Ops:
        if header is None:
            return []
        ops: Ops = [SetCoreProperties(title=header.title, author=header.author)]
        if header.title:
            ops += [
                SetPageHeader(header.title),
                StartParagraph(style="Title"),
                TextRun(header.title),
            ]
        for value in (header.author, header.date):
            if value:
                ops += [StartParagraph(style="Subtitle"), TextRun(value)]
        return ops

    def render_heading(self, heading: Heading) -> Ops:
        level = min(heading.level, DOCX_MAX_HEADING_LEVEL)
        ops: Ops = [StartParagraph(style=f"Heading {level}"), TextRun(heading.title)]
        if heading.ref:
            ops.append(Bookmark(heading.ref))
        return ops

    def render_paragraph(self, paragraph: Paragraph) -> Ops:
        return [StartParagraph(alignment=BODY_ALIGNMENT), *inline_ops(paragraph.text)]

    def render_verbatim(self, verbatim: Verbatim) -> Ops:
        ops: Ops = [StartParagraph()]
        for i, line in enumerate(verbatim.text.rstrip("\n").split("\n")):
            if i:
                ops.append(LineBreak())
            ops.append(TextRun(line, font_name=DOCX_CODE_FONT, size_pt=DOCX_CODE_SIZE_PT))
        return ops

    def render_raw(self, raw: RawEmbed) -> Ops:
        if raw.target != "doc":
            logger.debug(f"Skipping raw block for {raw.target}")
            return []
        return [StartParagraph(), TextRun(raw.text.rstrip("\n"))]

    def _list(self, entries, style: str) -> Ops:
        ops: Ops = []
        for entry in entries:
            ops.append(StartParagraph(style=style))
            ops.extend(inline_ops(entry))
        return ops

    def render_enumeration(self, enumeration: Enumeration) -> Ops:
        return self._list(enumeration.entries, "List Number")

    def render_bullet(self, bullet: Bullet) -> Ops:
        return self._list(bullet.entries, "List Bullet")

    def render_table(self, table: Table) -> Ops:
        ops: Ops = [CaptionInsert("Table", self.next_table_number(), table.caption)]
        if table.ref:
            ops.append(Bookmark(table.ref))
        ops.append(TableInsert(self._cells(table.rows), header_rows=1, style=DOCX_TABLE_STYLE))
        return ops

    def render_table2(self, table: Table2) -> Ops:
        return self.render_table(table)

    def render_tabular(self, tabular: Tabular) -> Ops:
        return [TableInsert(self._cells(tabular.rows), header_rows=0, style=None)]

    def render_insert(self, insert: Insert) -> Ops:
        png = self.resolve_figure(insert)
        return [
            StartParagraph(alignment="center"),
            PictureInsert(str(png)),
            CaptionInsert("Figure", self.next_figure_number(), insert.caption or ""),
            Bookmark(insert.label),
        ]

    def finalize(self, document: Document, fragments: List[Ops], index: XrefIndex) -> DocxArtifact:
        ops = tuple(op for fragment in fragments for op in fragment)
        logger.info(f"DOCX rendered: {len(ops)} operations")
        return DocxArtifact(ops=ops, index=index)
