"""
TeX Renderer - Document → LaTeX source

Produces a self-contained LaTeX document (article class by default) with
longtable tables, float figures and \\label/\\ref cross references that
LaTeX resolves itself on the second run.
"""

import logging
import re
import textwrap
from typing import Iterable, List, Optional

from config.constants import TEX_GEOMETRY, TEX_KNOWN_CLASSES, TEX_PACKAGES
from rly.document_model import (
    Bullet,
    Document,
    Enumeration,
    Header,
    Heading,
    Insert,
    Paragraph,
    RawEmbed,
    Row,
    Table,
    Table2,
    Tabular,
    Verbatim,
)
from rly.rendering.base_renderer import BaseRenderer
from rly.rendering.inline import expand, tex_escape
from rly.rendering.xref import XrefIndex

logger = logging.getLogger(__name__)

# Sectioning commands by heading level; deeper levels reuse the last one
TEX_SECTIONING = ("section", "subsection", "subsubsection", "paragraph", "subparagraph")

# longtable only takes a horizontal alignment in its position slot
LONGTABLE_ALIGN_PATTERN = re.compile(r'^\[[lcr]\]$')

VERB_SPAN_PATTERN = re.compile(r'\\verb(\S)(.*?)\1')
# Stands in for spaces inside \verb while wrapping
PROTECTED_SPACE = "\x01"


def wrap(text: str, width: int) -> str:
    """Wrap to fixed-width lines without breaking inside \\verb spans."""
    protected = VERB_SPAN_PATTERN.sub(
        lambda m: m.group(0).replace(" ", PROTECTED_SPACE), text
    )
    wrapped = textwrap.fill(
        protected,
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    )
    return wrapped.replace(PROTECTED_SPACE, " ") + "\n"


class TexRenderer(BaseRenderer):
    """
    Renders a Document as LaTeX source text.

    Usage:
        renderer = TexRenderer()
        tex = renderer.render(document)
    """

    formats = ("tex", "pdf")
    figure_kind = "eps"

    def _inline(self, text: str) -> str:
        return expand(text, "tex")

    def _row(self, row: Row) -> str:
        return " & ".join(self._inline(cell) for cell in row)

    def document_class(self, header: Optional[Header]) -> str:
        if header and header.doctype in TEX_KNOWN_CLASSES:
            return header.doctype
        return self.settings.tex_document_class

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def render_header(self, header: Optional[Header]) -> str:
        options = self.settings.tex_class_options
        lines = [
            f"\\documentclass[{options}]{{{self.document_class(header)}}}" if options
            else f"\\documentclass{{{self.document_class(header)}}}",
            f"\\usepackage{{{','.join(TEX_PACKAGES)}}}",
            f"\\usepackage[{TEX_GEOMETRY}]{{geometry}}",
        ]
        if header:
            lines += [
                f"\\title{{{tex_escape(header.title or '')}}}",
                f"\\author{{{tex_escape(header.author or '')}}}",
                f"\\date{{{tex_escape(header.date or '')}}}",
            ]
        lines += [
            "\\begin{document}",
            "\\pagestyle{plain}",
            "\\pagenumbering{arabic}",
        ]
        if header:
            lines.append("\\maketitle")
        return "\n".join(lines) + "\n"

    def render_heading(self, heading: Heading) -> str:
        command = TEX_SECTIONING[min(heading.level, len(TEX_SECTIONING)) - 1]
        tex = f"\\{command}{{{tex_escape(heading.title)}}}\n"
        if heading.ref:
            tex += f"\\label{{{heading.ref}}}\n"
        return tex

    def render_paragraph(self, paragraph: Paragraph) -> str:
        return wrap(self._inline(paragraph.text), self.settings.wrap_width)

    def render_verbatim(self, verbatim: Verbatim) -> str:
        text = verbatim.text if verbatim.text.endswith("\n") else verbatim.text + "\n"
        return "\\begin{verbatim}\n" + text + "\\end{verbatim}\n"

    def render_raw(self, raw: RawEmbed) -> str:
        if raw.target == "tex":
            return raw.text
        logger.debug(f"Skipping raw block for {raw.target}")
        return ""

    def _items(self, entries: Iterable[str]) -> str:
        return "".join(f"\\item {self._inline(entry)}\n" for entry in entries)

    def render_enumeration(self, enumeration: Enumeration) -> str:
        return "\\begin{enumerate}\n" + self._items(enumeration.entries) + "\\end{enumerate}\n"

    def render_bullet(self, bullet: Bullet) -> str:
        return (
            "\\begin{list}{$\\bullet$}{\n"
            "\\setlength{\\topsep}{0.1ex}\n"
            "\\setlength{\\parsep}{0.1ex}}\n"
            + self._items(bullet.entries)
            + "\\end{list}\n"
        )

    def render_table(self, table: Table) -> str:
        """longtable whose header row repeats on every page."""
        option = table.option if table.option and LONGTABLE_ALIGN_PATTERN.match(table.option) else ""
        label = f"\\label{{{table.ref}}}" if table.ref else ""
        head = self._row(table.rows[0])
        body = [self._row(row) for row in table.rows[1:]]

        lines = [
            f"\\begin{{longtable}}{option}{{{table.format}}}",
            f"\\caption{{{tex_escape(table.caption)}}}{label}\\\\",
            "\\hline",
            f"{head}\\\\",
            "\\hline\\hline",
            "\\endfirsthead",
            "\\caption[]{(continued)}\\\\",
            "\\hline",
            f"{head}\\\\",
            "\\hline\\hline",
            "\\endhead",
        ]
        for row in body:
            lines += [f"{row}\\\\", "\\hline"]
        lines.append("\\end{longtable}")
        return "\n".join(lines) + "\n"

    def render_table2(self, table: Table2) -> str:
        return self.render_table(table)

    def render_tabular(self, tabular: Tabular) -> str:
        rows = "".join(f"{self._row(row)}\\\\\n" for row in tabular.rows)
        return (
            "\\bigskip\n\n"
            f"\\begin{{tabular}}{{{'l' * tabular.ncols}}}\n"
            + rows
            + "\\end{tabular}\n\n\\bigskip\n"
        )

    def render_insert(self, insert: Insert) -> str:
        eps = self.resolve_figure(insert)
        graphics_option = "[width=\\textwidth]" if self.figures.needs_full_width(eps) else ""
        placement = insert.option or "[H]"
        lines = [
            f"\\begin{{figure}}{placement}",
            "  \\center",
            f"  \\includegraphics{graphics_option}{{{insert.asset('eps')}}}",
        ]
        if insert.caption:
            lines.append(f"  \\caption{{{tex_escape(insert.caption)}}}")
        lines += [
            f"  \\label{{{insert.label}}}",
            "\\end{figure}",
        ]
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def finalize(self, document: Document, fragments: List[str], index: XrefIndex) -> str:
        body = "\n".join(fragment for fragment in fragments if fragment)
        logger.info(
            f"TeX rendered: {len(index)} labels, "
            f"{index.figure_count} figures, {index.table_count} tables"
        )
        return body + "\\end{document}\n"
