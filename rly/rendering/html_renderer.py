"""
HTML Renderer - Document → standalone HTML5 page

Structure:
    div#container
        div#header   (title, author, date)
        div#content  (headings and blocks)
        div#footer   (only when settings.html_footer is set)

Tables and figures are numbered in document order while emitting.
Reference tags (f{..}, t{..}, s{..}, S{..}, P{..}) are parked as
placeholders during the primary pass and resolved from the
cross-reference index in finalize().
"""

import html
import logging
from typing import Iterable, List, Optional

from config.constants import HTML_CSS
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
from rly.rendering.inline import expand, html_escape
from rly.rendering.xref import XrefIndex, resolve_references

logger = logging.getLogger(__name__)

MAX_HTML_HEADING = 6


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def reference_link(tag: str, label: str, display: str) -> str:
    return f'<a href="#{_attr(label)}">{html_escape(display)}</a>'


class HtmlRenderer(BaseRenderer):
    """
    Renders a Document as an HTML page.

    Usage:
        renderer = HtmlRenderer()
        page = renderer.render(document)
    """

    formats = ("htm",)
    figure_kind = "png"

    def _inline(self, text: str) -> str:
        return expand(text, "htm")

    def _cells(self, row: Row, tag: str) -> str:
        cells = "".join(f"<{tag}>{self._inline(cell)}</{tag}>" for cell in row)
        return f"<tr>{cells}</tr>\n"

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def render_header(self, header: Optional[Header]) -> str:
        title = html_escape(header.title or "") if header else ""
        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<style>{HTML_CSS}</style>",
            f"<title>{title}</title>",
            "</head>",
            "<body>",
            '<div id="container">',
        ]
        if header:
            parts.append('<div id="header">')
            for field in ("title", "author", "date"):
                value = getattr(header, field)
                if value:
                    parts.append(f'<div class="{field}">{html_escape(value)}</div>')
            parts.append("</div>")
        parts.append('<div id="content">')
        return "\n".join(parts) + "\n"

    def render_heading(self, heading: Heading) -> str:
        level = min(max(heading.level, 1), MAX_HTML_HEADING)
        anchor = f' id="{_attr(heading.ref)}"' if heading.ref else ""
        return f"<h{level}{anchor}>{html_escape(heading.title)}</h{level}>\n"

    def render_paragraph(self, paragraph: Paragraph) -> str:
        return f"<p>{self._inline(paragraph.text)}</p>\n"

    def render_verbatim(self, verbatim: Verbatim) -> str:
        text = html_escape(verbatim.text.rstrip("\n"))
        return f"<pre>{text}</pre>\n"

    def render_raw(self, raw: RawEmbed) -> str:
        if raw.target == "htm":
            return raw.text
        logger.debug(f"Skipping raw block for {raw.target}")
        return ""

    def _items(self, entries: Iterable[str]) -> str:
        return "".join(f"<li>{self._inline(entry)}</li>\n" for entry in entries)

    def render_enumeration(self, enumeration: Enumeration) -> str:
        return "<ol>\n" + self._items(enumeration.entries) + "</ol>\n"

    def render_bullet(self, bullet: Bullet) -> str:
        return "<ul>\n" + self._items(bullet.entries) + "</ul>\n"

    def render_table(self, table: Table) -> str:
        """Captioned table; <thead> repeats on every printed page."""
        number = self.next_table_number()
        anchor = f' id="{_attr(table.ref)}"' if table.ref else ""
        caption = f"Table {number}: {html_escape(table.caption)}" if table.caption else f"Table {number}"
        body = "".join(self._cells(row, "td") for row in table.rows[1:])
        return (
            f'<table class="table"{anchor}>\n'
            f"<caption>{caption}</caption>\n"
            f"<thead>\n{self._cells(table.rows[0], 'th')}</thead>\n"
            f"<tbody>\n{body}</tbody>\n"
            "</table>\n"
        )

    def render_table2(self, table: Table2) -> str:
        return self.render_table(table)

    def render_tabular(self, tabular: Tabular) -> str:
        body = "".join(self._cells(row, "td") for row in tabular.rows)
        return f'<table class="tabular">\n<tbody>\n{body}</tbody>\n</table>\n'

    def render_insert(self, insert: Insert) -> str:
        self.resolve_figure(insert)
        number = self.next_figure_number()
        caption = insert.caption or ""
        figcaption = f"Figure {number}: {html_escape(caption)}" if caption else f"Figure {number}"
        return (
            f'<figure id="{_attr(insert.label)}">\n'
            f'<img src="{_attr(insert.asset("png"))}" alt="{_attr(caption)}">\n'
            f"<figcaption>{figcaption}</figcaption>\n"
            "</figure>\n"
        )

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def finalize(self, document: Document, fragments: List[str], index: XrefIndex) -> str:
        parts = [fragment for fragment in fragments if fragment]
        parts.append("</div>\n")
        if self.settings.html_footer:
            parts.append(f'<div id="footer">{html_escape(self.settings.html_footer)}</div>\n')
        parts.append("</div>\n</body>\n</html>\n")
        return resolve_references("".join(parts), index, reference_link)
