"""
Unit Tests for the HTML Renderer
"""

from unittest.mock import patch

import pytest
from lxml import html as lxml_html

from rly.figures import FigureResolver
from rly.reader import assemble, assemble_text
from rly.rendering.html_renderer import HtmlRenderer


@pytest.fixture
def renderer(test_settings):
    return HtmlRenderer(test_settings)


def _content(page: str):
    return lxml_html.document_fromstring(page).get_element_by_id("content")


class TestPage:

    def test_page_skeleton(self, renderer):
        page = renderer.render(assemble_text("\\title R&D [memo]\n\\author Me\n\n\\h1 X\n"))
        root = lxml_html.document_fromstring(page)

        assert page.startswith("<!DOCTYPE html>")
        assert root.findtext(".//title") == "R&D"
        assert root.get_element_by_id("header").text_content().count("Me") == 1
        assert root.get_element_by_id("container") is not None
        assert root.find(".//style") is not None
        assert not root.xpath('//div[@id="footer"]')

    def test_footer_from_settings(self, test_settings):
        test_settings.html_footer = "Acme Corporation"
        page = HtmlRenderer(test_settings).render(assemble_text("\\h1 X\n"))
        assert '<div id="footer">Acme Corporation</div>' in page


class TestBlocks:

    def test_headings_with_anchor_and_clamped_level(self, renderer):
        page = renderer.render(assemble_text("\\h1 One [one]\n\n\\h8 Deep\n"))
        assert '<h1 id="one">One</h1>' in page
        assert "<h6>Deep</h6>" in page

    def test_paragraph_inline_and_escaping(self, renderer):
        page = renderer.render(assemble_text("\\h1 X\n\na < b and b{bold} v{x<y}\n"))
        assert "<p>a &lt; b and <b>bold</b> <code>x&lt;y</code></p>" in page

    def test_verbatim_is_escaped_pre(self, renderer):
        page = renderer.render(assemble_text("\\h1 X\n\n  if a < b:\n      go()\n"))
        assert "<pre>  if a &lt; b:\n      go()</pre>" in page

    def test_lists(self, renderer):
        content = _content(renderer.render(assemble_text("\\h1 X\n\n1. a\n2. b\n\n* c\n")))
        assert [li.text for li in content.findall("ol/li")] == ["a", "b"]
        assert [li.text for li in content.findall("ul/li")] == ["c"]

    def test_table_structure(self, renderer):
        content = _content(renderer.render(assemble_text(
            "\\h1 X\n\n\\table Results tab1 |l|c|\na & b\nc\n"
        )))
        table = content.find("table")
        assert table.get("id") == "tab1"
        assert table.get("class") == "table"
        assert table.findtext("caption") == "Table 1: Results"
        assert [th.text for th in table.findall("thead/tr/th")] == ["a", "b"]
        assert [td.text or "" for td in table.findall("tbody/tr/td")] == ["c", ""]

    def test_colon_table_structure(self, renderer):
        page = renderer.render(assemble_text(
            "\\h1 X\n\n"
            "\\table First t1 |l|\nx\n\n"
            '|c|c| "Cap" t2\nname : value\nalpha : 1\n\n'
            "See t{t2}.\n"
        ))
        table = _content(page).findall("table")[1]
        assert table.get("id") == "t2"
        assert table.findtext("caption") == "Table 2: Cap"
        assert [th.text for th in table.findall("thead/tr/th")] == ["name", "value"]
        assert [td.text for td in table.findall("tbody/tr/td")] == ["alpha", "1"]
        assert '<a href="#t2">Table 2</a>' in page

    def test_tabular_has_no_caption(self, renderer):
        content = _content(renderer.render(assemble_text("\\h1 X\n\n\\tabular\na & b\n")))
        table = content.find("table")
        assert table.get("class") == "tabular"
        assert table.find("caption") is None

    def test_raw_embed_only_for_htm(self, renderer):
        page = renderer.render(assemble_text(
            "\\h1 X\n\n\\raw htm\n<hr class=\"x\">\n\n\\raw tex\n\\newpage\n"
        ))
        assert '<hr class="x">' in page
        assert "\\newpage" not in page


class TestCrossReferences:

    def test_references_resolve_after_primary_pass(self, renderer):
        # Reference precedes its target
        page = renderer.render(assemble_text(
            "\\h1 Intro [intro]\n\nSee t{t2} in S{later}.\n\n"
            "\\table First t1 |l|\nx\n\n"
            "\\h1 Later [later]\n\n"
            "\\table Second t2 |l|\ny\n"
        ))
        assert '<a href="#t2">Table 2</a>' in page
        assert '<a href="#later">Later</a>' in page
        assert "\x00" not in page

    def test_unknown_reference_shows_marker(self, renderer):
        page = renderer.render(assemble_text("\\h1 X\n\nSee f{missing}.\n"))
        assert '<a href="#missing">??</a>' in page


class TestFigures:

    def test_figure_element(self, write_rly, test_settings, fake_fig2dev):
        path = write_rly("doc.rly", '\\h1 X\n\n\\insert data_flow.fig "Data flow"\n')
        resolver = FigureResolver(test_settings)

        with patch("rly.figures.subprocess.run", side_effect=fake_fig2dev) as run:
            page = HtmlRenderer(test_settings, resolver).render(assemble(path, test_settings))

        assert run.call_args[0][0][:3] == ["fig2dev", "-L", "png"]
        figure = _content(page).find("figure")
        assert figure.get("id") == "DataFlow"
        assert figure.find("img").get("src") == "data_flow.png"
        assert figure.find("img").get("alt") == "Data flow"
        assert figure.findtext("figcaption") == "Figure 1: Data flow"
