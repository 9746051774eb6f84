"""
Integration Tests - Full .rly → output conversions

External tools (fig2dev, latex, dvipdf) are replaced by fakes patched
into subprocess.run; everything else runs for real.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from docx import Document as WordDocument
from lxml import html as lxml_html

from rly import convert, output_path_for
from rly.converter import FORMATS, RENDERERS
from rly.errors import ExternalToolError, InclusionError, UnsupportedFormatError
from rly.reader import assemble_text
from rly.rendering.html_renderer import HtmlRenderer


class TestHtmlRoundTrip:
    """Rendered HTML re-parsed with lxml keeps block order and cell contents"""

    def test_round_trip(self, test_settings):
        source = (
            "\\h1 Overview\n\n"
            "A short paragraph.\n\n"
            "\\table Pairs pairs |l|l|\nkey & value\nalpha & 1\nbeta\n\n"
            "* one\n* two\n"
        )
        document = assemble_text(source)

        page = HtmlRenderer(test_settings).render(document)
        content = lxml_html.document_fromstring(page).get_element_by_id("content")

        assert [child.tag for child in content] == ["h1", "p", "table", "ul"]
        assert content.findtext("h1") == "Overview"
        assert content.findtext("p") == "A short paragraph."

        table = content.find("table")
        rows = [
            [cell.text_content() for cell in tr]
            for tr in table.iter("tr")
        ]
        assert rows == [list(r) for r in document.sections[0].blocks[1].rows]
        assert [li.text for li in content.findall("ul/li")] == ["one", "two"]


class TestConvert:

    def test_output_paths(self):
        assert output_path_for("a/report.rly", "tex") == Path("a/report.tex")
        assert output_path_for("a/report.rly", "doc") == Path("a/report.docx")
        assert output_path_for("notes", "htm") == Path("notes.htm")

    def test_every_format_has_a_renderer(self):
        assert set(RENDERERS) == set(FORMATS)
        assert RENDERERS["pdf"] is RENDERERS["tex"]
        assert all(cls.supports_format(fmt) for fmt, cls in RENDERERS.items())

    def test_unknown_format(self, write_rly):
        with pytest.raises(UnsupportedFormatError):
            convert(write_rly("r.rly", "\\h1 X\n"), "rtf")

    def test_htm_with_inclusion(self, write_rly, sample_rly, test_settings, fake_fig2dev):
        write_rly("appendix.rly", "\\h1 Appendix [app]\n\nSee S{intro}.\n")
        path = write_rly("report.rly", sample_rly + "\n\\insert appendix.rly\n")

        with patch("rly.figures.subprocess.run", side_effect=fake_fig2dev):
            output = convert(path, "htm", test_settings)

        assert output == path.with_suffix(".htm")
        page = output.read_text(encoding="utf-8")
        assert '<h1 id="app">Appendix</h1>' in page
        assert '<a href="#intro">Introduction</a>' in page
        assert '<a href="#tab_sales">Table 1</a>' in page
        assert '<a href="#DataFlow">Figure 1</a>' in page

    def test_tex(self, write_rly, sample_rly, test_settings, fake_fig2dev):
        path = write_rly("report.rly", sample_rly)

        with patch("rly.figures.subprocess.run", side_effect=fake_fig2dev):
            output = convert(path, "tex", test_settings)

        tex = output.read_text(encoding="utf-8")
        assert "\\section{Introduction}\n\\label{intro}" in tex
        assert "Table~\\ref{tab_sales}" in tex
        assert "\\includegraphics[width=\\textwidth]{data_flow.eps}" in tex

    def test_doc(self, write_rly, sample_rly, test_settings, fake_fig2dev):
        path = write_rly("report.rly", sample_rly)

        with patch("rly.figures.subprocess.run", side_effect=fake_fig2dev):
            output = convert(path, "doc", test_settings)

        assert output.suffix == ".docx"
        doc = WordDocument(str(output))
        assert doc.core_properties.title == "Quarterly Report"
        assert doc.paragraphs[0].text == "Quarterly Report"
        assert len(doc.tables) == 1
        assert len(doc.inline_shapes) == 1

    def test_pdf(self, write_rly, sample_rly, test_settings, fake_fig2dev):
        path = write_rly("report.rly", sample_rly)
        commands = []

        def _typeset(cmd, cwd=None, **kwargs):
            commands.append(cmd[0])
            workdir = Path(cwd)
            if cmd[0] == "latex":
                (workdir / "report.dvi").write_bytes(b"dvi")
                (workdir / "report.aux").write_text("")
            elif cmd[0] == "dvipdf":
                (workdir / cmd[2]).write_bytes(b"%PDF-1.4")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        with patch("rly.figures.subprocess.run", side_effect=fake_fig2dev), \
                patch("rly.rendering.pdf_builder.subprocess.run", side_effect=_typeset):
            output = convert(path, "pdf", test_settings)

        assert output == path.with_suffix(".pdf")
        assert output.exists()
        assert commands == ["latex", "latex", "dvipdf"]
        assert not path.with_suffix(".tex").exists()
        assert not path.with_suffix(".aux").exists()
        assert not path.with_suffix(".dvi").exists()

    def test_pdf_keeps_intermediates_when_asked(self, write_rly, test_settings):
        test_settings.keep_intermediate = True
        path = write_rly("plain.rly", "\\h1 X\n\nText.\n")

        def _typeset(cmd, cwd=None, **kwargs):
            if cmd[0] == "dvipdf":
                (Path(cwd) / cmd[2]).write_bytes(b"%PDF-1.4")
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        with patch("rly.rendering.pdf_builder.subprocess.run", side_effect=_typeset):
            convert(path, "pdf", test_settings)

        assert path.with_suffix(".tex").exists()

    def test_latex_failure_is_fatal(self, write_rly, test_settings):
        path = write_rly("plain.rly", "\\h1 X\n\nText.\n")
        failed = subprocess.CompletedProcess([], 1, stdout="! Undefined control sequence.", stderr="")

        with patch("rly.rendering.pdf_builder.subprocess.run", return_value=failed):
            with pytest.raises(ExternalToolError) as exc_info:
                convert(path, "pdf", test_settings)

        assert exc_info.value.tool == "latex"
        assert exc_info.value.returncode == 1
        assert not path.with_suffix(".pdf").exists()

    def test_missing_inclusion_is_fatal(self, write_rly, test_settings):
        path = write_rly("main.rly", "\\h1 X\n\\insert gone.rly\n")
        with pytest.raises(InclusionError):
            convert(path, "htm", test_settings)
        assert not path.with_suffix(".htm").exists()
