"""
Unit Tests for Inline Expansion and the Cross-Reference Index
"""

import pytest

from rly.reader import assemble_text
from rly.rendering.inline import InlineSpan, expand, scan
from rly.rendering.xref import (
    UNRESOLVED_REFERENCE,
    build_xref_index,
    reference_placeholder,
    resolve_references,
)


class TestScan:

    def test_literal_and_tagged_spans(self):
        assert scan("a b{bold} c") == [
            InlineSpan(None, "a "),
            InlineSpan("b", "bold"),
            InlineSpan(None, " c"),
        ]

    def test_first_closing_brace_closes_span(self):
        spans = scan("b{x{y}z}")
        assert spans[0] == InlineSpan("b", "x{y")
        assert spans[1] == InlineSpan(None, "z}")

    def test_tag_letter_inside_word_is_not_a_tag(self):
        assert scan("verb{x} \\emph{y}") == [InlineSpan(None, "verb{x} \\emph{y}")]


class TestTexExpansion:

    @pytest.mark.parametrize("text", [
        "plain words only",
        "Numbers 1, 2 and 3.",
        "",
    ])
    def test_plain_text_is_idempotent(self, text):
        assert expand(text, "tex") == text
        assert expand(expand(text, "tex"), "tex") == text

    def test_reserved_characters_are_escaped(self):
        assert expand("50% of #1 a_b ~x", "tex") == "50\\% of \\#1 a\\_b \\~{}x"

    def test_verbatim_span_is_not_escaped(self):
        assert expand("v{a_b}", "tex") == "\\verb+a_b+"

    def test_verb_delimiter_avoids_content(self):
        assert expand("v{a+b}", "tex") == "\\verb|a+b|"

    def test_math_span_is_not_escaped(self):
        assert expand("m{x_1 + y_2}", "tex") == "$x_1 + y_2$"

    def test_ordinary_span_content_is_escaped(self):
        assert expand("b{50%}", "tex") == "\\textbf{50\\%}"

    def test_reference_tags(self):
        assert expand("see f{data_flow}", "tex") == "see Figure~\\ref{data_flow}"
        assert expand("t{x} s{y} S{z} P{w}", "tex") == (
            "Table~\\ref{x} Section~\\ref{y} \\nameref{z} page~\\pageref{w}"
        )

    def test_formatting_tags(self):
        assert expand("e{a} i{b} u{c} c{d} F{e}", "tex") == (
            "\\emph{a} \\textit{b} \\underline{c} \\texttt{d} \\footnote{e}"
        )


class TestHtmlExpansion:

    def test_plain_text_is_idempotent(self):
        text = "plain words only"
        assert expand(expand(text, "htm"), "htm") == text

    def test_markup_characters_are_encoded(self):
        assert expand("a < b & c", "htm") == "a &lt; b &amp; c"

    def test_verbatim_span_stays_literal(self):
        assert expand("v{a_b}", "htm") == "<code>a_b</code>"

    def test_formatting_tags(self):
        assert expand("b{x} e{y} m{z}", "htm") == (
            '<b>x</b> <em>y</em> <span class="math">z</span>'
        )

    def test_references_become_placeholders(self):
        assert expand("f{fig1}", "htm") == reference_placeholder("f", "fig1")

    def test_unknown_target_raises(self):
        with pytest.raises(ValueError):
            expand("x", "rtf")


class TestXrefIndex:

    DOC = (
        "\\h1 Intro [intro]\n\n"
        "\\insert a.fig\n\n"
        "\\h2 Detail [detail]\n\n"
        "\\table First t1 |l|\nx\n\n"
        "\\insert b.fig \"B\" fig_b\n\n"
        "\\h1 End\n\n"
        "|c| \"Second\" t2\ny\n"
    )

    def test_numbers_in_document_order(self):
        index = build_xref_index(assemble_text(self.DOC))

        assert index.lookup("intro").number == "1"
        assert index.lookup("detail").number == "1.1"
        assert index.lookup("A").display == "Figure 1"
        assert index.lookup("fig_b").display == "Figure 2"
        assert index.lookup("t1").display == "Table 1"
        assert index.lookup("t2").display == "Table 2"
        assert index.section_count == 3

    def test_named_section_reference_shows_title(self):
        index = build_xref_index(assemble_text(self.DOC))
        assert index.display_text("S", "detail") == "Detail"
        assert index.display_text("s", "detail") == "Section 1.1"

    def test_unknown_label(self):
        index = build_xref_index(assemble_text(self.DOC))
        assert index.display_text("f", "nope") == UNRESOLVED_REFERENCE

    def test_resolve_references(self):
        index = build_xref_index(assemble_text(self.DOC))
        text = "see " + reference_placeholder("t", "t1")
        resolved = resolve_references(text, index, lambda tag, label, shown: f"[{label}:{shown}]")
        assert resolved == "see [t1:Table 1]"
