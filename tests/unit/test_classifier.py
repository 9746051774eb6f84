"""
Unit Tests for the Block Classifier

Tests chunk classification precedence and per-variant parsing.
"""

import pytest

from rly.document_model import (
    BlockType,
    Bullet,
    Enumeration,
    HeaderUpdate,
    Heading,
    Insert,
    Paragraph,
    RawEmbed,
    Table,
    Table2,
    Tabular,
    Verbatim,
)
from rly.errors import ParseError, SourceLocation
from rly.reader.classifier import CLASSIFICATION_RULES, classify, match_rule


class TestPrecedence:
    """First matching rule wins"""

    def test_rule_order_is_fixed(self):
        names = [rule.name for rule in CLASSIFICATION_RULES]
        assert names == [
            "directive", "header", "insert", "raw", "heading", "enumeration",
            "bullet", "table", "tabular", "table2", "verbatim", "paragraph",
        ]

    def test_indented_list_marker_is_verbatim(self):
        block = classify(" 1. not a list\n 2. still not\n")
        assert isinstance(block, Verbatim)
        assert block.level == 1

    def test_list_marker_at_column_zero_is_enumeration(self):
        block = classify("1. first\n2. second\n")
        assert isinstance(block, Enumeration)
        assert not isinstance(block, Bullet)

    def test_classification_is_deterministic(self):
        chunk = "* a\n* b\n"
        assert classify(chunk) == classify(chunk)
        assert match_rule(chunk).name == "bullet"

    def test_comment_and_end_are_discarded(self):
        assert classify("\\comment anything here\n") is None
        assert classify("\\end\n") is None

    def test_unclassifiable_chunk_raises(self):
        location = SourceLocation(None, 7)
        with pytest.raises(ParseError) as exc_info:
            classify("!!! what is this\n", location)
        assert exc_info.value.text == "!!! what is this\n"
        assert exc_info.value.location == location
        assert ":7" in str(exc_info.value)


class TestHeader:

    def test_title_author_with_doctype(self):
        update = classify("\\title Report [memo]\n\\author Jane Doe\n")
        assert isinstance(update, HeaderUpdate)
        assert update.fields() == {"title": "Report", "doctype": "memo", "author": "Jane Doe"}

    def test_company_is_author(self):
        update = classify("\\company Acme Corp\n")
        assert update.author == "Acme Corp"

    def test_invalid_header_line_raises(self):
        with pytest.raises(ParseError):
            classify("\\title Report\nnot a header line\n")


class TestHeading:

    def test_heading_with_ref(self):
        block = classify("\\h2 Methods [sec_methods]\n")
        assert block == Heading(level=2, title="Methods", ref="sec_methods")
        assert block.role is BlockType.HEADING

    def test_heading_without_ref(self):
        block = classify("\\h1 Introduction\n")
        assert block.ref is None
        assert block.title == "Introduction"

    def test_heading_without_title_raises(self):
        with pytest.raises(ParseError):
            classify("\\h1\n")


class TestLists:

    def test_enumeration_entries_are_collapsed(self):
        block = classify("1. Alpha\n2. Beta\n   continues\n")
        assert block.entries == ("Alpha", "Beta continues")

    def test_bullet(self):
        block = classify("* x\n* y\n")
        assert isinstance(block, Bullet)
        assert block.entries == ("x", "y")
        assert block.role is BlockType.BULLET


class TestTables:

    def test_table_scenario(self):
        block = classify("\\table Results tab1 |l|c|\na & b\nc\n")
        assert isinstance(block, Table)
        assert block.caption == "Results"
        assert block.ref == "tab1"
        assert block.format == "|l|c|"
        assert block.option is None
        assert block.rows == (("a", "b"), ("c", ""))

    def test_table_with_quoted_caption_and_option(self):
        block = classify('\\table "Regional sales" sales |l|r| [c]\nA & B\n')
        assert block.caption == "Regional sales"
        assert block.ref == "sales"
        assert block.format == "|l|r|"
        assert block.option == "[c]"

    def test_table_quoted_caption_without_ref(self):
        block = classify('\\table "Plain caption" |l|\nA\n')
        assert block.ref is None
        assert block.caption == "Plain caption"

    def test_rows_are_padded_to_first_row(self):
        block = classify("\\table T t |l|l|l|\na & b & c\nd\ne & f\n")
        assert all(len(row) == block.ncols == 3 for row in block.rows)

    def test_row_wider_than_first_raises(self):
        with pytest.raises(ParseError):
            classify("\\table T t |l|l|\na & b\nc & d & e\n")

    def test_table_without_rows_raises(self):
        with pytest.raises(ParseError):
            classify("\\table T t |l|\n")

    def test_tabular(self):
        block = classify("\\tabular\nName & Value\nx & 1\n")
        assert isinstance(block, Tabular)
        assert block.rows == (("Name", "Value"), ("x", "1"))

    def test_table2(self):
        block = classify('|c|c| "Two columns" t2\nleft : right\nonly\n')
        assert isinstance(block, Table2)
        assert block.format == "|c|c|"
        assert block.caption == "Two columns"
        assert block.ref == "t2"
        assert block.option is None
        assert block.rows == (("left", "right"), ("only", ""))


class TestOtherBlocks:

    def test_paragraph_scenario(self):
        block = classify("Hello\nworld\n")
        assert block == Paragraph(text="Hello world")

    def test_paragraph_starting_with_command_or_math(self):
        assert isinstance(classify("\\LaTeX is typeset\n"), Paragraph)
        assert isinstance(classify("$x$ is math\n"), Paragraph)

    def test_verbatim_keeps_text(self):
        chunk = "    code line\n      more\n"
        block = classify(chunk)
        assert block.text == chunk
        assert block.level == 4

    def test_raw_embed(self):
        block = classify("\\raw htm\n<hr>\n")
        assert block == RawEmbed(target="htm", text="<hr>\n")

    def test_insert(self):
        block = classify('\\insert figs/data_flow.fig "Data flow" flow [t]\n')
        assert isinstance(block, Insert)
        assert block.path == "figs/data_flow"
        assert block.caption == "Data flow"
        assert block.ref == "flow"
        assert block.option == "[t]"
        assert block.label == "flow"

    def test_insert_label_defaults_to_camel_case_stem(self):
        block = classify("\\insert data_flow.fig\n")
        assert block.caption is None
        assert block.label == "DataFlow"
        assert block.asset("png") == "data_flow.png"

    def test_raw_text_is_kept(self):
        chunk = "Some paragraph\n"
        assert classify(chunk).raw_text == chunk
