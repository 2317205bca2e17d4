"""Unit tests for definition text preprocessing."""

import pytest

from form_engine.transformer.preprocessor import (
    expand_leading_tabs,
    normalize_line_endings,
    preprocess,
    repair_html_attributes,
)


class TestLineEndings:
    def test_crlf(self):
        assert normalize_line_endings("a\r\nb\r\n") == "a\nb\n"

    def test_lone_cr(self):
        assert normalize_line_endings("a\rb") == "a\nb"


class TestTabs:
    def test_leading_tabs_expanded(self):
        assert expand_leading_tabs("def f():\n\treturn 1") == "def f():\n    return 1"

    def test_inner_tabs_kept(self):
        assert expand_leading_tabs("x = 'a\tb'") == "x = 'a\tb'"


class TestHtmlAttributes:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Cell(rowspan=2)", "Cell(rowSpan=2)"),
            ("Cell(1, colspan = 3)", "Cell(1, colSpan = 3)"),
            ("Input(READONLY=True)", "Input(readOnly=True)"),
            ('Label(class="x", for="name")', 'Label(className="x", htmlFor="name")'),
        ],
    )
    def test_argument_position_renamed(self, text, expected):
        assert repair_html_attributes(text) == expected

    def test_statement_position_untouched(self):
        assert repair_html_attributes("rowspan = 2") == "rowspan = 2"

    def test_comparison_untouched(self):
        assert repair_html_attributes("f(x, colspan == 2)") == "f(x, colspan == 2)"

    def test_class_statement_untouched(self):
        assert repair_html_attributes("class Row:\n    pass") == "class Row:\n    pass"

    def test_prefix_of_longer_name_untouched(self):
        assert repair_html_attributes("f(rowspans=2)") == "f(rowspans=2)"


class TestPreprocess:
    def test_strips_bom_and_dedents(self):
        text = "\ufeff    x = 1\n    y = 2\n"
        assert preprocess(text) == "x = 1\ny = 2"

    def test_whitespace_only_is_empty(self):
        assert preprocess("  \r\n\t\n") == ""

    def test_combined_repairs(self):
        text = "\tdef render():\r\n\t\treturn Cell(colspan=2)\r\n"
        assert preprocess(text) == "def render():\n    return Cell(colSpan=2)"
