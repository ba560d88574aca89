"""Unit tests for matching-table discovery.

Tests cover:
  - parse_html: tolerant parsing and per-call diagnostics
  - find_matching_tables: empty input, cell-only matching, per-table dedup,
    document order, malformed markup, pattern overrides
"""

# pylint: disable=missing-class-docstring,missing-function-docstring

import re
import warnings

import pytest
from bs4 import MarkupResemblesLocatorWarning

from processor import extractor
from processor.extractor import TableExtractor, find_matching_tables, parse_html, resolve_pattern

TITLE = "Main Economic Indicators and Market Forecasts"


def table(*cells: str, attrs: str = "") -> str:
    """Build a one-column table, one row per cell."""
    rows = "".join(f"<tr><td>{c}</td></tr>" for c in cells)
    return f"<table{attrs}>{rows}</table>"


# ===========================================================================
# parse_html
# ===========================================================================


class TestParseHtml:

    def test_malformed_markup_still_builds_tree(self):
        soup, _ = parse_html("<div><table><tr><td>open cell")
        assert soup is not None
        assert soup.find("td") is not None

    def test_text_only_body_reports_diagnostic(self):
        soup, diagnostics = parse_html("just some prose, no markup")
        assert soup is not None
        assert diagnostics

    def test_diagnostics_are_not_shared_between_calls(self):
        _, first = parse_html("plain text")
        _, second = parse_html("<p>markup</p>")
        assert first
        assert second == []

    def test_parser_warnings_become_diagnostics(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            _, diagnostics = parse_html("https://example.com/weekly/forecasts")
        assert any(d.startswith("MarkupResemblesLocatorWarning") for d in diagnostics)
        assert not [w for w in caught if issubclass(w.category, MarkupResemblesLocatorWarning)]

    def test_global_warning_filters_untouched(self):
        before = list(warnings.filters)
        parse_html("https://example.com/weekly/forecasts")
        assert warnings.filters == before
        assert not any(
            f[0] == "ignore" and f[2] is MarkupResemblesLocatorWarning for f in warnings.filters
        )


# ===========================================================================
# find_matching_tables
# ===========================================================================


class TestEmptyInput:

    @pytest.mark.parametrize("body", ["", None, "   \n\t "])
    def test_empty_body_returns_empty(self, body):
        assert find_matching_tables(body) == []

    def test_empty_body_skips_parser(self, monkeypatch):
        """An empty body must short-circuit before parse_html is called."""

        def boom(_body):
            raise AssertionError("parser should not run")

        monkeypatch.setattr(extractor, "parse_html", boom)
        assert find_matching_tables("") == []

    def test_unparseable_input_returns_empty(self, monkeypatch):
        monkeypatch.setattr(extractor, "parse_html", lambda _body: (None, ["rejected"]))
        assert find_matching_tables("\x00\x01\x02") == []

    def test_binary_garbage_does_not_raise(self):
        assert find_matching_tables("\x00\x01\x02 not html at all \xff") == []


class TestNoMatch:

    def test_body_without_table(self):
        assert find_matching_tables(f"<p>{TITLE}</p><div>{TITLE}</div>") == []

    def test_table_without_matching_cell(self):
        assert find_matching_tables(table("GDP", "CPI", "Unemployment")) == []

    def test_phrases_in_wrong_order_do_not_match(self):
        assert find_matching_tables(table("Market Forecasts and Main Economic Indicators")) == []

    def test_caption_and_attributes_are_not_cell_text(self):
        """Only td/th text is tested, never captions or attribute values."""
        body = (
            f'<table summary="{TITLE}"><caption>{TITLE}</caption>'
            "<tr><td>GDP</td></tr></table>"
        )
        assert find_matching_tables(body) == []


class TestMatching:

    def test_single_matching_cell(self):
        matches = find_matching_tables(table(TITLE, "42"))
        assert len(matches) == 1
        assert matches[0].name == "table"

    def test_multiple_matching_cells_report_table_once(self):
        body = table(TITLE, TITLE, f"again: {TITLE}")
        assert len(find_matching_tables(body)) == 1

    def test_header_cell_counts_as_cell(self):
        body = f"<table><tr><th>{TITLE}</th></tr><tr><td>1.0</td></tr></table>"
        assert len(find_matching_tables(body)) == 1

    def test_match_is_case_insensitive(self):
        assert len(find_matching_tables(table(TITLE.upper()))) == 1

    def test_arbitrary_text_between_phrases(self):
        body = table("Table 1: Main Economic Indicators, Policy Rates and Market Forecasts (%)")
        assert len(find_matching_tables(body)) == 1

    def test_cell_text_spans_inline_elements(self):
        body = table("<strong>Main Economic</strong> Indicators and <span>Market Forecasts</span>")
        assert len(find_matching_tables(body)) == 1

    def test_two_tables_reported_in_document_order(self):
        body = (
            "<p>intro</p>"
            + table(TITLE, "first", attrs=' id="a"')
            + table("unrelated", attrs=' id="skip"')
            + table(TITLE, "second", attrs=' id="b"')
        )
        matches = find_matching_tables(body)
        assert [m["id"] for m in matches] == ["a", "b"]

    def test_unclosed_cells_still_match(self):
        body = f"<table><tr><td>{TITLE}<td>1.2<tr><td>3.4"
        assert len(find_matching_tables(body)) == 1

    def test_missing_root_elements(self):
        body = f"<tr><td>stray row</td></tr><table><tr><td>{TITLE}</td></tr>"
        assert len(find_matching_tables(body)) == 1

    def test_nested_matching_table_reports_outer_then_inner(self):
        """Rows of a nested table are descendants of the outer table too."""
        inner = table(TITLE, attrs=' id="inner"')
        body = f'<table id="outer"><tr><td>{inner}</td></tr></table>'
        matches = find_matching_tables(body)
        assert [m["id"] for m in matches] == ["outer", "inner"]

    def test_non_matching_tables_left_untouched(self):
        body = table(TITLE) + table("other", attrs=' class="keep"')
        matches = find_matching_tables(body)
        other = matches[0].find_next("table")
        assert other["class"] == ["keep"]


class TestPatternOverrides:

    def test_string_pattern_is_case_insensitive(self):
        assert len(find_matching_tables(table("quarterly OUTLOOK"), "Quarterly Outlook")) == 1

    def test_compiled_pattern_used_as_is(self):
        case_sensitive = re.compile("Quarterly Outlook")
        assert find_matching_tables(table("quarterly outlook"), case_sensitive) == []

    def test_default_pattern_comes_from_environment(self, monkeypatch):
        monkeypatch.setenv("TABLE_PATTERN", "Key Forecasts")
        assert resolve_pattern().pattern == "Key Forecasts"
        assert len(TableExtractor().find(table("key forecasts 2025"))) == 1
        assert TableExtractor().find(table(TITLE)) == []
