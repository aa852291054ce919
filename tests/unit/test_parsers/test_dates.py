"""Tests for date normalization."""

import re

import pytest

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.normalizers.dates import (
    DATE_PATTERNS,
    DateOrder,
    date_alternation,
    find_dates,
    is_valid_date,
    lookup_month,
    normalize_date,
    parse_date_text,
)


class TestIsValidDate:
    """Calendar validity of canonical dates."""

    @pytest.mark.parametrize("iso", ["2024-02-29", "2024-12-31", "1900-01-01", "2100-06-15"])
    def test_valid_dates(self, iso):
        assert is_valid_date(iso) is True

    @pytest.mark.parametrize(
        "iso",
        [
            "2024-02-30",  # no rollover to March
            "2023-02-29",
            "2024-13-01",
            "2024-00-10",
            "2024-04-31",
            "1899-12-31",
            "2101-01-01",
            "15/03/2024",
            "",
        ],
    )
    def test_invalid_dates(self, iso):
        assert is_valid_date(iso) is False


class TestNormalizeDate:
    """Component order comes from the pattern's DateOrder tag."""

    def test_patterns_carry_order_tags(self):
        assert DATE_PATTERNS["YYYY-MM-DD"].order == DateOrder.YEAR_MONTH_DAY
        assert DATE_PATTERNS["MM/DD/YYYY"].order == DateOrder.MONTH_DAY_YEAR
        assert DATE_PATTERNS["DD.MM.YYYY"].order == DateOrder.DAY_MONTH_YEAR
        assert DATE_PATTERNS["DD MMM YYYY"].order == DateOrder.DAY_MONTHNAME_YEAR
        assert DATE_PATTERNS["MMM DD, YYYY"].order == DateOrder.MONTHNAME_DAY_YEAR

    def test_same_digits_read_by_order(self, config):
        month_first = DATE_PATTERNS["MM/DD/YYYY"]
        day_first = DATE_PATTERNS["DD-MM-YYYY"]

        assert normalize_date(month_first.regex.search("05/04/2024"), month_first, config) == "2024-05-04"
        assert normalize_date(day_first.regex.search("05-04-2024"), day_first, config) == "2024-04-05"

    def test_month_first_falls_back_to_day_first(self, config):
        pattern = DATE_PATTERNS["MM/DD/YYYY"]
        match = pattern.regex.search("15/03/2024")

        assert normalize_date(match, pattern, config) == "2024-03-15"

    def test_invalid_in_both_orders(self, config):
        pattern = DATE_PATTERNS["MM/DD/YYYY"]
        match = pattern.regex.search("31/31/2024")

        assert normalize_date(match, pattern, config) is None

    def test_year_first_has_no_fallback(self, config):
        pattern = DATE_PATTERNS["YYYY-MM-DD"]
        match = pattern.regex.search("2024-15-03")

        assert normalize_date(match, pattern, config) is None


class TestParseDateText:
    """Standalone date tokens."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2024-03-15", "2024-03-15"),
            ("2024/3/5", "2024-03-05"),
            ("03/15/2024", "2024-03-15"),
            ("15-03-2024", "2024-03-15"),
            ("15.03.2024", "2024-03-15"),
            ("15 Mar 2024", "2024-03-15"),
            ("15-Mar-2024", "2024-03-15"),
            ("15th March 2024", "2024-03-15"),
            ("Mar 15, 2024", "2024-03-15"),
            ("September 1, 2024", "2024-09-01"),
            ("03/15/24", "2024-03-15"),
            ("  15.03.24 ", "2024-03-15"),
        ],
    )
    def test_supported_notations(self, config, text, expected):
        assert parse_date_text(text, config) == expected

    @pytest.mark.parametrize(
        "text",
        ["2024-02-30", "Feb 30, 2024", "15 Foo 2024", "Grocery Store", "15/03", ""],
    )
    def test_rejected_tokens(self, config, text):
        assert parse_date_text(text, config) is None

    def test_disabled_format_is_not_tried(self):
        config = ParserConfig(date_formats=("YYYY-MM-DD",))

        assert parse_date_text("03/15/2024", config) is None
        assert parse_date_text("2024-03-15", config) == "2024-03-15"

    def test_unknown_format_identifier_is_ignored(self):
        config = ParserConfig(date_formats=("YYYY-MM-DD", "QQ/YYYY"))

        assert parse_date_text("2024-03-15", config) == "2024-03-15"


class TestFindDates:
    """Dates embedded in lines of text."""

    def test_dates_in_position_order(self, config):
        found = find_dates("01/02/2024 Transfer 2024-03-04 settled", config)

        assert [d.iso for d in found] == ["2024-01-02", "2024-03-04"]
        assert found[0].start == 0
        assert found[0].text == "01/02/2024"

    def test_invalid_calendar_date_is_skipped(self, config):
        assert find_dates("2024-02-30 Grocery Store -45.67", config) == []

    def test_matches_do_not_overlap(self, config):
        found = find_dates("15 Mar 2024 Coffee", config)

        assert len(found) == 1
        assert found[0].iso == "2024-03-15"
        assert found[0].end == len("15 Mar 2024")

    def test_amount_is_not_mistaken_for_dotted_date(self, config):
        assert find_dates("Supermarkt 1.234,56", config) == []

    def test_custom_month_names(self):
        config = ParserConfig(month_names={"janv": "1", "mars": "03"})

        found = find_dates("15 mars 2024 Loyer", config)

        assert [d.iso for d in found] == ["2024-03-15"]


class TestMonthLookup:
    """Month names and abbreviations."""

    @pytest.mark.parametrize("name", ["Sep", "sept", "September", "SEP.", "Sept."])
    def test_september_variants(self, config, name):
        assert lookup_month(name, config) == "09"

    def test_unknown_month(self, config):
        assert lookup_month("Foo", config) is None


def test_date_alternation_embeds_without_groups(config):
    pattern = re.compile(date_alternation(config))

    match = pattern.search("posted on 15 Mar 2024 at noon")

    assert match is not None
    assert match.group(0) == "15 Mar 2024"
    assert pattern.groups == 0
