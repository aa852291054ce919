"""Fixed-format strategies.

Each strategy assumes one date notation and reads the amount from the rest of
the line (or, for multi_line_window, from up to three following lines). They
exist for statements where the adaptive strategies found nothing usable,
e.g. because the header filter rejected every adaptive candidate.
"""

import re

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.normalizers.dates import DateMatch, find_dates
from statement_engine.parsers.strategies.base import (
    LOOKAHEAD_LINES,
    amount_regex,
    date_finder,
    european_amount_regex,
    scan_dated_lines,
)
from statement_engine.schemas.internal import ParsedTransaction

_FOUR_DIGIT_YEAR_RE = re.compile(r"\d{4}")


def iso_date(lines: list[str], text: str, config: ParserConfig) -> list[ParsedTransaction]:
    """``2024-03-15 Grocery Store -45.67``"""
    return scan_dated_lines(
        lines, config, date_finder(config, ("YYYY-MM-DD",)), amount_regex(config)
    )


def slash_date(lines: list[str], text: str, config: ParserConfig) -> list[ParsedTransaction]:
    """``03/15/2024 ...`` read month first, day first when that is invalid."""
    return scan_dated_lines(
        lines, config, date_finder(config, ("MM/DD/YYYY",)), amount_regex(config)
    )


def month_name_date(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """``15 Mar 2024 ...``, ``15-Mar-2024 ...`` and ``Mar 15, 2024 ...``"""
    return scan_dated_lines(
        lines,
        config,
        date_finder(config, ("DD MMM YYYY", "MMM DD, YYYY")),
        amount_regex(config),
    )


def multi_line_window(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """Any date; the amount may sit up to three lines below it."""
    return scan_dated_lines(
        lines,
        config,
        date_finder(config),
        amount_regex(config),
        lookahead=LOOKAHEAD_LINES,
    )


def european_dotted(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """``15.03.2024 Supermarkt 1.234,56`` with comma-decimal amounts."""
    european = config.with_overrides(
        decimal_separator=",",
        thousands_separator=None,
    )
    return scan_dated_lines(
        lines,
        european,
        date_finder(european, ("DD.MM.YYYY", "DD/MM/YYYY", "DD-MM-YYYY")),
        european_amount_regex(european),
    )


def short_year_date(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """Numeric dates with a two-digit year (``03/15/24``, ``15.03.24``)."""
    scoped = config.with_overrides(date_formats=("MM/DD/YYYY", "DD-MM-YYYY", "DD.MM.YYYY"))

    def find_short_date(line: str) -> DateMatch | None:
        for found in find_dates(line, scoped):
            if not _FOUR_DIGIT_YEAR_RE.search(found.text):
                return found
        return None

    return scan_dated_lines(lines, config, find_short_date, amount_regex(config))


def credit_debit_marker(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """Amounts tagged ``CR``/``DR`` (``1,250.00 CR``).

    The marker sets the raw sign (CR positive, DR negative); the lexical sign
    rules still apply on top of it.
    """
    return scan_dated_lines(
        lines,
        config,
        date_finder(config),
        amount_regex(config),
        require_marker=True,
    )
