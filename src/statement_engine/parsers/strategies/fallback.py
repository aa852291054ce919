"""Last-resort strategies.

Both are deliberately loose. They only run when every stricter strategy came
back empty, and their candidates still go through the same filtering and
deduplication as everything else.
"""

import re
from functools import lru_cache

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.normalizers.dates import (
    build_iso_date,
    date_alternation,
    expand_year,
    find_dates,
    lookup_month,
    parse_date_text,
)
from statement_engine.parsers.strategies.base import (
    STRICT_NUMBER,
    amount_source,
    build_transaction,
    relaxed_amount_regex,
)
from statement_engine.schemas.internal import ParsedTransaction

_LOOSE_DATE_RE = re.compile(
    r"(?<![\d\w])(\d{1,4})[./\-\s](\d{1,2}|[A-Za-z]{3,9})[./\-\s](\d{2,4})(?![\d\w])"
)


def _normalize_loose_date(match: re.Match[str], config: ParserConfig) -> str | None:
    first, middle, last = match.groups()

    if len(first) == 4:
        if middle.isalpha():
            month = lookup_month(middle, config)
            return build_iso_date(first, month, last) if month and len(last) <= 2 else None
        return build_iso_date(first, middle, last) if len(last) <= 2 else None

    if len(first) > 2 or len(last) == 3:
        return None
    year = expand_year(last)

    if middle.isalpha():
        month = lookup_month(middle, config)
        return build_iso_date(year, month, first) if month else None

    return build_iso_date(year, first, middle) or build_iso_date(year, middle, first)


def _first_loose_date(line: str, config: ParserConfig) -> tuple[str, int] | None:
    """Date ISO string and the offset where the rest of the line begins."""
    for match in _LOOSE_DATE_RE.finditer(line):
        iso = _normalize_loose_date(match, config)
        if iso is not None:
            return iso, match.end()

    found = find_dates(line, config)
    if found:
        return found[0].iso, found[0].end
    return None


def aggressive_relaxed(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """Any date-looking token followed by any amount-looking token."""
    pattern = relaxed_amount_regex(config)
    transactions: list[ParsedTransaction] = []

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue

        dated = _first_loose_date(line, config)
        if dated is None:
            continue

        date_iso, rest_start = dated
        rest = line[rest_start:]
        match = pattern.search(rest)
        if match is None:
            continue

        transaction = build_transaction(date_iso, rest[: match.start()], match.group(0), config)
        if transaction is not None:
            transactions.append(transaction)

    return transactions


@lru_cache(maxsize=16)
def _whole_text_pattern(alternation: str, currencies: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(
        rf"(?P<date>{alternation})[\s,;:|]+"
        r"(?P<gap>(?:[^\d]|\d(?![\d,.' ]*[.,]\d{2}(?!\d))){2,160}?)"
        rf"(?P<amount>{amount_source(currencies, STRICT_NUMBER)})",
        re.IGNORECASE,
    )


def whole_text_regex(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """One regex over the whole text, so records may span line breaks.

    The gap between date and amount is bounded and may not itself contain an
    amount, which keeps one record from swallowing the next.
    """
    pattern = _whole_text_pattern(date_alternation(config), config.currencies)
    transactions: list[ParsedTransaction] = []

    for match in pattern.finditer(text):
        date_iso = parse_date_text(match.group("date"), config)
        if date_iso is None:
            continue

        transaction = build_transaction(
            date_iso, match.group("gap"), match.group("amount"), config
        )
        if transaction is not None:
            transactions.append(transaction)

    return transactions
