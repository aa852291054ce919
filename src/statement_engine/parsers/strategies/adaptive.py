"""Layout-agnostic strategies tried before any fixed format.

universal_adaptive makes no assumption beyond "a record starts with a date";
revolut_window handles app-bank exports where the amount, always followed by
its currency code, can drift onto the lines after the date.
"""

import re
from functools import lru_cache

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.normalizers.dates import find_dates
from statement_engine.parsers.strategies.base import (
    LOOKAHEAD_LINES,
    amount_regex,
    build_transaction,
    currency_alternation,
    date_finder,
    scan_dated_lines,
)
from statement_engine.schemas.internal import ParsedTransaction


def universal_adaptive(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """One candidate per (date, amount) pair on each line.

    Each date owns the span up to the next date on the same line; every
    amount inside that span yields a candidate whose description is the
    text between the date and that amount.
    """
    pattern = amount_regex(config)
    transactions: list[ParsedTransaction] = []

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue

        dates = find_dates(line, config)
        for position, found in enumerate(dates):
            span_end = dates[position + 1].start if position + 1 < len(dates) else len(line)
            span = line[found.end:span_end]

            for match in pattern.finditer(span):
                transaction = build_transaction(
                    found.iso, span[: match.start()], match.group(0), config
                )
                if transaction is not None:
                    transactions.append(transaction)

    return transactions


@lru_cache(maxsize=32)
def _code_suffixed_amount(codes: tuple[str, ...], currencies: tuple[str, ...]) -> re.Pattern[str]:
    symbols = tuple(token for token in currencies if token not in codes)
    return re.compile(
        r"(?<![\w.,])[-+]?\s?"
        rf"(?:{currency_alternation(symbols)}\s?)?"
        r"(?:\d{1,3}(?:[,.'\u00a0 ]\d{3})+|\d+)[.,]\d{2}"
        rf"\s?{currency_alternation(codes)}(?![A-Za-z])",
        re.IGNORECASE,
    )


def revolut_window(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """Date line followed by up to three lines searched for "<amount> <CODE>".

    When the amount turns up on a later line, the text of every scanned line
    (minus the date) is accumulated into the description.
    """
    codes = tuple(token for token in config.currencies if token.isalpha() and len(token) == 3)
    if not codes:
        return []

    pattern = _code_suffixed_amount(codes, config.currencies)
    return scan_dated_lines(
        lines, config, date_finder(config), pattern, lookahead=LOOKAHEAD_LINES
    )
