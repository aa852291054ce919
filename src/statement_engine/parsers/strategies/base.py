"""Shared building blocks for parsing strategies.

A strategy is a plain function ``(lines, text, config) -> list[ParsedTransaction]``.
Strategies never share state; everything they have in common (amount
regexes, description cleanup, sign and provider assignment) lives here.
"""

import logging
import re
from collections.abc import Callable
from functools import lru_cache

from pydantic import ValidationError

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.classifiers import determine_sign, extract_provider
from statement_engine.parsers.normalizers.amounts import AmountParseError, normalize_amount
from statement_engine.parsers.normalizers.dates import DateMatch, find_dates
from statement_engine.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)

Strategy = Callable[[list[str], str, ParserConfig], list[ParsedTransaction]]

# How many lines after a dated line may still hold its amount.
LOOKAHEAD_LINES = 3

STRICT_NUMBER = r"(?:\d{1,3}(?:[,.'\u00a0 ]\d{3})+|\d+)[.,]\d{2}"
_RELAXED_NUMBER = r"\d+(?:[,.'\u00a0]\d{3})*[.,]\d{1,2}"
_EUROPEAN_NUMBER = r"\d{1,3}(?:[.\u00a0 ]\d{3})*,\d{2}|\d+,\d{2}"

# Never start inside a space-grouped number: "1 234,56" must not yield "234,56".
_NOT_GROUP_TAIL = (
    r"(?!(?:(?<=(?<![\d.,'])\d[\u00a0 ])"
    r"|(?<=(?<![\d.,'])\d\d[\u00a0 ])"
    r"|(?<=(?<![\d.,'])\d\d\d[\u00a0 ]))"
    r"\d{3}(?:[,.'\u00a0 ]\d{3})*[.,]\d{2}(?!\d))"
)

_EDGE_NOISE_RE = re.compile(r"^[\s|;,:\-–*]+|[\s|;,:\-–*]+$")
_WHITESPACE_RE = re.compile(r"\s+")
_CRDR_RE = re.compile(r"^\s*(CR|DR)\b", re.IGNORECASE)


def currency_alternation(currencies: tuple[str, ...]) -> str:
    """Regex alternation of currency tokens, preserving configured order."""
    tokens = [re.escape(token) for token in currencies if token]
    return "(?:" + "|".join(tokens) + ")" if tokens else "(?!)"


def amount_source(currencies: tuple[str, ...], number: str) -> str:
    cur = currency_alternation(currencies)
    return (
        r"(?<![\w.,])"
        rf"{_NOT_GROUP_TAIL}"
        r"(?:\(\s*)?"
        rf"(?:{cur}\s?)?"
        r"[-+]?\s?"
        rf"(?:{cur}\s?)?"
        rf"{number}"
        r"(?:\s?\))?"
        r"(?:-(?!\d))?"
        rf"(?:\s?{cur}(?![A-Za-z]))?"
        r"(?!\d)"
    )


@lru_cache(maxsize=64)
def _compile_amount(currencies: tuple[str, ...], number: str) -> re.Pattern[str]:
    return re.compile(amount_source(currencies, number), re.IGNORECASE)


def amount_regex(config: ParserConfig) -> re.Pattern[str]:
    """Amount pattern built from the configured currency list.

    Amounts need exactly two decimals; thousands may be grouped with commas,
    dots, apostrophes or spaces (``1 234,56``).
    """
    return _compile_amount(config.currencies, STRICT_NUMBER)


def european_amount_regex(config: ParserConfig) -> re.Pattern[str]:
    """Comma-decimal amounts grouped with dots or spaces (``1.234,56``)."""
    return _compile_amount(config.currencies, "(?:" + _EUROPEAN_NUMBER + ")")


@lru_cache(maxsize=64)
def _compile_relaxed(currencies: tuple[str, ...]) -> re.Pattern[str]:
    cur = currency_alternation(currencies)
    return re.compile(
        r"(?<![\d.,])"
        r"\(?\s*[-+]?\s?"
        rf"(?:{cur}\s?)?"
        rf"{_RELAXED_NUMBER}"
        r"(?!\d)\s?\)?"
        rf"(?:\s?{cur}(?![A-Za-z]))?",
        re.IGNORECASE,
    )


def relaxed_amount_regex(config: ParserConfig) -> re.Pattern[str]:
    """Loose amount pattern: one or two decimals, parentheses, any grouping."""
    return _compile_relaxed(config.currencies)


def clean_description(text: str) -> str:
    """Collapse whitespace and trim separator noise from both ends."""
    collapsed = _WHITESPACE_RE.sub(" ", text or "")
    return _EDGE_NOISE_RE.sub("", collapsed).strip()


def credit_debit_sign(text_after_amount: str) -> int | None:
    """+1 for a CR marker right after the amount, -1 for DR, None otherwise."""
    match = _CRDR_RE.match(text_after_amount)
    if not match:
        return None
    return 1 if match.group(1).upper() == "CR" else -1


def build_transaction(
    date_iso: str,
    description: str,
    raw_amount: str,
    config: ParserConfig,
    *,
    sign_hint: int | None = None,
) -> ParsedTransaction | None:
    """Turn matched pieces into a ParsedTransaction.

    Returns None when the amount cannot be normalized; the strategy simply
    drops that candidate and carries on.

    Args:
        date_iso: Already normalized YYYY-MM-DD date
        description: Raw description span
        raw_amount: Matched amount text
        config: Active parser configuration
        sign_hint: +1/-1 from an explicit CR/DR marker, applied before the
            lexical sign rules
    """
    try:
        amount = normalize_amount(raw_amount, config)
    except AmountParseError:
        logger.debug("Dropping candidate with unreadable amount", extra={"raw_amount": raw_amount})
        return None

    if sign_hint is not None:
        amount = sign_hint * abs(amount)

    cleaned = clean_description(description)
    amount = determine_sign(amount, cleaned, config)

    try:
        return ParsedTransaction(
            date=date_iso,
            description=cleaned,
            provider=extract_provider(cleaned),
            amount=amount,
        )
    except ValidationError:
        logger.debug("Dropping invalid candidate", extra={"date": date_iso})
        return None


def pick_amount(
    segment: str, pattern: re.Pattern[str], *, require_marker: bool = False
) -> tuple[re.Match[str], int | None] | None:
    """First amount in ``segment``, with its CR/DR sign when one follows it.

    With ``require_marker`` only amounts followed by a CR/DR marker count.
    """
    for match in pattern.finditer(segment):
        sign_hint = credit_debit_sign(segment[match.end():])
        if require_marker and sign_hint is None:
            continue
        return match, sign_hint
    return None


def scan_dated_lines(
    lines: list[str],
    config: ParserConfig,
    find_date: Callable[[str], DateMatch | None],
    pattern: re.Pattern[str],
    *,
    lookahead: int = 0,
    require_marker: bool = False,
) -> list[ParsedTransaction]:
    """Line scanner shared by the fixed-format strategies.

    For every line holding a date, the rest of that line and then up to
    ``lookahead`` following lines are searched for an amount. Text between
    the date and the amount becomes the description. A following line that
    carries its own date ends the window.
    """
    stripped = [line.strip() for line in lines]
    transactions: list[ParsedTransaction] = []

    for index, line in enumerate(stripped):
        if not line:
            continue
        found = find_date(line)
        if found is None:
            continue

        pieces: list[str] = []
        for offset in range(lookahead + 1):
            position = index + offset
            if position >= len(stripped):
                break
            if offset == 0:
                segment = line[found.end:]
            else:
                segment = stripped[position]
                if find_date(segment) is not None:
                    break

            picked = pick_amount(segment, pattern, require_marker=require_marker)
            if picked is None:
                pieces.append(segment)
                continue

            match, sign_hint = picked
            description = " ".join(pieces + [segment[: match.start()]])
            transaction = build_transaction(
                found.iso,
                description,
                match.group(0),
                config,
                sign_hint=sign_hint if require_marker else None,
            )
            if transaction is not None:
                transactions.append(transaction)
            break

    return transactions


def date_finder(
    config: ParserConfig, date_formats: tuple[str, ...] | None = None
) -> Callable[[str], DateMatch | None]:
    """Return a function giving the first date of a line.

    ``date_formats`` restricts the notations tried; by default all configured
    notations are used.
    """
    scoped = config.with_overrides(date_formats=date_formats) if date_formats else config

    def find_first(line: str) -> DateMatch | None:
        found = find_dates(line, scoped)
        return found[0] if found else None

    return find_first
