"""Date normalization.

Every supported date notation is a DatePattern carrying an explicit DateOrder
tag. normalize_date switches on that tag to decide which group is the day,
the month or the year; it never inspects the pattern source text.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from statement_engine.core.parser_config import ParserConfig

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100


class DateOrder(str, Enum):
    """Component order of a date notation."""

    YEAR_MONTH_DAY = "year_month_day"
    # Numeric, month first; falls back to day first when invalid.
    MONTH_DAY_YEAR = "month_day_year"
    # Numeric, day first; falls back to month first when invalid.
    DAY_MONTH_YEAR = "day_month_year"
    DAY_MONTHNAME_YEAR = "day_monthname_year"
    MONTHNAME_DAY_YEAR = "monthname_day_year"


@dataclass(frozen=True)
class DatePattern:
    identifier: str
    regex: re.Pattern[str]
    order: DateOrder


@dataclass(frozen=True)
class DateMatch:
    """A normalized date found inside a line of text."""

    start: int
    end: int
    iso: str
    text: str
    order: DateOrder


_YEAR = r"(?P<year>\d{4}|\d{2})"

# Registry order is also the tie-break when two notations claim the same span.
DATE_PATTERNS: dict[str, DatePattern] = {
    "YYYY-MM-DD": DatePattern(
        "YYYY-MM-DD",
        re.compile(r"(?<!\d)(?P<year>\d{4})[-/.](?P<month>\d{1,2})[-/.](?P<day>\d{1,2})(?!\d)"),
        DateOrder.YEAR_MONTH_DAY,
    ),
    "MM/DD/YYYY": DatePattern(
        "MM/DD/YYYY",
        re.compile(r"(?<![\d/])(?P<month>\d{1,2})/(?P<day>\d{1,2})/" + _YEAR + r"(?![\d/])"),
        DateOrder.MONTH_DAY_YEAR,
    ),
    # Not enabled by default: slash dates belong to MM/DD/YYYY unless a
    # caller (or the European strategy) opts into day-first reading.
    "DD/MM/YYYY": DatePattern(
        "DD/MM/YYYY",
        re.compile(r"(?<![\d/])(?P<day>\d{1,2})/(?P<month>\d{1,2})/" + _YEAR + r"(?![\d/])"),
        DateOrder.DAY_MONTH_YEAR,
    ),
    "DD-MM-YYYY": DatePattern(
        "DD-MM-YYYY",
        re.compile(r"(?<![\d\-])(?P<day>\d{1,2})-(?P<month>\d{1,2})-" + _YEAR + r"(?![\d\-])"),
        DateOrder.DAY_MONTH_YEAR,
    ),
    "DD.MM.YYYY": DatePattern(
        "DD.MM.YYYY",
        re.compile(
            r"(?<![\d.])(?P<day>\d{1,2})\.(?P<month>\d{1,2})\." + _YEAR + r"(?!\d)(?![.,]\d)"
        ),
        DateOrder.DAY_MONTH_YEAR,
    ),
    "DD MMM YYYY": DatePattern(
        "DD MMM YYYY",
        re.compile(
            r"(?<![\w])(?P<day>\d{1,2})(?:st|nd|rd|th)?[\s\-./]+"
            r"(?P<month_name>[A-Za-z]{3,9})\.?,?[\s\-./]+"
            + _YEAR
            + r"(?!\d)(?![.,]\d)"
        ),
        DateOrder.DAY_MONTHNAME_YEAR,
    ),
    "MMM DD, YYYY": DatePattern(
        "MMM DD, YYYY",
        re.compile(
            r"(?<![A-Za-z])(?P<month_name>[A-Za-z]{3,9})\.?\s+(?P<day>\d{1,2})"
            r"(?:st|nd|rd|th)?,?\s+(?P<year>\d{4})(?!\d)"
        ),
        DateOrder.MONTHNAME_DAY_YEAR,
    ),
}

_PATTERN_RANK = {identifier: rank for rank, identifier in enumerate(DATE_PATTERNS)}
_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_NAMED_GROUP_RE = re.compile(r"\(\?P<\w+>")


def is_valid_date(iso: str) -> bool:
    """Check that a YYYY-MM-DD string is a real calendar date.

    The string is re-parsed into integers and rebuilt as a date; the result
    must carry exactly the same components (so 2024-02-30 is rejected
    rather than rolled over).
    """
    match = _ISO_RE.match(iso or "")
    if not match:
        return False

    year, month, day = (int(part) for part in match.groups())
    if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12 and 1 <= day <= 31):
        return False

    try:
        rebuilt = date(year, month, day)
    except ValueError:
        return False
    return (rebuilt.year, rebuilt.month, rebuilt.day) == (year, month, day)


def expand_year(year: str) -> str:
    """Two-digit years are read as 20yy."""
    return f"20{year}" if len(year) == 2 else year


def lookup_month(name: str, config: ParserConfig) -> str | None:
    """Resolve a month name or abbreviation to a two-digit month number."""
    key = name.strip().rstrip(".").lower()
    if key in config.month_names:
        return config.month_names[key]
    return config.month_names.get(key[:3])


def build_iso_date(year: str, month: str, day: str) -> str | None:
    iso = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return iso if is_valid_date(iso) else None


def normalize_date(
    match: re.Match[str], pattern: DatePattern, config: ParserConfig
) -> str | None:
    """Convert a regex match produced by ``pattern`` to YYYY-MM-DD.

    Returns None when the match does not form a valid calendar date under
    the pattern's component order (including its fallback order).
    """
    groups = match.groupdict()
    year = expand_year(groups["year"])

    if pattern.order in (DateOrder.DAY_MONTHNAME_YEAR, DateOrder.MONTHNAME_DAY_YEAR):
        month = lookup_month(groups["month_name"], config)
        if month is None:
            return None
        return build_iso_date(year, month, groups["day"])

    if pattern.order == DateOrder.YEAR_MONTH_DAY:
        return build_iso_date(year, groups["month"], groups["day"])

    # Numeric day/month notations: primary reading first, then swapped.
    return build_iso_date(year, groups["month"], groups["day"]) or build_iso_date(
        year, groups["day"], groups["month"]
    )


def configured_patterns(config: ParserConfig) -> list[DatePattern]:
    """Date patterns enabled by the configuration."""
    patterns = []
    for identifier in config.date_formats:
        pattern = DATE_PATTERNS.get(identifier)
        if pattern is None:
            logger.debug("Ignoring unknown date format", extra={"date_format": identifier})
            continue
        patterns.append(pattern)
    return patterns


def find_dates(text: str, config: ParserConfig) -> list[DateMatch]:
    """Find every valid, non-overlapping date in ``text``, ordered by position.

    All configured notations are tried. When two notations claim overlapping
    spans, the earlier start wins, then the longer span, then registry order.
    """
    found: list[tuple[int, int, int, DateMatch]] = []
    for pattern in configured_patterns(config):
        for match in pattern.regex.finditer(text):
            iso = normalize_date(match, pattern, config)
            if iso is None:
                continue
            found.append(
                (
                    match.start(),
                    -(match.end() - match.start()),
                    _PATTERN_RANK[pattern.identifier],
                    DateMatch(match.start(), match.end(), iso, match.group(0), pattern.order),
                )
            )

    accepted: list[DateMatch] = []
    for _, _, _, candidate in sorted(found, key=lambda item: item[:3]):
        if accepted and candidate.start < accepted[-1].end:
            continue
        accepted.append(candidate)
    return accepted


def parse_date_text(text: str, config: ParserConfig) -> str | None:
    """Normalize a standalone date token (e.g. a table cell)."""
    token = text.strip()
    for pattern in sorted(configured_patterns(config), key=lambda p: _PATTERN_RANK[p.identifier]):
        match = pattern.regex.fullmatch(token)
        if match:
            iso = normalize_date(match, pattern, config)
            if iso is not None:
                return iso
    return None


def date_alternation(config: ParserConfig) -> str:
    """Regex source matching any configured date notation, without groups.

    Used where a date has to be embedded in a larger pattern; the matched
    substring is normalized afterwards with parse_date_text.
    """
    sources = [
        _NAMED_GROUP_RE.sub("(?:", pattern.regex.pattern)
        for pattern in configured_patterns(config)
    ]
    return "(?:" + "|".join(f"(?:{source})" for source in sources) + ")"
