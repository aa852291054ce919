"""Date and amount normalizers shared by every parsing strategy."""

from statement_engine.parsers.normalizers.amounts import AmountParseError, normalize_amount
from statement_engine.parsers.normalizers.dates import (
    DATE_PATTERNS,
    DateOrder,
    DatePattern,
    find_dates,
    is_valid_date,
    normalize_date,
    parse_date_text,
)

__all__ = [
    "AmountParseError",
    "normalize_amount",
    "DATE_PATTERNS",
    "DateOrder",
    "DatePattern",
    "find_dates",
    "is_valid_date",
    "normalize_date",
    "parse_date_text",
]
