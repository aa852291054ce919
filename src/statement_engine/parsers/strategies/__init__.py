"""Parsing strategies, in the order the orchestrator tries them.

Adaptive strategies come first, fixed formats next, and the two loose
fallbacks last; the first strategy that yields a usable candidate wins.
"""

from statement_engine.parsers.strategies.adaptive import revolut_window, universal_adaptive
from statement_engine.parsers.strategies.base import Strategy
from statement_engine.parsers.strategies.columns import delimited_fields, tabular_columns
from statement_engine.parsers.strategies.fallback import aggressive_relaxed, whole_text_regex
from statement_engine.parsers.strategies.fixed import (
    credit_debit_marker,
    european_dotted,
    iso_date,
    month_name_date,
    multi_line_window,
    short_year_date,
    slash_date,
)

STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("universal_adaptive", universal_adaptive),
    ("revolut_window", revolut_window),
    ("iso_date", iso_date),
    ("slash_date", slash_date),
    ("month_name_date", month_name_date),
    ("multi_line_window", multi_line_window),
    ("tabular_columns", tabular_columns),
    ("delimited_fields", delimited_fields),
    ("european_dotted", european_dotted),
    ("short_year_date", short_year_date),
    ("credit_debit_marker", credit_debit_marker),
    ("aggressive_relaxed", aggressive_relaxed),
    ("whole_text_regex", whole_text_regex),
)

__all__ = [
    "STRATEGIES",
    "Strategy",
    "aggressive_relaxed",
    "credit_debit_marker",
    "delimited_fields",
    "european_dotted",
    "iso_date",
    "month_name_date",
    "multi_line_window",
    "revolut_window",
    "short_year_date",
    "slash_date",
    "tabular_columns",
    "universal_adaptive",
    "whole_text_regex",
]
