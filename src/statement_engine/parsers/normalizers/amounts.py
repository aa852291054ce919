"""Amount normalization.

Turns a matched amount substring such as ``"$1,234.56"``, ``"1.234,56 EUR"``
or ``"(45.99)"`` into a signed float, following either the separators
declared in ParserConfig or, when none are declared, separator counting.
"""

import math
import re

from statement_engine.core.parser_config import ParserConfig


class AmountParseError(ValueError):
    """Raised when a substring cannot be read as a finite amount."""


def strip_currency(text: str, config: ParserConfig) -> str:
    """Remove every configured currency token, in configured order."""
    for token in config.currencies:
        text = re.sub(re.escape(token), "", text, flags=re.IGNORECASE)
    return text


def _strip_thousands(text: str, separators: str) -> str:
    for separator in separators:
        text = text.replace(separator, "")
    return text


def _normalize_separators(text: str, config: ParserConfig) -> str:
    """Return ``text`` with a dot as the only decimal mark and no grouping."""
    if config.decimal_separator == ",":
        thousands = config.thousands_separator or ". '"
        return _strip_thousands(text, thousands + " ").replace(",", ".")

    if config.decimal_separator == ".":
        thousands = config.thousands_separator or ", '"
        return _strip_thousands(text, thousands + " ")

    commas = text.count(",")
    dots = text.count(".")

    if commas and dots:
        # Right-most separator is the decimal mark.
        if text.rfind(",") > text.rfind("."):
            return _strip_thousands(text, ". '").replace(",", ".")
        return _strip_thousands(text, ", '")

    if commas == 1:
        return _strip_thousands(text, " '").replace(",", ".")

    if commas > 1:
        return _strip_thousands(text, ", '")

    if dots > 1:
        head, _, tail = text.rpartition(".")
        if len(tail.strip()) == 2:
            return _strip_thousands(head, ". '") + "." + tail
        return _strip_thousands(text, ". '")

    return _strip_thousands(text, " '")


def normalize_amount(raw: str, config: ParserConfig) -> float:
    """Parse a raw amount substring into a signed float.

    Args:
        raw: Matched amount text, possibly with currency, sign or parentheses
        config: Active parser configuration

    Returns:
        The signed value; parentheses or a minus sign force a negative result

    Raises:
        AmountParseError: If no finite number can be read
    """
    text = strip_currency(raw or "", config).strip()
    negative = False

    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()

    if text.startswith("-"):
        negative = True
        text = text[1:].strip()
    elif text.startswith("+"):
        text = text[1:].strip()
    elif text.endswith("-"):
        negative = True
        text = text[:-1].strip()

    text = text.replace("\u00a0", " ").replace("\u202f", " ")
    cleaned = _normalize_separators(text, config).replace(" ", "")

    if not re.fullmatch(r"\d+(?:\.\d+)?|\.\d+", cleaned):
        raise AmountParseError(f"Could not parse amount: {raw!r}")

    try:
        value = float(cleaned)
    except ValueError as e:
        raise AmountParseError(f"Could not parse amount: {raw!r}") from e

    if math.isnan(value) or math.isinf(value):
        raise AmountParseError(f"Could not parse amount: {raw!r}")

    return -abs(value) if negative else value
