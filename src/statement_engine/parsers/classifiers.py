"""Lexical classification of transaction descriptions.

- determine_sign: decide expense vs income from keywords in the description
- extract_provider: reduce a description to a short counterparty label

Both are deterministic, keyword/regex based and free of I/O.
"""

import re
from functools import lru_cache

from statement_engine.core.parser_config import ParserConfig

_LEADING_VERB_RE = re.compile(
    r"^(?:PURCHASE|PAYMENT|TRANSFER|DEPOSIT|WITHDRAWAL|DEBIT|CREDIT|POS|ATM|ONLINE|CARD)\s+",
    re.IGNORECASE,
)

# Applied repeatedly until the description stops changing.
_TRAILING_NOISE: list[re.Pattern[str]] = [
    re.compile(r"\s+(?:REF|AUTH)\s*[:#].*$", re.IGNORECASE),
    re.compile(r"\s*#\d+$"),
    re.compile(r"\s+\d{4,}$"),
    re.compile(r"\s+\d{1,2}/\d{1,2}$"),
    re.compile(r"\*+(?=[A-Za-z]*\d)[A-Za-z0-9]*$|\*+$"),
]

_LEGAL_SUFFIX_RE = re.compile(
    r"\s+(?:LLC|INC|CORP|LTD|CO|PLC|GMBH|LIMITED|COMPANY)\.?$", re.IGNORECASE
)
_DISALLOWED_CHARS_RE = re.compile(r"[^a-zA-Z0-9\s&'\-.]")


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(r"(?<![a-z0-9])" + re.escape(keyword))


def _matches_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(_keyword_pattern(keyword).search(text) for keyword in keywords)


def determine_sign(amount: float, description: str, config: ParserConfig) -> float:
    """Apply lexical sign rules to an amount.

    Income keywords are checked first and force a positive amount; expense
    keywords force a negative one. Without a keyword the amount's own sign
    is kept. A keyword must start a word but may be inflected: "refund"
    matches "refunded", while "fee" does not fire on "coffee".

    Example:
        >>> determine_sign(100, "Payment to John", ParserConfig())
        -100
    """
    text = (description or "").lower()
    if _matches_any(text, config.positive_indicators):
        return abs(amount)
    if _matches_any(text, config.negative_indicators):
        return -abs(amount)
    return amount


def _strip_trailing_noise(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        for pattern in _TRAILING_NOISE:
            text = pattern.sub("", text).rstrip()
    return text


def extract_provider(description: str) -> str:
    """Derive a short provider label from a transaction description.

    Example:
        >>> extract_provider("PURCHASE AMAZON.COM*AB12CD3 04/15")
        'AMAZON.COM'
    """
    description = (description or "").strip()
    provider = _LEADING_VERB_RE.sub("", description)
    provider = _strip_trailing_noise(provider).strip()

    words = provider.split()
    if len(words) > 4:
        words = words[:3]
    elif len(words) > 2:
        words = words[:2]
    provider = " ".join(words)

    provider = _LEGAL_SUFFIX_RE.sub("", provider)
    provider = _DISALLOWED_CHARS_RE.sub("", provider).strip()

    if provider:
        return provider
    first_word = description.split()[0] if description.split() else ""
    return first_word or "Unknown"
