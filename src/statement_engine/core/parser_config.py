"""Parser configuration.

ParserConfig is plain, immutable data handed explicitly to every normalizer,
classifier and strategy. Nothing in the parsing pipeline reads module-level
vocabularies directly, so tests can swap keyword lists, currencies or
separators per call.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_DATE_FORMATS: tuple[str, ...] = (
    "YYYY-MM-DD",
    "MM/DD/YYYY",
    "DD-MM-YYYY",
    "DD.MM.YYYY",
    "DD MMM YYYY",
    "MMM DD, YYYY",
)

DEFAULT_MONTH_NAMES: dict[str, str] = {
    "jan": "01", "january": "01",
    "feb": "02", "february": "02",
    "mar": "03", "march": "03",
    "apr": "04", "april": "04",
    "may": "05",
    "jun": "06", "june": "06",
    "jul": "07", "july": "07",
    "aug": "08", "august": "08",
    "sep": "09", "sept": "09", "september": "09",
    "oct": "10", "october": "10",
    "nov": "11", "november": "11",
    "dec": "12", "december": "12",
}

# Ordering matters: longer / more specific tokens first so "US$" is consumed
# before "$" and "Rs." before any shorter match.
DEFAULT_CURRENCIES: tuple[str, ...] = (
    "US$",
    "USD",
    "EUR",
    "GBP",
    "CHF",
    "CAD",
    "AUD",
    "INR",
    "JPY",
    "RON",
    "PLN",
    "SEK",
    "NOK",
    "DKK",
    "CZK",
    "HUF",
    "Rs.",
    "€",
    "$",
    "£",
    "¥",
    "₹",
)

DEFAULT_HEADER_KEYWORDS: tuple[str, ...] = (
    "opening balance",
    "closing balance",
    "balance brought forward",
    "balance carried forward",
    "previous balance",
    "new balance",
    "available balance",
    "statement period",
    "statement date",
    "account number",
    "account summary",
    "sort code",
    "iban",
    "credit limit",
    "available credit",
    "minimum payment",
    "payment due date",
    "total amount due",
    "interest rate",
    "date description",
    "transaction date",
    "page 1 of",
    "subtotal",
    "total amount",
    "total debits",
    "total credits",
    "total purchases",
    "total payments",
    "total balance",
    "total for period",
)

# Lenient filtering only rejects these.
OBVIOUS_HEADER_MARKERS: tuple[str, ...] = (
    "opening balance",
    "closing balance",
    "balance brought forward",
    "balance carried forward",
    "statement period",
)

# Checked before the expense list; see determine_sign.
DEFAULT_POSITIVE_INDICATORS: tuple[str, ...] = (
    "transfer from",
    "deposit",
    "received",
    "refund",
    "cashback",
    "cash back",
    "salary",
    "credited",
    "top up",
    "top-up",
    "interest earned",
    "reversal",
)

DEFAULT_NEGATIVE_INDICATORS: tuple[str, ...] = (
    "transfer to",
    "payment",
    "purchase",
    "withdrawal",
    "atm",
    "fee",
    "debit",
    "sent",
    "charge",
    "subscription",
)

DECIMAL_SEPARATORS = {".", ","}
THOUSANDS_SEPARATORS = {",", ".", " ", "'"}


class ParserConfig(BaseModel):
    """Vocabulary and thresholds used by the extraction pipeline.

    Example:
        >>> config = ParserConfig().with_overrides(decimal_separator=",")
        >>> config.thousands_separator is None
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    date_formats: tuple[str, ...] = Field(default=DEFAULT_DATE_FORMATS)
    month_names: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MONTH_NAMES))
    currencies: tuple[str, ...] = Field(default=DEFAULT_CURRENCIES)
    decimal_separator: str | None = Field(None, description="'.', ',' or None to auto-detect")
    thousands_separator: str | None = Field(None, description="',', '.', ' ', \"'\" or None")
    strict_filtering: bool = True
    min_description_length: int = Field(2, ge=0)
    max_description_length: int = Field(200, ge=1)
    header_keywords: tuple[str, ...] = Field(default=DEFAULT_HEADER_KEYWORDS)
    positive_indicators: tuple[str, ...] = Field(default=DEFAULT_POSITIVE_INDICATORS)
    negative_indicators: tuple[str, ...] = Field(default=DEFAULT_NEGATIVE_INDICATORS)
    min_confidence: float = Field(0.0, ge=0.0, le=1.0, description="Reserved for ranking")

    @field_validator("decimal_separator")
    @classmethod
    def validate_decimal_separator(cls, v: str | None) -> str | None:
        if v is not None and v not in DECIMAL_SEPARATORS:
            raise ValueError(f"Unsupported decimal separator: {v!r}")
        return v

    @field_validator("thousands_separator")
    @classmethod
    def validate_thousands_separator(cls, v: str | None) -> str | None:
        if v is not None and v not in THOUSANDS_SEPARATORS:
            raise ValueError(f"Unsupported thousands separator: {v!r}")
        return v

    @field_validator("month_names")
    @classmethod
    def lowercase_month_names(cls, v: dict[str, str]) -> dict[str, str]:
        return {name.lower(): number.zfill(2) for name, number in v.items()}

    @field_validator("header_keywords", "positive_indicators", "negative_indicators")
    @classmethod
    def lowercase_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(keyword.lower() for keyword in v if keyword)

    @model_validator(mode="after")
    def check_separators_and_bounds(self) -> "ParserConfig":
        if (
            self.decimal_separator is not None
            and self.decimal_separator == self.thousands_separator
        ):
            raise ValueError("Decimal and thousands separators must differ")
        if self.min_description_length > self.max_description_length:
            raise ValueError("min_description_length exceeds max_description_length")
        return self

    def with_overrides(self, **overrides: Any) -> "ParserConfig":
        """Return a validated copy with the given fields replaced."""
        if not overrides:
            return self
        return type(self).model_validate({**self.model_dump(), **overrides})

    @classmethod
    def from_settings(cls, settings: Any) -> "ParserConfig":
        """Build the default configuration from application settings."""
        return cls(
            strict_filtering=settings.strict_filtering,
            min_description_length=settings.min_description_length,
            max_description_length=settings.max_description_length,
            decimal_separator=settings.decimal_separator,
            thousands_separator=settings.thousands_separator,
        )
