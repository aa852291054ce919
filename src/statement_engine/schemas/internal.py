"""Internal data schemas for parsed statement data.

These models are the output of the extraction engine, before any caller-side
grouping, categorization or persistence.
"""

import math

from pydantic import BaseModel, Field, field_validator


class ParsedTransaction(BaseModel):
    """Represents a single transaction extracted from a statement.

    Amounts are signed: negative for money leaving the account (expense),
    positive for money entering it (income).
    """

    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    description: str = Field(..., description="Matched description span, trimmed")
    provider: str = Field(..., description="Short counterparty label")
    amount: float = Field(..., description="Signed amount (negative = expense)")

    @field_validator("description", "provider")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("amount")
    @classmethod
    def amount_is_finite(cls, v: float) -> float:
        """Reject NaN/inf instead of coercing them to a number."""
        if math.isnan(v) or math.isinf(v):
            raise ValueError("Amount must be a finite number")
        return v

    @property
    def month_year(self) -> str:
        """YYYY-MM grouping key."""
        return self.date[:7]


class ParseOutcome(BaseModel):
    """Detailed result of one orchestrator run."""

    transactions: list[ParsedTransaction] = Field(default_factory=list)
    strategy: str | None = Field(None, description="Name of the winning strategy, if any")
    attempted: list[str] = Field(
        default_factory=list, description="Strategies tried, in order"
    )
