"""Pydantic schemas for statement import results.

These models describe what the import service hands back to a caller after a
statement has been parsed, categorized and checked for duplicates.
"""

from pydantic import BaseModel, ConfigDict, Field


class ExistingTransaction(BaseModel):
    """A transaction the caller has already stored, used for duplicate checks."""

    date: str = Field(description="Transaction date (YYYY-MM-DD)")
    description: str
    provider: str
    amount: float

    model_config = ConfigDict(from_attributes=True)


class ImportedTransaction(BaseModel):
    """A parsed transaction enriched for storage."""

    date: str = Field(description="Transaction date (YYYY-MM-DD)")
    description: str = Field(description="Description as matched on the statement")
    provider: str = Field(description="Short provider label")
    amount: float = Field(description="Signed amount (negative = expense)")
    month_year: str = Field(description="Grouping key (YYYY-MM)")
    category: str | None = Field(None, description="Category from provider mapping")
    duplicate: bool = Field(
        default=False, description="True if already stored by the caller"
    )


class StatementImportResult(BaseModel):
    """Result of successful statement import."""

    total: int = Field(description="Number of new (non-duplicate) transactions")
    categorized: int = Field(description="New transactions that received a category")
    uncategorized: int = Field(description="New transactions without a category")
    duplicates: int = Field(default=0, description="Transactions already stored")
    strategy: str | None = Field(None, description="Strategy that produced the result")
    transactions: list[ImportedTransaction] = Field(default_factory=list)
