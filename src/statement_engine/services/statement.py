"""Statement import service.

This module orchestrates the caller-side import workflow:
1. Validate the upload (presence, PDF magic bytes, size limit)
2. Extract and parse transactions
3. Derive the month grouping key and assign categories from provider mappings
4. Flag transactions the caller has already stored

Persistence stays with the caller: existing transactions and category
mappings are passed in, results are handed back.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from statement_engine.config import settings
from statement_engine.categorization.mapping import assign_category, build_category_index
from statement_engine.core.exceptions import PDFExtractionError, UploadValidationError
from statement_engine.parsers.factory import StatementParser, get_statement_parser
from statement_engine.schemas.internal import ParsedTransaction
from statement_engine.schemas.statement import (
    ExistingTransaction,
    ImportedTransaction,
    StatementImportResult,
)

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"


def duplicate_key(date: str, description: str, provider: str, amount: float) -> tuple:
    """Identity of a stored transaction: date, description, provider and amount."""
    return (date, description, provider, round(amount, 2))


class StatementImportService:
    """Service for importing statement PDFs.

    Example:
        >>> service = StatementImportService()
        >>> result = await service.import_statement(
        ...     pdf_bytes, category_mappings={"Netflix": "Entertainment"}
        ... )
        >>> result.categorized
        3
    """

    def __init__(
        self,
        parser: StatementParser | None = None,
        max_size_mb: int | None = None,
    ):
        """Initialize the service.

        Args:
            parser: Statement parser (default: global parser)
            max_size_mb: Upload size limit (default: settings.pdf_max_size_mb)
        """
        self.parser = parser or get_statement_parser()
        self.max_size_mb = max_size_mb if max_size_mb is not None else settings.pdf_max_size_mb

    def validate_upload(self, pdf_bytes: bytes | None) -> None:
        """Reject uploads that cannot be a statement PDF.

        Raises:
            UploadValidationError: API_001 (missing), API_005 (not a PDF),
                API_002 (too large)
        """
        if not pdf_bytes:
            raise UploadValidationError("API_001")

        if not pdf_bytes.startswith(PDF_MAGIC_BYTES):
            raise UploadValidationError("API_005")

        max_bytes = self.max_size_mb * 1024 * 1024
        if len(pdf_bytes) > max_bytes:
            raise UploadValidationError(
                "API_002", details={"size": len(pdf_bytes), "max_bytes": max_bytes}
            )

    async def import_statement(
        self,
        pdf_bytes: bytes,
        category_mappings: Mapping[str, str] | None = None,
        existing: Iterable[ExistingTransaction | Mapping[str, Any]] = (),
        config_overrides: dict[str, Any] | None = None,
        password: str | None = None,
    ) -> StatementImportResult:
        """Validate, parse and enrich a statement upload.

        Args:
            pdf_bytes: PDF file content as bytes
            category_mappings: Provider -> category remembered by the caller
            existing: Transactions the caller already stored
            config_overrides: ParserConfig fields to replace for this import
            password: Optional password for encrypted PDFs

        Returns:
            StatementImportResult; zero transactions is a valid result

        Raises:
            UploadValidationError: If the upload is rejected
            PDFExtractionError: If no text can be extracted
        """
        self.validate_upload(pdf_bytes)

        try:
            logger.info("Starting statement import", extra={"size": len(pdf_bytes)})
            outcome = await self.parser.parse_detailed(
                pdf_bytes, config_overrides=config_overrides, password=password
            )
        except PDFExtractionError as e:
            logger.warning("Statement import failed", extra={"error_code": e.error_code})
            raise

        result = self.enrich(outcome.transactions, category_mappings, existing)
        result.strategy = outcome.strategy

        logger.info(
            "Statement import complete",
            extra={
                "total": result.total,
                "categorized": result.categorized,
                "duplicates": result.duplicates,
                "strategy": outcome.strategy,
            },
        )
        return result

    def enrich(
        self,
        transactions: list[ParsedTransaction],
        category_mappings: Mapping[str, str] | None = None,
        existing: Iterable[ExistingTransaction | Mapping[str, Any]] = (),
    ) -> StatementImportResult:
        """Attach month, category and duplicate flag to parsed transactions."""
        index = build_category_index(category_mappings or {})
        stored = set()
        for record in existing:
            known = ExistingTransaction.model_validate(record)
            stored.add(duplicate_key(known.date, known.description, known.provider, known.amount))

        imported: list[ImportedTransaction] = []
        for txn in transactions:
            key = duplicate_key(txn.date, txn.description, txn.provider, txn.amount)
            imported.append(
                ImportedTransaction(
                    date=txn.date,
                    description=txn.description,
                    provider=txn.provider,
                    amount=txn.amount,
                    month_year=txn.month_year,
                    category=assign_category(txn.provider, index),
                    duplicate=key in stored,
                )
            )

        new = [txn for txn in imported if not txn.duplicate]
        categorized = sum(1 for txn in new if txn.category is not None)
        return StatementImportResult(
            total=len(new),
            categorized=categorized,
            uncategorized=len(new) - categorized,
            duplicates=len(imported) - len(new),
            transactions=imported,
        )
