"""Statement parser entry point.

This module wires the parsing workflow together:
1. Extract plain text from PDF bytes using PDFExtractor (off the event loop)
2. Run the ParseOrchestrator over that text
3. Return the normalized transactions
"""

import asyncio
import logging
from typing import Any

from statement_engine.config import settings
from statement_engine.core.exceptions import PDFExtractionError
from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.extractor import PDFExtractor
from statement_engine.parsers.orchestrator import ParseOrchestrator
from statement_engine.schemas.internal import ParsedTransaction, ParseOutcome

logger = logging.getLogger(__name__)


def extraction_error_code(error: ValueError) -> str:
    """Map an extractor ValueError to its catalog code."""
    error_msg = str(error).lower()
    if "password" in error_msg and "required" in error_msg:
        return "PARSE_003"
    if "password" in error_msg and ("incorrect" in error_msg or "wrong" in error_msg):
        return "PARSE_004"
    return "PARSE_002"


class StatementParser:
    """Extract transactions from statement PDFs or their text.

    Example:
        >>> parser = StatementParser()
        >>> transactions = await parser.parse(pdf_bytes)
        >>> transactions[0].amount
        -45.67
    """

    def __init__(
        self,
        extractor: PDFExtractor | None = None,
        orchestrator: ParseOrchestrator | None = None,
        config: ParserConfig | None = None,
    ):
        """Initialize the statement parser.

        Args:
            extractor: PDF extractor instance (default: new PDFExtractor)
            orchestrator: Strategy orchestrator (default: all strategies)
            config: Base parser configuration (default: built from settings)
        """
        self.extractor = extractor or PDFExtractor(strategy=settings.extraction_strategy)
        self.config = config or ParserConfig.from_settings(settings)
        self.orchestrator = orchestrator or ParseOrchestrator(config=self.config)

    def _resolve_config(self, config_overrides: dict[str, Any] | None) -> ParserConfig:
        return self.config.with_overrides(**(config_overrides or {}))

    async def extract_text(self, pdf_bytes: bytes, password: str | None = None) -> str:
        """Run the (blocking) text extractor in a worker thread.

        Raises:
            PDFExtractionError: With PARSE_002/003/004 when extraction fails
        """
        try:
            return await asyncio.to_thread(
                self.extractor.extract_text, pdf_bytes, password
            )
        except ValueError as e:
            error_code = extraction_error_code(e)
            logger.warning(
                "PDF extraction rejected",
                extra={"error_code": error_code, "error_type": type(e).__name__},
            )
            raise PDFExtractionError(error_code, details={"reason": str(e)}) from e

    async def parse_detailed(
        self,
        pdf_bytes: bytes,
        config_overrides: dict[str, Any] | None = None,
        password: str | None = None,
    ) -> ParseOutcome:
        """Extract and parse a PDF, reporting the winning strategy."""
        config = self._resolve_config(config_overrides)
        text = await self.extract_text(pdf_bytes, password)
        logger.info("Extracted statement text", extra={"characters": len(text)})
        return self.orchestrator.run_detailed(text, config)

    async def parse(
        self,
        pdf_bytes: bytes,
        config_overrides: dict[str, Any] | None = None,
        password: str | None = None,
    ) -> list[ParsedTransaction]:
        """Extract and parse a statement PDF.

        Args:
            pdf_bytes: PDF file content as bytes
            config_overrides: ParserConfig fields to replace for this call
            password: Optional password for encrypted PDFs

        Returns:
            Transactions found (an empty list when none are recognized)

        Raises:
            PDFExtractionError: If no text can be extracted
        """
        outcome = await self.parse_detailed(pdf_bytes, config_overrides, password)
        return outcome.transactions

    def parse_text(
        self, text: str, config_overrides: dict[str, Any] | None = None
    ) -> list[ParsedTransaction]:
        """Parse already-extracted statement text."""
        return self.orchestrator.run(text, self._resolve_config(config_overrides))


# Singleton parser instance for global use
_parser_instance: StatementParser | None = None


def get_statement_parser() -> StatementParser:
    """Get or create the global StatementParser instance."""
    global _parser_instance
    if _parser_instance is None:
        _parser_instance = StatementParser()
    return _parser_instance


async def parse_statement(
    pdf_bytes: bytes,
    config_overrides: dict[str, Any] | None = None,
    password: str | None = None,
) -> list[ParsedTransaction]:
    """Convenience function to parse a statement using the global parser."""
    return await get_statement_parser().parse(
        pdf_bytes, config_overrides=config_overrides, password=password
    )
