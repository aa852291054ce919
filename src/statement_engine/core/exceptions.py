"""Custom exception classes for statement processing.

Each exception carries an error_code from the catalog in errors.py.
Only extraction and upload validation are exceptional: a statement in which
no transaction is recognized is a successful parse with an empty result.
"""

from typing import Any


class StatementProcessingError(Exception):
    """Base exception for all statement processing errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "PARSE_002")
        details: Additional context about the error (for logging)
        http_status: HTTP status code a web caller should return
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class PDFExtractionError(StatementProcessingError):
    """Raised when text cannot be extracted from the uploaded PDF.

    Common causes:
    - Corrupted PDF file (PARSE_002)
    - Password-protected PDF (PARSE_003)
    - Incorrect password (PARSE_004)
    """

    def __init__(
        self,
        error_code: str = "PARSE_002",
        details: dict[str, Any] | None = None,
        http_status: int = 422,
    ):
        super().__init__(error_code, details, http_status)


class UploadValidationError(StatementProcessingError):
    """Raised when an upload is rejected before extraction (API_001/002/005)."""

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 400,
    ):
        super().__init__(error_code, details, http_status)
