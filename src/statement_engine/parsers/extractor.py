"""PDF text extraction wrapper using Unstructured.io.

The extraction engine only ever sees plain text. This module turns PDF bytes
into that text: Unstructured does the layout-aware partitioning, pypdf
handles encrypted files up front and acts as a plain-text fallback when
Unstructured (or one of its optional OCR dependencies) is unavailable.
"""

import io
import logging
from typing import Any

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from statement_engine.core.exceptions import PDFExtractionError

logger = logging.getLogger(__name__)


def partition_pdf(*args, **kwargs):
    """Lazily import and call Unstructured's PDF partitioner.

    Kept as a module-level symbol so tests can patch
    `statement_engine.parsers.extractor.partition_pdf` without importing heavy
    dependencies at process start.
    """
    from unstructured.partition.pdf import partition_pdf as _partition_pdf

    return _partition_pdf(*args, **kwargs)


class TextElement:
    """Minimal stand-in for an Unstructured element, built from pypdf text."""

    __slots__ = ("text", "category")

    def __init__(self, text: str, category: str = "NarrativeText"):
        self.text = text
        self.category = category

    def __str__(self) -> str:
        return self.text


def _password_error(password: str | None) -> ValueError:
    if not password:
        return ValueError("PDF password required")
    return ValueError("Incorrect PDF password")


class PDFExtractor:
    """Turn statement PDFs into elements and plain text.

    All processing happens in memory; no temporary files are written.

    Example:
        >>> extractor = PDFExtractor(strategy="fast")
        >>> text = extractor.extract_text(pdf_bytes)
    """

    def __init__(self, strategy: str = "auto"):
        """Initialize the PDF extractor.

        Args:
            strategy: Unstructured strategy - "auto", "fast", "hi_res" or "ocr_only"
        """
        self.strategy = strategy

    def extract(self, pdf_bytes: bytes, password: str | None = None) -> list[Any]:
        """Extract structured elements from a PDF.

        Args:
            pdf_bytes: PDF file content as bytes
            password: Optional password for encrypted PDFs

        Returns:
            Unstructured elements, or TextElement pages from the pypdf fallback

        Raises:
            ValueError: Empty input, missing/incorrect password or corrupted file
            PDFExtractionError: Any other extraction failure
        """
        if not pdf_bytes:
            raise ValueError("PDF bytes cannot be empty")

        password = password.strip() if isinstance(password, str) else None
        password = password or None

        try:
            data, remaining_password = self._decrypt(pdf_bytes, password)

            try:
                elements = partition_pdf(
                    file=io.BytesIO(data),
                    strategy=self.strategy,
                    include_page_breaks=True,
                    infer_table_structure=True,
                    extract_images_in_pdf=False,
                    password=remaining_password,
                )
            except Exception as e:
                logger.warning(
                    "Unstructured partitioning failed, falling back to pypdf",
                    extra={"error_type": type(e).__name__},
                )
                elements = self._pypdf_elements(data, remaining_password)
                if not elements:
                    raise

            if not elements:
                raise ValueError("PDF extraction returned no elements (empty or corrupted)")

            logger.debug("Extracted PDF elements", extra={"elements": len(elements)})
            return elements

        except PDFExtractionError:
            raise
        except Exception as e:
            error_msg = str(e).lower()

            if "password" in error_msg or "encrypted" in error_msg:
                raise _password_error(password) from e
            if "no elements" in error_msg:
                raise
            if "corrupt" in error_msg or "invalid" in error_msg or isinstance(e, PdfReadError):
                raise ValueError("PDF file appears to be corrupted") from e
            logger.error("PDF extraction failed", extra={"error_type": type(e).__name__})
            raise PDFExtractionError(
                "PARSE_002", details={"reason": f"Failed to extract PDF content: {e}"}
            ) from e

    def extract_text(self, pdf_bytes: bytes, password: str | None = None) -> str:
        """Extract the plain-text rendering of a PDF, one element per line block."""
        return self.get_full_text(self.extract(pdf_bytes, password=password))

    def get_full_text(self, elements: list[Any]) -> str:
        """Concatenate all element text into a single string."""
        return "\n".join(str(element) for element in elements)

    def _decrypt(self, pdf_bytes: bytes, password: str | None) -> tuple[bytes, str | None]:
        """Decrypt encrypted PDFs with pypdf before partitioning.

        Returns the bytes to partition and the password Unstructured still
        needs (None once the document has been rewritten unencrypted).
        """
        if not pdf_bytes.startswith(b"%PDF"):
            return pdf_bytes, password

        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
        except PdfReadError:
            # Let Unstructured decide whether the file is readable at all.
            return pdf_bytes, password

        if not reader.is_encrypted:
            return pdf_bytes, password

        # Some PDFs are encrypted with an empty user password.
        if not reader.decrypt(password or ""):
            raise _password_error(password)

        try:
            writer = PdfWriter()
            for page in reader.pages:
                writer.add_page(page)
            out = io.BytesIO()
            writer.write(out)
        except Exception as e:
            logger.debug(
                "Could not rewrite decrypted PDF, passing password through",
                extra={"error_type": type(e).__name__},
            )
            return pdf_bytes, password

        return out.getvalue(), None

    def _pypdf_elements(self, data: bytes, password: str | None) -> list[TextElement]:
        """Plain page text via pypdf, used when Unstructured is unavailable."""
        if not data.startswith(b"%PDF"):
            return []

        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted and not reader.decrypt(password or ""):
            raise _password_error(password)

        texts = [page.extract_text() or "" for page in reader.pages]
        return [TextElement(text) for text in texts if text.strip()]
