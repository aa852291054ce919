"""Tests for PDF extractor wrapper."""

import io
from unittest.mock import Mock, patch

import pytest
from pypdf import PdfWriter

from statement_engine.core.exceptions import PDFExtractionError
from statement_engine.parsers.extractor import PDFExtractor, TextElement


def _blank_pdf(password: str | None = None) -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    if password is not None:
        writer.encrypt(password)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def _element(text: str) -> Mock:
    element = Mock()
    element.__str__ = Mock(return_value=text)
    return element


class TestPDFExtractor:
    """Test suite for PDFExtractor."""

    def test_initialization(self):
        """Test extractor can be initialized with different strategies."""
        assert PDFExtractor().strategy == "auto"
        assert PDFExtractor(strategy="hi_res").strategy == "hi_res"

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_success(self, mock_partition):
        """Test successful PDF extraction."""
        mock_partition.return_value = [_element("Line 1"), _element("Line 2")]

        elements = PDFExtractor().extract(b"fake pdf content")

        assert len(elements) == 2
        call_kwargs = mock_partition.call_args.kwargs
        assert call_kwargs["strategy"] == "auto"
        assert call_kwargs["include_page_breaks"] is True
        assert call_kwargs["infer_table_structure"] is True
        assert call_kwargs["extract_images_in_pdf"] is False
        assert call_kwargs["password"] is None
        assert isinstance(call_kwargs["file"], io.BytesIO)

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_text_joins_elements(self, mock_partition):
        """Test that extract_text returns one string, one element per line block."""
        mock_partition.return_value = [
            _element("2024-03-15 Grocery Store -45.67"),
            _element("2024-03-16 Coffee 4.50"),
        ]

        text = PDFExtractor().extract_text(b"fake pdf content")

        assert text == "2024-03-15 Grocery Store -45.67\n2024-03-16 Coffee 4.50"

    def test_extract_empty_bytes(self):
        """Test that empty input is rejected before any parsing."""
        with pytest.raises(ValueError, match="cannot be empty"):
            PDFExtractor().extract(b"")

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_no_elements(self, mock_partition):
        """Test that an empty partition result is reported."""
        mock_partition.return_value = []

        with pytest.raises(ValueError, match="no elements"):
            PDFExtractor().extract(b"fake pdf")

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_corrupted(self, mock_partition):
        """Test corrupted file error handling."""
        mock_partition.side_effect = Exception("PDF is corrupted")

        with pytest.raises(ValueError, match="appears to be corrupted"):
            PDFExtractor().extract(b"bad pdf")

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_unexpected_failure(self, mock_partition):
        """Test that other failures become PDFExtractionError."""
        mock_partition.side_effect = RuntimeError("tesseract is not installed")

        with pytest.raises(PDFExtractionError) as exc_info:
            PDFExtractor().extract(_blank_pdf())

        assert exc_info.value.error_code == "PARSE_002"
        assert "tesseract" in exc_info.value.details["reason"]

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_encrypted_requires_password(self, mock_partition):
        """Encrypted PDFs should prompt for password before calling Unstructured."""
        with pytest.raises(ValueError, match="password required"):
            PDFExtractor().extract(_blank_pdf("secret"), password=None)

        mock_partition.assert_not_called()

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_encrypted_incorrect_password(self, mock_partition):
        """Encrypted PDFs with wrong password should raise incorrect password."""
        with pytest.raises(ValueError, match="(?i)incorrect pdf password"):
            PDFExtractor().extract(_blank_pdf("secret"), password="wrong")

        mock_partition.assert_not_called()

    @patch("statement_engine.parsers.extractor.partition_pdf")
    def test_extract_encrypted_correct_password_decrypts(self, mock_partition):
        """Encrypted PDFs should be decrypted before passing to Unstructured."""
        mock_partition.return_value = [_element("page")]

        elements = PDFExtractor().extract(_blank_pdf("secret"), password="  secret ")

        assert len(elements) == 1
        call_kwargs = mock_partition.call_args.kwargs
        assert call_kwargs["password"] is None
        assert call_kwargs["file"].getvalue().startswith(b"%PDF")

    @patch("statement_engine.parsers.extractor.partition_pdf")
    @patch("statement_engine.parsers.extractor.PdfReader")
    def test_pypdf_fallback_when_unstructured_fails(self, mock_reader_cls, mock_partition):
        """Unstructured failures fall back to pypdf page text."""
        page_with_text = Mock()
        page_with_text.extract_text.return_value = "2024-03-15 Grocery Store -45.67"
        blank_page = Mock()
        blank_page.extract_text.return_value = "   "
        reader = Mock(is_encrypted=False, pages=[page_with_text, blank_page])
        mock_reader_cls.return_value = reader
        mock_partition.side_effect = ImportError("No module named 'unstructured'")

        elements = PDFExtractor().extract(b"%PDF-1.7 fake")

        assert len(elements) == 1
        assert isinstance(elements[0], TextElement)
        assert str(elements[0]) == "2024-03-15 Grocery Store -45.67"
        assert elements[0].category == "NarrativeText"
