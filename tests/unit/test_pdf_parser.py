"""Unit tests for PDF parser module."""

from collections.abc import Callable

import pytest
import pytest_check as check

from src.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDFParseError,
    PDFValidationError,
    extract_document,
    parse_pdf,
    validate_upload,
)


class TestParsePdfValid:
    """Tests for successful PDF parsing."""

    def test_extracts_text_and_page_count(self, sample_pdf: bytes) -> None:
        """Valid PDF returns text content and correct page count."""
        result = parse_pdf(sample_pdf)

        check.is_in("deadline", result.text)
        check.is_in("Budget", result.text)
        check.equal(result.pages, 2)

    def test_pages_joined_with_blank_line(self, sample_pdf: bytes) -> None:
        """Page texts are separated by an empty line."""
        result = parse_pdf(sample_pdf)

        first, second = result.text.split("\n\n")
        check.is_in("deadline", first)
        check.is_in("Budget", second)

    def test_empty_page_pdf_succeeds(self, pdf_factory: Callable[[list[str]], bytes]) -> None:
        """PDF with an empty page parses without error."""
        result = parse_pdf(pdf_factory([""]))

        check.equal(result.pages, 1)
        check.equal(result.text, "")


class TestParsePdfRejection:
    """Tests for PDF validation and rejection."""

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(PDFValidationError, match="Empty file"):
            parse_pdf(b"")

    def test_rejects_non_pdf_content(self) -> None:
        with pytest.raises(PDFParseError, match="Invalid PDF"):
            parse_pdf(b"This is not a PDF at all")

    def test_rejects_oversized_file(self) -> None:
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        with pytest.raises(PDFValidationError, match="exceeds maximum") as exc_info:
            parse_pdf(oversized)

        assert exc_info.value.too_large is True

    def test_rejects_truncated_pdf(self) -> None:
        with pytest.raises(PDFParseError, match="Corrupt|Failed|no pages"):
            parse_pdf(b"%PDF-1.4\n1 0 obj\n<<")


class TestValidateUpload:
    """Tests for upload checks done before extraction."""

    def test_accepts_pdf_extension(self) -> None:
        assert validate_upload("report.PDF", None, 100) == "report.PDF"

    def test_accepts_pdf_mime_type_without_extension(self) -> None:
        assert validate_upload("scan", "application/pdf", 100) == "scan"

    def test_rejects_other_types(self) -> None:
        with pytest.raises(PDFValidationError, match="PDF file only"):
            validate_upload("notes.txt", "text/plain", 100)

    def test_rejects_missing_filename(self) -> None:
        with pytest.raises(PDFValidationError, match="Filename"):
            validate_upload("", "application/pdf", 100)

    def test_size_limit_is_inclusive(self) -> None:
        validate_upload("a.pdf", "application/pdf", MAX_FILE_SIZE)

        with pytest.raises(PDFValidationError) as exc_info:
            validate_upload("a.pdf", "application/pdf", MAX_FILE_SIZE + 1)

        assert exc_info.value.too_large is True


class TestExtractDocument:
    def test_builds_document_named_after_upload(self, sample_pdf: bytes) -> None:
        document = extract_document("spec.pdf", sample_pdf)

        check.equal(document.name, "spec.pdf")
        check.equal(document.pages, 2)
        check.is_in("June 1", document.extracted_text)
        check.is_not_none(document.uploaded_at.tzinfo)

    def test_rejected_upload_raises_before_parsing(self, sample_pdf: bytes) -> None:
        with pytest.raises(PDFValidationError):
            extract_document("spec.docx", sample_pdf, "application/msword")
