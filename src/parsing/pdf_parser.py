"""PDF parsing module using pypdf.

Validates uploads, then extracts text content from PDF files.
"""

import io
import logging
from datetime import datetime

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from src.models import Document

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
PDF_MIME_TYPE = "application/pdf"


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Combined text content from all pages.
        pages: Total number of pages in the document.
    """

    text: str
    pages: int = Field(ge=0)


class PDFParseError(Exception):
    """Raised when PDF extraction fails."""

    pass


class PDFValidationError(PDFParseError):
    """Raised when an upload is rejected before extraction."""

    def __init__(self, message: str, *, too_large: bool = False) -> None:
        super().__init__(message)
        self.too_large = too_large


def validate_upload(filename: str | None, content_type: str | None, size: int) -> str:
    """Check an upload's name, declared type, and size.

    A file passes the type check when either its name ends in ``.pdf``
    or its declared MIME type is ``application/pdf``.

    Args:
        filename: The uploaded file name.
        content_type: Declared MIME type, if any.
        size: Size of the upload in bytes.

    Returns:
        The validated filename.

    Raises:
        PDFValidationError: If the file is unnamed, not a PDF, or too large.
    """
    if not filename:
        raise PDFValidationError("Filename is required")

    is_pdf_name = filename.lower().endswith(".pdf")
    is_pdf_type = (content_type or "").split(";")[0].strip().lower() == PDF_MIME_TYPE
    if not (is_pdf_name or is_pdf_type):
        raise PDFValidationError("Please upload a PDF file only.")

    if size > MAX_FILE_SIZE:
        size_mb = size / (1024 * 1024)
        raise PDFValidationError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
            too_large=True,
        )

    return filename


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFValidationError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFValidationError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
            too_large=True,
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFValidationError("Invalid PDF: file does not start with PDF header")


def parse_pdf(file_content: bytes) -> PDFContent:
    """Parse a PDF file and extract its text content.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with extracted text and page count.

    Raises:
        PDFParseError: If the file is invalid, too large, empty, or corrupt.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    text_parts: list[str] = []
    for number, page in enumerate(reader.pages, start=1):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {number}: {e}")
            continue
        if page_text and page_text.strip():
            text_parts.append(page_text.strip())

    text = "\n\n".join(text_parts)
    if not text:
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(text=text, pages=pages)


def extract_document(
    filename: str,
    file_content: bytes,
    content_type: str | None = PDF_MIME_TYPE,
) -> Document:
    """Validate an upload and turn it into the active Document.

    Args:
        filename: Original file name, kept as the document name.
        file_content: Raw bytes of the upload.
        content_type: Declared MIME type of the upload.

    Returns:
        Document stamped with the current local time.

    Raises:
        PDFValidationError: If the upload is rejected.
        PDFParseError: If text extraction fails.
    """
    validate_upload(filename, content_type, len(file_content))
    content = parse_pdf(file_content)
    logger.info(f"Extracted {len(content.text)} characters from {filename} ({content.pages} pages)")
    return Document(
        name=filename,
        extracted_text=content.text,
        uploaded_at=datetime.now().astimezone(),
        pages=content.pages,
    )
