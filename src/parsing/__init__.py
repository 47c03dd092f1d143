"""PDF parsing utilities for document upload.

Turns an uploaded file into the plain text used as question context.

Responsibilities:
    - Upload validation (file type and 10MB size limit)
    - PDF text extraction with pypdf
    - Metadata extraction (title, author, pages)
"""

from src.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDFContent,
    PDFParseError,
    PDFValidationError,
    extract_document,
    parse_pdf,
    validate_upload,
)

__all__ = [
    "MAX_FILE_SIZE",
    "PDFContent",
    "PDFParseError",
    "PDFValidationError",
    "extract_document",
    "parse_pdf",
    "validate_upload",
]
