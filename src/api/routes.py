"""PDF upload endpoint for document extraction.

Handles file upload, validation, and text extraction. Nothing is stored on
the server; the extracted text is returned for use as question context.
"""

import logging

from fastapi import APIRouter, HTTPException, UploadFile, status

from src.models.schemas import PDFUploadResponse
from src.parsing.pdf_parser import (
    PDFParseError,
    PDFValidationError,
    parse_pdf,
    validate_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


def _to_http_error(error: PDFParseError) -> HTTPException:
    if isinstance(error, PDFValidationError) and error.too_large:
        code = status.HTTP_413_CONTENT_TOO_LARGE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(error))


@router.post("/pdf", response_model=PDFUploadResponse)
async def upload_pdf(file: UploadFile) -> PDFUploadResponse:
    """Upload a PDF document and return its text.

    Args:
        file: The uploaded PDF file (multipart/form-data).

    Returns:
        PDFUploadResponse with filename, page count, and extracted text.

    Raises:
        400: Invalid file (not PDF, empty, corrupt).
        413: File exceeds 10MB limit.
    """
    content = await file.read()

    try:
        filename = validate_upload(file.filename, file.content_type, len(content))
        pdf_content = parse_pdf(content)
    except PDFParseError as e:
        logger.warning(f"Rejected upload {file.filename!r}: {e}")
        raise _to_http_error(e) from e

    logger.info(f"Extracted PDF: {filename} ({pdf_content.pages} pages)")

    return PDFUploadResponse(
        filename=filename,
        pages=pdf_content.pages,
        text=pdf_content.text,
        success=True,
    )
