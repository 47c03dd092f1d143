"""Pytest fixtures and shared test configuration.

Fixtures:
    - pdf_factory: Builds small valid PDFs with given page texts
    - fake_client: Scriptable completion client recording its calls
    - clock: Deterministic, strictly increasing local timestamps
    - history_slot / history_store: Dict-backed persistence slot
    - api_app / async_client: Fresh FastAPI app and an HTTPX client for it
"""

from collections.abc import AsyncIterator, Callable, Iterator
from datetime import datetime, timedelta

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.chat.history import HistoryStore


def build_pdf(pages: list[str]) -> bytes:
    """Assemble a minimal PDF with one Helvetica text line per page."""
    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for page_id, text in zip(page_ids, pages, strict=True):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_at}\n%%EOF\n"
    ).encode()
    return bytes(out)


class FakeCompletionClient:
    """Completion client that returns a canned answer or raises."""

    def __init__(self, answer: str = "The deadline is June 1.") -> None:
        self.answer = answer
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    async def generate_response(self, question: str, context: str) -> str:
        self.calls.append((question, context))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def pdf_factory() -> Callable[[list[str]], bytes]:
    """Return the PDF builder."""
    return build_pdf


@pytest.fixture
def sample_pdf() -> bytes:
    """Two-page PDF with known text."""
    return build_pdf(["Project deadline is June 1", "Budget approved by finance"])


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Local-time clock that advances one second per call."""
    start = datetime(2024, 5, 20, 9, 30).astimezone()
    ticks: Iterator[int] = iter(range(1_000_000))

    def now() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return now


@pytest.fixture
def history_slot() -> dict:
    return {}


@pytest.fixture
def history_store(history_slot: dict) -> HistoryStore:
    return HistoryStore(history_slot, key="test-history")


@pytest.fixture
def api_app() -> FastAPI:
    """Fresh application so dependency overrides do not leak between tests."""
    return create_app()


@pytest.fixture
async def async_client(api_app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient bound to api_app.
    """
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
