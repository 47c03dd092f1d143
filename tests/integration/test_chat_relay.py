"""Integration tests for the completion relay endpoint.

Runs the real FastAPI app with the completion dependency overridden, and
drives the conversation controller through the relay end to end.

Requirements:
    - LLM_API_KEY or OPENROUTER_API_KEY for the live model test (skipped otherwise)
"""

import os
from collections.abc import Callable
from datetime import datetime

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.agent.chat_agent import COMPLETION_FAILED_TEXT, CompletionError
from src.agent.relay import RelayCompletionClient
from src.api.chat import get_completion_client
from src.chat.controller import ConversationController
from src.chat.history import HistoryStore
from src.chat.state import FALLBACK_ERROR_TEXT
from src.models import Role
from src.models.schemas import CompletionResponse, PDFUploadResponse
from src.parsing.pdf_parser import extract_document
from tests.conftest import FakeCompletionClient


def has_llm_api_key() -> bool:
    """Check if an API key is configured."""
    key = os.environ.get("LLM_API_KEY") or os.environ.get("OPENROUTER_API_KEY", "")
    return bool(key and not key.isspace())


requires_api_key = pytest.mark.skipif(
    not has_llm_api_key(),
    reason="LLM_API_KEY not set - skipping live model test",
)


@pytest.fixture
def relay_app(api_app: FastAPI, fake_client: FakeCompletionClient) -> FastAPI:
    api_app.dependency_overrides[get_completion_client] = lambda: fake_client
    return api_app


class TestCompletionEndpoint:
    """Integration tests for POST /chat/completions."""

    async def test_returns_openai_shaped_body(
        self, relay_app: FastAPI, async_client: AsyncClient, fake_client: FakeCompletionClient
    ) -> None:
        response = await async_client.post(
            "/chat/completions",
            json={"question": "  What is the deadline?  ", "context": "Deadline: June 1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["choices"][0]["message"]["content"] == "The deadline is June 1."
        assert body["choices"][0]["message"]["role"] == "assistant"
        assert fake_client.calls == [("What is the deadline?", "Deadline: June 1")]

    async def test_upstream_failure_maps_to_502(
        self, relay_app: FastAPI, async_client: AsyncClient, fake_client: FakeCompletionClient
    ) -> None:
        fake_client.error = CompletionError()

        response = await async_client.post(
            "/chat/completions", json={"question": "What?", "context": "text"}
        )

        assert response.status_code == 502
        assert response.json()["detail"] == COMPLETION_FAILED_TEXT

    async def test_blank_question_rejected(self, relay_app: FastAPI, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat/completions", json={"question": "   "})

        assert response.status_code == 422

    async def test_missing_api_key_maps_to_503(self, async_client: AsyncClient, monkeypatch) -> None:
        import src.agent.chat_agent as chat_agent_module

        monkeypatch.setattr(chat_agent_module, "_agent_service", None)
        monkeypatch.setenv("LLM_API_KEY", "")
        monkeypatch.setenv("OPENROUTER_API_KEY", "")

        response = await async_client.post(
            "/chat/completions", json={"question": "What?", "context": "text"}
        )

        assert response.status_code == 503


class TestControllerThroughRelay:
    """The UI's controller talking to the real relay app."""

    def make_controller(
        self, app: FastAPI, history_store: HistoryStore, clock: Callable[[], datetime]
    ) -> ConversationController:
        client = RelayCompletionClient(base_url="http://test", transport=ASGITransport(app=app))
        return ConversationController(client, history_store, clock=clock)

    async def test_question_and_answer_saved(
        self,
        relay_app: FastAPI,
        history_store: HistoryStore,
        clock: Callable[[], datetime],
        sample_pdf: bytes,
    ) -> None:
        controller = self.make_controller(relay_app, history_store, clock)
        controller.upload_document(extract_document("spec.pdf", sample_pdf))

        await controller.send_message("What is the deadline?")

        state = controller.state
        assert [m.role for m in state.messages] == [Role.USER, Role.ASSISTANT]
        assert state.messages[1].text == "The deadline is June 1."
        assert history_store.load()[0].document_name == "spec.pdf"

    async def test_relay_failure_becomes_fallback_message(
        self,
        relay_app: FastAPI,
        fake_client: FakeCompletionClient,
        history_store: HistoryStore,
        clock: Callable[[], datetime],
        sample_pdf: bytes,
    ) -> None:
        fake_client.error = CompletionError()
        controller = self.make_controller(relay_app, history_store, clock)
        controller.upload_document(extract_document("spec.pdf", sample_pdf))

        await controller.send_message("What is the deadline?")

        assert controller.state.messages[-1].text == FALLBACK_ERROR_TEXT
        assert controller.state.is_loading is False


@requires_api_key
async def test_live_answer_about_uploaded_pdf(async_client: AsyncClient, sample_pdf: bytes) -> None:
    """Upload a PDF, then ask the real model about it."""
    upload = await async_client.post(
        "/upload/pdf", files={"file": ("spec.pdf", sample_pdf, "application/pdf")}
    )
    document = PDFUploadResponse.model_validate(upload.json())

    response = await async_client.post(
        "/chat/completions",
        json={"question": "What is the project deadline?", "context": document.text},
    )

    assert response.status_code == 200
    answer = CompletionResponse.model_validate(response.json()).text
    assert "June" in answer or "1" in answer
