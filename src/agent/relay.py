"""HTTP completion client used by the UI.

Talks to this application's own ``/chat/completions`` relay, so the browser
side never needs the provider credential.
"""

import logging
import os

import httpx
from pydantic import ValidationError

from src.agent.chat_agent import CompletionError
from src.models.schemas import CompletionResponse

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))


class RelayCompletionClient:
    """Completion client that posts questions to the server relay."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def generate_response(self, question: str, context: str) -> str:
        """Send one question and return ``choices[0].message.content``.

        Raises:
            CompletionError: On transport errors, non-success status, or a
                body without the expected shape.
        """
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self._base_url}/chat/completions",
                    json={"question": question, "context": context},
                )
                response.raise_for_status()
                return CompletionResponse.model_validate_json(response.content).text
            except httpx.HTTPStatusError as e:
                logger.error(f"Completion relay returned HTTP {e.response.status_code}")
                raise CompletionError() from e
            except httpx.RequestError as e:
                logger.error(f"Completion relay unreachable: {e}")
                raise CompletionError() from e
            except ValidationError as e:
                logger.error(f"Malformed completion body: {e}")
                raise CompletionError() from e
