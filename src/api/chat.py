"""Completion relay endpoint.

Forwards a question and its document context to the language model using
the server-held credential, and answers in the OpenAI-compatible
``choices[0].message.content`` shape.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from src.agent.chat_agent import (
    COMPLETION_FAILED_TEXT,
    CompletionClient,
    CompletionError,
    get_agent_service,
)
from src.models.schemas import CompletionRequest, CompletionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def get_completion_client() -> CompletionClient:
    """Dependency returning the server-side completion client.

    Raises:
        503: No API key is configured on the server.
    """
    try:
        return get_agent_service()
    except ValidationError as e:
        logger.error(f"Completion service is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Completion service is not configured",
        ) from e


@router.post("/completions", response_model=CompletionResponse)
async def create_completion(
    request: CompletionRequest,
    client: Annotated[CompletionClient, Depends(get_completion_client)],
) -> CompletionResponse:
    """Answer one question about a document.

    Raises:
        502: The upstream model request failed.
    """
    try:
        answer = await client.generate_response(request.question, request.context)
    except CompletionError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=COMPLETION_FAILED_TEXT,
        ) from e

    logger.debug(f"Answered question of {len(request.question)} chars")
    return CompletionResponse.from_text(answer)
