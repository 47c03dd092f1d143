"""Agno agent service answering questions about a single document.

Runs on the server only, so the provider credential stays out of the browser.

Each question is answered in one stateless request: the system message
carries the document's full extracted text and the user message carries the
question. There is no retrieval step and no agent-side history; the
conversation transcript is owned by the chat controller.
"""

import logging
from typing import Protocol

from agno.agent import Agent
from agno.models.openai import OpenAIChat

from src.agent.config import AgentConfig, get_agent_config

logger = logging.getLogger(__name__)

COMPLETION_FAILED_TEXT = "Failed to get AI response. Please try again."
NO_RESPONSE_TEXT = "Sorry, I could not generate a response."

SYSTEM_PROMPT = """You are {name}, a helpful AI assistant that answers questions based on the provided PDF content.
Use only the information from the PDF to answer questions. If the answer is not in the PDF,
say "I couldn't find that information in the uploaded document."

PDF Content:
{content}"""


class CompletionError(Exception):
    """Raised when a completion request fails for any reason."""

    def __init__(self, message: str = COMPLETION_FAILED_TEXT) -> None:
        super().__init__(message)


class CompletionClient(Protocol):
    """Anything that can answer a question given document context."""

    async def generate_response(self, question: str, context: str) -> str: ...


def build_system_prompt(content: str, name: str = "Buddi") -> str:
    """Render the system message that pins answers to the document."""
    return SYSTEM_PROMPT.format(name=name, content=content)


class AgentService:
    """Server-side completion client backed by an Agno agent.

    Wraps Agno's OpenAIChat model with:
    - OpenRouter (or any OpenAI-compatible) endpoint selection
    - Per-request agent carrying the document as system context
    - Uniform CompletionError for every failure mode
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._model = self._create_model()

    def _create_model(self) -> OpenAIChat:
        """Create the shared chat model.

        Returns:
            OpenAIChat pointed at the configured base URL.
        """
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            default_headers={"X-Title": self._config.app_title},
        )

    def _create_agent(self, context: str) -> Agent:
        """Create an agent whose system message holds the document text.

        Args:
            context: Extracted document text.

        Returns:
            Agent with no history and no tools.
        """
        return Agent(
            model=self._model,
            system_message=build_system_prompt(context, self._config.app_title),
            markdown=True,
        )

    async def generate_response(self, question: str, context: str) -> str:
        """Answer a question using the document text as context.

        Args:
            question: The user's question.
            context: Extracted text of the active document.

        Returns:
            The generated answer, or a fixed apology if the model returned nothing.

        Raises:
            CompletionError: If the request fails.
        """
        agent = self._create_agent(context)
        try:
            response = await agent.arun(question)
        except Exception as e:
            logger.error(f"Completion request failed: {e}")
            raise CompletionError() from e

        if getattr(response, "status", None) == "ERROR":
            logger.error(f"Completion run ended with error: {response.content}")
            raise CompletionError()

        content = response.content
        if not isinstance(content, str) or not content.strip():
            return NO_RESPONSE_TEXT
        return content


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
