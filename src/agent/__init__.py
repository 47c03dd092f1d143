"""Completion clients for answering questions about a document.

Responsibilities:
    - Server-side Agno agent holding the provider credential
    - HTTP relay client for the UI (no embedded secret)
    - Shared CompletionClient protocol and CompletionError

Both clients expose ``generate_response(question, context)``, so the chat
controller can take either one.
"""

from src.agent.chat_agent import (
    AgentService,
    CompletionClient,
    CompletionError,
    get_agent_service,
)
from src.agent.config import AgentConfig, get_agent_config
from src.agent.relay import RelayCompletionClient

__all__ = [
    "AgentConfig",
    "AgentService",
    "CompletionClient",
    "CompletionError",
    "RelayCompletionClient",
    "get_agent_config",
    "get_agent_service",
]
