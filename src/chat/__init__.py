"""Chat session bookkeeping.

Groups messages into dated sessions, persists the history, and drives the
conversation flow between the UI and the completion client.

Modules:
    - sessions: Session builder, topic labels, history list helpers
    - history: JSON persistence of the session list
    - state: Immutable chat state and its transitions
    - controller: Orchestrates transitions, completion requests, and saves
"""

from src.chat.controller import ConversationController
from src.chat.history import HistoryStore
from src.chat.sessions import build_session, generate_topic, upsert_session
from src.chat.state import FALLBACK_ERROR_TEXT, ChatState

__all__ = [
    "FALLBACK_ERROR_TEXT",
    "ChatState",
    "ConversationController",
    "HistoryStore",
    "build_session",
    "generate_topic",
    "upsert_session",
]
