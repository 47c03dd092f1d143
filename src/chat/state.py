"""Conversation state and its transitions.

``ChatState`` is an immutable snapshot; every transition takes a state and
returns a new one. Nothing here performs I/O, so the whole conversation
flow can be unit tested without a network or a browser.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.chat.sessions import build_session, upsert_session
from src.models import Document, Message, Role, Session

FALLBACK_ERROR_TEXT = (
    "Sorry, I encountered an error while processing your question. Please try again."
)


class ChatState(BaseModel):
    """Everything the chat page shows.

    Attributes:
        messages: Active conversation, oldest first.
        is_loading: A completion request is in flight.
        document: Active document, if any.
        session_id: Id of the session the active conversation is saved under.
        history: All saved sessions, newest first.
    """

    model_config = ConfigDict(frozen=True)

    messages: list[Message] = Field(default_factory=list)
    is_loading: bool = False
    document: Document | None = None
    session_id: str | None = None
    history: list[Session] = Field(default_factory=list)


class ChatStatistics(BaseModel):
    """Counters shown beside the chat."""

    message_count: int
    document_loaded: bool
    is_loading: bool
    total_sessions: int


def _message(role: Role, text: str, now: datetime) -> Message:
    return Message(id=uuid.uuid4().hex, role=role, text=text, created_at=now)


def upload_document(state: ChatState, document: Document) -> ChatState:
    return state.model_copy(update={"document": document, "messages": [], "session_id": None})


def clear_document(state: ChatState) -> ChatState:
    return state.model_copy(update={"document": None, "messages": [], "session_id": None})


def new_chat(state: ChatState) -> ChatState:
    return state.model_copy(update={"messages": [], "session_id": None})


def load_session(state: ChatState, session: Session) -> ChatState:
    """Restore a saved conversation.

    The active document survives only if it is the one the session was about.
    """
    document = state.document
    if document is not None and document.name != session.document_name:
        document = None
    return state.model_copy(
        update={
            "messages": list(session.messages),
            "session_id": session.id,
            "document": document,
        }
    )


def can_send(state: ChatState, text: str) -> bool:
    return state.document is not None and not state.is_loading and bool(text.strip())


def begin_request(state: ChatState, text: str, now: datetime) -> ChatState:
    """Append the user's message and mark a request as in flight."""
    message = _message(Role.USER, text.strip(), now)
    return state.model_copy(update={"messages": [*state.messages, message], "is_loading": True})


def complete_request(state: ChatState, answer: str, now: datetime) -> ChatState:
    message = _message(Role.ASSISTANT, answer, now)
    return state.model_copy(update={"messages": [*state.messages, message], "is_loading": False})


def fail_request(state: ChatState, now: datetime) -> ChatState:
    return complete_request(state, FALLBACK_ERROR_TEXT, now)


def abandon_request(state: ChatState) -> ChatState:
    """Clear the loading flag without adding an answer."""
    return state.model_copy(update={"is_loading": False})


def should_sync(state: ChatState) -> bool:
    return bool(state.messages) and not state.is_loading and state.document is not None


def sync_session(state: ChatState) -> ChatState:
    """Save the active conversation into the history.

    Builds a session under the active id (or a new one) and upserts it.
    The session's id becomes the active id. No-op unless messages exist,
    no request is in flight, and a document is active.
    """
    if not should_sync(state):
        return state
    session = build_session(state.messages, state.document.name, state.session_id)
    return state.model_copy(
        update={
            "history": upsert_session(state.history, session),
            "session_id": session.id,
        }
    )


def chat_statistics(state: ChatState) -> ChatStatistics:
    return ChatStatistics(
        message_count=len(state.messages),
        document_loaded=state.document is not None,
        is_loading=state.is_loading,
        total_sessions=len(state.history),
    )
