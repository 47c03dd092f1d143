"""Session building and history list helpers.

Everything here is a pure function over pydantic models. The only side
effect is id generation in ``build_session`` when no id is supplied.
"""

import uuid
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from src.models import Message, Role, Session

NEW_CHAT_TOPIC = "New Chat"
SUMMARY_TOPIC = "Summary Request"
NO_MESSAGES_PREVIEW = "No messages"

QUESTION_WORDS = 5
DEFAULT_WORDS = 4
PREFIX_CHARS = 30
PREVIEW_CHARS = 50
EXCERPT_MESSAGES = 4
EXCERPT_CHARS = 80


def _first_words(text: str, count: int) -> str:
    words = text.split()
    head = " ".join(words[:count])
    return head + "..." if len(words) > count else head


def _first_chars(text: str, count: int) -> str:
    return text[:count] + "..." if len(text) > count else text


def first_user_message(messages: Iterable[Message]) -> Message | None:
    return next((m for m in messages if m.role == Role.USER), None)


def generate_topic(messages: Sequence[Message]) -> str:
    """Derive a short label from the first user message.

    Cues are matched case-insensitively as substrings, in this order:
    "what"/"explain", "how", "summary"/"summarize", "find"/"search".
    Without a cue, the first few words are used.
    """
    message = first_user_message(messages)
    if message is None:
        return NEW_CHAT_TOPIC

    text = message.text.strip()
    lowered = text.lower()

    if "what" in lowered or "explain" in lowered:
        return _first_words(text, QUESTION_WORDS)
    if "how" in lowered:
        return "How-to: " + _first_chars(text, PREFIX_CHARS)
    if "summary" in lowered or "summarize" in lowered:
        return SUMMARY_TOPIC
    if "find" in lowered or "search" in lowered:
        return "Search: " + _first_chars(text, PREFIX_CHARS)
    return _first_words(text, DEFAULT_WORDS)


def session_date(messages: Sequence[Message]) -> date:
    """Local calendar day of the first message, or today for an empty list."""
    if not messages:
        return date.today()
    created_at = messages[0].created_at
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone()
    return created_at.date()


def new_session_id() -> str:
    return uuid.uuid4().hex


def build_session(
    messages: Sequence[Message],
    document_name: str | None = None,
    session_id: str | None = None,
) -> Session:
    """Snapshot a conversation as a Session.

    Args:
        messages: Full ordered message list.
        document_name: Name of the active document, if any.
        session_id: Existing id to keep; a fresh one is generated when omitted.

    Returns:
        A new Session holding a copy of the messages.
    """
    return Session(
        id=session_id or new_session_id(),
        date=session_date(messages),
        topic=generate_topic(messages),
        messages=list(messages),
        document_name=document_name,
    )


def upsert_session(history: Sequence[Session], session: Session) -> list[Session]:
    """Replace the entry with the same id in place, or prepend a new one."""
    updated = list(history)
    for index, existing in enumerate(updated):
        if existing.id == session.id:
            updated[index] = session
            return updated
    return [session, *updated]


def group_sessions_by_date(sessions: Iterable[Session]) -> dict[date, list[Session]]:
    grouped: dict[date, list[Session]] = {}
    for session in sessions:
        grouped.setdefault(session.date, []).append(session)
    return grouped


def available_dates(sessions: Iterable[Session]) -> list[date]:
    """Distinct session dates, newest first."""
    return sorted({s.date for s in sessions}, reverse=True)


def filter_sessions_by_date(sessions: Sequence[Session], day: date | None) -> list[Session]:
    if day is None:
        return list(sessions)
    return [s for s in sessions if s.date == day]


def session_preview(session: Session) -> str:
    message = first_user_message(session.messages)
    if message is None:
        return NO_MESSAGES_PREVIEW
    return message.text[:PREVIEW_CHARS] + "..."


def session_started_at(session: Session) -> datetime | None:
    return session.messages[0].created_at if session.messages else None


def session_excerpt(session: Session) -> tuple[list[tuple[Role, str]], int]:
    """First few messages of a session, shortened, and how many were left out."""
    lines = [
        (message.role, _first_chars(message.text, EXCERPT_CHARS))
        for message in session.messages[:EXCERPT_MESSAGES]
    ]
    return lines, max(len(session.messages) - EXCERPT_MESSAGES, 0)
