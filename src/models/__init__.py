"""Pydantic models for the chat domain.

Provides type safety and validation for everything that is persisted or
passed between the UI, the controller, and the history store.

Models:
    - Role: Speaker of a message
    - Message: Single immutable chat message
    - Document: Active PDF and its extracted text
    - Session: Saved transcript of one conversation
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Message author."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        id: Unique message identifier.
        role: The speaker (user or assistant).
        text: The message text.
        created_at: When the message was created.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique message identifier")
    role: Role = Field(..., description="Message role: 'user' or 'assistant'")
    text: str = Field(..., description="The message content")
    created_at: datetime = Field(..., description="Creation timestamp")


class Document(BaseModel):
    """The PDF currently used as context for questions.

    Attributes:
        name: Original file name.
        extracted_text: Plain text extracted from all pages.
        uploaded_at: When the document was uploaded.
        pages: Number of pages in the document.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    extracted_text: str
    uploaded_at: datetime
    pages: int = Field(default=0, ge=0)


class Session(BaseModel):
    """A saved transcript of one conversation.

    Attributes:
        id: Stable session identifier, unique within the history.
        date: Calendar day of the first message.
        topic: Short label derived from the first user message.
        messages: Messages at save time, in creation order.
        document_name: Name of the document the chat was about.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    date: date
    topic: str
    messages: list[Message] = Field(default_factory=list)
    document_name: str | None = None


__all__ = ["Document", "Message", "Role", "Session"]
