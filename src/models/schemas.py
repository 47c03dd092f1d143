from pydantic import BaseModel, Field, field_validator


class CompletionRequest(BaseModel):
    """Request payload for the completion relay endpoint.

    Attributes:
        question: User's question about the document.
        context: Extracted text of the active document.
    """

    question: str = Field(..., min_length=1)
    context: str = ""

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v: str) -> str:
        """Strip whitespace from question before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class CompletionMessage(BaseModel):
    """Assistant message inside a completion choice."""

    role: str = "assistant"
    content: str


class CompletionChoice(BaseModel):
    """One generated alternative."""

    message: CompletionMessage


class CompletionResponse(BaseModel):
    """OpenAI-compatible completion body returned by the relay.

    Only ``choices[0].message.content`` is read by clients.
    """

    choices: list[CompletionChoice] = Field(..., min_length=1)

    @classmethod
    def from_text(cls, text: str) -> "CompletionResponse":
        return cls(choices=[CompletionChoice(message=CompletionMessage(content=text))])

    @property
    def text(self) -> str:
        return self.choices[0].message.content


class PDFUploadResponse(BaseModel):
    """Response after PDF upload processing.

    Attributes:
        filename: Name of the uploaded file.
        pages: Number of pages in the document.
        text: Extracted plain text.
        success: Whether the upload was successful.
        error: Error message if upload failed.
    """

    filename: str
    pages: int
    text: str = ""
    success: bool
    error: str | None = None
