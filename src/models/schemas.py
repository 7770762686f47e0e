from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HISTORY_SCHEMA_VERSION = 1


class WireModel(BaseModel):
    """Base for models exchanged with the browser.

    Serializes with camelCase names and accepts either spelling on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttachmentKind(str, Enum):
    """Kinds of file a user can attach to a message."""

    IMAGE = "image"
    DOCUMENT = "document"


class Attachment(WireModel):
    """A file attached to a chat message.

    Attributes:
        kind: Image or document.
        name: Original filename.
        data_url: Base64 data URL (images only).
        text_content: Extracted plain text (documents only).
        size: File size in bytes.
    """

    kind: AttachmentKind
    name: str
    data_url: str | None = None
    text_content: str | None = None
    size: int | None = Field(None, ge=0)


class ChatMessage(WireModel):
    """A single message in the conversation.

    Attributes:
        text: The message text.
        is_user: True for the student's messages, False for the tutor's.
        attachments: Files sent along with the message.
    """

    text: str
    is_user: bool
    attachments: list[Attachment] = Field(default_factory=list)


class ChatRequest(WireModel):
    """Request payload for the chat endpoints.

    Attributes:
        messages: Full conversation so far, oldest first.
        generate_title: Also return a short title for the conversation.
    """

    messages: list[ChatMessage] = Field(..., min_length=1)
    generate_title: bool = False


class ChatResponse(WireModel):
    """Complete (non-streamed) tutor reply."""

    text: str
    title: str | None = None


class ErrorResponse(BaseModel):
    """JSON error payload returned with a non-200 status."""

    error: str


class StreamDelta(BaseModel):
    """One token delta forwarded over SSE."""

    delta: str


class StreamError(BaseModel):
    """Payload of the terminal SSE error event."""

    error: Literal["stream_error"] = "stream_error"
    message: str


class SubscriptionTier(str, Enum):
    """Subscription statuses reported by the billing API."""

    FREE = "FREE"
    TRIAL = "TRIAL"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    NOT_PAID = "NOT_PAID"


class SubscriptionStatus(WireModel):
    """Result of a subscription-status lookup.

    ``stripe_status`` is kept as a plain string: the billing API may report
    statuses this service does not know about, and those are simply
    non-premium.
    """

    stripe_status: str = SubscriptionTier.FREE.value
    is_premium: bool = False


class SignInRequest(BaseModel):
    """Credentials posted to the sign-in endpoint."""

    email: str | None = None
    password: str | None = None


class UserSession(WireModel):
    """Signed-in user as held by the UI."""

    id: str
    email: str
    name: str
    is_premium: bool = False
    stripe_status: str = SubscriptionTier.FREE.value


class ChatExchange(BaseModel):
    """One question/answer pair inside a history thread."""

    question: str
    answer: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatHistoryItem(BaseModel):
    """A persisted conversation thread."""

    id: str
    title: str
    messages: list[ChatExchange] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Strip whitespace from the title."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatHistoryDocument(BaseModel):
    """Versioned envelope stored under the chat history key."""

    version: int = HISTORY_SCHEMA_VERSION
    items: list[ChatHistoryItem] = Field(default_factory=list)
