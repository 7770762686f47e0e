"""Pydantic models for API requests, responses, and persisted state.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage / Attachment: Conversation entries sent by the UI
    - ChatRequest / ChatResponse: Chat endpoint payloads
    - StreamDelta / StreamError: SSE frame payloads
    - SubscriptionStatus / UserSession: Billing and sign-in results
    - ChatHistoryItem / ChatHistoryDocument: Persisted history threads
"""

from src.models.schemas import (
    Attachment,
    AttachmentKind,
    ChatExchange,
    ChatHistoryDocument,
    ChatHistoryItem,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    SignInRequest,
    StreamDelta,
    StreamError,
    SubscriptionStatus,
    SubscriptionTier,
    UserSession,
)

__all__ = [
    "Attachment",
    "AttachmentKind",
    "ChatExchange",
    "ChatHistoryDocument",
    "ChatHistoryItem",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "SignInRequest",
    "StreamDelta",
    "StreamError",
    "SubscriptionStatus",
    "SubscriptionTier",
    "UserSession",
]
