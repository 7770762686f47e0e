"""Agno agent logic for the tutor relay.

Forwards the client's conversation to the configured LLM provider.

Responsibilities:
    - Model initialization for OpenAI, Gemini or Hugging Face
    - System prompt injection ahead of the conversation
    - Attachment forwarding (images as inputs, documents as text)
    - Streaming token generation and title generation

Maintains clean separation from the HTTP layer.
"""

from src.agent.chat_agent import (
    TutorService,
    TutorServiceError,
    fallback_title,
    get_tutor_service,
)
from src.agent.config import TutorConfig, get_tutor_config

__all__ = [
    "TutorConfig",
    "TutorService",
    "TutorServiceError",
    "fallback_title",
    "get_tutor_config",
    "get_tutor_service",
]
