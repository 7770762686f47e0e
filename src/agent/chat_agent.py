"""Agno-backed tutor service with streaming support.

Core module for relaying a conversation to the configured LLM provider.

Design notes:

1. **Stateless relay** - The browser owns the conversation and sends the full
   message list on every request, so the agent runs without storage or
   history. Each call sees exactly the messages it was given, preceded by
   the fixed tutor system prompt.

2. **Provider switch** - OpenAI, Gemini and Hugging Face are all Agno model
   classes with the same ``Agent`` interface. Only model construction
   differs; the Gemini and Hugging Face integrations are imported on demand
   so their SDKs stay optional.

3. **Streaming Generator** - Agno yields run events with metadata. We forward
   just the content deltas, providing a clean interface for the SSE endpoint.

4. **Errors propagate** - Provider failures surface as ``TutorServiceError``
   and are turned into HTTP error payloads or SSE error events by the routes.
"""

import logging
from collections.abc import AsyncGenerator, Sequence

from agno.agent import Agent
from agno.media import Image
from agno.models.base import Model
from agno.models.message import Message
from agno.models.openai import OpenAIChat

from src.agent.config import TutorConfig, get_tutor_config
from src.models.schemas import AttachmentKind, ChatMessage
from src.parsing.attachments import AttachmentError, decode_data_url

logger = logging.getLogger(__name__)

TITLE_PROMPT = (
    "You write titles for tutoring conversations. Given the student's question, "
    "reply with a concise title of at most six words. Reply with the title only, "
    "without quotes or trailing punctuation."
)

# Longest fallback title taken from the question itself
FALLBACK_TITLE_LENGTH = 50

_CONTENT_EVENT = "RunContent"
_ERROR_EVENT = "RunError"


class TutorServiceError(Exception):
    """Raised when the LLM provider fails to produce a response."""

    pass


def fallback_title(question: str) -> str:
    """Derive a title from the question when the model cannot supply one."""
    question = " ".join(question.split())
    if len(question) <= FALLBACK_TITLE_LENGTH:
        return question
    return question[: FALLBACK_TITLE_LENGTH - 3].rstrip() + "..."


class TutorService:
    """Service for relaying conversations to the tutor model.

    Wraps Agno's Agent with:
    - Provider selection from configuration
    - A fixed system prompt ahead of the client's messages
    - Clean streaming interface for SSE endpoints
    - Conversation title generation
    """

    def __init__(self, config: TutorConfig | None = None) -> None:
        """Initialize the tutor service.

        Args:
            config: Optional tutor configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_tutor_config()
        self._model = self._create_model()
        self._agent = self._create_agent(self._config.system_prompt)
        self._title_agent = self._create_agent(TITLE_PROMPT)

    def _create_model(self) -> Model:
        """Create the provider model named in the configuration.

        Returns:
            Agno model configured with key, model id and sampling settings.
        """
        config = self._config

        if config.provider == "gemini":
            from agno.models.google import Gemini

            return Gemini(
                id=config.model_name,
                api_key=config.api_key,
                temperature=config.temperature,
                max_output_tokens=config.max_tokens,
            )

        if config.provider == "huggingface":
            from agno.models.huggingface import HuggingFace

            return HuggingFace(
                id=config.model_name,
                api_key=config.api_key,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )

        params: dict[str, object] = {
            "id": config.model_name,
            "api_key": config.api_key,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        if config.base_url:
            params["base_url"] = config.base_url
        return OpenAIChat(**params)

    def _create_agent(self, system_message: str) -> Agent:
        """Create a stateless Agno agent around the shared model.

        Args:
            system_message: System prompt sent before the conversation.

        Returns:
            Agent without storage or history.
        """
        return Agent(
            model=self._model,
            system_message=system_message,
            add_history_to_context=False,
        )

    def build_messages(self, messages: Sequence[ChatMessage]) -> list[Message]:
        """Convert client messages into provider messages.

        Document attachments are appended to the message text, truncated to
        the configured character limit. Image attachments on user messages are
        forwarded as image inputs.

        Args:
            messages: Conversation as sent by the client, oldest first.

        Returns:
            Agno messages in the same order.
        """
        limit = self._config.document_char_limit
        converted: list[Message] = []

        for msg in messages:
            parts = [msg.text]
            images: list[Image] = []

            for attachment in msg.attachments:
                if attachment.kind == AttachmentKind.DOCUMENT and attachment.text_content:
                    parts.append(
                        f"Attached document ({attachment.name}):\n"
                        f"{attachment.text_content[:limit]}"
                    )
                elif attachment.kind == AttachmentKind.IMAGE and attachment.data_url and msg.is_user:
                    try:
                        images.append(Image(content=decode_data_url(attachment.data_url)))
                    except AttachmentError as e:
                        logger.warning(f"Skipping unreadable image {attachment.name}: {e}")

            converted.append(
                Message(
                    role="user" if msg.is_user else "assistant",
                    content="\n\n".join(parts),
                    images=images or None,
                )
            )

        return converted

    async def stream_response(
        self,
        messages: Sequence[ChatMessage],
    ) -> AsyncGenerator[str]:
        """Stream response deltas for a conversation.

        Yields response tokens as they arrive.

        Args:
            messages: The conversation, oldest first.

        Yields:
            Non-empty response text deltas in arrival order.

        Raises:
            TutorServiceError: If the provider fails mid-stream.
        """
        try:
            response_stream = self._agent.arun(
                self.build_messages(messages),
                stream=True,
            )

            async for chunk in response_stream:
                event = getattr(chunk, "event", None)
                if event == _ERROR_EVENT:
                    raise TutorServiceError(str(getattr(chunk, "content", None) or "Run failed"))
                if event not in (None, _CONTENT_EVENT):
                    continue
                if isinstance(chunk.content, str) and chunk.content:
                    yield chunk.content

        except TutorServiceError:
            raise
        except Exception as e:
            logger.error(f"Streaming completion failed: {e}")
            raise TutorServiceError(str(e)) from e

    async def get_response(self, messages: Sequence[ChatMessage]) -> str:
        """Get the complete response for a conversation.

        Non-streaming alternative for simpler use cases.

        Args:
            messages: The conversation, oldest first.

        Returns:
            Complete response text (empty if the model produced nothing).

        Raises:
            TutorServiceError: If the provider call fails.
        """
        try:
            response = await self._agent.arun(self.build_messages(messages))
        except Exception as e:
            logger.error(f"Completion failed: {e}")
            raise TutorServiceError(str(e)) from e

        status = getattr(response, "status", None)
        if getattr(status, "value", status) == "ERROR":
            raise TutorServiceError(str(response.content or "Run failed"))

        content = response.content
        return content if isinstance(content, str) else ""

    async def generate_title(self, question: str) -> str:
        """Generate a short title for a conversation.

        Falls back to the question itself when the model fails or replies
        with nothing.

        Args:
            question: The student's question that opens the thread.

        Returns:
            A short, single-line title.
        """
        try:
            response = await self._title_agent.arun(question)
            title = response.content if isinstance(response.content, str) else ""
        except Exception as e:
            logger.warning(f"Title generation failed, using question: {e}")
            title = ""

        title = title.strip().strip("\"'").strip().rstrip(".")
        if not title or "\n" in title:
            return fallback_title(question)
        return title


# Module-level singleton instance
_tutor_service: TutorService | None = None


def get_tutor_service() -> TutorService:
    """Get or create the global tutor service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The TutorService instance.
    """
    global _tutor_service
    if _tutor_service is None:
        _tutor_service = TutorService()
    return _tutor_service
