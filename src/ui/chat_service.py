"""HTTP client used by the chat page to talk to the tutor API."""

import json
import logging
import os
from collections.abc import Callable, Sequence

import httpx

from src.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    SubscriptionStatus,
    UserSession,
)
from src.ui.formatting import format_response

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


class ChatServiceError(Exception):
    """Raised when the tutor API cannot produce a reply."""

    pass


def _payload(messages: Sequence[ChatMessage], generate_title: bool = False) -> dict:
    request = ChatRequest(messages=list(messages), generate_title=generate_title)
    return request.model_dump(by_alias=True, exclude_none=True)


class ChatServiceClient:
    """Async client for the chat, sign-in and subscription endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._base_url = base_url
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def send_message(
        self,
        messages: Sequence[ChatMessage],
        generate_title: bool = False,
    ) -> ChatResponse:
        """Request a complete reply and format it for display.

        Args:
            messages: The conversation, oldest first.
            generate_title: Also ask for a conversation title.

        Returns:
            ChatResponse whose text is already formatted as HTML.

        Raises:
            ChatServiceError: On an error status, network failure, or empty reply.
        """
        try:
            async with self._client() as client:
                response = await client.post("/api/chat", json=_payload(messages, generate_title))
        except httpx.RequestError as e:
            raise ChatServiceError(f"Connection failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            raise ChatServiceError(data.get("error") or "Failed to get response")

        text = data.get("text")
        if not text:
            raise ChatServiceError("No response received from the AI")

        return ChatResponse(text=format_response(text), title=data.get("title"))

    async def stream_chat_response(
        self,
        messages: Sequence[ChatMessage],
        on_chunk: Callable[[str], None],
        on_complete: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """Consume the SSE stream from /api/chat/stream.

        Exactly one of ``on_complete`` and ``on_error`` is called.

        Args:
            messages: The conversation, oldest first.
            on_chunk: Called with each raw text delta.
            on_complete: Called after the done event.
            on_error: Called with a message on error events or transport failure.
        """
        try:
            async with self._client() as client, client.stream(
                "POST",
                "/api/chat/stream",
                json=_payload(messages),
                headers={"Accept": "text/event-stream"},
            ) as response:
                response.raise_for_status()
                event = "message"
                async for line in response.aiter_lines():
                    if not line:
                        event = "message"
                        continue
                    if line.startswith("event:"):
                        event = line.removeprefix("event:").strip()
                        continue
                    if not line.startswith("data:"):
                        continue

                    data = json.loads(line.removeprefix("data:").strip() or "{}")
                    if event == "done":
                        on_complete()
                        return
                    if event == "error" or data.get("error"):
                        on_error(data.get("message") or data.get("error") or "Stream error")
                        return
                    if delta := data.get("delta"):
                        on_chunk(delta)
        except httpx.HTTPStatusError as e:
            on_error(f"HTTP {e.response.status_code}")
            return
        except httpx.RequestError as e:
            on_error(f"Connection failed: {e}")
            return
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed SSE frame: {e}")
            on_error("Received a malformed response")
            return

        on_error("Stream ended unexpectedly")

    async def sign_in(self, email: str, password: str) -> UserSession | None:
        """Sign in; returns None when the credentials are rejected.

        Raises:
            ChatServiceError: On network failure or an unexpected response.
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/auth/signin",
                    json={"email": email, "password": password},
                )
            if response.status_code == httpx.codes.UNAUTHORIZED:
                return None
            response.raise_for_status()
            return UserSession.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise ChatServiceError(f"Sign-in failed (HTTP {e.response.status_code})") from e
        except httpx.RequestError as e:
            raise ChatServiceError(f"Connection failed: {e}") from e
        except ValueError as e:
            raise ChatServiceError("Received a malformed response") from e

    async def get_subscription_status(self, email: str) -> SubscriptionStatus:
        """Fetch the subscription status, defaulting to FREE on failure."""
        try:
            async with self._client() as client:
                response = await client.get("/api/subscription-status", params={"email": email})
            response.raise_for_status()
            return SubscriptionStatus.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Subscription lookup failed, treating as FREE: {e}")
            return SubscriptionStatus()
