"""Versioned persistence of chat history and the sent-message count.

The store works over any mutable mapping. In the UI that is NiceGUI's
``app.storage.user``, which is tied to the browser; tests use a plain dict.
Values are stored as JSON strings under fixed keys.

Persisted format (version 1)::

    {"version": 1, "items": [{"id", "title", "messages": [...], "timestamp"}]}

Earlier releases stored a bare list of threads. Such values are migrated to
version 1 on load; anything else unreadable is discarded with a warning.
"""

import json
import logging
import uuid
from collections.abc import MutableMapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from src.models.schemas import (
    HISTORY_SCHEMA_VERSION,
    ChatExchange,
    ChatHistoryDocument,
    ChatHistoryItem,
)

logger = logging.getLogger(__name__)

CHAT_HISTORY_KEY = "chat_history"
MESSAGE_COUNT_KEY = "message_count"


class ChatHistoryStore:
    """Reads and writes chat threads and the message counter."""

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    def load_history(self) -> list[ChatHistoryItem]:
        """Load all threads, newest first.

        Returns:
            The persisted threads, or an empty list if nothing usable is stored.
        """
        raw = self._storage.get(CHAT_HISTORY_KEY)
        if not raw:
            return []

        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable chat history: {e}")
            return []

        if isinstance(data, list):
            logger.info("Migrating unversioned chat history to version 1")
            data = {"version": HISTORY_SCHEMA_VERSION, "items": data}

        if not isinstance(data, dict) or data.get("version") != HISTORY_SCHEMA_VERSION:
            logger.warning("Discarding chat history with unknown schema version")
            return []

        try:
            return ChatHistoryDocument.model_validate(data).items
        except ValidationError as e:
            logger.warning(f"Discarding invalid chat history: {e}")
            return []

    def save_history(self, items: list[ChatHistoryItem]) -> None:
        """Persist threads. Saving an empty list leaves storage untouched."""
        if not items:
            return
        document = ChatHistoryDocument(items=items)
        self._storage[CHAT_HISTORY_KEY] = document.model_dump_json()

    def record_exchange(
        self,
        question: str,
        answer: str,
        thread_id: str | None = None,
        title: str | None = None,
    ) -> ChatHistoryItem:
        """Append a question/answer pair to a thread.

        Args:
            question: The user's message.
            answer: The tutor's reply.
            thread_id: Thread to append to. A new thread is started when this
                is None or names no stored thread.
            title: Title for a newly started thread (defaults to the question).

        Returns:
            The updated or newly created thread.
        """
        items = self.load_history()
        exchange = ChatExchange(question=question, answer=answer)

        thread = next((item for item in items if item.id == thread_id), None)
        if thread is None:
            thread = ChatHistoryItem(
                id=thread_id or str(uuid.uuid4()),
                title=title or question,
            )
            items.insert(0, thread)

        thread.messages.append(exchange)
        thread.timestamp = datetime.now()
        self.save_history(items)
        return thread

    def get_thread(self, thread_id: str) -> ChatHistoryItem | None:
        return next((item for item in self.load_history() if item.id == thread_id), None)

    def load_message_count(self) -> int:
        raw = self._storage.get(MESSAGE_COUNT_KEY)
        if raw is None:
            return 0
        try:
            return max(int(json.loads(raw) if isinstance(raw, str) else raw), 0)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid message count: {raw!r}")
            return 0

    def save_message_count(self, count: int) -> None:
        self._storage[MESSAGE_COUNT_KEY] = json.dumps(count)

    def increment_message_count(self) -> int:
        count = self.load_message_count() + 1
        self.save_message_count(count)
        return count

    def clear(self) -> None:
        """Remove both the history and the message count."""
        self._storage.pop(CHAT_HISTORY_KEY, None)
        self._storage.pop(MESSAGE_COUNT_KEY, None)
