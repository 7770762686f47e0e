"""Chat history persistence in browser-backed storage."""

from src.history.store import CHAT_HISTORY_KEY, MESSAGE_COUNT_KEY, ChatHistoryStore

__all__ = ["CHAT_HISTORY_KEY", "MESSAGE_COUNT_KEY", "ChatHistoryStore"]
