"""FastAPI endpoints for the AI tutor.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Complete chat reply
    - POST /api/chat/stream: Streamed chat reply (SSE)
    - POST /api/auth/signin: Demo credential sign-in
    - GET /api/subscription-status: Premium lookup by email
    - POST /api/attachments: File to attachment encoding
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
