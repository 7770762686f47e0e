"""AI Tutor - browser-based tutoring chat backed by an LLM provider.

Combines FastAPI for HTTP streaming, Agno for LLM access,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - agent: LLM relay with the tutor system prompt
    - auth / billing: Demo sign-in and subscription-status lookup
    - history: Persisted chat threads and message count
    - parsing: Attachment validation and text extraction
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"
