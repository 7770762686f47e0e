"""NiceGUI interface - thin visualization layer for the tutor chat.

Responsibilities:
    - Chat message display with streaming support
    - Sign-in page and user profile strip
    - History sidebar backed by browser storage
    - File attachments and speech-to-text input
    - Free-tier message limit banner

Talks to the API over HTTP; formatting of model output lives in
``src.ui.formatting``.
"""
