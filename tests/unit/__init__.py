"""Unit tests for individual components in isolation.

Coverage:
    - agent/: Tutor configuration, message conversion and event filtering
    - billing/: Subscription lookup and free-tier limits
    - history/: Versioned thread persistence
    - parsing/: Attachment validation and PDF text extraction
    - ui/: Reply formatting and the API client
"""
