"""Test package for the AI tutor chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: API endpoint tests through the FastAPI app

The LLM provider and billing API are replaced by scripted stand-ins, so no
network access or API keys are needed. Leverages pytest with pytest-check
for soft assertions.
"""
