"""Unit tests for wire models."""

import pytest
import pytest_check as check
from pydantic import ValidationError

from src.models.schemas import (
    Attachment,
    AttachmentKind,
    ChatHistoryItem,
    ChatRequest,
    SignInRequest,
    StreamError,
    SubscriptionStatus,
)


class TestWireModels:
    """camelCase on the wire, snake_case in Python."""

    def test_request_accepts_camel_case(self) -> None:
        request = ChatRequest.model_validate(
            {"messages": [{"text": "hi", "isUser": True}], "generateTitle": True}
        )

        check.is_true(request.messages[0].is_user)
        check.is_true(request.generate_title)

    def test_request_requires_messages(self) -> None:
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"messages": []})

    def test_attachment_serializes_camel_case(self) -> None:
        attachment = Attachment(kind=AttachmentKind.IMAGE, name="a.png", data_url="data:x", size=3)

        data = attachment.model_dump(by_alias=True, exclude_none=True, mode="json")

        assert data == {"kind": "image", "name": "a.png", "dataUrl": "data:x", "size": 3}

    def test_subscription_defaults_to_free(self) -> None:
        check.equal(
            SubscriptionStatus().model_dump(by_alias=True),
            {"stripeStatus": "FREE", "isPremium": False},
        )

    def test_stream_error_payload(self) -> None:
        assert StreamError(message="boom").model_dump() == {"error": "stream_error", "message": "boom"}

    def test_history_title_stripped(self) -> None:
        assert ChatHistoryItem(id="1", title="  Algebra  ").title == "Algebra"

    def test_sign_in_accepts_null_credentials(self) -> None:
        request = SignInRequest.model_validate({"email": None, "password": None})

        check.is_none(request.email)
        check.is_none(request.password)
