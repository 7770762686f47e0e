"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_tutor: Scripted stand-in for the LLM-backed tutor service
    - billing_statuses: Email -> status table served by a stub billing API
    - async_client: HTTPX client for API testing with both stubs installed
    - make_pdf: Builder for small blank PDFs
"""

import io
from collections.abc import AsyncGenerator, Callable, Iterator, Sequence

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from src.agent.chat_agent import TutorServiceError
from src.api import app
from src.api.chat import tutor_service
from src.billing.client import BillingClient, get_billing_client
from src.billing.config import BillingConfig
from src.models.schemas import ChatMessage


class FakeTutorService:
    """Scripted tutor service used in place of the Agno-backed one.

    Attributes:
        deltas: Chunks yielded by ``stream_response``; joined for ``get_response``.
        fail_after: Raise after yielding this many deltas (None = never).
        title: Value returned by ``generate_title`` (None = raise).
        received: Message lists passed to the service, in call order.
    """

    def __init__(
        self,
        deltas: Sequence[str] = ("Photosynthesis ", "turns **light** ", "into sugar."),
        fail_after: int | None = None,
        title: str | None = "Photosynthesis Basics",
    ) -> None:
        self.deltas = list(deltas)
        self.fail_after = fail_after
        self.title = title
        self.received: list[list[ChatMessage]] = []

    async def get_response(self, messages: Sequence[ChatMessage]) -> str:
        self.received.append(list(messages))
        if self.fail_after is not None:
            raise TutorServiceError("provider unavailable")
        return "".join(self.deltas)

    async def stream_response(self, messages: Sequence[ChatMessage]) -> AsyncGenerator[str]:
        self.received.append(list(messages))
        for index, delta in enumerate(self.deltas):
            if self.fail_after is not None and index >= self.fail_after:
                raise TutorServiceError("provider unavailable")
            yield delta
        if self.fail_after is not None and self.fail_after >= len(self.deltas):
            raise TutorServiceError("provider unavailable")

    async def generate_title(self, question: str) -> str:
        if self.title is None:
            raise TutorServiceError("title failed")
        return self.title


@pytest.fixture
def fake_tutor() -> FakeTutorService:
    return FakeTutorService()


@pytest.fixture
def billing_statuses() -> dict[str, int | str]:
    """Statuses served by the stub billing API.

    A string value is returned as ``stripeStatus``; an int value is returned
    as that HTTP error status. Unknown emails get 404.
    """
    return {
        "paid@example.com": "PAID",
        "trial@example.com": "TRIAL",
        "free@example.com": "FREE",
        "cancelled@example.com": "CANCELLED",
        "broken@example.com": 503,
    }


@pytest.fixture
def billing_client(billing_statuses: dict[str, int | str]) -> BillingClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/users/subscription-status"
        status = billing_statuses.get(request.url.params.get("email", ""), 404)
        if isinstance(status, int):
            return httpx.Response(status, json={"error": "unavailable"})
        return httpx.Response(200, json={"stripeStatus": status})

    return BillingClient(
        config=BillingConfig(api_url="http://billing.test", timeout=5, free_message_limit=20),
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def override_dependencies(
    fake_tutor: FakeTutorService, billing_client: BillingClient
) -> Iterator[None]:
    app.dependency_overrides[tutor_service] = lambda: fake_tutor
    app.dependency_overrides[get_billing_client] = lambda: billing_client
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(override_dependencies: None) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_pdf() -> Callable[[int], bytes]:
    """Return a builder producing a blank PDF with the given page count."""

    def build(pages: int = 1) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return build
