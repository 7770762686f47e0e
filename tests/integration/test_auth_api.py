"""Integration tests for sign-in and subscription-status endpoints."""

import pytest
import pytest_check as check
from httpx import AsyncClient


class TestSignIn:
    """Tests for POST /api/auth/signin."""

    async def test_any_credentials_accepted(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/auth/signin",
            json={"email": "paid@example.com", "password": "anything"},
        )

        data = response.json()
        check.equal(response.status_code, 200)
        check.equal(data["email"], "paid@example.com")
        check.equal(data["name"], "paid")
        check.is_true(data["isPremium"])
        check.equal(data["stripeStatus"], "PAID")

    async def test_user_id_is_stable(self, async_client: AsyncClient) -> None:
        body = {"email": "free@example.com", "password": "pw"}

        first = (await async_client.post("/api/auth/signin", json=body)).json()
        second = (await async_client.post("/api/auth/signin", json=body)).json()

        assert first["id"] == second["id"]

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "", "password": "pw"},
            {"email": "a@example.com", "password": ""},
            {"email": "   ", "password": "pw"},
            {"email": None, "password": "pw"},
            {"email": "a@example.com", "password": None},
            {},
        ],
    )
    async def test_missing_credentials_rejected(self, async_client: AsyncClient, body: dict) -> None:
        response = await async_client.post("/api/auth/signin", json=body)

        check.equal(response.status_code, 401)
        check.equal(response.json(), {"error": "Invalid credentials"})

    async def test_billing_outage_signs_in_as_free(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/auth/signin",
            json={"email": "broken@example.com", "password": "pw"},
        )

        check.equal(response.status_code, 200)
        check.is_false(response.json()["isPremium"])
        check.equal(response.json()["stripeStatus"], "FREE")


class TestSubscriptionStatus:
    """Tests for GET /api/subscription-status."""

    @pytest.mark.parametrize(
        ("email", "stripe_status", "is_premium"),
        [
            ("paid@example.com", "PAID", True),
            ("trial@example.com", "TRIAL", True),
            ("free@example.com", "FREE", False),
            ("cancelled@example.com", "CANCELLED", False),
            ("nobody@example.com", "FREE", False),
            ("broken@example.com", "FREE", False),
        ],
    )
    async def test_status_lookup(
        self,
        async_client: AsyncClient,
        email: str,
        stripe_status: str,
        is_premium: bool,
    ) -> None:
        response = await async_client.get("/api/subscription-status", params={"email": email})

        check.equal(response.status_code, 200)
        check.equal(response.json(), {"stripeStatus": stripe_status, "isPremium": is_premium})

    @pytest.mark.parametrize("params", [{}, {"email": ""}])
    async def test_email_required(self, async_client: AsyncClient, params: dict) -> None:
        response = await async_client.get("/api/subscription-status", params=params)

        check.equal(response.status_code, 400)
        check.equal(response.json(), {"error": "Email is required"})
