"""Subscription-status lookup against the external billing API.

Any failure (network error, non-2xx status, unreadable body) is treated as
the FREE tier so that billing outages never block chatting.
"""

import logging

import httpx

from src.billing.config import BillingConfig, get_billing_config
from src.models.schemas import SubscriptionStatus, SubscriptionTier

logger = logging.getLogger(__name__)

PREMIUM_TIERS = frozenset({SubscriptionTier.TRIAL.value, SubscriptionTier.PAID.value})

STATUS_PATH = "/api/users/subscription-status"


def is_premium_status(stripe_status: str | None) -> bool:
    """Map a billing status to the premium flag.

    TRIAL and PAID are premium; every other value, including None, is not.
    """
    return stripe_status in PREMIUM_TIERS


def free_status() -> SubscriptionStatus:
    return SubscriptionStatus(stripe_status=SubscriptionTier.FREE.value, is_premium=False)


class BillingClient:
    """Async client for the billing API's subscription-status endpoint."""

    def __init__(
        self,
        config: BillingConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the billing client.

        Args:
            config: Optional billing configuration. Loads from environment
                    if not provided.
            transport: Optional httpx transport (used to stub the API).
        """
        self._config = config or get_billing_config()
        self._transport = transport

    @property
    def config(self) -> BillingConfig:
        return self._config

    async def get_subscription_status(self, email: str) -> SubscriptionStatus:
        """Look up a user's subscription status by email.

        Args:
            email: The user's email address.

        Returns:
            SubscriptionStatus; FREE on any failure or missing status.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._config.api_url,
                timeout=self._config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    STATUS_PATH,
                    params={"email": email},
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Billing API returned {e.response.status_code} for {email}, treating as FREE"
            )
            return free_status()
        except (httpx.RequestError, ValueError) as e:
            logger.warning(f"Billing lookup failed for {email}, treating as FREE: {e}")
            return free_status()

        stripe_status = payload.get("stripeStatus") if isinstance(payload, dict) else None
        if not isinstance(stripe_status, str) or not stripe_status:
            stripe_status = SubscriptionTier.FREE.value

        return SubscriptionStatus(
            stripe_status=stripe_status,
            is_premium=is_premium_status(stripe_status),
        )


# Module-level singleton instance
_billing_client: BillingClient | None = None


def get_billing_client() -> BillingClient:
    """Get or create the global billing client."""
    global _billing_client
    if _billing_client is None:
        _billing_client = BillingClient()
    return _billing_client
