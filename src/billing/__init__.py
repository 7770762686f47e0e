"""Subscription status and free-tier gating.

Queries the external billing API and maps its status to a premium flag.
"""

from src.billing.client import (
    BillingClient,
    get_billing_client,
    is_premium_status,
)
from src.billing.config import BillingConfig, get_billing_config
from src.billing.limits import has_reached_limit, limit_message, remaining_messages

__all__ = [
    "BillingClient",
    "BillingConfig",
    "get_billing_client",
    "get_billing_config",
    "has_reached_limit",
    "is_premium_status",
    "limit_message",
    "remaining_messages",
]
