"""Free-tier message limit gating."""

from src.models.schemas import SubscriptionTier

_STATUS_MESSAGES: dict[str, str] = {
    SubscriptionTier.CANCELLED.value: (
        "Your subscription has been cancelled. "
        "Reactivate to continue with unlimited AI chat."
    ),
    SubscriptionTier.NOT_PAID.value: "Payment is required to continue with unlimited AI chat.",
}

_DEFAULT_MESSAGE = (
    "Upgrade to Premium for unlimited AI chat and get answers to all your study questions."
)


def has_reached_limit(message_count: int, is_premium: bool, limit: int) -> bool:
    """Return True once a non-premium user has used up their messages."""
    if is_premium:
        return False
    return message_count >= limit


def remaining_messages(message_count: int, is_premium: bool, limit: int) -> int | None:
    """Messages left on the free tier, or None for premium users."""
    if is_premium:
        return None
    return max(limit - message_count, 0)


def limit_message(stripe_status: str | None) -> str:
    """Banner text shown when the free-tier limit is reached."""
    return _STATUS_MESSAGES.get(stripe_status or "", _DEFAULT_MESSAGE)
