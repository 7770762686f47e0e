"""Demo-grade credential sign-in.

Any non-empty email/password pair is accepted. The resulting session is
decorated with the user's subscription status from the billing API.
"""

import logging
import uuid

from src.billing.client import BillingClient
from src.models.schemas import UserSession

logger = logging.getLogger(__name__)


def user_id_for(email: str) -> str:
    """Stable user id derived from the email address."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"mailto:{email.lower()}"))


def display_name(email: str) -> str:
    """Use the part before ``@`` as the display name."""
    return email.split("@", 1)[0] or email


async def authenticate(
    email: str | None, password: str | None, billing: BillingClient
) -> UserSession | None:
    """Sign a user in.

    Args:
        email: Email address entered by the user.
        password: Password entered by the user (not verified).
        billing: Client used to look up the subscription status.

    Returns:
        The user session, or None when either credential is empty.
    """
    email = (email or "").strip()
    if not email or not (password or "").strip():
        logger.info("Sign-in rejected: missing credentials")
        return None

    status = await billing.get_subscription_status(email)
    logger.info(f"Signed in {email} ({status.stripe_status})")

    return UserSession(
        id=user_id_for(email),
        email=email,
        name=display_name(email),
        is_premium=status.is_premium,
        stripe_status=status.stripe_status,
    )
