"""Sign-in and subscription-status endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.auth.service import authenticate
from src.billing.client import BillingClient, get_billing_client
from src.models.schemas import ErrorResponse, SignInRequest, SubscriptionStatus, UserSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/auth/signin",
    response_model=UserSession,
    responses={401: {"model": ErrorResponse}},
)
async def sign_in(
    credentials: SignInRequest,
    billing: BillingClient = Depends(get_billing_client),
) -> UserSession | JSONResponse:
    """Sign in with any non-empty email/password pair.

    Returns:
        UserSession decorated with the user's subscription status.

    Raises:
        401: Email or password missing.
    """
    user = await authenticate(credentials.email, credentials.password, billing)
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=ErrorResponse(error="Invalid credentials").model_dump(),
        )
    return user


@router.get(
    "/subscription-status",
    response_model=SubscriptionStatus,
    responses={400: {"model": ErrorResponse}},
)
async def subscription_status(
    email: str | None = None,
    billing: BillingClient = Depends(get_billing_client),
) -> SubscriptionStatus | JSONResponse:
    """Look up a user's subscription status.

    Args:
        email: The user's email address (query parameter).

    Returns:
        SubscriptionStatus; FREE whenever the billing API cannot answer.

    Raises:
        400: Email missing.
    """
    if not email or not email.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Email is required").model_dump(),
        )
    return await billing.get_subscription_status(email.strip())
