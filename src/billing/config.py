"""Billing API configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


class BillingConfig(BaseModel):
    """Configuration for the external subscription-status API.

    Attributes:
        api_url: Base URL of the billing API.
        timeout: Request timeout in seconds.
        free_message_limit: Messages a non-premium user may send.
    """

    model_config = ConfigDict(validate_default=True)

    api_url: str = Field(
        default_factory=lambda: os.getenv(
            "BILLING_API_URL", os.getenv("TUTORCHASE_API_URL", "http://localhost:3000")
        ),
        description="Billing API base URL",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("BILLING_TIMEOUT", "10")),
        gt=0,
        description="Billing request timeout in seconds",
    )
    free_message_limit: int = Field(
        default_factory=lambda: int(os.getenv("FREE_MESSAGE_LIMIT", "20")),
        ge=0,
        description="Messages allowed on the free tier",
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended."""
        return v.strip().rstrip("/")


def get_billing_config() -> BillingConfig:
    """Create billing configuration from environment."""
    return BillingConfig()
