"""Tutor configuration with environment variable loading.

Pydantic-based configuration for the tutoring agent.
Supports OpenAI (and OpenAI-compatible APIs via custom base URL),
Gemini, and Hugging Face inference.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI tutor. Provide clear, concise, and accurate responses. "
    "When answering follow-up questions, maintain context from previous messages."
)

Provider = Literal["openai", "gemini", "huggingface"]

# Provider-specific key variables consulted when LLM_API_KEY is unset
_PROVIDER_KEY_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "huggingface": "HF_TOKEN",
}


class TutorConfig(BaseModel):
    """Configuration for the tutoring agent.

    Attributes:
        provider: Which LLM backend to use.
        api_key: API key for model access.
        base_url: API base URL (None for the provider default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        system_prompt: Instruction prepended to every conversation.
        document_char_limit: Characters of attached document text forwarded.
    """

    # Env-derived defaults go through the same validators as explicit values
    model_config = ConfigDict(validate_default=True)

    provider: Provider = Field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "openai").lower(),
        description="LLM provider: openai, gemini or huggingface",
    )
    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", ""),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for provider default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-3.5-turbo"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=400,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    system_prompt: str = Field(
        default_factory=lambda: os.getenv("TUTOR_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
        description="System prompt prepended to every conversation",
    )
    document_char_limit: int = Field(
        default=4000,
        ge=1,
        description="Maximum characters of document text sent per attachment",
    )

    @model_validator(mode="before")
    @classmethod
    def fill_provider_api_key(cls, data: object) -> object:
        """Fall back to the provider's own key variable when no key is given."""
        if not isinstance(data, dict) or data.get("api_key"):
            return data
        if os.getenv("LLM_API_KEY"):
            return data
        provider = str(data.get("provider") or os.getenv("LLM_PROVIDER", "openai")).lower()
        env_var = _PROVIDER_KEY_VARS.get(provider)
        if env_var and os.getenv(env_var) and "api_key" not in data:
            return {**data, "api_key": os.getenv(env_var)}
        return data

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY (or the provider key) in .env"
            )
        return v.strip()


def get_tutor_config() -> TutorConfig:
    """Create tutor configuration from environment.

    Returns:
        Configured TutorConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return TutorConfig()
