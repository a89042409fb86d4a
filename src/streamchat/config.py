"""Process configuration.

Centralizes the environment variables read by the relay, the client and the
CLI. Values are read once at process start; `.env` files are honoured.
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .llm import LLMProvider, create_llm_provider
from .llm.providers.openai import DEFAULT_MODEL

logger = logging.getLogger(__name__)

RELAY_PATH = "/api/openai"


class Settings(BaseModel):
    """Settings for one streamchat process."""

    model_config = ConfigDict(frozen=True)

    openai_api_key: str | None = Field(default=None, repr=False)
    openai_model: str = DEFAULT_MODEL
    openai_base_url: str | None = None
    host: str = "127.0.0.1"
    port: int = 8000
    relay_url: str = "http://127.0.0.1:8000"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build settings from environment variables.

    Environment variables:
        OPENAI_API_KEY: Upstream credential (required for completions)
        OPENAI_CHAT_MODEL: Model identifier (default: gpt-4.1-nano)
        OPENAI_BASE_URL: Optional custom API base URL
        STREAMCHAT_HOST: Relay bind host (default: 127.0.0.1)
        STREAMCHAT_PORT: Relay bind port (default: 8000)
        STREAMCHAT_URL: Relay base URL used by clients (default: http://127.0.0.1:8000)
        STREAMCHAT_LOG_LEVEL: Log level (default: INFO)
    """
    load_dotenv()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_CHAT_MODEL", DEFAULT_MODEL),
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        host=os.getenv("STREAMCHAT_HOST", "127.0.0.1"),
        port=int(os.getenv("STREAMCHAT_PORT", "8000")),
        relay_url=os.getenv("STREAMCHAT_URL", "http://127.0.0.1:8000"),
        log_level=os.getenv("STREAMCHAT_LOG_LEVEL", "INFO"),
    )


def get_llm(settings: Settings) -> LLMProvider | None:
    """Create the upstream provider, or None if no credential is configured."""
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set, completions will fail")
        return None
    return create_llm_provider(
        "openai",
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
    )
