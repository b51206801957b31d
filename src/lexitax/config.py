"""
Configuration management for the LexiTax client.

All settings can be configured via environment variables with the
LEXITAX_ prefix, e.g. LEXITAX_BASE_URL=https://api.lexitax.et/api.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lexitax.utils.logger import logger


class TitleStrategy(str, Enum):
    """How a conversation title is derived from user messages."""

    FIRST_MESSAGE = "first_message"
    LATEST_MESSAGE = "latest_message"


class LexiTaxSettings(BaseSettings):
    """Configuration for the LexiTax client using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="LEXITAX_"
    )

    # Backend
    base_url: str = Field(
        default="http://localhost:8000/api", description="LexiTax API base URL"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    # Credential store
    token_store_path: str | None = Field(
        default=None,
        description="JSON file holding the credential; in-memory when unset",
    )

    # Chat behavior
    guest_query_limit: int = Field(
        default=3, ge=0, description="Queries a guest may submit before signing in"
    )
    title_strategy: TitleStrategy = Field(
        default=TitleStrategy.FIRST_MESSAGE,
        description="Derive the title from the first message only, or from every message",
    )
    use_mock_responses: bool = Field(
        default=True,
        description="Answer queries from canned responses instead of the backend",
    )

    # Auth
    enforce_password_policy: bool = Field(
        default=True,
        description="Require 8+ characters, an uppercase letter and a digit on signup",
    )

    log_level: str = Field(default="WARNING", description="Log level for the lexitax logger")


_settings: LexiTaxSettings | None = None


def get_settings() -> LexiTaxSettings:
    """
    Get the global LexiTax settings instance.

    Returns:
        LexiTaxSettings: The global settings instance
    """
    global _settings
    if _settings is None:
        _settings = LexiTaxSettings()
        logger.info("LexiTaxSettings loaded", base_url=_settings.base_url)
    return _settings


def set_settings(settings: LexiTaxSettings | None) -> None:
    """
    Set (or reset, with None) the global LexiTax settings instance.

    Args:
        settings: The settings to set
    """
    global _settings
    _settings = settings
