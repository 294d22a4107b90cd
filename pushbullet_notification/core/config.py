"""
Pushbullet notification — Configuration settings.

Loads from environment variables with sensible defaults.
"""

from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Pushbullet access token. Leave empty to disable delivery entirely.
    # Create one at https://www.pushbullet.com/#settings/account
    pushbullet_api_key: Optional[str] = None

    # Provider endpoint. Only overridden in tests or behind an egress proxy.
    pushbullet_api_url: str = "https://api.pushbullet.com/v2/pushes"

    # Seconds to wait for the provider before classifying the attempt
    pushbullet_timeout: float = 10.0

    # Upper bound on concurrent deliveries when a batch is dispatched
    pushbullet_max_workers: int = 4

    # Connect errors and timeouts count as RETRYABLE_ERROR when true,
    # FATAL when false.
    pushbullet_retry_transport_errors: bool = True

    # Preference key prefix for this channel, e.g. "Pushbullet.DiscussionComment"
    pushbullet_channel: str = "Pushbullet"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
