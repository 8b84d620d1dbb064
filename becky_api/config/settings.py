"""Pydantic Settings for the API client.

All environment variables use the BECKY_ prefix.
Example: BECKY_API_URL=https://staging.example.com, BECKY_DEBUG=true
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_PRODUCTION_URL = "https://www.evangelosommer.com"


class ClientSettings(BaseSettings):
    """API client configuration validated from environment variables."""

    # Base URL sources, in resolution order
    api_url: str | None = None  # explicit override
    app_config_path: str | None = None  # platform config (YAML)
    development: bool = False
    dev_server_host: str | None = None
    dev_server_port: int = Field(default=3000, ge=1, le=65535)
    production_url: str | None = DEFAULT_PRODUCTION_URL

    # Dispatch
    timeout_seconds: float = Field(default=30.0, gt=0)

    # Retry policy
    retry_max_attempts: int = Field(default=3, le=10)
    retry_initial_delay: float = Field(default=1.0, ge=0)
    retry_max_delay: float = Field(default=10.0, ge=0)
    retry_jitter_ratio: float = Field(default=0.3, ge=0, le=1)

    # Credential store
    auth_token_key: str = "auth_token"
    credential_store_path: str | None = None

    # Diagnostics
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_prefix": "BECKY_"}
