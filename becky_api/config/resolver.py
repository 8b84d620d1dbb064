"""Base URL resolution.

The base URL is resolved exactly once per resolver from an ordered source
chain; the first non-empty value wins:

1. ``BECKY_API_URL`` (explicit override)
2. ``extra.backendUrl`` from the platform config file
3. ``http://{host}:{port}`` dev server, only when ``development`` is set
4. ``production_url`` fallback

Re-resolution is not supported: the base URL cannot change mid-process.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from becky_api.config.platform import load_platform_config
from becky_api.config.settings import ClientSettings
from becky_api.errors import ConfigurationError
from becky_api.models.requests import Endpoint
from becky_api.resilience.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = ("localhost", "127.0.0.1")


@dataclass(frozen=True)
class ClientConfig:
    """Resolved, immutable client configuration."""

    base_url: str
    timeout_seconds: float
    retry_max_attempts: int
    retry_initial_delay: float
    retry_max_delay: float
    retry_jitter_ratio: float

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            initial_delay=self.retry_initial_delay,
            max_delay=self.retry_max_delay,
            jitter_ratio=self.retry_jitter_ratio,
        )


def _clean(url: str | None) -> str | None:
    if url is None:
        return None
    url = url.strip().rstrip("/")
    return url or None


class ConfigResolver:
    """Resolves and memoizes the service base URL.

    Args:
        settings: Client settings supplying the override, platform config path,
            development flag and production fallback.
    """

    def __init__(self, settings: ClientSettings) -> None:
        self._settings = settings
        self._lock = threading.Lock()
        self._base_url: str | None = None
        self._source: str | None = None
        self._client_config: ClientConfig | None = None

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def source(self) -> str | None:
        """Name of the source that produced the base URL, once resolved."""
        return self._source

    def resolve_base_url(self) -> str:
        """Return the base URL, resolving it on first use.

        Raises
        ------
        ConfigurationError
            If no source yields a value.
        """
        if self._base_url is not None:
            return self._base_url

        with self._lock:
            if self._base_url is None:
                source, url = self._resolve()
                self._source = source
                self._base_url = url
                logger.info("Resolved API base URL from %s: %s", source, url)
        return self._base_url

    def _resolve(self) -> tuple[str, str]:
        settings = self._settings

        env_url = _clean(settings.api_url)
        if env_url:
            return "environment", env_url

        platform = load_platform_config(settings.app_config_path)
        platform_url = _clean(platform.backend_url)
        if platform_url:
            return "platform", platform_url

        if settings.development:
            host = (settings.dev_server_host or "").strip() or platform.packager_host
            if host:
                return "development", f"http://{host}:{settings.dev_server_port}"
            logger.debug("Development flag set but no dev server host available")

        fallback = _clean(settings.production_url)
        if fallback:
            return "fallback", fallback

        raise ConfigurationError(
            "Unable to resolve API base URL: no override, platform config, "
            "dev server or production fallback configured"
        )

    def build_url(self, endpoint: str | Endpoint) -> str:
        """Join the base URL with an endpoint path (exactly one leading slash)."""
        target = endpoint.target if isinstance(endpoint, Endpoint) else endpoint
        path = "/" + target.lstrip("/")
        return f"{self.resolve_base_url()}{path}"

    def client_config(self) -> ClientConfig:
        """Return the resolved ``ClientConfig`` (memoized)."""
        if self._client_config is None:
            settings = self._settings
            self._client_config = ClientConfig(
                base_url=self.resolve_base_url(),
                timeout_seconds=settings.timeout_seconds,
                retry_max_attempts=settings.retry_max_attempts,
                retry_initial_delay=settings.retry_initial_delay,
                retry_max_delay=settings.retry_max_delay,
                retry_jitter_ratio=settings.retry_jitter_ratio,
            )
        return self._client_config

    def is_development(self) -> bool:
        base = self.resolve_base_url()
        return any(host in base for host in _LOCAL_HOSTS) or self._source == "development"

    def is_production(self) -> bool:
        production = _clean(self._settings.production_url)
        return production is not None and self.resolve_base_url() == production
