"""Configuration: settings, platform config and base URL resolution."""

from becky_api.config.platform import PlatformConfig, load_platform_config
from becky_api.config.resolver import ClientConfig, ConfigResolver
from becky_api.config.settings import DEFAULT_PRODUCTION_URL, ClientSettings

__all__ = [
    "ClientConfig",
    "ClientSettings",
    "ConfigResolver",
    "DEFAULT_PRODUCTION_URL",
    "PlatformConfig",
    "load_platform_config",
]
