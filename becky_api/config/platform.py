"""Platform (application manifest) configuration loader.

The app manifest is a YAML file shaped like::

    extra:
      backendUrl: https://api.example.com
    packager:
      hostUri: 192.168.1.20:8081

Only the two values above are consulted by the client.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ExtraConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    backend_url: str | None = Field(default=None, alias="backendUrl")


class PackagerConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    host_uri: str | None = Field(default=None, alias="hostUri")


class PlatformConfig(BaseModel):
    """Subset of the application manifest used for base URL resolution."""

    model_config = ConfigDict(extra="ignore")

    extra: ExtraConfig = Field(default_factory=ExtraConfig)
    packager: PackagerConfig = Field(default_factory=PackagerConfig)

    @property
    def backend_url(self) -> str | None:
        return self.extra.backend_url

    @property
    def packager_host(self) -> str | None:
        """Host part of ``packager.hostUri`` (port stripped)."""
        if not self.packager.host_uri:
            return None
        host = self.packager.host_uri.split(":")[0].strip()
        return host or None


_EMPTY = PlatformConfig()


def load_platform_config(yaml_path: str | None) -> PlatformConfig:
    """Parse the app manifest YAML into a ``PlatformConfig``.

    A missing path, missing file, or malformed document yields an empty
    config so that resolution falls through to the next source.
    """
    if not yaml_path:
        return _EMPTY

    path = Path(yaml_path)
    if not path.exists():
        logger.warning("Platform config not found at %s, ignoring", yaml_path)
        return _EMPTY

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logger.error("Failed to parse platform config at %s: %s", yaml_path, exc)
        return _EMPTY

    if not isinstance(raw, dict):
        logger.warning("Platform config at %s is not a mapping, ignoring", yaml_path)
        return _EMPTY

    try:
        return PlatformConfig.model_validate(raw)
    except Exception as exc:
        logger.error("Invalid platform config at %s: %s", yaml_path, exc)
        return _EMPTY
