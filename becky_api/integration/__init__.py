"""Integration with stores owned by the surrounding application."""

from becky_api.integration.credential_store import (
    CredentialStore,
    InMemoryCredentialStore,
    JsonFileCredentialStore,
)

__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "JsonFileCredentialStore",
]
