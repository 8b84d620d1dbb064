"""Bearer token injection.

Reads the stored auth token and sets ``Authorization: Bearer <token>`` on the
outgoing request. If the token is absent, the store cannot be read, or the
call opted out with ``skip_auth``, the request goes out unchanged and the
server decides whether it needs auth.

SECURITY: Never logs the token value.
"""

from __future__ import annotations

import logging

from becky_api.integration.credential_store import CredentialStore
from becky_api.models.requests import RequestConfig

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"


class AuthInterceptor:
    """Request interceptor that injects the stored bearer token.

    Args:
        store: Read-only credential store.
        token_key: Key the token is stored under (default ``auth_token``).
    """

    def __init__(self, store: CredentialStore, token_key: str = "auth_token") -> None:
        self._store = store
        self._token_key = token_key

    async def __call__(self, url: str, config: RequestConfig) -> tuple[str, RequestConfig]:
        if config.skip_auth:
            return url, config

        try:
            token = await self._store.get_item(self._token_key)
        except Exception as exc:
            logger.warning(
                "Failed to read auth token from credential store: %s",
                type(exc).__name__,
            )
            return url, config

        if not token:
            logger.debug("No auth token stored, sending request without Authorization")
            return url, config

        updated = config.copy()
        updated.headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
        return url, updated
