"""Query and mutation state holders for UI consumers.

``Query`` mirrors a fetch-on-demand data source with ``data``, ``loading``,
``error`` and ``refetch()``; ``Mutation`` is triggered manually through
``mutate(variables)``. Both consume ``ApiResponse`` values only and never
see exceptions for expected failures, since ``APIClient`` does not raise them.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from becky_api.errors import ErrorKind, user_message_for
from becky_api.models.responses import ApiResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")

_FETCH_FAILED = "Failed to fetch data"
_MUTATION_FAILED = "Mutation failed"


class Query(Generic[T]):
    """Re-runnable read operation.

    Args:
        fetcher: Zero-argument coroutine function returning an ``ApiResponse``.
    """

    def __init__(self, fetcher: Callable[[], Awaitable[ApiResponse[T]]]) -> None:
        self._fetcher = fetcher
        self.data: T | None = None
        self.error: str | None = None
        self.loading = False

    async def refetch(self) -> ApiResponse[T]:
        """Run the fetcher and update ``data``/``error``."""
        self.loading = True
        self.error = None
        try:
            response = await self._fetcher()
        except Exception:
            logger.exception("Query fetcher raised")
            response = ApiResponse.fail(user_message_for(ErrorKind.UNKNOWN_ERROR))
        finally:
            self.loading = False

        if response.success:
            self.data = response.data
        else:
            self.data = None
            self.error = response.error or _FETCH_FAILED
        return response

    def snapshot(self) -> dict[str, Any]:
        return {"data": self.data, "loading": self.loading, "error": self.error}


class Mutation(Generic[V, T]):
    """Manually triggered write operation.

    Args:
        mutation_fn: Coroutine function taking the mutation variables.
    """

    def __init__(self, mutation_fn: Callable[[V], Awaitable[ApiResponse[T]]]) -> None:
        self._mutation_fn = mutation_fn
        self.data: T | None = None
        self.error: str | None = None
        self.loading = False

    async def mutate(self, variables: V) -> ApiResponse[T]:
        self.loading = True
        self.error = None
        try:
            response = await self._mutation_fn(variables)
        except Exception:
            logger.exception("Mutation function raised")
            response = ApiResponse.fail(user_message_for(ErrorKind.UNKNOWN_ERROR))
        finally:
            self.loading = False

        if response.success:
            self.data = response.data
        else:
            self.error = response.error or _MUTATION_FAILED
        return response

    def snapshot(self) -> dict[str, Any]:
        return {"data": self.data, "loading": self.loading, "error": self.error}
