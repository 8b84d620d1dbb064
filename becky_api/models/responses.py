"""Canonical API response envelope.

Every call resolves to this shape regardless of what the server returned:
{ success: bool, data: T | None, error: str | None, total, page, limit }
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, model_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Canonical envelope seen by every caller.

    ``success`` is true exactly when ``data`` is present and ``error`` absent;
    ``success`` is false exactly when ``error`` is present.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    total: int | None = None
    page: int | None = None
    limit: int | None = None

    @model_validator(mode="after")
    def _check_envelope(self) -> ApiResponse[T]:
        if self.success:
            if self.data is None:
                raise ValueError("successful response must carry data")
            if self.error is not None:
                raise ValueError("successful response must not carry an error")
        else:
            if not self.error:
                raise ValueError("failed response must carry an error")
            if self.data is not None:
                raise ValueError("failed response must not carry data")
        return self

    @classmethod
    def ok(
        cls,
        data: Any,
        total: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResponse[Any]:
        return cls(success=True, data=data, total=total, page=page, limit=limit)

    @classmethod
    def fail(cls, error: str) -> ApiResponse[Any]:
        return cls(success=False, error=error)
