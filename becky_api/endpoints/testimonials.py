"""Testimonial endpoints, including moderation and batch actions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from becky_api.endpoints.base import ResourceApi, path_id
from becky_api.models.responses import ApiResponse


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class TestimonialsApi(ResourceApi):
    __test__ = False  # not a pytest test class

    async def get_testimonials(
        self,
        *,
        client_id: str | None = None,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/testimonials",
            {"clientId": client_id, "status": status, "page": page, "limit": limit},
        )

    async def get_testimonial(self, testimonial_id: str) -> ApiResponse[Any]:
        return await self._client.get(f"/api/testimonials/{path_id(testimonial_id)}")

    async def create_testimonial(self, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.post("/api/testimonials", data)

    async def update_testimonial(
        self, testimonial_id: str, updates: dict[str, Any]
    ) -> ApiResponse[Any]:
        return await self._client.patch(
            f"/api/testimonials/{path_id(testimonial_id)}", updates
        )

    async def delete_testimonial(self, testimonial_id: str) -> ApiResponse[Any]:
        return await self._client.delete(f"/api/testimonials/{path_id(testimonial_id)}")

    async def send_testimonial_request(self, data: dict[str, Any]) -> ApiResponse[Any]:
        # Sends an email/SMS; never retried.
        return await self._client.post("/api/testimonials/send-request", data, retry=False)

    async def approve_testimonial(self, testimonial_id: str) -> ApiResponse[Any]:
        return await self.update_testimonial(
            testimonial_id, {"status": "APPROVED", "approvedAt": _now_iso()}
        )

    async def reject_testimonial(
        self, testimonial_id: str, reason: str | None = None
    ) -> ApiResponse[Any]:
        updates: dict[str, Any] = {"status": "REJECTED"}
        if reason:
            updates["rejectionReason"] = reason
        return await self.update_testimonial(testimonial_id, updates)

    async def batch_approve(self, testimonial_ids: list[str]) -> ApiResponse[Any]:
        return await self._batch("approve", testimonial_ids)

    async def batch_reject(
        self, testimonial_ids: list[str], reason: str | None = None
    ) -> ApiResponse[Any]:
        return await self._batch("reject", testimonial_ids, reason=reason)

    async def batch_delete(self, testimonial_ids: list[str]) -> ApiResponse[Any]:
        return await self._batch("delete", testimonial_ids)

    async def _batch(
        self, action: str, testimonial_ids: list[str], reason: str | None = None
    ) -> ApiResponse[Any]:
        payload: dict[str, Any] = {"action": action, "ids": list(testimonial_ids)}
        if reason:
            payload["reason"] = reason
        return await self._client.post("/api/testimonials/batch", payload)
