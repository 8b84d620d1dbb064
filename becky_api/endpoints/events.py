"""Calendar event and appointment endpoints.

The backend names event times ``startDateTime``/``endDateTime`` while callers
use ``startTime``/``endTime``; outgoing payloads are renamed here and incoming
ones by the normalizer. Updates and deletes address the event through an
``id`` query parameter rather than a path segment.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from becky_api.endpoints.base import ResourceApi, path_id
from becky_api.models.requests import Endpoint, RequestConfig
from becky_api.models.responses import ApiResponse

# Client event fields -> backend event fields
_OUTGOING_FIELDS = {
    "startTime": "startDateTime",
    "endTime": "endDateTime",
}


class RecurringDeleteOption(str, Enum):
    """How much of a recurring series a delete removes."""

    THIS_ONLY = "this_only"
    THIS_AND_FOLLOWING = "this_and_following"
    ALL = "all"


def to_backend_event(data: dict[str, Any]) -> dict[str, Any]:
    """Rename ``startTime``/``endTime`` to the backend's field names.

    Empty values are left under their client names.
    """
    payload = dict(data)
    for source, target in _OUTGOING_FIELDS.items():
        if payload.get(source):
            payload[target] = payload.pop(source)
    return payload


def _event_id(event_id: str) -> str:
    if not event_id:
        raise ValueError("event id must not be empty")
    return event_id


class EventsApi(ResourceApi):
    async def get_events(
        self,
        *,
        client_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        source: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/events",
            {
                "clientId": client_id,
                "startDate": start_date,
                "endDate": end_date,
                "source": source,
                "page": page,
                "limit": limit,
            },
        )

    async def get_event(self, event_id: str) -> ApiResponse[Any]:
        return await self._client.get(f"/api/events/{path_id(event_id)}")

    async def create_event(self, data: dict[str, Any]) -> ApiResponse[Any]:
        payload = {
            key: value for key, value in data.items() if key not in _OUTGOING_FIELDS
        }
        payload["startDateTime"] = data.get("startTime")
        payload["endDateTime"] = data.get("endTime")
        # Events created from the app are always appointments
        payload["type"] = "appointment"
        return await self._client.post("/api/events", payload)

    async def update_event(self, event_id: str, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.put(
            Endpoint.of("/api/events", {"id": _event_id(event_id)}),
            to_backend_event(data),
        )

    async def delete_event(self, event_id: str) -> ApiResponse[Any]:
        return await self._client.delete(
            Endpoint.of("/api/events", {"id": _event_id(event_id)})
        )

    async def sync_events(self) -> ApiResponse[Any]:
        return await self._client.post("/api/events/sync")

    async def get_appointments(
        self,
        *,
        client_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/appointments",
            {
                "clientId": client_id,
                "startDate": start_date,
                "endDate": end_date,
                "page": page,
                "limit": limit,
            },
        )

    async def delete_recurring_events(
        self,
        event_id: str,
        option: RecurringDeleteOption | str,
        recurrence_group_id: str,
    ) -> ApiResponse[Any]:
        """Delete part or all of a recurring series.

        Returns the backend's ``{deletedCount, deletedIds}`` summary.

        Raises ``ValueError`` for an unknown ``option``.
        """
        option = RecurringDeleteOption(option)
        return await self._client.request(
            "/api/events/weekly-recurrence",
            RequestConfig(
                method="DELETE",
                body={
                    "eventId": event_id,
                    "option": option.value,
                    "recurrenceGroupId": recurrence_group_id,
                },
            ),
        )

    async def get_related_events(self, recurrence_group_id: str) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/events",
            {"source": "database", "recurrenceGroupId": recurrence_group_id},
        )
