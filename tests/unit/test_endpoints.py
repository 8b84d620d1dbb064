"""Unit tests for the resource endpoint groups."""

from __future__ import annotations

import json
from collections.abc import Callable
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from becky_api.client import APIClient
from becky_api.endpoints import (
    ClientsApi,
    ConversationsApi,
    EventsApi,
    GoalsApi,
    RecurringDeleteOption,
    TestimonialsApi,
)
from becky_api.endpoints.base import path_id


class Recorder:
    """MockTransport handler that records requests and answers with one response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._response = response or httpx.Response(200, json={"success": True, "data": {}})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def api_client(make_client: Callable[..., APIClient], recorder: Recorder) -> APIClient:
    return make_client(recorder)


def test_path_id_encodes() -> None:
    assert path_id("a/b c") == "a%2Fb%20c"
    with pytest.raises(ValueError):
        path_id("")


class TestClientsApi:
    @pytest.mark.asyncio
    async def test_list_with_filters(self, api_client: APIClient, recorder: Recorder) -> None:
        await ClientsApi(api_client).get_clients(page=1, limit=20, service_type="coaching")

        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/api/clients"
        params = recorder.last.url.params
        assert params["page"] == "1"
        assert params["limit"] == "20"
        assert params["serviceType"] == "coaching"
        assert "status" not in params

    @pytest.mark.asyncio
    async def test_crud(self, api_client: APIClient, recorder: Recorder) -> None:
        api = ClientsApi(api_client)
        assert api.client is api_client

        await api.get_client("c1")
        assert (recorder.last.method, recorder.last.url.path) == ("GET", "/api/clients/c1")

        await api.create_client({"name": "Ada"})
        assert recorder.last.method == "POST"
        assert recorder.last_json() == {"name": "Ada"}

        await api.update_client("c1", {"status": "active"})
        assert (recorder.last.method, recorder.last.url.path) == ("PATCH", "/api/clients/c1")

        await api.delete_client("c1")
        assert recorder.last.method == "DELETE"

        await api.get_client_services("c1")
        assert recorder.last.url.path == "/api/clients/c1/services"

        await api.get_client_billing("c1")
        assert recorder.last.url.path == "/api/clients/c1/billing"


class TestConversationsApi:
    @pytest.mark.asyncio
    async def test_filters_use_camel_case(self, api_client: APIClient, recorder: Recorder) -> None:
        await ConversationsApi(api_client).get_conversations(client_id="c1", status="open")
        assert recorder.last.url.params["clientId"] == "c1"
        assert recorder.last.url.params["status"] == "open"

    @pytest.mark.asyncio
    async def test_messages(self, api_client: APIClient, recorder: Recorder) -> None:
        api = ConversationsApi(api_client)

        await api.get_messages("conv1", page=2)
        assert recorder.last.url.path == "/api/conversations/conv1/messages"
        assert recorder.last.url.params["page"] == "2"

        await api.send_message("conv1", {"content": "hello"})
        assert recorder.last.method == "POST"
        assert recorder.last_json() == {"content": "hello"}

    @pytest.mark.asyncio
    async def test_send_message_is_never_retried(self, make_client: Callable[..., APIClient]) -> None:
        recorder = Recorder(httpx.Response(503))
        api = ConversationsApi(make_client(recorder))

        with patch("asyncio.sleep", new_callable=AsyncMock):
            result = await api.send_message("conv1", {"content": "hello"})

        assert result.success is False
        assert len(recorder.requests) == 1


class TestGoalsApi:
    @pytest.mark.asyncio
    async def test_goal_update_uses_put(self, api_client: APIClient, recorder: Recorder) -> None:
        await GoalsApi(api_client).update_goal("g1", {"progress": 50})
        assert (recorder.last.method, recorder.last.url.path) == ("PUT", "/api/goals/g1")

    @pytest.mark.asyncio
    async def test_milestones(self, api_client: APIClient, recorder: Recorder) -> None:
        api = GoalsApi(api_client)

        await api.get_milestones("g1")
        assert recorder.last.url.path == "/api/goals/g1/milestones"

        await api.get_milestones()
        assert recorder.last.url.path == "/api/milestones"

        await api.create_milestone("g1", {"title": "First session"})
        assert (recorder.last.method, recorder.last.url.path) == ("POST", "/api/goals/g1/milestones")

        await api.update_milestone("m1", {"completed": True})
        assert (recorder.last.method, recorder.last.url.path) == ("PUT", "/api/milestones/m1")

        await api.delete_milestone("m1")
        assert recorder.last.method == "DELETE"


class TestEventsApi:
    @pytest.mark.asyncio
    async def test_list_with_filters(self, api_client: APIClient, recorder: Recorder) -> None:
        await EventsApi(api_client).get_events(
            client_id="c1", start_date="2024-01-01", source="database"
        )

        assert (recorder.last.method, recorder.last.url.path) == ("GET", "/api/events")
        params = recorder.last.url.params
        assert params["clientId"] == "c1"
        assert params["startDate"] == "2024-01-01"
        assert params["source"] == "database"
        assert "endDate" not in params

    @pytest.mark.asyncio
    async def test_listed_events_use_client_field_names(
        self, make_client: Callable[..., APIClient]
    ) -> None:
        recorder = Recorder(
            httpx.Response(
                200,
                json={
                    "success": True,
                    "events": [{"id": "e1", "startDateTime": "t0", "endDateTime": "t1"}],
                    "total": 1,
                },
            )
        )

        result = await EventsApi(make_client(recorder)).get_events()

        assert result.data == [{"id": "e1", "startTime": "t0", "endTime": "t1"}]
        assert result.total == 1

    @pytest.mark.asyncio
    async def test_get_event(self, api_client: APIClient, recorder: Recorder) -> None:
        await EventsApi(api_client).get_event("e 1")
        assert recorder.last.url.raw_path == b"/api/events/e%201"

    @pytest.mark.asyncio
    async def test_create_maps_times_and_type(
        self, api_client: APIClient, recorder: Recorder
    ) -> None:
        await EventsApi(api_client).create_event(
            {
                "title": "Client Meeting",
                "startTime": "2024-01-15T10:00:00Z",
                "endTime": "2024-01-15T11:00:00Z",
                "clientId": "abc123",
                "type": "reminder",
            }
        )

        assert (recorder.last.method, recorder.last.url.path) == ("POST", "/api/events")
        assert recorder.last_json() == {
            "title": "Client Meeting",
            "startDateTime": "2024-01-15T10:00:00Z",
            "endDateTime": "2024-01-15T11:00:00Z",
            "clientId": "abc123",
            "type": "appointment",
        }

    @pytest.mark.asyncio
    async def test_update_uses_id_query(self, api_client: APIClient, recorder: Recorder) -> None:
        await EventsApi(api_client).update_event("e1", {"startTime": "t0", "title": "Moved"})

        assert (recorder.last.method, recorder.last.url.path) == ("PUT", "/api/events")
        assert recorder.last.url.params["id"] == "e1"
        assert recorder.last_json() == {"startDateTime": "t0", "title": "Moved"}

    @pytest.mark.asyncio
    async def test_delete_uses_id_query(self, api_client: APIClient, recorder: Recorder) -> None:
        await EventsApi(api_client).delete_event("e&1")

        assert (recorder.last.method, recorder.last.url.path) == ("DELETE", "/api/events")
        assert recorder.last.url.params["id"] == "e&1"

    @pytest.mark.asyncio
    async def test_empty_event_id_rejected(self, api_client: APIClient) -> None:
        with pytest.raises(ValueError):
            await EventsApi(api_client).delete_event("")

    @pytest.mark.asyncio
    async def test_sync_and_appointments(self, api_client: APIClient, recorder: Recorder) -> None:
        api = EventsApi(api_client)

        await api.sync_events()
        assert (recorder.last.method, recorder.last.url.path) == ("POST", "/api/events/sync")

        await api.get_appointments(client_id="c1", limit=5)
        assert recorder.last.url.path == "/api/appointments"
        assert recorder.last.url.params["clientId"] == "c1"
        assert recorder.last.url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_delete_recurring_sends_body(
        self, api_client: APIClient, recorder: Recorder
    ) -> None:
        await EventsApi(api_client).delete_recurring_events(
            "e1", RecurringDeleteOption.THIS_AND_FOLLOWING, "grp1"
        )

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/api/events/weekly-recurrence"
        assert recorder.last_json() == {
            "eventId": "e1",
            "option": "this_and_following",
            "recurrenceGroupId": "grp1",
        }

    @pytest.mark.asyncio
    async def test_delete_recurring_rejects_unknown_option(self, api_client: APIClient) -> None:
        with pytest.raises(ValueError):
            await EventsApi(api_client).delete_recurring_events("e1", "everything", "grp1")

    @pytest.mark.asyncio
    async def test_related_events(self, api_client: APIClient, recorder: Recorder) -> None:
        await EventsApi(api_client).get_related_events("grp1")

        assert recorder.last.url.path == "/api/events"
        assert recorder.last.url.params["source"] == "database"
        assert recorder.last.url.params["recurrenceGroupId"] == "grp1"


class TestTestimonialsApi:
    @pytest.mark.asyncio
    async def test_approve(self, api_client: APIClient, recorder: Recorder) -> None:
        await TestimonialsApi(api_client).approve_testimonial("t1")

        assert (recorder.last.method, recorder.last.url.path) == ("PATCH", "/api/testimonials/t1")
        body = recorder.last_json()
        assert body["status"] == "APPROVED"
        assert "approvedAt" in body

    @pytest.mark.asyncio
    async def test_reject_with_reason(self, api_client: APIClient, recorder: Recorder) -> None:
        await TestimonialsApi(api_client).reject_testimonial("t1", reason="off topic")
        assert recorder.last_json() == {"status": "REJECTED", "rejectionReason": "off topic"}

    @pytest.mark.asyncio
    async def test_batch_actions(self, api_client: APIClient, recorder: Recorder) -> None:
        api = TestimonialsApi(api_client)

        await api.batch_approve(["t1", "t2"])
        assert recorder.last.url.path == "/api/testimonials/batch"
        assert recorder.last_json() == {"action": "approve", "ids": ["t1", "t2"]}

        await api.batch_reject(["t3"], reason="spam")
        assert recorder.last_json() == {"action": "reject", "ids": ["t3"], "reason": "spam"}

        await api.batch_delete(["t4"])
        assert recorder.last_json() == {"action": "delete", "ids": ["t4"]}

    @pytest.mark.asyncio
    async def test_send_request(self, api_client: APIClient, recorder: Recorder) -> None:
        await TestimonialsApi(api_client).send_testimonial_request({"clientId": "c1"})
        assert recorder.last.url.path == "/api/testimonials/send-request"
