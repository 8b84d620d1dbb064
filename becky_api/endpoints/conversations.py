"""Conversation and message endpoints."""

from __future__ import annotations

from typing import Any

from becky_api.endpoints.base import ResourceApi, path_id
from becky_api.models.responses import ApiResponse


class ConversationsApi(ResourceApi):
    async def get_conversations(
        self,
        *,
        client_id: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/conversations",
            {
                "clientId": client_id,
                "status": status,
                "priority": priority,
                "search": search,
                "page": page,
                "limit": limit,
            },
        )

    async def get_conversation(self, conversation_id: str) -> ApiResponse[Any]:
        return await self._client.get(f"/api/conversations/{path_id(conversation_id)}")

    async def create_conversation(self, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.post("/api/conversations", data)

    async def update_conversation(
        self, conversation_id: str, data: dict[str, Any]
    ) -> ApiResponse[Any]:
        return await self._client.patch(
            f"/api/conversations/{path_id(conversation_id)}", data
        )

    async def delete_conversation(self, conversation_id: str) -> ApiResponse[Any]:
        return await self._client.delete(f"/api/conversations/{path_id(conversation_id)}")

    async def get_messages(
        self,
        conversation_id: str,
        *,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            f"/api/conversations/{path_id(conversation_id)}/messages",
            {"page": page, "limit": limit},
        )

    async def send_message(
        self, conversation_id: str, data: dict[str, Any]
    ) -> ApiResponse[Any]:
        # Sending is not idempotent: a retried POST may deliver the message twice.
        return await self._client.post(
            f"/api/conversations/{path_id(conversation_id)}/messages",
            data,
            retry=False,
        )
