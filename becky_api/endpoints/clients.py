"""Client (CRM contact) endpoints."""

from __future__ import annotations

from typing import Any

from becky_api.endpoints.base import ResourceApi, path_id
from becky_api.models.responses import ApiResponse


class ClientsApi(ResourceApi):
    async def get_clients(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        status: str | None = None,
        search: str | None = None,
        service_type: str | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/clients",
            {
                "page": page,
                "limit": limit,
                "status": status,
                "search": search,
                "serviceType": service_type,
            },
        )

    async def get_client(self, client_id: str) -> ApiResponse[Any]:
        return await self._client.get(f"/api/clients/{path_id(client_id)}")

    async def create_client(self, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.post("/api/clients", data)

    async def update_client(self, client_id: str, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.patch(f"/api/clients/{path_id(client_id)}", data)

    async def delete_client(self, client_id: str) -> ApiResponse[Any]:
        return await self._client.delete(f"/api/clients/{path_id(client_id)}")

    async def get_client_services(self, client_id: str) -> ApiResponse[Any]:
        return await self._client.get(f"/api/clients/{path_id(client_id)}/services")

    async def get_client_billing(self, client_id: str) -> ApiResponse[Any]:
        return await self._client.get(f"/api/clients/{path_id(client_id)}/billing")
