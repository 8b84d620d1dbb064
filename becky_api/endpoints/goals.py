"""Goal and milestone endpoints."""

from __future__ import annotations

from typing import Any

from becky_api.endpoints.base import ResourceApi, path_id
from becky_api.models.responses import ApiResponse


class GoalsApi(ResourceApi):
    async def get_goals(
        self,
        *,
        client_id: str | None = None,
        status: str | None = None,
        category: str | None = None,
        priority: str | None = None,
    ) -> ApiResponse[Any]:
        return await self._client.get(
            "/api/goals",
            {
                "clientId": client_id,
                "status": status,
                "category": category,
                "priority": priority,
            },
        )

    async def create_goal(self, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.post("/api/goals", data)

    async def update_goal(self, goal_id: str, updates: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.put(f"/api/goals/{path_id(goal_id)}", updates)

    async def delete_goal(self, goal_id: str) -> ApiResponse[Any]:
        return await self._client.delete(f"/api/goals/{path_id(goal_id)}")

    async def get_milestones(self, goal_id: str | None = None) -> ApiResponse[Any]:
        if goal_id:
            return await self._client.get(f"/api/goals/{path_id(goal_id)}/milestones")
        return await self._client.get("/api/milestones")

    async def create_milestone(self, goal_id: str, data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._client.post(f"/api/goals/{path_id(goal_id)}/milestones", data)

    async def update_milestone(
        self, milestone_id: str, updates: dict[str, Any]
    ) -> ApiResponse[Any]:
        return await self._client.put(f"/api/milestones/{path_id(milestone_id)}", updates)

    async def delete_milestone(self, milestone_id: str) -> ApiResponse[Any]:
        return await self._client.delete(f"/api/milestones/{path_id(milestone_id)}")
