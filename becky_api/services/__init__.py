"""Consumer-facing state holders built on ``APIClient`` responses."""

from becky_api.services.query import Mutation, Query

__all__ = ["Mutation", "Query"]
