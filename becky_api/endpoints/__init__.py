"""Resource endpoint groups built on ``APIClient``."""

from becky_api.endpoints.clients import ClientsApi
from becky_api.endpoints.conversations import ConversationsApi
from becky_api.endpoints.events import EventsApi, RecurringDeleteOption
from becky_api.endpoints.goals import GoalsApi
from becky_api.endpoints.testimonials import TestimonialsApi

__all__ = [
    "ClientsApi",
    "ConversationsApi",
    "EventsApi",
    "GoalsApi",
    "RecurringDeleteOption",
    "TestimonialsApi",
]
