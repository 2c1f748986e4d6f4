from queues.handlers.views import (
    EventDashboardView,
    EventListView,
    EventVerifyView,
    HealthView,
    TicketClearView,
    TicketDetailView,
    TicketListView,
    TicketPositionView,
)

__all__ = [
    "EventListView",
    "EventVerifyView",
    "EventDashboardView",
    "TicketListView",
    "TicketClearView",
    "TicketDetailView",
    "TicketPositionView",
    "HealthView",
]
