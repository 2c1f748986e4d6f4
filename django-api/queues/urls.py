from django.urls import path

from queues.handlers import (
    EventDashboardView,
    EventListView,
    EventVerifyView,
    TicketClearView,
    TicketDetailView,
    TicketListView,
    TicketPositionView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path(
        "events/<str:event_id>/verify",
        EventVerifyView.as_view(),
        name="event-verify",
    ),
    path(
        "events/<str:event_id>/dashboard",
        EventDashboardView.as_view(),
        name="event-dashboard",
    ),
    path("tickets", TicketListView.as_view(), name="ticket-list"),
    # Must precede the detail route, which would otherwise capture "clear".
    path("tickets/clear", TicketClearView.as_view(), name="ticket-clear"),
    path("tickets/<str:ticket_id>", TicketDetailView.as_view(), name="ticket-detail"),
    path(
        "tickets/<str:ticket_id>/position",
        TicketPositionView.as_view(),
        name="ticket-position",
    ),
]
