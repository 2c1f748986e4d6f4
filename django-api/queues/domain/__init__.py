from queues.domain.models import Dashboard, Event, QueuePosition, Ticket
from queues.domain.value_objects import (
    EventId,
    TicketId,
    TicketStatus,
    WaitEstimate,
)

__all__ = [
    "Event",
    "Ticket",
    "QueuePosition",
    "Dashboard",
    "EventId",
    "TicketId",
    "TicketStatus",
    "WaitEstimate",
]
