"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in queues/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from queues.domain.value_objects import EventId, TicketId, TicketStatus, WaitEstimate


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    ``pin_hash`` is only populated by store reads that need it for verification;
    listings carry ``None``.
    """

    id: EventId
    name: str
    is_active: bool
    created_at: datetime
    pin_hash: str | None = None


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: TicketId
    event_id: EventId
    number: int
    name: str
    status: TicketStatus
    created_at: datetime

    @property
    def is_waiting(self) -> bool:
        return self.status is TicketStatus.WAITING


@dataclass(frozen=True)
class QueuePosition:
    """Where a ticket stands in its event's waiting line."""

    ticket: Ticket
    estimate: WaitEstimate

    @property
    def ahead(self) -> int:
        return self.estimate.ahead


@dataclass(frozen=True)
class Dashboard:
    """Admin overview of one event's queue."""

    event: Event
    waiting_count: int
    total_count: int
    next_number: int | None
    now_serving: tuple[Ticket, ...]
    avg_minutes_per_ticket: int
