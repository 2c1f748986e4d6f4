"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from queues.domain import Event, EventId, Ticket, TicketId, TicketStatus


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def create_event(self, name: str, pin_hash: str) -> Event:
        """Persist an event together with its zero-initialized counter.

        Both rows are written or neither is.
        """
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending, without pin_hash."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, with_pin_hash: bool = False) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...


class CounterAllocator(ABC):
    """Interface for the per-event atomic ticket number source."""

    @abstractmethod
    def next_number(self, event_id: EventId) -> int:
        """Increment the event's counter and return the new value in one atomic step.

        Raises:
            EventNotFoundError: If the event does not exist.
            IntegrityError: If the event exists but has no counter.
        """
        ...


class TicketStore(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    def create_ticket(self, event_id: EventId, name: str) -> Ticket:
        """Allocate the next number for the event and insert a waiting ticket."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        """Return a ticket by ID, or None if not found."""
        ...

    @abstractmethod
    def list_by_event(
        self, event_id: EventId, status: TicketStatus | None = None
    ) -> list[Ticket]:
        """Return the event's tickets ordered by number ascending."""
        ...

    @abstractmethod
    def update_ticket(
        self,
        ticket_id: TicketId,
        *,
        status: TicketStatus | None = None,
        name: str | None = None,
        expected_status: TicketStatus | None = None,
    ) -> Ticket | None:
        """Apply the given fields and return the updated ticket.

        When ``expected_status`` is given the write only happens if the stored
        status still equals it; otherwise (or if the ticket is gone) returns None.
        """
        ...

    @abstractmethod
    def delete_ticket(self, ticket_id: TicketId) -> bool:
        """Delete a ticket. Returns whether a row was removed."""
        ...

    @abstractmethod
    def clear_by_event(self, event_id: EventId) -> int:
        """Delete every ticket of the event without touching its counter."""
        ...

    @abstractmethod
    def clear_all(self) -> int:
        """Delete every ticket of every event without touching counters."""
        ...
