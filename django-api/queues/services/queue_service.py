"""Queue service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import structlog

from queues.conf import QueueConfig
from queues.domain import (
    Dashboard,
    Event,
    EventId,
    QueuePosition,
    Ticket,
    TicketId,
    TicketStatus,
    WaitEstimate,
)
from queues.domain.errors import (
    EventNotFoundError,
    InvalidIdentifierError,
    InvalidTransitionError,
    StoreError,
    TicketNotFoundError,
    ValidationError,
)
from queues.services.pins import PinHasher
from queues.stores.interfaces import EventStore, TicketStore

logger = structlog.get_logger(__name__)

CLEAR_ALL_SCOPE = "all"

# Matches the CharField length of event and ticket names.
NAME_MAX_LENGTH = 255

# Compare-and-set attempts for a status patch racing other patches.
_PATCH_ATTEMPTS = 3


def _required_text(
    value: str | None, field: str, max_length: int | None = None
) -> str:
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return cleaned


def _parse_event_id(value: str | None) -> EventId:
    if value is None or not str(value).strip():
        raise ValidationError("event_id is required")
    try:
        return EventId.from_string(str(value).strip())
    except ValueError:
        raise InvalidIdentifierError("event") from None


def _parse_ticket_id(value: str | None) -> TicketId:
    if value is None or not str(value).strip():
        raise ValidationError("ticket id is required")
    try:
        return TicketId.from_string(str(value).strip())
    except ValueError:
        raise InvalidIdentifierError("ticket") from None


def _parse_status(value: str) -> TicketStatus:
    try:
        return TicketStatus.parse(value)
    except ValueError:
        raise ValidationError("Invalid status") from None


class QueueService:
    """Event registration, PIN checks and the ticket queue of each event."""

    def __init__(
        self,
        events: EventStore,
        tickets: TicketStore,
        hasher: PinHasher,
        config: QueueConfig | None = None,
    ) -> None:
        self._events = events
        self._tickets = tickets
        self._hasher = hasher
        self._config = config or QueueConfig()

    # Events

    def list_events(self) -> list[Event]:
        """Return all events, newest first."""
        return self._events.list_events()

    def create_event(self, name: str | None, pin: str | None) -> Event:
        """Create an event protected by ``pin``.

        Raises:
            ValidationError: If name or pin is blank, or the pin is too short.
        """
        name = _required_text(name, "name", NAME_MAX_LENGTH)
        _required_text(pin, "pin")
        if len(pin) < self._config.min_pin_length:
            raise ValidationError(
                f"pin must be at least {self._config.min_pin_length} characters"
            )
        event = self._events.create_event(name=name, pin_hash=self._hasher.digest(pin))
        logger.info("event.created", event_id=str(event.id))
        return event

    def get_event(self, event_id: str | None) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdentifierError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = _parse_event_id(event_id)
        event = self._events.get_event(eid)
        if event is None:
            raise EventNotFoundError(str(eid))
        return event

    def verify_pin(self, event_id: str | None, pin: str | None) -> bool:
        """Return whether ``pin`` is the event's PIN.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        eid = _parse_event_id(event_id)
        if not isinstance(pin, str) or not pin:
            raise ValidationError("pin is required")
        event = self._events.get_event(eid, with_pin_hash=True)
        if event is None:
            raise EventNotFoundError(str(eid))
        ok = self._hasher.verify(pin, event.pin_hash or "")
        logger.info("event.pin_verified", event_id=str(eid), ok=ok)
        return ok

    # Tickets

    def create_ticket(self, event_id: str | None, name: str | None) -> Ticket:
        """Take the next number in the event's queue.

        Raises:
            ValidationError: If name is blank or event_id is missing or unknown.
        """
        name = _required_text(name, "name", NAME_MAX_LENGTH)
        eid = _parse_event_id(event_id)
        if not self._events.event_exists(eid):
            raise ValidationError("event_id does not match an event")
        ticket = self._tickets.create_ticket(eid, name)
        logger.info("ticket.created", event_id=str(eid), number=ticket.number)
        return ticket

    def get_ticket(self, ticket_id: str | None) -> Ticket:
        tid = _parse_ticket_id(ticket_id)
        ticket = self._tickets.get_ticket(tid)
        if ticket is None:
            raise TicketNotFoundError(str(tid))
        return ticket

    def list_tickets(
        self, event_id: str | None, status: str | None = None
    ) -> list[Ticket]:
        """Return the event's tickets ordered by number, optionally one status only.

        Raises:
            ValidationError: If event_id is missing or status is unknown.
            EventNotFoundError: If the event does not exist.
        """
        eid = _parse_event_id(event_id)
        wanted = _parse_status(status) if status else None
        if not self._events.event_exists(eid):
            raise EventNotFoundError(str(eid))
        return self._tickets.list_by_event(eid, status=wanted)

    def waiting_tickets(self, event_id: str | None) -> list[Ticket]:
        return self.list_tickets(event_id, status=TicketStatus.WAITING.value)

    def patch_ticket(
        self,
        ticket_id: str | None,
        status: str | None = None,
        name: str | None = None,
    ) -> Ticket:
        """Change a ticket's status and/or name.

        ``waiting`` may move to ``done`` or ``canceled``; leaving a terminal state
        needs ``allow_reopen``. Repeating the current status is a no-op success.

        Raises:
            ValidationError: On an unknown status, a blank name, or an empty patch.
            TicketNotFoundError: If the ticket does not exist.
            InvalidTransitionError: If the status change is not allowed.
        """
        tid = _parse_ticket_id(ticket_id)
        if status is None and name is None:
            raise ValidationError("status or name is required")
        target = _parse_status(status) if status is not None else None
        new_name = None
        if name is not None:
            new_name = _required_text(name, "name", NAME_MAX_LENGTH)

        ticket = self.get_ticket(str(tid))
        for _ in range(_PATCH_ATTEMPTS):
            if target is not None and not ticket.status.can_transition_to(
                target, allow_reopen=self._config.allow_reopen
            ):
                logger.info(
                    "ticket.transition_rejected",
                    ticket_id=str(tid),
                    current=ticket.status.value,
                    target=target.value,
                )
                raise InvalidTransitionError(ticket.status.value, target.value)
            updated = self._tickets.update_ticket(
                tid, status=target, name=new_name, expected_status=ticket.status
            )
            if updated is not None:
                logger.info(
                    "ticket.patched",
                    ticket_id=str(tid),
                    status=updated.status.value,
                )
                return updated
            ticket = self.get_ticket(str(tid))
        raise StoreError("Ticket changed concurrently, retry the update")

    def delete_ticket(self, ticket_id: str | None) -> None:
        """Remove a ticket. Deleting a missing ticket is not an error."""
        tid = _parse_ticket_id(ticket_id)
        removed = self._tickets.delete_ticket(tid)
        logger.info("ticket.deleted", ticket_id=str(tid), removed=removed)

    def clear_tickets(self, scope: str | None) -> int:
        """Remove all tickets of one event, or of every event for scope ``all``.

        Counters are left alone so numbers are never issued twice.
        """
        if scope is None or not str(scope).strip():
            raise ValidationError("event_id is required")
        if str(scope).strip() == CLEAR_ALL_SCOPE:
            removed = self._tickets.clear_all()
            logger.info("tickets.cleared", scope=CLEAR_ALL_SCOPE, removed=removed)
            return removed
        eid = _parse_event_id(scope)
        removed = self._tickets.clear_by_event(eid)
        logger.info("tickets.cleared", scope=str(eid), removed=removed)
        return removed

    # Derived views

    def position(self, ticket_id: str | None) -> QueuePosition:
        """Return how many waiting tickets are ahead of this one and the ETA."""
        ticket = self.get_ticket(ticket_id)
        ahead = 0
        if ticket.is_waiting:
            waiting = self._tickets.list_by_event(
                ticket.event_id, status=TicketStatus.WAITING
            )
            ahead = sum(1 for other in waiting if other.number < ticket.number)
        return QueuePosition(
            ticket=ticket,
            estimate=WaitEstimate(
                ahead=ahead, minutes_per_ticket=self._config.avg_minutes_per_ticket
            ),
        )

    def dashboard(self, event_id: str | None) -> Dashboard:
        """Return the admin overview of an event's queue."""
        event = self.get_event(event_id)
        tickets = self._tickets.list_by_event(event.id)
        waiting = [ticket for ticket in tickets if ticket.is_waiting]
        return Dashboard(
            event=event,
            waiting_count=len(waiting),
            total_count=len(tickets),
            next_number=waiting[0].number if waiting else None,
            now_serving=tuple(waiting[: self._config.now_serving_limit]),
            avg_minutes_per_ticket=self._config.avg_minutes_per_ticket,
        )
