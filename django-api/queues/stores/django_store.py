"""Django ORM implementations of the queue stores."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from django.db import DatabaseError, transaction
from django.db.models import F

from queues.domain import Event, EventId, Ticket, TicketId, TicketStatus
from queues.domain.errors import EventNotFoundError, IntegrityError, StoreError
from queues.models import Event as EventModel
from queues.models import EventCounter
from queues.models import Ticket as TicketModel
from queues.stores.interfaces import CounterAllocator, EventStore, TicketStore

logger = structlog.get_logger(__name__)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise driver failures as StoreError with the driver's message."""
    try:
        yield
    except DatabaseError as exc:
        logger.error("store.failed", error=str(exc))
        raise StoreError(str(exc)) from exc


def _to_event(row: EventModel, with_pin_hash: bool = False) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        is_active=row.is_active,
        created_at=row.created_at,
        pin_hash=row.pin_hash if with_pin_hash else None,
    )


def _to_ticket(row: TicketModel) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        event_id=EventId(row.event_id),
        number=row.number,
        name=row.name,
        status=TicketStatus(row.status),
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def create_event(self, name: str, pin_hash: str) -> Event:
        with translate_errors(), transaction.atomic():
            row = EventModel.objects.create(name=name, pin_hash=pin_hash)
            EventCounter.objects.create(event=row, last_number=0)
        return _to_event(row)

    def list_events(self) -> list[Event]:
        with translate_errors():
            rows = list(EventModel.objects.defer("pin_hash").order_by("-created_at"))
        return [_to_event(row) for row in rows]

    def get_event(self, event_id: EventId, with_pin_hash: bool = False) -> Event | None:
        with translate_errors():
            row = EventModel.objects.filter(id=event_id.value).first()
        if row is None:
            return None
        return _to_event(row, with_pin_hash=with_pin_hash)

    def event_exists(self, event_id: EventId) -> bool:
        with translate_errors():
            return EventModel.objects.filter(id=event_id.value).exists()


class DjangoCounterAllocator(CounterAllocator):
    """Increments ``event_counters.last_number`` with a single UPDATE.

    The UPDATE takes the row lock, so concurrent callers for one event are
    serialized by the database and each reads back its own increment.
    """

    def next_number(self, event_id: EventId) -> int:
        with translate_errors(), transaction.atomic():
            updated = EventCounter.objects.filter(event_id=event_id.value).update(
                last_number=F("last_number") + 1
            )
            if not updated:
                if EventModel.objects.filter(id=event_id.value).exists():
                    logger.error("counter.missing", event_id=str(event_id))
                    raise IntegrityError(f"Event {event_id} has no ticket counter")
                raise EventNotFoundError(str(event_id))
            return (
                EventCounter.objects.filter(event_id=event_id.value)
                .values_list("last_number", flat=True)
                .get()
            )


class DjangoTicketStore(TicketStore):
    """Relational ticket store using Django ORM."""

    def __init__(self, allocator: CounterAllocator) -> None:
        self._allocator = allocator

    def create_ticket(self, event_id: EventId, name: str) -> Ticket:
        # One transaction: a failed insert rolls the counter back too.
        with translate_errors(), transaction.atomic():
            number = self._allocator.next_number(event_id)
            row = TicketModel.objects.create(
                event_id=event_id.value,
                number=number,
                name=name,
                status=TicketStatus.WAITING.value,
            )
        return _to_ticket(row)

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with translate_errors():
            row = TicketModel.objects.filter(id=ticket_id.value).first()
        return _to_ticket(row) if row is not None else None

    def list_by_event(
        self, event_id: EventId, status: TicketStatus | None = None
    ) -> list[Ticket]:
        rows = TicketModel.objects.filter(event_id=event_id.value)
        if status is not None:
            rows = rows.filter(status=status.value)
        with translate_errors():
            return [_to_ticket(row) for row in rows.order_by("number")]

    def update_ticket(
        self,
        ticket_id: TicketId,
        *,
        status: TicketStatus | None = None,
        name: str | None = None,
        expected_status: TicketStatus | None = None,
    ) -> Ticket | None:
        fields: dict[str, str] = {}
        if status is not None:
            fields["status"] = status.value
        if name is not None:
            fields["name"] = name

        rows = TicketModel.objects.filter(id=ticket_id.value)
        if expected_status is not None:
            rows = rows.filter(status=expected_status.value)
        with translate_errors():
            if fields and not rows.update(**fields):
                return None
            row = TicketModel.objects.filter(id=ticket_id.value).first()
        return _to_ticket(row) if row is not None else None

    def delete_ticket(self, ticket_id: TicketId) -> bool:
        with translate_errors():
            deleted, _ = TicketModel.objects.filter(id=ticket_id.value).delete()
        return deleted > 0

    def clear_by_event(self, event_id: EventId) -> int:
        with translate_errors():
            deleted, _ = TicketModel.objects.filter(event_id=event_id.value).delete()
        return deleted

    def clear_all(self) -> int:
        with translate_errors():
            deleted, _ = TicketModel.objects.all().delete()
        return deleted
