"""Unit tests for QueueService.

These test validation, the ticket state machine and domain error mapping
against in-memory stores.
Run with: pytest tests/test_services.py -v
"""

from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

import pytest

from queues.conf import QueueConfig
from queues.domain import TicketStatus
from queues.domain.errors import (
    EventNotFoundError,
    IntegrityError,
    InvalidIdentifierError,
    InvalidTransitionError,
    TicketNotFoundError,
    ValidationError,
)
from queues.services.pins import Sha256PinHasher
from queues.services.queue_service import NAME_MAX_LENGTH, QueueService


class TestCreateEvent:
    """Tests for QueueService.create_event."""

    def test_creates_event_with_zero_counter(self, service, event_store):
        event = service.create_event("  Registration ", "1234")

        assert event.name == "Registration"
        assert event.is_active is True
        assert event.pin_hash is None
        assert event_store.counters[event.id.value] == 0

    def test_stores_digest_not_plaintext(self, service, event_store):
        event = service.create_event("Registration", "1234")

        stored = event_store.events[event.id.value].pin_hash
        assert stored != "1234"
        assert stored == Sha256PinHasher().digest("1234")

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected_without_writes(self, service, event_store, name):
        with pytest.raises(ValidationError):
            service.create_event(name, "1234")
        assert event_store.events == {}
        assert event_store.counters == {}

    @pytest.mark.parametrize("pin", ["", "    ", None])
    def test_blank_pin_rejected(self, service, pin):
        with pytest.raises(ValidationError):
            service.create_event("Registration", pin)

    def test_short_pin_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.create_event("Registration", "123")
        assert "at least 4" in exc_info.value.message

    def test_overlong_name_rejected_without_writes(self, service, event_store):
        with pytest.raises(ValidationError) as exc_info:
            service.create_event("x" * (NAME_MAX_LENGTH + 1), "1234")
        assert "at most 255" in exc_info.value.message
        assert event_store.events == {}

    def test_name_at_limit_is_accepted(self, service):
        event = service.create_event("x" * NAME_MAX_LENGTH, "1234")
        assert len(event.name) == NAME_MAX_LENGTH

    def test_list_events_newest_first(self, service):
        first = service.create_event("Mehendi", "1111")
        second = service.create_event("Sangeet", "2222")

        listed = service.list_events()

        assert [e.id for e in listed] == [second.id, first.id]
        assert all(e.pin_hash is None for e in listed)


class TestVerifyPin:
    """Tests for QueueService.verify_pin."""

    def test_correct_pin(self, service, registration):
        assert service.verify_pin(str(registration.id), "1234") is True

    @pytest.mark.parametrize("pin", ["0000", "12345", " 1234", "123"])
    def test_other_strings_fail(self, service, registration, pin):
        assert service.verify_pin(str(registration.id), pin) is False

    def test_unknown_event_raises_not_found(self, service):
        with pytest.raises(EventNotFoundError):
            service.verify_pin(str(uuid4()), "1234")

    def test_malformed_event_id(self, service):
        with pytest.raises(InvalidIdentifierError):
            service.verify_pin("nope", "1234")

    def test_missing_pin(self, service, registration):
        with pytest.raises(ValidationError):
            service.verify_pin(str(registration.id), "")


class TestCreateTicket:
    """Tests for QueueService.create_ticket."""

    def test_numbers_start_at_one(self, service, registration):
        asha = service.create_ticket(str(registration.id), "Asha")
        bala = service.create_ticket(str(registration.id), " Bala ")

        assert (asha.number, asha.status) == (1, TicketStatus.WAITING)
        assert (bala.number, bala.name) == (2, "Bala")

    def test_counters_are_independent_per_event(self, service, registration):
        other = service.create_event("Sangeet", "5678")
        service.create_ticket(str(registration.id), "Asha")
        service.create_ticket(str(registration.id), "Bala")

        assert service.create_ticket(str(other.id), "Chitra").number == 1

    @pytest.mark.parametrize("name", ["", "  ", None])
    def test_blank_name(self, service, registration, name):
        with pytest.raises(ValidationError):
            service.create_ticket(str(registration.id), name)

    def test_overlong_name(self, service, registration):
        with pytest.raises(ValidationError):
            service.create_ticket(str(registration.id), "y" * 5000)
        assert service.list_tickets(str(registration.id)) == []

    def test_missing_event_id(self, service):
        with pytest.raises(ValidationError):
            service.create_ticket(None, "Asha")

    def test_unknown_event_id(self, service):
        with pytest.raises(ValidationError):
            service.create_ticket(str(uuid4()), "Asha")

    def test_event_without_counter_is_integrity_error(
        self, service, event_store, registration
    ):
        del event_store.counters[registration.id.value]

        with pytest.raises(IntegrityError):
            service.create_ticket(str(registration.id), "Asha")

    def test_concurrent_creates_get_distinct_consecutive_numbers(
        self, service, registration
    ):
        event_id = str(registration.id)

        with ThreadPoolExecutor(max_workers=8) as pool:
            tickets = list(
                pool.map(
                    lambda i: service.create_ticket(event_id, f"visitor-{i}"), range(50)
                )
            )

        assert sorted(t.number for t in tickets) == list(range(1, 51))


class TestListTickets:
    """Tests for QueueService.list_tickets and waiting_tickets."""

    def test_ordered_by_number_with_all_statuses(self, service, registration):
        event_id = str(registration.id)
        first = service.create_ticket(event_id, "Asha")
        service.create_ticket(event_id, "Bala")
        service.patch_ticket(str(first.id), status="done")

        tickets = service.list_tickets(event_id)

        assert [(t.number, t.status.value) for t in tickets] == [
            (1, "done"),
            (2, "waiting"),
        ]

    def test_waiting_subset(self, service, registration):
        event_id = str(registration.id)
        first = service.create_ticket(event_id, "Asha")
        service.create_ticket(event_id, "Bala")
        service.patch_ticket(str(first.id), status="done")

        waiting = service.waiting_tickets(event_id)

        assert [(t.number, t.name) for t in waiting] == [(2, "Bala")]

    def test_missing_event_id(self, service):
        with pytest.raises(ValidationError):
            service.list_tickets("")

    def test_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.list_tickets(str(uuid4()))

    def test_unknown_status_filter(self, service, registration):
        with pytest.raises(ValidationError):
            service.list_tickets(str(registration.id), status="served")


class TestPatchTicket:
    """Tests for QueueService.patch_ticket."""

    @pytest.fixture
    def ticket(self, service, registration):
        return service.create_ticket(str(registration.id), "Asha")

    @pytest.mark.parametrize("status", ["done", "canceled"])
    def test_waiting_to_terminal(self, service, ticket, status):
        updated = service.patch_ticket(str(ticket.id), status=status)
        assert updated.status.value == status
        assert updated.number == ticket.number

    def test_repeating_status_is_idempotent(self, service, ticket):
        service.patch_ticket(str(ticket.id), status="done")
        again = service.patch_ticket(str(ticket.id), status="done")
        assert again.status is TicketStatus.DONE

    @pytest.mark.parametrize("target", ["waiting", "canceled"])
    def test_leaving_done_is_rejected(self, service, ticket, target):
        service.patch_ticket(str(ticket.id), status="done")

        with pytest.raises(InvalidTransitionError):
            service.patch_ticket(str(ticket.id), status=target)
        assert service.get_ticket(str(ticket.id)).status is TicketStatus.DONE

    def test_reopen_when_allowed(self, event_store, ticket_store):
        service = QueueService(
            events=event_store,
            tickets=ticket_store,
            hasher=Sha256PinHasher(),
            config=QueueConfig(allow_reopen=True),
        )
        event = service.create_event("Registration", "1234")
        ticket = service.create_ticket(str(event.id), "Asha")
        service.patch_ticket(str(ticket.id), status="canceled")

        reopened = service.patch_ticket(str(ticket.id), status="waiting")

        assert reopened.status is TicketStatus.WAITING

    def test_invalid_status(self, service, ticket):
        with pytest.raises(ValidationError):
            service.patch_ticket(str(ticket.id), status="served")

    def test_rename(self, service, ticket):
        updated = service.patch_ticket(str(ticket.id), name="  Asha K ")
        assert updated.name == "Asha K"
        assert updated.status is TicketStatus.WAITING

    def test_rename_terminal_ticket(self, service, ticket):
        service.patch_ticket(str(ticket.id), status="canceled")
        updated = service.patch_ticket(str(ticket.id), name="Asha K")
        assert (updated.name, updated.status) == ("Asha K", TicketStatus.CANCELED)

    def test_blank_name(self, service, ticket):
        with pytest.raises(ValidationError):
            service.patch_ticket(str(ticket.id), name=" ")

    def test_overlong_rename(self, service, ticket):
        with pytest.raises(ValidationError):
            service.patch_ticket(str(ticket.id), name="y" * (NAME_MAX_LENGTH + 1))
        assert service.get_ticket(str(ticket.id)).name == ticket.name

    def test_empty_patch(self, service, ticket):
        with pytest.raises(ValidationError):
            service.patch_ticket(str(ticket.id))

    def test_unknown_ticket(self, service):
        with pytest.raises(TicketNotFoundError):
            service.patch_ticket(str(uuid4()), status="done")

    def test_status_changed_underneath_is_rechecked(self, service, ticket_store, ticket):
        """A patch that loses a race re-reads and applies the state machine again."""
        real_update = ticket_store.update_ticket
        calls = []

        def racing_update(ticket_id, **kwargs):
            if not calls:
                calls.append(kwargs)
                real_update(ticket_id, status=TicketStatus.CANCELED)
            return real_update(ticket_id, **kwargs)

        ticket_store.update_ticket = racing_update

        with pytest.raises(InvalidTransitionError):
            service.patch_ticket(str(ticket.id), status="done")
        assert service.get_ticket(str(ticket.id)).status is TicketStatus.CANCELED


class TestDeleteAndClear:
    """Tests for delete_ticket and clear_tickets."""

    def test_delete_twice_is_a_no_op(self, service, registration):
        ticket = service.create_ticket(str(registration.id), "Asha")

        service.delete_ticket(str(ticket.id))
        service.delete_ticket(str(ticket.id))

        with pytest.raises(TicketNotFoundError):
            service.get_ticket(str(ticket.id))

    def test_numbers_not_reused_after_delete(self, service, registration):
        event_id = str(registration.id)
        service.create_ticket(event_id, "Asha")
        last = service.create_ticket(event_id, "Bala")
        service.delete_ticket(str(last.id))

        assert service.create_ticket(event_id, "Chitra").number == 3

    def test_clear_keeps_counter(self, service, registration):
        event_id = str(registration.id)
        for name in ("Asha", "Bala", "Chitra"):
            service.create_ticket(event_id, name)

        assert service.clear_tickets(event_id) == 3
        assert service.list_tickets(event_id) == []
        assert service.create_ticket(event_id, "Dev").number == 4

    def test_clear_only_touches_one_event(self, service, registration):
        other = service.create_event("Sangeet", "5678")
        service.create_ticket(str(registration.id), "Asha")
        service.create_ticket(str(other.id), "Bala")

        service.clear_tickets(str(registration.id))

        assert [t.name for t in service.list_tickets(str(other.id))] == ["Bala"]

    def test_clear_all(self, service, registration):
        other = service.create_event("Sangeet", "5678")
        service.create_ticket(str(registration.id), "Asha")
        service.create_ticket(str(other.id), "Bala")

        assert service.clear_tickets("all") == 2
        assert service.create_ticket(str(other.id), "Chitra").number == 2

    @pytest.mark.parametrize("scope", [None, "", "  "])
    def test_clear_requires_scope(self, service, scope):
        with pytest.raises(ValidationError):
            service.clear_tickets(scope)


class TestDerivedViews:
    """Tests for position and dashboard."""

    def test_position_counts_waiting_tickets_ahead(self, service, registration):
        event_id = str(registration.id)
        tickets = [service.create_ticket(event_id, f"v{i}") for i in range(4)]
        service.patch_ticket(str(tickets[0].id), status="done")

        position = service.position(str(tickets[3].id))

        assert position.ahead == 2
        assert position.estimate.total_minutes == 6
        assert position.estimate.label == "6m"

    def test_position_of_first_waiting(self, service, registration):
        ticket = service.create_ticket(str(registration.id), "Asha")
        assert service.position(str(ticket.id)).estimate.is_next

    def test_position_of_finished_ticket(self, service, registration):
        event_id = str(registration.id)
        service.create_ticket(event_id, "Asha")
        second = service.create_ticket(event_id, "Bala")
        service.patch_ticket(str(second.id), status="done")

        position = service.position(str(second.id))

        assert position.ahead == 0
        assert not position.ticket.is_waiting

    def test_dashboard(self, service, registration):
        event_id = str(registration.id)
        tickets = [service.create_ticket(event_id, f"v{i}") for i in range(7)]
        service.patch_ticket(str(tickets[0].id), status="done")

        dashboard = service.dashboard(event_id)

        assert dashboard.event.id == registration.id
        assert dashboard.total_count == 7
        assert dashboard.waiting_count == 6
        assert dashboard.next_number == 2
        assert [t.number for t in dashboard.now_serving] == [2, 3, 4, 5, 6]
        assert dashboard.avg_minutes_per_ticket == 3

    def test_dashboard_of_empty_queue(self, service, registration):
        dashboard = service.dashboard(str(registration.id))
        assert dashboard.next_number is None
        assert dashboard.now_serving == ()


def test_registration_scenario(service):
    """Event, two visitors, first served, PIN checks."""
    event = service.create_event("Registration", "1234")
    event_id = str(event.id)

    asha = service.create_ticket(event_id, "Asha")
    bala = service.create_ticket(event_id, "Bala")
    assert (asha.number, asha.status.value) == (1, "waiting")
    assert bala.number == 2

    service.patch_ticket(str(asha.id), status="done")

    assert [(t.number, t.name) for t in service.waiting_tickets(event_id)] == [
        (2, "Bala")
    ]
    assert service.verify_pin(event_id, "1234") is True
    assert service.verify_pin(event_id, "0000") is False
