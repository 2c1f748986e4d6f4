"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from queues.conf import QueueConfig
from queues.services.pins import Sha256PinHasher
from queues.services.queue_service import QueueService
from tests.fakes import FakeCounterAllocator, FakeEventStore, FakeTicketStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def event_store() -> FakeEventStore:
    return FakeEventStore()


@pytest.fixture
def ticket_store(event_store: FakeEventStore) -> FakeTicketStore:
    return FakeTicketStore(allocator=FakeCounterAllocator(event_store))


@pytest.fixture
def queue_config() -> QueueConfig:
    return QueueConfig()


@pytest.fixture
def service(
    event_store: FakeEventStore,
    ticket_store: FakeTicketStore,
    queue_config: QueueConfig,
) -> QueueService:
    return QueueService(
        events=event_store,
        tickets=ticket_store,
        hasher=Sha256PinHasher(),
        config=queue_config,
    )


@pytest.fixture
def registration(service: QueueService):
    """The "Registration" event with PIN 1234."""
    return service.create_event("Registration", "1234")
