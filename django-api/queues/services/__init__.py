from queues.conf import QueueConfig
from queues.services.pins import PinHasher, get_pin_hasher
from queues.services.queue_service import QueueService


def get_queue_service(config: QueueConfig | None = None) -> QueueService:
    """Build a QueueService backed by the Django ORM stores."""
    from queues.stores.django_store import (
        DjangoCounterAllocator,
        DjangoEventStore,
        DjangoTicketStore,
    )

    config = config or QueueConfig.from_settings()
    return QueueService(
        events=DjangoEventStore(),
        tickets=DjangoTicketStore(allocator=DjangoCounterAllocator()),
        hasher=get_pin_hasher(config.pin_hasher),
        config=config,
    )


__all__ = ["QueueService", "PinHasher", "get_pin_hasher", "get_queue_service"]
