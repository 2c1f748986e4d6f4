from queues.stores.interfaces import CounterAllocator, EventStore, TicketStore

__all__ = ["EventStore", "CounterAllocator", "TicketStore"]
