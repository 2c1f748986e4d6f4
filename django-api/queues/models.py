"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    pin_hash = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "events"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="events_created_4f0b1d_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class EventCounter(models.Model):
    """Per-event source of the next ticket number."""

    event = models.OneToOneField(
        Event,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="counter",
    )
    last_number = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "event_counters"

    def __str__(self) -> str:
        return f"{self.event_id}: {self.last_number}"


class Ticket(models.Model):
    """Persistence model for queue tickets."""

    class Status(models.TextChoices):
        WAITING = "waiting", "Waiting"
        DONE = "done", "Done"
        CANCELED = "canceled", "Canceled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    number = models.PositiveIntegerField()
    name = models.CharField(max_length=255)
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.WAITING
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "tickets"
        ordering = ["number"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "number"], name="unique_ticket_number_per_event"
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="tickets_event_i_7c2e9a_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.number} {self.name}"
