"""Queue behavior settings, read once from Django settings."""

from dataclasses import dataclass
from typing import Self

from django.conf import settings


@dataclass(frozen=True)
class QueueConfig:
    """Knobs the queue service reads; independent of Django for testing."""

    allow_reopen: bool = False
    avg_minutes_per_ticket: int = 3
    now_serving_limit: int = 5
    min_pin_length: int = 4
    pin_hasher: str = "sha256"

    def __post_init__(self) -> None:
        if self.avg_minutes_per_ticket < 0:
            raise ValueError("avg_minutes_per_ticket cannot be negative")
        if self.now_serving_limit < 1:
            raise ValueError("now_serving_limit must be positive")
        if self.min_pin_length < 1:
            raise ValueError("min_pin_length must be positive")

    @classmethod
    def from_settings(cls) -> Self:
        return cls(
            allow_reopen=getattr(settings, "QUEUE_ALLOW_REOPEN", cls.allow_reopen),
            avg_minutes_per_ticket=getattr(
                settings, "QUEUE_AVG_MINUTES_PER_TICKET", cls.avg_minutes_per_ticket
            ),
            now_serving_limit=getattr(
                settings, "QUEUE_NOW_SERVING_LIMIT", cls.now_serving_limit
            ),
            min_pin_length=getattr(settings, "QUEUE_MIN_PIN_LENGTH", cls.min_pin_length),
            pin_hasher=getattr(settings, "QUEUE_PIN_HASHER", cls.pin_hasher),
        )
