"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TicketId:
    """Unique identifier for a Ticket."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


class TicketStatus(Enum):
    """Lifecycle states of a ticket.

    ``waiting`` is the only initial state; ``done`` and ``canceled`` are terminal.
    """

    WAITING = "waiting"
    DONE = "done"
    CANCELED = "canceled"

    @classmethod
    def parse(cls, value: str) -> Self:
        """Return the status named by ``value``; ValueError if it names none."""
        return cls(value)

    @property
    def is_terminal(self) -> bool:
        return self is not TicketStatus.WAITING

    def can_transition_to(self, target: "TicketStatus", allow_reopen: bool = False) -> bool:
        if target is self:
            return True
        if not self.is_terminal:
            return True
        return allow_reopen


@dataclass(frozen=True)
class WaitEstimate:
    """Estimated wait derived from tickets ahead and minutes per ticket."""

    ahead: int
    minutes_per_ticket: int

    def __post_init__(self) -> None:
        if self.ahead < 0:
            raise ValueError("Tickets ahead cannot be negative")
        if self.minutes_per_ticket < 0:
            raise ValueError("Minutes per ticket cannot be negative")

    @property
    def total_minutes(self) -> int:
        return self.ahead * self.minutes_per_ticket

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60

    @property
    def is_next(self) -> bool:
        return self.ahead == 0

    @property
    def label(self) -> str:
        return str(self)

    def __str__(self) -> str:
        if self.hours > 0:
            return f"{self.hours}h {self.minutes}m"
        return f"{self.minutes}m"
