"""Domain error codes for the queues module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INTEGRITY_ERROR = "INTEGRITY_ERROR"
    STORE_ERROR = "STORE_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class InvalidIdentifierError(ValidationError):
    """Raised when an event or ticket ID is not a valid UUID."""

    def __init__(self, kind: str) -> None:
        DomainError.__init__(
            self,
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )


class NotFoundError(DomainError):
    """Base class for missing events and tickets."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class TicketNotFoundError(NotFoundError):
    """Raised when a ticket is not found."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message="Ticket not found",
        )
        self.ticket_id = ticket_id


class InvalidTransitionError(DomainError):
    """Raised when a status patch leaves a terminal state."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot change ticket status from {current} to {target}",
        )
        self.current = current
        self.target = target


class IntegrityError(DomainError):
    """Raised when stored state violates an invariant, e.g. an event without a counter."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INTEGRITY_ERROR, message=message)


class StoreError(DomainError):
    """Raised when the underlying datastore call fails."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.STORE_ERROR, message=message)
