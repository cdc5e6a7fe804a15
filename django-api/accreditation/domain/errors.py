"""Domain error codes for the accreditation module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    UNKNOWN_EVENT = "UNKNOWN_EVENT"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    INVALID_REGISTRATION_ID = "INVALID_REGISTRATION_ID"
    RULE_NOT_FOUND = "RULE_NOT_FOUND"
    INVALID_RULE = "INVALID_RULE"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    TRANSIENT_CONTENTION = "TRANSIENT_CONTENTION"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_EVENT,
            message="Event not found",
        )
        object.__setattr__(self, "event_id", event_id)


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class RegistrationNotFoundError(DomainError):
    """Raised when a registration is not found."""

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        object.__setattr__(self, "registration_id", registration_id)


class InvalidRegistrationIdError(DomainError):
    """Raised when a registration ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGISTRATION_ID,
            message="Invalid registration ID format",
        )


class RuleNotFoundError(DomainError):
    """Raised when a quota or zone rule does not exist for the event."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(
            code=ErrorCode.RULE_NOT_FOUND,
            message="Rule not found",
        )
        object.__setattr__(self, "rule_id", rule_id)


class InvalidRuleError(DomainError):
    """Raised when rule input violates a rule invariant."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_RULE, message=message)


class InvalidInputError(DomainError):
    """Raised when a candidate or manual assignment is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class InvalidStatusTransitionError(DomainError):
    """Raised when a registration cannot move to the requested status."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot change status from {current} to {requested}",
        )


class ContentionError(DomainError):
    """Raised by stores when the admission envelope cannot be serialized in time."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.TRANSIENT_CONTENTION,
            message="Admission could not be completed, try again",
        )
        object.__setattr__(self, "detail", detail)
