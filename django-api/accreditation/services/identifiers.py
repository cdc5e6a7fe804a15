"""Parsing of externally supplied identifiers into domain IDs."""

from accreditation.domain import EventId, RegistrationId, RuleId
from accreditation.domain.errors import (
    InvalidEventIdError,
    InvalidRegistrationIdError,
    InvalidRuleError,
)


def parse_event_id(value: str | EventId) -> EventId:
    if isinstance(value, EventId):
        return value
    try:
        return EventId.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidEventIdError() from exc


def parse_registration_id(value: str | RegistrationId) -> RegistrationId:
    if isinstance(value, RegistrationId):
        return value
    try:
        return RegistrationId.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidRegistrationIdError() from exc


def parse_rule_id(value: str | RuleId) -> RuleId:
    if isinstance(value, RuleId):
        return value
    try:
        return RuleId.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidRuleError("Invalid rule ID format") from exc
