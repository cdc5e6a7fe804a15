"""Builders for domain objects used across the test suite."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from accreditation.domain import Capacity, EventId, MatchField, QuotaRule, RuleId, ZoneRule

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_quota_rule(
    category: str = "Prensa Escrita",
    max_per_organization: int | None = None,
    max_global: int | None = None,
    priority: int = 0,
    created_offset: int = 0,
    event_id: EventId | None = None,
) -> QuotaRule:
    return QuotaRule(
        id=RuleId(uuid4()),
        event_id=event_id or EventId(uuid4()),
        category=category,
        max_per_organization=Capacity.optional(max_per_organization),
        max_global=Capacity.optional(max_global),
        priority=priority,
        created_at=BASE_TIME + timedelta(seconds=created_offset),
    )


def make_zone_rule(
    match_field: MatchField,
    match_value: str,
    zone: str,
    created_offset: int = 0,
    event_id: EventId | None = None,
) -> ZoneRule:
    return ZoneRule(
        id=RuleId(uuid4()),
        event_id=event_id or EventId(uuid4()),
        match_field=match_field,
        match_value=match_value,
        zone=zone,
        created_at=BASE_TIME + timedelta(seconds=created_offset),
    )
