"""Thread-safe in-memory implementation of the rule and registration stores.

Backs the test suite. Each (event, category) key has its own lock, so
admissions for different keys run in parallel while admissions for the same
key are serialized.
"""

import threading
import uuid
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone

from accreditation.domain import (
    Capacity,
    CountPolicy,
    EventId,
    MatchField,
    QuotaRule,
    Registration,
    RegistrationId,
    RegistrationStatus,
    RuleId,
    ZoneRule,
    normalize_key,
    normalize_organization,
)
from accreditation.domain.errors import ContentionError, RegistrationNotFoundError
from accreditation.stores.interfaces import RegistrationStore, RuleStore


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryAccreditationStore(RuleStore, RegistrationStore):
    """Both store interfaces over plain dictionaries."""

    def __init__(self, lock_timeout_seconds: float = 5.0) -> None:
        self._lock_timeout_seconds = lock_timeout_seconds
        self._mutex = threading.RLock()
        self._key_locks: dict[tuple[EventId, str], threading.Lock] = {}
        self._scope = threading.local()
        self._events: set[EventId] = set()
        self._quota_rules: list[QuotaRule] = []
        self._zone_rules: list[ZoneRule] = []
        self._registrations: dict[RegistrationId, Registration] = {}

    def add_event(self, event_id: EventId | None = None) -> EventId:
        event_id = event_id or EventId(uuid.uuid4())
        with self._mutex:
            self._events.add(event_id)
        return event_id

    def event_exists(self, event_id: EventId) -> bool:
        with self._mutex:
            return event_id in self._events

    def get_quota_rules(self, event_id: EventId, category: str) -> list[QuotaRule]:
        key = normalize_key(category)
        with self._mutex:
            return [
                rule
                for rule in self._quota_rules
                if rule.event_id == event_id and rule.category_key == key
            ]

    def list_quota_rules(self, event_id: EventId) -> list[QuotaRule]:
        with self._mutex:
            return [rule for rule in self._quota_rules if rule.event_id == event_id]

    def get_zone_rules(self, event_id: EventId) -> list[ZoneRule]:
        with self._mutex:
            return [rule for rule in self._zone_rules if rule.event_id == event_id]

    def _matching(self, event_id: EventId, category: str, policy: CountPolicy):
        key = normalize_key(category)
        statuses = policy.counted_statuses()
        with self._mutex:
            rows = list(self._registrations.values())
        return [
            row
            for row in rows
            if row.event_id == event_id
            and normalize_key(row.category) == key
            and row.status in statuses
        ]

    def count_registrations(
        self,
        event_id: EventId,
        category: str,
        organization: str | None = None,
        *,
        policy: CountPolicy = CountPolicy.ALL,
    ) -> int:
        rows = self._matching(event_id, category, policy)
        if organization is None:
            return len(rows)
        organization = normalize_organization(organization)
        return sum(1 for row in rows if row.organization == organization)

    def organization_counts(
        self,
        event_id: EventId,
        category: str,
        *,
        policy: CountPolicy = CountPolicy.ALL,
    ) -> dict[str, int]:
        return dict(Counter(row.organization for row in self._matching(event_id, category, policy)))

    def save_quota_rule(
        self,
        event_id: EventId,
        category: str,
        max_per_organization: int | None,
        max_global: int | None,
        priority: int = 0,
    ) -> QuotaRule:
        with self._mutex:
            effective = self.get_quota_rule(event_id, category)
            if effective is None:
                rule = QuotaRule(
                    id=RuleId(uuid.uuid4()),
                    event_id=event_id,
                    category=category.strip(),
                    max_per_organization=Capacity.optional(max_per_organization),
                    max_global=Capacity.optional(max_global),
                    priority=priority,
                    created_at=_now(),
                )
                self._quota_rules.append(rule)
                return rule
            rule = replace(
                effective,
                category=category.strip(),
                max_per_organization=Capacity.optional(max_per_organization),
                max_global=Capacity.optional(max_global),
                priority=priority,
            )
            index = self._quota_rules.index(effective)
            self._quota_rules[index] = rule
            return rule

    def add_quota_rule(self, rule: QuotaRule) -> None:
        """Store a rule as-is, duplicates included."""
        with self._mutex:
            self._quota_rules.append(rule)

    def delete_quota_rule(self, event_id: EventId, rule_id: RuleId) -> bool:
        with self._mutex:
            before = len(self._quota_rules)
            self._quota_rules = [
                rule
                for rule in self._quota_rules
                if not (rule.id == rule_id and rule.event_id == event_id)
            ]
            return len(self._quota_rules) < before

    def save_zone_rule(
        self,
        event_id: EventId,
        match_field: MatchField,
        match_value: str,
        zone: str,
    ) -> ZoneRule:
        key = normalize_key(match_value)
        with self._mutex:
            for index, rule in enumerate(self._zone_rules):
                if (
                    rule.event_id == event_id
                    and rule.match_field is match_field
                    and rule.match_key == key
                ):
                    updated = replace(rule, match_value=match_value.strip(), zone=zone.strip())
                    self._zone_rules[index] = updated
                    return updated
            rule = ZoneRule(
                id=RuleId(uuid.uuid4()),
                event_id=event_id,
                match_field=match_field,
                match_value=match_value.strip(),
                zone=zone.strip(),
                created_at=_now(),
            )
            self._zone_rules.append(rule)
            return rule

    def delete_zone_rule(self, event_id: EventId, rule_id: RuleId) -> bool:
        with self._mutex:
            before = len(self._zone_rules)
            self._zone_rules = [
                rule
                for rule in self._zone_rules
                if not (rule.id == rule_id and rule.event_id == event_id)
            ]
            return len(self._zone_rules) < before

    def _key_lock(self, event_id: EventId, category: str) -> threading.Lock:
        key = (event_id, normalize_key(category))
        with self._mutex:
            return self._key_locks.setdefault(key, threading.Lock())

    @contextmanager
    def admission_scope(self, event_id: EventId, category: str) -> Iterator[None]:
        lock = self._key_lock(event_id, category)
        if not lock.acquire(timeout=self._lock_timeout_seconds):
            raise ContentionError(f"lock wait exceeded for {event_id}/{category!r}")
        self._scope.created = []
        try:
            yield
        except BaseException:
            with self._mutex:
                for registration_id in self._scope.created:
                    self._registrations.pop(registration_id, None)
            raise
        finally:
            self._scope.created = []
            lock.release()

    def create_registration(
        self,
        event_id: EventId,
        *,
        organization: str,
        category: str,
        cargo: str,
        zone: str | None,
        status: RegistrationStatus = RegistrationStatus.PENDING,
    ) -> Registration:
        registration = Registration(
            id=RegistrationId(uuid.uuid4()),
            event_id=event_id,
            organization=normalize_organization(organization),
            category=category.strip(),
            cargo=(cargo or "").strip(),
            status=status,
            zone=zone,
            created_at=_now(),
        )
        with self._mutex:
            self._registrations[registration.id] = registration
        created = getattr(self._scope, "created", None)
        if created is not None:
            created.append(registration.id)
        return registration

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        with self._mutex:
            return self._registrations.get(registration_id)

    def update_registration(
        self,
        registration_id: RegistrationId,
        *,
        status: RegistrationStatus | None = None,
        zone: str | None = None,
        expected_status: RegistrationStatus | None = None,
    ) -> Registration:
        with self._mutex:
            current = self._registrations.get(registration_id)
            if current is None:
                raise RegistrationNotFoundError(str(registration_id))
            if expected_status is not None and current.status is not expected_status:
                raise ContentionError(
                    f"registration {registration_id} is {current.status.value}, "
                    f"expected {expected_status.value}"
                )
            updated = replace(
                current,
                status=status if status is not None else current.status,
                zone=zone if zone is not None else current.zone,
            )
            self._registrations[registration_id] = updated
            return updated
