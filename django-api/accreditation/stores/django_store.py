"""Django ORM implementation of the rule and registration stores.

Admissions for one (event, category) serialize on row locks taken with
select_for_update() on that category's QuotaRule rows. Categories without
rules are unlimited and need no lock.
"""

import logging
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager

from django.core.cache import cache
from django.db import OperationalError, connection, transaction
from django.utils import timezone

from accreditation import models
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

logger = logging.getLogger(__name__)

RULE_ORDERING = ("created_at", "position")


def zone_rules_cache_key(event_id) -> str:
    return f"accreditation:{event_id}:zone_rules"


def _to_quota_rule(row: models.QuotaRule) -> QuotaRule:
    return QuotaRule(
        id=RuleId(row.id),
        event_id=EventId(row.event_id),
        category=row.category,
        max_per_organization=Capacity.optional(row.max_per_organization),
        max_global=Capacity.optional(row.max_global),
        priority=row.priority,
        created_at=row.created_at,
    )


def _to_zone_rule(row: models.ZoneRule) -> ZoneRule:
    return ZoneRule(
        id=RuleId(row.id),
        event_id=EventId(row.event_id),
        match_field=MatchField(row.match_field),
        match_value=row.match_value,
        zone=row.zone,
        created_at=row.created_at,
    )


def _to_registration(row: models.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        organization=row.organization,
        category=row.category,
        cargo=row.cargo,
        status=RegistrationStatus(row.status),
        zone=row.zone,
        created_at=row.created_at,
    )


def _counted(queryset, policy: CountPolicy):
    statuses = [status.value for status in policy.counted_statuses()]
    return queryset.filter(status__in=statuses)


class DjangoRuleStore(RuleStore):
    """Database-backed rule store using Django ORM."""

    def __init__(self, zone_rules_cache_ttl: int = 300) -> None:
        self._zone_rules_cache_ttl = zone_rules_cache_ttl

    def event_exists(self, event_id: EventId) -> bool:
        return models.Event.objects.filter(pk=event_id.value).exists()

    def get_quota_rules(self, event_id: EventId, category: str) -> list[QuotaRule]:
        rows = models.QuotaRule.objects.filter(
            event_id=event_id.value,
            category_key=normalize_key(category),
        ).order_by(*RULE_ORDERING)
        return [_to_quota_rule(row) for row in rows]

    def list_quota_rules(self, event_id: EventId) -> list[QuotaRule]:
        rows = models.QuotaRule.objects.filter(event_id=event_id.value).order_by(*RULE_ORDERING)
        return [_to_quota_rule(row) for row in rows]

    def get_zone_rules(self, event_id: EventId) -> list[ZoneRule]:
        key = zone_rules_cache_key(event_id)
        rules = cache.get(key)
        if rules is None:
            rows = models.ZoneRule.objects.filter(event_id=event_id.value).order_by(*RULE_ORDERING)
            rules = [_to_zone_rule(row) for row in rows]
            cache.set(key, rules, self._zone_rules_cache_ttl)
        return rules

    def count_registrations(
        self,
        event_id: EventId,
        category: str,
        organization: str | None = None,
        *,
        policy: CountPolicy = CountPolicy.ALL,
    ) -> int:
        queryset = models.Registration.objects.filter(
            event_id=event_id.value,
            category_key=normalize_key(category),
        )
        if organization is not None:
            queryset = queryset.filter(organization=normalize_organization(organization))
        return _counted(queryset, policy).count()

    def organization_counts(
        self,
        event_id: EventId,
        category: str,
        *,
        policy: CountPolicy = CountPolicy.ALL,
    ) -> dict[str, int]:
        queryset = models.Registration.objects.filter(
            event_id=event_id.value,
            category_key=normalize_key(category),
        )
        organizations = _counted(queryset, policy).values_list("organization", flat=True)
        return dict(Counter(organizations))

    def save_quota_rule(
        self,
        event_id: EventId,
        category: str,
        max_per_organization: int | None,
        max_global: int | None,
        priority: int = 0,
    ) -> QuotaRule:
        effective = self.get_quota_rule(event_id, category)
        if effective is None:
            row = models.QuotaRule(event_id=event_id.value, category=category)
        else:
            row = models.QuotaRule.objects.get(pk=effective.id.value)
            row.category = category
        row.max_per_organization = max_per_organization
        row.max_global = max_global
        row.priority = priority
        row.save()
        return _to_quota_rule(row)

    def delete_quota_rule(self, event_id: EventId, rule_id: RuleId) -> bool:
        deleted, _ = models.QuotaRule.objects.filter(
            pk=rule_id.value, event_id=event_id.value
        ).delete()
        return deleted > 0

    def save_zone_rule(
        self,
        event_id: EventId,
        match_field: MatchField,
        match_value: str,
        zone: str,
    ) -> ZoneRule:
        row = (
            models.ZoneRule.objects.filter(
                event_id=event_id.value,
                match_field=match_field.value,
                match_key=normalize_key(match_value),
            )
            .order_by(*RULE_ORDERING)
            .first()
        )
        if row is None:
            row = models.ZoneRule(event_id=event_id.value, match_field=match_field.value)
        row.match_value = match_value
        row.zone = zone.strip()
        row.save()
        return _to_zone_rule(row)

    def delete_zone_rule(self, event_id: EventId, rule_id: RuleId) -> bool:
        # Queryset.delete() still sends post_delete, which clears the cache.
        deleted, _ = models.ZoneRule.objects.filter(
            pk=rule_id.value, event_id=event_id.value
        ).delete()
        return deleted > 0


class DjangoRegistrationStore(RegistrationStore):
    """Database-backed registration store using Django ORM."""

    def __init__(self, lock_timeout_seconds: float = 5.0) -> None:
        self._lock_timeout_ms = max(1, int(lock_timeout_seconds * 1000))

    @contextmanager
    def admission_scope(self, event_id: EventId, category: str) -> Iterator[None]:
        try:
            with transaction.atomic():
                if connection.vendor == "postgresql":
                    with connection.cursor() as cursor:
                        cursor.execute(f"SET LOCAL lock_timeout = {self._lock_timeout_ms}")
                locked = list(
                    models.QuotaRule.objects.select_for_update()
                    .filter(event_id=event_id.value, category_key=normalize_key(category))
                    .order_by("pk")
                    .values_list("pk", flat=True)
                )
                logger.debug(
                    "Locked %d quota rule(s) for event %s category %r",
                    len(locked),
                    event_id,
                    category,
                )
                yield
        except OperationalError as exc:
            raise ContentionError(str(exc)) from exc

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
        row = models.Registration.objects.create(
            event_id=event_id.value,
            organization=organization,
            category=category.strip(),
            cargo=(cargo or "").strip(),
            status=status.value,
            zone=zone,
        )
        return _to_registration(row)

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        row = models.Registration.objects.filter(pk=registration_id.value).first()
        return _to_registration(row) if row else None

    def update_registration(
        self,
        registration_id: RegistrationId,
        *,
        status: RegistrationStatus | None = None,
        zone: str | None = None,
        expected_status: RegistrationStatus | None = None,
    ) -> Registration:
        queryset = models.Registration.objects.filter(pk=registration_id.value)
        if not queryset.exists():
            raise RegistrationNotFoundError(str(registration_id))
        if expected_status is not None:
            queryset = queryset.filter(status=expected_status.value)

        changes = {"updated_at": timezone.now()}
        if status is not None:
            changes["status"] = status.value
        if zone is not None:
            changes["zone"] = zone
        # Conditional UPDATE: a concurrent transition makes it match no rows.
        if not queryset.update(**changes):
            raise ContentionError(f"registration {registration_id} changed concurrently")
        return _to_registration(models.Registration.objects.get(pk=registration_id.value))
