"""Rule management for the admin tool: quota rules, zone rules and usage."""

import logging

from accreditation.conf import AdmissionConfig
from accreditation.domain import (
    Candidate,
    EventId,
    MatchField,
    QuotaRule,
    QuotaUsage,
    ZoneRule,
)
from accreditation.domain.errors import EventNotFoundError, InvalidRuleError, RuleNotFoundError
from accreditation.services.identifiers import parse_event_id, parse_rule_id
from accreditation.services.zone_resolver import resolve
from accreditation.stores.interfaces import RuleStore

logger = logging.getLogger(__name__)


def _validate_limit(name: str, value: int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidRuleError(f"{name} must be a non-negative integer or null")


class RuleService:
    """Service for configuring quota and zone rules of an event."""

    def __init__(self, rules: RuleStore, config: AdmissionConfig | None = None) -> None:
        self._rules = rules
        self._config = config or AdmissionConfig()

    def _require_event(self, event_id: str | EventId) -> EventId:
        event = parse_event_id(event_id)
        if not self._rules.event_exists(event):
            raise EventNotFoundError(str(event))
        return event

    def list_quota_rules(self, event_id: str) -> list[QuotaRule]:
        return self._rules.list_quota_rules(self._require_event(event_id))

    def save_quota_rule(
        self,
        event_id: str,
        category: str,
        max_per_organization: int | None = None,
        max_global: int | None = None,
        priority: int = 0,
    ) -> QuotaRule:
        """Create or update the effective quota rule of a category.

        Raises:
            InvalidRuleError: If the category is empty or a limit is negative.
        """
        event = self._require_event(event_id)
        category = (category or "").strip()
        if not category:
            raise InvalidRuleError("Category is required")
        _validate_limit("max_per_organization", max_per_organization)
        _validate_limit("max_global", max_global)
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidRuleError("priority must be an integer")

        rule = self._rules.save_quota_rule(
            event, category, max_per_organization, max_global, priority
        )
        logger.info(
            "Saved quota rule %s for event %s: %r org=%s global=%s priority=%d",
            rule.id,
            event,
            rule.category,
            max_per_organization,
            max_global,
            priority,
        )
        return rule

    def delete_quota_rule(self, event_id: str, rule_id: str) -> None:
        event = self._require_event(event_id)
        rule = parse_rule_id(rule_id)
        if not self._rules.delete_quota_rule(event, rule):
            raise RuleNotFoundError(str(rule))
        logger.info("Deleted quota rule %s of event %s", rule, event)

    def list_zone_rules(self, event_id: str) -> list[ZoneRule]:
        return self._rules.get_zone_rules(self._require_event(event_id))

    def save_zone_rule(
        self,
        event_id: str,
        match_field: MatchField | str,
        match_value: str,
        zone: str,
    ) -> ZoneRule:
        """Create or update the zone rule for a (match_field, match_value) pair."""
        event = self._require_event(event_id)
        if not isinstance(match_field, MatchField):
            try:
                match_field = MatchField(match_field)
            except ValueError as exc:
                raise InvalidRuleError(f"Unknown match field {match_field!r}") from exc
        match_value = (match_value or "").strip()
        zone = (zone or "").strip()
        if not match_value or not zone:
            raise InvalidRuleError("match_value and zone are required")

        rule = self._rules.save_zone_rule(event, match_field, match_value, zone)
        logger.info(
            "Saved zone rule %s for event %s: %s=%r -> %r",
            rule.id,
            event,
            match_field.value,
            match_value,
            zone,
        )
        return rule

    def delete_zone_rule(self, event_id: str, rule_id: str) -> None:
        event = self._require_event(event_id)
        rule = parse_rule_id(rule_id)
        if not self._rules.delete_zone_rule(event, rule):
            raise RuleNotFoundError(str(rule))
        logger.info("Deleted zone rule %s of event %s", rule, event)

    def quota_usage(self, event_id: str) -> list[QuotaUsage]:
        """Return current consumption of every configured category."""
        event = self._require_event(event_id)
        policy = self._config.count_policy
        categories: dict[str, str] = {}
        for rule in self._rules.list_quota_rules(event):
            categories.setdefault(rule.category_key, rule.category)

        usage = []
        for category in categories.values():
            rule = self._rules.get_quota_rule(event, category)
            org_counts = self._rules.organization_counts(event, category, policy=policy)
            usage.append(
                QuotaUsage(
                    rule=rule,
                    global_count=sum(org_counts.values()),
                    organization_counts=org_counts,
                )
            )
        return usage

    def preview_zone(
        self,
        event_id: str,
        cargo: str | None = None,
        tipo_medio: str | None = None,
    ) -> str | None:
        """Return the zone a candidate with these attributes would get."""
        event = self._require_event(event_id)
        candidate = Candidate(category=tipo_medio or "", cargo=cargo)
        return resolve(self._rules.get_zone_rules(event), candidate)
