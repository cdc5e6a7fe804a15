"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from accreditation.domain import (
    CountPolicy,
    EventId,
    MatchField,
    QuotaRule,
    Registration,
    RegistrationId,
    RegistrationStatus,
    RuleId,
    ZoneRule,
)
from accreditation.services.quota_evaluator import select_effective_rule


class RuleStore(ABC):
    """Interface for quota/zone rule access and registration counting.

    Unknown events yield empty results, never errors.
    """

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    def get_quota_rules(self, event_id: EventId, category: str) -> list[QuotaRule]:
        """Return every stored rule for the case-folded category."""
        ...

    def get_quota_rule(self, event_id: EventId, category: str) -> QuotaRule | None:
        """Return the effective rule for a category, or None if unconfigured."""
        return select_effective_rule(self.get_quota_rules(event_id, category))

    @abstractmethod
    def list_quota_rules(self, event_id: EventId) -> list[QuotaRule]:
        """Return all quota rules of an event in insertion order."""
        ...

    @abstractmethod
    def get_zone_rules(self, event_id: EventId) -> list[ZoneRule]:
        """Return zone rules in insertion order."""
        ...

    @abstractmethod
    def count_registrations(
        self,
        event_id: EventId,
        category: str,
        organization: str | None = None,
        *,
        policy: CountPolicy = CountPolicy.ALL,
    ) -> int:
        """Count registrations for a category.

        Without organization the count is global. With one, only rows whose
        stored organization equals it exactly are counted, and None or ""
        selects the shared bucket of organization-less rows.
        """
        ...

    @abstractmethod
    def organization_counts(
        self,
        event_id: EventId,
        category: str,
        *,
        policy: CountPolicy = CountPolicy.ALL,
    ) -> dict[str, int]:
        """Return registration counts per organization for a category."""
        ...

    @abstractmethod
    def save_quota_rule(
        self,
        event_id: EventId,
        category: str,
        max_per_organization: int | None,
        max_global: int | None,
        priority: int = 0,
    ) -> QuotaRule:
        """Update the effective rule for the category, or create one."""
        ...

    @abstractmethod
    def delete_quota_rule(self, event_id: EventId, rule_id: RuleId) -> bool:
        """Delete a quota rule. Returns False if it did not exist."""
        ...

    @abstractmethod
    def save_zone_rule(
        self,
        event_id: EventId,
        match_field: MatchField,
        match_value: str,
        zone: str,
    ) -> ZoneRule:
        """Update the first rule with the same field and value, or create one."""
        ...

    @abstractmethod
    def delete_zone_rule(self, event_id: EventId, rule_id: RuleId) -> bool:
        """Delete a zone rule. Returns False if it did not exist."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence and its transactional envelope."""

    @abstractmethod
    def admission_scope(
        self, event_id: EventId, category: str
    ) -> AbstractContextManager[None]:
        """Serialize admissions for one (event, category) key.

        Counts read and registrations written inside the scope form one
        atomic unit. Raises ContentionError if the scope cannot be entered
        or committed in time.
        """
        ...

    @abstractmethod
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
        """Persist a new registration and return it."""
        ...

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        ...

    @abstractmethod
    def update_registration(
        self,
        registration_id: RegistrationId,
        *,
        status: RegistrationStatus | None = None,
        zone: str | None = None,
        expected_status: RegistrationStatus | None = None,
    ) -> Registration:
        """Update status and/or zone of an existing registration.

        With expected_status the write only happens if the stored status
        still equals it; otherwise ContentionError is raised.
        """
        ...
