"""Domain models representing persisted state and admission outcomes.

These are pure domain objects with no API input rules.
Django ORM models are in accreditation/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime

from accreditation.domain.enums import (
    DenialReason,
    MatchField,
    RegistrationStatus,
)
from accreditation.domain.value_objects import (
    Capacity,
    EventId,
    RegistrationId,
    RuleId,
    normalize_key,
    normalize_organization,
)


@dataclass(frozen=True)
class QuotaRule:
    """Per-category admission limits for one event."""

    id: RuleId
    event_id: EventId
    category: str
    max_per_organization: Capacity | None
    max_global: Capacity | None
    priority: int
    created_at: datetime

    @property
    def category_key(self) -> str:
        return normalize_key(self.category)


@dataclass(frozen=True)
class ZoneRule:
    """Maps one candidate attribute value to an access zone."""

    id: RuleId
    event_id: EventId
    match_field: MatchField
    match_value: str
    zone: str
    created_at: datetime

    @property
    def match_key(self) -> str:
        return normalize_key(self.match_value)


@dataclass(frozen=True)
class Candidate:
    """A registration request awaiting admission."""

    category: str
    organization: str | None = None
    cargo: str | None = None

    @property
    def category_key(self) -> str:
        return normalize_key(self.category)

    @property
    def organization_key(self) -> str:
        return normalize_organization(self.organization)

    @property
    def tipo_medio(self) -> str:
        return self.category

    def attribute(self, match_field: MatchField) -> str | None:
        if match_field is MatchField.CARGO:
            return self.cargo
        return self.tipo_medio


@dataclass(frozen=True)
class Registration:
    """Domain representation of a persisted Registration."""

    id: RegistrationId
    event_id: EventId
    organization: str
    category: str
    cargo: str
    status: RegistrationStatus
    zone: str | None
    created_at: datetime

    def as_candidate(self) -> Candidate:
        return Candidate(
            category=self.category,
            organization=self.organization,
            cargo=self.cargo,
        )


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of evaluating a quota rule against current counts."""

    admitted: bool
    reason: DenialReason | None = None


@dataclass(frozen=True)
class QuotaCheck:
    """Quota decision together with the numbers that produced it."""

    decision: QuotaDecision
    rule: QuotaRule | None
    organization_count: int
    global_count: int


@dataclass(frozen=True)
class QuotaUsage:
    """Current consumption of one effective quota rule."""

    rule: QuotaRule
    global_count: int
    organization_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AdmissionResult:
    """Return value of an admission attempt. Never persisted."""

    admitted: bool
    reason: DenialReason | None = None
    assigned_zone: str | None = None
    registration_id: RegistrationId | None = None

    @classmethod
    def denied(cls, reason: DenialReason) -> "AdmissionResult":
        return cls(admitted=False, reason=reason)


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a status transition request."""

    applied: bool
    registration: Registration
    reason: DenialReason | None = None
