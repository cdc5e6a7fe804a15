from accreditation.domain.enums import (
    CountPolicy,
    DenialReason,
    MatchField,
    RegistrationStatus,
)
from accreditation.domain.models import (
    AdmissionResult,
    Candidate,
    QuotaCheck,
    QuotaDecision,
    QuotaRule,
    QuotaUsage,
    Registration,
    StatusChange,
    ZoneRule,
)
from accreditation.domain.value_objects import (
    Capacity,
    EventId,
    RegistrationId,
    RuleId,
    normalize_key,
    normalize_organization,
)

__all__ = [
    "AdmissionResult",
    "Candidate",
    "QuotaCheck",
    "QuotaDecision",
    "QuotaRule",
    "QuotaUsage",
    "Registration",
    "StatusChange",
    "ZoneRule",
    "CountPolicy",
    "DenialReason",
    "MatchField",
    "RegistrationStatus",
    "Capacity",
    "EventId",
    "RegistrationId",
    "RuleId",
    "normalize_key",
    "normalize_organization",
]
