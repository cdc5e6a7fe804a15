"""Enumerations shared by the domain, stores and handlers."""

from enum import Enum


class MatchField(Enum):
    """Candidate attribute a zone rule is matched against."""

    CARGO = "cargo"
    TIPO_MEDIO = "tipo_medio"


class RegistrationStatus(Enum):
    """Lifecycle of a registration in the approval workflow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class DenialReason(Enum):
    """Why an admission attempt did not create a registration."""

    GLOBAL_QUOTA_EXCEEDED = "GLOBAL_QUOTA_EXCEEDED"
    ORG_QUOTA_EXCEEDED = "ORG_QUOTA_EXCEEDED"
    TRANSIENT_CONTENTION = "TRANSIENT_CONTENTION"


class CountPolicy(Enum):
    """Which existing registrations consume quota."""

    ALL = "all"
    ACTIVE = "active"

    def counted_statuses(self) -> frozenset[RegistrationStatus]:
        if self is CountPolicy.ALL:
            return frozenset(RegistrationStatus)
        return frozenset({RegistrationStatus.PENDING, RegistrationStatus.APPROVED})

    def counts(self, status: RegistrationStatus) -> bool:
        return status in self.counted_statuses()
