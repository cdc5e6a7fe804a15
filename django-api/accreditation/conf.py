"""Engine settings, read from the ACCREDITATION dict in Django settings."""

from dataclasses import dataclass
from typing import Self

from django.conf import settings

from accreditation.domain import CountPolicy

DEFAULTS = {
    "COUNT_POLICY": CountPolicy.ALL.value,
    "MAX_ATTEMPTS": 3,
    "RETRY_BACKOFF_SECONDS": 0.05,
    "LOCK_TIMEOUT_SECONDS": 5.0,
    "ZONE_RULES_CACHE_TTL": 300,
}


@dataclass(frozen=True)
class AdmissionConfig:
    """Tunables for the admission engine."""

    count_policy: CountPolicy = CountPolicy.ALL
    max_attempts: int = 3
    retry_backoff_seconds: float = 0.05
    lock_timeout_seconds: float = 5.0
    zone_rules_cache_ttl: int = 300

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retry_backoff_seconds < 0:
            raise ValueError("retry_backoff_seconds cannot be negative")
        if self.lock_timeout_seconds <= 0:
            raise ValueError("lock_timeout_seconds must be positive")

    @classmethod
    def from_settings(cls) -> Self:
        values = {**DEFAULTS, **getattr(settings, "ACCREDITATION", {})}
        return cls(
            count_policy=CountPolicy(values["COUNT_POLICY"]),
            max_attempts=int(values["MAX_ATTEMPTS"]),
            retry_backoff_seconds=float(values["RETRY_BACKOFF_SECONDS"]),
            lock_timeout_seconds=float(values["LOCK_TIMEOUT_SECONDS"]),
            zone_rules_cache_ttl=int(values["ZONE_RULES_CACHE_TTL"]),
        )
