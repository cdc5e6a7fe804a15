"""Admission service - the atomic unit of work for creating registrations.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Quota denials are returned as data, never raised. Contention inside the
store's admission scope is retried with exponential backoff and, once the
attempts are used up, reported as a TRANSIENT_CONTENTION denial so the
request fails closed.
"""

import logging
import time
from collections.abc import Callable, Iterable
from typing import TypeVar

from accreditation.conf import AdmissionConfig
from accreditation.domain import (
    AdmissionResult,
    Candidate,
    DenialReason,
    EventId,
    QuotaCheck,
    Registration,
    RegistrationStatus,
    StatusChange,
)
from accreditation.domain.errors import (
    ContentionError,
    EventNotFoundError,
    InvalidInputError,
    InvalidStatusTransitionError,
    RegistrationNotFoundError,
)
from accreditation.services.identifiers import parse_event_id, parse_registration_id
from accreditation.services.quota_evaluator import evaluate
from accreditation.services.zone_resolver import resolve
from accreditation.stores.interfaces import RegistrationStore, RuleStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALLOWED_TRANSITIONS: dict[RegistrationStatus, frozenset[RegistrationStatus]] = {
    RegistrationStatus.PENDING: frozenset(
        {RegistrationStatus.APPROVED, RegistrationStatus.REJECTED, RegistrationStatus.CANCELLED}
    ),
    RegistrationStatus.APPROVED: frozenset(
        {RegistrationStatus.REJECTED, RegistrationStatus.CANCELLED}
    ),
    RegistrationStatus.REJECTED: frozenset(
        {RegistrationStatus.PENDING, RegistrationStatus.APPROVED}
    ),
    RegistrationStatus.CANCELLED: frozenset({RegistrationStatus.PENDING}),
}


class AdmissionService:
    """Service for admitting registrations under quota and assigning zones."""

    def __init__(
        self,
        rules: RuleStore,
        registrations: RegistrationStore,
        config: AdmissionConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._rules = rules
        self._registrations = registrations
        self._config = config or AdmissionConfig()
        self._sleep = sleep

    def admit(self, event_id: str | EventId, candidate: Candidate) -> AdmissionResult:
        """Admit one candidate.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            InvalidInputError: If the candidate has no category.
        """
        event = self._require_event(event_id)
        return self._admit_with_retry(event, candidate)

    def admit_batch(
        self, event_id: str | EventId, candidates: Iterable[Candidate]
    ) -> list[AdmissionResult]:
        """Admit candidates one transaction at a time, in input order.

        Each admission commits before the next starts, so a batch that
        exceeds a quota partway through is denied from that point on.
        """
        event = self._require_event(event_id)
        candidates = list(candidates)
        for candidate in candidates:
            self._validate(candidate)

        results = [self._admit_with_retry(event, candidate) for candidate in candidates]
        admitted = sum(1 for result in results if result.admitted)
        logger.info(
            "Batch admission for event %s: %d admitted, %d denied",
            event,
            admitted,
            len(results) - admitted,
        )
        return results

    def check_quota(self, event_id: str | EventId, candidate: Candidate) -> QuotaCheck:
        """Preview the quota decision for a candidate without writing anything.

        The answer can be stale by the time the candidate is submitted; only
        admit() is authoritative.
        """
        event = self._require_event(event_id)
        self._validate(candidate)
        return self._check(event, candidate)

    def update_registration(
        self,
        registration_id: str,
        *,
        status: RegistrationStatus | str | None = None,
        zone: str | None = None,
    ) -> StatusChange:
        """Apply a status change and/or a manual zone assignment as one unit.

        The registration is re-read and the transition re-checked inside the
        admission scope of its category, and the write only lands if the
        stored status is still the one that was checked. A registration
        returning from a status that does not consume quota to one that does
        is re-checked against the quota. A denied change leaves the zone
        untouched too.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
            InvalidStatusTransitionError: If the transition is not allowed.
            InvalidInputError: If the status is unknown, the zone is blank or
                nothing was requested.
        """
        requested = None if status is None else self._parse_status(status)
        if zone is not None:
            zone = zone.strip()
            if not zone:
                raise InvalidInputError("Zone cannot be empty")
        if requested is None and zone is None:
            raise InvalidInputError("Provide status and/or zone")

        registration = self._get_registration(registration_id)
        return self._with_retry(
            lambda: self._update_once(registration, requested, zone),
            on_exhausted=lambda: StatusChange(
                applied=False,
                registration=registration,
                reason=DenialReason.TRANSIENT_CONTENTION,
            ),
            context=f"update of registration {registration.id}",
        )

    def change_status(
        self, registration_id: str, status: RegistrationStatus | str
    ) -> StatusChange:
        """Move a registration through the approval workflow."""
        return self.update_registration(registration_id, status=status)

    def assign_zone(self, registration_id: str, zone: str) -> Registration:
        """Manually assign a zone, typically to a registration left without one.

        Raises:
            ContentionError: If the registration stayed locked through every retry.
        """
        change = self.update_registration(registration_id, zone=zone or "")
        if not change.applied:
            raise ContentionError(f"zone assignment of {change.registration.id} timed out")
        return change.registration

    def _require_event(self, event_id: str | EventId) -> EventId:
        event = parse_event_id(event_id)
        if not self._rules.event_exists(event):
            raise EventNotFoundError(str(event))
        return event

    def _get_registration(self, registration_id: str) -> Registration:
        parsed = parse_registration_id(registration_id)
        registration = self._registrations.get_registration(parsed)
        if registration is None:
            raise RegistrationNotFoundError(str(parsed))
        return registration

    @staticmethod
    def _validate(candidate: Candidate) -> None:
        if not candidate.category_key:
            raise InvalidInputError("Category is required")

    @staticmethod
    def _parse_status(status: RegistrationStatus | str) -> RegistrationStatus:
        if isinstance(status, RegistrationStatus):
            return status
        try:
            return RegistrationStatus(status)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown status {status!r}") from exc

    @staticmethod
    def _ensure_transition(current: RegistrationStatus, requested: RegistrationStatus) -> None:
        if requested not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(current.value, requested.value)

    def _check(self, event: EventId, candidate: Candidate) -> QuotaCheck:
        rule = self._rules.get_quota_rule(event, candidate.category)
        policy = self._config.count_policy
        global_count = self._rules.count_registrations(event, candidate.category, policy=policy)
        org_count = self._rules.count_registrations(
            event, candidate.category, candidate.organization_key, policy=policy
        )
        return QuotaCheck(
            decision=evaluate(rule, org_count, global_count),
            rule=rule,
            organization_count=org_count,
            global_count=global_count,
        )

    def _admit_with_retry(self, event: EventId, candidate: Candidate) -> AdmissionResult:
        self._validate(candidate)
        return self._with_retry(
            lambda: self._admit_once(event, candidate),
            on_exhausted=lambda: AdmissionResult.denied(DenialReason.TRANSIENT_CONTENTION),
            context=f"admission to event {event} category {candidate.category!r}",
        )

    def _admit_once(self, event: EventId, candidate: Candidate) -> AdmissionResult:
        with self._registrations.admission_scope(event, candidate.category):
            check = self._check(event, candidate)
            if not check.decision.admitted:
                logger.info(
                    "Admission denied for event %s category %r organization %r: %s",
                    event,
                    candidate.category,
                    candidate.organization_key,
                    check.decision.reason.value,
                )
                return AdmissionResult.denied(check.decision.reason)

            zone = resolve(self._rules.get_zone_rules(event), candidate)
            registration = self._registrations.create_registration(
                event,
                organization=candidate.organization_key,
                category=candidate.category,
                cargo=candidate.cargo or "",
                zone=zone,
            )

        logger.info(
            "Admitted registration %s for event %s category %r zone %r",
            registration.id,
            event,
            candidate.category,
            zone,
        )
        return AdmissionResult(
            admitted=True,
            assigned_zone=zone,
            registration_id=registration.id,
        )

    def _update_once(
        self,
        registration: Registration,
        requested: RegistrationStatus | None,
        zone: str | None,
    ) -> StatusChange:
        with self._registrations.admission_scope(registration.event_id, registration.category):
            current = self._registrations.get_registration(registration.id)
            if current is None:
                raise RegistrationNotFoundError(str(registration.id))
            if requested is current.status:
                requested = None

            if requested is not None:
                self._ensure_transition(current.status, requested)
                policy = self._config.count_policy
                if policy.counts(requested) and not policy.counts(current.status):
                    check = self._check(current.event_id, current.as_candidate())
                    if not check.decision.admitted:
                        logger.info(
                            "Status change of %s to %s denied: %s",
                            current.id,
                            requested.value,
                            check.decision.reason.value,
                        )
                        return StatusChange(
                            applied=False,
                            registration=current,
                            reason=check.decision.reason,
                        )

            if requested is None and zone is None:
                return StatusChange(applied=True, registration=current)
            updated = self._registrations.update_registration(
                current.id,
                status=requested,
                zone=zone,
                expected_status=current.status,
            )

        if requested is not None:
            logger.info(
                "Registration %s moved from %s to %s",
                current.id,
                current.status.value,
                requested.value,
            )
        if zone is not None:
            logger.info("Registration %s assigned to zone %r", current.id, zone)
        return StatusChange(applied=True, registration=updated)

    def _with_retry(
        self,
        work: Callable[[], T],
        *,
        on_exhausted: Callable[[], T],
        context: str,
    ) -> T:
        attempts = self._config.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                return work()
            except ContentionError as exc:
                if attempt == attempts:
                    logger.error(
                        "Giving up on %s after %d attempts: %s",
                        context,
                        attempts,
                        exc.detail,
                    )
                    return on_exhausted()
                delay = self._config.retry_backoff_seconds * 2 ** (attempt - 1)
                logger.warning(
                    "Contention on %s (attempt %d/%d), retrying in %.3fs",
                    context,
                    attempt,
                    attempts,
                    delay,
                )
                self._sleep(delay)

        # Unreachable, but keeps type-checkers happy
        raise RuntimeError(f"Retry loop exited without result for {context}")
