"""Quota evaluation - pure decision functions, no I/O.

Counts handed to evaluate() are counts of existing registrations, taken
before the candidate is stored. A ceiling of N therefore admits while
current < N, so the resulting count never exceeds N.
"""

from collections.abc import Iterable

from accreditation.domain import DenialReason, QuotaDecision, QuotaRule

ADMITTED = QuotaDecision(admitted=True)


def select_effective_rule(rules: Iterable[QuotaRule]) -> QuotaRule | None:
    """Return the rule that governs a category, or None if there are none.

    Lowest priority wins. Among equal priorities the most recently created
    rule wins, and if creation times also tie the one listed last wins.
    """
    effective: QuotaRule | None = None
    for rule in rules:
        if effective is None:
            effective = rule
        elif rule.priority < effective.priority:
            effective = rule
        elif rule.priority == effective.priority and rule.created_at >= effective.created_at:
            effective = rule
    return effective


def evaluate(
    rule: QuotaRule | None,
    current_org_count: int,
    current_global_count: int,
) -> QuotaDecision:
    """Decide whether one more registration fits under the rule.

    The global ceiling is checked first so that a request failing both
    limits reports the global one.
    """
    if rule is None:
        return ADMITTED

    if rule.max_global is not None and current_global_count >= rule.max_global.value:
        return QuotaDecision(admitted=False, reason=DenialReason.GLOBAL_QUOTA_EXCEEDED)

    if (
        rule.max_per_organization is not None
        and current_org_count >= rule.max_per_organization.value
    ):
        return QuotaDecision(admitted=False, reason=DenialReason.ORG_QUOTA_EXCEEDED)

    return ADMITTED
