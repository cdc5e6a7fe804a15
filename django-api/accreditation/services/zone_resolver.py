"""Zone resolution - maps a candidate's attributes to an access zone."""

from collections.abc import Iterable

from accreditation.domain import Candidate, ZoneRule, normalize_key


def resolve(zone_rules: Iterable[ZoneRule], candidate: Candidate) -> str | None:
    """Return the zone of the first rule the candidate matches.

    Rules are taken in stored order and each compares a single attribute,
    so a candidate matching several rules gets the earliest one. Returns
    None when nothing matches; the registration is then left without zone.
    """
    for rule in zone_rules:
        value = normalize_key(candidate.attribute(rule.match_field))
        if value and value == rule.match_key:
            return rule.zone
    return None
