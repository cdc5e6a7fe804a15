"""Unit tests for zone resolution.

Run with: pytest tests/test_zone_resolver.py -v
"""

from accreditation.domain import Candidate, MatchField
from accreditation.services.zone_resolver import resolve
from tests.factories import make_zone_rule as zone_rule

RULES = [
    zone_rule(MatchField.CARGO, "Fotógrafo", "Cancha", 0),
    zone_rule(MatchField.TIPO_MEDIO, "TV", "Mixta", 1),
]


class TestResolve:
    """Tests for resolve()."""

    def test_first_rule_wins_across_fields(self):
        """A candidate matching both rules gets the earliest one."""
        candidate = Candidate(category="TV", cargo="Fotógrafo")
        assert resolve(RULES, candidate) == "Cancha"

    def test_matches_second_field_when_first_misses(self):
        candidate = Candidate(category="TV", cargo="Periodista")
        assert resolve(RULES, candidate) == "Mixta"

    def test_match_is_case_and_whitespace_insensitive(self):
        candidate = Candidate(category="radio", cargo="  FOTÓGRAFO ")
        assert resolve(RULES, candidate) == "Cancha"

    def test_no_match_returns_none(self):
        candidate = Candidate(category="Prensa Escrita", cargo="Periodista")
        assert resolve(RULES, candidate) is None

    def test_empty_rules_returns_none(self):
        assert resolve([], Candidate(category="TV", cargo="Fotógrafo")) is None

    def test_missing_cargo_never_matches(self):
        rules = [zone_rule(MatchField.CARGO, "Periodista", "Prensa")]
        assert resolve(rules, Candidate(category="TV", cargo=None)) is None

    def test_duplicate_rules_first_inserted_wins(self):
        rules = [
            zone_rule(MatchField.CARGO, "Periodista", "Tribuna", 0),
            zone_rule(MatchField.CARGO, "periodista", "Cancha", 5),
        ]
        assert resolve(rules, Candidate(category="Radial", cargo="Periodista")) == "Tribuna"

    def test_stored_order_beats_specificity(self):
        """Order decides, not which field is considered more specific."""
        rules = [
            zone_rule(MatchField.TIPO_MEDIO, "TV", "Mixta", 0),
            zone_rule(MatchField.CARGO, "Fotógrafo", "Cancha", 1),
        ]
        assert resolve(rules, Candidate(category="TV", cargo="Fotógrafo")) == "Mixta"

    def test_is_deterministic(self):
        candidate = Candidate(category="TV", cargo="Fotógrafo")
        results = {resolve(RULES, candidate) for _ in range(20)}
        assert results == {"Cancha"}
