"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache

from accreditation.domain import Candidate, EventId, MatchField
from accreditation.models import Event, ZoneRule
from accreditation.services.admission_service import AdmissionService
from accreditation.stores.django_store import (
    DjangoRegistrationStore,
    DjangoRuleStore,
    zone_rules_cache_key,
)


@pytest.mark.django_db
class TestZoneRuleCache:
    """Tests for caching and invalidation of an event's zone rules."""

    def test_get_zone_rules_populates_cache(self, event):
        ZoneRule.objects.create(event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha")
        store = DjangoRuleStore()

        rules = store.get_zone_rules(EventId(event.id))

        assert cache.get(zone_rules_cache_key(event.id)) == rules

    def test_cached_rules_are_served_without_query(self, event, django_assert_num_queries):
        ZoneRule.objects.create(event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha")
        store = DjangoRuleStore()
        store.get_zone_rules(EventId(event.id))

        with django_assert_num_queries(0):
            rules = store.get_zone_rules(EventId(event.id))

        assert [rule.zone for rule in rules] == ["Cancha"]

    def test_zone_rule_save_invalidates_cache(self, event):
        """Saving a zone rule invalidates the accreditation:{id}:zone_rules key."""
        store = DjangoRuleStore()
        store.get_zone_rules(EventId(event.id))

        ZoneRule.objects.create(event=event, match_field="tipo_medio", match_value="TV", zone="Mixta")

        assert cache.get(zone_rules_cache_key(event.id)) is None
        assert [rule.zone for rule in store.get_zone_rules(EventId(event.id))] == ["Mixta"]

    def test_zone_rule_update_invalidates_cache(self, event):
        rule = ZoneRule.objects.create(
            event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha"
        )
        store = DjangoRuleStore()
        store.get_zone_rules(EventId(event.id))

        rule.zone = "Tribuna"
        rule.save()

        assert [r.zone for r in store.get_zone_rules(EventId(event.id))] == ["Tribuna"]

    def test_zone_rule_delete_invalidates_cache(self, event):
        """Queryset deletes fire post_delete too."""
        ZoneRule.objects.create(event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha")
        store = DjangoRuleStore()
        store.get_zone_rules(EventId(event.id))

        ZoneRule.objects.filter(event=event).delete()

        assert store.get_zone_rules(EventId(event.id)) == []

    def test_event_delete_invalidates_cache(self, event):
        """Cascaded zone rule deletes clear the cached list."""
        ZoneRule.objects.create(event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha")
        store = DjangoRuleStore()
        event_id = event.id
        store.get_zone_rules(EventId(event_id))

        event.delete()

        assert cache.get(zone_rules_cache_key(event_id)) is None

    def test_other_events_keep_their_cache(self, event):
        other = Event.objects.create(tenant="club-deportivo", name="Final de Copa")
        store = DjangoRuleStore()
        store.get_zone_rules(EventId(other.id))

        ZoneRule.objects.create(event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha")

        assert cache.get(zone_rules_cache_key(other.id)) == []

    def test_admission_sees_new_rule_immediately(self, event):
        service = AdmissionService(DjangoRuleStore(), DjangoRegistrationStore())
        candidate = Candidate(category="TV", organization="Canal 13", cargo="Fotógrafo")
        assert service.admit(str(event.id), candidate).assigned_zone is None

        DjangoRuleStore().save_zone_rule(EventId(event.id), MatchField.CARGO, "Fotógrafo", "Cancha")

        assert service.admit(str(event.id), candidate).assigned_zone == "Cancha"
