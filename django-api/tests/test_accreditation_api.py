"""Integration tests for the accreditation HTTP API.

Run with: pytest tests/test_accreditation_api.py -v
"""

from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from accreditation import models

PRENSA = "Prensa Escrita"


def registrations_url(event) -> str:
    return f"/api/events/{event.id}/registrations"


@pytest.fixture
def prensa_quota(event):
    return models.QuotaRule.objects.create(
        event=event, category=PRENSA, max_per_organization=2, max_global=5
    )


@pytest.mark.django_db
class TestRegistrationCreate:
    """Tests for POST /api/events/{id}/registrations"""

    def test_admitted_returns_201(self, api_client: APIClient, event, prensa_quota):
        """Given quota available, returns the new registration with its zone."""
        models.ZoneRule.objects.create(
            event=event, match_field="cargo", match_value="Periodista", zone="Tribuna de Prensa"
        )

        response = api_client.post(
            registrations_url(event),
            {"category": PRENSA, "organization": "El Diario", "cargo": "Periodista"},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["admitted"] is True
        assert data["reason"] is None
        assert data["assigned_zone"] == "Tribuna de Prensa"
        assert models.Registration.objects.filter(pk=data["registration_id"]).exists()

    def test_org_quota_exceeded_returns_409(self, api_client: APIClient, event, prensa_quota):
        payload = {"category": PRENSA, "organization": "El Diario"}
        api_client.post(registrations_url(event), payload, format="json")
        api_client.post(registrations_url(event), payload, format="json")

        response = api_client.post(registrations_url(event), payload, format="json")

        assert response.status_code == 409
        assert response.json() == {
            "admitted": False,
            "reason": "ORG_QUOTA_EXCEEDED",
            "assigned_zone": None,
            "registration_id": None,
        }

    def test_unconfigured_category_is_unlimited(self, api_client: APIClient, event):
        for _ in range(3):
            response = api_client.post(
                registrations_url(event), {"category": "Invitado Especial"}, format="json"
            )
            assert response.status_code == 201

    def test_missing_category_returns_400(self, api_client: APIClient, event):
        response = api_client.post(
            registrations_url(event), {"organization": "El Diario"}, format="json"
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "category" in error["fields"]

    def test_event_not_found_returns_404(self, api_client: APIClient, db):
        response = api_client.post(
            f"/api/events/{uuid4()}/registrations", {"category": PRENSA}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "UNKNOWN_EVENT"

    def test_invalid_event_id_returns_400(self, api_client: APIClient, db):
        response = api_client.post(
            "/api/events/not-a-uuid/registrations", {"category": PRENSA}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_EVENT_ID"


@pytest.mark.django_db
class TestBulkRegistration:
    """Tests for POST /api/events/{id}/registrations/bulk"""

    def test_bulk_import_is_cut_off_at_quota(self, api_client: APIClient, event, prensa_quota):
        payload = {
            "registrations": [
                {"category": PRENSA, "organization": "El Diario"},
                {"category": PRENSA, "organization": "El Diario"},
                {"category": PRENSA, "organization": "El Diario"},
                {"category": PRENSA, "organization": "La Tercera"},
            ]
        }

        response = api_client.post(f"{registrations_url(event)}/bulk", payload, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["admitted"] == 3
        assert data["denied"] == 1
        assert [r["reason"] for r in data["results"]] == [
            None,
            None,
            "ORG_QUOTA_EXCEEDED",
            None,
        ]

    def test_empty_bulk_returns_400(self, api_client: APIClient, event):
        response = api_client.post(
            f"{registrations_url(event)}/bulk", {"registrations": []}, format="json"
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestRegistrationUpdate:
    """Tests for PATCH /api/registrations/{id}"""

    def create(self, api_client, event, **payload):
        payload.setdefault("category", PRENSA)
        response = api_client.post(registrations_url(event), payload, format="json")
        return response.json()["registration_id"]

    def test_approve(self, api_client: APIClient, event):
        registration_id = self.create(api_client, event, organization="El Diario")

        response = api_client.patch(
            f"/api/registrations/{registration_id}", {"status": "approved"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["applied"] is True
        assert response.json()["registration"]["status"] == "approved"

    def test_assign_zone(self, api_client: APIClient, event):
        registration_id = self.create(api_client, event, cargo="Chofer")

        response = api_client.patch(
            f"/api/registrations/{registration_id}", {"zone": "Estacionamiento"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["registration"]["zone"] == "Estacionamiento"

    def test_invalid_transition_returns_400(self, api_client: APIClient, event):
        registration_id = self.create(api_client, event)
        url = f"/api/registrations/{registration_id}"
        api_client.patch(url, {"status": "cancelled"}, format="json")

        response = api_client.patch(url, {"status": "approved"}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_readmission_denied_returns_409(self, api_client: APIClient, event, settings):
        settings.ACCREDITATION = {"COUNT_POLICY": "active"}
        models.QuotaRule.objects.create(event=event, category=PRENSA, max_global=1)
        first = self.create(api_client, event, organization="A")
        api_client.patch(f"/api/registrations/{first}", {"status": "rejected"}, format="json")
        self.create(api_client, event, organization="B")

        response = api_client.patch(
            f"/api/registrations/{first}", {"status": "pending"}, format="json"
        )

        assert response.status_code == 409
        data = response.json()
        assert data["applied"] is False
        assert data["reason"] == "GLOBAL_QUOTA_EXCEEDED"
        assert data["registration"]["status"] == "rejected"

    def test_invalid_status_with_zone_leaves_zone_unchanged(self, api_client: APIClient, event):
        """A rejected status change must not leave the zone half-applied."""
        registration_id = self.create(api_client, event, cargo="Chofer")
        url = f"/api/registrations/{registration_id}"
        api_client.patch(url, {"status": "approved"}, format="json")

        response = api_client.patch(url, {"zone": "Cancha", "status": "pending"}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"
        row = models.Registration.objects.get(pk=registration_id)
        assert row.zone is None
        assert row.status == "approved"

    def test_denied_status_with_zone_leaves_zone_unchanged(
        self, api_client: APIClient, event, settings
    ):
        settings.ACCREDITATION = {"COUNT_POLICY": "active"}
        models.QuotaRule.objects.create(event=event, category=PRENSA, max_global=1)
        first = self.create(api_client, event, organization="A", cargo="Chofer")
        api_client.patch(f"/api/registrations/{first}", {"status": "rejected"}, format="json")
        self.create(api_client, event, organization="B")

        response = api_client.patch(
            f"/api/registrations/{first}", {"zone": "Cancha", "status": "pending"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["registration"]["zone"] is None
        assert models.Registration.objects.get(pk=first).zone is None

    def test_status_and_zone_applied_together(self, api_client: APIClient, event):
        registration_id = self.create(api_client, event, cargo="Chofer")

        response = api_client.patch(
            f"/api/registrations/{registration_id}",
            {"zone": "Estacionamiento", "status": "approved"},
            format="json",
        )

        assert response.status_code == 200
        registration = response.json()["registration"]
        assert (registration["status"], registration["zone"]) == ("approved", "Estacionamiento")

    def test_empty_body_returns_400(self, api_client: APIClient, event):
        registration_id = self.create(api_client, event)
        response = api_client.patch(f"/api/registrations/{registration_id}", {}, format="json")
        assert response.status_code == 400

    def test_not_found_returns_404(self, api_client: APIClient, db):
        response = api_client.patch(
            f"/api/registrations/{uuid4()}", {"status": "approved"}, format="json"
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "REGISTRATION_NOT_FOUND"


@pytest.mark.django_db
class TestQuotaRules:
    """Tests for /api/events/{id}/quotas"""

    def test_create_quota_rule(self, api_client: APIClient, event):
        response = api_client.post(
            f"/api/events/{event.id}/quotas",
            {"category": "TV", "max_per_organization": None, "max_global": 3},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["category"] == "TV"
        assert data["max_per_organization"] is None
        assert data["max_global"] == 3
        assert data["priority"] == 0

    def test_negative_limit_returns_400(self, api_client: APIClient, event):
        response = api_client.post(
            f"/api/events/{event.id}/quotas",
            {"category": "TV", "max_global": -1},
            format="json",
        )
        assert response.status_code == 400

    def test_usage(self, api_client: APIClient, event, prensa_quota):
        for organization in ["El Diario", "El Diario", "La Tercera"]:
            api_client.post(
                registrations_url(event),
                {"category": PRENSA, "organization": organization},
                format="json",
            )

        response = api_client.get(f"/api/events/{event.id}/quotas")

        assert response.status_code == 200
        [usage] = response.json()
        assert usage["rule"]["category"] == PRENSA
        assert usage["used_global"] == 3
        assert usage["used_by_organization"] == {"El Diario": 2, "La Tercera": 1}

    def test_check_quota(self, api_client: APIClient, event, prensa_quota):
        api_client.post(
            registrations_url(event),
            {"category": PRENSA, "organization": "El Diario"},
            format="json",
        )

        response = api_client.get(
            f"/api/events/{event.id}/quotas",
            {"category": PRENSA, "organization": "El Diario"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "available": True,
            "reason": None,
            "used_org": 1,
            "max_org": 2,
            "used_global": 1,
            "max_global": 5,
        }

    def test_delete_quota_rule(self, api_client: APIClient, event, prensa_quota):
        response = api_client.delete(f"/api/events/{event.id}/quotas/{prensa_quota.id}")

        assert response.status_code == 204
        assert not models.QuotaRule.objects.exists()

    def test_delete_unknown_quota_rule_returns_404(self, api_client: APIClient, event):
        response = api_client.delete(f"/api/events/{event.id}/quotas/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RULE_NOT_FOUND"


@pytest.mark.django_db
class TestZoneRules:
    """Tests for /api/events/{id}/zones"""

    def test_create_and_list_zone_rules(self, api_client: APIClient, event):
        url = f"/api/events/{event.id}/zones"
        api_client.post(
            url, {"match_field": "cargo", "match_value": "Fotógrafo", "zone": "Cancha"}, format="json"
        )
        api_client.post(
            url, {"match_field": "tipo_medio", "match_value": "TV", "zone": "Mixta"}, format="json"
        )

        response = api_client.get(url)

        assert response.status_code == 200
        assert [(r["match_field"], r["zone"]) for r in response.json()] == [
            ("cargo", "Cancha"),
            ("tipo_medio", "Mixta"),
        ]

    def test_unknown_match_field_returns_400(self, api_client: APIClient, event):
        response = api_client.post(
            f"/api/events/{event.id}/zones",
            {"match_field": "organizacion", "match_value": "X", "zone": "Y"},
            format="json",
        )
        assert response.status_code == 400

    def test_preview_zone(self, api_client: APIClient, event):
        models.ZoneRule.objects.create(
            event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha"
        )

        response = api_client.get(f"/api/events/{event.id}/zones", {"cargo": "FOTÓGRAFO"})

        assert response.status_code == 200
        assert response.json() == {"cargo": "FOTÓGRAFO", "tipo_medio": None, "zone": "Cancha"}

    def test_delete_zone_rule(self, api_client: APIClient, event):
        rule = models.ZoneRule.objects.create(
            event=event, match_field="cargo", match_value="Fotógrafo", zone="Cancha"
        )

        response = api_client.delete(f"/api/events/{event.id}/zones/{rule.id}")

        assert response.status_code == 204
        assert not models.ZoneRule.objects.exists()
