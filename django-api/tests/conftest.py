"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from accreditation.conf import AdmissionConfig
from accreditation.domain import EventId
from accreditation.services.admission_service import AdmissionService
from accreditation.services.rule_service import RuleService
from accreditation.stores.memory_store import InMemoryAccreditationStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def store() -> InMemoryAccreditationStore:
    return InMemoryAccreditationStore(lock_timeout_seconds=2.0)


@pytest.fixture
def event_id(store: InMemoryAccreditationStore) -> EventId:
    return store.add_event()


@pytest.fixture
def config() -> AdmissionConfig:
    return AdmissionConfig(retry_backoff_seconds=0)


@pytest.fixture
def admission(store, config) -> AdmissionService:
    return AdmissionService(store, store, config)


@pytest.fixture
def rules(store, config) -> RuleService:
    return RuleService(store, config)


@pytest.fixture
def event(db):
    from accreditation.models import Event

    return Event.objects.create(tenant="club-deportivo", name="Clásico de Primavera")
