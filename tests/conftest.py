"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from tests.fakes import (
    InMemoryCommissionRangeStore,
    InMemoryContractStore,
    InMemoryEventListCache,
    InMemoryEventStore,
    make_contract,
    make_range,
)


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
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def contract_store() -> InMemoryContractStore:
    return InMemoryContractStore([make_contract()])


@pytest.fixture
def range_store() -> InMemoryCommissionRangeStore:
    return InMemoryCommissionRangeStore([make_range(1, 100, "10"), make_range(101, 500, "7.5")])


@pytest.fixture
def list_cache() -> InMemoryEventListCache:
    return InMemoryEventListCache()


def _user_with_role(django_user_model, username: str, role: str):
    from ticketing.models import ManagerProfile

    user = django_user_model.objects.create_user(username=username, password="secret")
    ManagerProfile.objects.create(user=user, role=role)
    return user


@pytest.fixture
def manager_user(django_user_model):
    return _user_with_role(django_user_model, "manager", "manager")


@pytest.fixture
def other_manager(django_user_model):
    return _user_with_role(django_user_model, "other-manager", "manager")


@pytest.fixture
def backoffice_admin(django_user_model):
    return _user_with_role(django_user_model, "backoffice-admin", "admin")


@pytest.fixture
def manager_client(manager_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=manager_user)
    return client


@pytest.fixture
def admin_api_client(backoffice_admin) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=backoffice_admin)
    return client
