"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache

from ticketing import models
from ticketing.stores.django_cache import (
    PUBLIC_EVENTS_KEY,
    DjangoEventListCache,
    manager_events_key,
    public_event_key,
)
from tests.factories import create_event, event_payload


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_event_save_invalidates_list_cache(self, manager_user):
        """Saving an event invalidates the events:public cache key."""
        cache.set(PUBLIC_EVENTS_KEY, ["stale"])
        create_event(manager_user)
        assert cache.get(PUBLIC_EVENTS_KEY) is None

    def test_event_save_invalidates_detail_cache(self, manager_user):
        """Saving an event invalidates the events:public:{id} cache key."""
        event = create_event(manager_user)
        cache.set(public_event_key(str(event.pk)), {"title": "stale"})

        event.status = models.Event.Status.REJECTED
        event.save()

        assert cache.get(public_event_key(str(event.pk))) is None

    def test_event_save_invalidates_owner_cache(self, manager_user):
        cache.set(manager_events_key(manager_user.id), ["stale"])
        create_event(manager_user)
        assert cache.get(manager_events_key(manager_user.id)) is None

    def test_batch_save_invalidates_event_caches(self, manager_user):
        event = create_event(manager_user)
        cache.set(PUBLIC_EVENTS_KEY, ["stale"])
        cache.set(public_event_key(str(event.pk)), {"title": "stale"})

        models.EventBatch.objects.filter(event=event).delete()
        event.batches.create(
            name="Lote 1",
            quantity=10,
            price=Decimal("20.00"),
            sale_start_date=date(2030, 1, 1),
            sale_end_date=date(2030, 2, 1),
        )

        assert cache.get(PUBLIC_EVENTS_KEY) is None
        assert cache.get(public_event_key(str(event.pk))) is None

    def test_event_delete_invalidates_list_cache(self, manager_user):
        event = create_event(manager_user)
        cache.set(PUBLIC_EVENTS_KEY, ["stale"])
        event.delete()
        assert cache.get(PUBLIC_EVENTS_KEY) is None

    def test_submission_refreshes_manager_list(self, manager_client):
        """A warmed manager list shows the event right after it is created."""
        assert manager_client.get("/api/manager/events").data == []

        payload = event_payload(is_paid=False, accept_contract=False, ticket_price=None)
        manager_client.post("/api/manager/events", payload, format="json")

        titles = [e["title"] for e in manager_client.get("/api/manager/events").data]
        assert titles == ["Jazz na Praça"]

    def test_admin_approval_refreshes_public_list(self, api_client, manager_user):
        event = create_event(manager_user, status="pending")
        assert api_client.get("/api/events").data == []

        event.status = models.Event.Status.APPROVED
        event.save()

        assert len(api_client.get("/api/events").data) == 1

    def test_detail_cache_key_ignores_id_spelling(self, api_client, manager_user):
        """An uppercase id is cached under the same key the signals clear."""
        event = create_event(manager_user, title="Old title")
        url = f"/api/events/{str(event.pk).upper()}"
        assert api_client.get(url).data["title"] == "Old title"
        assert cache.get(public_event_key(str(event.pk))) is not None

        event.title = "New title"
        event.save()

        assert api_client.get(url).data["title"] == "New title"


class TestSubmissionLock:
    def test_lock_is_exclusive_until_released(self):
        lists = DjangoEventListCache()
        assert lists.acquire_submission_lock("events:submit:1:new")
        assert not lists.acquire_submission_lock("events:submit:1:new")

        lists.release_submission_lock("events:submit:1:new")

        assert lists.acquire_submission_lock("events:submit:1:new")

    def test_locks_are_per_key(self):
        lists = DjangoEventListCache()
        assert lists.acquire_submission_lock("events:submit:1:new")
        assert lists.acquire_submission_lock("events:submit:2:new")
