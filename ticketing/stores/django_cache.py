"""Cache keys and the Django cache implementation of EventListCache."""

from django.core.cache import cache

from ticketing.stores.interfaces import EventListCache

PUBLIC_EVENTS_KEY = "events:public"
SUBMISSION_LOCK_TIMEOUT = 60


def public_event_key(event_id: str) -> str:
    return f"events:public:{event_id}"


def manager_events_key(owner_id: int) -> str:
    return f"events:manager:{owner_id}"


class DjangoEventListCache(EventListCache):
    def invalidate_public(self) -> None:
        cache.delete(PUBLIC_EVENTS_KEY)

    def invalidate_manager(self, owner_id: int) -> None:
        cache.delete(manager_events_key(owner_id))

    def acquire_submission_lock(self, key: str) -> bool:
        # add() is a no-op when the key already exists.
        return cache.add(key, 1, SUBMISSION_LOCK_TIMEOUT)

    def release_submission_lock(self, key: str) -> None:
        cache.delete(key)
