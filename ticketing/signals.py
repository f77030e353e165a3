"""Django signals for cache invalidation.

Moderation happens in the Django admin, outside the submission service, so
listing caches are also dropped whenever an event or batch row changes.
"""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from ticketing.models import Event, EventBatch
from ticketing.stores.django_cache import DjangoEventListCache, public_event_key


def _invalidate(event: Event) -> None:
    lists = DjangoEventListCache()
    lists.invalidate_public()
    lists.invalidate_manager(event.owner_id)
    cache.delete(public_event_key(str(event.pk)))


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    _invalidate(instance)


@receiver([post_save, post_delete], sender=EventBatch)
def invalidate_batch_cache(sender, instance, **kwargs):
    """Invalidate the owning event's caches when a batch is saved or deleted."""
    _invalidate(instance.event)
