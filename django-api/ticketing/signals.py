"""Django signals for cache invalidation of the public event view."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from ticketing.models import Performance, TicketEvent, TicketType


def event_cache_key(event_id) -> str:
    return f"events:{event_id}"


@receiver([post_save, post_delete], sender=TicketEvent)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    cache.delete(event_cache_key(instance.pk))


@receiver([post_save, post_delete], sender=Performance)
def invalidate_performance_cache(sender, instance, **kwargs):
    """Invalidate the parent event's cache when a performance changes."""
    cache.delete(event_cache_key(instance.event_id))


@receiver([post_save, post_delete], sender=TicketType)
def invalidate_ticket_type_cache(sender, instance, **kwargs):
    """Invalidate the parent event's cache when a ticket type changes."""
    cache.delete(event_cache_key(instance.event_id))
