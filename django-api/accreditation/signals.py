"""Django signals for cache invalidation."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from accreditation.models import ZoneRule
from accreditation.stores.django_store import zone_rules_cache_key


@receiver([post_save, post_delete], sender=ZoneRule)
def invalidate_zone_rules_cache(sender, instance, **kwargs):
    """Invalidate the cached zone rule list when a zone rule is saved or deleted."""
    cache.delete(zone_rules_cache_key(instance.event_id))
