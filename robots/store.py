"""
Storage for a site's robots configuration and per-page overrides.

OptionStore is a key/value view over RobotsOption rows; OverrideStore reads
and writes RobotsOverride rows keyed by the site's own post id.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from django.db import transaction

from .constants import DIRECTIVES
from .models import Page, RobotsOption, RobotsOverride


class OptionStore:
    """
    Key/value options of one site.

    Usage:
        store = OptionStore(site)
        store.get('noindex_seo_config_method', 'meta')
        store.set('noindex_seo_search', 1)
    """

    def __init__(self, site):
        self.site = site

    def _qs(self):
        return RobotsOption.objects.filter(site=self.site)

    def get(self, name, default=None):
        value = self._qs().filter(name=name).values_list('value', flat=True).first()
        # values_list().first() cannot tell a stored null from a missing row
        if value is None and not self.exists(name):
            return default
        return value

    def get_many(self, names):
        """Return {name: value} for the names that exist."""
        return dict(self._qs().filter(name__in=list(names)).values_list('name', 'value'))

    def exists(self, name):
        return self._qs().filter(name=name).exists()

    def set(self, name, value):
        RobotsOption.objects.update_or_create(site=self.site, name=name, defaults={'value': value})

    def set_many(self, values: Dict[str, object]):
        with transaction.atomic():
            for name, value in values.items():
                self.set(name, value)

    def add(self, name, value):
        """Create the option only when it does not exist yet. Returns True if created."""
        _, created = RobotsOption.objects.get_or_create(site=self.site, name=name, defaults={'value': value})
        return created

    def delete(self, name):
        deleted, _ = self._qs().filter(name=name).delete()
        return bool(deleted)

    def delete_prefix(self, prefix, exclude=()):
        """Delete every option whose name starts with prefix, except the excluded names. Returns the count."""
        deleted, _ = self._qs().filter(name__startswith=prefix).exclude(name__in=list(exclude)).delete()
        return deleted


@dataclass
class Override:
    """A page's override: when enabled, its directives replace the global ones."""
    enabled: bool = False
    directives: Dict[str, bool] = field(default_factory=dict)

    @property
    def active(self):
        return tuple(d for d in DIRECTIVES if self.directives.get(d))

    @classmethod
    def from_model(cls, obj: RobotsOverride):
        return cls(enabled=True, directives={d: getattr(obj, d) for d in DIRECTIVES})


class OverrideStore:
    """Per-page overrides of one site, keyed by wp_post_id."""

    def __init__(self, site):
        self.site = site

    def get(self, item_id) -> Optional[Override]:
        obj = RobotsOverride.objects.filter(page__site=self.site, page__wp_post_id=item_id).first()
        if obj is None:
            return None
        return Override.from_model(obj)

    def save(self, item_id, enabled, directives: Optional[Dict[str, bool]] = None) -> Optional[Override]:
        """
        Enable (and set) or disable a page's override.
        Disabling removes the override so the page falls back to global settings.
        """
        if not enabled:
            self.delete(item_id)
            return None

        directives = directives or {}
        page, _ = Page.objects.get_or_create(site=self.site, wp_post_id=item_id)
        obj, _ = RobotsOverride.objects.update_or_create(
            page=page,
            defaults={d: bool(directives.get(d)) for d in DIRECTIVES},
        )
        return Override.from_model(obj)

    def delete(self, item_id):
        deleted, _ = RobotsOverride.objects.filter(
            page__site=self.site, page__wp_post_id=item_id
        ).delete()
        return bool(deleted)

    def bulk_enable(self, item_ids: Iterable[int]):
        """
        Turn overrides on, keeping any stored directive values. Like save(),
        pages that were never synced are created on demand.
        """
        count = 0
        with transaction.atomic():
            for item_id in dict.fromkeys(item_ids):
                page, _ = Page.objects.get_or_create(site=self.site, wp_post_id=item_id)
                RobotsOverride.objects.get_or_create(page=page)
                count += 1
        return count

    def bulk_disable(self, item_ids: Iterable[int]):
        item_ids = list(item_ids)
        RobotsOverride.objects.filter(
            page__site=self.site, page__wp_post_id__in=item_ids
        ).delete()
        return Page.objects.filter(site=self.site, wp_post_id__in=item_ids).count()

    def delete_all(self):
        deleted, _ = RobotsOverride.objects.filter(page__site=self.site).delete()
        return deleted
