"""
Robots models: per-site option store, synced pages, per-page overrides.
"""
from django.db import models

from sites.models import Site
from .constants import DIRECTIVES


class RobotsOption(models.Model):
    """
    One named option of a site's robots configuration.

    Directive flags are stored as '{directive}_seo_{context}' -> 0/1, the
    general settings under 'noindex_seo_config_*'.
    """
    site = models.ForeignKey(Site, on_delete=models.CASCADE, related_name='robots_options')
    name = models.CharField(max_length=191)
    value = models.JSONField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'robots_options'
        ordering = ['name']
        unique_together = [['site', 'name']]
        indexes = [
            models.Index(fields=['site', 'name'], name='robots_opt_site_name_idx'),
        ]

    def __str__(self):
        return f"{self.name}={self.value!r} ({self.site.name})"


class Page(models.Model):
    """A content item of a connected site, identified by the site's own post id."""
    site = models.ForeignKey(Site, on_delete=models.CASCADE, related_name='pages')
    wp_post_id = models.IntegerField(help_text="Content item ID on the site")
    url = models.URLField(blank=True)
    title = models.CharField(max_length=500, blank=True)
    slug = models.SlugField(max_length=500, blank=True)
    post_type = models.CharField(max_length=50, default='page',
        help_text="Content type on the site: page, post, product, ...")
    status = models.CharField(max_length=20, default='publish', choices=[
        ('publish', 'Published'), ('draft', 'Draft'), ('private', 'Private'),
    ])
    last_synced_at = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pages'
        ordering = ['-created_at']
        unique_together = [['site', 'wp_post_id']]
        indexes = [
            models.Index(fields=['site', 'post_type'], name='pages_site_type_idx'),
        ]

    def __str__(self):
        return f"{self.title or self.wp_post_id} ({self.site.name})"

    @property
    def has_override(self):
        return hasattr(self, 'robots_override')


class RobotsOverride(models.Model):
    """
    Per-page directive override. A row exists only while the override is
    enabled; it replaces the site's global directives for that page.
    """
    page = models.OneToOneField(Page, on_delete=models.CASCADE, related_name='robots_override')
    noindex = models.BooleanField(default=False)
    nofollow = models.BooleanField(default=False)
    noarchive = models.BooleanField(default=False)
    nosnippet = models.BooleanField(default=False)
    noimageindex = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'robots_overrides'
        ordering = ['-updated_at']

    def __str__(self):
        return f"Override for {self.page}: {', '.join(self.directives) or 'none'}"

    @property
    def directives(self):
        return tuple(d for d in DIRECTIVES if getattr(self, d))
