"""
Management command to bring every site's robots settings to the current version.
Usage: python manage.py migrate_robots_config
"""
from django.core.management.base import BaseCommand

from sites.models import Site
from robots.lifecycle import check_migration
from robots.store import OptionStore


class Command(BaseCommand):
    help = 'Migrate stored robots settings of all sites to the current config version'

    def handle(self, *args, **options):
        migrated = 0
        for site in Site.objects.all():
            if check_migration(OptionStore(site)):
                migrated += 1
                self.stdout.write(f'Migrated: {site.name} (id={site.pk})')

        self.stdout.write(self.style.SUCCESS(f'Migrated {migrated} site(s).'))
