"""
Management command to remove a site's robots settings and overrides.
Usage: python manage.py purge_robots_config --site 12
"""
from django.core.management.base import BaseCommand, CommandError

from sites.models import Site
from robots.lifecycle import uninstall


class Command(BaseCommand):
    help = 'Delete every robots option, cached option and override of a site'

    def add_arguments(self, parser):
        parser.add_argument('--site', type=int, required=True, help='Site id')

    def handle(self, *args, **options):
        try:
            site = Site.objects.get(pk=options['site'])
        except Site.DoesNotExist:
            raise CommandError(f"Site {options['site']} does not exist")

        removed = uninstall(site)
        self.stdout.write(self.style.SUCCESS(
            f"Removed {removed['options']} option(s) and {removed['overrides']} override(s) from {site.name}."
        ))
