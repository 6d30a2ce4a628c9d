"""
Site management views.
Handles CRUD operations for sites and the robots overview.
"""
import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import IntegrityError, transaction

from robots.config import load_config
from robots.constants import DIRECTIVES, HEADER_NAME
from robots.lifecycle import check_migration, install_defaults
from robots.store import OptionStore
from .models import Site
from .serializers import SiteSerializer
from .permissions import IsSiteOwner

logger = logging.getLogger(__name__)


class SiteViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing sites.

    list: GET /api/v1/sites/ - List all sites for current user
    create: POST /api/v1/sites/ - Create a new site (robots defaults installed)
    retrieve: GET /api/v1/sites/{id}/ - Get site details
    update: PUT /api/v1/sites/{id}/ - Update site
    destroy: DELETE /api/v1/sites/{id}/ - Delete site with its settings, pages and overrides
    overview: GET /api/v1/sites/{id}/overview/ - Robots summary of the site
    """
    serializer_class = SiteSerializer
    permission_classes = [IsAuthenticated, IsSiteOwner]

    def get_queryset(self):
        """Return only sites owned by the current user."""
        return Site.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        """Set the user and seed the robots configuration of the new site."""
        with transaction.atomic():
            site = serializer.save(user=self.request.user)
            install_defaults(OptionStore(site))
        logger.info("Created site %s for user %s", site.pk, self.request.user.pk)

    def create(self, request, *args, **kwargs):
        """Create a site with duplicate URL handling."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            self.perform_create(serializer)
        except IntegrityError:
            return Response(
                {'error': 'A site with this URL already exists for your account'},
                status=status.HTTP_400_BAD_REQUEST
            )

        headers = self.get_success_headers(serializer.data)
        return Response(serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=['get'])
    def overview(self, request, pk=None):
        """
        Robots summary: method, granular control, active flags per directive
        and how many pages carry an override.

        GET /api/v1/sites/{id}/overview/
        """
        site = self.get_object()
        store = OptionStore(site)
        check_migration(store)
        config = load_config(store)

        total_pages = site.pages.count()
        override_count = site.pages.filter(robots_override__isnull=False).count()

        return Response({
            'site_id': site.id,
            'site_name': site.name,
            'method': config.method,
            'header_name': HEADER_NAME if config.header_enabled else None,
            'granular_enabled': config.granular_enabled,
            'active_directives': {d: config.active_count(d) for d in DIRECTIVES},
            'total_pages': total_pages,
            'pages_with_override': override_count,
            'last_synced_at': site.last_synced_at,
        })
