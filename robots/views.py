"""
Dashboard endpoints for a site's robots settings and per-page overrides.

All routes live under /api/v1/sites/{site_id}/robots/ and require the JWT
user to own the site.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from sites.models import Site
from .config import load_config, save_settings
from .constants import BULK_ENABLE, DIRECTIVES, FILTER_WITH_OVERRIDE, FILTER_WITHOUT_OVERRIDE
from .lifecycle import check_migration, uninstall
from .models import Page
from .serializers import (
    BulkOverrideSerializer,
    OverrideSerializer,
    PageOverrideSerializer,
    SettingsSerializer,
    sections_payload,
)
from .store import OptionStore, OverrideStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def error_response(code, message, http_status):
    return Response(
        {'error': {'code': code, 'message': message, 'status': http_status}},
        status=http_status,
    )


def _get_site_or_403(request, site_id):
    """Returns (site, error_response)."""
    try:
        site = Site.objects.get(id=site_id)
    except Site.DoesNotExist:
        return None, error_response('SITE_NOT_FOUND', 'Invalid site_id.', status.HTTP_404_NOT_FOUND)
    if site.user != request.user:
        logger.warning("User %s denied access to robots settings of site %s", request.user.pk, site_id)
        return None, error_response('FORBIDDEN', 'Permission denied', status.HTTP_403_FORBIDDEN)
    return site, None


def granular_disabled_response(config):
    if config.granular_enabled:
        return None
    return error_response(
        'GRANULAR_DISABLED',
        'Per-page overrides are disabled for this site. Enable granular control first.',
        status.HTTP_409_CONFLICT,
    )


def override_payload(item_id, override):
    directives = override.directives if override else {}
    return {
        'wp_post_id': item_id,
        'enabled': bool(override and override.enabled),
        'directives': {d: bool(directives.get(d)) for d in DIRECTIVES},
    }


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@api_view(['GET', 'POST'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def robots_settings(request, site_id):
    """
    GET  /api/v1/sites/{site_id}/robots/settings/
    POST /api/v1/sites/{site_id}/robots/settings/

    POST takes the settings form: flat option names set to 1 for checked
    flags, plus 'method', 'granular' and 'suppress_conflict_warnings'.
    Anything missing is saved as unchecked.
    """
    site, err = _get_site_or_403(request, site_id)
    if err:
        return err

    store = OptionStore(site)
    if request.method == 'GET':
        check_migration(store)
        config = load_config(store)
        return Response(SettingsSerializer(config).data)

    if not hasattr(request.data, 'get'):
        return error_response('BAD_REQUEST', 'Settings must be an object.', status.HTTP_400_BAD_REQUEST)
    config = save_settings(store, request.data)
    return Response({
        'message': 'Settings saved',
        'settings': SettingsSerializer(config).data,
    })


@api_view(['GET'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def robots_sections(request, site_id):
    """GET /api/v1/sites/{site_id}/robots/sections/"""
    site, err = _get_site_or_403(request, site_id)
    if err:
        return err
    store = OptionStore(site)
    check_migration(store)
    return Response(sections_payload(load_config(store)))


@api_view(['DELETE'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def robots_uninstall(request, site_id):
    """
    DELETE /api/v1/sites/{site_id}/robots/

    Removes every robots option and override of the site. The next settings
    read starts again from an unmigrated, empty configuration.
    """
    site, err = _get_site_or_403(request, site_id)
    if err:
        return err
    removed = uninstall(site)
    return Response({'message': 'Robots configuration removed', 'removed': removed})


# ---------------------------------------------------------------------------
# Pages and overrides
# ---------------------------------------------------------------------------

@api_view(['GET'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def robots_pages(request, site_id):
    """
    GET /api/v1/sites/{site_id}/robots/pages/?filter=with_override|without_override&post_type=page

    Unknown filter values are ignored.
    """
    site, err = _get_site_or_403(request, site_id)
    if err:
        return err

    qs = Page.objects.filter(site=site).select_related('robots_override')
    override_filter = request.query_params.get('filter')
    if override_filter == FILTER_WITH_OVERRIDE:
        qs = qs.filter(robots_override__isnull=False)
    elif override_filter == FILTER_WITHOUT_OVERRIDE:
        qs = qs.filter(robots_override__isnull=True)
    post_type = request.query_params.get('post_type')
    if post_type:
        qs = qs.filter(post_type=post_type)

    data = PageOverrideSerializer(qs, many=True).data
    return Response({
        'pages': data,
        'total': len(data),
        'granular_enabled': load_config(OptionStore(site)).granular_enabled,
    })


@api_view(['GET', 'PUT', 'DELETE'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def robots_override(request, site_id, wp_post_id):
    """
    GET    /api/v1/sites/{site_id}/robots/overrides/{wp_post_id}/
    PUT    /api/v1/sites/{site_id}/robots/overrides/{wp_post_id}/
    DELETE /api/v1/sites/{site_id}/robots/overrides/{wp_post_id}/

    PUT body: {"enabled": true, "directives": {"noindex": true, ...}}.
    An enabled override with no directive set means "no restrictions".
    """
    site, err = _get_site_or_403(request, site_id)
    if err:
        return err

    overrides = OverrideStore(site)
    if request.method == 'GET':
        return Response(override_payload(wp_post_id, overrides.get(wp_post_id)))

    config = load_config(OptionStore(site))
    err = granular_disabled_response(config)
    if err:
        return err

    if request.method == 'DELETE':
        overrides.delete(wp_post_id)
        logger.info("Removed robots override of page %s on site %s", wp_post_id, site.pk)
        return Response(override_payload(wp_post_id, None))

    serializer = OverrideSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    override = overrides.save(
        wp_post_id,
        serializer.validated_data['enabled'],
        serializer.validated_data['directives'],
    )
    logger.info("Saved robots override of page %s on site %s", wp_post_id, site.pk)
    return Response(override_payload(wp_post_id, override))


@api_view(['POST'])
@authentication_classes([JWTAuthentication])
@permission_classes([IsAuthenticated])
def robots_bulk_override(request, site_id):
    """
    POST /api/v1/sites/{site_id}/robots/overrides/bulk/
    Body: {"action": "enable" | "disable", "item_ids": [12, 34]}

    Enabling keeps any directive values a page already has; item ids that
    were never synced get a page row, as a single override write does.
    """
    site, err = _get_site_or_403(request, site_id)
    if err:
        return err

    config = load_config(OptionStore(site))
    err = granular_disabled_response(config)
    if err:
        return err

    serializer = BulkOverrideSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    action = serializer.validated_data['action']
    item_ids = serializer.validated_data['item_ids']
    overrides = OverrideStore(site)
    if action == BULK_ENABLE:
        count = overrides.bulk_enable(item_ids)
    else:
        count = overrides.bulk_disable(item_ids)

    logger.info("Bulk %s robots overrides on site %s: %d pages", action, site.pk, count)
    return Response({'action': action, 'updated': count})
