"""
Site plugin endpoints: key verification, directive resolution, conflict
checks, page sync and the editor's override panel.

Every request authenticates with the site's API key (sk_robots_...).
"""
import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response

from sites.authentication import APIKeyAuthentication
from sites.permissions import IsSiteKeyAuthenticated
from .config import load_config
from .conflicts import conflict_message, detect_conflicts
from .context import build_context_flags, normalize_flags
from .emitter import apply_meta, emit
from .lifecycle import check_migration
from .models import Page
from .resolver import resolve
from .serializers import (
    ConflictCheckSerializer,
    OverrideSerializer,
    PageSyncSerializer,
    ResolveRequestSerializer,
)
from .store import OptionStore, OverrideStore
from .views import error_response, granular_disabled_response, override_payload

logger = logging.getLogger(__name__)


@api_view(['POST'])
@authentication_classes([APIKeyAuthentication])
@permission_classes([IsSiteKeyAuthenticated])
def verify_api_key(request):
    """
    POST /api/v1/auth/verify
    Headers: Authorization: Bearer <api_key>

    Used by the plugin's "Test connection" button.
    """
    site = request.auth['site']
    return Response({
        'authenticated': True,
        'valid': True,
        'site_id': site.id,
        'site_name': site.name,
        'site_url': site.url,
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@authentication_classes([APIKeyAuthentication])
@permission_classes([IsSiteKeyAuthenticated])
def resolve_directives(request):
    """
    Resolve the robots directives of one request on the site.

    POST /api/v1/robots/resolve/
    Body: {
        "predicates": {"is_search": true, "is_paged": true},   # or "flags": {"search": true}
        "item_id": 42,            # optional, the content item being served
        "headers_sent": false,    # response headers already flushed
        "robots": {"max-image-preview": "large"}   # optional robots tag map to merge into
    }

    Returns the resolved context and directives and the emission plan:
    {"context", "source", "directives", "header", "header_line", "meta_flags", "robots"}.
    """
    site = request.auth['site']
    serializer = ResolveRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    if 'predicates' in data:
        flags = build_context_flags(data['predicates'])
    else:
        flags = normalize_flags(data['flags'])

    store = OptionStore(site)
    check_migration(store)
    config = load_config(store)

    override = None
    item_id = data.get('item_id')
    if config.granular_enabled and item_id is not None:
        override = OverrideStore(site).get(item_id)

    result = resolve(flags, config, override=override)
    plan = emit(result.directives, config.method, headers_sent=data['headers_sent'])

    payload = {
        'context': result.context,
        'source': result.source,
        'directives': list(result.directives),
        'method': config.method,
    }
    payload.update(plan.to_dict())
    payload['robots'] = apply_meta(data.get('robots'), plan.meta_flags)
    return Response(payload)


@api_view(['POST'])
@authentication_classes([APIKeyAuthentication])
@permission_classes([IsSiteKeyAuthenticated])
def check_conflicts(request):
    """
    POST /api/v1/robots/conflicts/
    Body: {"active_plugins": ["wordpress-seo/wp-seo.php", ...]}

    Returns the first known SEO plugin that also writes robots directives,
    unless the site suppressed the warning.
    """
    site = request.auth['site']
    serializer = ConflictCheckSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    config = load_config(OptionStore(site))
    name = detect_conflicts(serializer.validated_data['active_plugins'], config)
    return Response({
        'conflict': name is not None,
        'plugin': name,
        'message': conflict_message(name) if name else None,
        'suppressed': config.suppress_conflict_warnings,
    })


@api_view(['POST'])
@authentication_classes([APIKeyAuthentication])
@permission_classes([IsSiteKeyAuthenticated])
def sync_page(request):
    """
    Upsert a content item so the dashboard can list it and attach an override.

    POST /api/v1/robots/pages/sync/
    Body: {"wp_post_id": 123, "url": "...", "title": "...", "post_type": "page", ...}
    """
    site = request.auth['site']
    serializer = PageSyncSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    wp_post_id = data.pop('wp_post_id')
    page, created = Page.objects.update_or_create(site=site, wp_post_id=wp_post_id, defaults=data)

    site.last_synced_at = timezone.now()
    site.save(update_fields=['last_synced_at'])

    return Response({
        'page_id': page.id,
        'message': 'Page synced successfully',
        'created': created,
    }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


@api_view(['DELETE'])
@authentication_classes([APIKeyAuthentication])
@permission_classes([IsSiteKeyAuthenticated])
def delete_page(request, wp_post_id):
    """
    DELETE /api/v1/robots/pages/{wp_post_id}/

    The item was deleted on the site; its override goes with it.
    """
    site = request.auth['site']
    page = Page.objects.filter(site=site, wp_post_id=wp_post_id).first()
    if page is None:
        return error_response('PAGE_NOT_FOUND', 'Unknown wp_post_id.', status.HTTP_404_NOT_FOUND)
    page.delete()
    logger.info("Deleted page %s of site %s", wp_post_id, site.pk)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'PUT'])
@authentication_classes([APIKeyAuthentication])
@permission_classes([IsSiteKeyAuthenticated])
def item_override(request, wp_post_id):
    """
    GET /api/v1/robots/overrides/{wp_post_id}/
    PUT /api/v1/robots/overrides/{wp_post_id}/

    Editor side panel of one content item. GET also tells the plugin whether
    the panel should be shown at all (granular_enabled).
    """
    site = request.auth['site']
    config = load_config(OptionStore(site))
    overrides = OverrideStore(site)

    if request.method == 'GET':
        payload = override_payload(wp_post_id, overrides.get(wp_post_id))
        payload['granular_enabled'] = config.granular_enabled
        return Response(payload)

    err = granular_disabled_response(config)
    if err:
        return err

    serializer = OverrideSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    override = overrides.save(
        wp_post_id,
        serializer.validated_data['enabled'],
        serializer.validated_data['directives'],
    )
    logger.info("Saved robots override of page %s on site %s from editor", wp_post_id, site.pk)
    return Response(override_payload(wp_post_id, override))
