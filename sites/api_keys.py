"""
API key management views.
Site plugins authenticate with these keys when resolving robots directives.
"""
import logging
from datetime import timedelta

from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.utils import timezone

from .models import Site, APIKey
from .serializers import APIKeySerializer, APIKeyCreateSerializer
from .permissions import IsAPIKeyOwner

logger = logging.getLogger(__name__)


class APIKeyViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing site API keys.

    list: GET /api/v1/api-keys/ - Keys of the user's sites (optional ?site_id=)
    create: POST /api/v1/api-keys/ - Issue a key for one site
    retrieve: GET /api/v1/api-keys/{id}/ - Key details (never the key itself)
    destroy: DELETE /api/v1/api-keys/{id}/ - Revoke key
    """
    permission_classes = [IsAuthenticated, IsAPIKeyOwner]
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        qs = APIKey.objects.filter(site__user=self.request.user)
        site_id = self.request.query_params.get('site_id')
        if site_id:
            qs = qs.filter(site_id=site_id)
        return qs

    def get_serializer_class(self):
        if self.action == 'create':
            return APIKeyCreateSerializer
        return APIKeySerializer

    def create(self, request, *args, **kwargs):
        """
        POST /api/v1/api-keys/
        Body: { "name": "Production", "site_id": 1, "expires_in_days": 90 }

        The full key is returned once and only its hash is stored.
        """
        site_id = request.data.get('site_id')
        if not site_id:
            return Response(
                {'error': 'site_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        site = get_object_or_404(Site, id=site_id, user=request.user)

        expires_at = None
        expires_in_days = request.data.get('expires_in_days')
        if expires_in_days not in (None, ''):
            try:
                expires_at = timezone.now() + timedelta(days=int(expires_in_days))
            except (TypeError, ValueError):
                return Response(
                    {'error': 'expires_in_days must be an integer'},
                    status=status.HTTP_400_BAD_REQUEST
                )

        full_key, key_prefix, key_hash = APIKey.generate_key()
        api_key = APIKey.objects.create(
            site=site,
            name=request.data.get('name', 'Unnamed Key'),
            key_hash=key_hash,
            key_prefix=key_prefix,
            expires_at=expires_at,
        )
        logger.info("Issued API key %s for site %s", api_key.pk, site.pk)

        response_data = APIKeyCreateSerializer(api_key).data
        response_data['key'] = full_key
        return Response({
            'message': 'API key created successfully',
            'key': response_data
        }, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        api_key = self.get_object()
        api_key.revoke()
        logger.info("Revoked API key %s of site %s", api_key.pk, api_key.site_id)
        return Response(
            {'message': 'API key revoked successfully'},
            status=status.HTTP_200_OK
        )
