"""
Custom authentication for API key-based requests from site plugins.
"""
import logging
from rest_framework import authentication, exceptions

from .models import APIKey

logger = logging.getLogger(__name__)


class APIKeyAuthentication(authentication.BaseAuthentication):
    """
    Authenticate site plugin requests using site API keys (sk_robots_...).

    API keys can be provided in:
    - Authorization header: "Bearer sk_robots_xxx"
    - X-API-Key header: "sk_robots_xxx"

    On success request.user is the site owner and request.auth is
    {'api_key': ..., 'site': ..., 'auth_type': 'site_key'}.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        api_key = self._extract_api_key(request)

        if not api_key:
            return None

        if not api_key.startswith(f'{APIKey.PREFIX}_'):
            logger.debug(f"API key has invalid prefix: {api_key[:10]}...")
            return None

        return self._authenticate_site_key(api_key)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'

    def _extract_api_key(self, request):
        """Extract API key from request headers."""
        api_key = None

        # Check Authorization header first
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        if auth_header.startswith(f'{self.keyword} '):
            api_key = auth_header[len(self.keyword) + 1:].strip()

        # Fall back to X-API-Key header
        if not api_key:
            api_key = request.META.get('HTTP_X_API_KEY', '').strip()

        return api_key if api_key else None

    def _authenticate_site_key(self, api_key):
        """Authenticate using a site-specific key."""
        try:
            api_key_obj = APIKey.objects.select_related('site', 'site__user').get(
                key_hash=APIKey.hash_key(api_key),
                is_active=True
            )
        except APIKey.DoesNotExist:
            logger.warning("Site API key not found in database")
            raise exceptions.AuthenticationFailed('Invalid or revoked API key')

        if api_key_obj.is_expired:
            raise exceptions.AuthenticationFailed('API key has expired')

        if not api_key_obj.site.is_active:
            raise exceptions.AuthenticationFailed('Site is inactive')

        api_key_obj.mark_used()

        return (api_key_obj.site.user, {
            'api_key': api_key_obj,
            'site': api_key_obj.site,
            'auth_type': 'site_key',
        })
