"""
API URL routing for robots_backend.
All API endpoints are prefixed with /api/v1/
"""
from django.urls import path, include
from django.views.decorators.csrf import csrf_exempt

from .views import health_check


def _lazy(module, attr):
    """Lazy view import to avoid AppRegistryNotReady."""
    @csrf_exempt
    def view(*args, **kwargs):
        import importlib
        mod = importlib.import_module(module)
        return getattr(mod, attr)(*args, **kwargs)
    return view


urlpatterns = [
    # Health check (no auth) - GET /api/v1/health/
    path('health/', health_check),
    # Dashboard authentication
    path('auth/', include('accounts.urls')),
    # Site plugin: POST /api/v1/auth/verify with Bearer <api_key>
    path('auth/verify', _lazy('robots.plugin_views', 'verify_api_key')),
    # API key management (site-specific keys)
    path('api-keys/', include('sites.api_key_urls')),
    # Robots settings and overrides (dashboard) - MUST be before sites/
    path('sites/<int:site_id>/robots/', include('robots.urls')),
    # Site management
    path('sites/', include('sites.urls')),
    # Directive resolution and page sync (site plugin)
    path('robots/', include('robots.plugin_urls')),
]
