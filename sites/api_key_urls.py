"""
URL routing for site API keys, mounted at /api/v1/api-keys/.
Keys issued here authenticate the site plugin (see sites.authentication).
"""
from rest_framework.routers import SimpleRouter
from .api_keys import APIKeyViewSet

router = SimpleRouter()
router.register(r'', APIKeyViewSet, basename='site-api-key')

urlpatterns = router.urls
