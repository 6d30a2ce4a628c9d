"""
Project-level views.
"""
import logging

from django.db import connection
from django.db.utils import DatabaseError
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def health_check(request):
    """
    GET /api/v1/health/ - no authentication.
    200 when the app and its database answer, 503 otherwise.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError:
        logger.exception("Health check: database unavailable")
        return JsonResponse({'status': 'degraded', 'database': 'unavailable'}, status=503)
    return JsonResponse({'status': 'ok', 'service': 'robots-backend', 'database': 'ok'})
