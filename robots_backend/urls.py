"""
URL configuration for robots_backend project.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def _json_error(code, message, status):
    return JsonResponse({'error': {'code': code, 'message': message, 'status': status}}, status=status)


def custom_404(request, exception=None):
    return _json_error('NOT_FOUND', 'The requested resource was not found.', 404)


def custom_500(request):
    return _json_error('SERVER_ERROR', 'An unexpected error occurred.', 500)


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('robots_backend.api_urls')),
]

handler404 = custom_404
handler500 = custom_500
