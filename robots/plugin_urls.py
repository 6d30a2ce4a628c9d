"""
URL routing for site plugin requests (API key auth).
"""
from django.urls import path

from . import plugin_views

urlpatterns = [
    path('resolve/', plugin_views.resolve_directives, name='robots-resolve'),
    path('conflicts/', plugin_views.check_conflicts, name='robots-conflicts'),
    path('pages/sync/', plugin_views.sync_page, name='robots-page-sync'),
    path('pages/<int:wp_post_id>/', plugin_views.delete_page, name='robots-page-delete'),
    path('overrides/<int:wp_post_id>/', plugin_views.item_override, name='robots-item-override'),
]
