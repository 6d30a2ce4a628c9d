"""
Dashboard URL routing for robots settings, nested under sites/{site_id}/robots/.
"""
from django.urls import path

from . import views

urlpatterns = [
    path('', views.robots_uninstall, name='robots-uninstall'),
    path('settings/', views.robots_settings, name='robots-settings'),
    path('sections/', views.robots_sections, name='robots-sections'),
    path('pages/', views.robots_pages, name='robots-pages'),
    path('overrides/bulk/', views.robots_bulk_override, name='robots-overrides-bulk'),
    path('overrides/<int:wp_post_id>/', views.robots_override, name='robots-override'),
]
