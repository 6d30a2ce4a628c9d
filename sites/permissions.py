"""
Custom permissions for sites app.
"""
import logging
from rest_framework import permissions

logger = logging.getLogger(__name__)


class IsSiteOwner(permissions.BasePermission):
    """
    Permission to check if user owns the site.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user == request.user


class IsAPIKeyOwner(permissions.BasePermission):
    """
    Permission to check if user owns the site that the API key belongs to.
    """
    def has_object_permission(self, request, view, obj):
        return obj.site.user == request.user


class IsSiteKeyAuthenticated(permissions.BasePermission):
    """
    Permission to allow requests authenticated with a site API key.
    """
    def has_permission(self, request, view):
        if isinstance(getattr(request, 'auth', None), dict):
            return request.auth.get('auth_type') == 'site_key'
        logger.debug("No site key on request.auth")
        return False
