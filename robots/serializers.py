"""
Serializers for robots settings, overrides and plugin requests.
"""
from rest_framework import serializers

from .constants import (
    BULK_ACTIONS,
    CONTEXTS,
    DIRECTIVE_DESCRIPTIONS,
    DIRECTIVES,
    HEADER_ONLY_CONTEXTS,
    METHODS,
    SECTIONS,
    option_name,
)
from .models import Page


class SettingsSerializer(serializers.Serializer):
    """Read shape of a site's global settings."""
    method = serializers.CharField()
    granular_enabled = serializers.BooleanField()
    suppress_conflict_warnings = serializers.BooleanField()
    config_version = serializers.IntegerField()
    options = serializers.SerializerMethodField()

    def get_options(self, config):
        return config.options()


class OverrideSerializer(serializers.Serializer):
    """Override write payload: {'enabled': true, 'directives': {...}} or a directive list."""
    enabled = serializers.BooleanField(default=True)
    directives = serializers.JSONField(required=False, default=dict)

    def validate_directives(self, value):
        # Unknown names are dropped; anything that is not a list or an object counts as empty
        if isinstance(value, (list, tuple)):
            return {d: d in value for d in DIRECTIVES}
        if isinstance(value, dict):
            return {d: bool(value.get(d)) for d in DIRECTIVES}
        return {d: False for d in DIRECTIVES}


class BulkOverrideSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=BULK_ACTIONS)
    item_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class ResolveRequestSerializer(serializers.Serializer):
    """
    Resolution request from a site plugin.

    Either `flags` (context -> bool) or `predicates` (is_* -> bool) describes
    the request; `predicates` wins when both are sent.
    """
    flags = serializers.DictField(child=serializers.BooleanField(), required=False)
    predicates = serializers.DictField(child=serializers.BooleanField(), required=False)
    item_id = serializers.IntegerField(required=False, allow_null=True)
    headers_sent = serializers.BooleanField(default=False)
    robots = serializers.DictField(required=False, default=dict)

    def validate(self, attrs):
        if 'flags' not in attrs and 'predicates' not in attrs:
            raise serializers.ValidationError('flags or predicates is required')
        return attrs


class ConflictCheckSerializer(serializers.Serializer):
    active_plugins = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class PageSyncSerializer(serializers.Serializer):
    """Page upsert from a site plugin. Fields left out keep their stored value."""
    wp_post_id = serializers.IntegerField()
    url = serializers.URLField(required=False, allow_blank=True)
    title = serializers.CharField(max_length=500, required=False, allow_blank=True)
    slug = serializers.SlugField(max_length=500, required=False, allow_blank=True)
    post_type = serializers.CharField(max_length=50, required=False)
    status = serializers.ChoiceField(choices=['publish', 'draft', 'private'], required=False)


class PageOverrideSerializer(serializers.ModelSerializer):
    """Page list row with its override column."""
    override_enabled = serializers.SerializerMethodField()
    directives = serializers.SerializerMethodField()

    class Meta:
        model = Page
        fields = (
            'id', 'wp_post_id', 'url', 'title', 'slug', 'post_type', 'status',
            'override_enabled', 'directives',
        )

    def get_override_enabled(self, obj):
        return obj.has_override

    def get_directives(self, obj):
        if not obj.has_override:
            return []
        return list(obj.robots_override.directives)


def sections_payload(config):
    """Settings-UI metadata: fields per section with their current values."""
    sections = []
    for key, section in SECTIONS.items():
        fields = []
        for context, (label, description) in section['fields'].items():
            fields.append({
                'context': context,
                'label': label,
                'description': description,
                'header_only': context in HEADER_ONLY_CONTEXTS,
                'disabled': context in HEADER_ONLY_CONTEXTS and not config.header_enabled,
                'values': {
                    option_name(d, context): int(config.is_enabled(context, d)) for d in DIRECTIVES
                },
            })
        sections.append({'key': key, 'title': section['title'], 'fields': fields})
    return {
        'sections': sections,
        'directives': [
            {'key': d, 'description': DIRECTIVE_DESCRIPTIONS[d]} for d in DIRECTIVES
        ],
        'methods': list(METHODS),
        'contexts': list(CONTEXTS),
        'stats': {d: config.active_count(d) for d in DIRECTIVES},
    }
