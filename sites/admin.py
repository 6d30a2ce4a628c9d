from django.contrib import admin
from .models import Site, APIKey


class APIKeyInline(admin.TabularInline):
    model = APIKey
    extra = 0
    fields = ('name', 'key_prefix', 'is_active', 'expires_at', 'last_used_at', 'usage_count')
    readonly_fields = ('key_prefix', 'last_used_at', 'usage_count')
    show_change_link = True


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ('name', 'url', 'user', 'is_active', 'page_count', 'last_synced_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'url', 'wp_site_id', 'user__email')
    readonly_fields = ('created_at', 'updated_at', 'last_synced_at')
    inlines = [APIKeyInline]

    @admin.display(description='Pages')
    def page_count(self, obj):
        return obj.pages.count()


@admin.register(APIKey)
class APIKeyAdmin(admin.ModelAdmin):
    list_display = ('name', 'key_prefix', 'site', 'is_active', 'expires_at', 'usage_count')
    list_filter = ('is_active',)
    search_fields = ('name', 'key_prefix', 'site__name')
    readonly_fields = ('key_hash', 'key_prefix', 'created_at', 'last_used_at', 'usage_count', 'revoked_at')
    actions = ['revoke_keys']

    @admin.action(description='Revoke selected keys')
    def revoke_keys(self, request, queryset):
        for api_key in queryset.filter(is_active=True):
            api_key.revoke()
