from django.contrib import admin
from .models import Page, RobotsOption, RobotsOverride


@admin.register(RobotsOption)
class RobotsOptionAdmin(admin.ModelAdmin):
    list_display = ('name', 'value', 'site', 'updated_at')
    list_filter = ('site',)
    search_fields = ('name', 'site__name')
    readonly_fields = ('updated_at',)


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ('title', 'wp_post_id', 'site', 'post_type', 'status', 'last_synced_at')
    list_filter = ('status', 'post_type', 'site')
    search_fields = ('title', 'url', 'site__name')
    readonly_fields = ('created_at', 'last_synced_at')


@admin.register(RobotsOverride)
class RobotsOverrideAdmin(admin.ModelAdmin):
    list_display = ('page', 'noindex', 'nofollow', 'noarchive', 'nosnippet', 'noimageindex', 'updated_at')
    list_filter = ('noindex', 'nofollow')
    search_fields = ('page__title', 'page__url')
    readonly_fields = ('created_at', 'updated_at')
