"""
Tests for robots app - context classification, directive resolution,
emission, settings lifecycle and the dashboard/plugin endpoints.
"""
from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from robots.config import GlobalConfig, clear_cache, is_checked, load_config, save_settings
from robots.conflicts import conflict_message, detect_conflicts
from robots.constants import (
    CONFIG_OPTIONS,
    CONTEXTS,
    DIRECTIVE_OPTION_NAMES,
    DIRECTIVES,
    V2_DIRECTIVES,
    option_name,
)
from robots.context import build_context_flags, matched_contexts, normalize_flags, resolve_context
from robots.emitter import EmissionPlan, apply_meta, emit, sanitize_directives, sanitize_method
from robots.lifecycle import check_migration, install_defaults, migrate_to_v2, uninstall
from robots.resolver import collect_active, resolve, resolve_for_item
from robots.store import OptionStore, Override, OverrideStore


@pytest.fixture(autouse=True)
def clear_robots_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="test@example.com", password="testpass123"):
        return get_user_model().objects.create_user(
            email=email,
            username=email,
            password=password
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.fixture
def create_site():
    def _create_site(user, name="Test Site", url="https://example.com"):
        from sites.models import Site
        return Site.objects.create(user=user, name=name, url=url)
    return _create_site


@pytest.fixture
def site(authenticated_client, create_site):
    _, user = authenticated_client
    site = create_site(user=user)
    install_defaults(OptionStore(site))
    return site


@pytest.fixture
def plugin_client(site):
    from sites.models import APIKey
    full_key, key_prefix, key_hash = APIKey.generate_key()
    APIKey.objects.create(site=site, name='Plugin', key_hash=key_hash, key_prefix=key_prefix)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {full_key}')
    return client


def make_config(method='meta', granular=False, **enabled):
    """make_config(search=('noindex',)) -> GlobalConfig with those flags on."""
    flags = {
        (context, directive): True
        for context, directives in enabled.items()
        for directive in directives
    }
    return GlobalConfig(flags=flags, method=method, granular_enabled=granular)


# ---------------------------------------------------------------------------
# Context classification
# ---------------------------------------------------------------------------

class TestContextResolution:

    def test_first_match_in_priority_order(self):
        assert resolve_context({'search': True, 'paged': True}) == 'search'
        assert resolve_context({'paged': True, 'single': True}) == 'single'

    def test_no_match(self):
        assert resolve_context({}) is None
        assert resolve_context({'search': False}) is None

    def test_custom_order(self):
        assert resolve_context({'search': True, 'paged': True}, order=('paged', 'search')) == 'paged'

    def test_matched_contexts(self):
        flags = {'home': True, 'error': True, 'tag': False}
        assert matched_contexts(flags) == ['error', 'home']

    def test_normalize_flags_drops_unknown(self):
        assert normalize_flags({'search': 1, 'bogus': True}) == {'search': True}


class TestBuildContextFlags:

    def test_category_masks_archive(self):
        flags = build_context_flags({'is_category': True, 'is_archive': True})
        assert flags['category'] is True
        assert flags['archive'] is False
        assert resolve_context(flags) == 'category'

    def test_plain_archive(self):
        flags = build_context_flags({'is_archive': True})
        assert flags['archive'] is True

    def test_day_masks_date(self):
        flags = build_context_flags({'is_day': True, 'is_date': True, 'is_archive': True})
        assert flags['day'] is True
        assert flags['date'] is False
        assert flags['archive'] is False

    def test_generic_date(self):
        flags = build_context_flags({'is_date': True})
        assert flags['date'] is True

    def test_front_page_and_pagination(self):
        assert build_context_flags({'is_front_page': True})['front_page'] is True
        paged_front = build_context_flags({'is_front_page': True, 'is_paged': True})
        assert paged_front['front_page'] is False
        assert paged_front['paged'] is False

    def test_home_masks_front_page(self):
        flags = build_context_flags({'is_front_page': True, 'is_home': True})
        assert flags['front_page'] is False
        assert flags['home'] is True

    def test_paged_archive(self):
        flags = build_context_flags({'is_tag': True, 'is_paged': True})
        assert flags['paged'] is True
        assert resolve_context(flags) == 'tag'

    def test_singular_only_for_other_types(self):
        assert build_context_flags({'is_singular': True, 'is_single': True})['singular'] is False
        assert build_context_flags({'is_singular': True})['singular'] is True

    def test_404(self):
        assert build_context_flags({'is_404': True})['error'] is True

    def test_comment_feed_masks_feed(self):
        flags = build_context_flags({'is_feed': True, 'is_comment_feed': True})
        assert flags['feed'] is False
        assert flags['comment_feed'] is True

    def test_unknown_predicates_ignored(self):
        flags = build_context_flags({'is_bogus': True})
        assert set(flags) == set(CONTEXTS)
        assert not any(flags.values())


# ---------------------------------------------------------------------------
# Collection, overrides and the pipeline
# ---------------------------------------------------------------------------

class TestDirectiveResolution:

    def test_collect_active_canonical_order(self):
        config = make_config(search=('nosnippet', 'noindex'))
        assert collect_active('search', config) == ('noindex', 'nosnippet')

    def test_collect_active_nothing_enabled(self):
        assert collect_active('search', make_config()) == ()

    @pytest.mark.parametrize('context', ['attachment', 'feed', 'comment_feed'])
    def test_header_only_context_under_meta(self, context):
        config = make_config(method='meta', **{context: ('noindex',)})
        assert collect_active(context, config) == ()

    @pytest.mark.parametrize('context', ['attachment', 'feed', 'comment_feed'])
    def test_header_only_context_under_both(self, context):
        config = make_config(method='both', **{context: ('noindex',)})
        assert collect_active(context, config) == ('noindex',)

    def test_header_only_context_under_header(self):
        config = make_config(method='header', attachment=('noindex',))
        assert collect_active('attachment', config) == ('noindex',)

    def test_override_replaces_global(self):
        config = make_config(page=('noindex',))
        override = Override(enabled=True, directives={'nofollow': True})
        assert resolve_for_item(override, 'page', config) == ('nofollow',)

    def test_empty_override_means_no_restrictions(self):
        config = make_config(page=('noindex',))
        override = Override(enabled=True, directives={})
        assert resolve_for_item(override, 'page', config) == ()

    def test_disabled_override_falls_back(self):
        config = make_config(page=('noindex',))
        assert resolve_for_item(Override(enabled=False), 'page', config) == ('noindex',)
        assert resolve_for_item(None, 'page', config) == ('noindex',)

    def test_resolve_global(self):
        result = resolve({'search': True}, make_config(search=('noindex',)))
        assert result.context == 'search'
        assert result.directives == ('noindex',)
        assert result.source == 'global'

    def test_resolve_walks_to_next_context(self):
        config = make_config(paged=('noindex',))
        result = resolve({'page': True, 'paged': True}, config)
        assert result.context == 'paged'
        assert result.directives == ('noindex',)

    def test_resolve_nothing(self):
        result = resolve({'search': True}, make_config())
        assert result.context == 'search'
        assert result.directives == ()
        assert result.source == 'none'

    def test_resolve_override_needs_granular(self):
        override = Override(enabled=True, directives={'nofollow': True})
        config = make_config(page=('noindex',))
        assert resolve({'page': True}, config, override=override).directives == ('noindex',)

        config.granular_enabled = True
        result = resolve({'page': True}, config, override=override)
        assert result.directives == ('nofollow',)
        assert result.source == 'override'

    def test_resolve_empty_override(self):
        config = make_config(granular=True, page=('noindex',))
        result = resolve({'page': True}, config, override=Override(enabled=True))
        assert result.directives == ()
        assert result.source == 'override'

    def test_override_ignored_outside_singular_contexts(self):
        config = make_config(granular=True, search=('noindex',))
        result = resolve({'search': True}, config, override=Override(enabled=True))
        assert result.directives == ('noindex',)
        assert result.source == 'global'

    @pytest.mark.parametrize('context', ['single', 'page', 'attachment', 'privacy_policy', 'singular'])
    def test_override_applies_on_singular_contexts(self, context):
        config = make_config(method='header', granular=True, **{context: ('noindex',)})
        override = Override(enabled=True, directives={'nosnippet': True})
        result = resolve({context: True}, config, override=override)
        assert result.directives == ('nosnippet',)
        assert result.source == 'override'


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------

class TestEmitter:

    def test_meta(self):
        plan = emit(('noindex',), 'meta')
        assert plan.header is None
        assert plan.meta_flags == ('noindex',)

    def test_header(self):
        plan = emit(('noindex', 'nofollow'), 'header')
        assert plan.header == 'noindex, nofollow'
        assert plan.header_line == 'X-Robots-Tag: noindex, nofollow'
        assert plan.meta_flags is None

    def test_both(self):
        plan = emit(('noarchive',), 'both')
        assert plan.header == 'noarchive'
        assert plan.meta_flags == ('noarchive',)

    def test_headers_sent_falls_back_to_meta(self):
        plan = emit(('noindex',), 'header', headers_sent=True)
        assert plan.header is None
        assert plan.meta_flags == ('noindex',)

    def test_empty(self):
        plan = emit((), 'both')
        assert plan.is_empty
        assert plan.header_line is None
        assert plan == EmissionPlan()

    def test_invalid_method_is_meta(self):
        plan = emit(('noindex',), 'bogus')
        assert plan.header is None
        assert plan.meta_flags == ('noindex',)

    def test_unknown_directives_dropped(self):
        assert emit(('noindex', 'index', 'noindex'), 'header').header == 'noindex'
        assert sanitize_directives(['follow', 'nofollow']) == ('nofollow',)

    def test_sanitize_method(self):
        assert sanitize_method('HEADER') == 'header'
        assert sanitize_method(None) == 'meta'
        assert sanitize_method('both') == 'both'

    def test_apply_meta_keeps_existing(self):
        robots = apply_meta({'max-image-preview': 'large'}, ('noindex', 'nofollow'))
        assert robots == {'max-image-preview': 'large', 'noindex': True, 'nofollow': True}
        assert apply_meta(None, None) == {}


# ---------------------------------------------------------------------------
# Settings, cache and lifecycle
# ---------------------------------------------------------------------------

class TestSettingsHelpers:

    def test_is_checked(self):
        assert is_checked(1)
        assert is_checked('1')
        assert is_checked('true')
        assert is_checked(True)
        assert not is_checked('0')
        assert not is_checked('yes')
        assert not is_checked(None)

    def test_config_coerces_method(self):
        assert GlobalConfig(method='bogus').method == 'meta'

    def test_detect_conflicts_first_known_plugin(self):
        active = ['hello-dolly/hello.php', 'wordpress-seo/wp-seo.php', 'slim-seo/slim-seo.php']
        assert detect_conflicts(active, GlobalConfig()) == 'Slim SEO'
        assert detect_conflicts(['hello-dolly/hello.php'], GlobalConfig()) is None

    def test_detect_conflicts_suppressed(self):
        config = GlobalConfig(suppress_conflict_warnings=True)
        assert detect_conflicts(['wordpress-seo/wp-seo.php'], config) is None

    def test_conflict_message_names_plugin(self):
        assert 'Yoast SEO' in conflict_message('Yoast SEO')


@pytest.mark.django_db
class TestSettingsStore:

    def test_install_defaults(self, site):
        config = load_config(OptionStore(site))
        assert config.method == 'meta'
        assert config.granular_enabled is False
        assert config.suppress_conflict_warnings is False
        assert config.config_version == 2
        assert not any(config.flags.values())

    def test_save_settings(self, site):
        store = OptionStore(site)
        config = save_settings(store, {
            'method': 'header',
            'noindex_seo_search': '1',
            'nofollow_seo_search': 'true',
            'noarchive_seo_search': '0',
            'granular': True,
        })
        assert config.method == 'header'
        assert config.granular_enabled is True
        assert config.is_enabled('search', 'noindex')
        assert config.is_enabled('search', 'nofollow')
        assert not config.is_enabled('search', 'noarchive')
        assert store.get('noindex_seo_config_granular') == 1

    def test_save_settings_resets_unsubmitted_flags(self, site):
        store = OptionStore(site)
        save_settings(store, {'noindex_seo_tag': 1})
        config = save_settings(store, {})
        assert not config.is_enabled('tag', 'noindex')

    def test_header_only_forced_off_under_meta(self, site):
        store = OptionStore(site)
        save_settings(store, {'method': 'meta', 'noindex_seo_attachment': 1, 'noindex_seo_feed': 1})
        assert store.get('noindex_seo_attachment') == 0
        assert store.get('noindex_seo_feed') == 0

        save_settings(store, {'method': 'both', 'noindex_seo_attachment': 1})
        assert store.get('noindex_seo_attachment') == 1

    def test_invalid_method_saved_as_meta(self, site):
        store = OptionStore(site)
        assert save_settings(store, {'method': 'bogus'}).method == 'meta'
        assert store.get('noindex_seo_config_method') == 'meta'

    def test_options_are_cached_until_cleared(self, site):
        store = OptionStore(site)
        assert not load_config(store).is_enabled('search', 'noindex')

        store.set('noindex_seo_search', 1)
        assert not load_config(store).is_enabled('search', 'noindex')

        clear_cache(site)
        assert load_config(store).is_enabled('search', 'noindex')

    def test_save_settings_invalidates_cache(self, site):
        store = OptionStore(site)
        load_config(store)
        config = save_settings(store, {'noindex_seo_search': 1})
        assert config.is_enabled('search', 'noindex')
        assert load_config(store).is_enabled('search', 'noindex')

    def test_option_store_add_keeps_existing(self, site):
        store = OptionStore(site)
        assert store.add('noindex_seo_search', 1) is False
        assert store.get('noindex_seo_search') == 0
        assert store.add('custom_option', 'x') is True
        assert store.get('missing', 'default') == 'default'


@pytest.mark.django_db
class TestMigration:

    @pytest.fixture
    def v1_store(self, authenticated_client, create_site):
        _, user = authenticated_client
        store = OptionStore(create_site(user=user))
        store.set('noindex_seo_search', 1)
        store.set('nofollow_seo_search', 1)
        store.set(option_name('noindex', 'tag'), 1)
        store.set('noindex_seo_config_version', 1)
        return store

    def test_migrate_adds_missing_options_only(self, v1_store):
        created = migrate_to_v2(v1_store)
        assert created == len(CONTEXTS) * len(V2_DIRECTIVES) - 1
        assert v1_store.get('nofollow_seo_search') == 1
        assert v1_store.get('noarchive_seo_search') == 0
        assert v1_store.get('noimageindex_seo_error') == 0
        assert v1_store.get('noindex_seo_tag') == 1
        assert v1_store.get('noindex_seo_config_version') == 2

    def test_check_migration_is_idempotent(self, v1_store):
        assert check_migration(v1_store) is True
        count = v1_store.site.robots_options.count()
        assert check_migration(v1_store) is False
        assert v1_store.site.robots_options.count() == count

    def test_missing_version_counts_as_v1(self, authenticated_client, create_site):
        _, user = authenticated_client
        store = OptionStore(create_site(user=user))
        assert check_migration(store) is True
        assert load_config(store).config_version == 2

    def test_migration_invalidates_cache(self, v1_store):
        load_config(v1_store)
        check_migration(v1_store)
        assert load_config(v1_store).config_version == 2

    def test_management_command(self, v1_store):
        out = StringIO()
        call_command('migrate_robots_config', stdout=out)
        assert 'Migrated 1 site(s).' in out.getvalue()
        assert v1_store.get('noindex_seo_config_version') == 2


@pytest.mark.django_db
class TestOverrideStore:

    def test_save_and_get(self, site):
        overrides = OverrideStore(site)
        overrides.save(10, True, {'nofollow': True})
        override = overrides.get(10)
        assert override.enabled is True
        assert override.active == ('nofollow',)

    def test_disable_removes_override(self, site):
        from robots.models import Page
        overrides = OverrideStore(site)
        overrides.save(10, True, {'noindex': True})
        assert overrides.save(10, False) is None
        assert overrides.get(10) is None
        assert Page.objects.filter(site=site, wp_post_id=10).exists()

    def test_bulk_enable_creates_unsynced_pages(self, site):
        from robots.models import Page
        Page.objects.create(site=site, wp_post_id=1)
        Page.objects.create(site=site, wp_post_id=2)
        overrides = OverrideStore(site)
        overrides.save(2, True, {'noarchive': True})

        assert overrides.bulk_enable([1, 2, 99, 99]) == 3
        assert overrides.get(1).active == ()
        assert overrides.get(2).active == ('noarchive',)
        assert overrides.get(99).active == ()
        assert Page.objects.filter(site=site, wp_post_id=99).exists()

    def test_bulk_disable(self, site):
        from robots.models import Page
        Page.objects.create(site=site, wp_post_id=1)
        overrides = OverrideStore(site)
        overrides.save(1, True, {'noindex': True})
        assert overrides.bulk_disable([1, 99]) == 1
        assert overrides.get(1) is None

    def test_deleting_page_deletes_override(self, site):
        from robots.models import Page, RobotsOverride
        OverrideStore(site).save(3, True, {'noindex': True})
        Page.objects.filter(site=site, wp_post_id=3).delete()
        assert not RobotsOverride.objects.exists()


@pytest.mark.django_db
class TestUninstall:

    def test_uninstall_removes_everything(self, site):
        from robots.models import RobotsOption, RobotsOverride
        store = OptionStore(site)
        save_settings(store, {'noindex_seo_search': 1, 'granular': 1})
        OverrideStore(site).save(7, True, {'noindex': True})
        store.set('unrelated_option', 'kept')
        load_config(store)

        removed = uninstall(site)
        assert removed['overrides'] == 1
        assert removed['options'] == len(DIRECTIVE_OPTION_NAMES) + len(CONFIG_OPTIONS)
        assert list(RobotsOption.objects.filter(site=site).values_list('name', flat=True)) == ['unrelated_option']
        assert not RobotsOverride.objects.exists()
        assert not load_config(store).is_enabled('search', 'noindex')

    def test_purge_command(self, site):
        from robots.models import RobotsOption
        out = StringIO()
        call_command('purge_robots_config', site=site.id, stdout=out)
        assert not RobotsOption.objects.filter(site=site).exists()
        assert 'Removed' in out.getvalue()

    def test_purge_command_unknown_site(self):
        with pytest.raises(CommandError):
            call_command('purge_robots_config', site=999999)


# ---------------------------------------------------------------------------
# Dashboard endpoints
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestSettingsAPI:

    def test_get_settings(self, authenticated_client, site):
        client, _ = authenticated_client
        response = client.get(f'/api/v1/sites/{site.id}/robots/settings/')
        assert response.status_code == 200
        assert response.data['method'] == 'meta'
        assert response.data['config_version'] == 2
        assert response.data['options']['noindex_seo_search'] == 0

    def test_get_settings_runs_migration(self, authenticated_client, create_site):
        client, user = authenticated_client
        bare = create_site(user=user, url='https://bare.example.com')
        response = client.get(f'/api/v1/sites/{bare.id}/robots/settings/')
        assert response.status_code == 200
        assert response.data['config_version'] == 2

    def test_save_settings(self, authenticated_client, site):
        client, _ = authenticated_client
        response = client.post(f'/api/v1/sites/{site.id}/robots/settings/', {
            'method': 'both',
            'noindex_seo_search': 1,
            'noimageindex_seo_attachment': 1,
            'granular': 1,
        })
        assert response.status_code == 200
        settings = response.data['settings']
        assert settings['method'] == 'both'
        assert settings['granular_enabled'] is True
        assert settings['options']['noindex_seo_search'] == 1
        assert settings['options']['noimageindex_seo_attachment'] == 1

    def test_sections(self, authenticated_client, site):
        client, _ = authenticated_client
        save_settings(OptionStore(site), {'noindex_seo_search': 1, 'noindex_seo_tag': 1})

        response = client.get(f'/api/v1/sites/{site.id}/robots/sections/')
        assert response.status_code == 200
        assert response.data['stats']['noindex'] == 2
        assert response.data['directives'][0] == {
            'key': 'noindex',
            'description': 'Prevent search engines from indexing this page',
        }
        assert [d['key'] for d in response.data['directives']] == list(DIRECTIVES)
        fields = {
            field['context']: field
            for section in response.data['sections']
            for field in section['fields']
        }
        assert set(fields) == set(CONTEXTS)
        assert fields['attachment']['disabled'] is True
        assert fields['search']['disabled'] is False
        assert fields['search']['values']['noindex_seo_search'] == 1

    def test_non_owner_is_denied(self, authenticated_client, create_user, create_site):
        client, _ = authenticated_client
        other = create_site(user=create_user(email='other@example.com'), url='https://other.com')

        response = client.get(f'/api/v1/sites/{other.id}/robots/settings/')
        assert response.status_code == 403
        assert response.data['error']['message'] == 'Permission denied'

        response = client.post(f'/api/v1/sites/{other.id}/robots/settings/', {'noindex_seo_search': 1})
        assert response.status_code == 403
        assert not load_config(OptionStore(other)).is_enabled('search', 'noindex')

    def test_unknown_site(self, authenticated_client):
        client, _ = authenticated_client
        response = client.get('/api/v1/sites/999999/robots/settings/')
        assert response.status_code == 404

    def test_requires_login(self, api_client, site):
        api_client.credentials()
        response = api_client.get(f'/api/v1/sites/{site.id}/robots/settings/')
        assert response.status_code == 401

    def test_uninstall(self, authenticated_client, site):
        from robots.models import RobotsOption
        client, _ = authenticated_client
        response = client.delete(f'/api/v1/sites/{site.id}/robots/')
        assert response.status_code == 200
        assert not RobotsOption.objects.filter(site=site).exists()


@pytest.mark.django_db
class TestOverrideAPI:

    @pytest.fixture
    def granular_site(self, site):
        save_settings(OptionStore(site), {'granular': 1, 'noindex_seo_page': 1})
        return site

    def test_put_requires_granular(self, authenticated_client, site):
        client, _ = authenticated_client
        response = client.put(f'/api/v1/sites/{site.id}/robots/overrides/5/', {
            'enabled': True, 'directives': {'noindex': True},
        })
        assert response.status_code == 409
        assert response.data['error']['code'] == 'GRANULAR_DISABLED'
        assert OverrideStore(site).get(5) is None

    def test_put_and_get(self, authenticated_client, granular_site):
        client, _ = authenticated_client
        url = f'/api/v1/sites/{granular_site.id}/robots/overrides/5/'
        response = client.put(url, {'enabled': True, 'directives': ['nofollow', 'bogus']})
        assert response.status_code == 200
        assert response.data['enabled'] is True
        assert response.data['directives']['nofollow'] is True
        assert response.data['directives']['noindex'] is False

        response = client.get(url)
        assert response.data['enabled'] is True
        assert response.data['directives']['nofollow'] is True

    def test_put_malformed_directives_count_as_empty(self, authenticated_client, granular_site):
        client, _ = authenticated_client
        response = client.put(f'/api/v1/sites/{granular_site.id}/robots/overrides/6/', {
            'enabled': True, 'directives': '{"noindex": tru',
        })
        assert response.status_code == 200
        assert response.data['enabled'] is True
        assert not any(response.data['directives'].values())

    def test_put_disabled_removes(self, authenticated_client, granular_site):
        client, _ = authenticated_client
        OverrideStore(granular_site).save(5, True, {'noindex': True})
        response = client.put(f'/api/v1/sites/{granular_site.id}/robots/overrides/5/', {'enabled': False})
        assert response.status_code == 200
        assert response.data['enabled'] is False
        assert OverrideStore(granular_site).get(5) is None

    def test_delete(self, authenticated_client, granular_site):
        client, _ = authenticated_client
        OverrideStore(granular_site).save(5, True, {'noindex': True})
        response = client.delete(f'/api/v1/sites/{granular_site.id}/robots/overrides/5/')
        assert response.status_code == 200
        assert OverrideStore(granular_site).get(5) is None

    def test_get_without_override(self, authenticated_client, site):
        client, _ = authenticated_client
        response = client.get(f'/api/v1/sites/{site.id}/robots/overrides/5/')
        assert response.status_code == 200
        assert response.data['enabled'] is False
        assert not any(response.data['directives'].values())

    def test_bulk(self, authenticated_client, granular_site):
        from robots.models import Page
        client, _ = authenticated_client
        Page.objects.create(site=granular_site, wp_post_id=1)
        Page.objects.create(site=granular_site, wp_post_id=2)
        url = f'/api/v1/sites/{granular_site.id}/robots/overrides/bulk/'

        response = client.post(url, {'action': 'enable', 'item_ids': [1, 2, 99]})
        assert response.status_code == 200
        assert response.data['updated'] == 3
        assert OverrideStore(granular_site).get(1) is not None

        response = client.post(url, {'action': 'disable', 'item_ids': [1]})
        assert response.data['updated'] == 1
        assert OverrideStore(granular_site).get(1) is None
        assert OverrideStore(granular_site).get(2) is not None

    def test_bulk_invalid_action(self, authenticated_client, granular_site):
        client, _ = authenticated_client
        response = client.post(
            f'/api/v1/sites/{granular_site.id}/robots/overrides/bulk/',
            {'action': 'toggle', 'item_ids': [1]},
        )
        assert response.status_code == 400

    def test_bulk_requires_granular(self, authenticated_client, site):
        client, _ = authenticated_client
        response = client.post(
            f'/api/v1/sites/{site.id}/robots/overrides/bulk/',
            {'action': 'enable', 'item_ids': [1]},
        )
        assert response.status_code == 409

    def test_pages_filter(self, authenticated_client, granular_site):
        from robots.models import Page
        client, _ = authenticated_client
        for wp_post_id in (1, 2, 3):
            Page.objects.create(site=granular_site, wp_post_id=wp_post_id, title=f'Page {wp_post_id}')
        OverrideStore(granular_site).save(2, True, {'noindex': True})
        url = f'/api/v1/sites/{granular_site.id}/robots/pages/'

        response = client.get(url, {'filter': 'with_override'})
        assert response.status_code == 200
        assert [p['wp_post_id'] for p in response.data['pages']] == [2]
        assert response.data['pages'][0]['directives'] == ['noindex']

        response = client.get(url, {'filter': 'without_override'})
        assert sorted(p['wp_post_id'] for p in response.data['pages']) == [1, 3]

        response = client.get(url, {'filter': 'bogus'})
        assert response.data['total'] == 3


# ---------------------------------------------------------------------------
# Plugin endpoints
# ---------------------------------------------------------------------------

@pytest.mark.django_db
class TestResolveAPI:

    url = '/api/v1/robots/resolve/'

    def test_search_under_meta(self, plugin_client, site):
        save_settings(OptionStore(site), {'noindex_seo_search': 1})
        response = plugin_client.post(self.url, {'flags': {'search': True}})
        assert response.status_code == 200
        assert response.data['context'] == 'search'
        assert response.data['source'] == 'global'
        assert response.data['directives'] == ['noindex']
        assert response.data['header'] is None
        assert response.data['meta_flags'] == ['noindex']
        assert response.data['robots'] == {'noindex': True}

    def test_search_under_header(self, plugin_client, site):
        save_settings(OptionStore(site), {
            'method': 'header', 'noindex_seo_search': 1, 'nofollow_seo_search': 1,
        })
        response = plugin_client.post(self.url, {'flags': {'search': True}})
        assert response.data['header'] == 'noindex, nofollow'
        assert response.data['header_line'] == 'X-Robots-Tag: noindex, nofollow'
        assert response.data['meta_flags'] is None

    def test_both_methods(self, plugin_client, site):
        save_settings(OptionStore(site), {'method': 'both', 'noarchive_seo_home': 1})
        response = plugin_client.post(self.url, {
            'predicates': {'is_home': True},
            'robots': {'max-image-preview': 'large'},
        })
        assert response.data['context'] == 'home'
        assert response.data['header'] == 'noarchive'
        assert response.data['meta_flags'] == ['noarchive']
        assert response.data['robots'] == {'max-image-preview': 'large', 'noarchive': True}

    def test_headers_already_sent(self, plugin_client, site):
        save_settings(OptionStore(site), {'method': 'header', 'noindex_seo_error': 1})
        response = plugin_client.post(self.url, {'predicates': {'is_404': True}, 'headers_sent': True})
        assert response.data['header'] is None
        assert response.data['meta_flags'] == ['noindex']

    def test_attachment_under_meta_emits_nothing(self, plugin_client, site):
        # stored directly: the settings form would refuse it under 'meta'
        store = OptionStore(site)
        store.set('noindex_seo_attachment', 1)
        clear_cache(site)
        response = plugin_client.post(self.url, {'flags': {'attachment': True}})
        assert response.data['directives'] == []
        assert response.data['source'] == 'none'
        assert response.data['header'] is None
        assert response.data['meta_flags'] is None

    def test_override_replaces_global(self, plugin_client, site):
        save_settings(OptionStore(site), {'granular': 1, 'noindex_seo_single': 1})
        OverrideStore(site).save(42, True, {'nofollow': True})
        response = plugin_client.post(self.url, {'predicates': {'is_single': True}, 'item_id': 42})
        assert response.data['source'] == 'override'
        assert response.data['directives'] == ['nofollow']

    def test_empty_override_means_no_restrictions(self, plugin_client, site):
        save_settings(OptionStore(site), {'granular': 1, 'noindex_seo_single': 1})
        OverrideStore(site).save(42, True, {})
        response = plugin_client.post(self.url, {'predicates': {'is_single': True}, 'item_id': 42})
        assert response.data['source'] == 'override'
        assert response.data['directives'] == []
        assert response.data['meta_flags'] is None

    def test_override_ignored_on_search(self, plugin_client, site):
        save_settings(OptionStore(site), {'granular': 1, 'noindex_seo_search': 1})
        OverrideStore(site).save(42, True, {})
        response = plugin_client.post(self.url, {'predicates': {'is_search': True}, 'item_id': 42})
        assert response.data['context'] == 'search'
        assert response.data['source'] == 'global'
        assert response.data['directives'] == ['noindex']

    def test_override_ignored_without_granular(self, plugin_client, site):
        save_settings(OptionStore(site), {'noindex_seo_single': 1})
        OverrideStore(site).save(42, True, {'nofollow': True})
        response = plugin_client.post(self.url, {'predicates': {'is_single': True}, 'item_id': 42})
        assert response.data['source'] == 'global'
        assert response.data['directives'] == ['noindex']

    def test_no_context(self, plugin_client, site):
        response = plugin_client.post(self.url, {'flags': {}})
        assert response.status_code == 200
        assert response.data['context'] is None
        assert response.data['directives'] == []

    def test_missing_flags(self, plugin_client):
        response = plugin_client.post(self.url, {'item_id': 1})
        assert response.status_code == 400

    def test_settings_change_is_visible_immediately(self, plugin_client, site):
        store = OptionStore(site)
        response = plugin_client.post(self.url, {'flags': {'tag': True}})
        assert response.data['directives'] == []
        save_settings(store, {'noindex_seo_tag': 1})
        response = plugin_client.post(self.url, {'flags': {'tag': True}})
        assert response.data['directives'] == ['noindex']

    def test_jwt_is_not_accepted(self, authenticated_client, site):
        client, _ = authenticated_client
        response = client.post(self.url, {'flags': {'search': True}})
        assert response.status_code == 401


@pytest.mark.django_db
class TestPluginAPI:

    def test_conflicts(self, plugin_client):
        response = plugin_client.post('/api/v1/robots/conflicts/', {
            'active_plugins': ['wordpress-seo/wp-seo.php'],
        })
        assert response.status_code == 200
        assert response.data['conflict'] is True
        assert response.data['plugin'] == 'Yoast SEO'

    def test_conflicts_suppressed(self, plugin_client, site):
        save_settings(OptionStore(site), {'suppress_conflict_warnings': 1})
        response = plugin_client.post('/api/v1/robots/conflicts/', {
            'active_plugins': ['wordpress-seo/wp-seo.php'],
        })
        assert response.data['conflict'] is False
        assert response.data['suppressed'] is True

    def test_sync_page(self, plugin_client, site):
        from robots.models import Page
        response = plugin_client.post('/api/v1/robots/pages/sync/', {
            'wp_post_id': 123,
            'url': 'https://example.com/about',
            'title': 'About',
            'post_type': 'page',
        })
        assert response.status_code == 201
        assert response.data['created'] is True

        response = plugin_client.post('/api/v1/robots/pages/sync/', {
            'wp_post_id': 123, 'title': 'About us',
        })
        assert response.status_code == 200
        assert Page.objects.get(site=site, wp_post_id=123).title == 'About us'
        site.refresh_from_db()
        assert site.last_synced_at is not None

    def test_delete_page_removes_override(self, plugin_client, site):
        from robots.models import RobotsOverride
        OverrideStore(site).save(9, True, {'noindex': True})
        response = plugin_client.delete('/api/v1/robots/pages/9/')
        assert response.status_code == 204
        assert not RobotsOverride.objects.exists()

        response = plugin_client.delete('/api/v1/robots/pages/9/')
        assert response.status_code == 404

    def test_editor_override(self, plugin_client, site):
        url = '/api/v1/robots/overrides/11/'
        response = plugin_client.get(url)
        assert response.data['granular_enabled'] is False

        response = plugin_client.put(url, {'enabled': True, 'directives': {'noindex': True}})
        assert response.status_code == 409

        save_settings(OptionStore(site), {'granular': 1})
        response = plugin_client.put(url, {'enabled': True, 'directives': {'noindex': True}})
        assert response.status_code == 200
        assert OverrideStore(site).get(11).active == ('noindex',)

        response = plugin_client.get(url)
        assert response.data['granular_enabled'] is True
        assert response.data['enabled'] is True
