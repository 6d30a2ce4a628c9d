"""
Configuration lifecycle: first install, version migration and uninstall.
"""
import logging

from .config import clear_cache
from .constants import (
    CONFIG_OPTIONS,
    CONFIG_VERSION,
    CONTEXTS,
    DEFAULT_METHOD,
    DIRECTIVES,
    DIRECTIVE_OPTION_NAMES,
    OPTION_GRANULAR,
    OPTION_METHOD,
    OPTION_SEOPLUGINS,
    OPTION_VERSION,
    V2_DIRECTIVES,
    directive_option_prefix,
    option_name,
)
from .store import OptionStore, OverrideStore

logger = logging.getLogger(__name__)


def install_defaults(store):
    """Seed a new site: every flag off, meta method, granular off, warnings on."""
    values = {name: 0 for name in DIRECTIVE_OPTION_NAMES}
    values.update({
        OPTION_METHOD: DEFAULT_METHOD,
        OPTION_GRANULAR: 0,
        OPTION_SEOPLUGINS: 0,
        OPTION_VERSION: CONFIG_VERSION,
    })
    store.set_many(values)
    clear_cache(store.site)
    logger.info("Installed default robots settings for site %s", store.site.pk)


def _stored_version(store):
    try:
        return int(store.get(OPTION_VERSION, 0) or 0)
    except (TypeError, ValueError):
        return 0


def migrate_to_v2(store):
    """
    Add the version 2 directive options (default 0) without touching values
    that already exist, then mark the configuration as version 2.
    Returns the number of options created.
    """
    created = 0
    for context in CONTEXTS:
        for directive in V2_DIRECTIVES:
            if store.add(option_name(directive, context), 0):
                created += 1
    store.set(OPTION_VERSION, CONFIG_VERSION)
    clear_cache(store.site)
    logger.info("Migrated robots settings of site %s to version %s (%d options added)",
                store.site.pk, CONFIG_VERSION, created)
    return created


def check_migration(store):
    """Run pending migrations. Returns True when one ran."""
    if _stored_version(store) >= CONFIG_VERSION:
        return False
    migrate_to_v2(store)
    return True


def uninstall(site):
    """
    Remove every robots option, the cached options and all overrides of a site.
    The returned option count covers directive flags and config options, each once.
    """
    store = OptionStore(site)
    removed = 0
    for directive in DIRECTIVES:
        # noindex_seo_ also prefixes the config options, deleted below
        removed += store.delete_prefix(directive_option_prefix(directive), exclude=CONFIG_OPTIONS)
    for name in CONFIG_OPTIONS:
        removed += int(store.delete(name))
    clear_cache(site)
    overrides = OverrideStore(site).delete_all()
    logger.info("Removed robots settings of site %s (%d options, %d overrides)",
                site.pk, removed, overrides)
    return {'options': removed, 'overrides': overrides}
