"""
Global robots configuration of a site.

Directive flags are read through the Django cache (one entry per site,
CACHE_TTL seconds) and invalidated whenever settings are saved, migrated or
purged. Scalar settings are read straight from the option store.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

from django.conf import settings
from django.core.cache import cache

from .constants import (
    CACHE_KEY,
    CACHE_TTL,
    CONTEXTS,
    DEFAULT_METHOD,
    DIRECTIVES,
    DIRECTIVE_OPTION_NAMES,
    HEADER_METHODS,
    HEADER_ONLY_CONTEXTS,
    OPTION_GRANULAR,
    OPTION_METHOD,
    OPTION_SEOPLUGINS,
    OPTION_VERSION,
    option_name,
)
from .emitter import sanitize_method

logger = logging.getLogger(__name__)

TRUTHY_VALUES = (1, '1', 'true')


def is_checked(value):
    """Form-style truthiness: only 1, '1' and true count as checked."""
    if isinstance(value, str):
        value = value.strip().lower()
    return value in TRUTHY_VALUES


def _as_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class GlobalConfig:
    """Resolved settings of one site."""
    flags: Dict[Tuple[str, str], bool] = field(default_factory=dict)
    method: str = DEFAULT_METHOD
    granular_enabled: bool = False
    suppress_conflict_warnings: bool = False
    config_version: int = 0

    def __post_init__(self):
        self.method = sanitize_method(self.method)

    def is_enabled(self, context, directive):
        return bool(self.flags.get((context, directive)))

    @property
    def header_enabled(self):
        return self.method in HEADER_METHODS

    def active_count(self, directive):
        return sum(1 for context in CONTEXTS if self.is_enabled(context, directive))

    def options(self):
        """Flags in stored form: {'noindex_seo_search': 1, ...}."""
        return {
            option_name(directive, context): int(self.is_enabled(context, directive))
            for context in CONTEXTS
            for directive in DIRECTIVES
        }

    @classmethod
    def from_options(cls, options, method=DEFAULT_METHOD, granular=0, seoplugins=0, version=0):
        flags = {
            (context, directive): bool(_as_int(options.get(option_name(directive, context), 0)))
            for context in CONTEXTS
            for directive in DIRECTIVES
        }
        return cls(
            flags=flags,
            method=method,
            granular_enabled=bool(_as_int(granular)),
            suppress_conflict_warnings=bool(_as_int(seoplugins)),
            config_version=_as_int(version),
        )


def cache_key(site):
    return f'{CACHE_KEY}:{site.pk}'


def clear_cache(site):
    cache.delete(cache_key(site))


def load_options(store):
    """Directive flags of the store's site, read through the cache."""
    key = cache_key(store.site)
    options = cache.get(key)
    if not options:
        stored = store.get_many(DIRECTIVE_OPTION_NAMES)
        options = {name: _as_int(stored.get(name, 0)) for name in DIRECTIVE_OPTION_NAMES}
        cache.set(key, options, getattr(settings, 'ROBOTS_CACHE_TTL', CACHE_TTL))
        logger.debug("Rebuilt robots options cache for site %s", store.site.pk)
    return options


def load_config(store) -> GlobalConfig:
    return GlobalConfig.from_options(
        load_options(store),
        method=store.get(OPTION_METHOD, DEFAULT_METHOD),
        granular=store.get(OPTION_GRANULAR, 0),
        seoplugins=store.get(OPTION_SEOPLUGINS, 0),
        version=store.get(OPTION_VERSION, 0),
    )


def save_settings(store, data) -> GlobalConfig:
    """
    Persist a settings form submission.

    Every directive flag is rewritten: 1 when submitted as checked, 0
    otherwise. Header-only contexts are forced to 0 unless the method sends
    headers. An invalid method falls back to 'meta'.
    """
    data = data or {}
    method = sanitize_method(data.get(OPTION_METHOD, data.get('method')))
    allow_header_only = method in HEADER_METHODS

    values = {}
    for context in CONTEXTS:
        for directive in DIRECTIVES:
            name = option_name(directive, context)
            if context in HEADER_ONLY_CONTEXTS and not allow_header_only:
                values[name] = 0
                continue
            values[name] = 1 if is_checked(data.get(name)) else 0

    granular = data.get(OPTION_GRANULAR, data.get('granular'))
    seoplugins = data.get(OPTION_SEOPLUGINS, data.get('suppress_conflict_warnings'))
    values[OPTION_METHOD] = method
    values[OPTION_GRANULAR] = 1 if is_checked(granular) else 0
    values[OPTION_SEOPLUGINS] = 1 if is_checked(seoplugins) else 0

    store.set_many(values)

    clear_cache(store.site)
    logger.info(
        "Saved robots settings for site %s (method=%s, granular=%s)",
        store.site.pk, method, values[OPTION_GRANULAR],
    )
    return load_config(store)
