"""
Directive resolution: which directives apply to a request.

Global settings are collected per context; an enabled per-page override
replaces them entirely, including an override with no directives set
("no restrictions").
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import (
    CONTEXT_PRIORITY,
    DIRECTIVES,
    HEADER_ONLY_CONTEXTS,
    METHOD_META,
    SINGULAR_CONTEXTS,
)
from .context import matched_contexts

logger = logging.getLogger(__name__)

SOURCE_OVERRIDE = 'override'
SOURCE_GLOBAL = 'global'
SOURCE_NONE = 'none'


def collect_active(context, config) -> Tuple[str, ...]:
    """
    Directives enabled for a context, in canonical order.

    Header-only contexts (attachment, feeds) yield nothing under the 'meta'
    method: there is no HTML head to put the tag in.
    """
    if context is None:
        return ()
    if context in HEADER_ONLY_CONTEXTS and config.method == METHOD_META:
        return ()
    return tuple(d for d in DIRECTIVES if config.is_enabled(context, d))


def resolve_for_item(override, context, config) -> Tuple[str, ...]:
    if override is not None and override.enabled:
        return override.active
    return collect_active(context, config)


@dataclass
class Resolution:
    context: Optional[str] = None
    directives: Tuple[str, ...] = field(default_factory=tuple)
    source: str = SOURCE_NONE


def resolve(flags, config, override=None, order=CONTEXT_PRIORITY) -> Resolution:
    """
    Resolve the directives of one request.

    Overrides only count while granular control is on and the request serves
    a single content item (a singular context matched). Otherwise, matched
    contexts are tried in priority order and the first with any enabled
    directive wins.
    """
    matched = matched_contexts(flags, order)
    first = matched[0] if matched else None

    singular = any(context in SINGULAR_CONTEXTS for context in matched)
    if config.granular_enabled and singular and override is not None and override.enabled:
        result = Resolution(first, resolve_for_item(override, first, config), SOURCE_OVERRIDE)
        logger.debug("Resolved %s from override", result.directives)
        return result

    for context in matched:
        directives = collect_active(context, config)
        if directives:
            logger.debug("Resolved %s for context %s", directives, context)
            return Resolution(context, directives, SOURCE_GLOBAL)

    return Resolution(first, (), SOURCE_NONE)
