"""
Request context classification.

A site plugin reports what kind of page it is serving either as ready-made
context flags ({'search': True}) or as raw template-tag predicates
({'is_search': True, 'is_paged': True}). build_context_flags turns the
latter into mutually exclusive flags; resolve_context picks the winner.
"""
from .constants import CONTEXT_PRIORITY, CONTEXTS


def _p(predicates, name):
    return bool(predicates.get(f'is_{name}'))


def build_context_flags(predicates):
    """
    Map raw predicates (is_single, is_archive, is_404, ...) to per-context flags.

    Umbrella predicates are masked so a request never fires both a
    specific context and its catch-all (a category archive is not also an
    'archive', a day archive is not also a 'date'). Unknown names are ignored.
    """
    predicates = predicates or {}

    is_single = _p(predicates, 'single')
    is_page = _p(predicates, 'page')
    is_attachment = _p(predicates, 'attachment')
    is_category = _p(predicates, 'category')
    is_tag = _p(predicates, 'tag')
    is_author = _p(predicates, 'author')
    is_post_type_archive = _p(predicates, 'post_type_archive')
    is_day = _p(predicates, 'day')
    is_month = _p(predicates, 'month')
    is_year = _p(predicates, 'year')
    is_time = _p(predicates, 'time')
    is_date = _p(predicates, 'date')
    is_front_page = _p(predicates, 'front_page')
    is_home = _p(predicates, 'home')
    is_paged = _p(predicates, 'paged')
    is_comment_feed = _p(predicates, 'comment_feed')

    flags = {
        'single': is_single,
        'page': is_page,
        'attachment': is_attachment,
        'privacy_policy': _p(predicates, 'privacy_policy'),
        'category': is_category,
        'tag': is_tag,
        'author': is_author,
        'post_type_archive': is_post_type_archive,
        'day': is_day,
        'month': is_month,
        'year': is_year,
        'time': is_time,
        # Catch-all for date archives none of the specific predicates cover
        'date': is_date and not (is_day or is_month or is_year or is_time),
        'archive': _p(predicates, 'archive') and not (
            is_category or is_tag or is_author or is_post_type_archive or is_date
        ),
        'search': _p(predicates, 'search'),
        'error': bool(predicates.get('is_404')) or _p(predicates, 'error'),
        'front_page': is_front_page and not is_paged and not is_home,
        'home': is_home and not is_paged,
        'singular': _p(predicates, 'singular') and not (is_single or is_page or is_attachment),
        'paged': is_paged and not is_front_page and not is_home,
        'preview': _p(predicates, 'preview'),
        'customize_preview': _p(predicates, 'customize_preview'),
        'comment_feed': is_comment_feed,
        'feed': _p(predicates, 'feed') and not is_comment_feed,
        'robots': _p(predicates, 'robots'),
    }
    return flags


def normalize_flags(flags):
    """Keep known contexts only, coerced to bool."""
    return {context: bool(flags.get(context)) for context in CONTEXTS if context in (flags or {})}


def matched_contexts(flags, order=CONTEXT_PRIORITY):
    """All contexts whose flag is set, in priority order."""
    return [context for context in order if flags.get(context)]


def resolve_context(flags, order=CONTEXT_PRIORITY):
    """
    Return the first context in `order` whose flag is true, or None.

    Flags are expected to be mutually exclusive already (see
    build_context_flags); overlapping flags simply resolve by order.
    """
    for context in order:
        if flags.get(context):
            return context
    return None
