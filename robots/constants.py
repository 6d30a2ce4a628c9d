"""
Constants for robots directive resolution.
Directives, contexts, their priority order, option names and settings-UI sections.
"""

# =============================================================================
# DIRECTIVES
# =============================================================================

DIRECTIVES = ('noindex', 'nofollow', 'noarchive', 'nosnippet', 'noimageindex')

# Introduced with config version 2; noindex already existed in version 1
V2_DIRECTIVES = ('nofollow', 'noarchive', 'nosnippet', 'noimageindex')

DIRECTIVE_DESCRIPTIONS = {
    'noindex': 'Prevent search engines from indexing this page',
    'nofollow': 'Prevent search engines from following links on this page',
    'noarchive': 'Prevent search engines from showing a cached version',
    'nosnippet': 'Prevent search engines from showing a text snippet',
    'noimageindex': 'Prevent search engines from indexing images on this page',
}

# =============================================================================
# IMPLEMENTATION METHODS
# =============================================================================

METHOD_META = 'meta'
METHOD_HEADER = 'header'
METHOD_BOTH = 'both'

METHODS = (METHOD_META, METHOD_HEADER, METHOD_BOTH)
DEFAULT_METHOD = METHOD_META

HEADER_METHODS = (METHOD_HEADER, METHOD_BOTH)
META_METHODS = (METHOD_META, METHOD_BOTH)

HEADER_NAME = 'X-Robots-Tag'

# =============================================================================
# CONTEXTS
# =============================================================================

# Every context that has stored settings
CONTEXTS = (
    'error',
    'archive',
    'attachment',
    'author',
    'category',
    'comment_feed',
    'customize_preview',
    'date',
    'day',
    'feed',
    'front_page',
    'home',
    'month',
    'page',
    'paged',
    'post_type_archive',
    'preview',
    'privacy_policy',
    'robots',
    'search',
    'single',
    'singular',
    'tag',
    'time',
    'year',
)

# Resolution order, most specific first (first match wins)
CONTEXT_PRIORITY = (
    'single',
    'page',
    'attachment',
    'privacy_policy',
    'category',
    'tag',
    'author',
    'post_type_archive',
    'day',
    'month',
    'year',
    'time',
    'date',
    'archive',
    'search',
    'error',
    'front_page',
    'home',
    'singular',
    'paged',
    'preview',
    'customize_preview',
    'comment_feed',
    'feed',
    'robots',
)

# Non-HTML responses: only an X-Robots-Tag header can carry directives
HEADER_ONLY_CONTEXTS = frozenset({'attachment', 'feed', 'comment_feed'})

# Contexts that serve a single content item; only these consult per-page overrides
SINGULAR_CONTEXTS = frozenset({'single', 'page', 'attachment', 'privacy_policy', 'singular'})

# =============================================================================
# OPTION NAMES
# =============================================================================

OPTION_PREFIX = 'noindex_seo_'
OPTION_METHOD = 'noindex_seo_config_method'
OPTION_GRANULAR = 'noindex_seo_config_granular'
OPTION_SEOPLUGINS = 'noindex_seo_config_seoplugins'
OPTION_VERSION = 'noindex_seo_config_version'

CONFIG_OPTIONS = (OPTION_METHOD, OPTION_GRANULAR, OPTION_SEOPLUGINS, OPTION_VERSION)

CONFIG_VERSION = 2

CACHE_KEY = 'noindex_seo_options'
CACHE_TTL = 3600


def option_name(directive, context):
    """Option holding one (directive, context) flag, e.g. 'nofollow_seo_search'."""
    return f'{directive}_seo_{context}'


def directive_option_prefix(directive):
    return f'{directive}_seo_'


DIRECTIVE_OPTION_NAMES = tuple(
    option_name(directive, context)
    for context in CONTEXTS
    for directive in DIRECTIVES
)

# =============================================================================
# CONFLICTING PLUGINS
# =============================================================================

# Plugin file -> display name; checked in this order, first hit is reported
CONFLICTING_PLUGINS = {
    'all-in-one-seo-pack/all_in_one_seo_pack.php': 'All in One SEO',
    'premium-seo-pack/index.php': 'Premium SEO Pack',
    'seo-by-rank-math/rank-math.php': 'Rank Math SEO',
    'wp-seopress/seopress.php': 'SEOPress',
    'slim-seo/slim-seo.php': 'Slim SEO',
    'squirrly-seo/squirrly.php': 'Squirrly SEO',
    'autodescription/autodescription.php': 'The SEO Framework',
    'wordpress-seo/wp-seo.php': 'Yoast SEO',
}

# =============================================================================
# OVERRIDE LIST FILTERS
# =============================================================================

FILTER_WITH_OVERRIDE = 'with_override'
FILTER_WITHOUT_OVERRIDE = 'without_override'

BULK_ENABLE = 'enable'
BULK_DISABLE = 'disable'
BULK_ACTIONS = (BULK_ENABLE, BULK_DISABLE)

# =============================================================================
# SETTINGS UI SECTIONS
# =============================================================================

SECTIONS = {
    'main_pages': {
        'title': 'Main Pages',
        'fields': {
            'front_page': ('Front Page', "Block the indexing of the site's front page."),
            'home': ('Home', "Block the indexing of the site's home page."),
        },
    },
    'pages_posts': {
        'title': 'Pages and Posts',
        'fields': {
            'page': ('Page', 'Block the indexing of site pages.'),
            'privacy_policy': ('Privacy Policy', 'Block the indexing of the privacy policy page.'),
            'single': ('Single Post', 'Block the indexing of individual posts.'),
            'singular': ('Singular', 'Block the indexing of any singular content (post or page).'),
        },
    },
    'taxonomies': {
        'title': 'Taxonomies',
        'fields': {
            'category': ('Category', 'Block the indexing of category archive pages.'),
            'tag': ('Tag', 'Block the indexing of tag archive pages.'),
        },
    },
    'dates': {
        'title': 'Date Archives',
        'fields': {
            'date': ('Date', 'Block the indexing of any date-based archive page.'),
            'day': ('Day', 'Block the indexing of daily archive pages.'),
            'month': ('Month', 'Block the indexing of monthly archive pages.'),
            'time': ('Time', 'Block the indexing of time-based archive pages.'),
            'year': ('Year', 'Block the indexing of yearly archive pages.'),
        },
    },
    'archives': {
        'title': 'Archives',
        'fields': {
            'archive': ('Archive', 'Block the indexing of any type of archive page.'),
            'author': ('Author', 'Block the indexing of author archive pages.'),
            'post_type_archive': ('Post Type Archive', 'Block the indexing of post type archive pages.'),
        },
    },
    'pagination': {
        'title': 'Pagination',
        'fields': {
            'paged': ('Paginated Pages', 'Block the indexing of pagination pages (page 2, 3, etc.).'),
        },
    },
    'search': {
        'title': 'Search',
        'fields': {
            'search': ('Search Results', 'Block the indexing of search result pages.'),
        },
    },
    'attachments': {
        'title': 'Attachments',
        'fields': {
            'attachment': ('Attachment Pages', 'Block the indexing of attachment pages (does not affect the file itself).'),
        },
    },
    'feeds': {
        'title': 'Feeds',
        'fields': {
            'feed': ('Feeds', 'Block the indexing of RSS and Atom feeds.'),
            'comment_feed': ('Comment Feeds', 'Block the indexing of comment feeds.'),
            'robots': ('robots.txt', 'Send directives with the robots.txt response.'),
        },
    },
    'previews': {
        'title': 'Previews',
        'fields': {
            'customize_preview': ('Customize Preview', 'Block the indexing when content is in customize preview mode.'),
            'preview': ('Post Preview', 'Block the indexing when viewing post previews.'),
        },
    },
    'error_page': {
        'title': 'Error Pages',
        'fields': {
            'error': ('Error 404', 'Block the indexing of 404 error pages.'),
        },
    },
}
