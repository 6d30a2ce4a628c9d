"""
Detect other SEO plugins that also emit robots directives.
"""
from .constants import CONFLICTING_PLUGINS


def detect_conflicts(active_plugins, config):
    """Display name of the first conflicting active plugin, or None."""
    if config.suppress_conflict_warnings:
        return None
    active = set(active_plugins or ())
    for plugin_file, name in CONFLICTING_PLUGINS.items():
        if plugin_file in active:
            return name
    return None


def conflict_message(name):
    return (
        f"{name} is active and may also output robots directives. "
        "Review its settings to avoid duplicate or contradictory instructions."
    )
