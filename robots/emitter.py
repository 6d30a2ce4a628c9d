"""
Turn a directive set into what the site plugin must output: an
X-Robots-Tag header value, a set of robots meta flags, or both.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    DEFAULT_METHOD,
    DIRECTIVES,
    HEADER_METHODS,
    HEADER_NAME,
    META_METHODS,
    METHODS,
)

logger = logging.getLogger(__name__)


def sanitize_method(value):
    """Unknown or missing methods fall back to 'meta'."""
    if isinstance(value, str):
        value = value.strip().lower()
    return value if value in METHODS else DEFAULT_METHOD


def sanitize_directives(values):
    """Known directives only, deduplicated, in the order given."""
    seen = []
    for value in values or ():
        if value in DIRECTIVES and value not in seen:
            seen.append(value)
    return tuple(seen)


@dataclass
class EmissionPlan:
    header: Optional[str] = None
    meta_flags: Optional[Tuple[str, ...]] = None

    @property
    def header_line(self):
        if not self.header:
            return None
        return f'{HEADER_NAME}: {self.header}'

    @property
    def is_empty(self):
        return not self.header and not self.meta_flags

    def to_dict(self):
        return {
            'header': self.header,
            'header_line': self.header_line,
            'meta_flags': list(self.meta_flags) if self.meta_flags else None,
        }


def emit(directives, method, headers_sent=False) -> EmissionPlan:
    """
    Build the emission plan for a directive set.

    A header is planned when the method includes 'header' and the response
    headers have not been sent yet. Meta flags are planned when the method
    includes 'meta', and also when a header was wanted but can no longer be
    sent, so the directives are not lost.
    """
    directives = sanitize_directives(directives)
    method = sanitize_method(method)
    if not directives:
        return EmissionPlan()

    header = None
    meta_flags = None
    wants_header = method in HEADER_METHODS

    if wants_header and not headers_sent:
        header = ', '.join(directives)
    if method in META_METHODS or (wants_header and headers_sent):
        meta_flags = directives

    if wants_header and headers_sent:
        logger.debug("Headers already sent, emitting %s as meta flags", ', '.join(directives))
    return EmissionPlan(header=header, meta_flags=meta_flags)


def apply_meta(robots, meta_flags):
    """Merge meta flags into a robots tag map, keeping existing entries."""
    merged = dict(robots or {})
    for flag in meta_flags or ():
        merged[flag] = True
    return merged
