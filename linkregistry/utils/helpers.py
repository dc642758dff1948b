"""Helper utilities shared across the registry.

Functions:
    utcnow() -> datetime
        Return the current time as a timezone-aware UTC datetime
    is_absolute_url(value) -> bool
        Check that a string is an absolute URL (scheme and host)

Example:
    >>> from linkregistry.utils.helpers import is_absolute_url
    >>> is_absolute_url('https://example.com/article/123')
    True
    >>> is_absolute_url('example.com/article/123')
    False
"""

from datetime import datetime, UTC
from urllib.parse import urlsplit


def utcnow() -> datetime:
    """Return the current moment as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def is_absolute_url(value: object) -> bool:
    """Check whether `value` is a syntactically valid absolute URL

    Only the shape is checked: a scheme followed by a network location.
    Reachability is the caller's business.

    Args:
        value (object): candidate URL

    Returns:
        bool: True for e.g. 'https://example.com', False for '', 'example.com' or 'mailto:x@y.z'
    """
    if not isinstance(value, str) or not value.strip() or value != value.strip():
        return False
    try:
        components = urlsplit(value)
    except ValueError:
        return False
    return bool(components.scheme) and bool(components.netloc)

