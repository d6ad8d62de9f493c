"""
URL normalization for guest blog sites.

Site URLs are stored with an explicit scheme. When the operator leaves it
out, https:// is assumed; an explicit http:// or https:// is preserved.

Examples:
    "example.com"          → "https://example.com"
    "http://example.com"   → "http://example.com"
    "www.example.com/path" → "https://www.example.com/path"
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)


class InvalidURLError(ValueError):
    """URL cannot be normalized into a usable site address."""
    pass


def normalize_url(value: Optional[str]) -> str:
    """
    Normalize a site URL.

    Args:
        value: URL as typed in the spreadsheet

    Returns:
        Normalized URL with scheme and lower-cased host

    Raises:
        InvalidURLError: If the value is empty or not a valid domain URL
    """
    if value is None or not str(value).strip():
        raise InvalidURLError("URL cannot be empty")

    trimmed = str(value).strip()

    if not _SCHEME_RE.match(trimmed):
        if "://" in trimmed:
            raise InvalidURLError("Only http and https URLs are supported")
        trimmed = f"https://{trimmed}"

    try:
        parts = urlsplit(trimmed)
        hostname = parts.hostname
        # Accessing .port validates the port component
        parts.port
    except ValueError as e:
        raise InvalidURLError(str(e)) from e

    if not hostname:
        raise InvalidURLError("Invalid hostname")

    if "." not in hostname or hostname.startswith(".") or hostname.endswith("."):
        raise InvalidURLError("Invalid domain format")

    if " " in trimmed:
        raise InvalidURLError("URL cannot contain spaces")

    return urlunsplit((
        parts.scheme.lower(),
        parts.netloc.lower(),
        parts.path,
        parts.query,
        parts.fragment,
    ))


def is_valid_url(value: Optional[str]) -> bool:
    """Check whether a value normalizes to a valid URL."""
    try:
        normalize_url(value)
        return True
    except InvalidURLError:
        return False


def extract_domain(url: str) -> str:
    """Extract the hostname for display; returns the input if it cannot be parsed."""
    try:
        return urlsplit(url).hostname or url
    except ValueError:
        return url
