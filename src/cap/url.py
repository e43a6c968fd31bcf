"""
URL handling for <web> and <uri>

Real-world alerts regularly omit the scheme ("www.example.gov/path") or carry
a bare "http://". parse_url() accepts those:

1. A URL that parses strictly is kept as-is.
2. Otherwise, text that starts with a dotted domain ending in one of
   URL_ASSUMED_TLDS is retried with "http://" in front.
3. Otherwise "http://" and "https://" alone mean "no URL".
4. Anything else is an error.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from .constants import URL_ASSUMED_TLDS, URL_EMPTY_VALUES
from .errors import InvalidUrlError
from .text import INVALID_XML_CHARS

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*$')
LABEL_PATTERN = re.compile(r'^[A-Za-z0-9]*$')

# schemes that are meaningless without a host
HOST_SCHEMES = ('http', 'https', 'ftp', 'ws', 'wss')


def is_valid_url(text: str) -> bool:
    """Strictly check an absolute URL."""
    if not text or any(c.isspace() for c in text) or INVALID_XML_CHARS.search(text):
        return False
    try:
        parts = urlsplit(text)
        # port is parsed lazily and raises on garbage
        parts.port
    except ValueError:
        return False
    if not parts.scheme or not SCHEME_PATTERN.fullmatch(parts.scheme):
        return False
    if parts.scheme.lower() in HOST_SCHEMES and not parts.hostname:
        return False
    return True


def check_url(text: str) -> str:
    """
    Validate a URL for direct model construction (no leniency).

    Raises:
        InvalidUrlError: If the URL is not strictly valid
    """
    if not isinstance(text, str) or not is_valid_url(text):
        raise InvalidUrlError(f"Invalid URL: {text!r}")
    return text


def _assume_missing_http(text: str) -> Optional[str]:
    labels = text.split('/', 1)[0].split('.')
    if not all(LABEL_PATTERN.fullmatch(label) for label in labels):
        return None
    if labels[-1] not in URL_ASSUMED_TLDS:
        return None

    candidate = f"http://{text}"
    if is_valid_url(candidate):
        return candidate
    return None


def parse_url(text: str) -> Optional[str]:
    """
    Parse a URL leniently.

    Args:
        text: URL text from an alert

    Returns:
        The URL, "http://" + text for a scheme-less domain, or None for an
        empty "http://" / "https://"

    Raises:
        InvalidUrlError: If no interpretation works
    """
    text = text.strip()
    if is_valid_url(text):
        return text

    fixed = _assume_missing_http(text)
    if fixed is not None:
        logger.debug("Assuming http:// for scheme-less URL %r", text)
        return fixed

    if text in URL_EMPTY_VALUES:
        return None

    raise InvalidUrlError(f"Invalid URL: {text!r}")
