"""Hashing utilities."""

import hashlib
import posixpath
from urllib.parse import urlparse

DEFAULT_IMAGE_EXTENSION = ".jpg"


def generate_storage_key(url: str) -> str:
    """Generate a stable storage key from an image source URL.

    The key is the MD5 hex digest of the raw URL followed by the extension of
    the URL path. Falls back to ``.jpg`` when the path has no extension or the
    URL cannot be parsed.
    """
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()
    return f"{digest}{_url_extension(url)}"


def _url_extension(url: str) -> str:
    try:
        parsed = urlparse(url)
    except ValueError:
        return DEFAULT_IMAGE_EXTENSION

    if not parsed.scheme or not parsed.netloc:
        return DEFAULT_IMAGE_EXTENSION

    _, ext = posixpath.splitext(parsed.path)
    return ext or DEFAULT_IMAGE_EXTENSION
