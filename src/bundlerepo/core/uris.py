"""
bundlerepo.core.uris - Path / URI Conversion
==============================================

Artifact locations travel as absolute ``file:`` URIs (in PutResult and in
index records); the read path turns them back into local paths.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname


def path_to_uri(path: Path) -> str:
    return Path(path).resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """Convert a ``file:`` URI (or a plain filesystem path) to a Path.

    Raises:
        ValueError: If ``uri`` uses a scheme other than ``file``.
    """
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    # Single letters are Windows drive letters, not schemes
    if parsed.scheme == "" or len(parsed.scheme) == 1:
        return Path(uri)
    raise ValueError(f"Not a local location: {uri!r}")


def to_uri(location: str) -> str:
    """Normalize a configured location (path or URI) to an absolute URI."""
    parsed = urlparse(location)
    if parsed.scheme and len(parsed.scheme) > 1:
        return location
    return path_to_uri(Path(location))


def resolve_uri(base_uri: str, reference: str) -> str:
    """Resolve a (possibly relative) reference against ``base_uri``."""
    return urljoin(base_uri, reference)
