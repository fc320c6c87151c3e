"""
bundlerepo.storage.identity - Artifact Identity Resolution
============================================================

The store does not know how to read a symbolic name and version out of an
artifact; it asks an ``IdentityResolver``. The default resolver reads the
main section of a jar's ``META-INF/MANIFEST.MF``:

    Manifest-Version: 1.0
    Bundle-SymbolicName: org.example.api;singleton:=true   → "org.example.api"
    Bundle-Version: 2.6.1                                   → Version(2, 6, 1)

Anything that is not a readable zip, has no manifest, has no ``Bundle-SymbolicName``
or has an unparseable ``Bundle-Version`` resolves to None, which the store
turns into ``UnresolvableIdentity``.
"""

from __future__ import annotations

import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog

from bundlerepo.core.models import ArtifactIdentity, Version


logger = structlog.get_logger()

# Raised by zipfile for corrupt, truncated, encrypted or unsupported members
_UNREADABLE_ZIP_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    OSError,
)

MANIFEST_PATH = "META-INF/MANIFEST.MF"
BUNDLE_SYMBOLIC_NAME = "Bundle-SymbolicName"
BUNDLE_VERSION = "Bundle-Version"

# Headers that are either the identity itself or carry no description
_NON_DESCRIPTIVE_HEADERS = frozenset(
    {BUNDLE_SYMBOLIC_NAME, BUNDLE_VERSION, "Manifest-Version"}
)


# =============================================================================
# Manifest Parsing
# =============================================================================
def parse_manifest(text: str) -> dict[str, str]:
    """Parse the main section of a manifest into a header dict.

    Continuation lines (starting with a single space) are appended to the
    previous header; the main section ends at the first empty line.
    """
    headers: dict[str, str] = {}
    current: Optional[str] = None

    for line in text.splitlines():
        if not line:
            break
        if line.startswith(" "):
            if current is not None:
                headers[current] += line[1:]
            continue
        name, separator, value = line.partition(":")
        if not separator:
            current = None
            continue
        current = name.strip()
        headers[current] = value[1:] if value.startswith(" ") else value

    return {name: value.strip() for name, value in headers.items()}


def read_manifest(path: Path) -> Optional[dict[str, str]]:
    """Read the manifest headers of a jar, or None if there is none."""
    try:
        with zipfile.ZipFile(path) as archive:
            try:
                raw = archive.read(MANIFEST_PATH)
            except KeyError:
                return None
    except _UNREADABLE_ZIP_ERRORS:
        return None
    return parse_manifest(raw.decode("utf-8", errors="replace"))


# =============================================================================
# Resolvers
# =============================================================================
class IdentityResolver(ABC):
    """Extracts the identity (and descriptive properties) of an artifact file."""

    @abstractmethod
    def resolve(self, path: Path) -> Optional[ArtifactIdentity]:
        """Return the artifact's identity, or None if it is not recognizable."""
        ...

    def describe(self, path: Path) -> dict[str, str]:
        """Return descriptive properties to publish in an index."""
        return {}


class ManifestIdentityResolver(IdentityResolver):
    """Resolves identity from ``Bundle-SymbolicName`` / ``Bundle-Version``."""

    def __init__(self) -> None:
        self._logger = logger.bind(component="manifest_identity_resolver")

    def resolve(self, path: Path) -> Optional[ArtifactIdentity]:
        headers = read_manifest(path)
        if headers is None:
            self._logger.debug("manifest_missing", path=str(path))
            return None

        # Directives such as ";singleton:=true" are not part of the name
        symbolic_name = headers.get(BUNDLE_SYMBOLIC_NAME, "").split(";")[0].strip()
        if not symbolic_name:
            self._logger.debug("symbolic_name_missing", path=str(path))
            return None

        version_text = headers.get(BUNDLE_VERSION, "0.0.0")
        try:
            version = Version.parse(version_text)
        except ValueError:
            self._logger.debug(
                "version_invalid",
                path=str(path),
                version=version_text,
            )
            return None

        return ArtifactIdentity(symbolic_name=symbolic_name, version=version)

    def describe(self, path: Path) -> dict[str, str]:
        headers = read_manifest(path) or {}
        return {
            name: value
            for name, value in headers.items()
            if name not in _NON_DESCRIPTIVE_HEADERS
        }
