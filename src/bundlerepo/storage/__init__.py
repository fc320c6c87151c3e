"""
bundlerepo.storage - Artifact Storage Layer
=============================================

Components:
    - IdentityResolver (ABC):     extracts (symbolic name, version) from content
    - ManifestIdentityResolver:   reads Bundle-SymbolicName / Bundle-Version
    - ArtifactStore (ABC):        abstract artifact persistence
    - FileSystemArtifactStore:    <root>/<bsn>/<bsn>-<version>.jar with atomic writes
    - StoreOutcome:               what a single store() call did
"""

from bundlerepo.storage.artifact_store import (
    ArtifactStore,
    FileSystemArtifactStore,
    StoreOutcome,
)
from bundlerepo.storage.identity import (
    IdentityResolver,
    ManifestIdentityResolver,
    parse_manifest,
    read_manifest,
)

__all__ = [
    "ArtifactStore",
    "FileSystemArtifactStore",
    "StoreOutcome",
    "IdentityResolver",
    "ManifestIdentityResolver",
    "parse_manifest",
    "read_manifest",
]
