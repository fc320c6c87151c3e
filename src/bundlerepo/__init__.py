"""
bundlerepo - Indexed Artifact Repository
==========================================

A pluggable repository for versioned binary components (bundles). Artifacts
are identified by a symbolic name and a version, stored under a
deterministic layout, and described by a regenerable index so consumers can
resolve "component X at version Y" without scanning the filesystem.

Architecture Layers (top to bottom):
    1. Repository Layer  - RepositoryPlugin, LocalIndexedRepository, FixedIndexedRepository
    2. Index Layer       - ContentIndexGenerator plugins, GeneratorRegistry, R5 index
    3. Storage Layer     - ArtifactStore, IdentityResolver
    4. Core              - Config, models, Reporter, exceptions

Quick Start:
    >>> from bundlerepo import LocalIndexedRepository, RepositoryConfig
    >>> repo = LocalIndexedRepository(RepositoryConfig(local="/srv/repo"))
    >>> with open("api-2.6.1.jar", "rb") as f:
    ...     result = repo.put(f)
    >>> repo.list(".*")
    ['org.example.api']
"""

__version__ = "0.1.0"

from bundlerepo.core.config import RepositoryConfig, load_config
from bundlerepo.core.models import PutOptions, PutResult, Version
from bundlerepo.core.reporter import Reporter
from bundlerepo.repository import (
    FixedIndexedRepository,
    LocalIndexedRepository,
    RepositoryPlugin,
    create_repository,
)

__all__ = [
    "__version__",
    "RepositoryConfig",
    "load_config",
    "PutOptions",
    "PutResult",
    "Version",
    "Reporter",
    "RepositoryPlugin",
    "FixedIndexedRepository",
    "LocalIndexedRepository",
    "create_repository",
]
