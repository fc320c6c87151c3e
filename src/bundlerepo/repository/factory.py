"""
bundlerepo.repository.factory - Repository Factory
====================================================

Maps a RepositoryConfig to a concrete repository:
    - ``local`` set      → LocalIndexedRepository
    - ``locations`` set  → FixedIndexedRepository

Usage:
    >>> repo = create_repository(load_config("bundlerepo.yaml"))
"""

from __future__ import annotations

from typing import Optional

from bundlerepo.core.config import RepositoryConfig
from bundlerepo.core.exceptions import ConfigurationError
from bundlerepo.index.registry import GeneratorRegistry
from bundlerepo.repository.base import RepositoryPlugin
from bundlerepo.repository.indexed import FixedIndexedRepository
from bundlerepo.repository.local import LocalIndexedRepository
from bundlerepo.storage.identity import IdentityResolver


def create_repository(
    config: RepositoryConfig,
    registry: Optional[GeneratorRegistry] = None,
    resolver: Optional[IdentityResolver] = None,
) -> RepositoryPlugin:
    """Create the repository described by ``config``.

    Raises:
        ConfigurationError: If neither ``local`` nor ``locations`` is set.
    """
    if config.local is not None:
        return LocalIndexedRepository(config, registry=registry, resolver=resolver)
    if config.locations:
        return FixedIndexedRepository(config, registry=registry)
    raise ConfigurationError(
        message="Either 'local' or 'locations' must be configured",
        details={"name": config.name},
    )
