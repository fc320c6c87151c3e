"""
bundlerepo.repository - Repository Layer
==========================================

Architecture:
    ┌──────────────────── RepositoryPlugin (ABC) ────────────────────┐
    │  put / get / list / versions / can_write / name / location     │
    └──────────────────────────────┬─────────────────────────────────┘
                                   │
                     IndexedRepository (read path over index files)
                         ├── FixedIndexedRepository   (read-only)
                         └── LocalIndexedRepository   (store + regenerate)

Usage:
    from bundlerepo.repository import LocalIndexedRepository, create_repository
"""

from bundlerepo.repository.base import RepositoryPlugin
from bundlerepo.repository.factory import create_repository
from bundlerepo.repository.indexed import FixedIndexedRepository, IndexedRepository
from bundlerepo.repository.local import LocalIndexedRepository

__all__ = [
    "RepositoryPlugin",
    "IndexedRepository",
    "FixedIndexedRepository",
    "LocalIndexedRepository",
    "create_repository",
]
