"""
bundlerepo.repository.base - Repository Contract
==================================================

``RepositoryPlugin`` is the contract a dependency-resolution or build tool
programs against. Every repository implementation (writable local index,
read-only fixed index, ...) conforms to it.

    put(stream, options)                 → PutResult
    get(symbolic_name, version, props)   → Path | None
    list(regex)                          → sorted distinct symbolic names
    versions(symbolic_name)              → sorted versions
    can_write()                          → bool
    get_name() / get_location()          → str
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO, Optional, Union

from bundlerepo.core.models import PutOptions, PutResult, Version
from bundlerepo.core.reporter import Reporter


VersionSpec = Union[Version, str, None]


class RepositoryPlugin(ABC):
    """Abstract repository of versioned artifacts."""

    @abstractmethod
    def put(
        self,
        stream: BinaryIO,
        options: Optional[PutOptions] = None,
        reporter: Optional[Reporter] = None,
    ) -> PutResult:
        """Put the artifact read from ``stream`` into the repository.

        Args:
            stream: Binary stream with the artifact content.
            options: Put options; None means ``PutOptions()``.
            reporter: Collects warnings/errors; a fresh one is used if None.
                Its contents are also returned on ``PutResult.report``.

        Returns:
            The result of the put, never None. ``result.artifact is None``
            means nothing was stored (not an error).

        Raises:
            RepositoryUnavailable: Root missing, not writable or read-only.
            DigestMismatch: ``options.digest`` does not match the content.
            ArtifactChangeNotAllowed: The artifact would have to change.
            UnresolvableIdentity: The content has no symbolic name/version.
        """
        ...

    @abstractmethod
    def get(
        self,
        symbolic_name: str,
        version: VersionSpec = None,
        properties: Optional[Mapping[str, str]] = None,
    ) -> Optional[Path]:
        """Return the file of ``symbolic_name`` at ``version``.

        A None version selects the highest available version.
        """
        ...

    @abstractmethod
    def list(self, regex: Optional[str] = None) -> list[str]:
        """Symbolic names present in the repository, optionally filtered."""
        ...

    @abstractmethod
    def versions(self, symbolic_name: str) -> list[Version]:
        """Versions stored for ``symbolic_name`` (empty if unknown)."""
        ...

    @abstractmethod
    def can_write(self) -> bool:
        ...

    @abstractmethod
    def get_name(self) -> str:
        ...

    @abstractmethod
    def get_location(self) -> str:
        ...
