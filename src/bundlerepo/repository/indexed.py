"""
bundlerepo.repository.indexed - Index-Backed Read Path
========================================================

Reads never scan the filesystem. They consult the records parsed from the
repository's index file(s), so what readers see is defined by the index:
an artifact file that failed to be indexed is invisible until the next
successful regeneration.

    index location(s) ──→ sniff (generator.can_parse) ──→ generator.parse
                                                              │
                                                              ↓
                                                   cached ArtifactRecords
                                                              │
                        get() / get_all() / list() / versions() ┘

Repository Implementations:
    - IndexedRepository (ABC):   shared read path over index locations
    - FixedIndexedRepository:    read-only, over pre-existing index files
    - LocalIndexedRepository:    writable (see ``repository.local``)
"""

from __future__ import annotations

import io
import re
from abc import abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import BinaryIO, Optional

import structlog

from bundlerepo.core.config import RepositoryConfig
from bundlerepo.core.enums import Strategy
from bundlerepo.core.exceptions import (
    ConfigurationError,
    IndexFormatError,
    ReadOnlyRepository,
    RepositoryUnavailable,
)
from bundlerepo.core.models import ArtifactIdentity, ArtifactRecord, PutOptions, PutResult, Version
from bundlerepo.core.reporter import Reporter
from bundlerepo.core.uris import to_uri, uri_to_path
from bundlerepo.index.registry import GeneratorRegistry, default_registry
from bundlerepo.repository.base import RepositoryPlugin, VersionSpec


logger = structlog.get_logger()

# Enough leading bytes for a generator to recognize its format
_SNIFF_SIZE = 4096


# =============================================================================
# Abstract Indexed Repository
# =============================================================================
class IndexedRepository(RepositoryPlugin):
    """Read path shared by all repositories backed by index files.

    Records are loaded lazily on first read and cached; ``refresh()`` drops
    the cache. When several locations describe the same identity, the first
    location wins.
    """

    def __init__(self, name: str, registry: Optional[GeneratorRegistry] = None) -> None:
        self._name = name
        self._registry = registry if registry is not None else default_registry()
        self._records: Optional[list[ArtifactRecord]] = None
        self._logger = logger.bind(component=type(self).__name__, repository=name)

    @abstractmethod
    def index_locations(self) -> list[str]:
        """URIs of the index files this repository reads."""
        ...

    def _index_missing(self, location: str) -> list[ArtifactRecord]:
        """Records to use when an index location does not exist."""
        return []

    # -------------------------------------------------------------------------
    # Index loading
    # -------------------------------------------------------------------------
    def records(self) -> list[ArtifactRecord]:
        if self._records is None:
            self._records = self._load_all()
        return list(self._records)

    def refresh(self) -> None:
        self._records = None

    def _load_all(self) -> list[ArtifactRecord]:
        by_identity: dict[ArtifactIdentity, ArtifactRecord] = {}
        for location in self.index_locations():
            for record in self._load(location):
                by_identity.setdefault(record.identity, record)
        return list(by_identity.values())

    def _load(self, location: str) -> list[ArtifactRecord]:
        try:
            path = uri_to_path(location)
        except ValueError as e:
            raise RepositoryUnavailable(
                message=f"Only local index locations are supported: {location}",
                location=location,
            ) from e

        if not path.is_file():
            return self._index_missing(location)

        data = path.read_bytes()
        head = data[:_SNIFF_SIZE]
        for generator in self._registry.generators():
            if generator.can_parse(head):
                records = generator.parse(io.BytesIO(data), location)
                self._logger.debug(
                    "index_loaded",
                    location=location,
                    generator=generator.name,
                    records=len(records),
                )
                return records

        raise IndexFormatError(
            message=f"No content provider recognizes the index at {location}",
            location=location,
            details={"available": self._registry.names()},
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def find(
        self,
        symbolic_name: str,
        version: VersionSpec = None,
        strategy: Strategy = Strategy.HIGHEST,
    ) -> Optional[ArtifactRecord]:
        """Select one record for ``symbolic_name``.

        An explicit ``version`` must match exactly. Without one, ``strategy``
        picks the lowest or highest version (EXACT falls back to highest).
        """
        candidates = [r for r in self.records() if r.symbolic_name == symbolic_name]
        if not candidates:
            return None

        if version is not None:
            wanted = version if isinstance(version, Version) else Version.parse(str(version))
            return next((r for r in candidates if r.version == wanted), None)

        if strategy is Strategy.LOWEST:
            return min(candidates, key=lambda r: r.version)
        return max(candidates, key=lambda r: r.version)

    def get(
        self,
        symbolic_name: str,
        version: VersionSpec = None,
        properties: Optional[Mapping[str, str]] = None,
    ) -> Optional[Path]:
        record = self.find(symbolic_name, version, self._strategy(properties))
        if record is None:
            return None
        return uri_to_path(record.location)

    def _strategy(self, properties: Optional[Mapping[str, str]]) -> Strategy:
        """Read ``properties["strategy"]`` leniently; unknown values mean HIGHEST."""
        raw = (properties or {}).get("strategy", "")
        if isinstance(raw, Strategy):
            return raw
        value = str(raw).strip().lower()
        if not value:
            return Strategy.HIGHEST
        try:
            return Strategy(value)
        except ValueError:
            self._logger.debug("strategy_ignored", strategy=value)
            return Strategy.HIGHEST

    def get_all(self, symbolic_name: str) -> list[Path]:
        """Files of every indexed version of ``symbolic_name``, lowest first."""
        records = sorted(
            (r for r in self.records() if r.symbolic_name == symbolic_name),
            key=lambda r: r.version,
        )
        return [uri_to_path(r.location) for r in records]

    def list(self, regex: Optional[str] = None) -> list[str]:
        pattern = re.compile(regex) if regex is not None else None
        return sorted({
            r.symbolic_name
            for r in self.records()
            if pattern is None or pattern.fullmatch(r.symbolic_name)
        })

    def versions(self, symbolic_name: str) -> list[Version]:
        return sorted({r.version for r in self.records() if r.symbolic_name == symbolic_name})

    def get_name(self) -> str:
        return self._name


# =============================================================================
# Read-Only Repository
# =============================================================================
class FixedIndexedRepository(IndexedRepository):
    """Read-only repository over one or more existing index files.

    Example:
        >>> repo = FixedIndexedRepository(locations=["/srv/repo/index.xml.gz"])
        >>> repo.get("org.example.api")
        PosixPath('/srv/repo/org.example.api/org.example.api-2.6.1.jar')
    """

    def __init__(
        self,
        config: Optional[RepositoryConfig] = None,
        *,
        locations: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        registry: Optional[GeneratorRegistry] = None,
    ) -> None:
        raw_locations = list(locations) if locations is not None else (
            config.locations if config is not None else []
        )
        if not raw_locations:
            raise ConfigurationError(
                message="A read-only repository needs at least one index location",
            )
        super().__init__(
            name=name or (config.name if config is not None else "fixed"),
            registry=registry,
        )
        self._locations = [to_uri(location) for location in raw_locations]

    def index_locations(self) -> list[str]:
        return list(self._locations)

    def _index_missing(self, location: str) -> list[ArtifactRecord]:
        raise RepositoryUnavailable(
            message=f"Index not found: {location}",
            location=location,
        )

    def put(
        self,
        stream: BinaryIO,
        options: Optional[PutOptions] = None,
        reporter: Optional[Reporter] = None,
    ) -> PutResult:
        raise ReadOnlyRepository(
            message=f"Repository {self._name!r} is read-only",
            location=self.get_location(),
        )

    def can_write(self) -> bool:
        return False

    def get_location(self) -> str:
        return ",".join(self._locations)
