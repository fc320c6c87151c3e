"""
bundlerepo.repository.local - Local Indexed Repository
========================================================

The writable repository: artifacts live under a local root directory and a
single index file at the root describes all of them.

put() State Machine:

    START ──→ STORE_ARTIFACT ──✗──→ FAILED   (exception, no file written)
                   │
                   ├── nothing stored (duplicate) ──→ DONE (artifact=None)
                   ↓
             REGENERATE_INDEX ──→ warnings / errors on the Reporter
                   ↓
                 DONE (artifact=URI, report attached)

    A stored artifact is never rolled back because the index could not be
    regenerated. The next successful regeneration (a full rebuild from the
    file listing) reconciles the index.

Concurrency:
    Calls are synchronous. With ``lock=True`` the store + regenerate sequence
    runs under an advisory ``filelock.FileLock`` at ``<root>/.lock`` so that
    several processes writing to one root do not interleave.

Index Renames:
    Switching ``pretty`` or ``index_name`` on an existing root changes the
    index filename. The first read that finds no index under the new name but
    an index under a previous one triggers a ``reindex()``.

Usage:
    >>> repo = LocalIndexedRepository(RepositoryConfig(local=Path("/srv/repo")))
    >>> with open("api-2.6.1.jar", "rb") as f:
    ...     result = repo.put(f, PutOptions(generate_digest=True))
    >>> result.report.is_clean()
    True
    >>> repo.get("org.example.api")
    PosixPath('/srv/repo/org.example.api/org.example.api-2.6.1.jar')
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Optional

from filelock import FileLock, Timeout

from bundlerepo.core.config import RepositoryConfig
from bundlerepo.core.exceptions import ConfigurationError, RepositoryUnavailable
from bundlerepo.core.models import DEFAULT_OPTIONS, ArtifactRecord, PutOptions, PutResult
from bundlerepo.core.reporter import Report, Reporter
from bundlerepo.core.uris import path_to_uri
from bundlerepo.index.generator import DEFAULT_INDEX_NAME, GenerationContext
from bundlerepo.index.registry import GeneratorRegistry, regenerate_index
from bundlerepo.repository.indexed import IndexedRepository
from bundlerepo.storage.artifact_store import ArtifactStore, FileSystemArtifactStore
from bundlerepo.storage.identity import IdentityResolver, ManifestIdentityResolver


LOCK_FILE_NAME = ".lock"


class LocalIndexedRepository(IndexedRepository):
    """Writable repository with an index regenerated on every put.

    Attributes:
        _config: The repository configuration.
        _root: Root directory (``config.local``).
        _resolver: Identity resolver shared by the store and the generator.
        _store: Artifact store writing under ``_root``.
    """

    def __init__(
        self,
        config: RepositoryConfig,
        registry: Optional[GeneratorRegistry] = None,
        resolver: Optional[IdentityResolver] = None,
        store: Optional[ArtifactStore] = None,
    ) -> None:
        if config.local is None:
            raise ConfigurationError(
                message="A local repository needs a 'local' root directory",
                details={"name": config.name},
            )
        super().__init__(name=config.name, registry=registry)

        self._config = config
        self._root = Path(config.local)
        self._resolver = resolver or ManifestIdentityResolver()
        self._store = store or FileSystemArtifactStore(
            self._root,
            resolver=self._resolver,
            overwrite=config.overwrite,
            conflict_policy=config.conflict_policy,
        )

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, Any],
        registry: Optional[GeneratorRegistry] = None,
    ) -> LocalIndexedRepository:
        """Create a repository from a flat plugin property map."""
        return cls(RepositoryConfig.from_properties(properties), registry=registry)

    @property
    def config(self) -> RepositoryConfig:
        return self._config

    @property
    def root(self) -> Path:
        return self._root

    @property
    def store(self) -> ArtifactStore:
        return self._store

    # -------------------------------------------------------------------------
    # Index location
    # -------------------------------------------------------------------------
    def index_path(self) -> Path:
        if self._config.index_name:
            return self._root / self._config.index_name
        generator = self._registry.select_generator(self._config.type)
        if generator is None:
            return self._root / DEFAULT_INDEX_NAME
        return self._root / generator.index_name(self._config.pretty)

    def index_locations(self) -> list[str]:
        return [path_to_uri(self.index_path())]

    def _index_missing(self, location: str) -> list[ArtifactRecord]:
        if not self._root.is_dir():
            raise RepositoryUnavailable(
                message=f"Repository root does not exist: {self._root}",
                location=str(self._root),
            )
        previous = self._previous_index()
        if previous is None or not self.can_write():
            # An existing root without an index is simply empty
            return []

        # The index was written under another name (pretty/index_name changed)
        self._logger.warning(
            "index_name_changed",
            previous=str(previous),
            current=str(self.index_path()),
        )
        self.reindex()
        if not self.index_path().is_file():
            return []
        return self._load(location)

    def _previous_index(self) -> Optional[Path]:
        """An index file left behind under a name this config no longer uses."""
        current = self.index_path()
        names = {DEFAULT_INDEX_NAME}
        for generator in self._registry.generators():
            names.update({generator.index_name(False), generator.index_name(True)})
        for name in sorted(names):
            candidate = self._root / name
            if candidate != current and candidate.is_file():
                return candidate
        return None

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------
    def put(
        self,
        stream: BinaryIO,
        options: Optional[PutOptions] = None,
        reporter: Optional[Reporter] = None,
    ) -> PutResult:
        options = options or DEFAULT_OPTIONS
        reporter = reporter if reporter is not None else Reporter(self._name)
        self._require_writable()

        with self._write_lock():
            outcome = self._store.store(stream, options)
            if outcome.path is None:
                self._logger.info(
                    "put_skipped",
                    symbolic_name=outcome.identity.symbolic_name,
                    version=str(outcome.identity.version),
                )
                return PutResult(report=reporter.snapshot())

            self._regenerate(reporter)

        self._logger.info(
            "put_completed",
            symbolic_name=outcome.identity.symbolic_name,
            version=str(outcome.identity.version),
            warnings=len(reporter.warnings),
            errors=len(reporter.errors),
        )
        return PutResult(
            artifact=path_to_uri(outcome.path),
            digest=outcome.digest if options.generate_digest else None,
            report=reporter.snapshot(),
        )

    def reindex(self, reporter: Optional[Reporter] = None) -> Report:
        """Rebuild the index from the stored files without putting anything.

        Useful after files were added or removed outside of ``put()``.
        """
        reporter = reporter if reporter is not None else Reporter(self._name)
        self._require_writable()
        with self._write_lock():
            self._regenerate(reporter)
        return reporter.snapshot()

    def _regenerate(self, reporter: Reporter) -> Optional[Path]:
        context = GenerationContext(
            repository_name=self._name,
            root=self._root,
            pretty=self._config.pretty,
            options=self._config.options,
            resolver=self._resolver,
        )
        index = regenerate_index(
            self._config.type,
            self._store.list_files(),
            self._root,
            registry=self._registry,
            reporter=reporter,
            context=context,
            index_name=self._config.index_name,
        )
        self.refresh()
        return index

    def _require_writable(self) -> None:
        if not self.can_write():
            raise RepositoryUnavailable(
                message=f"Repository root is missing or not writable: {self._root}",
                location=str(self._root),
            )

    @contextmanager
    def _write_lock(self) -> Iterator[None]:
        if not self._config.lock:
            yield
            return

        lock = FileLock(str(self._root / LOCK_FILE_NAME), timeout=self._config.lock_timeout)
        try:
            lock.acquire()
        except Timeout as e:
            raise RepositoryUnavailable(
                message=f"Timed out after {self._config.lock_timeout}s waiting for {lock.lock_file}",
                location=str(self._root),
            ) from e
        try:
            yield
        finally:
            lock.release()

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------
    def can_write(self) -> bool:
        return self._store.can_write()

    def get_location(self) -> str:
        return str(self._root)
