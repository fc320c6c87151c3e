"""
bundlerepo.storage.artifact_store - Artifact Persistence Layer
================================================================

The ArtifactStore maps an artifact identity (symbolic name + version) to a
file under the repository root and performs the physical write.

Layout:
    <root>/
      ├── index.xml.gz                               (owned by the generator)
      └── <bsn>/
            └── <bsn>-<version>.jar                  (owned by the store)

Store Pipeline:

    stream ──→ stage to temp file in <root> (hash while copying)
                  │
                  ├── expected digest given and different?  → DigestMismatch
                  ├── identity not resolvable?               → UnresolvableIdentity
                  ├── store must change bytes, not allowed?  → ArtifactChangeNotAllowed
                  ├── target exists, overwrite=False:
                  │       same digest       → no-op (path=None)
                  │       different digest  → ConflictPolicy (replace/skip/fail)
                  ↓
               os.replace(temp, target)       (atomic, same filesystem)

    Every failure and no-op path removes the temp file, so either exactly one
    file is written or none is.

Storage Implementations:
    - FileSystemArtifactStore: the byte-preserving default.
    - Subclasses may override ``requires_change`` / ``apply_change`` to
      re-pack or re-sign artifacts; those changes are then subject to
      ``PutOptions.allow_artifact_change``.
"""

from __future__ import annotations

import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from bundlerepo.core.digest import copy_with_digest, sha1_file
from bundlerepo.core.enums import ConflictPolicy
from bundlerepo.core.exceptions import (
    ArtifactChangeNotAllowed,
    ArtifactConflict,
    DigestMismatch,
    RepositoryUnavailable,
    UnresolvableIdentity,
)
from bundlerepo.core.models import DEFAULT_OPTIONS, ArtifactIdentity, PutOptions
from bundlerepo.storage.identity import IdentityResolver, ManifestIdentityResolver


logger = structlog.get_logger()

DEFAULT_EXTENSION = "jar"
FILE_MODE = 0o644

# Symbolic names become directory names; keep them to a safe alphabet
_SAFE_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\-]*$")


# =============================================================================
# Store Outcome
# =============================================================================
class StoreOutcome(BaseModel):
    """Result of a single ``store()`` call.

    Attributes:
        path: Where the artifact now lives, or None if nothing was written.
        identity: Identity resolved from the staged content.
        digest: SHA-1 of the bytes that were (or would have been) persisted.
        size: Number of bytes persisted.
        replaced: True if an existing file was overwritten.
    """

    model_config = ConfigDict(frozen=True)

    path: Optional[Path] = Field(default=None, description="Stored file")
    identity: ArtifactIdentity = Field(description="Resolved identity")
    digest: bytes = Field(description="SHA-1 of the persisted bytes")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    replaced: bool = Field(default=False, description="Existing file overwritten")


# =============================================================================
# Abstract Base Class
# =============================================================================
class ArtifactStore(ABC):
    """Abstract interface for artifact persistence.

    Methods:
        store(stream, options): Persist the artifact read from ``stream``.
        path_for(identity): Deterministic location of an identity.
        list_files(): Authoritative listing of stored artifact files.
        can_write(): Whether the backing location accepts writes.
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        ...

    @abstractmethod
    def store(self, stream: BinaryIO, options: PutOptions = DEFAULT_OPTIONS) -> StoreOutcome:
        """Persist the artifact read from ``stream``.

        Raises:
            RepositoryUnavailable: Root missing or not writable.
            DigestMismatch: ``options.digest`` disagrees with the fetched bytes.
            UnresolvableIdentity: No symbolic name / version in the content.
            ArtifactChangeNotAllowed: Bytes would change but that is forbidden.
            ArtifactConflict: Different content under ``ConflictPolicy.FAIL``.
        """
        ...

    @abstractmethod
    def path_for(self, identity: ArtifactIdentity) -> Path:
        ...

    @abstractmethod
    def list_files(self) -> list[Path]:
        ...

    @abstractmethod
    def can_write(self) -> bool:
        ...


# =============================================================================
# Filesystem Implementation
# =============================================================================
class FileSystemArtifactStore(ArtifactStore):
    """Stores artifacts as ``<root>/<bsn>/<bsn>-<version>.<ext>``.

    Attributes:
        _root: Repository root directory (must already exist).
        _resolver: Extracts the identity of staged content.
        _overwrite: When False, identical content for a stored identity is
            not written again.
        _conflict_policy: Behaviour for different content when
            ``_overwrite`` is False.
        _extension: File extension of stored artifacts.

    Example:
        >>> store = FileSystemArtifactStore(Path("/srv/repo"))
        >>> with open("api-1.0.0.jar", "rb") as f:
        ...     outcome = store.store(f)
        >>> outcome.path
        PosixPath('/srv/repo/org.example.api/org.example.api-1.0.0.jar')
    """

    def __init__(
        self,
        root: Path,
        resolver: Optional[IdentityResolver] = None,
        overwrite: bool = True,
        conflict_policy: ConflictPolicy = ConflictPolicy.SKIP,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self._root = Path(root)
        self._resolver = resolver or ManifestIdentityResolver()
        self._overwrite = overwrite
        self._conflict_policy = ConflictPolicy(conflict_policy)
        self._extension = extension.lstrip(".")
        self._logger = logger.bind(component="filesystem_artifact_store", root=str(self._root))

    @property
    def root(self) -> Path:
        return self._root

    @property
    def resolver(self) -> IdentityResolver:
        return self._resolver

    def can_write(self) -> bool:
        return self._root.is_dir() and os.access(self._root, os.W_OK | os.X_OK)

    def path_for(self, identity: ArtifactIdentity) -> Path:
        return (
            self._root
            / identity.symbolic_name
            / f"{identity.file_stem}.{self._extension}"
        )

    def list_files(self) -> list[Path]:
        """All stored artifact files, sorted; the source of truth for indexing."""
        if not self._root.is_dir():
            return []
        return sorted(
            path
            for path in self._root.glob(f"*/*.{self._extension}")
            if path.is_file()
        )

    # -------------------------------------------------------------------------
    # Change hooks
    # -------------------------------------------------------------------------
    # The default store never changes bytes. Stores that re-pack or re-sign
    # override both hooks.
    # -------------------------------------------------------------------------
    def requires_change(self, staged: Path, identity: ArtifactIdentity) -> bool:
        """Whether storing ``staged`` requires altering its bytes."""
        return False

    def apply_change(self, staged: Path, identity: ArtifactIdentity) -> None:
        """Alter ``staged`` in place before it is moved into the repository."""

    # -------------------------------------------------------------------------
    # Store
    # -------------------------------------------------------------------------
    def store(self, stream: BinaryIO, options: PutOptions = DEFAULT_OPTIONS) -> StoreOutcome:
        if not self.can_write():
            raise RepositoryUnavailable(
                message=f"Repository root is missing or not writable: {self._root}",
                location=str(self._root),
            )

        fd, staged_name = tempfile.mkstemp(prefix=".put-", suffix=".tmp", dir=self._root)
        staged: Optional[Path] = Path(staged_name)
        try:
            with os.fdopen(fd, "wb") as out:
                digest, size = copy_with_digest(stream, out)

            if options.digest is not None and options.digest != digest:
                raise DigestMismatch(expected=options.digest.hex(), actual=digest.hex())

            identity = self._resolve(staged)

            if self.requires_change(staged, identity):
                if not options.allow_artifact_change:
                    raise ArtifactChangeNotAllowed(
                        message=f"Storing {identity} would change the artifact",
                        details={"symbolic_name": identity.symbolic_name},
                    )
                self.apply_change(staged, identity)
                digest = sha1_file(staged)
                size = staged.stat().st_size

            target = self.path_for(identity)
            replaced = target.exists()
            if replaced and not self._overwrite:
                if not self._accept_existing(target, identity, digest):
                    self._logger.info(
                        "artifact_not_stored",
                        symbolic_name=identity.symbolic_name,
                        version=str(identity.version),
                        path=str(target),
                    )
                    return StoreOutcome(path=None, identity=identity, digest=digest, size=size)

            target.parent.mkdir(exist_ok=True)
            os.chmod(staged, FILE_MODE)
            os.replace(staged, target)
            staged = None

            self._logger.info(
                "artifact_stored",
                symbolic_name=identity.symbolic_name,
                version=str(identity.version),
                path=str(target),
                digest=digest.hex(),
                replaced=replaced,
            )
            return StoreOutcome(
                path=target,
                identity=identity,
                digest=digest,
                size=size,
                replaced=replaced,
            )
        finally:
            if staged is not None:
                staged.unlink(missing_ok=True)

    def _resolve(self, staged: Path) -> ArtifactIdentity:
        identity = self._resolver.resolve(staged)
        if identity is None:
            raise UnresolvableIdentity(
                message="Artifact has no recognizable symbolic name and version",
            )
        if not _SAFE_NAME.match(identity.symbolic_name):
            raise UnresolvableIdentity(
                message=f"Symbolic name is not usable as a path: {identity.symbolic_name!r}",
                details={"symbolic_name": identity.symbolic_name},
            )
        return identity

    def _accept_existing(self, target: Path, identity: ArtifactIdentity, digest: bytes) -> bool:
        """Decide whether to replace ``target`` under ``overwrite=False``.

        Returns True to go ahead and replace, False for a no-op.
        """
        if sha1_file(target) == digest:
            return False
        if self._conflict_policy is ConflictPolicy.SKIP:
            return False
        if self._conflict_policy is ConflictPolicy.FAIL:
            raise ArtifactConflict(
                message=f"{identity} is already stored with different content",
                symbolic_name=identity.symbolic_name,
                version=str(identity.version),
            )
        return True
