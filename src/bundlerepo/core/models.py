"""
bundlerepo.core.models - Core Data Models
===========================================

Plain, immutable value objects shared by every layer of bundlerepo:

    Version           4-part version: major.minor.micro.qualifier
    ArtifactIdentity  (symbolic_name, version) - unique key in a repository
    ArtifactRecord    identity + digest + location + index properties
    PutOptions        how put() should treat the incoming stream
    PutResult         what put() did (artifact URI, digest, diagnostics)

All models are frozen pydantic models. Optional values are explicit
``Optional[...] = None`` fields; ``PutResult.artifact is None`` is the signal
for "not stored" (e.g. a suppressed duplicate), never an error.

Version Ordering:
    Numeric parts compare numerically, then the qualifier compares
    lexically; the empty qualifier sorts first:

        1.0.0 < 1.0.0.alpha < 1.0.0.beta < 1.0.1 < 1.10.0
"""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bundlerepo.core.reporter import Report


# =============================================================================
# Version
# =============================================================================
_VERSION_PATTERN = re.compile(
    r"^(\d+)(?:\.(\d+)(?:\.(\d+)(?:\.([0-9A-Za-z_-]+))?)?)?$"
)


@total_ordering
class Version(BaseModel):
    """A 4-part version (major.minor.micro.qualifier).

    Strings are accepted wherever a Version is expected and are parsed with
    :meth:`parse`, so ``ArtifactIdentity(symbolic_name="a", version="1.2")``
    works.

    Example:
        >>> Version.parse("2.6.1")
        Version(major=2, minor=6, micro=1, qualifier='')
        >>> str(Version.parse("1.2"))
        '1.2.0'
        >>> Version.parse("1.0.0") < Version.parse("1.0.0.beta")
        True
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(default=0, ge=0, description="Major version number")
    minor: int = Field(default=0, ge=0, description="Minor version number")
    micro: int = Field(default=0, ge=0, description="Micro version number")
    qualifier: str = Field(
        default="",
        pattern=r"^[0-9A-Za-z_-]*$",
        description="Qualifier, compared lexically after the numeric parts",
    )

    @model_validator(mode="before")
    @classmethod
    def coerce_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return cls.parse(data).model_dump()
        return data

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``major[.minor[.micro[.qualifier]]]``.

        Raises:
            ValueError: If ``text`` is not a valid version.
        """
        match = _VERSION_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid version: {text!r}")
        major, minor, micro, qualifier = match.groups()
        return cls(
            major=int(major),
            minor=int(minor or 0),
            micro=int(micro or 0),
            qualifier=qualifier or "",
        )

    def sort_key(self) -> tuple[int, int, int, str]:
        return (self.major, self.minor, self.micro, self.qualifier)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.micro}"
        return f"{base}.{self.qualifier}" if self.qualifier else base


EMPTY_VERSION = Version()


# =============================================================================
# Artifact Identity & Record
# =============================================================================
class ArtifactIdentity(BaseModel):
    """Unique key of an artifact inside a repository.

    Attributes:
        symbolic_name: Globally scoped component name (the "bsn").
        version: Version of this component.
    """

    model_config = ConfigDict(frozen=True)

    symbolic_name: str = Field(
        min_length=1,
        description="Symbolic name of the component",
    )
    version: Version = Field(
        default=EMPTY_VERSION,
        description="Version of the component",
    )

    @property
    def file_stem(self) -> str:
        """Base filename used by the store: ``<bsn>-<version>``."""
        return f"{self.symbolic_name}-{self.version}"

    def __str__(self) -> str:
        return f"{self.symbolic_name};version={self.version}"


class ArtifactRecord(BaseModel):
    """An artifact as described by an index.

    Records are produced by parsing an index; the descriptive ``properties``
    come from the index, not from the artifact store.

    Attributes:
        identity: Symbolic name and version.
        digest: 20-byte SHA-1 of the artifact content.
        location: Absolute URI of the artifact file.
        size: Size of the artifact in bytes.
        properties: Descriptive properties (capabilities, requirements, ...).
    """

    model_config = ConfigDict(frozen=True)

    identity: ArtifactIdentity = Field(description="Symbolic name and version")
    digest: bytes = Field(
        min_length=20,
        max_length=20,
        description="SHA-1 digest of the artifact content",
    )
    location: str = Field(description="Absolute URI of the artifact file")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    properties: dict[str, str] = Field(
        default_factory=dict,
        description="Descriptive properties supplied by the index",
    )

    @property
    def symbolic_name(self) -> str:
        return self.identity.symbolic_name

    @property
    def version(self) -> Version:
        return self.identity.version


# =============================================================================
# Put Options & Result
# =============================================================================
class PutOptions(BaseModel):
    """Options steering a put() operation.

    Attributes:
        digest: Expected SHA-1 of the incoming bytes. When set, the fetched
            bytes are verified BEFORE anything is written; a mismatch raises
            DigestMismatch. A 40-character hex string is accepted as well.
        allow_artifact_change: Whether the store may alter the artifact bytes
            while putting it (re-packing, re-signing, ...).
        generate_digest: Return the SHA-1 of the stored artifact in the result.
    """

    model_config = ConfigDict(frozen=True)

    digest: Optional[bytes] = Field(
        default=None,
        description="Expected SHA-1 digest of the incoming artifact",
    )
    allow_artifact_change: bool = Field(
        default=False,
        description="Allow the repository to modify the artifact when storing",
    )
    generate_digest: bool = Field(
        default=False,
        description="Compute and return the digest of the stored artifact",
    )

    @field_validator("digest", mode="before")
    @classmethod
    def decode_hex_digest(cls, value: Any) -> Any:
        if isinstance(value, str):
            return bytes.fromhex(value)
        return value


DEFAULT_OPTIONS = PutOptions()


class PutResult(BaseModel):
    """Outcome of a put() operation.

    A put that stored a file can still have produced warnings or errors while
    regenerating the index; inspect ``report`` and not only ``artifact``.

    Attributes:
        artifact: URI of the stored artifact, or None if nothing was stored.
        digest: SHA-1 of the stored artifact; None unless ``generate_digest``
            was requested and an artifact was stored.
        report: Warnings and errors recorded during the operation.
    """

    model_config = ConfigDict(frozen=True)

    artifact: Optional[str] = Field(
        default=None,
        description="URI of the stored artifact (None = not stored)",
    )
    digest: Optional[bytes] = Field(
        default=None,
        description="SHA-1 digest of the stored artifact",
    )
    report: Report = Field(
        default_factory=Report,
        description="Diagnostics recorded during the put",
    )

    @property
    def stored(self) -> bool:
        return self.artifact is not None
