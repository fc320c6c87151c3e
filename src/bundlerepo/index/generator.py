"""
bundlerepo.index.generator - Content Index Generator Contract
===============================================================

A content index generator turns the full set of stored artifact files into
one index file, and (optionally) parses such an index back into
ArtifactRecords. Generators are plugged in by a string type key (see
``bundlerepo.index.registry``); the repository never knows which concrete
format is active.

Contract:
    name                   Registry key (e.g. "R5").
    supports_generation()  False for pass-through providers that can only
                           read an index; dispatch then warns and leaves the
                           existing index untouched.
    index_name(pretty)     Filename of the produced index.
    generate(files, out)   Write a complete index for ``files`` to ``out``.
                           Any exception counts as a generator failure.
    can_parse(head)        Sniff the first bytes of an index file.
    parse(stream, base)    Index → ArtifactRecords, locations resolved
                           against ``base``.

Extensibility:
    class MyGenerator(ContentIndexGenerator):
        @property
        def name(self) -> str:
            return "mine"

        def generate(self, files, output, context) -> None:
            ...

    registry.register(MyGenerator())
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field

from bundlerepo.core.exceptions import IndexFormatError
from bundlerepo.core.models import ArtifactRecord
from bundlerepo.storage.identity import IdentityResolver, ManifestIdentityResolver


DEFAULT_INDEX_NAME = "index.xml.gz"


# =============================================================================
# Generation Context
# =============================================================================
class GenerationContext(BaseModel):
    """Everything a generator needs besides the file list.

    Attributes:
        repository_name: Name of the repository being indexed.
        root: Directory the index is written into; artifact URLs are made
            relative to it.
        pretty: Produce a human-readable index.
        options: Generator-specific passthrough options.
        resolver: Extracts identity and properties from artifact files.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    repository_name: str = Field(description="Repository name")
    root: Path = Field(description="Directory that will contain the index")
    pretty: bool = Field(default=False, description="Human-readable output")
    options: dict[str, str] = Field(
        default_factory=dict,
        description="Generator-specific options",
    )
    resolver: IdentityResolver = Field(
        default_factory=ManifestIdentityResolver,
        description="Identity/property extraction for artifact files",
    )


# =============================================================================
# Abstract Base Class
# =============================================================================
class ContentIndexGenerator(ABC):
    """Pluggable producer (and parser) of a repository index."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key of this generator."""
        ...

    def supports_generation(self) -> bool:
        return True

    def index_name(self, pretty: bool = False) -> str:
        return DEFAULT_INDEX_NAME

    @abstractmethod
    def generate(
        self,
        files: Sequence[Path],
        output: BinaryIO,
        context: GenerationContext,
    ) -> None:
        """Write a complete index describing ``files`` to ``output``."""
        ...

    def can_parse(self, head: bytes) -> bool:
        return False

    def parse(self, stream: BinaryIO, base_uri: str) -> list[ArtifactRecord]:
        raise IndexFormatError(
            message=f"Content provider {self.name!r} cannot parse indexes",
            location=base_uri,
        )
