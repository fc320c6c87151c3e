"""
bundlerepo.core - Foundation Layer
====================================

Building blocks every other bundlerepo package depends on:

    - config:      RepositoryConfig, load_config
    - enums:       Severity, ConflictPolicy, Strategy
    - models:      Version, ArtifactIdentity, ArtifactRecord, PutOptions, PutResult
    - reporter:    Reporter, Report, Diagnostic
    - exceptions:  RepositoryError hierarchy
    - digest:      SHA-1 helpers
    - uris:        path <-> file URI conversion
    - logging:     structlog setup

Dependency Rule:
    core/ depends on NOTHING else in the bundlerepo package.
"""

from bundlerepo.core.config import RepositoryConfig, load_config
from bundlerepo.core.enums import ConflictPolicy, Severity, Strategy
from bundlerepo.core.exceptions import (
    ArtifactChangeNotAllowed,
    ArtifactConflict,
    ConfigurationError,
    DigestMismatch,
    GeneratorError,
    IndexFormatError,
    ReadOnlyRepository,
    RepositoryError,
    RepositoryUnavailable,
    UnresolvableIdentity,
)
from bundlerepo.core.models import (
    DEFAULT_OPTIONS,
    EMPTY_VERSION,
    ArtifactIdentity,
    ArtifactRecord,
    PutOptions,
    PutResult,
    Version,
)
from bundlerepo.core.reporter import Diagnostic, Report, Reporter

__all__ = [
    # Config
    "RepositoryConfig",
    "load_config",
    # Enums
    "ConflictPolicy",
    "Severity",
    "Strategy",
    # Models
    "DEFAULT_OPTIONS",
    "EMPTY_VERSION",
    "ArtifactIdentity",
    "ArtifactRecord",
    "PutOptions",
    "PutResult",
    "Version",
    # Diagnostics
    "Diagnostic",
    "Report",
    "Reporter",
    # Exceptions
    "RepositoryError",
    "ConfigurationError",
    "RepositoryUnavailable",
    "ReadOnlyRepository",
    "DigestMismatch",
    "ArtifactChangeNotAllowed",
    "UnresolvableIdentity",
    "ArtifactConflict",
    "IndexFormatError",
    "GeneratorError",
]
