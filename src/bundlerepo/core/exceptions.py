"""
bundlerepo.core.exceptions - Custom Exception Hierarchy
=========================================================

This module defines the structured exception hierarchy for bundlerepo.
Components raise and catch specific exception types that carry contextual
information instead of bare ``Exception`` or ``ValueError``.

Exception Hierarchy:
    RepositoryError (base)
        ├── ConfigurationError         - Invalid or missing configuration
        ├── RepositoryUnavailable      - Root directory missing / not writable
        │     └── ReadOnlyRepository   - put() on a read-only repository
        ├── DigestMismatch             - Expected digest != computed digest
        ├── ArtifactChangeNotAllowed   - Store would alter the artifact bytes
        ├── UnresolvableIdentity       - Bytes carry no symbolic name/version
        ├── ArtifactConflict           - Different content for an existing identity
        ├── IndexFormatError           - Index cannot be parsed
        └── GeneratorError             - Index generator failed

Failure vs. Diagnostic:
    Storage-layer faults are raised and abort the current ``put()``.
    Index-layer faults (no generator, non-generating generator, generator
    failure) are NOT raised to the caller; they are recorded on the
    Reporter and the stored artifact stays in place:

        put() ──→ store ──✗──→ raise (no file written)
                    │
                    ✓
                    ↓
               regenerate ──✗──→ reporter.warning()/error() (artifact kept)

Usage:
    >>> from bundlerepo.core.exceptions import DigestMismatch
    >>> raise DigestMismatch(expected="aa" * 20, actual="bb" * 20)
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
# All bundlerepo exceptions inherit from this base class, so a build tool can
# catch every repository failure with a single except clause:
#
#   try:
#       repo.put(stream)
#   except RepositoryError as e:
#       logger.error(e.message, error_code=e.error_code, details=e.details)
# =============================================================================
class RepositoryError(Exception):
    """Base exception for all bundlerepo errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (UPPER_SNAKE_CASE).
        details: Arbitrary dict with additional debugging context.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "REPOSITORY_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary (for structlog / reports).

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
class ConfigurationError(RepositoryError):
    """Raised when a repository configuration is invalid or incomplete.

    Example:
        >>> raise ConfigurationError(
        ...     message="Either 'local' or 'locations' must be configured",
        ...     details={"name": "release"},
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Storage-Layer Errors
# =============================================================================
# Each of these aborts the current put() and guarantees that no file was
# left behind under the repository root.
# =============================================================================
class RepositoryUnavailable(RepositoryError):
    """Raised when the repository root is missing or not writable.

    Attributes:
        location: The root directory (or index location) that was unusable.
    """

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        error_code: str = "REPOSITORY_UNAVAILABLE",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        if location is not None:
            enriched_details["location"] = location

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.location = location


class ReadOnlyRepository(RepositoryUnavailable):
    """Raised when put() is called on a repository that cannot be written."""

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            location=location,
            error_code="READ_ONLY_REPOSITORY",
            details=details,
        )


class DigestMismatch(RepositoryError):
    """Raised when the fetched bytes do not hash to the expected digest.

    Attributes:
        expected: Hex digest supplied in the PutOptions.
        actual: Hex digest computed over the fetched bytes.

    Example:
        >>> raise DigestMismatch(expected="00" * 20, actual="ff" * 20)
    """

    def __init__(
        self,
        expected: str,
        actual: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["expected"] = expected
        enriched_details["actual"] = actual

        super().__init__(
            message=message or f"Digest mismatch: expected {expected}, got {actual}",
            error_code="DIGEST_MISMATCH",
            details=enriched_details,
        )

        self.expected = expected
        self.actual = actual


class ArtifactChangeNotAllowed(RepositoryError):
    """Raised when storing would alter the artifact but the caller forbids it."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="ARTIFACT_CHANGE_NOT_ALLOWED",
            details=details,
        )


class UnresolvableIdentity(RepositoryError):
    """Raised when the staged bytes yield no usable symbolic name/version."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="UNRESOLVABLE_IDENTITY",
            details=details,
        )


class ArtifactConflict(RepositoryError):
    """Raised when different content arrives for an identity already stored.

    Only raised under ``ConflictPolicy.FAIL`` with ``overwrite=False``.

    Attributes:
        symbolic_name: Symbolic name of the conflicting artifact.
        version: Version string of the conflicting artifact.
    """

    def __init__(
        self,
        message: str,
        symbolic_name: str,
        version: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["symbolic_name"] = symbolic_name
        enriched_details["version"] = version

        super().__init__(
            message=message,
            error_code="ARTIFACT_CONFLICT",
            details=enriched_details,
        )

        self.symbolic_name = symbolic_name
        self.version = version


# =============================================================================
# Index-Layer Errors
# =============================================================================
class IndexFormatError(RepositoryError):
    """Raised when an index file cannot be recognized or parsed."""

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        if location is not None:
            enriched_details["location"] = location

        super().__init__(
            message=message,
            error_code="INDEX_FORMAT_ERROR",
            details=enriched_details,
        )

        self.location = location


class GeneratorError(RepositoryError):
    """Raised by a content index generator that cannot produce an index.

    Dispatch catches it (and any other generator failure) and records an
    error on the Reporter; it never escapes ``put()``.

    Attributes:
        generator: The type key of the failing generator.
    """

    def __init__(
        self,
        message: str,
        generator: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["generator"] = generator

        super().__init__(
            message=message,
            error_code="GENERATOR_FAILED",
            details=enriched_details,
        )

        self.generator = generator
