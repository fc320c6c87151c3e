"""
bundlerepo.core.reporter - Diagnostics Collection
===================================================

A Reporter collects the warnings and errors raised during one logical
operation (typically one ``put()``). Nothing here ever raises: recording a
diagnostic only appends it and logs it.

    ┌────────────┐  warning("no content provider ...")  ┌────────────┐
    │  Dispatch  │ ───────────────────────────────────→ │  Reporter  │
    │            │  error("generator failed ...")       │  warnings  │
    └────────────┘ ───────────────────────────────────→ │  errors    │
                                                        └─────┬──────┘
                                                              │ snapshot()
                                                              ↓
                                                   PutResult.report (frozen)

Callers either pass their own Reporter into ``put()`` (to accumulate over
several calls, like a build does) or read the frozen ``Report`` returned on
``PutResult.report``.

Usage:
    >>> reporter = Reporter()
    >>> reporter.warning("index left stale", code="GENERATOR_NOT_FOUND")
    >>> reporter.is_ok()
    True
    >>> len(reporter.warnings)
    1
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from bundlerepo.core.enums import Severity


logger = structlog.get_logger()


# =============================================================================
# Diagnostic
# =============================================================================
class Diagnostic(BaseModel):
    """A single warning or error.

    Attributes:
        message: Human-readable description.
        severity: WARNING or ERROR.
        code: Machine-readable code, e.g. "GENERATOR_NOT_FOUND".
        details: Extra context (generator type, paths, exception text, ...).
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(description="Human-readable description")
    severity: Severity = Field(description="warning or error")
    code: str = Field(default="", description="Machine-readable code")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context",
    )


class Report(BaseModel):
    """Frozen view of the diagnostics recorded by a Reporter."""

    model_config = ConfigDict(frozen=True)

    warnings: tuple[Diagnostic, ...] = Field(default=())
    errors: tuple[Diagnostic, ...] = Field(default=())

    def is_ok(self) -> bool:
        """True when no error was recorded (warnings are allowed)."""
        return not self.errors

    def is_clean(self) -> bool:
        """True when neither warnings nor errors were recorded."""
        return not self.errors and not self.warnings


# =============================================================================
# Reporter
# =============================================================================
class Reporter:
    """Append-only collector of warnings and errors.

    Example:
        >>> reporter = Reporter()
        >>> result = repo.put(stream, reporter=reporter)
        >>> if reporter.errors:
        ...     raise SystemExit("index generation failed")
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self._warnings: list[Diagnostic] = []
        self._errors: list[Diagnostic] = []
        self._logger = logger.bind(component="reporter", reporter=name)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(self._warnings)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(self._errors)

    def warning(self, message: str, code: str = "", **details: Any) -> Diagnostic:
        """Record a warning: the operation is degraded but usable."""
        diagnostic = Diagnostic(
            message=message,
            severity=Severity.WARNING,
            code=code,
            details=details,
        )
        self._warnings.append(diagnostic)
        self._logger.warning(message, code=code, **details)
        return diagnostic

    def error(self, message: str, code: str = "", **details: Any) -> Diagnostic:
        """Record an error: something failed, but the caller decides the impact."""
        diagnostic = Diagnostic(
            message=message,
            severity=Severity.ERROR,
            code=code,
            details=details,
        )
        self._errors.append(diagnostic)
        self._logger.error(message, code=code, **details)
        return diagnostic

    def is_ok(self) -> bool:
        return not self._errors

    def has_warnings(self) -> bool:
        return bool(self._warnings)

    def snapshot(self) -> Report:
        """Freeze the current diagnostics into a Report value."""
        return Report(warnings=tuple(self._warnings), errors=tuple(self._errors))

    def clear(self) -> None:
        self._warnings.clear()
        self._errors.clear()
