"""
bundlerepo.core.enums - Type-Safe Enumerations
================================================

All enums inherit from both ``str`` and ``Enum`` so they serialize to plain
strings (pydantic / YAML friendly) and compare equal to their values:

    >>> Severity.WARNING == "warning"
    True
"""

from enum import Enum


# =============================================================================
# Diagnostic Severity
# =============================================================================
# A Reporter records two kinds of diagnostics. Callers decide whether either
# kind should fail their build:
#
#   WARNING → degraded but usable (e.g. index left stale)
#   ERROR   → something broke (e.g. generator failed), artifact still stored
# =============================================================================
class Severity(str, Enum):
    """Severity of a diagnostic recorded on a Reporter."""

    WARNING = "warning"
    ERROR = "error"


# =============================================================================
# Conflict Policy
# =============================================================================
# Decides what put() does when ``overwrite`` is False and a file already
# exists for the same identity but with DIFFERENT content. Byte-identical
# content is always a no-op under ``overwrite=False``.
#
#   REPLACE → overwrite the existing file
#   SKIP    → keep the existing file, return PutResult(artifact=None) (default)
#   FAIL    → raise ArtifactConflict
# =============================================================================
class ConflictPolicy(str, Enum):
    """Behaviour for digest-different content under ``overwrite=False``."""

    REPLACE = "replace"
    SKIP = "skip"
    FAIL = "fail"


# =============================================================================
# Version Selection Strategy
# =============================================================================
class Strategy(str, Enum):
    """How ``get()`` picks a version when none is requested explicitly.

    Passed through the ``properties`` mapping under the ``"strategy"`` key.
    """

    HIGHEST = "highest"
    LOWEST = "lowest"
    EXACT = "exact"
