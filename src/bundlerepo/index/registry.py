"""
bundlerepo.index.registry - Generator Registry & Index Dispatch
=================================================================

Generators are held in an explicit, injectable mapping from type key to
implementation. ``regenerate_index`` is the single place where the
repository turns "the files under root" into "the index file":

    regenerate_index("R5", files, root, registry=..., reporter=...)
        │
        ├── no generator for "R5"?      → reporter.warning, index untouched
        ├── generator non-generating?   → reporter.warning, index untouched
        ├── generate(all files) raised? → reporter.error,   index untouched
        ↓
    temp file ──os.replace──→ <root>/index.xml.gz

The index is always rebuilt from the full file listing, never patched
incrementally, so any successful regeneration reconciles earlier drift.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional

import structlog

from bundlerepo.core.reporter import Reporter
from bundlerepo.index.generator import ContentIndexGenerator, GenerationContext


logger = structlog.get_logger()

INDEX_FILE_MODE = 0o644

GENERATOR_NOT_FOUND = "GENERATOR_NOT_FOUND"
GENERATOR_NON_GENERATING = "GENERATOR_NON_GENERATING"
GENERATOR_FAILED = "GENERATOR_FAILED"


# =============================================================================
# Registry
# =============================================================================
class GeneratorRegistry:
    """Mapping of generator type keys to generator instances.

    Example:
        >>> registry = GeneratorRegistry()
        >>> registry.register(R5IndexGenerator())
        >>> registry.select_generator("R5")
        <bundlerepo.index.r5.R5IndexGenerator object at ...>
        >>> registry.select_generator("Rubbish") is None
        True
    """

    def __init__(self, generators: Optional[Iterable[ContentIndexGenerator]] = None) -> None:
        self._generators: dict[str, ContentIndexGenerator] = {}
        self._logger = logger.bind(component="generator_registry")
        for generator in generators or ():
            self.register(generator)

    def register(self, generator: ContentIndexGenerator) -> None:
        """Register ``generator`` under its name, replacing any previous one."""
        if generator.name in self._generators:
            self._logger.debug("generator_replaced", generator=generator.name)
        self._generators[generator.name] = generator

    def unregister(self, name: str) -> bool:
        return self._generators.pop(name, None) is not None

    def select_generator(self, name: str) -> Optional[ContentIndexGenerator]:
        return self._generators.get(name)

    def generators(self) -> list[ContentIndexGenerator]:
        return list(self._generators.values())

    def names(self) -> list[str]:
        return sorted(self._generators)

    def __contains__(self, name: object) -> bool:
        return name in self._generators

    def __len__(self) -> int:
        return len(self._generators)


def default_registry() -> GeneratorRegistry:
    """A registry holding the built-in generators ("R5")."""
    from bundlerepo.index.r5 import R5IndexGenerator

    return GeneratorRegistry([R5IndexGenerator()])


# =============================================================================
# Dispatch
# =============================================================================
def regenerate_index(
    generator_type: str,
    files: Sequence[Path],
    index_dir: Path,
    *,
    registry: GeneratorRegistry,
    reporter: Reporter,
    context: GenerationContext,
    index_name: Optional[str] = None,
) -> Optional[Path]:
    """Rebuild the index in ``index_dir`` from the complete ``files`` listing.

    Generator absence, non-generating generators and generator failures are
    recorded on ``reporter`` and never raised; in each of those cases the
    previous index file is left exactly as it was.

    Args:
        generator_type: Registry key of the generator to use.
        files: Every artifact file currently stored.
        index_dir: Directory holding the index file.
        registry: Where to look the generator up.
        reporter: Receives warnings and errors.
        context: Passed through to the generator.
        index_name: Filename override; defaults to the generator's own.

    Returns:
        Path of the new index file, or None if it was not regenerated.
    """
    generator = registry.select_generator(generator_type)
    if generator is None:
        reporter.warning(
            f"No content provider for type {generator_type!r}; index not regenerated",
            code=GENERATOR_NOT_FOUND,
            generator=generator_type,
            available=registry.names(),
        )
        return None

    if not generator.supports_generation():
        reporter.warning(
            f"Content provider {generator_type!r} does not support index generation; "
            f"index not regenerated",
            code=GENERATOR_NON_GENERATING,
            generator=generator_type,
        )
        return None

    target = Path(index_dir) / (index_name or generator.index_name(context.pretty))
    fd, temp_name = tempfile.mkstemp(prefix=".index-", suffix=".tmp", dir=index_dir)
    temp = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as out:
            generator.generate(list(files), out, context)
        os.chmod(temp, INDEX_FILE_MODE)
        os.replace(temp, target)
    except Exception as e:
        # Any generator failure is reported, the previous index stays valid
        reporter.error(
            f"Failed to generate index with content provider {generator_type!r}: {e}",
            code=GENERATOR_FAILED,
            generator=generator_type,
            error_type=type(e).__name__,
        )
        return None
    finally:
        temp.unlink(missing_ok=True)

    logger.info(
        "index_regenerated",
        component="index_dispatch",
        generator=generator_type,
        index=str(target),
        artifacts=len(files),
    )
    return target
