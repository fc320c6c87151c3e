"""
Tests for bundlerepo.index.registry
=====================================

What's Being Tested:
    - GeneratorRegistry lookup and registration
    - regenerate_index dispatch: missing, non-generating and failing
      generators are reported and leave the previous index untouched
"""

from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

import pytest

from bundlerepo.core.enums import Severity
from bundlerepo.core.reporter import Reporter
from bundlerepo.index.generator import ContentIndexGenerator, GenerationContext
from bundlerepo.index.r5 import R5IndexGenerator
from bundlerepo.index.registry import (
    GENERATOR_FAILED,
    GENERATOR_NON_GENERATING,
    GENERATOR_NOT_FOUND,
    GeneratorRegistry,
    default_registry,
    regenerate_index,
)


OLD_INDEX = b"previous index bytes"


# =============================================================================
# Test Generators
# =============================================================================
class ListingGenerator(ContentIndexGenerator):
    """Writes one line per file."""

    @property
    def name(self) -> str:
        return "listing"

    def index_name(self, pretty: bool = False) -> str:
        return "index.txt"

    def generate(self, files: Sequence[Path], output: BinaryIO, context: GenerationContext) -> None:
        for path in files:
            output.write(f"{path.name}\n".encode())


class NonGeneratingGenerator(ListingGenerator):
    @property
    def name(self) -> str:
        return "NonGenerating"

    def supports_generation(self) -> bool:
        return False


class FailingGenerator(ListingGenerator):
    @property
    def name(self) -> str:
        return "Fail"

    def generate(self, files: Sequence[Path], output: BinaryIO, context: GenerationContext) -> None:
        output.write(b"half an index")
        raise RuntimeError("generator exploded")


@pytest.fixture
def registry() -> GeneratorRegistry:
    return GeneratorRegistry([ListingGenerator(), NonGeneratingGenerator(), FailingGenerator()])


@pytest.fixture
def context(repo_root: Path) -> GenerationContext:
    return GenerationContext(repository_name="test", root=repo_root)


@pytest.fixture
def old_index(repo_root: Path) -> Path:
    index = repo_root / "index.txt"
    index.write_bytes(OLD_INDEX)
    return index


def _temp_files(root: Path) -> list[Path]:
    return list(root.glob(".index-*"))


# =============================================================================
# Tests: Registry
# =============================================================================
class TestGeneratorRegistry:
    """Tests for GeneratorRegistry."""

    def test_select_registered(self, registry: GeneratorRegistry) -> None:
        assert isinstance(registry.select_generator("listing"), ListingGenerator)
        assert "Fail" in registry
        assert len(registry) == 3

    def test_select_unknown_is_none(self, registry: GeneratorRegistry) -> None:
        assert registry.select_generator("Rubbish") is None

    def test_names_sorted(self, registry: GeneratorRegistry) -> None:
        assert registry.names() == ["Fail", "NonGenerating", "listing"]

    def test_register_replaces(self, registry: GeneratorRegistry) -> None:
        replacement = ListingGenerator()
        registry.register(replacement)
        assert registry.select_generator("listing") is replacement
        assert len(registry) == 3

    def test_unregister(self, registry: GeneratorRegistry) -> None:
        assert registry.unregister("Fail") is True
        assert registry.unregister("Fail") is False
        assert "Fail" not in registry

    def test_default_registry_has_r5(self) -> None:
        registry = default_registry()
        assert isinstance(registry.select_generator("R5"), R5IndexGenerator)


# =============================================================================
# Tests: Dispatch
# =============================================================================
class TestRegenerateIndex:
    """Tests for regenerate_index."""

    def test_success_replaces_index(
        self, repo_root: Path, registry: GeneratorRegistry, context: GenerationContext, old_index: Path
    ) -> None:
        reporter = Reporter()
        files = [repo_root / "a" / "a-1.0.0.jar", repo_root / "b" / "b-1.0.0.jar"]

        result = regenerate_index(
            "listing", files, repo_root, registry=registry, reporter=reporter, context=context
        )

        assert result == old_index
        assert old_index.read_bytes() == b"a-1.0.0.jar\nb-1.0.0.jar\n"
        assert reporter.snapshot().is_clean()
        assert _temp_files(repo_root) == []

    def test_index_name_override(
        self, repo_root: Path, registry: GeneratorRegistry, context: GenerationContext
    ) -> None:
        result = regenerate_index(
            "listing",
            [],
            repo_root,
            registry=registry,
            reporter=Reporter(),
            context=context,
            index_name="custom.idx",
        )
        assert result == repo_root / "custom.idx"
        assert result.exists()

    def test_unknown_generator_warns(
        self, repo_root: Path, registry: GeneratorRegistry, context: GenerationContext, old_index: Path
    ) -> None:
        reporter = Reporter()

        result = regenerate_index(
            "Rubbish", [], repo_root, registry=registry, reporter=reporter, context=context
        )

        assert result is None
        assert len(reporter.warnings) == 1
        assert reporter.warnings[0].code == GENERATOR_NOT_FOUND
        assert reporter.warnings[0].severity is Severity.WARNING
        assert reporter.errors == ()
        assert old_index.read_bytes() == OLD_INDEX

    def test_non_generating_generator_warns(
        self, repo_root: Path, registry: GeneratorRegistry, context: GenerationContext, old_index: Path
    ) -> None:
        reporter = Reporter()

        result = regenerate_index(
            "NonGenerating", [], repo_root, registry=registry, reporter=reporter, context=context
        )

        assert result is None
        assert [w.code for w in reporter.warnings] == [GENERATOR_NON_GENERATING]
        assert reporter.errors == ()
        assert old_index.read_bytes() == OLD_INDEX

    def test_failing_generator_reports_error(
        self, repo_root: Path, registry: GeneratorRegistry, context: GenerationContext, old_index: Path
    ) -> None:
        reporter = Reporter()

        result = regenerate_index(
            "Fail", [], repo_root, registry=registry, reporter=reporter, context=context
        )

        assert result is None
        assert reporter.warnings == ()
        assert len(reporter.errors) == 1
        assert reporter.errors[0].code == GENERATOR_FAILED
        assert "generator exploded" in reporter.errors[0].message
        assert old_index.read_bytes() == OLD_INDEX
        assert _temp_files(repo_root) == []
