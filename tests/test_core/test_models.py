"""
Tests for bundlerepo.core.models
==================================

What's Being Tested:
    - Version parsing, ordering and string form
    - ArtifactIdentity coercion and hashing
    - PutOptions / PutResult defaults and digest handling
"""

import pytest
from pydantic import ValidationError

from bundlerepo.core.models import (
    DEFAULT_OPTIONS,
    EMPTY_VERSION,
    ArtifactIdentity,
    ArtifactRecord,
    PutOptions,
    PutResult,
    Version,
)


# =============================================================================
# Tests: Version
# =============================================================================
class TestVersion:
    """Tests for the 4-part Version model."""

    def test_parse_full_version(self) -> None:
        v = Version.parse("2.6.1.beta")
        assert (v.major, v.minor, v.micro, v.qualifier) == (2, 6, 1, "beta")

    def test_parse_fills_missing_parts(self) -> None:
        """Missing minor/micro default to zero."""
        assert Version.parse("1") == Version(major=1)
        assert Version.parse("1.2") == Version(major=1, minor=2)

    def test_str_omits_empty_qualifier(self) -> None:
        assert str(Version.parse("1.2")) == "1.2.0"
        assert str(Version.parse("1.2.3.RC1")) == "1.2.3.RC1"

    @pytest.mark.parametrize("text", ["", "a.b", "1..2", "1.2.3.4.5", "-1", "1.2.3.bad qualifier"])
    def test_invalid_versions_rejected(self, text: str) -> None:
        with pytest.raises(ValueError):
            Version.parse(text)

    def test_numeric_parts_compare_numerically(self) -> None:
        assert Version.parse("1.10.0") > Version.parse("1.9.0")

    def test_qualifier_compared_after_numbers(self) -> None:
        """Empty qualifier sorts first, then qualifiers compare lexically."""
        ordered = ["1.0.0", "1.0.0.alpha", "1.0.0.beta", "1.0.1", "1.10.0"]
        shuffled = [ordered[3], ordered[1], ordered[4], ordered[0], ordered[2]]
        assert [str(v) for v in sorted(Version.parse(s) for s in shuffled)] == ordered

    def test_versions_are_hashable_and_equal_by_value(self) -> None:
        assert len({Version.parse("1.0"), Version.parse("1.0.0")}) == 1

    def test_empty_version(self) -> None:
        assert str(EMPTY_VERSION) == "0.0.0"

    def test_string_coerced_in_models(self) -> None:
        identity = ArtifactIdentity(symbolic_name="a", version="3.1")
        assert identity.version == Version(major=3, minor=1)


# =============================================================================
# Tests: ArtifactIdentity / ArtifactRecord
# =============================================================================
class TestArtifactIdentity:
    """Tests for ArtifactIdentity and ArtifactRecord."""

    def test_file_stem(self) -> None:
        identity = ArtifactIdentity(symbolic_name="org.example.api", version="2.6.1")
        assert identity.file_stem == "org.example.api-2.6.1"

    def test_usable_as_dict_key(self) -> None:
        a = ArtifactIdentity(symbolic_name="a", version="1.0")
        b = ArtifactIdentity(symbolic_name="a", version="1.0.0")
        assert {a: 1}[b] == 1

    def test_empty_symbolic_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ArtifactIdentity(symbolic_name="", version="1.0")

    def test_record_requires_20_byte_digest(self) -> None:
        identity = ArtifactIdentity(symbolic_name="a", version="1.0")
        with pytest.raises(ValidationError):
            ArtifactRecord(identity=identity, digest=b"short", location="file:///a.jar")

    def test_record_shortcuts(self) -> None:
        record = ArtifactRecord(
            identity=ArtifactIdentity(symbolic_name="a", version="1.0"),
            digest=b"\x01" * 20,
            location="file:///repo/a/a-1.0.0.jar",
        )
        assert record.symbolic_name == "a"
        assert record.version == Version(major=1)
        assert record.properties == {}


# =============================================================================
# Tests: PutOptions / PutResult
# =============================================================================
class TestPutOptionsAndResult:
    """Tests for the put DTOs."""

    def test_default_options(self) -> None:
        assert DEFAULT_OPTIONS.digest is None
        assert DEFAULT_OPTIONS.allow_artifact_change is False
        assert DEFAULT_OPTIONS.generate_digest is False

    def test_hex_digest_accepted(self) -> None:
        options = PutOptions(digest="ab" * 20)
        assert options.digest == bytes.fromhex("ab" * 20)

    def test_options_are_immutable(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_OPTIONS.generate_digest = True

    def test_default_result_is_not_stored(self) -> None:
        result = PutResult()
        assert result.artifact is None
        assert result.digest is None
        assert result.stored is False
        assert result.report.is_clean()
