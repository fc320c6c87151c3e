"""
Tests for bundlerepo.core.exceptions
======================================
"""

from bundlerepo.core.exceptions import (
    ArtifactConflict,
    DigestMismatch,
    ReadOnlyRepository,
    RepositoryError,
    RepositoryUnavailable,
)


class TestExceptions:
    """Tests for the structured exception hierarchy."""

    def test_digest_mismatch_carries_both_digests(self) -> None:
        error = DigestMismatch(expected="00" * 20, actual="ff" * 20)
        assert error.error_code == "DIGEST_MISMATCH"
        assert error.details == {"expected": "00" * 20, "actual": "ff" * 20}
        assert "00" * 20 in str(error)

    def test_read_only_is_a_repository_unavailable(self) -> None:
        error = ReadOnlyRepository("read-only", location="/srv/repo")
        assert isinstance(error, RepositoryUnavailable)
        assert error.error_code == "READ_ONLY_REPOSITORY"
        assert error.details["location"] == "/srv/repo"

    def test_to_dict(self) -> None:
        error = ArtifactConflict("conflict", symbolic_name="a", version="1.0.0")
        data = error.to_dict()
        assert data["error_type"] == "ArtifactConflict"
        assert data["error_code"] == "ARTIFACT_CONFLICT"
        assert data["details"] == {"symbolic_name": "a", "version": "1.0.0"}

    def test_all_share_the_base_class(self) -> None:
        assert isinstance(DigestMismatch("a", "b"), RepositoryError)
