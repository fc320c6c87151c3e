"""
Local Repository Example - Put, Resolve and Mirror Bundles
============================================================

This example walks through the life of a small local repository:

    1. Build two versions of a bundle in memory.
    2. Put both into a LocalIndexedRepository (index regenerated each time).
    3. Resolve them back: highest version, lowest version, exact version.
    4. Open the generated index read-only, the way a consumer would.
    5. Put with an unregistered index type to see a warning reported
       instead of a failure.

Usage:
    python examples/local_repository.py
"""

from __future__ import annotations

import io
import tempfile
import zipfile
from pathlib import Path

from bundlerepo import (
    FixedIndexedRepository,
    LocalIndexedRepository,
    PutOptions,
    RepositoryConfig,
)
from bundlerepo.core.logging import configure_logging


def make_bundle(symbolic_name: str, version: str) -> bytes:
    """Build a minimal jar carrying OSGi bundle headers."""
    manifest = (
        "Manifest-Version: 1.0\r\n"
        f"Bundle-SymbolicName: {symbolic_name}\r\n"
        f"Bundle-Version: {version}\r\n"
        f"Bundle-Name: {symbolic_name} example\r\n\r\n"
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", manifest)
    return buffer.getvalue()


def main() -> None:
    """Run the example in a throwaway directory."""
    configure_logging("WARNING")

    with tempfile.TemporaryDirectory() as workdir:
        root = Path(workdir) / "repo"
        root.mkdir()
        repo = LocalIndexedRepository(RepositoryConfig(name="example", local=root))

        # --- Put two versions ---
        for version in ("1.0.0", "1.1.0"):
            result = repo.put(
                io.BytesIO(make_bundle("org.example.api", version)),
                PutOptions(generate_digest=True),
            )
            print(f"stored {result.artifact}")
            print(f"  sha1 {result.digest.hex()}  clean={result.report.is_clean()}")

        # --- Resolve ---
        print(f"\nsymbolic names: {repo.list()}")
        print(f"versions:       {[str(v) for v in repo.versions('org.example.api')]}")
        print(f"highest:        {repo.get('org.example.api')}")
        print(f"lowest:         {repo.get('org.example.api', properties={'strategy': 'lowest'})}")
        print(f"exact 1.0.0:    {repo.get('org.example.api', '1.0.0')}")

        # --- Consume the index read-only ---
        mirror = FixedIndexedRepository(locations=[str(repo.index_path())], name="mirror")
        print(f"\nmirror sees:    {mirror.list()} (writable={mirror.can_write()})")

        # --- Unknown index type: stored, but reported ---
        odd = LocalIndexedRepository(RepositoryConfig(name="odd", local=root, type="Rubbish"))
        result = odd.put(io.BytesIO(make_bundle("org.example.impl", "0.1.0")))
        print(f"\nstored {result.artifact}")
        for warning in result.report.warnings:
            print(f"  warning [{warning.code}] {warning.message}")


if __name__ == "__main__":
    main()
