"""
Shared Test Fixtures for bundlerepo
=====================================

Fixtures are organized by layer:

    1. Bundles (in-memory jar builder)
    2. Repository roots
    3. Repositories
"""

from __future__ import annotations

import io
import struct
import zipfile
from pathlib import Path
from typing import Callable, Optional

import pytest

from bundlerepo.core.config import RepositoryConfig
from bundlerepo.repository.local import LocalIndexedRepository


# Fixed timestamp so identical inputs produce byte-identical jars
_ZIP_TIME = (2020, 1, 1, 0, 0, 0)

BundleFactory = Callable[..., bytes]


def build_bundle(
    symbolic_name: Optional[str] = "org.example.api",
    version: Optional[str] = "2.6.1",
    headers: Optional[dict[str, str]] = None,
    entries: Optional[dict[str, bytes]] = None,
    compression: int = zipfile.ZIP_STORED,
) -> bytes:
    """Build a jar whose manifest carries the given bundle headers."""
    lines = ["Manifest-Version: 1.0"]
    if symbolic_name is not None:
        lines.append(f"Bundle-SymbolicName: {symbolic_name}")
    if version is not None:
        lines.append(f"Bundle-Version: {version}")
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    manifest = "\r\n".join(lines) + "\r\n\r\n"

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr(
            zipfile.ZipInfo("META-INF/MANIFEST.MF", date_time=_ZIP_TIME),
            manifest,
            compress_type=compression,
        )
        for name, content in (entries or {}).items():
            archive.writestr(zipfile.ZipInfo(name, date_time=_ZIP_TIME), content, compress_type=compression)
    return buffer.getvalue()


def corrupt_manifest(data: bytes) -> bytes:
    """Flip bytes inside the compressed manifest member of a deflated jar."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        info = archive.getinfo("META-INF/MANIFEST.MF")
    header = info.header_offset
    name_length, extra_length = struct.unpack("<HH", data[header + 26:header + 30])
    start = header + 30 + name_length + extra_length
    damaged = bytearray(data)
    for offset in range(start + 2, start + 12):
        damaged[offset] ^= 0xFF
    return bytes(damaged)


# =============================================================================
# Bundles
# =============================================================================

@pytest.fixture
def bundle_factory() -> BundleFactory:
    """Builder for in-memory bundle jars."""
    return build_bundle


@pytest.fixture
def corrupt_bundle() -> bytes:
    """A deflated bundle whose manifest member cannot be decompressed."""
    return corrupt_manifest(build_bundle(compression=zipfile.ZIP_DEFLATED))


# =============================================================================
# Repository Roots
# =============================================================================

@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """An existing, empty repository root directory."""
    root = (tmp_path / "repo").resolve()
    root.mkdir()
    return root


# =============================================================================
# Repositories
# =============================================================================

@pytest.fixture
def local_config(repo_root: Path) -> RepositoryConfig:
    """Default R5 configuration rooted at ``repo_root``."""
    return RepositoryConfig(local=repo_root, type="R5")


@pytest.fixture
def local_repo(local_config: RepositoryConfig) -> LocalIndexedRepository:
    """LocalIndexedRepository with the default generator registry."""
    return LocalIndexedRepository(local_config)
