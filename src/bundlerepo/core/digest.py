"""
bundlerepo.core.digest - Content Digests
==========================================

SHA-1 helpers used for integrity verification and duplicate detection.
Digests are raw 20-byte values; use ``.hex()`` for display.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

DIGEST_SIZE = 20
_CHUNK_SIZE = 64 * 1024


def sha1_bytes(data: bytes) -> bytes:
    return hashlib.sha1(data).digest()


def sha1_file(path: Path) -> bytes:
    """Compute the SHA-1 of a file, reading it in chunks."""
    hasher = hashlib.sha1()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.digest()


def copy_with_digest(source: BinaryIO, target: BinaryIO) -> tuple[bytes, int]:
    """Copy ``source`` into ``target`` while hashing the copied bytes.

    The digest is computed over exactly the bytes written to ``target``.

    Returns:
        Tuple of (SHA-1 digest, number of bytes copied).
    """
    hasher = hashlib.sha1()
    size = 0
    for chunk in iter(lambda: source.read(_CHUNK_SIZE), b""):
        hasher.update(chunk)
        target.write(chunk)
        size += len(chunk)
    return hasher.digest(), size
