# src/limelock/core/fingerprint.py
"""
Content fingerprints for payloads.

A fingerprint is the lowercase hex MD5 digest of a payload's bytes. The
remote service names and verifies blobs by this value, so the algorithm
is fixed by the wire protocol - it is an integrity check against
corruption, not a defence against a malicious peer.

Two entry points produce identical results for identical bytes:
- fingerprint(): whole buffer, already in memory
- fingerprint_stream(): bytes delivered incrementally (files, sockets)
"""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from limelock.contracts.filesystem import FileSystem

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "EMPTY_FINGERPRINT",
    "FINGERPRINT_ALGORITHM",
    "fingerprint",
    "fingerprint_file",
    "fingerprint_stream",
    "matches",
]

FINGERPRINT_ALGORITHM = "md5"

# Digest of the empty byte sequence. Empty payloads are valid.
EMPTY_FINGERPRINT = "d41d8cd98f00b204e9800998ecf8427e"

DEFAULT_CHUNK_SIZE = 64 * 1024


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes | bytearray | memoryview:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def _new_digest() -> hashlib._Hash:
    # Not used for security decisions against an adversary
    return hashlib.new(FINGERPRINT_ALGORITHM, usedforsecurity=False)


def fingerprint(data: bytes | bytearray | memoryview | str) -> str:
    """Fingerprint an in-memory payload.

    Text is encoded as UTF-8 before hashing, so fingerprint("abc") ==
    fingerprint(b"abc").

    Args:
        data: Payload bytes or text

    Returns:
        32-character lowercase hex digest
    """
    digest = _new_digest()
    digest.update(_as_bytes(data))
    return digest.hexdigest()


def fingerprint_stream(chunks: Iterable[bytes | bytearray | memoryview | str]) -> str:
    """Fingerprint a payload delivered as a sequence of chunks.

    Chunks are folded into one running digest in iteration order; the
    digest is finalized only once the iterable is exhausted. If the source
    raises part-way through, the exception propagates and the partial
    digest is discarded.

    Args:
        chunks: Payload pieces in order. Chunk boundaries do not affect
            the result.

    Returns:
        32-character lowercase hex digest, equal to fingerprint() of the
        concatenated chunks
    """
    digest = _new_digest()
    for chunk in chunks:
        digest.update(_as_bytes(chunk))
    return digest.hexdigest()


def fingerprint_file(
    path: Path | str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    filesystem: FileSystem | None = None,
) -> str:
    """Stream-fingerprint a file without loading it whole.

    Raises:
        OSError: If the file cannot be opened or a read fails
    """
    if filesystem is None:
        from limelock.core.filesystem import LocalFileSystem

        filesystem = LocalFileSystem()
    return fingerprint_stream(filesystem.iter_chunks(Path(path), chunk_size))


def matches(data: bytes | bytearray | memoryview | str, expected: str) -> bool:
    """Check whether data hashes to the expected fingerprint.

    Comparison is case-insensitive on the hex digest and timing-safe.
    """
    return hmac.compare_digest(fingerprint(data), expected.lower())
