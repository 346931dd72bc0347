# src/limelock/contracts/filesystem.py
"""FileSystem protocol used by the upload/download wrappers and file hashing.

A client constructed without a FileSystem has no file access at all;
the wrappers then fail fast with UnsupportedOperationError.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for file-system backends."""

    def iter_chunks(self, path: Path, chunk_size: int) -> Iterator[bytes]:
        """Yield the file's bytes in order, at most chunk_size at a time.

        Raises:
            OSError: If the file cannot be opened or read
        """
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Read the whole file.

        Raises:
            OSError: If the file cannot be read
        """
        ...

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Write data to path, replacing any existing file.

        Raises:
            OSError: If the file cannot be written
        """
        ...
