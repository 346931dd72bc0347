# src/limelock/core/filesystem.py
"""Local file-system backend for the FileSystem protocol."""

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

__all__ = ["LocalFileSystem"]


class LocalFileSystem:
    """FileSystem backed by the local disk.

    OSError from open/read/write propagates unchanged.
    """

    def iter_chunks(self, path: Path, chunk_size: int) -> Iterator[bytes]:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        with path.open("rb") as f:
            while chunk := f.read(chunk_size):
                yield chunk

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Write data atomically.

        The bytes go to a temporary sibling first and replace path only once
        fully written, so a failed write never leaves a partial file behind.
        """
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
