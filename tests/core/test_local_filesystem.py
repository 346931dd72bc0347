# tests/core/test_local_filesystem.py
"""Tests for the local file-system backend."""

from pathlib import Path

import pytest

from limelock.contracts.filesystem import FileSystem
from limelock.core.filesystem import LocalFileSystem


class TestLocalFileSystem:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(LocalFileSystem(), FileSystem)

    def test_iter_chunks_respects_chunk_size(self, tmp_path: Path) -> None:
        path = tmp_path / "data"
        path.write_bytes(b"abcdefg")

        chunks = list(LocalFileSystem().iter_chunks(path, 3))

        assert chunks == [b"abc", b"def", b"g"]

    def test_iter_chunks_empty_file_yields_nothing(self, tmp_path: Path) -> None:
        path = tmp_path / "empty"
        path.write_bytes(b"")

        assert list(LocalFileSystem().iter_chunks(path, 3)) == []

    def test_iter_chunks_rejects_non_positive_size(self, tmp_path: Path) -> None:
        path = tmp_path / "data"
        path.write_bytes(b"abc")

        with pytest.raises(ValueError, match="chunk_size"):
            list(LocalFileSystem().iter_chunks(path, 0))

    def test_read_write_roundtrip(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "out.bin"

        fs.write_bytes(path, b"\x00\xffpayload")

        assert fs.read_bytes(path) == b"\x00\xffpayload"

    def test_read_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            LocalFileSystem().read_bytes(tmp_path / "missing")

    def test_write_replaces_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.bin"
        path.write_bytes(b"old contents that are longer")

        LocalFileSystem().write_bytes(path, b"new")

        assert path.read_bytes() == b"new"
        assert [p.name for p in tmp_path.iterdir()] == ["out.bin"]

    def test_failed_write_leaves_no_partial_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "out.bin"
        path.write_bytes(b"original")

        def failing_replace(src: object, dst: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("limelock.core.filesystem.os.replace", failing_replace)

        with pytest.raises(OSError, match="disk full"):
            LocalFileSystem().write_bytes(path, b"replacement")

        assert path.read_bytes() == b"original"
        assert [p.name for p in tmp_path.iterdir()] == ["out.bin"]

    def test_failed_first_write_creates_nothing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def failing_replace(src: object, dst: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("limelock.core.filesystem.os.replace", failing_replace)

        with pytest.raises(OSError):
            LocalFileSystem().write_bytes(tmp_path / "new.bin", b"data")

        assert list(tmp_path.iterdir()) == []
