"""Filesystem-backed storage port implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from payloadpack.app.ports import StoragePort


class FileSystemStorageAdapter(StoragePort):
    """Adapter that performs direct filesystem operations."""

    def make_dirs(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_bytes(self, path: Path, content: bytes) -> None:
        with Path(path).open("wb") as handle:
            handle.write(content)

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def list_files(self, directory: Path) -> Iterator[Path]:
        root = Path(directory)
        if not root.is_dir():
            return iter(())
        return iter(sorted(path for path in root.rglob("*") if path.is_file()))
