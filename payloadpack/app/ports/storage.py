"""Storage port interface for filesystem operations."""

from pathlib import Path
from typing import Iterator, Protocol


class StoragePort(Protocol):
    """Port interface for storage operations.

    Abstracts filesystem I/O to enable testing and alternative backends.

    Side effects: Reads/writes files.
    """

    def make_dirs(self, path: Path) -> None:
        """Create ``path`` and any missing parents.

        Args:
            path: Directory path
        """
        ...

    def write_bytes(self, path: Path, content: bytes) -> None:
        """Write binary file verbatim.

        Args:
            path: File path (parent must exist)
            content: Bytes to write
        """
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Read binary file.

        Args:
            path: File path

        Returns:
            File contents
        """
        ...

    def list_files(self, directory: Path) -> Iterator[Path]:
        """List regular files below ``directory`` recursively.

        Args:
            directory: Directory path

        Yields:
            File paths in sorted order
        """
        ...
