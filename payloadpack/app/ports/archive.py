"""Archive codec port interfaces for building zip-compatible buffers."""

from __future__ import annotations

from typing import Any, Protocol

ZIP_OPSYS_DOS = 0
ZIP_OPSYS_UNIX = 3


class ArchiveCodecError(Exception):
    """Raised by codec adapters when an archive operation cannot complete."""


class ArchiveBufferPort(Protocol):
    """In-memory buffer an archive is built into and read back from.

    The buffer is owned by the caller that created it and must be released
    with :meth:`free` once the archive bytes have been copied out.
    """

    def keep(self) -> None:
        """Keep the buffer alive after the archive built on it is closed."""
        ...

    def open(self) -> None:
        """Open the finalized buffer for reading."""
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        """Move the read position.

        Args:
            offset: Byte offset relative to ``whence``
            whence: ``io.SEEK_SET``, ``io.SEEK_CUR`` or ``io.SEEK_END``

        Returns:
            New absolute position
        """
        ...

    def tell(self) -> int:
        """Return the current read position."""
        ...

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes from the current position."""
        ...

    def close(self) -> None:
        """Close the read handle opened with :meth:`open`."""
        ...

    def free(self) -> None:
        """Release the buffer memory. Safe to call more than once."""
        ...


class ArchivePort(Protocol):
    """An archive under construction on top of an :class:`ArchiveBufferPort`.

    Side effects: none until :meth:`close` writes the archive into the buffer.
    """

    def source_from_bytes(self, data: bytes) -> Any:
        """Wrap ``data`` as a codec-level data source.

        Raises:
            ArchiveCodecError: If the data cannot be wrapped
        """
        ...

    def add(self, name: str, source: Any, *, overwrite: bool = True) -> int:
        """Add ``source`` under ``name``.

        Args:
            name: Forward-slash separated entry name
            source: Data source from :meth:`source_from_bytes`
            overwrite: Replace an existing entry with the same name

        Returns:
            Index of the entry in the archive

        Raises:
            ArchiveCodecError: If the entry cannot be added
        """
        ...

    def get_external_attributes(self, index: int) -> tuple[int, int]:
        """Return ``(opsys, attributes)`` for the entry at ``index``."""
        ...

    def set_external_attributes(self, index: int, opsys: int, attributes: int) -> None:
        """Replace the OS tag and external attribute word of an entry."""
        ...

    def close(self) -> None:
        """Finalize the archive, writing the central directory into the buffer.

        Raises:
            ArchiveCodecError: If the archive cannot be written
        """
        ...

    def discard(self) -> None:
        """Abandon the archive without writing anything."""
        ...


class ArchiveCodecPort(Protocol):
    """Port interface for a zip-compatible archive codec."""

    def create_buffer(self) -> ArchiveBufferPort:
        """Allocate an empty in-memory buffer.

        Raises:
            ArchiveCodecError: If the buffer cannot be allocated
        """
        ...

    def open_archive(self, buffer: ArchiveBufferPort) -> ArchivePort:
        """Create an empty archive writing into ``buffer``.

        Raises:
            ArchiveCodecError: If the archive cannot be created
        """
        ...
