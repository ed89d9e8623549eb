"""Archive codec adapter backed by the standard library ``zipfile`` module."""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass

from payloadpack.app.ports import (
    ZIP_OPSYS_DOS,
    ZIP_OPSYS_UNIX,
    ArchiveBufferPort,
    ArchiveCodecError,
    ArchiveCodecPort,
    ArchivePort,
)

# Earliest timestamp the zip format can encode; fixed for reproducible output.
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

# Regular file, rw for everyone before normalization.
DEFAULT_EXTERNAL_ATTRIBUTES = 0o100666 << 16

COMPRESSION_METHODS = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


@dataclass(frozen=True, slots=True)
class BlobSource:
    """Byte blob wrapped for insertion into an archive."""

    data: bytes


class InMemoryArchiveBuffer(ArchiveBufferPort):
    """``io.BytesIO`` holding the archive while it is built and read back."""

    def __init__(self) -> None:
        self._stream: io.BytesIO | None = io.BytesIO()
        self._kept = False
        self._reading = False

    @property
    def kept(self) -> bool:
        return self._kept

    @property
    def freed(self) -> bool:
        return self._stream is None

    @property
    def stream(self) -> io.BytesIO:
        if self._stream is None:
            raise ArchiveCodecError("Archive buffer has already been freed")
        return self._stream

    def keep(self) -> None:
        self._kept = True

    def open(self) -> None:
        if self._reading:
            raise ArchiveCodecError("Archive buffer is already open for reading")
        self.stream.seek(0)
        self._reading = True

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._require_reading()
        return self.stream.seek(offset, whence)

    def tell(self) -> int:
        self._require_reading()
        return self.stream.tell()

    def read(self, size: int) -> bytes:
        self._require_reading()
        return self.stream.read(size)

    def close(self) -> None:
        self._reading = False

    def free(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._reading = False

    def _require_reading(self) -> None:
        if not self._reading:
            raise ArchiveCodecError("Archive buffer is not open for reading")


class ZipArchive(ArchivePort):
    """Zip archive staged in memory and written to its buffer on close.

    Entries are held until :meth:`close` so an entry can be replaced in place
    and its external attributes edited after it was added.
    """

    def __init__(
        self,
        buffer: InMemoryArchiveBuffer,
        *,
        compression: int,
        compresslevel: int | None,
        opsys: int,
    ) -> None:
        self._buffer = buffer
        self._compression = compression
        self._compresslevel = compresslevel
        self._opsys = opsys
        self._entries: list[tuple[zipfile.ZipInfo, bytes]] = []
        self._index: dict[str, int] = {}
        self._closed = False

    def source_from_bytes(self, data: bytes) -> BlobSource:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ArchiveCodecError(
                f"Cannot create data source from {type(data).__name__}"
            )
        return BlobSource(bytes(data))

    def add(self, name: str, source: BlobSource, *, overwrite: bool = True) -> int:
        self._require_open()
        if not isinstance(source, BlobSource):
            raise ArchiveCodecError(f"Unsupported data source for {name}: {source!r}")
        if not name or name.startswith("/") or name.endswith("/"):
            raise ArchiveCodecError(f"Invalid archive entry name: {name!r}")

        info = zipfile.ZipInfo(filename=name, date_time=ZIP_EPOCH)
        info.compress_type = self._compression
        info.create_system = self._opsys
        info.external_attr = DEFAULT_EXTERNAL_ATTRIBUTES

        existing = self._index.get(name)
        if existing is not None:
            if not overwrite:
                raise ArchiveCodecError(f"Archive entry already exists: {name}")
            self._entries[existing] = (info, source.data)
            return existing

        self._entries.append((info, source.data))
        self._index[name] = len(self._entries) - 1
        return self._index[name]

    def get_external_attributes(self, index: int) -> tuple[int, int]:
        info = self._entry_info(index)
        return info.create_system, info.external_attr

    def set_external_attributes(self, index: int, opsys: int, attributes: int) -> None:
        self._require_open()
        info = self._entry_info(index)
        info.create_system = opsys
        info.external_attr = attributes & 0xFFFFFFFF

    def close(self) -> None:
        self._require_open()
        self._closed = True
        try:
            with zipfile.ZipFile(self._buffer.stream, "w") as archive:
                for info, data in self._entries:
                    archive.writestr(info, data, compresslevel=self._compresslevel)
        except (OSError, ValueError, RuntimeError, zipfile.LargeZipFile) as exc:
            raise ArchiveCodecError(f"Cannot write zip archive: {exc}") from exc
        finally:
            self._entries.clear()
            self._index.clear()
            if not self._buffer.kept:
                self._buffer.free()

    def discard(self) -> None:
        self._closed = True
        self._entries.clear()
        self._index.clear()
        if not self._buffer.kept:
            self._buffer.free()

    def __len__(self) -> int:
        return len(self._entries)

    def _entry_info(self, index: int) -> zipfile.ZipInfo:
        if not 0 <= index < len(self._entries):
            raise ArchiveCodecError(f"No archive entry at index {index}")
        return self._entries[index][0]

    def _require_open(self) -> None:
        if self._closed:
            raise ArchiveCodecError("Archive is already closed")


class ZipfileArchiveCodec(ArchiveCodecPort):
    """Create zip archives in memory with deterministic entry metadata."""

    def __init__(
        self,
        *,
        compression: str = "deflated",
        compresslevel: int | None = None,
        unix_attributes: bool = True,
    ) -> None:
        if compression not in COMPRESSION_METHODS:
            raise ValueError(
                f"Unsupported compression '{compression}'. "
                f"Choose one of: {', '.join(sorted(COMPRESSION_METHODS))}"
            )
        self._compression = COMPRESSION_METHODS[compression]
        self._compresslevel = compresslevel
        self._opsys = ZIP_OPSYS_UNIX if unix_attributes else ZIP_OPSYS_DOS

    def create_buffer(self) -> InMemoryArchiveBuffer:
        try:
            return InMemoryArchiveBuffer()
        except MemoryError as exc:  # pragma: no cover - allocation failure
            raise ArchiveCodecError("Cannot allocate archive buffer") from exc

    def open_archive(self, buffer: ArchiveBufferPort) -> ZipArchive:
        if not isinstance(buffer, InMemoryArchiveBuffer):
            raise ArchiveCodecError(f"Unsupported archive buffer: {buffer!r}")
        if buffer.freed:
            raise ArchiveCodecError("Cannot open an archive on a freed buffer")
        return ZipArchive(
            buffer,
            compression=self._compression,
            compresslevel=self._compresslevel,
            opsys=self._opsys,
        )
