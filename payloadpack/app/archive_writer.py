"""Zip archive serialization of a payload file store.

The archive is built entirely in memory through the codec port, finalized,
read back from the codec buffer, and only then handed to the output sink, so
a failed build never leaves partial bytes in the sink.
"""

from __future__ import annotations

import io
import logging
import stat
from pathlib import PurePosixPath
from typing import BinaryIO

from pydantic import BaseModel, Field

from payloadpack.app.ports import (
    ZIP_OPSYS_UNIX,
    ArchiveBufferPort,
    ArchiveCodecError,
    ArchiveCodecPort,
    ArchivePort,
)
from payloadpack.config import FailurePolicy
from payloadpack.payload import FileStore, ManifestBuilder

logger = logging.getLogger(__name__)

EXECUTABLE_SUFFIX = ".sh"

_WRITE_MASK = ~((stat.S_IWGRP | stat.S_IWOTH) << 16) & 0xFFFFFFFF


class ArchiveReport(BaseModel):
    """Outcome of a single archive build."""

    success: bool
    entries: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    size: int = 0
    error: str | None = None

    def __bool__(self) -> bool:
        return self.success


def normalize_permissions(opsys: int, attributes: int, name: str) -> int:
    """Return the external attribute word to store for entry ``name``.

    Only UNIX-tagged entries are changed: group and other write bits are
    cleared, and ``.sh`` files become executable by their owner.
    """
    if opsys != ZIP_OPSYS_UNIX:
        return attributes

    attributes &= _WRITE_MASK
    if PurePosixPath(name).suffix == EXECUTABLE_SUFFIX:
        attributes |= stat.S_IXUSR << 16
    return attributes


def apply_entry_permissions(archive: ArchivePort, index: int, name: str) -> None:
    """Normalize the permission bits of the archive entry at ``index``."""
    opsys, attributes = archive.get_external_attributes(index)
    if opsys != ZIP_OPSYS_UNIX:
        return
    archive.set_external_attributes(index, opsys, normalize_permissions(opsys, attributes, name))


class ArchiveWriter:
    """Serialize a :class:`FileStore` into a zip byte stream."""

    def __init__(
        self,
        codec: ArchiveCodecPort,
        *,
        version: str,
        manifest_builder: ManifestBuilder | None = None,
        failure_policy: FailurePolicy = "lenient",
    ) -> None:
        """Initialize archive writer.

        Args:
            codec: Archive codec port
            version: Version string recorded in the manifest
            manifest_builder: Builder injecting the manifest entry
            failure_policy: ``lenient`` skips entries that cannot be archived,
                ``strict`` fails the whole build instead
        """
        self.codec = codec
        self.version = version
        self.manifest_builder = manifest_builder or ManifestBuilder()
        self.failure_policy = failure_policy

    def write_archive(self, store: FileStore, sink: BinaryIO) -> ArchiveReport:
        """Build the archive for ``store`` and write it to ``sink``.

        Args:
            store: File store to serialize (manifest entry is refreshed)
            sink: Writable binary stream receiving the finished archive

        Returns:
            ArchiveReport; on failure nothing has been written to ``sink``
        """
        logger.info("Writing zip to stream")
        with store.exclusive():
            self.manifest_builder.build_and_insert(store, self.version)

            try:
                buffer = self.codec.create_buffer()
            except ArchiveCodecError as exc:
                logger.error("Can't create buffer for new archive: %s", exc)
                return ArchiveReport(success=False, error=f"buffer creation failed: {exc}")

            try:
                buffer.keep()
                return self._build(store, buffer, sink)
            finally:
                buffer.free()

    def _build(
        self, store: FileStore, buffer: ArchiveBufferPort, sink: BinaryIO
    ) -> ArchiveReport:
        try:
            archive = self.codec.open_archive(buffer)
        except ArchiveCodecError as exc:
            logger.error("Can't create/open an archive on the new buffer: %s", exc)
            return ArchiveReport(success=False, error=f"archive creation failed: {exc}")

        logger.info("Zip buffer created, adding files to archive")
        entries, skipped = self._add_entries(store, archive)

        if skipped and self.failure_policy == "strict":
            archive.discard()
            logger.error(
                "Strict failure policy: %d entries could not be archived: %s",
                len(skipped),
                ", ".join(skipped),
            )
            return ArchiveReport(
                success=False,
                entries=entries,
                skipped=skipped,
                error="entries could not be archived",
            )

        try:
            archive.close()
        except ArchiveCodecError as exc:
            logger.error("Problem closing new zip archive: %s", exc)
            return ArchiveReport(
                success=False,
                entries=entries,
                skipped=skipped,
                error=f"finalization failed: {exc}",
            )

        try:
            data = self._read_back(buffer)
        except (ArchiveCodecError, MemoryError) as exc:
            logger.error("Unable to copy zip buffer for writing to stream: %s", exc)
            return ArchiveReport(
                success=False,
                entries=entries,
                skipped=skipped,
                error=f"read-back failed: {exc}",
            )

        sink.write(data)
        sink.flush()
        return ArchiveReport(success=True, entries=entries, skipped=skipped, size=len(data))

    def _add_entries(self, store: FileStore, archive: ArchivePort) -> tuple[list[str], list[str]]:
        entries: list[str] = []
        skipped: list[str] = []

        for key in store.ordered_keys():
            name = str(key)
            content = store.read(key)
            logger.debug("Adding file %s to archive buffer (%d bytes)", name, len(content))

            try:
                source = archive.source_from_bytes(content)
            except ArchiveCodecError as exc:
                logger.warning("Can't create archive source for %s: %s", name, exc)
                skipped.append(name)
                continue

            try:
                index = archive.add(name, source, overwrite=True)
            except ArchiveCodecError as exc:
                logger.warning("Problem adding file %s to archive: %s", name, exc)
                skipped.append(name)
                continue

            try:
                apply_entry_permissions(archive, index, name)
            except ArchiveCodecError as exc:
                logger.warning("Problem setting permissions of %s in archive: %s", name, exc)
                skipped.append(name)
                continue

            entries.append(name)

        return entries, skipped

    @staticmethod
    def _read_back(buffer: ArchiveBufferPort) -> bytes:
        buffer.open()
        try:
            buffer.seek(0, io.SEEK_END)
            size = buffer.tell()
            logger.info("Zip buffer is of size %d bytes", size)

            buffer.seek(0, io.SEEK_SET)
            data = buffer.read(size)
        finally:
            buffer.close()

        if len(data) != size:
            raise ArchiveCodecError(f"short read from archive buffer ({len(data)} of {size} bytes)")
        return data
