"""Payload service: populate a file store and serialize it."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import BinaryIO

from payloadpack.app.archive_writer import ArchiveReport, ArchiveWriter
from payloadpack.app.plain_writer import PlainWriter, PlainWriteReport
from payloadpack.app.ports import StoragePort
from payloadpack.payload import ContentSlot, FileStore, PathKey

logger = logging.getLogger(__name__)


class PayloadService:
    """A payload: one prefix-scoped file store plus its serializers.

    Producers call :meth:`get_file` (from any thread) and write into the
    returned slot. At packaging time exactly one of the ``write*`` methods is
    typically called; each serialization is deterministic for a fixed set of
    files.
    """

    def __init__(
        self,
        store: FileStore,
        *,
        archive_writer: ArchiveWriter,
        plain_writer: PlainWriter,
        storage_port: StoragePort,
    ) -> None:
        """Initialize payload service.

        Args:
            store: File store holding the payload contents
            archive_writer: Zip serializer
            plain_writer: Directory tree / text dump serializer
            storage_port: Filesystem operations port (used when collecting)
        """
        self.store = store
        self.archive_writer = archive_writer
        self.plain_writer = plain_writer
        self.storage = storage_port

    @property
    def prefix(self) -> str:
        return self.store.prefix

    def get_file(self, name: str) -> ContentSlot:
        return self.store.get_file(name)

    def ordered_file_names(self) -> list[PathKey]:
        return self.store.ordered_keys()

    def collect_directory(self, source_dir: Path, *, workers: int = 4) -> int:
        """Read every file below ``source_dir`` into the payload.

        Each file is stored under its POSIX path relative to ``source_dir``.
        Files are read by a pool of producer threads; unreadable files are
        logged and skipped.

        Args:
            source_dir: Directory to collect
            workers: Number of producer threads

        Returns:
            Number of files collected
        """
        root = Path(source_dir)
        if not root.is_dir():
            raise FileNotFoundError(f"Payload source directory not found: {root}")

        collected = 0
        with ThreadPoolExecutor(max_workers=workers) as executor:
            pending: dict[Future[int], Path] = {
                executor.submit(self._collect_file, root, path): path
                for path in self.storage.list_files(root)
            }
            for future in as_completed(pending):
                path = pending[future]
                try:
                    size = future.result()
                except (OSError, ValueError) as exc:
                    logger.warning("Skipping %s: %s", path, exc)
                    continue
                logger.debug("Collected %s (%d bytes)", path, size)
                collected += 1

        return collected

    def _collect_file(self, root: Path, path: Path) -> int:
        name = path.relative_to(root).as_posix()
        content = self.storage.read_bytes(path)
        return self.get_file(name).write(content)

    def write_plain(self, root: Path) -> PlainWriteReport:
        """Write the payload as a directory tree under ``root``."""
        report = self.plain_writer.write_to_directory(self.store, Path(root))
        if report.failed:
            logger.error(
                "%d of %d files could not be written under %s",
                len(report.failed),
                len(report.failed) + len(report.written),
                report.root,
            )
        return report

    def write_plain_stream(self, sink: BinaryIO) -> None:
        """Write a human-readable dump of the payload to ``sink``."""
        self.plain_writer.write_to_stream(self.store, sink)

    def write_zip(self, sink: BinaryIO) -> ArchiveReport:
        """Write the payload as a zip archive to ``sink``."""
        return self.archive_writer.write_archive(self.store, sink)

    def write(self, sink: BinaryIO) -> ArchiveReport:
        """Write the payload in its distribution form (a zip archive)."""
        return self.write_zip(sink)
