"""Plain serializations of a payload: a directory tree or a text dump."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, Field

from payloadpack.app.ports import StoragePort
from payloadpack.payload import FileStore

logger = logging.getLogger(__name__)

SEPARATOR = b"-" * 42 + b"\n"


class PlainWriteReport(BaseModel):
    """Files written to (and skipped from) a plain directory tree."""

    root: Path
    written: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class PlainWriter:
    """Writes stored files verbatim, in key order.

    All I/O for directory output goes through the storage port.
    """

    def __init__(self, storage_port: StoragePort) -> None:
        self.storage = storage_port

    def write_to_directory(self, store: FileStore, root: Path) -> PlainWriteReport:
        """Materialize every stored file under ``root``.

        A file that cannot be written is logged and skipped; the remaining
        files are still written.

        Args:
            store: File store to serialize
            root: Destination directory

        Returns:
            PlainWriteReport listing written and failed keys
        """
        report = PlainWriteReport(root=Path(root))

        with store.exclusive():
            for key in store.ordered_keys():
                destination = report.root / key.path
                try:
                    self.storage.make_dirs(destination.parent)
                    self.storage.write_bytes(destination, store.read(key))
                except OSError as exc:
                    logger.warning("Unable to open output file %s: %s", destination, exc)
                    report.failed.append(key.path)
                    continue
                report.written.append(key.path)

        return report

    def write_to_stream(self, store: FileStore, sink: BinaryIO) -> None:
        """Write a human-readable dump of the store to ``sink``."""
        with store.exclusive():
            keys = store.ordered_keys()

            sink.write(SEPARATOR)
            sink.write(f"Plaintext payload: {store.prefix}\n".encode("utf-8"))
            sink.write(SEPARATOR)
            sink.write(b"Manifest:\n")
            for key in keys:
                sink.write(f"{key}\n".encode("utf-8"))
            sink.write(SEPARATOR)

            for key in keys:
                content = store.read(key)
                sink.write(f"File: {key}\n".encode("utf-8"))
                sink.write(content)
                if not content.endswith(b"\n"):
                    sink.write(b"\n")
                sink.write(SEPARATOR)

        sink.flush()
