"""Application layer for payloadpack.

This layer serializes payloads without direct filesystem or codec access.
All side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "ArchiveReport",
    "ArchiveWriter",
    "PayloadService",
    "PlainWriteReport",
    "PlainWriter",
]

from payloadpack.app.archive_writer import ArchiveReport, ArchiveWriter
from payloadpack.app.payload_service import PayloadService
from payloadpack.app.plain_writer import PlainWriter, PlainWriteReport
