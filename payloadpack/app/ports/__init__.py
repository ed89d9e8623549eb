"""Port interfaces for the payloadpack application layer.

These protocol interfaces define contracts for adapters.
Writers depend on these ports, never on concrete implementations.
"""

__all__ = [
    "ArchiveBufferPort",
    "ArchiveCodecError",
    "ArchiveCodecPort",
    "ArchivePort",
    "StoragePort",
    "ZIP_OPSYS_DOS",
    "ZIP_OPSYS_UNIX",
]

from payloadpack.app.ports.archive import (
    ZIP_OPSYS_DOS,
    ZIP_OPSYS_UNIX,
    ArchiveBufferPort,
    ArchiveCodecError,
    ArchiveCodecPort,
    ArchivePort,
)
from payloadpack.app.ports.storage import StoragePort
