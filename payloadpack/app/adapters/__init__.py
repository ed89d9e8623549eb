"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .storage import FileSystemStorageAdapter
from .zip_codec import InMemoryArchiveBuffer, ZipArchive, ZipfileArchiveCodec

__all__ = [
    "FileSystemStorageAdapter",
    "InMemoryArchiveBuffer",
    "ZipArchive",
    "ZipfileArchiveCodec",
]
