"""In-memory payload domain: keys, file store, and manifest."""

from payloadpack.payload.keys import MANIFEST_KEY, MANIFEST_PATH, PathKey
from payloadpack.payload.manifest import ManifestBuilder, PayloadManifest
from payloadpack.payload.store import ContentSlot, FileStore

__all__ = [
    "MANIFEST_KEY",
    "MANIFEST_PATH",
    "PathKey",
    "ContentSlot",
    "FileStore",
    "ManifestBuilder",
    "PayloadManifest",
]
