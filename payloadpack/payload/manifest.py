"""Manifest entry describing a payload's version and contents prefix."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from payloadpack.payload.keys import MANIFEST_KEY
from payloadpack.payload.store import FileStore

logger = logging.getLogger(__name__)


class PayloadManifest(BaseModel):
    """Contents of ``manifest/manifest.json``."""

    model_config = ConfigDict(frozen=True)

    contents_path: str
    version: str


class ManifestBuilder:
    """Synthesizes the manifest entry and injects it into a store."""

    @staticmethod
    def render(version: str, prefix: str) -> bytes:
        """Return the compact manifest blob terminated by one newline."""
        manifest = PayloadManifest(version=version, contents_path=prefix)
        return (manifest.model_dump_json() + "\n").encode("utf-8")

    def build_and_insert(self, store: FileStore, version: str) -> None:
        """Overwrite the store's manifest entry for ``version`` and its prefix."""
        with store.exclusive():
            store.put(MANIFEST_KEY, self.render(version, store.prefix))
        logger.debug("Manifest refreshed (version=%s, contents_path=%s)", version, store.prefix)
