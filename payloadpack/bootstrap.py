"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from payloadpack.app import ArchiveWriter, PayloadService, PlainWriter
from payloadpack.app.adapters import FileSystemStorageAdapter, ZipfileArchiveCodec
from payloadpack.app.ports import ArchiveCodecPort, StoragePort
from payloadpack.config import Settings, get_settings
from payloadpack.payload import FileStore, ManifestBuilder


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    storage_port: StoragePort
    archive_codec: ArchiveCodecPort
    manifest_builder: ManifestBuilder
    archive_writer: ArchiveWriter
    plain_writer: PlainWriter

    def new_payload(self, prefix: str | None = None) -> PayloadService:
        """Create an empty payload scoped to ``prefix`` (settings default if None)."""
        store = FileStore(self.settings.prefix if prefix is None else prefix)
        return PayloadService(
            store,
            archive_writer=self.archive_writer,
            plain_writer=self.plain_writer,
            storage_port=self.storage_port,
        )


def bootstrap_application(
    settings: Settings | None = None,
    *,
    archive_codec: ArchiveCodecPort | None = None,
    storage_port: StoragePort | None = None,
) -> ApplicationContainer:
    """Create the application container with default adapters."""

    active_settings = settings or get_settings()

    storage = storage_port or FileSystemStorageAdapter()
    codec = archive_codec or ZipfileArchiveCodec(
        compression=active_settings.compression,
        compresslevel=active_settings.compresslevel,
        unix_attributes=active_settings.unix_attributes,
    )
    manifest_builder = ManifestBuilder()

    archive_writer = ArchiveWriter(
        codec,
        version=active_settings.get_manifest_version(),
        manifest_builder=manifest_builder,
        failure_policy=active_settings.failure_policy,
    )
    plain_writer = PlainWriter(storage)

    return ApplicationContainer(
        settings=active_settings,
        storage_port=storage,
        archive_codec=codec,
        manifest_builder=manifest_builder,
        archive_writer=archive_writer,
        plain_writer=plain_writer,
    )
