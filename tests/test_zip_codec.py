"""Contract tests for the zipfile-backed archive codec adapter."""

from __future__ import annotations

import io
import zipfile

import pytest

from payloadpack.app.adapters import ZipfileArchiveCodec
from payloadpack.app.adapters.zip_codec import DEFAULT_EXTERNAL_ATTRIBUTES, ZIP_EPOCH
from payloadpack.app.ports import ZIP_OPSYS_UNIX, ArchiveCodecError


def _finalize(codec: ZipfileArchiveCodec, entries: dict[str, bytes]) -> bytes:
    buffer = codec.create_buffer()
    buffer.keep()
    archive = codec.open_archive(buffer)
    for name, data in entries.items():
        archive.add(name, archive.source_from_bytes(data))
    archive.close()

    buffer.open()
    buffer.seek(0, io.SEEK_END)
    size = buffer.tell()
    buffer.seek(0)
    data = buffer.read(size)
    buffer.close()
    buffer.free()
    return data


def test_entries_use_fixed_metadata(zip_codec: ZipfileArchiveCodec) -> None:
    data = _finalize(zip_codec, {"a.txt": b"alpha"})

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        info = archive.getinfo("a.txt")

    assert info.date_time == ZIP_EPOCH
    assert info.create_system == ZIP_OPSYS_UNIX
    assert info.external_attr == DEFAULT_EXTERNAL_ATTRIBUTES
    assert info.compress_type == zipfile.ZIP_DEFLATED


def test_overwrite_replaces_entry_in_place(zip_codec: ZipfileArchiveCodec) -> None:
    buffer = zip_codec.create_buffer()
    archive = zip_codec.open_archive(buffer)

    first = archive.add("a.txt", archive.source_from_bytes(b"one"))
    archive.add("b.txt", archive.source_from_bytes(b"two"))
    again = archive.add("a.txt", archive.source_from_bytes(b"three"), overwrite=True)

    assert first == again == 0
    assert len(archive) == 2
    archive.discard()


def test_add_without_overwrite_rejects_duplicates(zip_codec: ZipfileArchiveCodec) -> None:
    archive = zip_codec.open_archive(zip_codec.create_buffer())
    archive.add("a.txt", archive.source_from_bytes(b"one"))

    with pytest.raises(ArchiveCodecError, match="already exists"):
        archive.add("a.txt", archive.source_from_bytes(b"two"), overwrite=False)


def test_source_from_non_bytes_fails(zip_codec: ZipfileArchiveCodec) -> None:
    archive = zip_codec.open_archive(zip_codec.create_buffer())

    with pytest.raises(ArchiveCodecError):
        archive.source_from_bytes("text")  # type: ignore[arg-type]


def test_attributes_set_after_add_reach_central_directory(
    zip_codec: ZipfileArchiveCodec,
) -> None:
    buffer = zip_codec.create_buffer()
    buffer.keep()
    archive = zip_codec.open_archive(buffer)
    index = archive.add("tool", archive.source_from_bytes(b"#!"))

    opsys, attributes = archive.get_external_attributes(index)
    archive.set_external_attributes(index, opsys, (0o100755 << 16))
    archive.close()

    buffer.open()
    data = buffer.read(1 << 20)
    buffer.close()

    with zipfile.ZipFile(io.BytesIO(data)) as reopened:
        assert reopened.getinfo("tool").external_attr >> 16 == 0o100755
    assert attributes == DEFAULT_EXTERNAL_ATTRIBUTES


def test_unkept_buffer_freed_on_close(zip_codec: ZipfileArchiveCodec) -> None:
    buffer = zip_codec.create_buffer()
    archive = zip_codec.open_archive(buffer)
    archive.close()

    assert buffer.freed
    with pytest.raises(ArchiveCodecError):
        buffer.open()


def test_closed_archive_rejects_changes(zip_codec: ZipfileArchiveCodec) -> None:
    buffer = zip_codec.create_buffer()
    buffer.keep()
    archive = zip_codec.open_archive(buffer)
    archive.close()

    with pytest.raises(ArchiveCodecError, match="closed"):
        archive.add("late.txt", archive.source_from_bytes(b"late"))
    with pytest.raises(ArchiveCodecError, match="closed"):
        archive.close()


def test_buffer_requires_open_before_reading(zip_codec: ZipfileArchiveCodec) -> None:
    buffer = zip_codec.create_buffer()

    with pytest.raises(ArchiveCodecError, match="not open"):
        buffer.read(10)


def test_empty_archive_is_valid(zip_codec: ZipfileArchiveCodec) -> None:
    data = _finalize(zip_codec, {})

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == []


def test_unknown_compression_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported compression"):
        ZipfileArchiveCodec(compression="bzip9")
