"""Pytest configuration and fixtures."""

import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from payloadpack.app.adapters import FileSystemStorageAdapter, ZipfileArchiveCodec
from payloadpack.app.ports import ArchiveCodecPort
from payloadpack.bootstrap import ApplicationContainer, bootstrap_application
from payloadpack.config import Settings
from payloadpack.payload import FileStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """Provide isolated payloadpack settings scoped to tests."""

    import payloadpack.config as config_module

    for name in ("PREFIX", "MANIFEST_VERSION", "FAILURE_POLICY", "COMPRESSION", "LOG_LEVEL"):
        monkeypatch.delenv(f"PAYLOADPACK_{name}", raising=False)

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(_env_file=None, manifest_version="0.0.0-test")
    config_module.set_settings(settings)

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def make_container() -> Callable[..., ApplicationContainer]:
    """Factory wiring an application container around an optional codec."""

    def _make(
        codec: ArchiveCodecPort | None = None,
        **overrides,
    ) -> ApplicationContainer:
        settings = Settings(_env_file=None, manifest_version="0.0.0-test", **overrides)
        return bootstrap_application(
            settings,
            archive_codec=codec,
            storage_port=FileSystemStorageAdapter(),
        )

    return _make


@pytest.fixture
def example_store() -> FileStore:
    """Store holding the two-file example payload under ``out/``."""
    store = FileStore("out/")
    store.get_file("a.txt").write("hello")
    store.get_file("b.txt").write("world\n")
    return store


@pytest.fixture
def zip_codec() -> ZipfileArchiveCodec:
    return ZipfileArchiveCodec()
