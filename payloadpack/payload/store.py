"""Thread-safe in-memory file store backing a payload."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from payloadpack.payload.keys import PathKey


class ContentSlot:
    """Mutable content of one stored file.

    The slot returned by :meth:`FileStore.get_file` stays valid for the life
    of the store. Writes through a slot do not take the store lock; at most
    one producer should write to a given slot at a time.
    """

    __slots__ = ("_data",)

    def __init__(self, initial: bytes | str = b"") -> None:
        self._data = bytearray(_as_bytes(initial))

    def write(self, data: bytes | str) -> int:
        """Append ``data`` (str is UTF-8 encoded) and return the byte count."""
        chunk = _as_bytes(data)
        self._data += chunk
        return len(chunk)

    def overwrite(self, data: bytes | str) -> None:
        """Replace the whole content with ``data``."""
        self._data[:] = _as_bytes(data)

    def getvalue(self) -> bytes:
        """Return a snapshot of the current content."""
        return bytes(self._data)

    def text(self, encoding: str = "utf-8") -> str:
        return self._data.decode(encoding)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ContentSlot({len(self._data)} bytes)"


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Payload content must be bytes or str, not {type(data).__name__}")


class FileStore:
    """Mapping of :class:`PathKey` to :class:`ContentSlot` scoped by a prefix.

    Every operation on the key set runs under one store-wide lock. The lock is
    re-entrant so a serializer holding :meth:`exclusive` can keep calling the
    regular accessors from the same thread while producers on other threads
    wait.
    """

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix
        self._files: dict[PathKey, ContentSlot] = {}
        self._lock = threading.RLock()

    @property
    def prefix(self) -> str:
        return self._prefix

    def key_for(self, name: str) -> PathKey:
        """Return the key ``name`` is stored under."""
        return PathKey.build(self._prefix, name)

    def get_file(self, name: str) -> ContentSlot:
        """Return the slot for ``prefix + name``, creating an empty one if absent."""
        key = self.key_for(name)
        with self._lock:
            slot = self._files.get(key)
            if slot is None:
                slot = ContentSlot()
                self._files[key] = slot
            return slot

    def put(self, key: PathKey, content: bytes | str) -> None:
        """Overwrite the file at an explicit ``key`` (no prefix applied)."""
        with self._lock:
            slot = self._files.get(key)
            if slot is None:
                self._files[key] = ContentSlot(content)
            else:
                slot.overwrite(content)

    def read(self, key: PathKey) -> bytes:
        """Return the current content stored under ``key``."""
        with self._lock:
            return self._files[key].getvalue()

    def ordered_keys(self) -> list[PathKey]:
        """Return all keys sorted by their raw path string."""
        with self._lock:
            return sorted(self._files)

    @contextmanager
    def exclusive(self) -> Iterator[FileStore]:
        """Hold the store lock for the duration of the block."""
        with self._lock:
            yield self

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            try:
                key = PathKey(key)
            except ValueError:
                return False
        with self._lock:
            return key in self._files

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def __repr__(self) -> str:
        return f"FileStore(prefix={self._prefix!r}, files={len(self)})"
