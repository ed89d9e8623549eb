"""Path keys identifying files stored in a payload."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

MANIFEST_PATH = "manifest/manifest.json"


@dataclass(frozen=True, order=True, slots=True)
class PathKey:
    """Prefix-qualified relative path used as the identity of a stored file.

    Keys compare by the raw path string, so sorting a list of keys yields the
    canonical output order shared by every serializer.
    """

    path: str

    def __post_init__(self) -> None:
        normalized = self.path.replace("\\", "/")
        if not normalized or normalized.endswith("/"):
            raise ValueError(f"Invalid payload file name: {self.path!r}")
        if normalized.startswith("/"):
            raise ValueError(f"Payload file names must be relative: {self.path!r}")
        if ".." in normalized.split("/"):
            raise ValueError(f"Path traversal detected in payload file name: {self.path!r}")
        object.__setattr__(self, "path", normalized)

    @classmethod
    def build(cls, prefix: str, name: str) -> PathKey:
        """Join ``prefix`` and ``name`` verbatim into a key."""
        if not name:
            raise ValueError("Payload file name must not be empty")
        return cls(prefix + name)

    @property
    def name(self) -> str:
        """Final path component."""
        return PurePosixPath(self.path).name

    @property
    def suffix(self) -> str:
        """File extension of the final component (``""`` for dotfiles)."""
        return PurePosixPath(self.path).suffix

    def __str__(self) -> str:
        return self.path


MANIFEST_KEY = PathKey(MANIFEST_PATH)
