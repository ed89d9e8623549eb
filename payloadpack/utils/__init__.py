"""Utility modules for common operations."""

from payloadpack.utils.hashing import compute_sha256

__all__ = ["compute_sha256"]
