"""SHA-256 hashing helpers, including a 20-byte truncated variant."""

from __future__ import annotations

import hashlib

SIZE = 32
BLOCK_SIZE = 64
TRUNCATED_SIZE = 20


class TruncatedSha256:
    """A SHA-256 hasher whose digest is cut to the first 20 bytes."""

    name = "sha256-truncated"
    digest_size = TRUNCATED_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: bytes = b"") -> None:
        self._inner = hashlib.sha256(data)

    def update(self, data: bytes) -> None:
        self._inner.update(data)

    def digest(self) -> bytes:
        return self._inner.digest()[:TRUNCATED_SIZE]

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> "TruncatedSha256":
        clone = TruncatedSha256()
        clone._inner = self._inner.copy()
        return clone


def new():
    """Return a fresh SHA-256 hasher."""
    return hashlib.sha256()


def new_truncated() -> TruncatedSha256:
    """Return a fresh truncated SHA-256 hasher."""
    return TruncatedSha256()


def sum256(bz: bytes) -> bytes:
    """Return the SHA-256 digest of ``bz``."""
    return hashlib.sha256(bz).digest()


def sum_truncated(bz: bytes) -> bytes:
    """Return the first 20 bytes of the SHA-256 digest of ``bz``."""
    return hashlib.sha256(bz).digest()[:TRUNCATED_SIZE]