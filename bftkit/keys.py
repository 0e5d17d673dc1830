"""Key interfaces, address hashing and OS-backed randomness."""

from __future__ import annotations

import abc
import hashlib
import secrets

from . import tmhash
from .hexbytes import HexBytes

ADDRESS_SIZE = tmhash.TRUNCATED_SIZE

Address = HexBytes


def address_hash(bz: bytes) -> Address:
    """Return the 20-byte truncated SHA-256 of ``bz`` as an address."""
    return Address(tmhash.sum_truncated(bz))


class PubKey(abc.ABC):
    """A public key able to verify signatures."""

    @abc.abstractmethod
    def address(self) -> Address:
        """Return the address derived from this key."""

    @abc.abstractmethod
    def verify_signature(self, msg: bytes, sig: bytes) -> bool:
        """Return whether ``sig`` is a valid signature of ``msg``."""

    @abc.abstractmethod
    def equals(self, other: "PubKey") -> bool:
        """Return whether ``other`` is the same key of the same type."""

    @property
    @abc.abstractmethod
    def key_type(self) -> str:
        """Name of the key algorithm."""


class PrivKey(abc.ABC):
    """A private key able to sign messages."""

    @abc.abstractmethod
    def sign(self, msg: bytes) -> bytes:
        """Return a signature over ``msg``."""

    @abc.abstractmethod
    def pub_key(self) -> PubKey:
        """Return the matching public key."""

    @abc.abstractmethod
    def equals(self, other: "PrivKey") -> bool:
        """Return whether ``other`` is the same key of the same type."""

    @property
    @abc.abstractmethod
    def key_type(self) -> str:
        """Name of the key algorithm."""


class BatchVerifier(abc.ABC):
    """Collects signatures and verifies them together."""

    @abc.abstractmethod
    def add(self, key: PubKey, message: bytes, signature: bytes) -> None:
        """Queue an entry; raise ValueError if it cannot be added."""

    @abc.abstractmethod
    def verify(self) -> tuple[bool, list[bool]]:
        """Return overall validity and per-entry validity in insertion order."""


def sha256(data: bytes) -> bytes:
    """Return the SHA-256 digest of ``data``."""
    return hashlib.sha256(data).digest()


def crand_bytes(num_bytes: int) -> bytes:
    """Return ``num_bytes`` bytes from the operating system's CSPRNG."""
    return secrets.token_bytes(num_bytes)


def crand_hex(num_digits: int) -> str:
    """Return a random hex string of ``num_digits // 2 * 2`` characters."""
    return crand_bytes(num_digits // 2).hex()