"""Ed25519 keys, signatures and batch verification."""

from __future__ import annotations

import hmac

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from . import keys, tmhash

PRIV_KEY_NAME = "tendermint/PrivKeyEd25519"
PUB_KEY_NAME = "tendermint/PubKeyEd25519"
PUB_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64
SIGNATURE_SIZE = 64
SEED_SIZE = 32
KEY_TYPE = "ed25519"


def _public_bytes(seed: bytes) -> bytes:
    return (
        Ed25519PrivateKey.from_private_bytes(seed)
        .public_key()
        .public_bytes(Encoding.Raw, PublicFormat.Raw)
    )


class PrivKey(bytes, keys.PrivKey):
    """A 64-byte Ed25519 private key: 32-byte seed followed by the public key."""

    def _seed(self) -> bytes:
        if len(self) != PRIVATE_KEY_SIZE:
            raise ValueError(
                f"ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, got {len(self)}"
            )
        return bytes(self[:SEED_SIZE])

    def sign(self, msg: bytes) -> bytes:
        """Return the 64-byte signature of ``msg``."""
        return Ed25519PrivateKey.from_private_bytes(self._seed()).sign(bytes(msg))

    def pub_key(self) -> "PubKey":
        """Return the public key stored in the latter 32 bytes."""
        tail = bytes(self[32:])
        if not any(tail):
            raise ValueError("Expected ed25519 PrivKey to include concatenated pubkey bytes")
        return PubKey(tail[:PUB_KEY_SIZE].ljust(PUB_KEY_SIZE, b"\x00"))

    def equals(self, other: keys.PrivKey) -> bool:
        """Constant-time comparison with another Ed25519 private key."""
        if isinstance(other, PrivKey):
            return hmac.compare_digest(bytes(self), bytes(other))
        return False

    @property
    def key_type(self) -> str:
        return KEY_TYPE

    def __repr__(self) -> str:
        return "PrivKeyEd25519{...}"


class PubKey(bytes, keys.PubKey):
    """A 32-byte Ed25519 public key."""

    def address(self) -> keys.Address:
        """Return the first 20 bytes of SHA-256 of the key."""
        if len(self) != PUB_KEY_SIZE:
            raise ValueError("pubkey is incorrect size")
        return keys.Address(tmhash.sum_truncated(bytes(self)))

    def verify_signature(self, msg: bytes, sig: bytes) -> bool:
        """Return whether ``sig`` is a valid signature of ``msg`` by this key."""
        if len(sig) != SIGNATURE_SIZE:
            return False
        try:
            key = Ed25519PublicKey.from_public_bytes(bytes(self))
            key.verify(bytes(sig), bytes(msg))
        except (InvalidSignature, ValueError):
            return False
        return True

    def equals(self, other: keys.PubKey) -> bool:
        """Return whether ``other`` is an Ed25519 key with the same bytes."""
        return isinstance(other, PubKey) and bytes(self) == bytes(other)

    @property
    def key_type(self) -> str:
        return KEY_TYPE

    def __str__(self) -> str:
        return f"PubKeyEd25519{{{bytes(self).hex().upper()}}}"

    def __repr__(self) -> str:
        return str(self)


class BatchVerifier(keys.BatchVerifier):
    """Collects Ed25519 signatures and verifies them together."""

    def __init__(self) -> None:
        self._entries: list[tuple[PubKey, bytes, bytes]] = []

    def add(self, key: keys.PubKey, msg: bytes, signature: bytes) -> None:
        """Queue a signature; raise ValueError for a wrong key type or size."""
        if not isinstance(key, PubKey):
            raise ValueError("pubkey is not Ed25519")
        if len(key) != PUB_KEY_SIZE:
            raise ValueError(
                f"pubkey size is incorrect; expected: {PUB_KEY_SIZE}, got {len(key)}"
            )
        if len(signature) != SIGNATURE_SIZE:
            raise ValueError("invalid signature")
        self._entries.append((key, bytes(msg), bytes(signature)))

    def verify(self) -> tuple[bool, list[bool]]:
        """Return overall validity and per-entry validity in insertion order."""
        if not self._entries:
            return False, []
        results = [key.verify_signature(msg, sig) for key, msg, sig in self._entries]
        return all(results), results


def _from_seed(seed: bytes) -> PrivKey:
    return PrivKey(bytes(seed) + _public_bytes(bytes(seed)))


def gen_priv_key() -> PrivKey:
    """Generate a new private key from OS randomness."""
    seed = Ed25519PrivateKey.generate().private_bytes(
        Encoding.Raw, PrivateFormat.Raw, NoEncryption()
    )
    return _from_seed(seed)


def gen_priv_key_from_secret(secret: bytes) -> PrivKey:
    """Derive a private key whose seed is SHA-256 of ``secret``."""
    return _from_seed(keys.sha256(bytes(secret)))