"""XChaCha20-Poly1305 AEAD built from HChaCha20 and ChaCha20-Poly1305.

The extended 24-byte nonce allows nonces to be chosen at random.
"""

from __future__ import annotations

import struct

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

KEY_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16
MAX_PLAINTEXT_SIZE = (1 << 38) - 64
MAX_CIPHERTEXT_SIZE = (1 << 38) - 48

_HNONCE_SIZE = 16
_SIGMA = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
_MASK = 0xFFFFFFFF

_COLUMNS = ((0, 4, 8, 12), (1, 5, 9, 13), (2, 6, 10, 14), (3, 7, 11, 15))
_DIAGONALS = ((0, 5, 10, 15), (1, 6, 11, 12), (2, 7, 8, 13), (3, 4, 9, 14))


def _rotl(v: int, n: int) -> int:
    return ((v << n) | (v >> (32 - n))) & _MASK


def _quarter_round(state: list[int], a: int, b: int, c: int, d: int) -> None:
    state[a] = (state[a] + state[b]) & _MASK
    state[d] = _rotl(state[d] ^ state[a], 16)
    state[c] = (state[c] + state[d]) & _MASK
    state[b] = _rotl(state[b] ^ state[c], 12)
    state[a] = (state[a] + state[b]) & _MASK
    state[d] = _rotl(state[d] ^ state[a], 8)
    state[c] = (state[c] + state[d]) & _MASK
    state[b] = _rotl(state[b] ^ state[c], 7)


def hchacha20(nonce: bytes, key: bytes) -> bytes:
    """Derive 32 pseudo-random bytes from a 16-byte nonce and a 32-byte key."""
    if len(key) != KEY_SIZE:
        raise ValueError(f"hchacha20: key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != _HNONCE_SIZE:
        raise ValueError(f"hchacha20: nonce must be {_HNONCE_SIZE} bytes, got {len(nonce)}")
    state = [*_SIGMA, *struct.unpack("<8I", bytes(key)), *struct.unpack("<4I", bytes(nonce))]
    for _ in range(10):
        for indices in _COLUMNS:
            _quarter_round(state, *indices)
        for indices in _DIAGONALS:
            _quarter_round(state, *indices)
    return struct.pack("<8I", *state[0:4], *state[12:16])


class XChaCha20Poly1305:
    """AEAD cipher with a 32-byte key, 24-byte nonce and 16-byte tag."""

    nonce_size = NONCE_SIZE
    overhead = TAG_SIZE

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise ValueError("xchacha20poly1305: bad key length")
        self._key = bytes(key)

    def _inner(self, nonce: bytes) -> tuple[ChaCha20Poly1305, bytes]:
        nonce = bytes(nonce)
        sub_key = hchacha20(nonce[:_HNONCE_SIZE], self._key)
        sub_nonce = b"\x00" * 4 + nonce[_HNONCE_SIZE:]
        return ChaCha20Poly1305(sub_key), sub_nonce

    def seal(self, nonce: bytes, plaintext: bytes, additional_data: bytes | None = None) -> bytes:
        """Encrypt and authenticate ``plaintext``; return ciphertext || tag."""
        if len(nonce) != NONCE_SIZE:
            raise ValueError("xchacha20poly1305: bad nonce length passed to Seal")
        if len(plaintext) > MAX_PLAINTEXT_SIZE:
            raise ValueError("xchacha20poly1305: plaintext too large")
        aead, sub_nonce = self._inner(nonce)
        return aead.encrypt(sub_nonce, bytes(plaintext), bytes(additional_data or b""))

    def open(self, nonce: bytes, ciphertext: bytes, additional_data: bytes | None = None) -> bytes:
        """Authenticate and decrypt ``ciphertext``; raise ValueError on failure."""
        if len(nonce) != NONCE_SIZE:
            raise ValueError("xchacha20poly1305: bad nonce length passed to Open")
        if len(ciphertext) > MAX_CIPHERTEXT_SIZE:
            raise ValueError("xchacha20poly1305: ciphertext too large")
        aead, sub_nonce = self._inner(nonce)
        try:
            return aead.decrypt(sub_nonce, bytes(ciphertext), bytes(additional_data or b""))
        except InvalidTag as exc:
            raise ValueError("xchacha20poly1305: message authentication failed") from exc