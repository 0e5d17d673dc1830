"""Deterministic minimal-height Merkle tree hashing.

The tree follows RFC 6962: leaves are hashed as ``sha256(0x00 || leaf)`` and
inner nodes as ``sha256(0x01 || left || right)``. When the number of items is
not a power of two, the left subtree holds the largest power of two strictly
smaller than the item count, so some leaves sit at different depths.

This construction alone does not prevent second pre-image attacks; use it for
short deterministic lists such as validator sets.
"""

from __future__ import annotations

from collections.abc import Sequence

from . import tmhash

LEAF_PREFIX = b"\x00"
INNER_PREFIX = b"\x01"


def empty_hash() -> bytes:
    """Return the hash of the empty input, used for an empty tree."""
    return tmhash.sum256(b"")


def leaf_hash(leaf: bytes) -> bytes:
    """Return ``sha256(0x00 || leaf)``."""
    return tmhash.sum256(LEAF_PREFIX + bytes(leaf))


def inner_hash(left: bytes, right: bytes) -> bytes:
    """Return ``sha256(0x01 || left || right)``."""
    return tmhash.sum256(INNER_PREFIX + bytes(left) + bytes(right))


def get_split_point(length: int) -> int:
    """Return the largest power of two strictly less than ``length``."""
    if length < 1:
        raise ValueError("Trying to split a tree with size < 1")
    k = 1 << (length.bit_length() - 1)
    if k == length:
        k >>= 1
    return k


def hash_from_byte_slices(items: Sequence[bytes] | None) -> bytes:
    """Return the Merkle root of ``items`` in the given order."""
    items = list(items or ())
    if not items:
        return empty_hash()
    if len(items) == 1:
        return leaf_hash(items[0])
    k = get_split_point(len(items))
    return inner_hash(hash_from_byte_slices(items[:k]), hash_from_byte_slices(items[k:]))


def hash_from_byte_slices_iterative(items: Sequence[bytes] | None) -> bytes:
    """Compute the same root as :func:`hash_from_byte_slices` without recursion."""
    level = [leaf_hash(item) for item in items or ()]
    if not level:
        return empty_hash()
    while len(level) > 1:
        paired = [inner_hash(left, right) for left, right in zip(level[0::2], level[1::2])]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]