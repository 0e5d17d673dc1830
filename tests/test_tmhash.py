import hashlib

from bftkit import tmhash

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_hash_matches_sha256():
    vector = b"abc"
    hasher = tmhash.new()
    hasher.update(vector)
    bz = hasher.digest()
    bz2 = tmhash.sum256(vector)
    bz3 = hashlib.sha256(vector).digest()
    assert bz == bz2
    assert bz == bz3
    assert bz.hex() == ABC_SHA256


def test_hash_truncated():
    vector = b"abc"
    hasher = tmhash.new_truncated()
    hasher.update(vector)
    bz = hasher.digest()
    bz2 = tmhash.sum_truncated(vector)
    bz3 = hashlib.sha256(vector).digest()[: tmhash.TRUNCATED_SIZE]
    assert bz == bz2
    assert bz == bz3
    assert len(bz) == 20
    assert hasher.hexdigest() == ABC_SHA256[:40]


def test_truncated_incremental_and_copy():
    hasher = tmhash.new_truncated()
    hasher.update(b"a")
    clone = hasher.copy()
    hasher.update(b"bc")
    assert hasher.digest() == tmhash.sum_truncated(b"abc")
    assert clone.digest() == tmhash.sum_truncated(b"a")


def test_sizes():
    assert tmhash.new_truncated().digest_size == 20
    assert len(tmhash.sum256(b"")) == tmhash.SIZE