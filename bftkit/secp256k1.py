"""secp256k1 ECDSA keys with lower-S signatures in R || S form."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Callable, Iterator

from Crypto.Hash import RIPEMD160
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from . import keys

PRIV_KEY_NAME = "tendermint/PrivKeySecp256k1"
PUB_KEY_NAME = "tendermint/PubKeySecp256k1"
KEY_TYPE = "secp256k1"
PRIV_KEY_SIZE = 32
PUB_KEY_SIZE = 33
SIGNATURE_SIZE = 64

CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_HALF_ORDER = CURVE_ORDER >> 1


def _base_mult_x(k: int) -> int:
    return ec.derive_private_key(k, ec.SECP256K1()).public_key().public_numbers().x


def _hmac(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha256).digest()


def _rfc6979_nonces(d: int, digest: bytes) -> Iterator[int]:
    x = d.to_bytes(32, "big")
    h = (int.from_bytes(digest, "big") % CURVE_ORDER).to_bytes(32, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32
    k = _hmac(k, v + b"\x00" + x + h)
    v = _hmac(k, v)
    k = _hmac(k, v + b"\x01" + x + h)
    v = _hmac(k, v)
    while True:
        v = _hmac(k, v)
        candidate = int.from_bytes(v, "big")
        if 1 <= candidate < CURVE_ORDER:
            yield candidate
        k = _hmac(k, v + b"\x00")
        v = _hmac(k, v)


class PrivKey(bytes, keys.PrivKey):
    """A 32-byte secp256k1 private scalar."""

    def _scalar(self) -> int:
        d = int.from_bytes(bytes(self), "big") % CURVE_ORDER
        if d == 0:
            raise ValueError("invalid secp256k1 private key")
        return d

    def pub_key(self) -> "PubKey":
        """Return the compressed 33-byte public key."""
        key = ec.derive_private_key(self._scalar(), ec.SECP256K1())
        return PubKey(key.public_key().public_bytes(Encoding.X962, PublicFormat.CompressedPoint))

    def sign(self, msg: bytes) -> bytes:
        """Return a deterministic R || S signature of SHA-256(msg) in lower-S form."""
        d = self._scalar()
        digest = keys.sha256(bytes(msg))
        z = int.from_bytes(digest, "big")
        for k in _rfc6979_nonces(d, digest):
            r = _base_mult_x(k) % CURVE_ORDER
            if r == 0:
                continue
            s = pow(k, -1, CURVE_ORDER) * (z + r * d) % CURVE_ORDER
            if s == 0:
                continue
            if s > _HALF_ORDER:
                s = CURVE_ORDER - s
            return r.to_bytes(32, "big") + s.to_bytes(32, "big")
        raise RuntimeError("nonce generation exhausted")  # pragma: no cover

    def equals(self, other: keys.PrivKey) -> bool:
        """Constant-time comparison with another secp256k1 private key."""
        if isinstance(other, PrivKey):
            return hmac.compare_digest(bytes(self), bytes(other))
        return False

    @property
    def key_type(self) -> str:
        return KEY_TYPE

    def __repr__(self) -> str:
        return "PrivKeySecp256k1{...}"


class PubKey(bytes, keys.PubKey):
    """A compressed secp256k1 public key: parity byte 0x02/0x03 then X."""

    def address(self) -> keys.Address:
        """Return RIPEMD160(SHA256(pubkey)), the Bitcoin-style address."""
        if len(self) != PUB_KEY_SIZE:
            raise ValueError("length of pubkey is incorrect")
        ripemd = RIPEMD160.new(hashlib.sha256(bytes(self)).digest())
        return keys.Address(ripemd.digest())

    def verify_signature(self, msg: bytes, sig: bytes) -> bool:
        """Verify an R || S signature, rejecting any that is not in lower-S form."""
        if len(sig) != SIGNATURE_SIZE:
            return False
        try:
            pub = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), bytes(self))
        except ValueError:
            return False
        r = int.from_bytes(bytes(sig[:32]), "big") % CURVE_ORDER
        s = int.from_bytes(bytes(sig[32:64]), "big") % CURVE_ORDER
        if r == 0 or s == 0 or s > _HALF_ORDER:
            return False
        try:
            pub.verify(encode_dss_signature(r, s), bytes(msg), ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True

    def equals(self, other: keys.PubKey) -> bool:
        """Return whether ``other`` is a secp256k1 key with the same bytes."""
        return isinstance(other, PubKey) and bytes(self) == bytes(other)

    @property
    def key_type(self) -> str:
        return KEY_TYPE

    def __str__(self) -> str:
        return f"PubKeySecp256k1{{{bytes(self).hex().upper()}}}"

    def __repr__(self) -> str:
        return str(self)


def _gen_priv_key(read: Callable[[int], bytes]) -> PrivKey:
    while True:
        chunk = read(PRIV_KEY_SIZE)
        if len(chunk) != PRIV_KEY_SIZE:
            raise EOFError("unexpected end of random source")
        d = int.from_bytes(chunk, "big")
        if 0 < d < CURVE_ORDER:
            return PrivKey(chunk)


def gen_priv_key() -> PrivKey:
    """Generate a new private key from OS randomness."""
    return _gen_priv_key(keys.crand_bytes)


def gen_priv_key_secp256k1(secret: bytes) -> PrivKey:
    """Derive a valid key as (SHA-256(secret) mod (n - 1)) + 1."""
    fe = int.from_bytes(keys.sha256(bytes(secret)), "big")
    fe = fe % (CURVE_ORDER - 1) + 1
    return PrivKey(fe.to_bytes(PRIV_KEY_SIZE, "big"))