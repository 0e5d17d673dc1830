import hashlib
import io

import pytest

from bftkit import keys, secp256k1

_B58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _base58_check_decode(text):
    num = 0
    for ch in text:
        num = num * 58 + _B58.index(ch)
    raw = num.to_bytes((num.bit_length() + 7) // 8, "big")
    pad = len(text) - len(text.lstrip("1"))
    data = b"\x00" * pad + raw
    body, checksum = data[:-4], data[-4:]
    assert hashlib.sha256(hashlib.sha256(body).digest()).digest()[:4] == checksum
    return body[1:]


def test_pub_key_and_address_vector():
    priv = secp256k1.PrivKey(
        bytes.fromhex("a96e62ed3955e65be32703f12d87b6b5cf26039ecfa948dc5107a495418e5330")
    )
    pub = priv.pub_key()
    assert bytes(pub) == bytes.fromhex(
        "02950e1cdfcb133d6024109fd489f734eeb4502418e538c28481f22bce276f248c"
    )
    assert bytes(pub.address()) == _base58_check_decode("1CKZ9Nx4zgds8tU7nJHotKSDr4a9bYJCa3")


def test_sign_and_validate():
    priv = secp256k1.gen_priv_key()
    pub = priv.pub_key()
    msg = keys.crand_bytes(128)
    sig = bytearray(priv.sign(msg))
    assert len(sig) == 64
    assert pub.verify_signature(msg, bytes(sig))
    sig[3] ^= 0x01
    assert not pub.verify_signature(msg, bytes(sig))


def test_signature_lower_s_and_rejects_upper_s():
    msg = b"We have lingered long enough on the shores of the cosmic ocean."
    for _ in range(20):
        priv = secp256k1.gen_priv_key()
        sig = priv.sign(msg)
        r = sig[:32]
        s = int.from_bytes(sig[32:], "big")
        assert s <= secp256k1.CURVE_ORDER >> 1
        pub = priv.pub_key()
        assert pub.verify_signature(msg, sig)
        malleated = r + (secp256k1.CURVE_ORDER - s).to_bytes(32, "big")
        assert not pub.verify_signature(msg, malleated)


def test_signing_is_deterministic():
    priv = secp256k1.gen_priv_key_secp256k1(b"mySecret")
    assert priv.sign(b"hello") == priv.sign(b"hello")
    assert priv.sign(b"hello") != priv.sign(b"hellO")


@pytest.mark.parametrize(
    "secret",
    [
        b"",
        b"We live in a society exquisitely dependent on science and technology, "
        b"in which hardly anyone knows anything about science and technology.",
        b"\x00",
        b"mySecret",
    ],
)
def test_gen_priv_key_secp256k1_in_range(secret):
    priv = secp256k1.gen_priv_key_secp256k1(secret)
    assert len(priv) == 32
    fe = int.from_bytes(priv, "big")
    assert 0 < fe < secp256k1.CURVE_ORDER


def test_gen_priv_key_rejects_zero_then_runs_out():
    with pytest.raises(EOFError):
        secp256k1._gen_priv_key(io.BytesIO(bytes(32)).read)


def test_gen_priv_key_rejects_curve_order():
    order = secp256k1.CURVE_ORDER.to_bytes(32, "big")
    with pytest.raises(EOFError):
        secp256k1._gen_priv_key(io.BytesIO(order).read)


def test_gen_priv_key_skips_invalid_candidate():
    one = (1).to_bytes(32, "big")
    priv = secp256k1._gen_priv_key(io.BytesIO(bytes(32) + one).read)
    assert int.from_bytes(priv, "big") == 1


def test_invalid_inputs_fail_verification():
    priv = secp256k1.gen_priv_key()
    sig = priv.sign(b"m")
    assert not priv.pub_key().verify_signature(b"m", sig[:63])
    assert not secp256k1.PubKey(b"\x05" * 33).verify_signature(b"m", sig)
    with pytest.raises(ValueError):
        secp256k1.PubKey(b"\x02" * 32).address()


def test_equality_and_type():
    priv = secp256k1.gen_priv_key_secp256k1(b"a")
    assert priv.equals(secp256k1.PrivKey(bytes(priv)))
    assert not priv.equals(secp256k1.gen_priv_key_secp256k1(b"b"))
    pub = priv.pub_key()
    assert pub.equals(secp256k1.PubKey(bytes(pub)))
    assert str(pub) == "PubKeySecp256k1{" + bytes(pub).hex().upper() + "}"
    assert pub.key_type == "secp256k1"
    assert bytes(pub)[0] in (2, 3)