# bftkit

Building blocks for clients of BFT consensus nodes.

- **Hashing**: `bftkit.tmhash` provides SHA-256 and a form of it truncated to 20
  bytes: `sum256`, `sum_truncated`, `new`, `new_truncated` and the
  `TruncatedSha256` hasher.
- **Byte helpers**: `bftkit.hexbytes.HexBytes` is a `bytes` subclass. It
  renders as upper-case hex and round-trips through JSON as a quoted hex string
  (`to_json`, `HexBytes.from_json`). `fingerprint` returns the first six bytes,
  padded with zeros.
- **Key interfaces and randomness**: `bftkit.keys` defines the abstract
  `PubKey`, `PrivKey` and `BatchVerifier` classes. It also has `sha256`,
  `address_hash`, `crand_bytes` and `crand_hex`.
- **Signing keys**:
  - `bftkit.ed25519` has `PrivKey`, `PubKey`, `BatchVerifier`, `gen_priv_key`
    and `gen_priv_key_from_secret`.
  - `bftkit.secp256k1` has `PrivKey`, `PubKey`, `gen_priv_key` and
    `gen_priv_key_secp256k1`. Its signatures are deterministic R || S
    signatures in lower-S form, and its addresses are RIPEMD160(SHA256(pubkey)).
- **Merkle roots**: `bftkit.merkle_tree` computes RFC 6962 style roots with
  `hash_from_byte_slices` and `hash_from_byte_slices_iterative`. It also
  exposes `leaf_hash`, `inner_hash`, `empty_hash` and `get_split_point`.
- **AEAD**: `bftkit.xchacha20poly1305.XChaCha20Poly1305` takes a 32-byte key
  and 24-byte nonces. `hchacha20` is the key-derivation function it uses
  underneath.
- **ASCII armor**: `bftkit.armor.encode_armor` and `decode_armor` handle
  OpenPGP-style armored blocks, including the CRC-24 checksum. Both raise
  `ArmorError` when they fail.
- **ABCI results and events**: `bftkit.abci` holds the result dataclasses,
  such as `ExecTxResult`, `Event`, `ResponseQuery` and `ResponseCheckTx`.
  `bftkit.events.parse_events` turns raw events into `StringEvent` values. It
  first tries to base64-decode every attribute, and if any attribute fails to
  decode it keeps all of them as they are. `ExecTxResponse.from_result` and
  `BlockResponse` carry the decoded events.
- **Flow control**: `bftkit.flowrate.Monitor` measures transfer rates and
  limits them, and reports a `Status` snapshot. `bftkit.flowrate_io.Reader`
  and `Writer` wrap file-like objects with a rate limit. A non-blocking
  `Writer` raises `LimitExceeded` when the limit cuts a write short.
- **JSON type registry**: `bftkit.json_registry.register_type` records a
  class under a type name. `field_infos` reads the JSON field details of a
  dataclass from `"json"` metadata tags such as `"name,omitempty"`, or `"-"`
  to hide a field.

## Install

```
pip install bftkit
```

For the test suite:

```
pip install "bftkit[test]"
pytest
```

## Examples

Merkle root:

```python
from bftkit.merkle_tree import hash_from_byte_slices, hash_from_byte_slices_iterative

items = [b"\x01\x02", b"\x03\x04", b"\x05\x06"]
assert hash_from_byte_slices(items) == hash_from_byte_slices_iterative(items)

hash_from_byte_slices([]).hex()
# 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
```

Signing and verifying:

```python
from bftkit import ed25519

priv = ed25519.gen_priv_key()
pub = priv.pub_key()
sig = priv.sign(b"message")
assert pub.verify_signature(b"message", sig)
print(pub.address())   # 20-byte address, shown as upper-case hex
```

Authenticated encryption:

```python
from bftkit.keys import crand_bytes, sha256
from bftkit.xchacha20poly1305 import XChaCha20Poly1305

aead = XChaCha20Poly1305(sha256(b"secret"))
nonce = crand_bytes(24)
ciphertext = aead.seal(nonce, b"sometext", b"header")
assert aead.open(nonce, ciphertext, b"header") == b"sometext"
```

`open` raises `ValueError` when the ciphertext does not authenticate.

ASCII armor:

```python
from bftkit.armor import decode_armor, encode_armor

text = encode_armor("MINT TEST", None, b"somedata")
assert decode_armor(text) == ("MINT TEST", {}, b"somedata")
```

Decoding events:

```python
from bftkit.abci import Event, EventAttribute
from bftkit.events import parse_events

events = parse_events([Event("transfer", [EventAttribute("YW1vdW50", "MTA=")])])
# [StringEvent(type='transfer', attributes=[Attribute(key='amount', value='10')])]
```

## What it does not do

- It builds Merkle roots but no inclusion proofs, and it has no key-path
  encoding.
- It has no password-style symmetric encryption with a random nonce. Use
  `XChaCha20Poly1305` and choose the nonce yourself.
- `bftkit.json_registry` only records type names and field metadata. The
  package has no JSON encoder or decoder that uses them.
- It does not talk to a node. `bftkit.events` and `bftkit.abci` only hold
  results and decode them.