"""Byte strings that render and serialise as upper-case hexadecimal."""

from __future__ import annotations

import binascii


class HexBytes(bytes):
    """Bytes shown as upper-case hex and encoded in JSON as a hex string."""

    def __str__(self) -> str:
        return self.hex().upper()

    def __repr__(self) -> str:
        return f"HexBytes({self.hex().upper()})"

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def to_json(self) -> str:
        """Return the JSON encoding: a quoted upper-case hex string."""
        return '"' + self.hex().upper() + '"'

    @classmethod
    def from_json(cls, data: str | bytes) -> "HexBytes":
        """Decode a quoted hex string produced by :meth:`to_json`."""
        if isinstance(data, (bytes, bytearray)):
            text = bytes(data).decode("utf-8", errors="replace")
        else:
            text = data
        if len(text) < 2 or text[0] != '"' or text[-1] != '"':
            raise ValueError(f"invalid hex string: {text}")
        try:
            return cls(binascii.unhexlify(text[1:-1]))
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"invalid hex string: {text}") from exc


def fingerprint(data: bytes) -> bytes:
    """Return the first 6 bytes of ``data``, zero-padded when shorter."""
    return bytes(data[:6]).ljust(6, b"\x00")