"""OpenPGP-style ASCII armor encoding and decoding."""

from __future__ import annotations

import base64
import binascii

_LINE_LENGTH = 64
_CRC24_INIT = 0xB704CE
_CRC24_POLY = 0x1864CFB
_BEGIN = "-----BEGIN "
_END = "-----END "
_TAIL = "-----"


class ArmorError(ValueError):
    """Raised when an armored block cannot be encoded or decoded."""


def _crc24(data: bytes) -> int:
    crc = _CRC24_INIT
    for byte in data:
        crc ^= byte << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= _CRC24_POLY
    return crc & 0xFFFFFF


def encode_armor(block_type: str, headers: dict[str, str] | None, data: bytes) -> str:
    """Wrap ``data`` in an armored block of the given type with optional headers."""
    if "\n" in block_type:
        raise ArmorError("could not encode ascii armor: invalid block type")
    parts = [f"{_BEGIN}{block_type}{_TAIL}\n"]
    for key, value in sorted((headers or {}).items()):
        if ":" in key or "\n" in key or "\n" in value:
            raise ArmorError(f"could not encode ascii armor: invalid header {key!r}")
        parts.append(f"{key}: {value}\n")
    parts.append("\n")
    encoded = base64.b64encode(data).decode("ascii")
    lines = [encoded[i : i + _LINE_LENGTH] for i in range(0, len(encoded), _LINE_LENGTH)]
    parts.append("\n".join(lines))
    checksum = base64.b64encode(_crc24(data).to_bytes(3, "big")).decode("ascii")
    parts.append(f"\n={checksum}\n{_END}{block_type}{_TAIL}")
    return "".join(parts)


def decode_armor(armor_str: str) -> tuple[str, dict[str, str], bytes]:
    """Return ``(block_type, headers, data)`` decoded from an armored block."""
    lines = iter(line.rstrip("\r \t") for line in armor_str.split("\n"))

    block_type = None
    for line in lines:
        if line.startswith(_BEGIN) and line.endswith(_TAIL) and len(line) > len(_BEGIN) + len(_TAIL) - 1:
            block_type = line[len(_BEGIN) : -len(_TAIL)]
            break
    if block_type is None:
        raise ArmorError("armor start not found")

    headers: dict[str, str] = {}
    for line in lines:
        if line == "":
            break
        key, sep, value = line.partition(":")
        if not sep:
            raise ArmorError(f"invalid armor header line: {line!r}")
        headers[key.strip()] = value.strip()
    else:
        raise ArmorError("unexpected end of armor in headers")

    body: list[str] = []
    expected_crc = None
    ended = False
    for line in lines:
        if line.startswith(_END):
            if line != f"{_END}{block_type}{_TAIL}":
                raise ArmorError(f"mismatched armor end line: {line!r}")
            ended = True
            break
        if line.startswith("=") and len(line) == 5:
            try:
                expected_crc = int.from_bytes(base64.b64decode(line[1:], validate=True), "big")
            except (binascii.Error, ValueError) as exc:
                raise ArmorError("invalid armor checksum") from exc
            continue
        if expected_crc is not None and line:
            raise ArmorError("armor data after checksum")
        body.append(line)
    if not ended:
        raise ArmorError("armor end not found")

    try:
        data = base64.b64decode("".join(body), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ArmorError("invalid armor body") from exc
    if expected_crc is not None and _crc24(data) != expected_crc:
        raise ArmorError("armor checksum mismatch")
    return block_type, headers, data