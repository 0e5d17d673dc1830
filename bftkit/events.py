"""Event decoding and generalized transaction and block result types."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable
from dataclasses import dataclass, field

from .abci import CODE_TYPE_OK, Event, ExecTxResult, ValidatorUpdate


@dataclass(frozen=True)
class Attribute:
    """A decoded key-value pair."""

    key: str
    value: str


@dataclass
class StringEvent:
    """An event whose attributes are plain strings."""

    type: str
    attributes: list[Attribute] = field(default_factory=list)


def _b64_text(text: str) -> str:
    return base64.b64decode(text, validate=True).decode("utf-8", errors="replace")


def base64_decode_events(events: Iterable[Event]) -> list[StringEvent]:
    """Decode base64 attribute keys and values; raise ValueError if any fails."""
    decoded = []
    for event in events:
        attrs = []
        for attr in event.attributes:
            try:
                attrs.append(Attribute(key=_b64_text(attr.key), value=_b64_text(attr.value)))
            except (binascii.Error, ValueError) as exc:
                raise ValueError(f"invalid base64 in event {event.type!r}: {exc}") from exc
        decoded.append(StringEvent(type=event.type, attributes=attrs))
    return decoded


def stringify_event(event: Event) -> StringEvent:
    """Convert an event into a string event, copying attributes as they are."""
    return StringEvent(
        type=event.type,
        attributes=[Attribute(key=a.key, value=a.value) for a in event.attributes],
    )


def stringify_events(events: Iterable[Event]) -> list[StringEvent]:
    """Convert events into string events without decoding."""
    return [stringify_event(e) for e in events]


def parse_events(events: Iterable[Event]) -> list[StringEvent]:
    """Base64-decode the events, falling back to raw strings if any decode fails."""
    events = list(events)
    try:
        return base64_decode_events(events)
    except ValueError:
        return stringify_events(events)


@dataclass
class ExecTxResponse:
    """Result of executing a transaction, with events decoded to strings."""

    code: int = 0
    data: bytes = b""
    log: str = ""
    info: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    events: list[StringEvent] = field(default_factory=list)
    codespace: str = ""

    def is_ok(self) -> bool:
        """Return whether the code is OK."""
        return self.code == CODE_TYPE_OK

    @classmethod
    def from_result(cls, result: ExecTxResult) -> "ExecTxResponse":
        """Build a response from a raw result, parsing its events."""
        return cls(
            code=result.code,
            data=result.data,
            log=result.log,
            info=result.info,
            gas_wanted=result.gas_wanted,
            gas_used=result.gas_used,
            events=parse_events(result.events),
            codespace=result.codespace,
        )


@dataclass
class BlockResponse:
    """Results of a block, with transaction and block events decoded to strings."""

    height: int = 0
    tx_responses: list[ExecTxResponse] = field(default_factory=list)
    events: list[StringEvent] = field(default_factory=list)
    validator_updates: list[ValidatorUpdate] = field(default_factory=list)
    app_hash: bytes = b""