"""Application blockchain interface result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CODE_TYPE_OK = 0


@dataclass
class EventAttribute:
    """A single key-value pair attached to an event."""

    key: str = ""
    value: str = ""
    index: bool = False


@dataclass
class Event:
    """Typed event with attributes, emitted while executing blocks and transactions."""

    type: str = ""
    attributes: list[EventAttribute] = field(default_factory=list)


@dataclass
class ValidatorUpdate:
    """A change in a validator's voting power."""

    pub_key: Any = None
    power: int = 0


@dataclass
class ExecTxResult:
    """Outcome of executing one transaction."""

    code: int = 0
    data: bytes = b""
    log: str = ""
    info: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    events: list[Event] = field(default_factory=list)
    codespace: str = ""

    def is_ok(self) -> bool:
        """Return whether the code is OK."""
        return self.code == CODE_TYPE_OK

    def is_err(self) -> bool:
        """Return whether the code is anything other than OK."""
        return self.code != CODE_TYPE_OK


@dataclass
class ResponseInfo:
    """Information about the application."""

    data: str = ""
    version: str = ""
    app_version: int = 0
    last_block_height: int = 0
    last_block_app_hash: bytes = b""


@dataclass
class ProofOp:
    """One step of a Merkle proof."""

    type: str = ""
    key: bytes = b""
    data: bytes = b""


@dataclass
class ProofOps:
    """A Merkle proof given as a list of operations."""

    ops: list[ProofOp] = field(default_factory=list)


@dataclass
class ResponseQuery:
    """Result of an application query."""

    code: int = 0
    log: str = ""
    info: str = ""
    index: int = 0
    key: bytes = b""
    value: bytes = b""
    proof_ops: ProofOps | None = None
    height: int = 0
    codespace: str = ""

    def is_ok(self) -> bool:
        """Return whether the code is OK."""
        return self.code == CODE_TYPE_OK


@dataclass
class ResponseCheckTx:
    """Result of checking a transaction before it enters the mempool."""

    code: int = 0
    data: bytes = b""
    log: str = ""
    info: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    events: list[Event] = field(default_factory=list)
    codespace: str = ""