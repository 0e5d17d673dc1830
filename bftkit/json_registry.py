"""Type registry and field metadata for the type-wrapped JSON encoding.

Registered classes are written as ``{"type":"<name>","value":<value>}``.
Dataclass fields may carry a ``"json"`` metadata tag in the form
``"name,omitempty"``; a tag of ``"-"`` hides the field, as do names that
begin with an underscore.
"""

from __future__ import annotations

import dataclasses
import functools
import threading
from dataclasses import dataclass


class TypeRegistry:
    """Maps registered classes to names and back. Safe for concurrent use."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_name: dict[str, type] = {}
        self._by_type: dict[type, str] = {}

    def register(self, name: str, cls: type) -> None:
        """Register ``cls`` under ``name``; neither may be registered already."""
        if cls is None:
            raise ValueError("cannot register nil type")
        if not isinstance(cls, type):
            raise TypeError(f"can only register classes, got {cls!r}")
        if not name:
            raise ValueError("name cannot be empty")
        with self._lock:
            if name in self._by_name:
                raise ValueError(f"a type with name {name!r} is already registered")
            if cls in self._by_type:
                raise ValueError(f"the type {cls.__qualname__} is already registered")
            self._by_name[name] = cls
            self._by_type[cls] = name

    def lookup(self, name: str) -> type | None:
        """Return the class registered under ``name``, or None."""
        with self._lock:
            return self._by_name.get(name)

    def name_of(self, cls: type) -> str | None:
        """Return the name ``cls`` is registered under, or None."""
        with self._lock:
            return self._by_type.get(cls)


registry = TypeRegistry()


def register_type(cls: type, name: str) -> type:
    """Register ``cls`` under ``name`` in the global registry and return it."""
    registry.register(name, cls)
    return cls


@dataclass(frozen=True)
class FieldInfo:
    """JSON details of one dataclass field."""

    name: str
    json_name: str
    omit_empty: bool = False
    hidden: bool = False


@functools.lru_cache(maxsize=None)
def field_infos(cls: type) -> tuple[FieldInfo, ...]:
    """Return the JSON field details of dataclass ``cls`` in declaration order."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"can't make struct info for non-dataclass value {cls!r}")
    infos = []
    for f in dataclasses.fields(cls):
        json_name = f.name
        omit_empty = False
        hidden = f.name.startswith("_")
        tag = f.metadata.get("json", "")
        if tag == "-":
            hidden = True
        elif tag:
            first, *opts = tag.split(",")
            if first:
                json_name = first
            omit_empty = "omitempty" in opts
        infos.append(FieldInfo(f.name, json_name, omit_empty, hidden))
    return tuple(infos)