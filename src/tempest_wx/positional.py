"""
Positional field extraction.

Hub payloads pack readings into JSON arrays whose element meaning depends on
position. A SlotSchema names each position and fixes how its raw value is
coerced; extract() turns an array into a dict of named fields.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

from tempest_wx.errors import ArityTooSmall, MissingField, TypeMismatch


class SlotKind(str, enum.Enum):
    EPOCH = "epoch"  # integer seconds
    INT = "int"      # small integer or bitmask
    FLOAT = "float"
    TEXT = "text"


def json_type(value: Any) -> str:
    """JSON type name of a decoded value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _as_int(name: str, value: Any, expected: str) -> int:
    if isinstance(value, bool):
        raise TypeMismatch(name, expected, "boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise TypeMismatch(name, expected, json_type(value))


def _as_float(name: str, value: Any, expected: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatch(name, expected, json_type(value))
    return float(value)


def _as_text(name: str, value: Any, expected: str) -> str:
    if not isinstance(value, str):
        raise TypeMismatch(name, expected, json_type(value))
    return value


COERCIONS: dict[SlotKind, tuple[str, Callable[[str, Any, str], Any]]] = {
    SlotKind.EPOCH: ("integer", _as_int),
    SlotKind.INT: ("integer", _as_int),
    SlotKind.FLOAT: ("number", _as_float),
    SlotKind.TEXT: ("string", _as_text),
}


def coerce(name: str, value: Any, kind: SlotKind) -> Any:
    expected, convert = COERCIONS[kind]
    return convert(name, value, expected)


@dataclass(frozen=True)
class PositionalSlot:
    index: int
    name: str
    kind: SlotKind
    optional: bool = False  # may be missing from the end of the array
    nullable: bool = False  # may be null in place


class SlotSchema:
    """Ordered slot list for one array payload.

    Indexes must run 0..n-1 in order and optional slots may only form a
    trailing run; both are checked here so a bad schema fails at import.
    """

    def __init__(self, *slots: PositionalSlot):
        seen_optional = None
        for position, slot in enumerate(slots):
            if slot.index != position:
                raise ValueError(f"slot '{slot.name}' has index {slot.index}, expected {position}")
            if slot.optional:
                seen_optional = slot.name
            elif seen_optional:
                raise ValueError(f"required slot '{slot.name}' follows optional slot '{seen_optional}'")
        self.slots: tuple[PositionalSlot, ...] = tuple(slots)
        self.minimum = sum(1 for s in slots if not s.optional)

    def __iter__(self) -> Iterator[PositionalSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.slots)

    def __repr__(self) -> str:
        return f"SlotSchema({', '.join(self.names)})"


def extract(raw: Any, schema: SlotSchema, path: Optional[str] = None) -> dict[str, Any]:
    """Read every slot of ``schema`` out of ``raw`` by index.

    Raises TypeMismatch when ``raw`` is not an array or a value has the wrong
    shape, ArityTooSmall when fewer than ``schema.minimum`` elements arrive,
    and MissingField for a null in a slot that allows neither absence nor
    null. Elements past the last slot are ignored.
    """
    if not isinstance(raw, (list, tuple)):
        raise TypeMismatch(path or "array", "array", json_type(raw), path)
    if len(raw) < schema.minimum:
        raise ArityTooSmall(schema.minimum, len(raw), path)

    fields: dict[str, Any] = {}
    for slot in schema:
        if slot.index >= len(raw):
            if not slot.optional:
                raise MissingField(slot.name, path)
            fields[slot.name] = None
            continue
        value = raw[slot.index]
        if value is None:
            if not (slot.optional or slot.nullable):
                raise MissingField(slot.name, path)
            fields[slot.name] = None
            continue
        try:
            fields[slot.name] = coerce(slot.name, value, slot.kind)
        except TypeMismatch as e:
            raise TypeMismatch(e.name, e.expected, e.actual, path) from None
    return fields


def pack(fields: Mapping[str, Any], schema: SlotSchema) -> list[Any]:
    """Inverse of extract(): values in slot order, unset optional tail dropped."""
    values: list[Any] = [fields.get(slot.name) for slot in schema]
    end = len(values)
    while end > schema.minimum and values[end - 1] is None:
        end -= 1
    return values[:end]


def extract_rows(raw: Any, schema: SlotSchema, name: str) -> list[dict[str, Any]]:
    """Extract an array of rows, each row against ``schema``."""
    if not isinstance(raw, (list, tuple)):
        raise TypeMismatch(name, "array", json_type(raw))
    return [extract(row, schema, f"{name}[{i}]") for i, row in enumerate(raw)]


def require(body: Mapping[str, Any], name: str, kind: SlotKind) -> Any:
    """Named scalar lookup: missing or null is MissingField."""
    value = body.get(name)
    if value is None:
        raise MissingField(name)
    return coerce(name, value, kind)


def int_list(body: Mapping[str, Any], name: str) -> Optional[list[int]]:
    """Optional homogeneous integer array, e.g. hub ``fs`` counters."""
    raw = body.get(name)
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise TypeMismatch(name, "array", json_type(raw))
    return [coerce(name, value, SlotKind.INT) for value in raw]

