"""
Shared bases for decoded records and their array details.
"""

from types import MappingProxyType
from typing import Annotated, Any, ClassVar, Mapping

from pydantic import AfterValidator, BaseModel, PlainSerializer

from tempest_wx.positional import SlotSchema, pack


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


# Free-form JSON objects held by a record: read-only views inside, plain
# dicts and lists again when dumped.
FrozenObject = Annotated[Mapping[str, Any], AfterValidator(_freeze), PlainSerializer(_thaw)]


class Detail(BaseModel):
    """One positional array, decoded. Subclasses declare SLOTS."""
    SLOTS: ClassVar[SlotSchema]

    model_config = {"frozen": True}

    def to_wire(self) -> list[Any]:
        return pack(self.model_dump(), self.SLOTS)


def _wire_value(value: Any) -> Any:
    if isinstance(value, Detail):
        return value.to_wire()
    if isinstance(value, Mapping):
        return _thaw(value)
    if isinstance(value, (list, tuple)):
        return [_wire_value(v) for v in value]
    return value


class BaseRecord(BaseModel):
    """Base of every decoded envelope."""
    type: str

    model_config = {"frozen": True}

    def to_wire(self) -> dict[str, Any]:
        """Rebuild the envelope as it appears on the wire (arrays repacked)."""
        out: dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is not None:
                out[name] = _wire_value(value)
        return out
