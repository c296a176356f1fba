"""
Passthrough record for discriminators this package does not model.
"""

from typing import Any, Optional

from pydantic import Field

from tempest_wx.models.base import BaseRecord, FrozenObject, _thaw


class Unknown(BaseRecord):
    """Any envelope whose ``type`` is not one of the eight known kinds.

    Keeps the raw discriminator and every non-header field untouched so a
    stream of hub messages keeps flowing when firmware adds a new kind.
    Header values that are not strings stay in ``payload``.
    """
    serial_number: Optional[str] = None
    hub_sn: Optional[str] = None
    payload: FrozenObject = Field(default_factory=dict, validate_default=True)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type}
        if self.serial_number is not None:
            out["serial_number"] = self.serial_number
        if self.hub_sn is not None:
            out["hub_sn"] = self.hub_sn
        out.update(_thaw(self.payload))
        return out
