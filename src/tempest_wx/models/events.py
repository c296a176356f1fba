"""
Event records for rain start, lightning strike and rapid wind.
"""

from typing import ClassVar, Literal

from tempest_wx.models.base import BaseRecord, Detail
from tempest_wx.positional import PositionalSlot as Slot, SlotKind, SlotSchema


class EvtPrecipEvt(Detail):
    """evt_precip ``evt``: [1493322445]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "epoch", SlotKind.EPOCH),
    )

    epoch: int  # seconds


class EvtStrikeEvt(Detail):
    """evt_strike ``evt``: [1493322445, 27, 3848]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "epoch", SlotKind.EPOCH),
        Slot(1, "distance", SlotKind.INT),
        Slot(2, "energy", SlotKind.INT),
    )

    epoch: int
    distance: int  # km
    energy: int


class RapidWindOb(Detail):
    """rapid_wind ``ob``: [1635567982, 1.15, 6]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "epoch", SlotKind.EPOCH),
        Slot(1, "wind_speed", SlotKind.FLOAT),
        Slot(2, "wind_direction", SlotKind.INT),
    )

    epoch: int
    wind_speed: float     # m/s
    wind_direction: int   # degrees


class EvtPrecip(BaseRecord):
    """Rain start event [type = evt_precip]"""
    type: Literal["evt_precip"] = "evt_precip"
    serial_number: str
    hub_sn: str
    evt: EvtPrecipEvt


class EvtStrike(BaseRecord):
    """Lightning strike event [type = evt_strike]"""
    type: Literal["evt_strike"] = "evt_strike"
    serial_number: str
    hub_sn: str
    evt: EvtStrikeEvt


class RapidWind(BaseRecord):
    """Rapid wind sample [type = rapid_wind]"""
    type: Literal["rapid_wind"] = "rapid_wind"
    serial_number: str
    hub_sn: str
    ob: RapidWindOb
