"""
Status records: per-device and hub health reports.

Both are keyed scalars rather than positional arrays, apart from the hub's
``radio_stats``. ``sensor_status`` stays an opaque bitmask.
"""

from typing import ClassVar, Literal, Optional

from tempest_wx.models.base import BaseRecord, Detail
from tempest_wx.positional import PositionalSlot as Slot, SlotKind, SlotSchema


class RadioStats(Detail):
    """hub_status ``radio_stats``: [25, 1, 0, 3, 17773]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "version", SlotKind.INT),
        Slot(1, "reboots", SlotKind.INT),
        Slot(2, "i2c_errors", SlotKind.INT),
        Slot(3, "radio_status", SlotKind.INT),  # 0 off, 1 on, 3 active, 7 BLE connected
        Slot(4, "network_id", SlotKind.INT),
    )

    version: int
    reboots: int
    i2c_errors: int
    radio_status: int
    network_id: int


class DeviceStatus(BaseRecord):
    """Status (device) [type = device_status]"""
    type: Literal["device_status"] = "device_status"
    serial_number: str
    hub_sn: str
    timestamp: int
    uptime: int            # seconds
    voltage: float
    firmware_revision: int
    rssi: int
    hub_rssi: int
    sensor_status: int
    debug: int


class HubStatus(BaseRecord):
    """Status (hub) [type = hub_status]

    The hub is its own serial_number, so there is no hub_sn.
    """
    type: Literal["hub_status"] = "hub_status"
    serial_number: str
    firmware_revision: str
    uptime: int
    rssi: int
    timestamp: int
    reset_flags: str       # "BOR,PIN,POR"
    seq: int
    radio_stats: RadioStats
    fs: Optional[tuple[int, ...]] = None          # internal use
    mqtt_stats: Optional[tuple[int, ...]] = None  # internal use

    @property
    def reset_flag_set(self) -> frozenset[str]:
        return frozenset(f for f in self.reset_flags.split(",") if f)
