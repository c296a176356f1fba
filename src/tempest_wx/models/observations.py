"""
Observation records: AIR, SKY and Tempest (ST) sensor rows.

Each ``obs`` field is an array of rows; the hub normally sends one row per
message, the cloud API may send several. Trailing slots marked optional
are the ones firmware revisions have added over time.
"""

from typing import ClassVar, Literal, Optional

from tempest_wx.models.base import BaseRecord, Detail, FrozenObject
from tempest_wx.positional import PositionalSlot as Slot, SlotKind, SlotSchema


class ObsAirObs(Detail):
    """[1493164835, 835.0, 10.0, 45, 0, 0, 3.46, 1]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "epoch", SlotKind.EPOCH),
        Slot(1, "station_pressure", SlotKind.FLOAT),
        Slot(2, "air_temperature", SlotKind.FLOAT),
        Slot(3, "relative_humidity", SlotKind.INT),
        Slot(4, "lightning_strike_count", SlotKind.INT),
        Slot(5, "lightning_strike_avg_distance", SlotKind.INT),
        Slot(6, "battery", SlotKind.FLOAT),
        Slot(7, "report_interval", SlotKind.INT, optional=True),
    )

    epoch: int
    station_pressure: float              # MB
    air_temperature: float               # C
    relative_humidity: int               # %
    lightning_strike_count: int
    lightning_strike_avg_distance: int   # km
    battery: float                       # volts
    report_interval: Optional[int] = None  # minutes


class ObsSkyObs(Detail):
    """[1493321340, 9000, 10, 0.0, 2.6, 4.6, 7.4, 187, 3.12, 1, 130, null, 0, 3]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "epoch", SlotKind.EPOCH),
        Slot(1, "illuminance", SlotKind.INT),
        Slot(2, "uv", SlotKind.INT),
        Slot(3, "rain_minute", SlotKind.FLOAT),
        Slot(4, "wind_lull_min3", SlotKind.FLOAT),
        Slot(5, "wind_avg", SlotKind.FLOAT),
        Slot(6, "wind_gust_max3", SlotKind.FLOAT),
        Slot(7, "wind_direction", SlotKind.INT),
        Slot(8, "battery", SlotKind.FLOAT),
        Slot(9, "report_interval", SlotKind.INT),
        Slot(10, "solar_radiation", SlotKind.INT),
        Slot(11, "rain_day", SlotKind.FLOAT, nullable=True),
        Slot(12, "precipitation_type", SlotKind.INT, optional=True),
        Slot(13, "wind_sample_interval", SlotKind.INT, optional=True),
    )

    epoch: int
    illuminance: int          # lux
    uv: int                   # index
    rain_minute: float        # mm
    wind_lull_min3: float     # m/s
    wind_avg: float           # m/s
    wind_gust_max3: float     # m/s
    wind_direction: int       # degrees
    battery: float            # volts
    report_interval: int      # minutes
    solar_radiation: int      # W/m^2
    rain_day: Optional[float] = None            # mm, usually null
    precipitation_type: Optional[int] = None    # 0 none, 1 rain, 2 hail
    wind_sample_interval: Optional[int] = None  # seconds


class ObsStObs(Detail):
    """[1588948614, 0.18, 0.22, 0.27, 144, 6, 1017.57, 22.37, 50.26, 328, 0.03, 3, 0.0, 0, 0, 0, 2.410, 1]"""
    SLOTS: ClassVar[SlotSchema] = SlotSchema(
        Slot(0, "epoch", SlotKind.EPOCH),
        Slot(1, "wind_lull_min3", SlotKind.FLOAT),
        Slot(2, "wind_avg", SlotKind.FLOAT),
        Slot(3, "wind_gust_max3", SlotKind.FLOAT),
        Slot(4, "wind_direction", SlotKind.INT),
        Slot(5, "wind_sample_interval", SlotKind.INT),
        Slot(6, "station_pressure", SlotKind.FLOAT),
        Slot(7, "air_temperature", SlotKind.FLOAT),
        Slot(8, "relative_humidity", SlotKind.FLOAT),
        Slot(9, "illuminance", SlotKind.INT),
        Slot(10, "uv", SlotKind.FLOAT),
        Slot(11, "solar_radiation", SlotKind.INT),
        Slot(12, "rain_minute", SlotKind.FLOAT),
        Slot(13, "precipitation_type", SlotKind.INT),
        Slot(14, "lightning_strike_dist", SlotKind.INT),
        Slot(15, "lightning_strike_count", SlotKind.INT),
        Slot(16, "battery", SlotKind.FLOAT),
        Slot(17, "report_interval", SlotKind.INT, optional=True),
    )

    epoch: int
    wind_lull_min3: float
    wind_avg: float
    wind_gust_max3: float
    wind_direction: int
    wind_sample_interval: int
    station_pressure: float     # MB
    air_temperature: float      # C
    relative_humidity: float    # %
    illuminance: int
    uv: float
    solar_radiation: int
    rain_minute: float
    precipitation_type: int     # 0 none, 1 rain, 2 hail, 3 rain + hail
    lightning_strike_dist: int  # km
    lightning_strike_count: int
    battery: float
    report_interval: Optional[int] = None


class ObsAir(BaseRecord):
    """Observation (AIR) [type = obs_air]"""
    type: Literal["obs_air"] = "obs_air"
    serial_number: str
    hub_sn: str
    obs: tuple[ObsAirObs, ...]
    firmware_revision: int
    summary: Optional[FrozenObject] = None

    @property
    def latest(self) -> Optional[ObsAirObs]:
        return self.obs[-1] if self.obs else None


class ObsSky(BaseRecord):
    """Observation (Sky) [type = obs_sky]"""
    type: Literal["obs_sky"] = "obs_sky"
    serial_number: str
    hub_sn: str
    obs: tuple[ObsSkyObs, ...]
    firmware_revision: int
    summary: Optional[FrozenObject] = None

    @property
    def latest(self) -> Optional[ObsSkyObs]:
        return self.obs[-1] if self.obs else None


class ObsSt(BaseRecord):
    """Observation (Tempest) [type = obs_st]"""
    type: Literal["obs_st"] = "obs_st"
    serial_number: str
    hub_sn: str
    obs: tuple[ObsStObs, ...]
    firmware_revision: int
    summary: Optional[FrozenObject] = None

    @property
    def latest(self) -> Optional[ObsStObs]:
        return self.obs[-1] if self.obs else None
