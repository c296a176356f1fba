"""
Record: the closed union of decoded envelope variants.
"""

from typing import Union

from tempest_wx.models.events import EvtPrecip, EvtStrike, RapidWind
from tempest_wx.models.observations import ObsAir, ObsSky, ObsSt
from tempest_wx.models.status import DeviceStatus, HubStatus
from tempest_wx.models.unknown import Unknown

Record = Union[
    EvtPrecip,
    EvtStrike,
    RapidWind,
    ObsAir,
    ObsSky,
    ObsSt,
    DeviceStatus,
    HubStatus,
    Unknown,
]