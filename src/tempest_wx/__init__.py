"""
tempest-wx: typed decoder for WeatherFlow Tempest hub telemetry.

Turns the JSON envelopes a hub broadcasts over UDP (and the cloud REST API
returns) into immutable, strongly typed records.
"""

from tempest_wx.decoder import classify_and_decode, decode, parse_envelope
from tempest_wx.client import Tempest, AsyncTempest
from tempest_wx.errors import (
    TempestError,
    DecodeError,
    Malformed,
    MissingDiscriminator,
    MissingField,
    TypeMismatch,
    ArityTooSmall,
    TransportError,
)
from tempest_wx.models.events import EvtPrecip, EvtStrike, RapidWind
from tempest_wx.models.observations import ObsAir, ObsSky, ObsSt
from tempest_wx.models.status import DeviceStatus, HubStatus
from tempest_wx.models.unknown import Unknown
from tempest_wx.models.record import Record

__version__ = "0.1.0"
__all__ = [
    "classify_and_decode",
    "decode",
    "parse_envelope",
    "Tempest",
    "AsyncTempest",
    "TempestError",
    "DecodeError",
    "Malformed",
    "MissingDiscriminator",
    "MissingField",
    "TypeMismatch",
    "ArityTooSmall",
    "TransportError",
    "Record",
    "EvtPrecip",
    "EvtStrike",
    "RapidWind",
    "ObsAir",
    "ObsSky",
    "ObsSt",
    "DeviceStatus",
    "HubStatus",
    "Unknown",
]
