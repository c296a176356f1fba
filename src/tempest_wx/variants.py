"""
Variant decoders: one pure function per discriminator.

Each takes a parsed Envelope and returns its record, or raises a
DecodeError subclass. None of them log, retry or touch I/O.
"""

from typing import Any, Callable, Optional

from tempest_wx.errors import MissingField, TypeMismatch
from tempest_wx.models.envelope import Envelope
from tempest_wx.models.events import EvtPrecip, EvtPrecipEvt, EvtStrike, EvtStrikeEvt, RapidWind, RapidWindOb
from tempest_wx.models.observations import ObsAir, ObsAirObs, ObsSky, ObsSkyObs, ObsSt, ObsStObs
from tempest_wx.models.record import Record
from tempest_wx.models.status import DeviceStatus, HubStatus, RadioStats
from tempest_wx.models.unknown import Unknown
from tempest_wx.positional import SlotKind, extract, extract_rows, int_list, json_type, require

HEADER_FIELDS = ("type", "serial_number", "hub_sn")


def _header(body: dict[str, Any], with_hub: bool = True) -> dict[str, str]:
    header = {"serial_number": require(body, "serial_number", SlotKind.TEXT)}
    if with_hub:
        header["hub_sn"] = require(body, "hub_sn", SlotKind.TEXT)
    return header


def _array(body: dict[str, Any], name: str) -> Any:
    raw = body.get(name)
    if raw is None:
        raise MissingField(name)
    return raw


def _summary(body: dict[str, Any]) -> Optional[dict[str, Any]]:
    summary = body.get("summary")
    if summary is not None and not isinstance(summary, dict):
        raise TypeMismatch("summary", "object", json_type(summary))
    return summary


def decode_evt_precip(envelope: Envelope) -> EvtPrecip:
    body = envelope.body
    return EvtPrecip(
        **_header(body),
        evt=EvtPrecipEvt(**extract(_array(body, "evt"), EvtPrecipEvt.SLOTS, "evt")),
    )


def decode_evt_strike(envelope: Envelope) -> EvtStrike:
    body = envelope.body
    return EvtStrike(
        **_header(body),
        evt=EvtStrikeEvt(**extract(_array(body, "evt"), EvtStrikeEvt.SLOTS, "evt")),
    )


def decode_rapid_wind(envelope: Envelope) -> RapidWind:
    body = envelope.body
    return RapidWind(
        **_header(body),
        ob=RapidWindOb(**extract(_array(body, "ob"), RapidWindOb.SLOTS, "ob")),
    )


def decode_obs_air(envelope: Envelope) -> ObsAir:
    body = envelope.body
    rows = extract_rows(_array(body, "obs"), ObsAirObs.SLOTS, "obs")
    return ObsAir(
        **_header(body),
        obs=[ObsAirObs(**row) for row in rows],
        firmware_revision=require(body, "firmware_revision", SlotKind.INT),
        summary=_summary(body),
    )


def decode_obs_sky(envelope: Envelope) -> ObsSky:
    body = envelope.body
    rows = extract_rows(_array(body, "obs"), ObsSkyObs.SLOTS, "obs")
    return ObsSky(
        **_header(body),
        obs=[ObsSkyObs(**row) for row in rows],
        firmware_revision=require(body, "firmware_revision", SlotKind.INT),
        summary=_summary(body),
    )


def decode_obs_st(envelope: Envelope) -> ObsSt:
    body = envelope.body
    rows = extract_rows(_array(body, "obs"), ObsStObs.SLOTS, "obs")
    return ObsSt(
        **_header(body),
        obs=[ObsStObs(**row) for row in rows],
        firmware_revision=require(body, "firmware_revision", SlotKind.INT),
        summary=_summary(body),
    )


def decode_device_status(envelope: Envelope) -> DeviceStatus:
    body = envelope.body
    return DeviceStatus(
        **_header(body),
        timestamp=require(body, "timestamp", SlotKind.EPOCH),
        uptime=require(body, "uptime", SlotKind.INT),
        voltage=require(body, "voltage", SlotKind.FLOAT),
        firmware_revision=require(body, "firmware_revision", SlotKind.INT),
        rssi=require(body, "rssi", SlotKind.INT),
        hub_rssi=require(body, "hub_rssi", SlotKind.INT),
        sensor_status=require(body, "sensor_status", SlotKind.INT),
        debug=require(body, "debug", SlotKind.INT),
    )


def decode_hub_status(envelope: Envelope) -> HubStatus:
    body = envelope.body
    radio = extract(_array(body, "radio_stats"), RadioStats.SLOTS, "radio_stats")
    return HubStatus(
        **_header(body, with_hub=False),
        firmware_revision=require(body, "firmware_revision", SlotKind.TEXT),
        uptime=require(body, "uptime", SlotKind.INT),
        rssi=require(body, "rssi", SlotKind.INT),
        timestamp=require(body, "timestamp", SlotKind.EPOCH),
        reset_flags=require(body, "reset_flags", SlotKind.TEXT),
        seq=require(body, "seq", SlotKind.INT),
        radio_stats=RadioStats(**radio),
        fs=int_list(body, "fs"),
        mqtt_stats=int_list(body, "mqtt_stats"),
    )


def decode_unknown(envelope: Envelope) -> Unknown:
    body = envelope.body
    header = {k: v for k, v in body.items() if k in HEADER_FIELDS[1:] and isinstance(v, str)}
    return Unknown(
        type=envelope.discriminator,
        **header,
        payload={k: v for k, v in body.items() if k != "type" and k not in header},
    )


DECODERS: dict[str, Callable[[Envelope], Record]] = {
    "evt_precip": decode_evt_precip,
    "evt_strike": decode_evt_strike,
    "rapid_wind": decode_rapid_wind,
    "obs_air": decode_obs_air,
    "obs_sky": decode_obs_sky,
    "obs_st": decode_obs_st,
    "device_status": decode_device_status,
    "hub_status": decode_hub_status,
}
