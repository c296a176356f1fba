"""
Cloud REST API: station listing and latest device observations.
"""

import json
from typing import Any, Optional, Union

from tempest_wx.decoder import classify_and_decode
from tempest_wx.errors import DecodeError
from tempest_wx.models.record import Record
from tempest_wx.transport.http import HttpClient

HUB_DEVICE_TYPE = "HB"
LISTED_FIELDS = ("serial_number", "hub_sn", "firmware_revision")


class CloudAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def stations(self) -> list[dict[str, Any]]:
        """Stations visible to the token, each with its ``devices`` list."""
        data = await self._http.get("/stations")
        return data.get("stations", []) if isinstance(data, dict) else []

    async def device_header(self, device_id: int) -> dict[str, Any]:
        """Broadcast header fields for ``device_id``, read from the station listing.

        The device's serial number and firmware revision, plus the serial
        number of the hub in the same station. Fields the listing lacks are
        left out; an unlisted device gives ``{}``.
        """
        for station in await self.stations():
            devices = station.get("devices") or []
            device = next((d for d in devices if d.get("device_id") == device_id), None)
            if device is None:
                continue
            header: dict[str, Any] = {}
            if device.get("serial_number"):
                header["serial_number"] = device["serial_number"]
            hub = next((d for d in devices if d.get("device_type") == HUB_DEVICE_TYPE), None)
            if hub is not None and hub.get("serial_number"):
                header["hub_sn"] = hub["serial_number"]
            # listed as a string, broadcast as an integer
            firmware = str(device.get("firmware_revision", ""))
            if firmware.isdigit():
                header["firmware_revision"] = int(firmware)
            return header
        return {}

    async def device_observations(
        self, device_id: int, serial_number: Optional[str] = None, hub_sn: Optional[str] = None,
    ) -> Union[Record, DecodeError]:
        """Latest observation for one device, decoded like a hub broadcast.

        REST bodies name the device by ``device_id`` and carry neither serial
        numbers nor the firmware revision. Explicit arguments fill the header
        first; anything still missing comes from the station listing.
        """
        body = await self._http.get(f"/observations/device/{device_id}")
        if isinstance(body, dict):
            given = {"serial_number": serial_number, "hub_sn": hub_sn}
            for key, value in given.items():
                if body.get(key) is None and value:
                    body[key] = value
            if any(body.get(key) is None for key in LISTED_FIELDS):
                for key, value in (await self.device_header(device_id)).items():
                    if body.get(key) is None:
                        body[key] = value
        return classify_and_decode(json.dumps(body))
