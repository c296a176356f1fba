"""
AsyncTempest / Tempest: main clients combining the hub listener and the cloud API.
"""

import asyncio
from typing import Any, AsyncGenerator, Optional, Union

from tempest_wx.cloud import CloudAPI
from tempest_wx.errors import DecodeError, TransportError
from tempest_wx.models.record import Record
from tempest_wx.transport.http import DEFAULT_BASE_URL, HttpClient
from tempest_wx.transport.udp import DEFAULT_HOST, DEFAULT_PORT, Reception, UdpListener


class AsyncTempest:
    """Async client (primary)."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = 30.0,
    ):
        self._host = host
        self._port = port
        self.http = HttpClient(base_url=base_url, token=token, timeout=timeout)
        self.cloud = CloudAPI(self.http)
        self._listener: Optional[UdpListener] = None

    @property
    def listening(self) -> bool:
        return self._listener is not None and self._listener.listening

    async def listen(
        self, count: Optional[int] = None, timeout: Optional[float] = None,
    ) -> AsyncGenerator[Reception, None]:
        """Yield hub broadcasts as they arrive (see UdpListener.receive)."""
        if self._listener is None:
            self._listener = UdpListener(self._host, self._port)
        async for reception in self._listener.receive(count=count, timeout=timeout):
            yield reception

    async def device_observations(
        self, device_id: int, serial_number: Optional[str] = None, hub_sn: Optional[str] = None,
    ) -> Union[Record, DecodeError]:
        if not self.http.has_token:
            raise TransportError("Cloud access token required. Run `tempest auth login` first.")
        return await self.cloud.device_observations(device_id, serial_number, hub_sn)

    async def close(self) -> None:
        if self._listener is not None:
            await self._listener.stop()
            self._listener = None
        await self.http.close()


class Tempest:
    """Sync wrapper around AsyncTempest. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncTempest(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def cloud(self) -> CloudAPI:
        return self._async.cloud

    def listen_sync(self, count: int, timeout: Optional[float] = None) -> list[Reception]:
        """Collect ``count`` broadcasts (fewer if ``timeout`` expires first)."""
        async def _collect() -> list[Reception]:
            return [r async for r in self._async.listen(count=count, timeout=timeout)]
        return self._run(_collect())

    def stations(self) -> list[dict[str, Any]]:
        return self._run(self._async.cloud.stations())

    def device_observations(
        self, device_id: int, serial_number: Optional[str] = None, hub_sn: Optional[str] = None,
    ) -> Union[Record, DecodeError]:
        return self._run(self._async.device_observations(device_id, serial_number, hub_sn))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
