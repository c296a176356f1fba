"""
UDP broadcast listener: the hub sends one JSON envelope per datagram.

Each datagram is handed to the decoder as-is; failures are logged and still
yielded so callers decide whether to skip or stop.
"""

import asyncio
import logging
from typing import Any, AsyncGenerator, Optional, Union

from tempest_wx.decoder import classify_and_decode
from tempest_wx.errors import DecodeError, Malformed, TransportError
from tempest_wx.models.record import Record

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 50222

log = logging.getLogger(__name__)


def decode_datagram(data: bytes) -> Union[Record, DecodeError]:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        return Malformed(f"datagram is not UTF-8: {e}")
    return classify_and_decode(text)


class Reception:
    __slots__ = ("result", "source", "raw")

    def __init__(self, result: Union[Record, DecodeError], source: tuple[str, int], raw: bytes):
        self.result = result
        self.source = source
        self.raw = raw

    @property
    def ok(self) -> bool:
        return not isinstance(self.result, DecodeError)

    def __repr__(self) -> str:
        kind = self.result.type if self.ok else self.result.code  # type: ignore[union-attr]
        return f"Reception({kind!r}, source={self.source[0]!r})"


class _QueueProtocol(asyncio.DatagramProtocol):
    def __init__(self, queue: "asyncio.Queue[Optional[tuple[bytes, Any]]]"):
        self._queue = queue

    def datagram_received(self, data: bytes, addr: Any) -> None:
        self._queue.put_nowait((data, addr))

    def error_received(self, exc: Exception) -> None:
        log.warning("UDP receive error: %s", exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self._queue.put_nowait(None)


class UdpListener:
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
        self._host = host
        self._port = port
        self._transport: Optional[asyncio.DatagramTransport] = None
        self._queue: "Optional[asyncio.Queue[Optional[tuple[bytes, Any]]]]" = None

    @property
    def listening(self) -> bool:
        return self._transport is not None

    @property
    def address(self) -> Optional[tuple[str, int]]:
        """Bound (host, port); the port is real even when 0 was requested."""
        if self._transport is None:
            return None
        return self._transport.get_extra_info("sockname")[:2]

    async def start(self) -> None:
        if self._transport is not None:
            return
        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _QueueProtocol(self._queue),
                local_addr=(self._host, self._port),
            )
        except OSError as e:
            raise TransportError(f"Cannot bind UDP {self._host}:{self._port}: {e}") from e
        self._transport = transport  # type: ignore[assignment]
        log.debug("Listening for hub broadcasts on %s:%s", *self.address)  # type: ignore[misc]

    async def stop(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    async def receive(
        self, count: Optional[int] = None, timeout: Optional[float] = None,
    ) -> AsyncGenerator[Reception, None]:
        """Yield decoded datagrams until ``count`` arrive or ``timeout`` seconds pass idle."""
        await self.start()
        queue = self._queue
        received = 0
        while count is None or received < count:
            try:
                item = await asyncio.wait_for(queue.get(), timeout=timeout)  # type: ignore[union-attr]
            except asyncio.TimeoutError:
                log.debug("No datagram within %ss, stopping", timeout)
                return
            if item is None:
                return
            data, addr = item
            received += 1
            result = decode_datagram(data)
            if isinstance(result, DecodeError):
                log.warning("Undecodable datagram from %s: %s", addr[0], result)
            else:
                log.debug("Decoded %s from %s (%d bytes)", result.type, addr[0], len(data))
            yield Reception(result, addr, data)

    async def __aenter__(self) -> "UdpListener":
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
