"""
REST HTTP client for the WeatherFlow cloud API.
"""

from typing import Any, Optional

import httpx

from tempest_wx.errors import TransportError

DEFAULT_BASE_URL = "https://swd.weatherflow.com/swd/rest"


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "tempest-wx/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        self._token = token

    def _params(self, params: Optional[dict[str, Any]]) -> dict[str, Any]:
        merged = dict(params or {})
        if self._token:
            merged["token"] = self._token
        return merged

    @staticmethod
    def _check(json_data: Any) -> Any:
        """Reject WeatherFlow responses of the form { "status": { "status_code": N != 0, ... } }"""
        status = json_data.get("status") if isinstance(json_data, dict) else None
        if isinstance(status, dict) and status.get("status_code", 0) != 0:
            raise TransportError(
                f"API error {status.get('status_code')}: {status.get('status_message', '')}",
                details=status,
            )
        return json_data

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = await self._client.get(path, params=self._params(params))
        except httpx.HTTPError as e:
            raise TransportError(f"GET {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", details={"status": resp.status_code})
        try:
            body = resp.json()
        except ValueError as e:
            raise TransportError(f"GET {path} returned non-JSON body") from e
        return self._check(body)

    async def close(self) -> None:
        await self._client.aclose()
