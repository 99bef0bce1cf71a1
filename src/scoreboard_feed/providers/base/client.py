from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .errors import ProviderRateLimited, ProviderRequestError

Json = dict[str, Any]


def _retry_after(resp: httpx.Response) -> float | None:
    value = resp.headers.get("Retry-After")
    try:
        return float(value) if value is not None else None
    except ValueError:
        # HTTP-date form; callers only use the numeric one.
        return None


@dataclass
class AsyncHttpClient:
    """
    Provider-agnostic async HTTP client wrapper.

    - Uses a single underlying httpx.AsyncClient for connection pooling.
    - Provides consistent error handling.
    - Provider-specific clients wrap this and add their own paths / params.
    """

    base_url: str
    timeout_s: float = 15.0
    connect_timeout_s: float = 5.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Json:
        """
        Perform an HTTP request and return parsed JSON (dict).
        Raises ProviderRequestError (including ProviderRateLimited) on transport issues / non-2xx.
        """
        try:
            resp = await self._client.request(
                method=method,
                url=path.lstrip("/"),
                params=params,
                headers=headers,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise ProviderRequestError(str(e)) from e

        if resp.status_code == 429:
            raise ProviderRateLimited(
                "Provider rate limited the request (HTTP 429).",
                retry_after=_retry_after(resp),
            )

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderRequestError(
                f"HTTP {resp.status_code} for {method} {resp.request.url}",
                status_code=resp.status_code,
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderRequestError("Response was not valid JSON.") from e

        if not isinstance(data, dict):
            raise ProviderRequestError(f"Expected JSON object, got {type(data)}")

        return data

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Json:
        return await self.request_json("GET", path, params=params, headers=headers)
