"""HTTP client for the upstream BTC price backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .config import DEFAULT_BACKEND_URL, DEFAULT_FETCH_TIMEOUT
from .errors import FetchError, ParseError

logger = logging.getLogger(__name__)


async def get_json(client: httpx.AsyncClient, path: str, timeout: float) -> Any:
    """GET `path` with a hard deadline and return the decoded JSON body.

    The deadline covers the whole exchange (connect, headers and body), so a
    backend that accepts the connection and then stalls is still cut off.
    """
    try:
        response = await asyncio.wait_for(client.get(path), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise FetchError(f"GET {path} timed out after {timeout:.1f}s") from e
    except httpx.HTTPError as e:
        raise FetchError(f"GET {path} failed: {e}") from e

    if not response.is_success:
        raise FetchError(
            f"GET {path} responded with status: {response.status_code}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise ParseError(f"GET {path} returned invalid JSON") from e


def unwrap_data(body: Any) -> Any:
    """Pull the ``data`` field out of an ``{errors, data}`` envelope."""
    if not isinstance(body, dict) or "data" not in body:
        raise ParseError("Response is missing the 'data' field")
    return body["data"]


class UpstreamClient:
    """Reads the latest price and recent list from the price backend.

    Paths are fixed (/btc/latest, /btc/list); only the base URL is
    configurable. Any failure surfaces as FetchError or ParseError, never a
    raw httpx exception.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        self._base_url = str(self._client.base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    async def fetch_latest(self) -> Any:
        logger.debug("Fetching latest from %s", self._base_url)
        return unwrap_data(await get_json(self._client, "/btc/latest", self._timeout))

    async def fetch_list(self) -> Any:
        logger.debug("Fetching list from %s", self._base_url)
        return unwrap_data(await get_json(self._client, "/btc/list", self._timeout))

    async def aclose(self) -> None:
        await self._client.aclose()
