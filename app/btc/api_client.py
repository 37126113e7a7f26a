"""Client the refresh controller uses to read the dashboard's own proxy."""

from __future__ import annotations

import logging

import httpx

from .config import DEFAULT_FETCH_TIMEOUT
from .errors import ParseError
from .models import PricePoint
from .proxy import normalize_latest
from .upstream import get_json, unwrap_data

logger = logging.getLogger(__name__)

DEFAULT_DASHBOARD_URL = "http://127.0.0.1:8000"


class DashboardApiClient:
    """Fetches /api/btc/list and /api/btc/latest as PricePoints.

    Pass `client` to reuse an existing httpx.AsyncClient, e.g. one wired to
    the ASGI app with httpx.ASGITransport.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_DASHBOARD_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def fetch_history(self) -> list[PricePoint]:
        """Recent points in the order the proxy returns them (newest first)."""
        data = unwrap_data(await get_json(self._client, "/api/btc/list", self._timeout))
        if not isinstance(data, list):
            raise ParseError(f"Expected a list of points, got {type(data).__name__}")
        return [PricePoint.from_dict(item) for item in data]

    async def fetch_latest(self) -> PricePoint:
        data = unwrap_data(await get_json(self._client, "/api/btc/latest", self._timeout))
        return normalize_latest(data)

    async def aclose(self) -> None:
        await self._client.aclose()
