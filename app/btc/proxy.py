"""Proxy endpoints in front of the upstream price backend."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Response

from .errors import BtcDataError, ParseError
from .mock import MockPriceGenerator
from .models import PricePoint
from .upstream import UpstreamClient

logger = logging.getLogger(__name__)

MAX_LIST_SIZE = 10


def normalize_latest(data: Any) -> PricePoint:
    """Coerce an upstream 'latest' payload into a single PricePoint.

    Older backends wrap the point in a one-element list; the first element is
    taken in that case.
    """
    if isinstance(data, list):
        if not data:
            raise ParseError("Upstream returned an empty 'latest' list")
        data = data[0]
    return PricePoint.from_dict(data)


def normalize_list(data: Any, limit: int = MAX_LIST_SIZE) -> list[PricePoint]:
    """Parse an upstream list, newest first, at most `limit` points."""
    if not isinstance(data, list):
        raise ParseError(f"Expected a list of points, got {type(data).__name__}")
    points = [PricePoint.from_dict(item) for item in data]
    points.sort(key=lambda p: p.created_at, reverse=True)
    return points[:limit]


def envelope(data: Any) -> dict:
    return {"errors": {}, "data": data}


def create_proxy_router(upstream: UpstreamClient, generator: MockPriceGenerator) -> APIRouter:
    """Create the /api/btc router.

    Both endpoints always answer 200. Upstream failures are logged and
    replaced with synthesized data so callers never see them.
    """
    router = APIRouter(prefix="/api/btc", tags=["btc"])

    @router.get("/latest")
    async def get_latest(response: Response) -> dict:
        """Latest price as ``{"errors": {}, "data": PricePoint}``."""
        response.headers["Cache-Control"] = "no-store"
        try:
            point = normalize_latest(await upstream.fetch_latest())
            logger.debug("Serving latest from upstream")
        except BtcDataError as e:
            logger.error("Error in latest route, returning mock data: %s", e)
            point = generator.latest()
        return envelope(point.to_dict())

    @router.get("/list")
    async def get_list(response: Response) -> dict:
        """Up to ten recent prices, newest first."""
        response.headers["Cache-Control"] = "no-store"
        try:
            points = normalize_list(await upstream.fetch_list())
            logger.debug("Serving %d points from upstream", len(points))
        except BtcDataError as e:
            logger.error("Error in list route, returning mock data: %s", e)
            points = generator.history(MAX_LIST_SIZE)
        return envelope([p.to_dict() for p in points])

    return router
