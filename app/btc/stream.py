"""Dashboard snapshot and SSE endpoints."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .controller import RefreshController
from .presentation import build_summary_card

logger = logging.getLogger(__name__)


def dashboard_payload(controller: RefreshController) -> dict:
    snapshot = controller.snapshot()
    snapshot["card"] = build_summary_card(snapshot)
    return snapshot


def create_stream_router(controller: RefreshController) -> APIRouter:
    """Create the dashboard router bound to one controller."""
    router = APIRouter(prefix="/api", tags=["dashboard"])

    @router.get("/dashboard")
    async def get_dashboard() -> dict:
        """Current controller state plus the summary card view model."""
        return dashboard_payload(controller)

    @router.get("/stream/dashboard")
    async def stream_dashboard(request: Request) -> StreamingResponse:
        """SSE endpoint pushing the dashboard payload whenever it changes.

        The page connects with EventSource and receives:

            data: {"loading": false, "metrics": {...}, "chart": [...], "card": {...}, ...}
        """
        return StreamingResponse(
            _generate_events(controller, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            },
        )

    return router


async def _generate_events(
    controller: RefreshController,
    request: Request,
    interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Yield SSE events on controller changes until the client disconnects."""
    yield "retry: 1000\n\n"

    last_version = -1
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s", client_ip)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            current_version = controller.version
            if current_version != last_version:
                last_version = current_version
                yield f"data: {json.dumps(dashboard_payload(controller))}\n\n"

            await asyncio.sleep(interval)
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
