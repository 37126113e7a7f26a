"""FastAPI application wiring for the BTC price dashboard.

Run with:
    btc-dashboard                      # console script, see main()
    uvicorn --factory app.main:create_app
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from .btc import (
    DashboardApiClient,
    DashboardSettings,
    MockPriceGenerator,
    RefreshController,
    UpdateSource,
    UpstreamClient,
    create_page_router,
    create_proxy_router,
    create_stream_router,
    create_update_source,
)

logger = logging.getLogger(__name__)

# Headroom so the proxy answers with its fallback before the in-process caller gives up
PROXY_DEADLINE_MARGIN = 1.0


def create_app(
    settings: DashboardSettings | None = None,
    upstream: UpstreamClient | None = None,
    update_source: UpdateSource | None = None,
) -> FastAPI:
    """Build the app. The refresh controller is mounted for the app's lifetime.

    The controller reads the proxy routes in-process through
    httpx.ASGITransport, so history loads before the server is listening.
    """
    settings = settings or DashboardSettings.from_env()
    upstream = upstream or UpstreamClient(base_url=settings.backend_url, timeout=settings.fetch_timeout)
    generator = MockPriceGenerator(base_price=settings.base_price)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        controller: RefreshController = app.state.controller
        # Not awaited here: the page shows a spinner until history arrives
        startup = asyncio.create_task(controller.start(), name="btc-controller-start")
        try:
            yield
        finally:
            if not startup.done():
                startup.cancel()
                try:
                    await startup
                except asyncio.CancelledError:
                    pass
            elif not startup.cancelled() and startup.exception() is not None:
                logger.error("Refresh controller failed to start: %s", startup.exception())
            await controller.stop()
            await app.state.api_client.aclose()
            await upstream.aclose()

    app = FastAPI(title="BTC Price Dashboard", lifespan=lifespan)

    api_client = DashboardApiClient(
        timeout=upstream.timeout + PROXY_DEADLINE_MARGIN,
        client=httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://dashboard"),
    )
    source = update_source or create_update_source(settings, api_client)
    controller = RefreshController(api_client=api_client, update_source=source)

    app.state.settings = settings
    app.state.api_client = api_client
    app.state.controller = controller

    app.include_router(create_proxy_router(upstream, generator))
    app.include_router(create_stream_router(controller))
    app.include_router(create_page_router())
    return app


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    import uvicorn

    settings = DashboardSettings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
