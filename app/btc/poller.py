"""Timed-pull update source."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .api_client import DashboardApiClient
from .config import DEFAULT_POLL_INTERVAL
from .errors import BtcDataError
from .interface import UpdateSource

if TYPE_CHECKING:
    from .controller import RefreshController

logger = logging.getLogger(__name__)


class PollingUpdateSource(UpdateSource):
    """Fetches /api/btc/latest every `poll_interval` seconds.

    The first fetch happens one interval after start(), since the controller
    has just loaded the full history.
    """

    mode = "poll"

    def __init__(self, api_client: DashboardApiClient, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._api = api_client
        self._interval = poll_interval
        self._controller: RefreshController | None = None
        self._task: asyncio.Task | None = None

    async def start(self, controller: RefreshController) -> None:
        self._controller = controller
        self._task = asyncio.create_task(self._poll_loop(), name="btc-poller")
        logger.info("Poller started: %.1fs interval", self._interval)

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self._controller = None
        logger.info("Poller stopped")

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self._poll_once()

    async def _poll_once(self) -> None:
        """Fetch one point and hand it to the controller."""
        if self._controller is None:
            return
        try:
            point = await self._api.fetch_latest()
        except BtcDataError as e:
            # Dropped; the next tick tries again
            logger.warning("Latest price fetch failed: %s", e)
            return
        except Exception:
            logger.exception("Unexpected error while polling latest price")
            return

        # stop() may have run while the fetch was in flight
        if self._controller is not None:
            self._controller.apply_update(point)
