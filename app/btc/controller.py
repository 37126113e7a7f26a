"""Refresh controller: owns the rolling buffer and its derived views."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from .api_client import DashboardApiClient
from .buffer import DEFAULT_CAPACITY, RollingBuffer
from .errors import BtcDataError
from .interface import UpdateSource
from .models import ChartPoint, DerivedMetrics, PricePoint, format_timestamp, utc_now

logger = logging.getLogger(__name__)

HISTORY_ERROR_MESSAGE = "Error fetching historical BTC data."


def format_time_label(ts: datetime) -> str:
    """Time-of-day label for the chart axis, in local time and locale format."""
    return ts.astimezone().strftime("%X")


class RefreshController:
    """State machine behind the dashboard.

    One instance per mounted dashboard. ``start()`` loads history once, then
    hands control to the update source, which feeds ``apply_update()``.
    ``stop()`` tears the source down; anything that arrives afterwards is
    ignored.

    Buffer mutations never await, so on the event loop every prepend and
    truncate runs to completion before the next update is processed.
    """

    def __init__(
        self,
        api_client: DashboardApiClient,
        update_source: UpdateSource | None = None,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        self._api = api_client
        self._source = update_source
        self._buffer = RollingBuffer(capacity)
        self._loading = True
        self._error: str | None = None
        self._connected = False
        self._last_update_time: datetime = utc_now()
        self._closed = False
        self._started = False
        self._status_version = 0  # Bumped on loading/error/connection changes

    # --- Lifecycle ---

    async def start(self) -> None:
        """Load history, then start the update source. Call once."""
        if self._started:
            raise RuntimeError("RefreshController.start() called twice")
        self._started = True
        await self.load_history()
        if self._source is not None and not self._closed:
            await self._source.start(self)
            logger.info("Refresh controller running (%s mode)", self.mode)

    async def stop(self) -> None:
        """Tear down. Safe to call multiple times."""
        if self._closed:
            return
        self._closed = True
        if self._source is not None:
            await self._source.stop()
        logger.info("Refresh controller stopped")

    # --- Operations ---

    async def load_history(self) -> list[PricePoint]:
        """Replace the buffer with the recent list from the proxy.

        On failure the buffer is left as is (empty at startup) and the error
        banner is set. Loading ends either way.
        """
        try:
            points = await self._api.fetch_history()
        except BtcDataError as e:
            logger.error("Error fetching historical BTC data: %s", e)
            if not self._closed:
                self._error = HISTORY_ERROR_MESSAGE
                self._loading = False
                self._status_version += 1
            return []

        if self._closed:
            logger.debug("Discarding history that arrived after teardown")
            return []

        self._buffer.replace(points)
        self._error = None
        self._loading = False
        self._last_update_time = utc_now()
        self._status_version += 1
        logger.info("Loaded %d historical points", len(self._buffer))
        return list(self._buffer.snapshot())

    def apply_update(self, points: PricePoint | Sequence[PricePoint]) -> None:
        """Prepend new point(s) and truncate to capacity. No-op after stop()."""
        if self._closed:
            logger.debug("Ignoring update after teardown")
            return
        incoming = [points] if isinstance(points, PricePoint) else list(points)
        if not incoming:
            return
        self._buffer.prepend(incoming)
        self._last_update_time = utc_now()
        logger.debug("Applied update; newest price %.2f", self._buffer[0].price)

    def derive_metrics(self) -> DerivedMetrics:
        """Latest vs previous price. Recomputed on every call."""
        newest = self._buffer.newest(2)
        latest = newest[0].price if len(newest) > 0 else 0.0
        previous = newest[1].price if len(newest) > 1 else 0.0
        return DerivedMetrics(latest_price=latest, previous_price=previous)

    def format_for_chart(self) -> list[ChartPoint]:
        """Buffer sorted oldest first, with a time-of-day label per point."""
        ordered = sorted(self._buffer.snapshot(), key=lambda p: p.created_at)
        return [
            ChartPoint(price=p.price, created_at=p.created_at, formatted_date=format_time_label(p.created_at))
            for p in ordered
        ]

    def set_channel_connected(self, connected: bool) -> None:
        """Called by the push channel on connect/disconnect."""
        if self._closed or connected == self._connected:
            return
        self._connected = connected
        self._status_version += 1

    # --- Read-only views ---

    @property
    def points(self) -> tuple[PricePoint, ...]:
        return self._buffer.snapshot()

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_channel_connected(self) -> bool:
        return self._connected

    @property
    def last_update_time(self) -> datetime:
        return self._last_update_time

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def mode(self) -> str:
        return self._source.mode if self._source is not None else "static"

    @property
    def version(self) -> int:
        """Changes whenever anything the page renders changes."""
        return self._buffer.version + self._status_version

    def snapshot(self) -> dict:
        """Everything the presentation layer needs, JSON-ready."""
        return {
            "loading": self._loading,
            "error": self._error,
            "mode": self.mode,
            "connected": self._connected,
            "lastUpdateTime": format_timestamp(self._last_update_time),
            "metrics": self.derive_metrics().to_dict(),
            "chart": [p.to_dict() for p in self.format_for_chart()],
            "version": self.version,
        }
