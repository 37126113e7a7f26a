"""Push-channel update source over WebSocket."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

import websockets

from .errors import ChannelError, ParseError
from .interface import UpdateSource
from .models import PricePoint

if TYPE_CHECKING:
    from .controller import RefreshController

logger = logging.getLogger(__name__)

PRICE_UPDATE_EVENT = "priceUpdate"
DEFAULT_RECONNECT_DELAY = 5.0


def decode_price_update(message: str | bytes) -> PricePoint | None:
    """Turn one channel frame into a PricePoint.

    Accepted frames:
        {"event": "priceUpdate", "data": {"currency": "BTC", "price": ..., "timestamp": ...}}
        ["priceUpdate", {...}]
        {"currency": "BTC", "price": ..., "timestamp": ...}

    Returns None for other events. Raises ParseError for malformed frames.
    """
    try:
        frame: Any = json.loads(message)
    except ValueError as e:
        raise ParseError("Channel frame is not valid JSON") from e

    if isinstance(frame, list):
        if len(frame) != 2 or not isinstance(frame[0], str):
            raise ParseError("Channel frame list must be [event, payload]")
        event, payload = frame
    elif isinstance(frame, dict) and "event" in frame:
        event, payload = frame["event"], frame.get("data")
    else:
        event, payload = PRICE_UPDATE_EVENT, frame

    if event != PRICE_UPDATE_EVENT:
        logger.debug("Ignoring channel event %r", event)
        return None
    return PricePoint.from_dict(payload)


class PushChannelUpdateSource(UpdateSource):
    """Receives unsolicited ``priceUpdate`` events from a WebSocket server.

    Connection state is mirrored into the controller so the page can show
    "Realtime" vs "Disconnected". When the connection drops the source waits
    `reconnect_delay` seconds and connects again; there is no backoff.
    """

    mode = "push"

    def __init__(self, url: str, reconnect_delay: float = DEFAULT_RECONNECT_DELAY) -> None:
        self._url = url
        self._reconnect_delay = reconnect_delay
        self._controller: RefreshController | None = None
        self._task: asyncio.Task | None = None
        self._connection: Any = None

    @property
    def url(self) -> str:
        return self._url

    async def start(self, controller: RefreshController) -> None:
        self._controller = controller
        self._task = asyncio.create_task(self._run_loop(), name="btc-push-channel")
        logger.info("Push channel started: %s", self._url)

    async def stop(self) -> None:
        if self._connection is not None:
            try:
                await self._connection.close()
            except Exception as e:
                logger.debug("Ignoring error while closing channel: %s", e)
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self._connection = None
        self._set_connected(False)
        self._controller = None
        logger.info("Push channel stopped")

    # --- Internal ---

    async def _run_loop(self) -> None:
        while True:
            try:
                await self._listen_once()
                logger.info("Push channel disconnected: %s", self._url)
            except ChannelError as e:
                logger.warning("Push channel error: %s", e)
            except Exception:
                logger.exception("Unexpected push channel failure")
            await asyncio.sleep(self._reconnect_delay)

    async def _listen_once(self) -> None:
        """Hold one connection open until the server closes it."""
        try:
            async with websockets.connect(self._url) as connection:
                self._connection = connection
                self._set_connected(True)
                logger.info("Push channel connected: %s", self._url)
                async for message in connection:
                    self._handle_message(message)
        except websockets.exceptions.ConnectionClosed as e:
            raise ChannelError(f"Connection to {self._url} closed: {e}") from e
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            raise ChannelError(f"Could not connect to {self._url}: {e}") from e
        finally:
            self._connection = None
            self._set_connected(False)

    def _handle_message(self, message: str | bytes) -> None:
        try:
            point = decode_price_update(message)
        except ParseError as e:
            logger.warning("Dropping malformed channel frame: %s", e)
            return
        if point is not None and self._controller is not None:
            logger.debug("Received priceUpdate: %.2f", point.price)
            self._controller.apply_update(point)

    def _set_connected(self, connected: bool) -> None:
        if self._controller is not None:
            self._controller.set_channel_connected(connected)
