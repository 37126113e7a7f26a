"""Error taxonomy for BTC price data."""

from __future__ import annotations


class BtcDataError(Exception):
    """Base class for all price-data failures."""


class FetchError(BtcDataError):
    """Network failure, timeout, or non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(BtcDataError):
    """Payload was not valid JSON or did not have the expected shape."""


class ChannelError(BtcDataError):
    """Push channel failed to connect or was disconnected."""
