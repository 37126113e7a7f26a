"""Data models for BTC price data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import ParseError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string or Unix milliseconds into an aware UTC datetime."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Numeric timestamps on the wire are JavaScript milliseconds
        ts = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError as e:
            raise ParseError(f"Invalid timestamp: {value!r}") from e
    else:
        raise ParseError(f"Invalid timestamp: {value!r}")

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 with millisecond precision and a 'Z' suffix."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class PricePoint:
    """Immutable BTC/USD price observation."""

    price: float
    created_at: datetime = field(default_factory=utc_now)
    id: str | None = None
    version: int | None = None

    @classmethod
    def create(
        cls,
        price: float,
        created_at: datetime | None = None,
        id: str | None = None,
        version: int | None = None,
    ) -> PricePoint:
        """Build a point with the price rounded to cents."""
        return cls(
            price=round(float(price), 2),
            created_at=created_at or utc_now(),
            id=id,
            version=version,
        )

    @classmethod
    def from_dict(cls, payload: Any) -> PricePoint:
        """Parse the backend wire form or a push-channel payload.

        Backend:      {"_id": ..., "price": 86300.5, "createdAt": "...", "__v": 0}
        Push channel: {"currency": "BTC", "price": 86300.5, "timestamp": "..."}
        """
        if not isinstance(payload, dict):
            raise ParseError(f"Expected an object, got {type(payload).__name__}")

        raw_price = payload.get("price")
        if isinstance(raw_price, bool):
            raise ParseError(f"Invalid price: {raw_price!r}")
        try:
            price = float(raw_price)  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise ParseError(f"Invalid price: {raw_price!r}") from e

        raw_ts = payload.get("createdAt", payload.get("timestamp"))
        version = payload.get("__v")
        point_id = payload.get("_id", payload.get("id"))
        return cls.create(
            price=price,
            created_at=parse_timestamp(raw_ts),
            id=str(point_id) if point_id is not None else None,
            version=version if isinstance(version, int) else None,
        )

    def to_dict(self) -> dict:
        """Serialize to the backend wire form."""
        result: dict[str, Any] = {}
        if self.id is not None:
            result["_id"] = self.id
        result["price"] = self.price
        result["createdAt"] = format_timestamp(self.created_at)
        if self.version is not None:
            result["__v"] = self.version
        return result


@dataclass(frozen=True, slots=True)
class DerivedMetrics:
    """Display values computed from the newest two points of the buffer."""

    latest_price: float = 0.0
    previous_price: float = 0.0

    @property
    def price_change(self) -> float:
        return self.latest_price - self.previous_price

    @property
    def price_change_percentage(self) -> float:
        if self.previous_price == 0:
            return 0.0
        return self.price_change / self.previous_price * 100

    @property
    def is_price_up(self) -> bool:
        return self.price_change >= 0

    def to_dict(self) -> dict:
        return {
            "latestPrice": self.latest_price,
            "previousPrice": self.previous_price,
            "priceChange": round(self.price_change, 2),
            "priceChangePercentage": round(self.price_change_percentage, 4),
            "isPriceUp": self.is_price_up,
        }


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """One entry of the chart series, oldest-first."""

    price: float
    created_at: datetime
    formatted_date: str

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "createdAt": format_timestamp(self.created_at),
            "formattedDate": self.formatted_date,
        }
