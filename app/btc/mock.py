"""Synthetic BTC prices served when the upstream backend is unavailable."""

from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np

from .config import DEFAULT_BASE_PRICE
from .models import PricePoint, utc_now

DEFAULT_JITTER = 100.0  # Full width of the band, i.e. base +/- 50
DEFAULT_SPACING_SECONDS = 5.0
DEFAULT_HISTORY_SIZE = 10


class MockPriceGenerator:
    """Uniform jitter around a fixed base price.

    Every point is drawn independently from [base - jitter/2, base + jitter/2)
    and rounded to cents. Ids follow the backend's mock convention
    (``mock_<epoch ms>``) with version 0.
    """

    def __init__(
        self,
        base_price: float = DEFAULT_BASE_PRICE,
        jitter: float = DEFAULT_JITTER,
        spacing_seconds: float = DEFAULT_SPACING_SECONDS,
        seed: int | None = None,
    ) -> None:
        self._base = base_price
        self._half_width = jitter / 2
        self._spacing = timedelta(seconds=spacing_seconds)
        self._rng = np.random.default_rng(seed)

    @property
    def base_price(self) -> float:
        return self._base

    def latest(self, now: datetime | None = None) -> PricePoint:
        """One synthesized point stamped `now`."""
        return self.history(count=1, now=now)[0]

    def history(self, count: int = DEFAULT_HISTORY_SIZE, now: datetime | None = None) -> list[PricePoint]:
        """`count` points spaced `spacing_seconds` apart back from `now`, newest first."""
        if count <= 0:
            return []
        now = now or utc_now()
        offsets = self._rng.uniform(-self._half_width, self._half_width, size=count)

        points = []
        for i, offset in enumerate(offsets):
            created_at = now - i * self._spacing
            points.append(
                PricePoint.create(
                    price=self._base + float(offset),
                    created_at=created_at,
                    id=f"mock_{int(created_at.timestamp() * 1000)}",
                    version=0,
                )
            )
        points.sort(key=lambda p: p.created_at, reverse=True)
        return points
