"""Bounded newest-first buffer of price points."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import PricePoint

DEFAULT_CAPACITY = 10


class RollingBuffer:
    """Fixed-capacity buffer of the most recent PricePoints, newest first.

    All mutators are synchronous, so on a single event loop each prepend and
    truncate completes before the next mutation starts.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._points: list[PricePoint] = []
        self._version: int = 0  # Bumped on every mutation

    def prepend(self, points: PricePoint | Sequence[PricePoint]) -> None:
        """Insert new point(s) at the front and drop the oldest overflow.

        A sequence is taken as newest-first, so points[0] becomes buffer[0].
        """
        if isinstance(points, PricePoint):
            incoming = [points]
        else:
            incoming = list(points)
        if not incoming:
            return
        self._points = (incoming + self._points)[: self._capacity]
        self._version += 1

    def replace(self, points: Iterable[PricePoint]) -> None:
        """Swap the contents wholesale, keeping at most `capacity` points."""
        self._points = list(points)[: self._capacity]
        self._version += 1

    def clear(self) -> None:
        self._points = []
        self._version += 1

    def snapshot(self) -> tuple[PricePoint, ...]:
        """Immutable copy of the current contents, newest first."""
        return tuple(self._points)

    def newest(self, n: int = 1) -> list[PricePoint]:
        return self._points[:n]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def version(self) -> int:
        """Current version counter. Useful for SSE change detection."""
        return self._version

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> PricePoint:
        return self._points[index]

    def __iter__(self):
        return iter(self._points)
