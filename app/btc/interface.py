"""Abstract interface for price update sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .controller import RefreshController


class UpdateSource(ABC):
    """Contract for incremental price feeds.

    Implementations deliver new points by calling
    ``controller.apply_update(point)`` on their own schedule. Failures are
    logged and dropped; a source never changes the controller's error state.

    Lifecycle:
        source = create_update_source(settings, api_client)
        await source.start(controller)   # after the history load
        # ... app runs ...
        await source.stop()
    """

    #: Short label shown in the dashboard status line.
    mode: str = ""

    @abstractmethod
    async def start(self, controller: RefreshController) -> None:
        """Begin delivering updates to `controller` from a background task.

        Must be called exactly once.
        """

    @abstractmethod
    async def stop(self) -> None:
        """Stop the background task and release resources.

        Safe to call multiple times. After stop(), the source will not touch
        the controller again.
        """
