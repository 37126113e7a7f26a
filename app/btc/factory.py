"""Factory for creating price update sources."""

from __future__ import annotations

import logging

from .api_client import DashboardApiClient
from .config import DashboardSettings
from .interface import UpdateSource

logger = logging.getLogger(__name__)


def create_update_source(settings: DashboardSettings, api_client: DashboardApiClient) -> UpdateSource:
    """Pick the update source from configuration.

    - BTC_PUSH_URL set and non-empty -> PushChannelUpdateSource
    - Otherwise -> PollingUpdateSource against /api/btc/latest

    Returns an unstarted source. The controller starts it after the history load.
    """
    if settings.push_url:
        from .channel import PushChannelUpdateSource

        logger.info("Update source: push channel at %s", settings.push_url)
        return PushChannelUpdateSource(url=settings.push_url)
    else:
        from .poller import PollingUpdateSource

        logger.info("Update source: polling every %.1fs", settings.poll_interval)
        return PollingUpdateSource(api_client=api_client, poll_interval=settings.poll_interval)
