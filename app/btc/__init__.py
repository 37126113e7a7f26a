"""BTC price dashboard subsystem.

Public API:
    PricePoint              - Immutable price observation
    DerivedMetrics          - Latest/previous price and change
    RollingBuffer           - Bounded newest-first buffer of points
    RefreshController       - Owns the buffer, merges updates, derives views
    UpdateSource            - Abstract interface for incremental feeds
    create_update_source    - Factory that selects push channel or polling
    UpstreamClient          - HTTP client for the upstream price backend
    MockPriceGenerator      - Synthetic prices for upstream failures
    create_proxy_router     - FastAPI router for /api/btc/latest and /api/btc/list
    create_stream_router    - FastAPI router for the dashboard snapshot and SSE
    create_page_router      - FastAPI router for the HTML page shell
"""

from .api_client import DashboardApiClient
from .buffer import RollingBuffer
from .config import DashboardSettings
from .controller import RefreshController
from .errors import BtcDataError, ChannelError, FetchError, ParseError
from .factory import create_update_source
from .interface import UpdateSource
from .mock import MockPriceGenerator
from .models import ChartPoint, DerivedMetrics, PricePoint
from .page import create_page_router
from .proxy import create_proxy_router
from .stream import create_stream_router
from .upstream import UpstreamClient

__all__ = [
    "BtcDataError",
    "ChannelError",
    "ChartPoint",
    "DashboardApiClient",
    "DashboardSettings",
    "DerivedMetrics",
    "FetchError",
    "MockPriceGenerator",
    "ParseError",
    "PricePoint",
    "RefreshController",
    "RollingBuffer",
    "UpdateSource",
    "UpstreamClient",
    "create_page_router",
    "create_proxy_router",
    "create_stream_router",
    "create_update_source",
]
