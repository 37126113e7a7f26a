"""View-model helpers for the summary card."""

from __future__ import annotations

from datetime import datetime

from .models import DerivedMetrics, parse_timestamp, utc_now

STATUS_LABELS = {
    ("push", True): "Realtime",
    ("push", False): "Disconnected",
}


def format_usd(value: float) -> str:
    """$86,300.12 style; whole amounts keep no decimals, like toLocaleString."""
    if float(value).is_integer():
        return f"${value:,.0f}"
    return f"${value:,.2f}".rstrip("0").rstrip(".")


def format_change(metrics: DerivedMetrics) -> str:
    """Absolute change and percentage, e.g. '10.00 (11.11%)'."""
    return f"{abs(metrics.price_change):,.2f} ({abs(metrics.price_change_percentage):.2f}%)"


def time_ago(then: datetime, now: datetime | None = None) -> str:
    """Human distance between two instants, worded like date-fns formatDistance."""
    now = now or utc_now()
    seconds = max((now - then).total_seconds(), 0.0)
    minutes = round(seconds / 60)

    if minutes < 1:
        return "less than a minute"
    if minutes < 45:
        return "1 minute" if minutes == 1 else f"{minutes} minutes"
    if minutes < 90:
        return "about 1 hour"
    if minutes < 24 * 60:
        return f"about {round(minutes / 60)} hours"
    if minutes < 42 * 60:
        return "1 day"
    if minutes < 30 * 24 * 60:
        return f"{round(minutes / (24 * 60))} days"
    if minutes < 45 * 24 * 60:
        return "about 1 month"
    if minutes < 60 * 24 * 60:
        return "about 2 months"
    return f"{round(minutes / (30 * 24 * 60))} months"


def status_label(mode: str, connected: bool) -> str:
    return STATUS_LABELS.get((mode, connected), "Polling" if mode == "poll" else "Idle")


def build_summary_card(snapshot: dict, now: datetime | None = None) -> dict:
    """Display strings for the 'Current BTC Price' card."""
    metrics = snapshot["metrics"]
    derived = DerivedMetrics(
        latest_price=metrics["latestPrice"],
        previous_price=metrics["previousPrice"],
    )
    last_update = parse_timestamp(snapshot["lastUpdateTime"])
    return {
        "price": format_usd(derived.latest_price),
        "change": format_change(derived),
        "direction": "up" if derived.is_price_up else "down",
        "lastUpdated": f"Last updated: {time_ago(last_update, now)} ago",
        "status": status_label(snapshot["mode"], snapshot["connected"]),
    }
