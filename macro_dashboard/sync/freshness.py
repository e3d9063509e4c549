"""Staleness and drift reporting over sync metadata.

Read-only: nothing here fetches or writes.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from macro_dashboard.models import Metadata


CURRENT = "current"
DELAYED = "delayed"
STALE = "stale"

SYNCED = "synced"
PARTIAL = "partial"
OUT_OF_SYNC = "out-of-sync"

# Series this many days behind the newest one are listed as stale
STALE_AFTER_DAYS = 3


@dataclass
class SeriesFreshness:
    """Freshness of one series."""

    key: str
    latest_date: date
    record_count: int
    days_old: int
    status: str = CURRENT


@dataclass
class SyncReport:
    """Synchronization state across every stored series."""

    is_fully_synced: bool
    common_date: date  # every series has data up to here
    newest_date: date
    oldest_date: date
    days_drift: int
    stale_series: list[SeriesFreshness] = field(default_factory=list)
    series_details: list[SeriesFreshness] = field(default_factory=list)
    statuses: dict[str, str] = field(default_factory=dict)


def days_between(first: date, second: date) -> int:
    """Absolute whole days between two dates."""
    return abs((second - first).days)


def classify_staleness(days_old: int) -> str:
    if days_old <= 1:
        return CURRENT
    if days_old <= STALE_AFTER_DAYS:
        return DELAYED
    return STALE


def check_synchronization(metadata: Metadata, today: date | None = None) -> SyncReport | None:
    """
    Compare each series' latest date against the newest series.

    Args:
        metadata: Current metadata record
        today: Reference for ``series_details[*].days_old``

    Returns:
        SyncReport, or None if metadata describes no series
    """
    if not metadata.series_info:
        return None

    today = today or date.today()
    infos = metadata.series_info

    latest_dates = sorted(info.latest_date for info in infos.values())
    oldest_date, newest_date = latest_dates[0], latest_dates[-1]
    days_drift = days_between(oldest_date, newest_date)

    statuses = {
        key: classify_staleness(days_between(info.latest_date, newest_date))
        for key, info in infos.items()
    }

    series_details = sorted(
        (
            SeriesFreshness(
                key=key,
                latest_date=info.latest_date,
                record_count=info.record_count,
                days_old=days_between(info.latest_date, today),
                status=statuses[key],
            )
            for key, info in infos.items()
        ),
        key=lambda s: s.latest_date,
    )

    stale_series = sorted(
        (
            SeriesFreshness(
                key=key,
                latest_date=info.latest_date,
                record_count=info.record_count,
                days_old=days_between(info.latest_date, newest_date),
                status=statuses[key],
            )
            for key, info in infos.items()
            if days_between(info.latest_date, newest_date) >= STALE_AFTER_DAYS
        ),
        key=lambda s: s.days_old,
        reverse=True,
    )

    return SyncReport(
        is_fully_synced=days_drift == 0,
        common_date=oldest_date,
        newest_date=newest_date,
        oldest_date=oldest_date,
        days_drift=days_drift,
        stale_series=stale_series,
        series_details=series_details,
        statuses=statuses,
    )


def sync_status_badge(report: SyncReport) -> dict:
    """Overall status for display."""
    if report.is_fully_synced:
        return {"status": SYNCED, "color": "green", "message": "All series synchronized"}
    if report.days_drift <= STALE_AFTER_DAYS:
        return {"status": PARTIAL, "color": "yellow", "message": f"{report.days_drift} day drift"}
    return {
        "status": OUT_OF_SYNC,
        "color": "red",
        "message": f"{report.days_drift} days out of sync",
    }


def format_data_age(last_updated: datetime, now: datetime | None = None) -> str:
    """Human readable age, e.g. '3 days ago'."""
    now = now or datetime.now()
    minutes = int((now - last_updated).total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days} day{'s' if days != 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    return "Just updated"


def update_status(is_stale: bool, needs_update: bool) -> dict:
    if not is_stale and not needs_update:
        return {"status": "fresh", "color": "#10b981", "message": "Data is current"}
    if is_stale and not needs_update:
        return {"status": "stale", "color": "#f59e0b", "message": "Data is slightly outdated"}
    return {"status": "outdated", "color": "#ef4444", "message": "Data needs updating"}
