"""Freshness query and update trigger used by the dashboard and CLI."""

import logging
from datetime import date, datetime, timedelta

from macro_dashboard.config import Settings
from macro_dashboard.data.fred_client import FredClient
from macro_dashboard.data.store import SeriesStore
from macro_dashboard.sync.synchronizer import Synchronizer


logger = logging.getLogger(__name__)

STALE_AFTER = timedelta(days=1)


def _is_stale(last_updated: date, now: datetime) -> bool:
    return datetime.combine(last_updated, datetime.min.time()) < now - STALE_AFTER


def needs_update(store: SeriesStore, now: datetime | None = None) -> bool:
    """True when no metadata exists or it is more than a day old."""
    metadata = store.load_metadata()
    if metadata is None:
        return True
    return _is_stale(metadata.last_updated, now or datetime.now())


def get_data_freshness(store: SeriesStore, now: datetime | None = None) -> dict | None:
    """
    Freshness summary straight from the metadata record.

    Returns:
        ``{lastUpdated, isStale, needsUpdate, seriesInfo}`` or None when no
        data has been fetched yet
    """
    metadata = store.load_metadata()
    if metadata is None:
        return None

    stale = _is_stale(metadata.last_updated, now or datetime.now())
    payload = metadata.to_dict()
    return {
        "lastUpdated": payload["lastUpdated"],
        "isStale": stale,
        "needsUpdate": stale,
        "seriesInfo": payload["seriesInfo"],
    }


def trigger_update(
    settings: Settings | None = None,
    today: date | None = None,
    client=None,
) -> dict:
    """
    Run one synchronization and report the outcome.

    Errors are reported in the result rather than raised.
    """
    settings = settings or Settings()
    timestamp = datetime.now().isoformat()
    store = SeriesStore(settings.data_dir)

    try:
        if client is None:
            with FredClient(settings) as fred:
                result = Synchronizer(fred, store, settings).run(today)
        else:
            result = Synchronizer(client, store, settings).run(today)
    except Exception as e:
        logger.error(f"Data update failed: {e}")
        return {
            "success": False,
            "updated": False,
            "seriesUpdated": [],
            "newRecords": 0,
            "timestamp": timestamp,
            "error": str(e),
        }

    return {"success": True, **result.to_dict(), "timestamp": timestamp}
