"""Command line entry points."""

import argparse
import logging
import sys

from macro_dashboard.config import ALL_SERIES, SERIES_BY_KEY, Settings
from macro_dashboard.data.fred_client import FredClient
from macro_dashboard.data.store import SeriesStore
from macro_dashboard.sync.freshness import (
    STALE_AFTER_DAYS,
    check_synchronization,
    sync_status_badge,
)
from macro_dashboard.sync.synchronizer import Synchronizer


def print_sync_report(store: SeriesStore) -> None:
    """Print the synchronization report for the stored data."""
    metadata = store.load_metadata()
    report = check_synchronization(metadata) if metadata else None

    print("\nData Synchronization Report")
    print("-" * 70)
    if report is None:
        print("No data found. Run `macro-dashboard fetch` first.")
        return

    badge = sync_status_badge(report)
    print(f"Overall status: {badge['status']} ({badge['message']})")
    print(f"\n  Newest data: {report.newest_date}")
    print(f"  Oldest data: {report.oldest_date}")
    print(f"  Common date: {report.common_date} (all series have data up to here)")
    print(f"  Drift:       {report.days_drift} day(s) between oldest and newest\n")

    for series in report.series_details:
        behind = (report.newest_date - series.latest_date).days
        age = "current" if behind == 0 else f"{behind}d behind"
        print(f"  {series.key:25} {series.latest_date}  ({age}, {series.status})")

    if report.stale_series:
        print(f"\nStale series ({STALE_AFTER_DAYS}+ days behind):")
        for series in report.stale_series:
            print(f"  {series.key}: {series.days_old} day(s) behind ({series.latest_date})")


def print_status(store: SeriesStore) -> None:
    """Print record counts per registry series."""
    metadata = store.load_metadata()
    info = metadata.series_info if metadata else {}

    print("\nData Status:")
    print("-" * 70)
    if metadata:
        print(f"Last updated: {metadata.last_updated}")
    for config in ALL_SERIES:
        entry = info.get(config.key)
        count = entry.record_count if entry else 0
        last = entry.latest_date.isoformat() if entry else "N/A"
        print(f"{config.key:20} | {count:6} obs | Last: {last:10} | {config.name}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for fetching and syncing data."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Fetch and synchronize FRED macro data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser("fetch", help="Back up and refetch full history")
    fetch_parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Skip copying existing files to data/backup",
    )
    subparsers.add_parser("update", help="Fetch only new data since the last update")
    subparsers.add_parser("check-sync", help="Show drift between series and exit")
    subparsers.add_parser("status", help="Show stored record counts and exit")
    args = parser.parse_args(argv)

    settings = Settings()
    store = SeriesStore(settings.data_dir)

    if args.command == "check-sync":
        print_sync_report(store)
        return
    if args.command == "status":
        print_status(store)
        return

    try:
        client = FredClient(settings)
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    with client:
        synchronizer = Synchronizer(client, store, settings)
        if args.command == "fetch":
            if not args.no_backup:
                store.backup()
            result = synchronizer.backfill()
        else:
            result = synchronizer.run()

    if result.updated:
        print("\nUpdate Summary:")
        print(f"  Series updated: {len(result.series_updated)}")
        print(f"  New records: {result.new_records}")
        names = [SERIES_BY_KEY[k].name if k in SERIES_BY_KEY else k for k in result.series_updated]
        print(f"  Updated series: {', '.join(names)}")
    else:
        print("\nAll data is up to date.")


if __name__ == "__main__":
    main()
