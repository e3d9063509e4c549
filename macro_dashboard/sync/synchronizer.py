"""Incremental synchronization of stored series with FRED.

A run walks the registry in order. Daily series get an append-only merge of
the dates they are missing. Monthly series keep their raw observations on
disk and are re-interpolated in full onto the Treasury yield calendar when
new raw points arrive. Spread series are recomputed in a second pass once
both inputs are final. Metadata is read once, updated in memory alongside
each series write, and saved once at the end.
"""

import logging
from datetime import date, timedelta

from macro_dashboard.config import ALL_SERIES, Settings
from macro_dashboard.config.series import (
    Derived,
    Direct,
    Interpolated,
    SeriesConfig,
    Transform,
    derived_source_id,
    reference_series,
)
from macro_dashboard.data.interpolation import (
    append_new_dates,
    compute_spread,
    merge_and_reinterpolate,
    merge_by_date,
    year_over_year_change,
)
from macro_dashboard.data.store import SeriesStore
from macro_dashboard.errors import (
    FetchError,
    MissingReferenceDataError,
    MissingSeriesMetadataError,
)
from macro_dashboard.models import Metadata, Observation, SeriesInfo, SyncResult


logger = logging.getLogger(__name__)

TRANSFORMS = {
    Transform.NONE: None,
    Transform.YEAR_OVER_YEAR: year_over_year_change,
}


class Synchronizer:
    """Keeps the on-disk series in step with the upstream API.

    ``client`` is any object with ``fetch_observations(source_id, start, end)``
    returning a list of observations; normally a ``FredClient``.
    """

    def __init__(
        self,
        client,
        store: SeriesStore,
        settings: Settings | None = None,
        registry: tuple[SeriesConfig, ...] = ALL_SERIES,
    ) -> None:
        self.client = client
        self.store = store
        self.settings = settings or Settings()
        self.registry = registry

    # ------------------------------------------------------------------
    # Reference calendar
    # ------------------------------------------------------------------

    def reference_dates(self, today: date, metadata: Metadata | None = None) -> list[date]:
        """Union of the stored yield series dates within the history window.

        With ``metadata``, only yield series recorded there count, so a file
        left behind by a failed fetch never shapes the calendar.
        """
        dates: set[date] = set()
        for config in reference_series(self.registry):
            if metadata is not None and config.key not in metadata.series_info:
                continue
            dates.update(o.date for o in self.store.load_series(config.key))

        start = self.settings.default_start_date
        return sorted(d for d in dates if start <= d <= today)

    # ------------------------------------------------------------------
    # Incremental run
    # ------------------------------------------------------------------

    def run(self, today: date | None = None) -> SyncResult:
        """
        Fetch only what each series is missing and merge it in.

        Falls back to a full backfill when no metadata exists yet.
        """
        today = today or date.today()
        metadata = self.store.load_metadata()

        if metadata is None:
            logger.warning("No existing metadata found, performing full data fetch...")
            return self.backfill(today)

        logger.info(f"Starting incremental update for {today}")
        result = SyncResult()

        for config in self.registry:
            if isinstance(config.kind, Derived):
                continue

            try:
                self._sync_series(config, metadata, today, result)
            except MissingSeriesMetadataError as e:
                logger.warning(str(e))
            except MissingReferenceDataError as e:
                logger.warning(f"{config.name}: {e}; keeping existing data")
            except FetchError as e:
                logger.error(f"Error updating {config.name}: {e}")
            except Exception as e:
                logger.error(f"Unexpected error updating {config.name}: {e}")

        self._recompute_derived(metadata, result)

        if result.updated:
            metadata.last_updated = today
            self.store.save_metadata(metadata)
            logger.info(f"Series updated: {', '.join(result.series_updated)}")
            logger.info(f"Total new records: {result.new_records}")
        else:
            logger.info("All data is up to date, no changes needed")

        return result

    def _fetch_start(self, config: SeriesConfig, info: SeriesInfo) -> date:
        """First date to request for an incremental fetch."""
        if isinstance(config.kind, Interpolated):
            # The interpolated series ends on the last reference date, which
            # is usually weeks past the last monthly observation.
            raw = self.store.load_raw(config.key)
            if raw:
                return raw[-1].date + timedelta(days=1)
            logger.warning(f"No raw history for {config.name}, refetching from the start")
            return self.settings.default_start_date
        return info.latest_date + timedelta(days=1)

    def _sync_series(
        self,
        config: SeriesConfig,
        metadata: Metadata,
        today: date,
        result: SyncResult,
    ) -> None:
        info = metadata.series_info.get(config.key)
        if info is None:
            raise MissingSeriesMetadataError(f"No metadata for {config.name}, skipping")

        if today <= info.latest_date:
            logger.info(f"{config.name} is up to date (latest: {info.latest_date})")
            return

        start = self._fetch_start(config, info)
        logger.info(f"Checking {config.name} for data from {start}...")
        new_data = self.client.fetch_observations(config.source_id, start, today)

        if not new_data:
            logger.info(f"  No new data available for {config.name}")
            return

        logger.info(f"  Found {len(new_data)} new records")

        if isinstance(config.kind, Interpolated):
            self._apply_interpolated(config, new_data, metadata, today)
            result.mark_updated(config.key, len(new_data))
        elif isinstance(config.kind, Direct):
            added = self._apply_direct(config, new_data, metadata)
            if added:
                result.mark_updated(config.key, added)
        else:
            raise TypeError(f"Unhandled series kind for {config.key}: {config.kind!r}")

    def _apply_direct(
        self, config: SeriesConfig, new_data: list[Observation], metadata: Metadata
    ) -> int:
        """Append genuinely new dates. Returns the number of points added."""
        existing = self.store.load_series(config.key)
        merged, added = append_new_dates(existing, new_data)

        if not added:
            logger.info(f"  No new unique data for {config.name}")
            return 0

        self.store.save_series(config.key, merged)
        metadata.series_info[config.key] = SeriesInfo.for_series(merged, config.source_id)

        logger.info(f"  {config.name}: added {len(added)} records")
        logger.info(f"  Latest data: {merged[-1].date}, total records: {len(merged)}")
        return len(added)

    def _apply_interpolated(
        self,
        config: SeriesConfig,
        new_raw: list[Observation],
        metadata: Metadata,
        today: date,
        existing_raw: list[Observation] | None = None,
    ) -> None:
        """Merge raw points and regenerate the whole interpolated series."""
        targets = self.reference_dates(today, metadata)
        if not targets:
            raise MissingReferenceDataError("no reference dates to interpolate onto")

        if existing_raw is None:
            existing_raw = self.store.load_raw(config.key)

        daily = merge_and_reinterpolate(
            existing_daily=self.store.load_series(config.key),
            new_monthly=new_raw,
            original_monthly=existing_raw,
            target_dates=targets,
            transform=TRANSFORMS[config.kind.transform],
        )
        if not daily:
            raise MissingReferenceDataError("interpolation produced no data")

        self.store.save_raw(config.key, merge_by_date(existing_raw, new_raw))
        self.store.save_series(config.key, daily)
        metadata.series_info[config.key] = SeriesInfo.for_series(daily, config.source_id)

        logger.info(
            f"  {config.name}: re-interpolated with {len(new_raw)} new monthly records "
            f"onto {len(targets)} reference dates"
        )
        logger.info(f"  Latest data: {daily[-1].date}, total records: {len(daily)}")

    # ------------------------------------------------------------------
    # Derived series
    # ------------------------------------------------------------------

    def _recompute_derived(self, metadata: Metadata, result: SyncResult) -> None:
        """Recompute spreads whose inputs changed during this run."""
        for config in self.registry:
            if not isinstance(config.kind, Derived):
                continue
            inputs = (config.kind.minuend, config.kind.subtrahend)
            if not any(key in result.series_updated for key in inputs):
                continue

            logger.info(f"Recalculating {config.name}...")
            try:
                if self._write_derived(config, metadata):
                    result.mark_updated(config.key, 0)
            except Exception as e:
                logger.error(f"Error calculating {config.name}: {e}")

    def _write_derived(self, config: SeriesConfig, metadata: Metadata) -> bool:
        missing = [
            key for key in (config.kind.minuend, config.kind.subtrahend)
            if key not in metadata.series_info
        ]
        if missing:
            logger.warning(f"Could not calculate {config.name}: no data for {', '.join(missing)}")
            return False

        spread = compute_spread(
            self.store.load_series(config.kind.minuend),
            self.store.load_series(config.kind.subtrahend),
        )
        if not spread:
            logger.warning(
                f"Could not calculate {config.name}: no dates shared by "
                f"{config.kind.minuend} and {config.kind.subtrahend}"
            )
            return False

        self.store.save_series(config.key, spread)
        metadata.series_info[config.key] = SeriesInfo.for_series(
            spread, derived_source_id(config)
        )
        logger.info(f"  {config.name}: {len(spread)} records calculated")
        return True

    # ------------------------------------------------------------------
    # Full history
    # ------------------------------------------------------------------

    def backfill(self, today: date | None = None) -> SyncResult:
        """
        Fetch every series' full history and write metadata from scratch.

        Daily series go first so the yield calendar exists before monthly
        series are interpolated onto it; spreads are computed last.
        """
        today = today or date.today()
        start = self.settings.default_start_date
        logger.info(f"Starting full data fetch: {start} to {today}")

        metadata = Metadata(last_updated=today)
        result = SyncResult()

        for config in self.registry:
            if not isinstance(config.kind, Direct):
                continue
            try:
                logger.info(f"Fetching {config.name} ({config.source_id})...")
                data = merge_by_date([], self.client.fetch_observations(config.source_id, start, today))
                if not data:
                    logger.warning(f"  No data returned for {config.name}")
                    continue
                self.store.save_series(config.key, data)
                metadata.series_info[config.key] = SeriesInfo.for_series(data, config.source_id)
                result.mark_updated(config.key, len(data))
                logger.info(f"  {config.name}: {len(data)} records, latest {data[-1].date}")
            except Exception as e:
                logger.error(f"Error fetching {config.name}: {e}")

        for config in self.registry:
            if not isinstance(config.kind, Interpolated):
                continue
            try:
                logger.info(f"Fetching {config.name} ({config.source_id})...")
                raw = self.client.fetch_observations(config.source_id, start, today)
                if not raw:
                    logger.warning(f"  No data returned for {config.name}")
                    continue
                self._apply_interpolated(config, raw, metadata, today, existing_raw=[])
                result.mark_updated(config.key, len(raw))
            except MissingReferenceDataError as e:
                logger.warning(f"{config.name}: {e}")
            except Exception as e:
                logger.error(f"Error fetching {config.name}: {e}")

        for config in self.registry:
            if not isinstance(config.kind, Derived):
                continue
            try:
                if self._write_derived(config, metadata):
                    result.mark_updated(config.key, 0)
            except Exception as e:
                logger.error(f"Error calculating {config.name}: {e}")

        if not metadata.series_info:
            logger.error("Full data fetch produced no series; metadata not written")
            return SyncResult()

        self.store.save_metadata(metadata)
        logger.info(f"Full data fetch complete: {len(metadata.series_info)} series saved")
        return result
