"""Data models for stored series and sync state."""

from macro_dashboard.models.series_data import (
    Metadata,
    Observation,
    SeriesInfo,
    SyncResult,
)

__all__ = ["Metadata", "Observation", "SeriesInfo", "SyncResult"]
