"""Configuration: settings and the series registry."""

from macro_dashboard.config.settings import Settings
from macro_dashboard.config.series import (
    ALL_SERIES,
    SERIES_BY_KEY,
    Category,
    Derived,
    Direct,
    Frequency,
    Interpolated,
    SeriesConfig,
    Transform,
)

__all__ = [
    "Settings",
    "ALL_SERIES",
    "SERIES_BY_KEY",
    "Category",
    "Derived",
    "Direct",
    "Frequency",
    "Interpolated",
    "SeriesConfig",
    "Transform",
]
