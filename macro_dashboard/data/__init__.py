"""Data fetching, storage and calendar alignment."""

from .fred_client import FredClient
from .store import SeriesStore

__all__ = ["FredClient", "SeriesStore"]
