"""Shared fixtures for the sync engine tests."""

from datetime import date

import pytest

from macro_dashboard.config import Settings
from macro_dashboard.config.series import (
    Category,
    Derived,
    Frequency,
    Interpolated,
    SeriesConfig,
    Transform,
)
from macro_dashboard.data.interpolation import business_days_between
from macro_dashboard.data.store import SeriesStore
from macro_dashboard.errors import FetchError
from macro_dashboard.models import Observation


TREASURY_2Y = SeriesConfig("treasury_2y", "2-Year Treasury", "DGS2", Category.YIELDS, Frequency.DAILY)
TREASURY_10Y = SeriesConfig("treasury_10y", "10-Year Treasury", "DGS10", Category.YIELDS, Frequency.DAILY)
CPI = SeriesConfig(
    "cpi", "CPI All Items", "CPIAUCSL", Category.INFLATION, Frequency.MONTHLY,
    kind=Interpolated(Transform.YEAR_OVER_YEAR),
)
UNEMPLOYMENT = SeriesConfig(
    "unemployment_rate", "Unemployment Rate", "UNRATE", Category.EMPLOYMENT, Frequency.MONTHLY,
    kind=Interpolated(),
)
SPREAD = SeriesConfig(
    "yield_curve_spread", "10Y-2Y Yield Spread", "T10Y2Y", Category.ECONOMIC_INDICATORS, Frequency.DAILY,
    kind=Derived(minuend="treasury_10y", subtrahend="treasury_2y"),
)

TEST_REGISTRY = (TREASURY_2Y, TREASURY_10Y, CPI, UNEMPLOYMENT, SPREAD)


class FakeFredClient:
    """In-memory stand-in for FredClient that honours the date window."""

    def __init__(self, data: dict[str, list[Observation]] | None = None, failing=()) -> None:
        self.data = data or {}
        self.failing = set(failing)
        self.calls: list[tuple[str, date, date | None]] = []

    def fetch_observations(self, source_id, start_date, end_date=None):
        self.calls.append((source_id, start_date, end_date))
        if source_id in self.failing:
            raise FetchError(f"FRED API error for {source_id}: 500 Internal Server Error")
        return [
            o for o in self.data.get(source_id, [])
            if o.date >= start_date and (end_date is None or o.date <= end_date)
        ]

    def called_for(self, source_id: str) -> bool:
        return any(call[0] == source_id for call in self.calls)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


def daily(start: date, end: date, base: float, step: float = 0.0) -> list[Observation]:
    """Business-day series with a linear drift."""
    return [
        Observation(d, round(base + i * step, 4))
        for i, d in enumerate(business_days_between(start, end))
    ]


def monthly(first_year: int, first_month: int, values: list[float]) -> list[Observation]:
    """First-of-month series starting at the given month."""
    points = []
    year, month = first_year, first_month
    for value in values:
        points.append(Observation(date(year, month, 1), value))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return points


@pytest.fixture
def settings(tmp_path):
    return Settings(
        fred_api_key="test_key",
        data_dir=tmp_path / "data",
        default_start_date=date(2023, 1, 1),
        rate_limit_delay=0.0,
    )


@pytest.fixture
def store(settings):
    return SeriesStore(settings.data_dir)


@pytest.fixture
def upstream():
    """FRED data as of 2024-01-31."""
    return {
        "DGS2": daily(date(2024, 1, 1), date(2024, 1, 31), base=4.5),
        "DGS10": daily(date(2024, 1, 1), date(2024, 1, 31), base=4.0, step=0.01),
        "CPIAUCSL": monthly(2023, 1, [100.0 + i for i in range(13)]),
        "UNRATE": monthly(2023, 1, [3.5, 3.6, 3.5, 3.4, 3.7, 3.6, 3.5, 3.8, 3.8, 3.9, 3.7, 3.7, 3.7]),
    }


@pytest.fixture
def client(upstream):
    return FakeFredClient(upstream)
