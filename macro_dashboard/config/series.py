"""Series registry.

Every series the dashboard knows about is declared here once. The ``kind``
attached to each entry decides how the synchronizer treats it:

- ``Direct``: a daily series fetched from FRED and appended to on each run.
- ``Interpolated``: a monthly series kept raw on disk and re-interpolated in
  full onto the Treasury yield calendar whenever new raw points arrive.
- ``Derived``: computed from two stored series, never fetched.
"""

from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    YIELDS = "yields"
    INFLATION = "inflation"
    VOLATILITY = "volatility"
    EMPLOYMENT = "employment"
    COMMODITIES = "commodities"
    CURRENCY = "currency"
    ECONOMIC_INDICATORS = "economic_indicators"


class Frequency(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class Transform(str, Enum):
    NONE = "none"
    YEAR_OVER_YEAR = "yoy"


@dataclass(frozen=True)
class Direct:
    """Daily series, append-only merge."""


@dataclass(frozen=True)
class Interpolated:
    """Monthly series interpolated onto the reference calendar."""

    transform: Transform = Transform.NONE


@dataclass(frozen=True)
class Derived:
    """Spread series: ``minuend - subtrahend`` over dates present in both."""

    minuend: str
    subtrahend: str


SeriesKind = Direct | Interpolated | Derived


@dataclass(frozen=True)
class SeriesConfig:
    """Immutable descriptor for a dashboard series."""

    key: str
    name: str
    source_id: str
    category: Category
    frequency: Frequency
    kind: SeriesKind = field(default_factory=Direct)
    unit: str | None = None
    color: str = "#3b82f6"

    @property
    def requires_interpolation(self) -> bool:
        return isinstance(self.kind, Interpolated)

    @property
    def raw_key(self) -> str:
        """Key of the raw monthly file backing an interpolated series."""
        return f"{self.key}_monthly"


# Daily Treasury yield curve rates. Their dates form the reference calendar.
TREASURY_YIELD_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig("treasury_1y", "1-Year Treasury", "DGS1", Category.YIELDS, Frequency.DAILY, unit="%", color="#3b82f6"),
    SeriesConfig("treasury_2y", "2-Year Treasury", "DGS2", Category.YIELDS, Frequency.DAILY, unit="%", color="#0891b2"),
    SeriesConfig("treasury_5y", "5-Year Treasury", "DGS5", Category.YIELDS, Frequency.DAILY, unit="%", color="#10b981"),
    SeriesConfig("treasury_10y", "10-Year Treasury", "DGS10", Category.YIELDS, Frequency.DAILY, unit="%", color="#f59e0b"),
    SeriesConfig("treasury_20y", "20-Year Treasury", "DGS20", Category.YIELDS, Frequency.DAILY, unit="%", color="#dc2626"),
)

# Monthly CPI indices, converted to YoY inflation before interpolation
INFLATION_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig(
        "cpi", "CPI All Items", "CPIAUCSL", Category.INFLATION, Frequency.MONTHLY,
        kind=Interpolated(Transform.YEAR_OVER_YEAR), unit="%", color="#8b5cf6",
    ),
    SeriesConfig(
        "core_cpi", "Core CPI (ex Food & Energy)", "CPILFESL", Category.INFLATION, Frequency.MONTHLY,
        kind=Interpolated(Transform.YEAR_OVER_YEAR), unit="%", color="#ec4899",
    ),
)

VOLATILITY_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig("vix", "VIX (S&P 500 Volatility)", "VIXCLS", Category.VOLATILITY, Frequency.DAILY, unit="points", color="#7c3aed"),
    SeriesConfig("gvz", "GVZ (Gold Volatility)", "GVZCLS", Category.VOLATILITY, Frequency.DAILY, unit="points", color="#f59e0b"),
)

EMPLOYMENT_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig(
        "unemployment_rate", "Unemployment Rate", "UNRATE", Category.EMPLOYMENT, Frequency.MONTHLY,
        kind=Interpolated(), unit="%", color="#dc2626",
    ),
)

COMMODITY_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig("oil_price", "Oil Price (WTI)", "DCOILWTICO", Category.COMMODITIES, Frequency.DAILY, unit="$/barrel", color="#059669"),
)

# Currencies and market indices, absolute values
CURRENCY_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig("dollar_index", "US Dollar Index", "DTWEXBGS", Category.CURRENCY, Frequency.DAILY, unit="Index", color="#7c2d92"),
    SeriesConfig("eur_usd", "EUR/USD Exchange Rate", "DEXUSEU", Category.CURRENCY, Frequency.DAILY, unit="USD", color="#059669"),
    SeriesConfig("sp500", "S&P 500 Index", "SP500", Category.CURRENCY, Frequency.DAILY, unit="Index", color="#2563eb"),
)

ECONOMIC_INDICATOR_SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig(
        "yield_curve_spread", "10Y-2Y Yield Spread", "T10Y2Y", Category.ECONOMIC_INDICATORS, Frequency.DAILY,
        kind=Derived(minuend="treasury_10y", subtrahend="treasury_2y"), unit="%", color="#ea580c",
    ),
)

ALL_SERIES: tuple[SeriesConfig, ...] = (
    *TREASURY_YIELD_SERIES,
    *INFLATION_SERIES,
    *VOLATILITY_SERIES,
    *EMPLOYMENT_SERIES,
    *COMMODITY_SERIES,
    *CURRENCY_SERIES,
    *ECONOMIC_INDICATOR_SERIES,
)

SERIES_BY_KEY: dict[str, SeriesConfig] = {s.key: s for s in ALL_SERIES}

CATEGORY_LABELS: dict[Category, str] = {
    Category.YIELDS: "Treasury Yields",
    Category.INFLATION: "Inflation Metrics",
    Category.VOLATILITY: "Market Volatility",
    Category.EMPLOYMENT: "Employment",
    Category.COMMODITIES: "Commodities",
    Category.CURRENCY: "Currency & Indices",
    Category.ECONOMIC_INDICATORS: "Economic Indicators",
}


def reference_series(registry: tuple[SeriesConfig, ...] = ALL_SERIES) -> list[SeriesConfig]:
    """Daily series whose dates define the interpolation calendar."""
    return [s for s in registry if s.category is Category.YIELDS]


def derived_source_id(config: SeriesConfig) -> str:
    """Source id recorded in metadata for a computed series."""
    return f"{config.source_id} (calculated)"
