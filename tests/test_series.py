"""Tests for the series registry."""

import dataclasses

import pytest

from macro_dashboard.config.series import (
    ALL_SERIES,
    SERIES_BY_KEY,
    Category,
    Derived,
    Frequency,
    Interpolated,
    Transform,
    derived_source_id,
    reference_series,
)


def test_keys_are_unique():
    assert len(SERIES_BY_KEY) == len(ALL_SERIES)


def test_descriptors_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        SERIES_BY_KEY["cpi"].source_id = "CHANGED"  # type: ignore[misc]


def test_monthly_series_are_interpolated():
    for config in ALL_SERIES:
        assert config.requires_interpolation == (config.frequency is Frequency.MONTHLY), config.key


def test_inflation_uses_year_over_year():
    for config in ALL_SERIES:
        if config.category is Category.INFLATION:
            assert config.kind == Interpolated(Transform.YEAR_OVER_YEAR)


def test_derived_inputs_exist_and_come_first():
    order = [c.key for c in ALL_SERIES]
    for config in ALL_SERIES:
        if isinstance(config.kind, Derived):
            assert order.index(config.kind.minuend) < order.index(config.key)
            assert order.index(config.kind.subtrahend) < order.index(config.key)


def test_reference_series_are_daily_yields():
    refs = reference_series()
    assert refs
    assert all(c.category is Category.YIELDS and c.frequency is Frequency.DAILY for c in refs)


def test_yield_spread():
    spread = SERIES_BY_KEY["yield_curve_spread"]
    assert spread.kind == Derived(minuend="treasury_10y", subtrahend="treasury_2y")
    assert derived_source_id(spread) == "T10Y2Y (calculated)"
    assert spread.raw_key == "yield_curve_spread_monthly"
