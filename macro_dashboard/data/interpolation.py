"""Calendar alignment for mixed-frequency series.

Monthly releases (CPI, unemployment) are mapped onto the daily calendar of a
reference series so every line on the dashboard shares the same x values.
Everything here is pure: no I/O and no state.
"""

from datetime import date
from typing import Callable, Iterable

import numpy as np
import pandas as pd

from macro_dashboard.models import Observation


DECIMALS = 4


def business_days_between(start: date, end: date) -> list[date]:
    """Every Monday-Friday date in ``[start, end]``, ascending."""
    if start > end:
        return []
    return [ts.date() for ts in pd.bdate_range(start=start, end=end)]


def _sorted_unique(points: Iterable[Observation]) -> list[Observation]:
    """Sort by date, keeping the last point seen for a repeated date."""
    by_date = {p.date: p for p in points}
    return [by_date[d] for d in sorted(by_date)]


def _ordinals(dates: Iterable[date]) -> np.ndarray:
    return np.array([d.toordinal() for d in dates], dtype=float)


def interpolate_to_targets(
    sparse_points: list[Observation],
    target_dates: Iterable[date] | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[Observation]:
    """
    Linearly interpolate a sparse series onto a set of target dates.

    Targets before the first sparse point take its value and targets after
    the last point take the last value (flat, not linear, extrapolation).

    Args:
        sparse_points: Observations, any order
        target_dates: Dates to produce values for. Defaults to the business
            days between ``start`` and ``end``.
        start: Range start; defaults to the first sparse date
        end: Range end; defaults to the last sparse date

    Returns:
        One observation per target date, ascending, values rounded to 4 places
    """
    if not sparse_points:
        return []

    points = _sorted_unique(sparse_points)
    range_start = start or points[0].date
    range_end = end or points[-1].date

    if target_dates is None:
        targets = business_days_between(range_start, range_end)
    else:
        targets = sorted(set(target_dates))
        if start is not None or end is not None:
            targets = [d for d in targets if range_start <= d <= range_end]

    if not targets:
        return []

    # np.interp holds the end values outside [xp[0], xp[-1]]
    values = np.interp(
        _ordinals(targets),
        _ordinals(p.date for p in points),
        np.array([p.value for p in points], dtype=float),
    )

    return [
        Observation(date=d, value=round(float(v), DECIMALS))
        for d, v in zip(targets, values)
    ]


def _year_ago(d: date) -> date:
    try:
        return d.replace(year=d.year - 1)
    except ValueError:
        # Feb 29 rolls forward like a calendar date overflow would
        return date(d.year - 1, 3, 1)


def year_over_year_change(index_series: list[Observation]) -> list[Observation]:
    """
    Convert an index level series into year-over-year percent change.

    The year-ago reference is whichever point sits closest to exactly one
    year earlier, so months of unequal length and missing anniversaries still
    resolve. Points whose reference value is zero are dropped.
    """
    if not index_series:
        return []

    points = _sorted_unique(index_series)
    ordinals = _ordinals(p.date for p in points)

    changes = []
    for point in points:
        target = _year_ago(point.date).toordinal()
        reference = points[int(np.argmin(np.abs(ordinals - target)))]
        if reference.value == 0:
            continue
        rate = (point.value - reference.value) / reference.value * 100
        changes.append(Observation(date=point.date, value=round(rate, DECIMALS)))

    return changes


def merge_by_date(
    existing: list[Observation], new: list[Observation]
) -> list[Observation]:
    """Union of two raw series; the new point wins on a shared date."""
    return _sorted_unique([*existing, *new])


def append_new_dates(
    existing: list[Observation], new: list[Observation]
) -> tuple[list[Observation], list[Observation]]:
    """
    Append-only merge for daily series.

    Existing history is never overwritten: only points for dates not already
    stored are added.

    Returns:
        (merged series, the points that were actually added)
    """
    known = {p.date for p in existing}
    added = _sorted_unique(p for p in new if p.date not in known)
    merged = sorted([*existing, *added], key=lambda p: p.date)
    return merged, added


def merge_and_reinterpolate(
    existing_daily: list[Observation],
    new_monthly: list[Observation],
    original_monthly: list[Observation],
    target_dates: Iterable[date] | None = None,
    transform: Callable[[list[Observation]], list[Observation]] | None = None,
) -> list[Observation]:
    """
    Merge new raw points into the raw history and re-interpolate from scratch.

    The result depends only on the merged raw history and the targets, never
    on previously interpolated values. ``existing_daily`` supplies the target
    calendar when ``target_dates`` is not given.
    """
    raw = merge_by_date(original_monthly, new_monthly)
    if transform is not None:
        raw = transform(raw)

    if target_dates is None:
        target_dates = [p.date for p in existing_daily]

    return interpolate_to_targets(raw, target_dates)


def compute_spread(
    minuend: list[Observation], subtrahend: list[Observation]
) -> list[Observation]:
    """``minuend - subtrahend`` on the dates present in both series."""
    lookup = {p.date: p.value for p in subtrahend}
    return [
        Observation(date=p.date, value=round(p.value - lookup[p.date], DECIMALS))
        for p in sorted(minuend, key=lambda p: p.date)
        if p.date in lookup
    ]
