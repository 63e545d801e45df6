"""Grouped averages and time-bucketed series over dataset rows.

All functions are pure: they never modify their input and return the same
result for the same rows. Empty input yields empty output.
"""
from __future__ import annotations

from typing import Callable, Dict, Hashable, List, Optional, Sequence, TypeVar

from energy_dashboard.data_models.aggregates import GroupAverage, ScatterSeries, SeasonalityPoint, SeriesPoint
from energy_dashboard.data_models.dataset_row import DatasetRow

T = TypeVar("T")

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def _consumption(row: DatasetRow) -> float:
    return row.energy_mwh


def _group(rows: Sequence[T], key_fn: Callable[[T], Hashable]) -> Dict[Hashable, List[T]]:
    # dicts keep insertion order, so groups come out in first-seen key order
    groups: Dict[Hashable, List[T]] = {}
    for r in rows:
        groups.setdefault(key_fn(r), []).append(r)
    return groups


def average_by(
    rows: Sequence[T],
    key_fn: Callable[[T], Hashable],
    value_fn: Callable[[T], Optional[float]],
) -> List[GroupAverage]:
    """Group rows by `key_fn` and average `value_fn` within each group.

    Any hashable key works, including composite keys such as
    `(year, month)`. Rows whose value is None are left out of the average
    and of `count`; a group with no values at all is omitted.

    Groups are returned in the order their key first appears. Ordering for
    presentation is left to the caller.
    """
    averages: List[GroupAverage] = []
    for key, members in _group(rows, key_fn).items():
        values = [v for v in (value_fn(m) for m in members) if v is not None]
        if not values:
            continue
        averages.append(GroupAverage(key=key, average=float(sum(values)) / len(values), count=len(values)))
    return averages


def top_entities_by_average(rows: Sequence[DatasetRow], top_n: Optional[int] = None) -> List[GroupAverage]:
    """Average consumption per entity, highest first.

    Ties are ordered by ascending entity id. With `top_n`, only the first
    `top_n` entities are kept.
    """
    averages = average_by(rows, lambda r: r.entity_id, _consumption)
    averages.sort(key=lambda g: (-g.average, g.key))
    if top_n is not None:
        averages = averages[:top_n]
    return averages


def monthly_series(rows: Sequence[DatasetRow]) -> List[SeriesPoint]:
    """Average consumption per (year, month) bucket in chronological order.

    Buckets without rows are left out; the series is not densified.
    """
    averages = average_by(rows, lambda r: r.period_key, _consumption)
    return [
        SeriesPoint(period=str(g.key), average=g.average, count=g.count)
        for g in sorted(averages, key=lambda g: str(g.key))
    ]


def seasonality(rows: Sequence[DatasetRow]) -> List[SeasonalityPoint]:
    """Average consumption per calendar month, January first."""
    averages = average_by(rows, lambda r: r.month, _consumption)
    return [
        SeasonalityPoint(month=int(g.key), month_name=MONTH_ABBREVIATIONS[int(g.key) - 1], average=g.average)
        for g in sorted(averages, key=lambda g: int(g.key))
    ]


def consumption_vs_temperature(rows: Sequence[DatasetRow]) -> ScatterSeries:
    """Temperature/consumption pairs; rows without a temperature are skipped."""
    paired = [r for r in rows if r.temperature is not None]
    return ScatterSeries(
        x=[float(r.temperature) for r in paired],
        y=[r.energy_mwh for r in paired],
    )
