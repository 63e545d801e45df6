"""Descriptive statistics of the consumption dataset."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from energy_dashboard.data_models.aggregates import DatasetSummary
from energy_dashboard.data_models.dataset_row import DatasetRow


def _value_range(values: List[Optional[float]]) -> Optional[Tuple[float, float]]:
    arr = np.array([v for v in values if v is not None], dtype=float)
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


def summarize_dataset(rows: Sequence[DatasetRow]) -> Optional[DatasetSummary]:
    """Summary statistics of consumption and covariate ranges.

    Returns None for an empty dataset. The standard deviation is the
    population one (ddof=0).
    """
    if not rows:
        return None

    consumption = np.array([r.energy_mwh for r in rows], dtype=float)
    periods = [r.period_key for r in rows]

    return DatasetSummary(
        total_records=len(rows),
        total_entities=len({r.entity_id for r in rows}),
        period_start=min(periods),
        period_end=max(periods),
        mean_consumption=float(np.mean(consumption)),
        median_consumption=float(np.median(consumption)),
        std_consumption=float(np.std(consumption)),
        min_consumption=float(consumption.min()),
        max_consumption=float(consumption.max()),
        temperature_range=_value_range([r.temperature for r in rows]),
        precipitation_range=_value_range([r.precipitation for r in rows]),
        gdp_range=_value_range([r.gdp_monthly for r in rows]),
    )
