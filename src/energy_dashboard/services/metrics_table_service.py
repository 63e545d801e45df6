"""Sortable per-entity metrics table."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from energy_dashboard.data_models.aggregates import ALL, EntityFilter
from energy_dashboard.data_models.entity_metrics import EntityMetrics


class MetricsColumn(str, Enum):
    """Sortable columns of the metrics table."""

    ENTITY_ID = "entity_id"
    POINT_COUNT = "point_count"
    MEAN_CONSUMPTION = "mean_consumption"
    RMSE = "rmse"
    MAE = "mae"
    R2 = "r2"
    RELATIVE_ERROR_PCT = "relative_error_pct"


class MetricsSortState(BaseModel):
    """Active sort column and direction of the table.

    Selecting the active column again reverses the direction; selecting
    another column sorts by it descending.
    """

    model_config = ConfigDict(frozen=True)

    column: MetricsColumn = MetricsColumn.R2
    ascending: bool = False

    def toggle(self, column: MetricsColumn) -> "MetricsSortState":
        column = MetricsColumn(column)
        if column == self.column:
            return MetricsSortState(column=column, ascending=not self.ascending)
        return MetricsSortState(column=column, ascending=False)


class MetricsSummary(BaseModel):
    entity_count: int
    mean_consumption: float
    mean_relative_error_pct: Optional[float] = None


def sort_metrics(
    table: Sequence[EntityMetrics],
    column: MetricsColumn = MetricsColumn.R2,
    ascending: bool = False,
) -> List[EntityMetrics]:
    """Return the table sorted on one column.

    The sort is stable in both directions, so equal values keep their input
    order. Rows without a value in the column (a schema version that lacks
    it) are placed last, in input order.
    """
    attr = MetricsColumn(column).value
    present = [m for m in table if getattr(m, attr) is not None]
    missing = [m for m in table if getattr(m, attr) is None]
    ordered = sorted(present, key=lambda m: getattr(m, attr), reverse=not ascending)
    return ordered + missing


def sort_metrics_by_state(table: Sequence[EntityMetrics], state: MetricsSortState) -> List[EntityMetrics]:
    return sort_metrics(table, state.column, state.ascending)


def filter_metrics(table: Sequence[EntityMetrics], entity: EntityFilter = ALL) -> List[EntityMetrics]:
    if entity == ALL:
        return list(table)
    return [m for m in table if m.entity_id == entity]


def summarize_metrics(table: Sequence[EntityMetrics]) -> Optional[MetricsSummary]:
    """Headline indicators over the table; None for an empty table."""
    if not table:
        return None

    errors = [m.relative_error_pct for m in table if m.relative_error_pct is not None]
    return MetricsSummary(
        entity_count=len(table),
        mean_consumption=float(sum(m.mean_consumption for m in table) / len(table)),
        mean_relative_error_pct=float(sum(errors) / len(errors)) if errors else None,
    )
