"""Row filtering for the dataset-analysis views."""
from __future__ import annotations

from typing import List, Sequence

from energy_dashboard.data_models.aggregates import ALL, DashboardFilter, EntityFilter, YearFilter
from energy_dashboard.data_models.dataset_row import DatasetRow


def filter_rows(
    rows: Sequence[DatasetRow],
    entity: EntityFilter = ALL,
    year: YearFilter = ALL,
) -> List[DatasetRow]:
    """Return the rows matching both the entity and the year filter.

    "all" leaves that dimension unfiltered. Matching is by equality only.
    The input is not modified; an empty result is valid.
    """
    return [
        r for r in rows
        if (entity == ALL or r.entity_id == entity) and (year == ALL or r.year == year)
    ]


def filter_rows_for(rows: Sequence[DatasetRow], dashboard_filter: DashboardFilter) -> List[DatasetRow]:
    return filter_rows(rows, entity=dashboard_filter.entity, year=dashboard_filter.year)


def available_entities(rows: Sequence[DatasetRow]) -> List[int]:
    """Distinct entity ids present in the rows, ascending."""
    return sorted({r.entity_id for r in rows})


def available_years(rows: Sequence[DatasetRow]) -> List[int]:
    return sorted({r.year for r in rows})
