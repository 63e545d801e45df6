"""Assemble the dataset-analysis views for one filter selection."""
from __future__ import annotations

from typing import Optional, Sequence, Union
import logging

from energy_dashboard.data_models.aggregates import DashboardFilter, DatasetViews
from energy_dashboard.data_models.dataset_row import DatasetRow
from energy_dashboard.data_models.geo_feature import GeoFeature
from energy_dashboard.services.aggregation_service import (
    consumption_vs_temperature,
    monthly_series,
    seasonality,
    top_entities_by_average,
)
from energy_dashboard.services.choropleth_service import ChoroplethVariable, join_choropleth
from energy_dashboard.services.filter_service import filter_rows_for

logger = logging.getLogger(__name__)


def build_dataset_views(
    rows: Sequence[DatasetRow],
    features: Sequence[GeoFeature],
    dashboard_filter: Optional[DashboardFilter] = None,
    variable: Union[ChoroplethVariable, str] = ChoroplethVariable.CONSUMPTION,
    top_n: Optional[int] = 15,
) -> DatasetViews:
    """Filter the rows once and compute every view from the result.

    The views do not depend on each other. When the filter matches nothing,
    every view is empty and the choropleth has no domain.
    """
    dashboard_filter = dashboard_filter or DashboardFilter()
    filtered = filter_rows_for(rows, dashboard_filter)
    if not filtered:
        logger.info("No rows match filter entity=%s year=%s", dashboard_filter.entity, dashboard_filter.year)

    return DatasetViews(
        dashboard_filter=dashboard_filter,
        record_count=len(filtered),
        top_entities=top_entities_by_average(filtered, top_n=top_n),
        monthly_series=monthly_series(filtered),
        seasonality=seasonality(filtered),
        consumption_vs_temperature=consumption_vs_temperature(filtered),
        choropleth=join_choropleth(filtered, features, ChoroplethVariable(variable)),
    )
