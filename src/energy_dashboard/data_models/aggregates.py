"""Derived-view models produced by the aggregation services."""
from __future__ import annotations

from typing import Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from energy_dashboard.data_models.geo_feature import ChoroplethJoin


ALL = "all"

EntityFilter = Union[int, Literal["all"]]
YearFilter = Union[int, Literal["all"]]


class DashboardFilter(BaseModel):
    """Currently selected entity and year.

    Passed explicitly to every view computation; "all" disables filtering
    on that dimension.
    """

    model_config = ConfigDict(frozen=True)

    entity: EntityFilter = ALL
    year: YearFilter = ALL


class GroupAverage(BaseModel):
    model_config = ConfigDict(frozen=True)

    # any hashable returned by the grouping function, e.g. (year, month)
    key: Any
    average: float
    count: int


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: str  # "YYYY-MM"
    average: float
    count: int


class SeasonalityPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int
    month_name: str
    average: float


class ScatterSeries(BaseModel):
    x: List[float]
    y: List[float]


class DatasetSummary(BaseModel):
    """Descriptive statistics of the consumption dataset."""

    total_records: int
    total_entities: int
    period_start: str
    period_end: str

    mean_consumption: float
    median_consumption: float
    std_consumption: float
    min_consumption: float
    max_consumption: float

    # (min, max) of each covariate; None when every value is missing
    temperature_range: Optional[Tuple[float, float]] = None
    precipitation_range: Optional[Tuple[float, float]] = None
    gdp_range: Optional[Tuple[float, float]] = None


class DatasetViews(BaseModel):
    """Every dataset-analysis view for one filter context."""

    dashboard_filter: DashboardFilter
    record_count: int
    top_entities: List[GroupAverage]
    monthly_series: List[SeriesPoint]
    seasonality: List[SeasonalityPoint]
    consumption_vs_temperature: ScatterSeries
    choropleth: ChoroplethJoin
