"""Choropleth value join.

Averages a dataset variable per entity and attaches the averages to the
service-area features of the map, together with the colour-scale domain.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union
import logging

from energy_dashboard.data_models.dataset_row import DatasetRow
from energy_dashboard.data_models.geo_feature import (
    ChoroplethFeature,
    ChoroplethJoin,
    GeoFeature,
    ValueDomain,
)

logger = logging.getLogger(__name__)

ValueSelector = Callable[[DatasetRow], Optional[float]]


class ChoroplethVariable(str, Enum):
    """Dataset variables the map can be coloured by."""

    CONSUMPTION = "consumption"
    TEMPERATURE = "temperature"
    PRECIPITATION = "precipitation"

    @property
    def unit(self) -> str:
        return _UNITS[self]


_UNITS = {
    ChoroplethVariable.CONSUMPTION: "MWh",
    ChoroplethVariable.TEMPERATURE: "°C",
    ChoroplethVariable.PRECIPITATION: "mm",
}

_SELECTORS: Dict[ChoroplethVariable, ValueSelector] = {
    ChoroplethVariable.CONSUMPTION: lambda r: r.energy_mwh,
    ChoroplethVariable.TEMPERATURE: lambda r: r.temperature,
    ChoroplethVariable.PRECIPITATION: lambda r: r.precipitation,
}


class EntityValueLookup:
    """Per-entity averages with an explicit not-found result."""

    def __init__(self, averages: Dict[int, float]) -> None:
        self._averages = dict(averages)

    def lookup(self, entity_id: int) -> Optional[float]:
        """Return the entity's average, or None when it had no rows."""
        return self._averages.get(entity_id)

    def values(self) -> List[float]:
        return list(self._averages.values())

    def __len__(self) -> int:
        return len(self._averages)


def _resolve_selector(value_selector: Union[ChoroplethVariable, str, ValueSelector]) -> ValueSelector:
    if callable(value_selector):
        return value_selector
    return _SELECTORS[ChoroplethVariable(value_selector)]


def average_per_entity(rows: Sequence[DatasetRow], value_selector: ValueSelector) -> EntityValueLookup:
    """Average `value_selector` per entity.

    A missing value (None) counts as 0: it still adds to the row count of
    its entity.
    """
    sums: Dict[int, float] = {}
    counts: Dict[int, int] = {}
    missing = 0
    for r in rows:
        value = value_selector(r)
        if value is None:
            missing += 1
            value = 0.0
        sums[r.entity_id] = sums.get(r.entity_id, 0.0) + float(value)
        counts[r.entity_id] = counts.get(r.entity_id, 0) + 1

    if missing:
        logger.warning("%d rows had no value for the map variable; counted as 0", missing)

    return EntityValueLookup({eid: sums[eid] / counts[eid] for eid in sums})


def join_choropleth(
    rows: Sequence[DatasetRow],
    features: Sequence[GeoFeature],
    value_selector: Union[ChoroplethVariable, str, ValueSelector] = ChoroplethVariable.CONSUMPTION,
) -> ChoroplethJoin:
    """Join per-entity averages onto map features.

    Features whose entity has no rows get value 0. The domain is the
    (min, max) over the entity averages, not over the features, and is
    None when no entity had rows.
    """
    averages = average_per_entity(rows, _resolve_selector(value_selector))

    joined: List[ChoroplethFeature] = []
    for f in features:
        value = averages.lookup(f.entity_id)
        if value is None:
            logger.debug("No rows for map feature %s (%s); using 0", f.entity_id, f.name)
            value = 0.0
        joined.append(
            ChoroplethFeature(
                entity_id=f.entity_id,
                name=f.name,
                properties=f.properties,
                geometry=f.geometry,
                value=value,
            )
        )

    values = averages.values()
    domain = ValueDomain(min_value=min(values), max_value=max(values)) if values else None

    return ChoroplethJoin(features=joined, domain=domain)


def entity_display_name(features: Sequence[GeoFeature], entity_id: int) -> str:
    """Name of the first feature with this entity id, or a generic label."""
    for f in features:
        if f.entity_id == entity_id:
            return f.name
    return f"Entity {entity_id}"
