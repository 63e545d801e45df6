"""Geographic feature and choropleth join models."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


# GeoJSON property names used by the service-area map
GEO_ID_PROPERTY = "IDSISDAT"
GEO_NAME_PROPERTY = "Arco_Nombr"


class GeoFeature(BaseModel):
    """One service area of the map.

    `geometry` is never interpreted here; it is handed to the map renderer
    exactly as it was read from the GeoJSON file.
    """

    entity_id: int
    name: str
    properties: Dict[str, Any] = Field(default_factory=dict)
    geometry: Any = None

    @classmethod
    def from_geojson(cls, feature: Dict[str, Any]) -> "GeoFeature":
        if not isinstance(feature, dict):
            raise ValueError(f"GeoJSON feature must be an object, got {type(feature).__name__}")
        props = feature.get("properties") or {}
        if not isinstance(props, dict):
            raise ValueError("GeoJSON feature properties must be an object")
        props = dict(props)
        if GEO_ID_PROPERTY not in props:
            raise ValueError(f"GeoJSON feature is missing the {GEO_ID_PROPERTY!r} property")
        try:
            entity_id = int(props[GEO_ID_PROPERTY])
        except (TypeError, ValueError):
            raise ValueError(f"GeoJSON feature has an invalid {GEO_ID_PROPERTY!r}: {props[GEO_ID_PROPERTY]!r}") from None
        name = props.get(GEO_NAME_PROPERTY) or f"Entity {entity_id}"
        return cls(
            entity_id=entity_id,
            name=str(name),
            properties=props,
            geometry=feature.get("geometry"),
        )


class ChoroplethFeature(GeoFeature):
    """A `GeoFeature` decorated with the value to colour it by."""

    value: float


class ValueDomain(BaseModel):
    """Colour-scale domain of a choropleth."""

    min_value: float
    max_value: float

    @model_validator(mode="after")
    def _ordered(self) -> "ValueDomain":
        if self.min_value > self.max_value:
            raise ValueError(
                f"min_value ({self.min_value}) must not exceed max_value ({self.max_value})"
            )
        return self


class ChoroplethJoin(BaseModel):
    """Joined features plus the colour-scale domain.

    `domain` is None when no entity had data, in which case there is no
    scale to draw.
    """

    features: List[ChoroplethFeature]
    domain: Optional[ValueDomain] = None

    @property
    def has_domain(self) -> bool:
        return self.domain is not None
