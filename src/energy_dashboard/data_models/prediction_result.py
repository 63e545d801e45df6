"""Per-time-step prediction result models.

`resultado_modelo.csv` exists in two layouts:

- v1: `fecha, año, mes, IdEmpresa, valor_real, prediccion, error, error_abs,
  error_porcentual`
- v2: `fecha, IdEmpresa, y_true, y_pred`
"""
from __future__ import annotations

import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from energy_dashboard.data_models.entity_metrics import SchemaVersion


class PredictionResult(BaseModel):
    """Canonical actual-vs-predicted observation for one entity and date."""

    model_config = ConfigDict(frozen=True)

    entity_id: int
    date: datetime.date
    actual: float
    predicted: float
    error: Optional[float] = None
    error_pct: Optional[float] = None
    schema_version: SchemaVersion = "v1"


class PredictionResultV1(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: Literal["v1"] = "v1"
    date: datetime.date = Field(alias="fecha")
    year: Optional[int] = Field(default=None, alias="año")
    month: Optional[int] = Field(default=None, alias="mes")
    entity_id: int = Field(alias="IdEmpresa")
    actual: float = Field(alias="valor_real")
    predicted: float = Field(alias="prediccion")
    error: Optional[float] = None
    error_abs: Optional[float] = None
    error_pct: Optional[float] = Field(default=None, alias="error_porcentual")

    def to_canonical(self) -> PredictionResult:
        return PredictionResult(
            entity_id=self.entity_id,
            date=self.date,
            actual=self.actual,
            predicted=self.predicted,
            error=self.error,
            error_pct=self.error_pct,
            schema_version="v1",
        )


class PredictionResultV2(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: Literal["v2"] = "v2"
    date: datetime.date = Field(alias="fecha")
    entity_id: int = Field(alias="IdEmpresa")
    y_true: float
    y_pred: float

    def to_canonical(self) -> PredictionResult:
        return PredictionResult(
            entity_id=self.entity_id,
            date=self.date,
            actual=self.y_true,
            predicted=self.y_pred,
            error=self.y_true - self.y_pred,
            schema_version="v2",
        )


class EntityPredictionSeries(BaseModel):
    """Chronological actual-vs-predicted series for a single entity."""

    entity_id: Optional[int]
    available_entities: List[int]
    points: List[PredictionResult]
