"""Per-entity evaluation metric models.

Two CSV layouts have been published for `metrics_by_company.csv`:

- v1: `IdEmpresa, NombreEmpresa, N_Puntos, Consumo_Promedio, RMSE, MAE, R2,
  Error_Relativo_Porcentual`
- v2: `IdEmpresa, NombreEmpresa, N_Puntos, Consumo_Promedio, RMSE, MAE, MAPE`
  (R2 optional)

Both are kept as explicit variants and converted to the canonical
`EntityMetrics` that the metrics table sorts.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


SchemaVersion = Literal["v1", "v2"]


class EntityMetrics(BaseModel):
    """Canonical evaluation metrics for one entity."""

    model_config = ConfigDict(frozen=True)

    entity_id: int
    entity_name: str
    point_count: int
    mean_consumption: float
    rmse: float
    mae: float
    r2: Optional[float] = None
    relative_error_pct: Optional[float] = None  # mean relative error, in percent
    schema_version: SchemaVersion = "v1"


class EntityMetricsV1(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: Literal["v1"] = "v1"
    entity_id: int = Field(alias="IdEmpresa")
    entity_name: str = Field(alias="NombreEmpresa")
    point_count: int = Field(alias="N_Puntos")
    mean_consumption: float = Field(alias="Consumo_Promedio")
    rmse: float = Field(alias="RMSE")
    mae: float = Field(alias="MAE")
    r2: float = Field(alias="R2")
    relative_error_pct: float = Field(alias="Error_Relativo_Porcentual")

    def to_canonical(self) -> EntityMetrics:
        return EntityMetrics(
            entity_id=self.entity_id,
            entity_name=self.entity_name,
            point_count=self.point_count,
            mean_consumption=self.mean_consumption,
            rmse=self.rmse,
            mae=self.mae,
            r2=self.r2,
            relative_error_pct=self.relative_error_pct,
            schema_version="v1",
        )


class EntityMetricsV2(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: Literal["v2"] = "v2"
    entity_id: int = Field(alias="IdEmpresa")
    entity_name: str = Field(alias="NombreEmpresa")
    point_count: int = Field(alias="N_Puntos")
    mean_consumption: float = Field(alias="Consumo_Promedio")
    rmse: float = Field(alias="RMSE")
    mae: float = Field(alias="MAE")
    mape: float = Field(alias="MAPE")
    r2: Optional[float] = Field(default=None, alias="R2")

    def to_canonical(self) -> EntityMetrics:
        return EntityMetrics(
            entity_id=self.entity_id,
            entity_name=self.entity_name,
            point_count=self.point_count,
            mean_consumption=self.mean_consumption,
            rmse=self.rmse,
            mae=self.mae,
            r2=self.r2,
            relative_error_pct=self.mape,
            schema_version="v2",
        )
