"""Dataset row model.

One monthly observation of billed energy for a distribution company, with
the covariates the regression model was trained on.

This corresponds to a single row in `data/df_dataset_unidos5.csv`.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DatasetRow(BaseModel):
    """One (entity, year, month) observation.

    Fields map to columns in the original CSV through aliases. Snake_case
    names are used in the Python model; the loader passes the raw column
    names and pydantic maps them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity_id: int = Field(alias="IdEmpresa")
    year: int = Field(alias="Año")
    month: int = Field(alias="IdMes")
    energy_mwh: float = Field(alias="Energía Facturada (MWh)")

    # Covariates may be blank in the source CSV
    temperature: Optional[float] = Field(default=None, alias="temperatura")
    precipitation: Optional[float] = Field(default=None, alias="precipitacion")
    gdp_monthly: Optional[float] = Field(default=None, alias="PIB_mensual_interpolado")
    basket_cost: Optional[float] = Field(default=None, alias="COSTO_CANASTA")
    household_income: Optional[float] = Field(default=None, alias="INGRESO_FAMILIAR_MENSUAL")

    @field_validator("month")
    @classmethod
    def _month_in_range(cls, value: int) -> int:
        if not 1 <= value <= 12:
            raise ValueError(f"month must be in [1, 12], got {value}")
        return value

    @property
    def period_key(self) -> str:
        """Zero-padded `YYYY-MM` key; sorts lexicographically in chronological order."""
        return f"{self.year}-{self.month:02d}"
