"""New-prediction request and response models.

`PredictionInput` is serialized with its aliases, which are the field names
the inference endpoint expects.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PredictionInput(BaseModel):
    """One candidate record for a new prediction.

    Same covariate shape as `DatasetRow`, without the target. Defaults are
    the values the form starts with.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int = Field(default=2024, alias="Año")
    month: int = Field(default=1, alias="IdMes")
    entity_id: int = Field(default=11, alias="IdEmpresa")
    temperature: float = Field(default=16.5, alias="temperatura")
    precipitation: float = Field(default=150.0, alias="precipitacion")
    gdp_monthly: float = Field(default=20_000_000.0, alias="PIB_mensual_interpolado")
    basket_cost: float = Field(default=520.0, alias="COSTO_CANASTA")
    household_income: float = Field(default=450.0, alias="INGRESO_FAMILIAR_MENSUAL")

    def with_field(self, name: str, value: Any) -> "PredictionInput":
        """Return a copy with one field replaced, as the form edits it.

        The copy is validated again, so form text such as "2030" is coerced
        and an empty field raises a pydantic ValidationError.
        """
        if name not in type(self).model_fields:
            raise ValueError(f"Unknown prediction input field: {name!r}")
        return type(self).model_validate({**self.model_dump(), name: value})

    def to_request_body(self) -> dict:
        return self.model_dump(by_alias=True)


class ValidationIssue(BaseModel):
    """First failed check of a `PredictionInput`."""

    field: str
    message: str


class PredictionResponse(BaseModel):
    """Body returned by the inference endpoint."""

    status: str
    prediction: Optional[float] = None
    confidence: Optional[float] = None
    message: Optional[str] = None


class PredictionOutcome(BaseModel):
    prediction: float
    confidence: Optional[float] = None
    message: str = "Prediction completed successfully"


class PredictionHistoryEntry(BaseModel):
    request: PredictionInput
    outcome: PredictionOutcome
    requested_at: datetime
