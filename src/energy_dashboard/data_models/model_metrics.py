from __future__ import annotations

from typing import List

from pydantic import BaseModel, model_validator


class ErrorMetrics(BaseModel):
    mse: float
    rmse: float
    mae: float
    r2: float


class ModelMetrics(BaseModel):
    """Aggregate train/test error metrics from `metricas_modelo.json`."""

    train: ErrorMetrics
    test: ErrorMetrics


class TrainTestPredictions(BaseModel):
    """Actual and predicted targets for the train and test splits.

    Only the target arrays of the exported JSON are kept; the feature
    matrices are not used by any view.
    """

    y_train: List[float]
    y_test: List[float]
    y_pred_train: List[float]
    y_pred_test: List[float]

    @model_validator(mode="after")
    def _paired_lengths(self) -> "TrainTestPredictions":
        if len(self.y_train) != len(self.y_pred_train):
            raise ValueError(
                f"train arrays differ in length: {len(self.y_train)} actual vs {len(self.y_pred_train)} predicted"
            )
        if len(self.y_test) != len(self.y_pred_test):
            raise ValueError(
                f"test arrays differ in length: {len(self.y_test)} actual vs {len(self.y_pred_test)} predicted"
            )
        return self
