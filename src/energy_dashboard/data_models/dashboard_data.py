from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict

from energy_dashboard.data_models.dataset_row import DatasetRow
from energy_dashboard.data_models.entity_metrics import EntityMetrics, SchemaVersion
from energy_dashboard.data_models.geo_feature import GeoFeature
from energy_dashboard.data_models.model_metrics import ModelMetrics, TrainTestPredictions
from energy_dashboard.data_models.prediction_result import PredictionResult


class DashboardData(BaseModel):
    """All assets the dashboard needs, loaded together.

    The versions record which layout each versioned table was read with.
    """

    model_config = ConfigDict(protected_namespaces=())

    dataset: List[DatasetRow]
    model_metrics: ModelMetrics
    prediction_results: List[PredictionResult]
    prediction_results_version: SchemaVersion
    entity_metrics: List[EntityMetrics]
    entity_metrics_version: SchemaVersion
    train_test: TrainTestPredictions
    features: List[GeoFeature]
