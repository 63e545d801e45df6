"""Views over the model's prediction results."""
from __future__ import annotations

from typing import Dict, Sequence

from energy_dashboard.data_models.aggregates import ALL, EntityFilter, ScatterSeries
from energy_dashboard.data_models.model_metrics import TrainTestPredictions
from energy_dashboard.data_models.prediction_result import EntityPredictionSeries, PredictionResult


def entity_prediction_series(
    results: Sequence[PredictionResult],
    entity: EntityFilter = ALL,
) -> EntityPredictionSeries:
    """Actual vs predicted values of one entity, oldest first.

    With "all" the series of the lowest entity id is shown. An entity with
    no results gives an empty series.
    """
    entities = sorted({r.entity_id for r in results})

    if entity == ALL:
        selected = entities[0] if entities else None
    else:
        selected = entity

    points = sorted((r for r in results if r.entity_id == selected), key=lambda r: r.date)
    return EntityPredictionSeries(entity_id=selected, available_entities=entities, points=points)


def train_test_scatter(data: TrainTestPredictions) -> Dict[str, ScatterSeries]:
    """Actual (x) vs predicted (y) pairs for the train and test splits."""
    return {
        "train": ScatterSeries(x=list(data.y_train), y=list(data.y_pred_train)),
        "test": ScatterSeries(x=list(data.y_test), y=list(data.y_pred_test)),
    }
