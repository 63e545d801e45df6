"""Asset ingestion.

Reads the exported CSV and JSON assets into typed models. Each loader
raises FileNotFoundError or ValueError on a bad file; `load_dashboard_data`
turns any of those into a single DashboardLoadError.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import json
import logging
import math

import pandas as pd
from pydantic import ValidationError

from energy_dashboard.data_models.dashboard_data import DashboardData
from energy_dashboard.data_models.dataset_row import DatasetRow
from energy_dashboard.data_models.entity_metrics import (
    EntityMetrics,
    EntityMetricsV1,
    EntityMetricsV2,
    SchemaVersion,
)
from energy_dashboard.data_models.geo_feature import GeoFeature
from energy_dashboard.data_models.model_metrics import ModelMetrics, TrainTestPredictions
from energy_dashboard.data_models.prediction_result import (
    PredictionResult,
    PredictionResultV1,
    PredictionResultV2,
)
from energy_dashboard.errors import DashboardLoadError
from energy_dashboard.settings import Settings

logger = logging.getLogger(__name__)


DATASET_REQUIRED_COLUMNS = {"IdEmpresa", "Año", "IdMes", "Energía Facturada (MWh)"}


def _read_csv(csv_path: Path | str, label: str) -> pd.DataFrame:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"{label} CSV file not found: {path}")

    df = pd.read_csv(path, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame rows as dicts, with NaN cells mapped to None."""
    return [
        {k: (None if isinstance(v, float) and math.isnan(v) else v) for k, v in rec.items()}
        for rec in df.to_dict(orient="records")
    ]


def _read_json(json_path: Path | str, label: str) -> Any:
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"{label} JSON file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dataset_from_csv(csv_path: Path | str) -> List[DatasetRow]:
    """Load the consumption dataset into a list of DatasetRow objects."""
    df = _read_csv(csv_path, "Dataset")

    missing = DATASET_REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns in dataset CSV: {sorted(missing)}")

    rows = [DatasetRow.model_validate(rec) for rec in _records(df)]

    blank = sum(1 for r in rows if r.temperature is None or r.precipitation is None)
    if blank:
        logger.warning("%d dataset rows have a blank temperature or precipitation", blank)

    logger.info("Loaded %d dataset rows from %s", len(rows), csv_path)
    return rows


def detect_entity_metrics_version(columns) -> SchemaVersion:
    cols = set(columns)
    if "MAPE" in cols:
        return "v2"
    if "Error_Relativo_Porcentual" in cols:
        return "v1"
    raise ValueError(f"Unrecognised per-entity metrics layout; columns: {sorted(cols)}")


def detect_prediction_results_version(columns) -> SchemaVersion:
    cols = set(columns)
    if {"y_true", "y_pred"} <= cols:
        return "v2"
    if {"valor_real", "prediccion"} <= cols:
        return "v1"
    raise ValueError(f"Unrecognised prediction results layout; columns: {sorted(cols)}")


def load_entity_metrics_from_csv(csv_path: Path | str) -> Tuple[List[EntityMetrics], SchemaVersion]:
    """Load the per-entity metrics table, detecting its layout from the header."""
    df = _read_csv(csv_path, "Entity metrics")
    version = detect_entity_metrics_version(df.columns)
    model = EntityMetricsV2 if version == "v2" else EntityMetricsV1

    metrics = [model.model_validate(rec).to_canonical() for rec in _records(df)]
    logger.info("Loaded %d entity metrics (%s layout) from %s", len(metrics), version, csv_path)
    return metrics, version


def load_prediction_results_from_csv(csv_path: Path | str) -> Tuple[List[PredictionResult], SchemaVersion]:
    """Load per-time-step prediction results, detecting their layout from the header."""
    df = _read_csv(csv_path, "Prediction results")
    version = detect_prediction_results_version(df.columns)
    if "fecha" not in df.columns:
        raise ValueError("Missing required column in prediction results CSV: 'fecha'")
    df["fecha"] = pd.to_datetime(df["fecha"]).dt.date

    model = PredictionResultV2 if version == "v2" else PredictionResultV1
    results = [model.model_validate(rec).to_canonical() for rec in _records(df)]
    logger.info("Loaded %d prediction results (%s layout) from %s", len(results), version, csv_path)
    return results, version


def load_model_metrics_from_json(json_path: Path | str) -> ModelMetrics:
    return ModelMetrics.model_validate(_read_json(json_path, "Model metrics"))


def load_train_test_from_json(json_path: Path | str) -> TrainTestPredictions:
    raw = _read_json(json_path, "Train/test")
    if not isinstance(raw, dict):
        raise ValueError(f"{json_path} must hold a JSON object of prediction arrays")
    return TrainTestPredictions(
        y_train=raw["y_train_original"],
        y_test=raw["y_test_original"],
        y_pred_train=raw["y_pred_train"],
        y_pred_test=raw["y_pred_test"],
    )


def load_geo_features_from_json(json_path: Path | str) -> List[GeoFeature]:
    """Load the service-area GeoJSON FeatureCollection."""
    raw = _read_json(json_path, "GeoJSON")
    if not isinstance(raw, dict) or not isinstance(raw.get("features"), list):
        raise ValueError(f"{json_path} is not a GeoJSON FeatureCollection")

    features = [GeoFeature.from_geojson(f) for f in raw["features"]]
    ids = [f.entity_id for f in features]
    if len(ids) != len(set(ids)):
        logger.warning("GeoJSON %s contains %d duplicate feature ids", json_path, len(ids) - len(set(ids)))

    logger.info("Loaded %d map features from %s", len(features), json_path)
    return features


def load_dashboard_data(settings: Optional[Settings] = None) -> DashboardData:
    """Load every asset the dashboard needs.

    Any failure is fatal: a DashboardLoadError is raised and nothing is
    returned.
    """
    settings = settings or Settings()
    data_dir = Path(settings.data_dir)

    try:
        dataset = load_dataset_from_csv(data_dir / settings.dataset_file)
        model_metrics = load_model_metrics_from_json(data_dir / settings.model_metrics_file)
        results, results_version = load_prediction_results_from_csv(data_dir / settings.prediction_results_file)
        entity_metrics, metrics_version = load_entity_metrics_from_csv(data_dir / settings.entity_metrics_file)
        train_test = load_train_test_from_json(data_dir / settings.train_test_file)
        features = load_geo_features_from_json(data_dir / settings.geojson_file)
    except (OSError, ValueError, KeyError, ValidationError) as exc:
        logger.error("Failed to load dashboard data from %s: %s", data_dir, exc)
        raise DashboardLoadError(f"Could not load dashboard data from {data_dir}: {exc}") from exc

    return DashboardData(
        dataset=dataset,
        model_metrics=model_metrics,
        prediction_results=results,
        prediction_results_version=results_version,
        entity_metrics=entity_metrics,
        entity_metrics_version=metrics_version,
        train_test=train_test,
        features=features,
    )
