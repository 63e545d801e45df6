"""CLI to validate a new-prediction request and send it to the inference endpoint.

Unspecified fields take the form defaults; `--use-dataset-means` fills the
covariates with the dataset means first.
"""
from __future__ import annotations

from pathlib import Path
import argparse
import json
import logging

from pydantic import ValidationError

from energy_dashboard.data_models.prediction import PredictionInput
from energy_dashboard.errors import PredictionServiceError, PredictionValidationError
from energy_dashboard.services.filter_service import available_entities
from energy_dashboard.services.ingestion_service import load_dataset_from_csv
from energy_dashboard.services.prediction_service import PredictionClient, suggest_covariates
from energy_dashboard.settings import get_settings

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = {
    "year": int,
    "month": int,
    "entity_id": int,
    "temperature": float,
    "precipitation": float,
    "gdp_monthly": float,
    "basket_cost": float,
    "household_income": float,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Request a consumption prediction for one month and company.")
    for name, kind in _NUMERIC_FIELDS.items():
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, type=kind, default=None)
    parser.add_argument("--use-dataset-means", dest="use_means", action="store_true",
                        help="Start from the dataset means of the covariates.")
    parser.add_argument("--url", dest="url", type=str, default=None,
                        help="Prediction endpoint (defaults to the configured prediction_url).")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    dataset_path = Path(settings.data_dir) / settings.dataset_file
    try:
        rows = load_dataset_from_csv(dataset_path)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("Could not load dataset %s: %s", dataset_path, exc)
        return 1

    payload = PredictionInput()
    if args.use_means:
        for name, value in (suggest_covariates(rows) or {}).items():
            payload = payload.with_field(name, value)
    for name in _NUMERIC_FIELDS:
        value = getattr(args, name)
        if value is not None:
            payload = payload.with_field(name, value)

    client = PredictionClient(args.url or settings.prediction_url, timeout=settings.prediction_timeout)
    try:
        outcome = client.predict(payload, available_entities(rows))
    except PredictionValidationError as exc:
        logger.error("Invalid request (%s): %s", exc.issue.field, exc.issue.message)
        return 2
    except PredictionServiceError as exc:
        logger.error("Prediction failed: %s", exc)
        return 1

    print(json.dumps({"request": payload.to_request_body(), **outcome.model_dump()}, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
