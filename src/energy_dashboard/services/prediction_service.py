"""New-prediction requests: validation, submission and history.

Requests are validated locally before anything is sent. The inference
endpoint expects the aliased `PredictionInput` body and answers with
`{"status": "success", "prediction": ..., "confidence": ...}`.
"""
from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple
import logging

import httpx
from pydantic import ValidationError

from energy_dashboard.data_models.dataset_row import DatasetRow
from energy_dashboard.data_models.prediction import (
    PredictionHistoryEntry,
    PredictionInput,
    PredictionOutcome,
    PredictionResponse,
    ValidationIssue,
)
from energy_dashboard.errors import PredictionServiceError, PredictionValidationError

logger = logging.getLogger(__name__)


YEAR_RANGE = (2009, 2025)
MONTH_RANGE = (1, 12)
TEMPERATURE_RANGE = (-10.0, 50.0)
PRECIPITATION_RANGE = (0.0, 1000.0)

DEFAULT_HISTORY_SIZE = 10


def _within(value: float, bounds: Tuple[float, float]) -> bool:
    return bounds[0] <= value <= bounds[1]


# Checked in this order; the first failing rule is reported.
_RULES: List[Tuple[str, Callable[[PredictionInput, Collection[int]], bool], str]] = [
    ("year", lambda p, _: _within(p.year, YEAR_RANGE), "Year must be between 2009 and 2025"),
    ("month", lambda p, _: _within(p.month, MONTH_RANGE), "Month must be between 1 and 12"),
    ("entity_id", lambda p, known: p.entity_id in known, "A valid company must be selected"),
    ("temperature", lambda p, _: _within(p.temperature, TEMPERATURE_RANGE),
     "Temperature must be between -10°C and 50°C"),
    ("precipitation", lambda p, _: _within(p.precipitation, PRECIPITATION_RANGE),
     "Precipitation must be between 0 and 1000 mm"),
    ("gdp_monthly", lambda p, _: p.gdp_monthly >= 0, "Monthly GDP must not be negative"),
    ("basket_cost", lambda p, _: p.basket_cost >= 0, "Basket cost must not be negative"),
    ("household_income", lambda p, _: p.household_income >= 0, "Household income must not be negative"),
]


def validate_prediction_input(
    payload: PredictionInput,
    known_entity_ids: Collection[int],
) -> Optional[ValidationIssue]:
    """Return the first failed check, or None when the input is valid."""
    for field, check, message in _RULES:
        if not check(payload, known_entity_ids):
            return ValidationIssue(field=field, message=message)
    return None


def suggest_covariates(rows: Sequence[DatasetRow]) -> Optional[dict]:
    """Dataset means of the covariates, rounded the way the form shows them.

    Missing values are ignored. Returns None for an empty dataset.
    """
    if not rows:
        return None

    def _mean(values: List[Optional[float]]) -> Optional[float]:
        present = [v for v in values if v is not None]
        return sum(present) / len(present) if present else None

    means = {
        "temperature": (_mean([r.temperature for r in rows]), 1),
        "precipitation": (_mean([r.precipitation for r in rows]), 1),
        "gdp_monthly": (_mean([r.gdp_monthly for r in rows]), 0),
        "basket_cost": (_mean([r.basket_cost for r in rows]), 2),
        "household_income": (_mean([r.household_income for r in rows]), 2),
    }
    return {
        field: float(round(value, digits))
        for field, (value, digits) in means.items()
        if value is not None
    }


class PredictionClient:
    """HTTP client for the inference endpoint."""

    def __init__(self, url: str, timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    def predict(self, payload: PredictionInput, known_entity_ids: Collection[int]) -> PredictionOutcome:
        """Validate `payload` and request a prediction for it.

        Raises PredictionValidationError without contacting the endpoint when
        validation fails, and PredictionServiceError for any failed or
        unusable response.
        """
        issue = validate_prediction_input(payload, known_entity_ids)
        if issue is not None:
            raise PredictionValidationError(issue)

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self._url, json=payload.to_request_body())
                response.raise_for_status()
                body = PredictionResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Prediction endpoint returned HTTP %s: %s",
                exc.response.status_code,
                exc.response.text,
            )
            raise PredictionServiceError("Prediction endpoint returned an error response") from exc
        except httpx.RequestError as exc:
            logger.error("Could not reach prediction endpoint %s: %s", self._url, exc)
            raise PredictionServiceError("Prediction endpoint is unreachable") from exc
        except (ValueError, ValidationError) as exc:
            logger.error("Malformed prediction response: %s", exc)
            raise PredictionServiceError("Prediction endpoint returned a malformed response") from exc

        if body.status != "success":
            raise PredictionServiceError(f"Prediction failed: {body.message or 'unknown error'}")
        if body.prediction is None:
            raise PredictionServiceError("Prediction endpoint returned no prediction value")

        logger.info(
            "Prediction for entity %s (%s-%02d): %.2f",
            payload.entity_id,
            payload.year,
            payload.month,
            body.prediction,
        )
        return PredictionOutcome(prediction=body.prediction, confidence=body.confidence)


class PredictionHistory:
    """Most recent successful predictions, newest first."""

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._entries: List[PredictionHistoryEntry] = []

    def record(
        self,
        request: PredictionInput,
        outcome: PredictionOutcome,
        requested_at: Optional[datetime] = None,
    ) -> PredictionHistoryEntry:
        entry = PredictionHistoryEntry(
            request=request,
            outcome=outcome,
            requested_at=requested_at or datetime.now(),
        )
        self._entries = [entry] + self._entries[: self._max_size - 1]
        return entry

    @property
    def entries(self) -> List[PredictionHistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
