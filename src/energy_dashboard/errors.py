"""Exception types raised by the dashboard services."""
from __future__ import annotations

from energy_dashboard.data_models.prediction import ValidationIssue


class DashboardLoadError(RuntimeError):
    """A required asset could not be read or parsed.

    Fatal for the dashboard as a whole; nothing is rendered from a partial load.
    """


class PredictionValidationError(ValueError):
    """A prediction request failed validation and was not sent."""

    def __init__(self, issue: ValidationIssue) -> None:
        super().__init__(issue.message)
        self.issue = issue


class PredictionServiceError(RuntimeError):
    """The inference endpoint failed or returned an unusable response."""
