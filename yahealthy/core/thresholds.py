"""Threshold Classification - Map measured values to status bands.

All functions are pure: same input always produces same output, no side effects.
"""

import math
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from . import constants
from .errors import InvalidInput
from .models import AdherenceResult, AdherenceStatus, Level


def _require_finite(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{name} must be a number")
    if not math.isfinite(value):
        raise InvalidInput(f"{name} must be finite")
    return float(value)


def calculate_percentage(actual: float, target: float) -> float:
    """Express actual as a percentage of target, clamped to [0, 1000].

    Raises:
        InvalidInput: If either value is non-finite, actual is negative,
            or target is not positive
    """
    actual = _require_finite("actual", actual)
    target = _require_finite("target", target)
    if target <= 0:
        raise InvalidInput("target must be greater than 0")
    if actual < 0:
        raise InvalidInput("actual must not be negative")

    percentage = actual / target * 100
    return min(max(percentage, 0.0), constants.MAX_PERCENTAGE)


def status_for_percentage(percentage: float) -> AdherenceStatus:
    if percentage >= constants.GREEN_MIN_PERCENT:
        return "green"
    if percentage >= constants.YELLOW_MIN_PERCENT:
        return "yellow"
    return "red"


def classify_adherence(actual: float, target: float) -> AdherenceResult:
    """Classify a daily habit value against its target.

    Status is decided on the exact percentage; the reported percentage
    is rounded to the nearest integer.

    Args:
        actual: Measured value (liters, hours, ...)
        target: Target in the same unit

    Returns:
        AdherenceResult with status and rounded percentage
    """
    percentage = calculate_percentage(actual, target)
    return AdherenceResult(
        status=status_for_percentage(percentage),
        percentage=round(percentage),
    )


def classify_level(score: float) -> Level:
    """Four-level classification of a 0-100 score."""
    score = _require_finite("score", score)
    for minimum, level in constants.LEVEL_BANDS:
        if score >= minimum:
            return level
    return constants.LEVEL_MIN


class ProgressThresholds(BaseModel):
    """Bands for weight-goal progress when no timeframe is known.

    Progress at or above green_min is green, at or above yellow_min
    is yellow, anything lower is red.
    """

    green_min: float = Field(default=constants.PROGRESS_GREEN_MIN, ge=0, le=100)
    yellow_min: float = Field(default=constants.PROGRESS_YELLOW_MIN, ge=0, le=100)

    @model_validator(mode="after")
    def _check_order(self) -> "ProgressThresholds":
        if self.yellow_min > self.green_min:
            raise ValueError("yellow_min must not exceed green_min")
        return self


DEFAULT_PROGRESS_THRESHOLDS = ProgressThresholds()


def classify_progress(
    progress: float,
    expected: Optional[float] = None,
    thresholds: ProgressThresholds = DEFAULT_PROGRESS_THRESHOLDS,
) -> AdherenceStatus:
    """Classify weight-goal progress.

    Args:
        progress: Percent of the goal achieved (0-100)
        expected: Percent expected by now, if a timeframe is known
        thresholds: Bands used when there is no usable expectation

    Returns:
        red, yellow or green
    """
    progress = _require_finite("progress", progress)
    if expected is not None and expected > 0:
        return status_for_percentage(calculate_percentage(max(progress, 0.0), expected))

    if progress >= thresholds.green_min:
        return "green"
    if progress >= thresholds.yellow_min:
        return "yellow"
    return "red"
