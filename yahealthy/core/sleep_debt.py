"""Sleep Debt - Cumulative unmet sleep over the tracked days.

Surplus nights never pay off earlier shortfalls; the whole history is
recomputed on every call.
"""

import math
from typing import Sequence

from . import constants
from .errors import InvalidInput
from .models import SleepDebtResult


def _check_hours(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInput(f"{name} must be a finite number")
    if value < 0:
        raise InvalidInput(f"{name} must not be negative")
    return float(value)


def compute_sleep_debt(target_hours: float, sleep_hours: Sequence[float]) -> SleepDebtResult:
    """Accumulate sleep debt and estimate the days needed to recover it.

    Args:
        target_hours: Nightly sleep target
        sleep_hours: Hours slept per tracked day, oldest first

    Returns:
        SleepDebtResult with debt, average and recovery estimate

    Raises:
        InvalidInput: On an empty history, a non-positive target, or a
            non-finite/negative entry
    """
    target = _check_hours("target_hours", target_hours)
    if target <= 0:
        raise InvalidInput("target_hours must be greater than 0")
    if not sleep_hours:
        raise InvalidInput("At least one day of sleep is required")

    nights = [_check_hours(f"sleep_hours[{i}]", hours) for i, hours in enumerate(sleep_hours)]

    debt = sum(max(0.0, target - hours) for hours in nights)
    average = sum(nights) / len(nights)

    # Recovering faster than half an hour a night is not assumed.
    per_night = max(target - average, constants.MIN_RECOVERY_HOURS_PER_DAY)
    days_to_recover = math.ceil(round(debt / per_night, 6))

    return SleepDebtResult(
        target_hours=target,
        debt=round(debt, 2),
        days_tracked=len(nights),
        average_sleep=round(average, 2),
        days_to_recover=days_to_recover,
    )
