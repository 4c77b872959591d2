"""Adherence Status - Hydration and sleep measured against personal targets.

Targets come from the linked survey when there is one, otherwise from the
global defaults.
"""

from datetime import datetime
from typing import Optional

from . import constants
from .metrics import calculate_water_target, compute_survey_metrics
from .models import (
    AdherenceResult,
    HydrationLog,
    HydrationLogInput,
    SleepLog,
    SleepLogInput,
    SurveyInput,
    WaterReminder,
    WaterReminderInput,
    WaterReminderPlan,
    utc_now,
)
from .thresholds import classify_adherence


def resolve_water_target(survey: Optional[SurveyInput]) -> float:
    """Daily water target in liters for a user."""
    if survey is None:
        return constants.DEFAULT_WATER_TARGET_LITERS
    return compute_survey_metrics(survey).water_target_liters


def resolve_sleep_target(survey: Optional[SurveyInput]) -> float:
    """Nightly sleep target in hours for a user."""
    if survey is None:
        return constants.DEFAULT_SLEEP_TARGET_HOURS
    return compute_survey_metrics(survey).sleep_target_hours


def hydration_status(liters: float, survey: Optional[SurveyInput] = None) -> AdherenceResult:
    return classify_adherence(liters, resolve_water_target(survey))


def sleep_status(hours: float, survey: Optional[SurveyInput] = None) -> AdherenceResult:
    return classify_adherence(hours, resolve_sleep_target(survey))


def build_hydration_log(
    entry: HydrationLogInput,
    survey: Optional[SurveyInput] = None,
    now: Optional[datetime] = None,
) -> HydrationLog:
    """Create a standalone hydration log with its status.

    Args:
        entry: Validated hydration input
        survey: The user's survey, if linked
        now: Creation timestamp (defaults to current UTC time)

    Returns:
        HydrationLog classified against the resolved target
    """
    target = resolve_water_target(survey)
    result = classify_adherence(entry.liters_consumed, target)
    return HydrationLog(
        log_date=entry.log_date,
        liters_consumed=entry.liters_consumed,
        target_liters=target,
        status=result.status,
        percentage=result.percentage,
        created_at=now or utc_now(),
    )


def build_sleep_log(
    entry: SleepLogInput,
    survey: Optional[SurveyInput] = None,
    now: Optional[datetime] = None,
) -> SleepLog:
    """Create a standalone sleep log with its status."""
    target = resolve_sleep_target(survey)
    result = classify_adherence(entry.sleep_hours, target)
    return SleepLog(
        log_date=entry.log_date,
        sleep_hours=entry.sleep_hours,
        sleep_quality=entry.sleep_quality,
        target_hours=target,
        status=result.status,
        percentage=result.percentage,
        created_at=now or utc_now(),
    )


def plan_water_reminders(request: WaterReminderInput) -> WaterReminderPlan:
    """Spread the day's water target evenly across reminder slots.

    Slots start at start_hour and repeat every interval_hours up to and
    including end_hour.
    """
    target = calculate_water_target(request.weight_kg, request.activity_minutes)
    hours = list(range(request.start_hour, request.end_hour + 1, request.interval_hours))
    per_slot = round(target / len(hours), 2)

    return WaterReminderPlan(
        target_liters=target,
        reminders=[WaterReminder(time=f"{hour:02d}:00", liters=per_slot) for hour in hours],
    )
