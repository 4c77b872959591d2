"""Goal Progress - Weight-goal lifecycle and weigh-in ingestion.

A goal is open for its whole life; completion is read off each weigh-in by
comparing the new weight with the target.
"""

from datetime import datetime
from typing import Callable, Optional

from .adherence import hydration_status, sleep_status
from .errors import InvalidGoal, NotFound, parse_input
from .models import (
    Celebration,
    GoalSummary,
    SurveyInput,
    WeightGoal,
    WeightGoalInput,
    WeightLog,
    WeightLogInput,
    WeightLogOutcome,
    utc_now,
)
from .ports import SurveyRepository, WeightGoalRepository
from .thresholds import DEFAULT_PROGRESS_THRESHOLDS, ProgressThresholds, classify_progress


def create_weight_goal(request: WeightGoalInput, now: Optional[datetime] = None) -> WeightGoal:
    """Open a new goal starting at the requested weight."""
    return WeightGoal(
        survey_id=request.survey_id,
        start_weight_kg=request.start_weight_kg,
        target_weight_kg=request.target_weight_kg,
        current_weight_kg=request.start_weight_kg,
        weigh_in_days=request.weigh_in_days,
        created_at=now or utc_now(),
        logs_count=0,
    )


def calculate_progress(start_kg: float, target_kg: float, weight_kg: float) -> tuple[float, float, int]:
    """Calculate how far a weight is along the way from start to target.

    Args:
        start_kg: Weight when the goal was opened
        target_kg: Goal weight
        weight_kg: Weight to measure

    Returns:
        Tuple of (lost_kg, remaining_kg, progress_percent)

    Raises:
        InvalidGoal: If the target is not below the start weight
    """
    total_to_lose = start_kg - target_kg
    if total_to_lose <= 0:
        raise InvalidGoal("Target weight must be below the starting weight")

    lost = start_kg - weight_kg
    progress = min(max(round(lost / total_to_lose * 100), 0), 100)
    remaining = max(weight_kg - target_kg, 0.0)
    return round(lost, 1), round(remaining, 1), progress


def expected_progress(
    goal: WeightGoal, survey: Optional[SurveyInput], now: datetime
) -> Optional[float]:
    """Percent of the goal expected by now, or None without a timeframe."""
    if survey is None:
        return None
    elapsed_days = (now - goal.created_at).total_seconds() / 86400
    if elapsed_days <= 0:
        return None
    return min(elapsed_days / survey.target_days * 100, 100.0)


def celebration_message(lost_kg: float, goal_reached: bool) -> str:
    if goal_reached:
        return f"Goal reached! You've lost {lost_kg:.1f} kg. Amazing work!"
    if lost_kg > 0:
        return f"Great job! You've lost {lost_kg:.1f} kg so far. Keep it up!"
    return f"Nice drop since your last weigh-in! Net change so far: {lost_kg:+.1f} kg."


def apply_weight_log(
    goal: Optional[WeightGoal],
    survey: Optional[SurveyInput],
    log: WeightLogInput | dict,
    now: Optional[datetime] = None,
    thresholds: ProgressThresholds = DEFAULT_PROGRESS_THRESHOLDS,
) -> WeightLogOutcome:
    """Apply a weigh-in to its goal.

    Derived fields on the log are computed from the goal as it stands
    before this weigh-in and never recomputed later.

    Args:
        goal: Snapshot of the goal the log belongs to (None if missing)
        survey: Survey linked to the goal, if any
        log: Weigh-in model or raw mapping of weigh-in fields
        now: Creation timestamp (defaults to current UTC time)
        thresholds: Progress bands used when no timeframe is known

    Returns:
        WeightLogOutcome with the goal fields to persist, the new log,
        and a celebration when weight went down

    Raises:
        ValidationError: If a weigh-in field is outside its bounds
        NotFound: If the goal is missing or is not the log's goal
        InvalidGoal: If the goal has nothing to lose
    """
    log = parse_input(WeightLogInput, log)
    if goal is None or goal.id != log.goal_id:
        raise NotFound(f"Weight goal not found: {log.goal_id}")

    now = now or utc_now()
    previous_kg = goal.current_weight_kg if goal.logs_count > 0 else goal.start_weight_kg
    is_weight_loss = log.weight_kg < previous_kg

    lost_kg, remaining_kg, progress = calculate_progress(
        goal.start_weight_kg, goal.target_weight_kg, log.weight_kg
    )
    status = classify_progress(progress, expected_progress(goal, survey, now), thresholds)

    record = WeightLog(
        goal_id=goal.id,
        weight_kg=log.weight_kg,
        water_liters=log.water_liters,
        sleep_hours=log.sleep_hours,
        notes=log.notes,
        is_weight_loss=is_weight_loss,
        lost_kg=lost_kg,
        remaining_kg=remaining_kg,
        progress=progress,
        progress_status=status,
        hydration=hydration_status(log.water_liters, survey) if log.water_liters is not None else None,
        sleep=sleep_status(log.sleep_hours, survey) if log.sleep_hours is not None else None,
        created_at=now,
    )

    celebration = None
    if is_weight_loss:
        celebration = Celebration(
            message=celebration_message(lost_kg, log.weight_kg <= goal.target_weight_kg),
            remaining_kg=remaining_kg,
        )

    return WeightLogOutcome(
        updated_goal_fields={
            "current_weight_kg": log.weight_kg,
            "logs_count": goal.logs_count + 1,
        },
        log=record,
        celebration=celebration,
    )


def record_weight_log(
    goals: WeightGoalRepository,
    surveys: SurveyRepository,
    log: WeightLogInput,
    clock: Callable[[], datetime] = utc_now,
    thresholds: ProgressThresholds = DEFAULT_PROGRESS_THRESHOLDS,
) -> WeightLogOutcome:
    """Load the goal, apply the weigh-in, and persist the goal's new state.

    The caller is responsible for storing the returned log and for
    serializing concurrent weigh-ins against the same goal.
    """
    goal = goals.get(log.goal_id)
    if goal is None:
        raise NotFound(f"Weight goal not found: {log.goal_id}")

    survey = surveys.get(goal.survey_id) if goal.survey_id else None
    outcome = apply_weight_log(goal, survey, log, clock(), thresholds)
    goals.update(goal.id, outcome.updated_goal_fields)
    return outcome


def summarize_goal(goal: WeightGoal) -> GoalSummary:
    """Progress of a goal as of its current weight."""
    lost_kg, remaining_kg, progress = calculate_progress(
        goal.start_weight_kg, goal.target_weight_kg, goal.current_weight_kg
    )
    return GoalSummary(
        goal_id=goal.id,
        current_weight_kg=goal.current_weight_kg,
        lost_kg=lost_kg,
        remaining_kg=remaining_kg,
        progress=progress,
        logs_count=goal.logs_count,
    )
