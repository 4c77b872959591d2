"""MCP Server - Tool definitions for Claude integration.

Defines all MCP tools that Claude can invoke for health tracking.
Each tool validates its input, calls the pure core, persists through the
configured store, and reports engine errors as error payloads.
"""

import logging
import threading
from datetime import date, timedelta

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.adherence import (
    build_hydration_log,
    build_sleep_log,
    plan_water_reminders as build_water_reminders,
    resolve_sleep_target,
)
from ..core.errors import EngineError, NotFound, ValidationError, error_payload, parse_input
from ..core.grocery import build_grocery_plan, optimize_grocery_plan
from ..core.metrics import compute_survey_metrics
from ..core.models import (
    HydrationLogInput,
    SleepLogInput,
    Survey,
    SurveyInput,
    WaterReminderInput,
    WeightGoalInput,
    WeightLogInput,
    utc_now,
)
from ..core.progress import create_weight_goal as open_weight_goal
from ..core.progress import record_weight_log, summarize_goal
from ..core.readiness import score_readiness
from ..core.reports import generate_weekly_report
from ..core.sleep_debt import compute_sleep_debt
from .config import ServiceConfig
from .firestore_client import FirestoreConfig, FirestoreStore, HealthFirestoreClient
from .memory_store import MemoryStore


logger = logging.getLogger(__name__)

# Configure transport security for Cloud Run deployment
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)

# Initialize FastMCP server with stateless HTTP for cloud deployments
mcp = FastMCP(
    "yahealthy",
    instructions="""YAHEALTHY - Personal health metrics assistant.

Use these tools to compute body metrics from a survey, track a weight goal,
log daily water and sleep, score training readiness, and plan groceries.

On first use, call submit_survey and keep the returned survey id; pass it to
create_weight_goal, log_hydration and log_sleep so targets are personalized.
After each weigh-in, show the progress status and any celebration message.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Injected clock; tests replace it for deterministic timestamps
clock = utc_now

# Lazy-initialized configuration and store
_config: ServiceConfig | None = None
_store: MemoryStore | FirestoreStore | None = None

# Weigh-ins on the same goal are applied one at a time; goals share a
# fixed pool of lock stripes
LOCK_STRIPES = 64
_goal_locks = [threading.Lock() for _ in range(LOCK_STRIPES)]


def get_config() -> ServiceConfig:
    """Get or load service configuration."""
    global _config
    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def get_store() -> MemoryStore | FirestoreStore:
    """Get or create the configured store."""
    global _store
    if _store is None:
        config = get_config()
        if config.storage_backend == "memory":
            logger.warning("Using in-memory storage; data is lost on restart")
            _store = MemoryStore()
        else:
            _store = FirestoreStore(HealthFirestoreClient(FirestoreConfig(
                project_id=config.firestore_project,
                database=config.firestore_database,
            )))
        logger.info("Storage backend: %s", _store.backend)
    return _store


def _goal_lock(goal_id: str) -> threading.Lock:
    return _goal_locks[hash(goal_id) % LOCK_STRIPES]


def _require_survey(survey_id: str | None) -> Survey | None:
    """Load a referenced survey; no reference means no survey."""
    if not survey_id:
        return None
    survey = get_store().surveys.get(survey_id)
    if survey is None:
        raise NotFound(f"Survey not found: {survey_id}")
    return survey


def _resolve_daily_calories(daily_calories: float | None, survey_id: str | None) -> float:
    if daily_calories is not None:
        return daily_calories
    survey = _require_survey(survey_id)
    if survey is None:
        raise ValidationError(["daily_calories: provide daily_calories or survey_id"])
    return compute_survey_metrics(survey).daily_calories


def _parse_date(name: str, value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError([f"{name}: invalid date, use YYYY-MM-DD"])


def _fail(exc: EngineError) -> dict:
    logger.info("Tool request rejected: %s: %s", exc.code, str(exc))
    return error_payload(exc)


# ==================== Survey Tools ====================


@mcp.tool()
def submit_survey(
    gender: str,
    age: int,
    height_cm: float,
    weight_kg: float,
    target_weight_kg: float,
    target_days: int,
    lifestyle: str,
) -> dict:
    """Store a body-metrics survey and return the targets derived from it.

    Args:
        gender: male, female, non-binary or other
        age: Age in years (10-120)
        height_cm: Height in centimeters (100-250)
        weight_kg: Current weight in kilograms (30-300)
        target_weight_kg: Goal weight in kilograms (30-300)
        target_days: Days to reach the goal weight
        lifestyle: sedentary, light, moderate, active or very_active

    Returns:
        The stored survey with BMI, BMR, TDEE and daily calorie, water
        and sleep targets
    """
    try:
        request = parse_input(SurveyInput, {
            "gender": gender,
            "age": age,
            "height_cm": height_cm,
            "weight_kg": weight_kg,
            "target_weight_kg": target_weight_kg,
            "target_days": target_days,
            "lifestyle": lifestyle,
        })
        survey = Survey(**request.model_dump(), created_at=clock())
        metrics = compute_survey_metrics(survey)
        get_store().surveys.add(survey)
    except EngineError as e:
        return _fail(e)

    logger.info("Survey submitted: %s", survey.id[:8])
    return {
        "survey": survey.model_dump(mode="json"),
        "metrics": metrics.model_dump(mode="json"),
    }


@mcp.tool()
def get_survey(survey_id: str) -> dict:
    """Get a stored survey with freshly computed metrics.

    Args:
        survey_id: ID returned by submit_survey
    """
    try:
        survey = _require_survey(survey_id)
        if survey is None:
            raise ValidationError(["survey_id: required"])
        metrics = compute_survey_metrics(survey)
    except EngineError as e:
        return _fail(e)

    return {
        "survey": survey.model_dump(mode="json"),
        "metrics": metrics.model_dump(mode="json"),
    }


# ==================== Weight Goal Tools ====================


@mcp.tool()
def create_weight_goal(
    start_weight_kg: float,
    target_weight_kg: float,
    weigh_in_days: list[str] | None = None,
    survey_id: str | None = None,
) -> dict:
    """Open a weight goal.

    Args:
        start_weight_kg: Weight at the start of the goal
        target_weight_kg: Goal weight, below the start weight
        weigh_in_days: Planned weigh-in days (e.g., ["Mon", "Thu"])
        survey_id: Survey whose timeframe and targets apply to this goal

    Returns:
        The created goal
    """
    try:
        request = parse_input(WeightGoalInput, {
            "start_weight_kg": start_weight_kg,
            "target_weight_kg": target_weight_kg,
            "weigh_in_days": weigh_in_days or [],
            "survey_id": survey_id,
        })
        _require_survey(request.survey_id)
        goal = open_weight_goal(request, clock())
        get_store().goals.add(goal)
    except EngineError as e:
        return _fail(e)

    logger.info("Weight goal created: %s", goal.id[:8])
    return {"goal": goal.model_dump(mode="json")}


@mcp.tool()
def get_weight_goal(goal_id: str) -> dict:
    """Get a weight goal and its progress as of the latest weigh-in.

    Args:
        goal_id: ID returned by create_weight_goal
    """
    try:
        goal = get_store().goals.get(goal_id)
        if goal is None:
            raise NotFound(f"Weight goal not found: {goal_id}")
    except EngineError as e:
        return _fail(e)

    summary = None
    if goal.target_weight_kg < goal.start_weight_kg:
        summary = summarize_goal(goal).model_dump(mode="json")

    return {"goal": goal.model_dump(mode="json"), "summary": summary}


@mcp.tool()
def log_weight(
    goal_id: str,
    weight_kg: float,
    water_liters: float | None = None,
    sleep_hours: float | None = None,
    notes: str | None = None,
) -> dict:
    """Record a weigh-in against a goal.

    Args:
        goal_id: Goal the weigh-in belongs to
        weight_kg: Measured weight in kilograms
        water_liters: Optional water drunk that day
        sleep_hours: Optional hours slept the night before
        notes: Optional free text (max 500 characters)

    Returns:
        The stored log with progress and status, the goal's new current
        weight, and a celebration when weight went down
    """
    try:
        request = parse_input(WeightLogInput, {
            "goal_id": goal_id,
            "weight_kg": weight_kg,
            "water_liters": water_liters,
            "sleep_hours": sleep_hours,
            "notes": notes,
        })
        store = get_store()
        if store.goals.get(request.goal_id) is None:
            raise NotFound(f"Weight goal not found: {request.goal_id}")
        with _goal_lock(request.goal_id):
            outcome = record_weight_log(
                store.goals,
                store.surveys,
                request,
                clock=clock,
                thresholds=get_config().progress_thresholds(),
            )
            store.logs.add_weight_log(outcome.log)
    except EngineError as e:
        return _fail(e)

    logger.info("Weigh-in for goal %s: progress %d%%", goal_id[:8], outcome.log.progress)
    return {
        "log": outcome.log.model_dump(mode="json"),
        "current_weight_kg": outcome.updated_goal_fields["current_weight_kg"],
        "logs_count": outcome.updated_goal_fields["logs_count"],
        "celebration": outcome.celebration.model_dump(mode="json") if outcome.celebration else None,
    }


@mcp.tool()
def list_weight_logs(goal_id: str) -> dict:
    """List a goal's weigh-ins, newest first.

    Args:
        goal_id: Goal to list
    """
    try:
        store = get_store()
        if store.goals.get(goal_id) is None:
            raise NotFound(f"Weight goal not found: {goal_id}")
        logs = store.logs.list_weight_logs(goal_id)
    except EngineError as e:
        return _fail(e)

    return {"goal_id": goal_id, "logs": [log.model_dump(mode="json") for log in logs]}


# ==================== Daily Log Tools ====================


@mcp.tool()
def log_hydration(log_date: str, liters_consumed: float, survey_id: str | None = None) -> dict:
    """Log a day's water intake and classify it against the water target.

    Args:
        log_date: Date in YYYY-MM-DD format
        liters_consumed: Liters drunk (0-20)
        survey_id: Survey whose water target applies (default target otherwise)
    """
    try:
        entry = parse_input(HydrationLogInput, {
            "log_date": log_date,
            "liters_consumed": liters_consumed,
            "survey_id": survey_id,
        })
        log = build_hydration_log(entry, _require_survey(entry.survey_id), clock())
        get_store().logs.add_hydration_log(log)
    except EngineError as e:
        return _fail(e)

    return {"log": log.model_dump(mode="json")}


@mcp.tool()
def log_sleep(
    log_date: str,
    sleep_hours: float,
    sleep_quality: str | None = None,
    survey_id: str | None = None,
) -> dict:
    """Log a night's sleep and classify it against the sleep target.

    Args:
        log_date: Date in YYYY-MM-DD format
        sleep_hours: Hours slept (0-24)
        sleep_quality: Optional poor, fair, good or excellent
        survey_id: Survey whose sleep target applies (default target otherwise)
    """
    try:
        entry = parse_input(SleepLogInput, {
            "log_date": log_date,
            "sleep_hours": sleep_hours,
            "sleep_quality": sleep_quality,
            "survey_id": survey_id,
        })
        log = build_sleep_log(entry, _require_survey(entry.survey_id), clock())
        get_store().logs.add_sleep_log(log)
    except EngineError as e:
        return _fail(e)

    return {"log": log.model_dump(mode="json")}


# ==================== Recovery Tools ====================


@mcp.tool()
def check_readiness(hrv: float, resting_hr: float, sleep_hours: float) -> dict:
    """Score training readiness from this morning's HRV, resting heart rate and sleep.

    Args:
        hrv: Heart rate variability in ms
        resting_hr: Resting heart rate in bpm
        sleep_hours: Hours slept last night
    """
    try:
        result = score_readiness(hrv, resting_hr, sleep_hours)
    except EngineError as e:
        return _fail(e)
    return result.model_dump(mode="json")


@mcp.tool()
def get_sleep_debt(
    sleep_hours: list[float],
    target_hours: float | None = None,
    survey_id: str | None = None,
) -> dict:
    """Accumulate sleep debt over consecutive nights.

    Args:
        sleep_hours: Hours slept per night, oldest first
        target_hours: Nightly target (defaults to the survey's or the global target)
        survey_id: Survey supplying the target when target_hours is omitted
    """
    try:
        if target_hours is None:
            target_hours = resolve_sleep_target(_require_survey(survey_id))
        result = compute_sleep_debt(target_hours, sleep_hours)
    except EngineError as e:
        return _fail(e)
    return result.model_dump(mode="json")


@mcp.tool()
def plan_water_reminders(
    weight_kg: float,
    activity_minutes: float = 0,
    start_hour: int = 8,
    end_hour: int = 20,
    interval_hours: int = 2,
) -> dict:
    """Spread the day's water target across evenly spaced reminders.

    Args:
        weight_kg: Body weight in kilograms
        activity_minutes: Planned exercise minutes today
        start_hour: First reminder hour (0-23)
        end_hour: Last possible reminder hour (0-23)
        interval_hours: Hours between reminders
    """
    try:
        request = parse_input(WaterReminderInput, {
            "weight_kg": weight_kg,
            "activity_minutes": activity_minutes,
            "start_hour": start_hour,
            "end_hour": end_hour,
            "interval_hours": interval_hours,
        })
        plan = build_water_reminders(request)
    except EngineError as e:
        return _fail(e)
    return plan.model_dump(mode="json")


# ==================== Grocery Tools ====================


@mcp.tool()
def get_grocery_plan(daily_calories: float | None = None, survey_id: str | None = None) -> dict:
    """Build a week of groceries sized to a daily calorie target.

    Args:
        daily_calories: Target kcal/day (1200-5000)
        survey_id: Survey whose calorie target to use when daily_calories is omitted
    """
    try:
        calories = _resolve_daily_calories(daily_calories, survey_id)
        plan = build_grocery_plan(calories, survey_id)
    except EngineError as e:
        return _fail(e)
    return plan.model_dump(mode="json")


@mcp.tool()
def optimize_groceries(
    daily_calories: float | None = None,
    survey_id: str | None = None,
    price_mode: str = "standard",
    allergies: list[str] | None = None,
) -> dict:
    """Grocery plan with a cost range, allergy substitutions and tips.

    Args:
        daily_calories: Target kcal/day (1200-5000)
        survey_id: Survey whose calorie target to use when daily_calories is omitted
        price_mode: budget, standard or premium
        allergies: Allergens to avoid (e.g., ["nuts", "dairy"])
    """
    try:
        calories = _resolve_daily_calories(daily_calories, survey_id)
        result = optimize_grocery_plan(calories, price_mode, allergies or [], survey_id)
    except EngineError as e:
        return _fail(e)
    return result.model_dump(mode="json")


# ==================== Report Tools ====================


@mcp.tool()
def get_weekly_report(week_start: str | None = None, survey_id: str | None = None) -> dict:
    """Weekly hydration and sleep report with sleep debt.

    Args:
        week_start: First day in YYYY-MM-DD format (defaults to 6 days ago)
        survey_id: Survey whose sleep target applies to the sleep debt

    Returns:
        Per-day water and sleep with statuses, days on target, averages
        and the week's sleep debt
    """
    try:
        if week_start is None:
            start = clock().date() - timedelta(days=6)
        else:
            start = _parse_date("week_start", week_start)
        survey = _require_survey(survey_id)
        end = start + timedelta(days=6)

        store = get_store()
        report = generate_weekly_report(
            store.logs.list_hydration_logs(start, end),
            store.logs.list_sleep_logs(start, end),
            start,
            resolve_sleep_target(survey) if survey else None,
        )
    except EngineError as e:
        return _fail(e)
    return report.model_dump(mode="json")
