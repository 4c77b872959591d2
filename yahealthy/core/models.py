"""Core Data Models - Pydantic models for type safety.

Input models carry the documented bounds; record and result models are
value objects with no behavior beyond validation.
"""

from datetime import datetime, timezone
from datetime import date as DateType
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import uuid


Gender = Literal["male", "female", "non-binary", "other"]
Lifestyle = Literal["sedentary", "light", "moderate", "active", "very_active"]
AdherenceStatus = Literal["red", "yellow", "green"]
Level = Literal["excellent", "good", "fair", "poor"]
Pace = Literal["slow", "moderate", "aggressive"]
SleepQuality = Literal["poor", "fair", "good", "excellent"]
Weekday = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
PriceMode = Literal["budget", "standard", "premium"]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


# ==================== Survey ====================


class SurveyInput(BaseModel):
    """Body-metrics survey as submitted by the user."""

    gender: Gender = Field(description="male, female, non-binary or other")
    age: int = Field(ge=10, le=120, description="Age in years")
    height_cm: float = Field(ge=100, le=250, description="Height in centimeters")
    weight_kg: float = Field(ge=30, le=300, description="Current weight in kilograms")
    target_weight_kg: float = Field(ge=30, le=300, description="Goal weight in kilograms")
    target_days: int = Field(ge=1, description="Days allotted to reach the goal weight")
    lifestyle: Lifestyle = Field(description="Activity level used for TDEE")

    @field_validator("gender", "lifestyle", mode="before")
    @classmethod
    def _normalize_choice(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class Survey(SurveyInput):
    """A stored survey. Metrics are never stored, only recomputed."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utc_now)


class Metrics(BaseModel):
    """Targets and estimates derived from a survey."""

    bmi: float
    bmi_category: str
    body_fat_percentage: float
    bmr: int = Field(description="Basal metabolic rate, kcal/day")
    tdee: int = Field(description="Total daily energy expenditure, kcal/day")
    daily_calories: int = Field(ge=1200, le=5000)
    daily_deficit: int = Field(ge=0, description="Effective deficit after clamping")
    water_target_liters: float
    sleep_target_hours: float
    estimated_days_to_goal: Optional[int] = Field(
        default=None, description="None when there is no deficit to work with"
    )
    weekly_loss_kg: float
    weight_loss_pace: Pace


# ==================== Weight goals ====================


class WeightGoalInput(BaseModel):
    """Request to open a weight goal."""

    start_weight_kg: float = Field(ge=30, le=300)
    target_weight_kg: float = Field(ge=30, le=300)
    weigh_in_days: list[Weekday] = Field(default_factory=list)
    survey_id: Optional[str] = Field(default=None, description="Survey supplying targets")

    @model_validator(mode="after")
    def _check_target(self) -> "WeightGoalInput":
        if self.target_weight_kg >= self.start_weight_kg:
            raise ValueError("target_weight_kg must be below start_weight_kg")
        return self


class WeightGoal(BaseModel):
    """A weight goal. Only accepted weight logs move current_weight_kg."""

    id: str = Field(default_factory=new_id)
    survey_id: Optional[str] = None
    start_weight_kg: float = Field(ge=30, le=300)
    target_weight_kg: float = Field(ge=30, le=300)
    current_weight_kg: float = Field(ge=30, le=300)
    weigh_in_days: list[Weekday] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    logs_count: int = Field(default=0, ge=0)


class AdherenceResult(BaseModel):
    """Tri-state classification of an actual value against its target."""

    status: AdherenceStatus
    percentage: int = Field(ge=0)


class WeightLogInput(BaseModel):
    """A weigh-in, optionally with the day's water and sleep."""

    goal_id: str = Field(min_length=1)
    weight_kg: float = Field(ge=30, le=300)
    water_liters: Optional[float] = Field(default=None, ge=0, le=20)
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    notes: Optional[str] = Field(default=None, max_length=500)


class WeightLog(BaseModel):
    """A stored weigh-in. Derived fields are fixed at creation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    goal_id: str
    weight_kg: float
    water_liters: Optional[float] = None
    sleep_hours: Optional[float] = None
    notes: Optional[str] = None
    is_weight_loss: bool
    lost_kg: float = Field(description="Negative if weight was gained")
    remaining_kg: float = Field(ge=0)
    progress: int = Field(ge=0, le=100)
    progress_status: AdherenceStatus
    hydration: Optional[AdherenceResult] = None
    sleep: Optional[AdherenceResult] = None
    created_at: datetime = Field(default_factory=utc_now)


class Celebration(BaseModel):
    message: str
    remaining_kg: float


class WeightLogOutcome(BaseModel):
    """Result of applying a weigh-in to its goal."""

    updated_goal_fields: dict[str, Any]
    log: WeightLog
    celebration: Optional[Celebration] = None


class GoalSummary(BaseModel):
    """Progress of a goal as of its latest weigh-in."""

    goal_id: str
    current_weight_kg: float
    lost_kg: float
    remaining_kg: float
    progress: int
    logs_count: int


# ==================== Daily logs ====================


class HydrationLogInput(BaseModel):
    log_date: DateType
    liters_consumed: float = Field(ge=0, le=20)
    survey_id: Optional[str] = None


class HydrationLog(BaseModel):
    """A day's water intake with its adherence status."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    log_date: DateType
    liters_consumed: float
    target_liters: float
    status: AdherenceStatus
    percentage: int
    created_at: datetime = Field(default_factory=utc_now)


class SleepLogInput(BaseModel):
    log_date: DateType
    sleep_hours: float = Field(ge=0, le=24)
    sleep_quality: Optional[SleepQuality] = None
    survey_id: Optional[str] = None


class SleepLog(BaseModel):
    """A night's sleep with its adherence status."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    log_date: DateType
    sleep_hours: float
    sleep_quality: Optional[SleepQuality] = None
    target_hours: float
    status: AdherenceStatus
    percentage: int
    created_at: datetime = Field(default_factory=utc_now)


class WaterReminderInput(BaseModel):
    """Request for a day of hydration reminders."""

    weight_kg: float = Field(ge=30, le=300)
    activity_minutes: float = Field(default=0, ge=0, le=720)
    start_hour: int = Field(default=8, ge=0, le=23)
    end_hour: int = Field(default=20, ge=0, le=23)
    interval_hours: int = Field(default=2, ge=1, le=12)

    @model_validator(mode="after")
    def _check_window(self) -> "WaterReminderInput":
        if self.end_hour < self.start_hour:
            raise ValueError("end_hour must not be before start_hour")
        return self


class WaterReminder(BaseModel):
    time: str = Field(description="Local time as HH:MM")
    liters: float


class WaterReminderPlan(BaseModel):
    target_liters: float
    reminders: list[WaterReminder]


# ==================== Readiness & sleep debt ====================


class ReadinessInput(BaseModel):
    hrv: float = Field(ge=1, le=300, description="Heart rate variability in ms")
    resting_hr: float = Field(ge=20, le=220, description="Resting heart rate in bpm")
    sleep_hours: float = Field(ge=0, le=24)


class FactorReading(BaseModel):
    value: float
    status: str
    score: int


class ReadinessResult(BaseModel):
    """Composite training readiness for one morning."""

    score: int = Field(ge=0, le=100)
    level: Level
    factors: dict[str, FactorReading]
    recommendations: list[str]


class SleepDebtResult(BaseModel):
    target_hours: float
    debt: float = Field(ge=0, description="Cumulative unmet sleep in hours")
    days_tracked: int
    average_sleep: float
    days_to_recover: int


# ==================== Groceries ====================


class CalorieTarget(BaseModel):
    daily_calories: float = Field(ge=1200, le=5000)


class WeeklyMacros(BaseModel):
    carbs_grams: int
    protein_grams: int
    fat_grams: int


class GroceryItem(BaseModel):
    name: str
    amount_grams: int = Field(ge=0)


class GroceryItems(BaseModel):
    vegetables: list[GroceryItem]
    fruits: list[GroceryItem]
    proteins: list[GroceryItem]
    grains_and_dairy: list[GroceryItem]


class GroceryPlan(BaseModel):
    """A week of groceries sized to a daily calorie target."""

    survey_id: Optional[str] = None
    target_daily_calories: int
    weekly_calories: int
    weekly_macros: WeeklyMacros
    items: GroceryItems


class CostEstimate(BaseModel):
    currency: str
    min_amount: int
    max_amount: int


class Substitution(BaseModel):
    allergen: str
    ingredient: str
    alternatives: list[str]
    reason: str


class GroceryOptimization(BaseModel):
    plan: GroceryPlan
    price_mode: PriceMode
    cost_estimate: CostEstimate
    substitutions: list[Substitution]
    flagged_items: list[str] = Field(description="Plan items containing a listed allergen")
    unmatched_allergies: list[str]
    tips: list[str]


# ==================== Reports ====================


class DayHealthSummary(BaseModel):
    """Hydration and sleep for a single day in the weekly report."""

    log_date: DateType
    water_liters: Optional[float] = None
    hydration_status: Optional[AdherenceStatus] = None
    sleep_hours: Optional[float] = None
    sleep_status: Optional[AdherenceStatus] = None


class WeeklyHealthReport(BaseModel):
    week_start: DateType
    week_end: DateType
    days: list[DayHealthSummary]
    hydration_days_on_target: int
    sleep_days_on_target: int
    avg_water_liters: Optional[float] = None
    avg_sleep_hours: Optional[float] = None
    sleep_debt: Optional[SleepDebtResult] = None
