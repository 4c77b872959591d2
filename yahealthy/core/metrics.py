"""Body Metrics - Pure functions for energy and body-composition math.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Optional

from . import constants
from .errors import parse_input
from .models import Gender, Lifestyle, Metrics, Pace, SurveyInput


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Body Mass Index: weight (kg) / height (m) squared."""
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def bmi_category(bmi: float) -> str:
    for upper, category in constants.BMI_CATEGORIES:
        if bmi < upper:
            return category
    return constants.BMI_CATEGORY_MAX


def calculate_body_fat(bmi: float, age: int, gender: Gender) -> float:
    """Estimate body-fat percentage with the Deurenberg formula.

    Non-binary and other use a neutral midpoint between the male and
    female sex terms. The result is clamped to [0, 100].
    """
    factor = constants.GENDER_FACTORS[gender]
    body_fat = 1.20 * bmi + 0.23 * age - 10.8 * factor - 5.4
    return _clamp(body_fat, 0.0, 100.0)


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: Gender) -> float:
    """Basal Metabolic Rate with the Mifflin-St Jeor equation.

    Non-binary and other use the mean of the male and female equations.
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    male = base + 5
    female = base - 161
    if gender == "male":
        return male
    if gender == "female":
        return female
    return (male + female) / 2


def calculate_tdee(bmr: float, lifestyle: Lifestyle) -> float:
    """Total Daily Energy Expenditure: BMR scaled by activity level."""
    return bmr * constants.ACTIVITY_FACTORS[lifestyle]


def calculate_requested_deficit(weight_kg: float, target_weight_kg: float, target_days: int) -> float:
    """Daily deficit needed to reach the target in time; 0 when not losing."""
    if weight_kg <= target_weight_kg:
        return 0.0
    return (weight_kg - target_weight_kg) * constants.KCAL_PER_KG / target_days


def calculate_daily_calories(tdee: float, requested_deficit: float) -> tuple[float, float]:
    """Clamp the calorie target and recompute the deficit actually applied.

    Args:
        tdee: Total daily energy expenditure
        requested_deficit: Deficit derived from the goal

    Returns:
        Tuple of (daily_calories, effective_deficit)
    """
    daily_calories = _clamp(
        tdee - requested_deficit,
        constants.MIN_DAILY_CALORIES,
        constants.MAX_DAILY_CALORIES,
    )
    effective_deficit = max(tdee - daily_calories, 0.0)
    return daily_calories, effective_deficit


def calculate_water_target(weight_kg: float, activity_minutes: float = 0) -> float:
    """Daily water target in liters, clamped to [1.5, 5.0]."""
    total = (
        weight_kg * constants.WATER_LITERS_PER_KG
        + (activity_minutes / 30) * constants.WATER_ACTIVITY_BONUS_LITERS
    )
    return round(_clamp(total, constants.MIN_WATER_LITERS, constants.MAX_WATER_LITERS), 1)


def estimate_days_to_goal(weight_kg: float, target_weight_kg: float, effective_deficit: float) -> Optional[int]:
    if effective_deficit <= 0:
        return None
    return round(abs(weight_kg - target_weight_kg) * constants.KCAL_PER_KG / effective_deficit)


def weekly_loss_rate(effective_deficit: float) -> float:
    """Expected loss in kg/week for a daily deficit."""
    return effective_deficit * 7 / constants.KCAL_PER_KG


def classify_pace(kg_per_week: float) -> Pace:
    if kg_per_week < constants.SLOW_PACE_MAX_KG_WEEK:
        return "slow"
    if kg_per_week <= constants.MODERATE_PACE_MAX_KG_WEEK:
        return "moderate"
    return "aggressive"


def compute_survey_metrics(survey: SurveyInput | dict) -> Metrics:
    """Derive all targets and estimates for a survey.

    This is recomputed on every read; metrics are never stored.

    The deficit is whatever separates TDEE from the clamped calorie
    target. A maintenance or gain goal with TDEE above 5000 kcal therefore
    still shows a deficit, an "aggressive" pace and 0 days to goal.

    Args:
        survey: A survey model or a raw mapping of survey fields

    Returns:
        Metrics with daily_calories always within [1200, 5000]

    Raises:
        ValidationError: If a survey field is outside its documented bounds
    """
    survey = parse_input(SurveyInput, survey)
    bmi = calculate_bmi(survey.weight_kg, survey.height_cm)
    bmr = calculate_bmr(survey.weight_kg, survey.height_cm, survey.age, survey.gender)
    tdee = calculate_tdee(bmr, survey.lifestyle)

    requested = calculate_requested_deficit(
        survey.weight_kg, survey.target_weight_kg, survey.target_days
    )
    daily_calories, effective_deficit = calculate_daily_calories(tdee, requested)
    kg_per_week = weekly_loss_rate(effective_deficit)

    return Metrics(
        bmi=round(bmi, 1),
        bmi_category=bmi_category(bmi),
        body_fat_percentage=round(calculate_body_fat(bmi, survey.age, survey.gender), 1),
        bmr=round(bmr),
        tdee=round(tdee),
        daily_calories=round(daily_calories),
        daily_deficit=round(effective_deficit),
        water_target_liters=calculate_water_target(survey.weight_kg),
        sleep_target_hours=constants.SLEEP_TARGET_HOURS,
        estimated_days_to_goal=estimate_days_to_goal(
            survey.weight_kg, survey.target_weight_kg, effective_deficit
        ),
        weekly_loss_kg=round(kg_per_week, 2),
        weight_loss_pace=classify_pace(kg_per_week),
    )
