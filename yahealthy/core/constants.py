"""Health reference constants shared by the calculators."""

# --- Energy ---
KCAL_PER_KG = 7700                  # kcal to lose 1 kg of body weight
MIN_DAILY_CALORIES = 1200
MAX_DAILY_CALORIES = 5000

ACTIVITY_FACTORS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

# Deurenberg sex term; non-binary/other sit at the midpoint.
GENDER_FACTORS = {
    "male": 1.0,
    "female": 0.0,
    "non-binary": 0.5,
    "other": 0.5,
}

# --- Body composition ---
BMI_CATEGORIES = (
    (18.5, "underweight"),
    (25.0, "normal"),
    (30.0, "overweight"),
)
BMI_CATEGORY_MAX = "obese"

# --- Weight loss pace (kg/week) ---
SLOW_PACE_MAX_KG_WEEK = 0.25
MODERATE_PACE_MAX_KG_WEEK = 0.75

# --- Hydration ---
WATER_LITERS_PER_KG = 0.033
WATER_ACTIVITY_BONUS_LITERS = 0.5   # per 30 minutes of activity
MIN_WATER_LITERS = 1.5
MAX_WATER_LITERS = 5.0
DEFAULT_WATER_TARGET_LITERS = 2.5

# --- Sleep ---
SLEEP_TARGET_HOURS = 7.5
DEFAULT_SLEEP_TARGET_HOURS = 8.0
MIN_RECOVERY_HOURS_PER_DAY = 0.5

# --- Adherence (percent of target) ---
GREEN_MIN_PERCENT = 90
YELLOW_MIN_PERCENT = 70
MAX_PERCENTAGE = 1000

# --- Readiness ---
LEVEL_BANDS = (
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
)
LEVEL_MIN = "poor"

READINESS_WEIGHTS = {"hrv": 0.4, "resting_hr": 0.3, "sleep": 0.3}

HRV_GOOD_MIN_MS = 60
HRV_MODERATE_MIN_MS = 40
RESTING_HR_GOOD_MAX_BPM = 60
RESTING_HR_ELEVATED_MAX_BPM = 75
SLEEP_ADEQUATE_MIN_HOURS = 7.0
SLEEP_SHORT_MIN_HOURS = 6.0

# --- Weight progress (percent of goal) ---
PROGRESS_GREEN_MIN = 50
PROGRESS_YELLOW_MIN = 10

# --- Groceries ---
MACRO_RATIOS = {"carbs": 0.40, "protein": 0.30, "fat": 0.30}
KCAL_PER_GRAM = {"carbs": 4, "protein": 4, "fat": 9}
REFERENCE_WEEKLY_CALORIES = 14000
GROCERY_ROUNDING_GRAMS = 50
