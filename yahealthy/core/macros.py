"""Macro Calculations - Pure functions for macronutrient math.

All functions are pure: same input always produces same output, no side effects.
"""

from . import constants
from .models import WeeklyMacros


def calculate_macro_grams(calories: float, macro: str) -> float:
    """Grams of a macronutrient for its share of a calorie budget.

    Uses the fixed split (40% carbs, 30% protein, 30% fat) and standard
    conversion: 4 cal/g carbs, 4 cal/g protein, 9 cal/g fat.

    Args:
        calories: Calorie budget to split
        macro: One of "carbs", "protein", "fat"

    Returns:
        Grams of the macronutrient (unrounded)
    """
    return calories * constants.MACRO_RATIOS[macro] / constants.KCAL_PER_GRAM[macro]


def split_macros(calories: float) -> WeeklyMacros:
    """Split a calorie budget into rounded macro grams."""
    return WeeklyMacros(
        carbs_grams=round(calculate_macro_grams(calories, "carbs")),
        protein_grams=round(calculate_macro_grams(calories, "protein")),
        fat_grams=round(calculate_macro_grams(calories, "fat")),
    )
