"""Grocery Planning - Weekly shopping quantities sized to a calorie target.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Iterable, Optional

from . import constants
from .errors import ValidationError, parse_input
from .macros import split_macros
from .models import (
    CalorieTarget,
    CostEstimate,
    GroceryItem,
    GroceryItems,
    GroceryOptimization,
    GroceryPlan,
    PriceMode,
    Substitution,
)


# Reference basket for one week at REFERENCE_WEEKLY_CALORIES.
# Each entry: (name, grams, allergens)
REFERENCE_BASKET = {
    "vegetables": [
        ("Broccoli", 1000, ()),
        ("Spinach", 700, ()),
        ("Carrots", 800, ()),
        ("Bell peppers", 600, ()),
        ("Tomatoes", 900, ()),
    ],
    "fruits": [
        ("Apples", 1000, ()),
        ("Bananas", 900, ()),
        ("Berries", 500, ()),
        ("Oranges", 800, ()),
    ],
    "proteins": [
        ("Chicken breast", 1200, ()),
        ("Eggs", 850, ("eggs",)),
        ("Salmon", 600, ("fish",)),
        ("Lentils", 500, ()),
        ("Almonds", 200, ("nuts",)),
    ],
    "grains_and_dairy": [
        ("Brown rice", 700, ()),
        ("Oats", 500, ("gluten",)),
        ("Whole wheat bread", 600, ("gluten",)),
        ("Greek yogurt", 1000, ("dairy",)),
        ("Cottage cheese", 500, ("dairy",)),
    ],
}

ALLERGY_SUBSTITUTIONS = {
    "nuts": ("Almonds", ["Sunflower seeds", "Pumpkin seeds"], "Seeds give similar fats and crunch without tree nuts"),
    "peanut": ("Peanut butter", ["Sunflower seed butter", "Tahini"], "Seed butters match the texture and protein"),
    "dairy": ("Greek yogurt", ["Soy yogurt", "Coconut yogurt"], "Plant yogurts keep the creamy texture"),
    "lactose": ("Milk", ["Lactose-free milk", "Oat milk"], "Same use without lactose"),
    "gluten": ("Whole wheat bread", ["Buckwheat", "Quinoa", "Gluten-free bread"], "Naturally gluten-free whole grains"),
    "eggs": ("Eggs", ["Tofu", "Chickpea flour"], "Comparable protein and binding in cooking"),
    "fish": ("Salmon", ["Chicken breast", "Flaxseed"], "Lean protein; flax adds omega-3"),
    "shellfish": ("Shrimp", ["Chicken breast", "Tofu"], "Lean protein without shellfish"),
    "soy": ("Tofu", ["Chickpeas", "Lentils"], "Legumes replace soy protein"),
}

# Weekly cost range per price mode, in NIS.
PRICE_RANGES = {
    "budget": (250, 350),
    "standard": (350, 500),
    "premium": (500, 750),
}

OPTIMIZATION_TIPS = {
    "budget": [
        "Buy lentils, oats and rice in bulk.",
        "Choose frozen vegetables and berries; they keep their nutrients.",
        "Plan meals around weekly supermarket deals.",
    ],
    "standard": [
        "Shop seasonal produce for the best price and flavor.",
        "Batch-cook proteins twice a week to cut waste.",
    ],
    "premium": [
        "Choose organic produce and wild-caught fish where available.",
        "Add a variety of seasonal fruits for micronutrient diversity.",
    ],
}


def round_to_step(grams: float, step: int = constants.GROCERY_ROUNDING_GRAMS) -> int:
    """Round to the nearest step, never below one step."""
    return max(step, int(round(grams / step)) * step)


def _scaled_items(category: str, scale: float) -> list[GroceryItem]:
    return [
        GroceryItem(name=name, amount_grams=round_to_step(grams * scale))
        for name, grams, _ in REFERENCE_BASKET[category]
    ]


def build_grocery_plan(daily_calories: float, survey_id: Optional[str] = None) -> GroceryPlan:
    """Build a week of groceries for a daily calorie target.

    Args:
        daily_calories: Target kcal/day, from a survey or explicit
        survey_id: Survey the target was taken from, if any

    Returns:
        GroceryPlan with weekly macros and categorized quantities

    Raises:
        ValidationError: If daily_calories is outside [1200, 5000]
    """
    target = parse_input(CalorieTarget, {"daily_calories": daily_calories})
    weekly_calories = round(target.daily_calories * 7)
    scale = weekly_calories / constants.REFERENCE_WEEKLY_CALORIES

    return GroceryPlan(
        survey_id=survey_id,
        target_daily_calories=round(target.daily_calories),
        weekly_calories=weekly_calories,
        weekly_macros=split_macros(weekly_calories),
        items=GroceryItems(
            vegetables=_scaled_items("vegetables", scale),
            fruits=_scaled_items("fruits", scale),
            proteins=_scaled_items("proteins", scale),
            grains_and_dairy=_scaled_items("grains_and_dairy", scale),
        ),
    )


def _normalize_allergies(allergies: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for allergy in allergies:
        key = allergy.strip().lower()
        if key and key not in seen:
            seen.append(key)
    return seen


def find_substitutions(allergies: Iterable[str]) -> tuple[list[Substitution], list[str]]:
    """Look up safe alternatives for each allergy.

    Returns:
        Tuple of (substitutions, allergies with no table entry)
    """
    substitutions: list[Substitution] = []
    unmatched: list[str] = []
    for allergy in _normalize_allergies(allergies):
        entry = ALLERGY_SUBSTITUTIONS.get(allergy)
        if entry is None:
            unmatched.append(allergy)
            continue
        ingredient, alternatives, reason = entry
        substitutions.append(Substitution(
            allergen=allergy,
            ingredient=ingredient,
            alternatives=list(alternatives),
            reason=reason,
        ))
    return substitutions, unmatched


def flag_allergen_items(allergies: Iterable[str]) -> list[str]:
    """Names of basket items that contain any of the allergens."""
    wanted = set(_normalize_allergies(allergies))
    return [
        name
        for items in REFERENCE_BASKET.values()
        for name, _, allergens in items
        if wanted.intersection(allergens)
    ]


def optimize_grocery_plan(
    daily_calories: float,
    price_mode: PriceMode = "standard",
    allergies: Iterable[str] = (),
    survey_id: Optional[str] = None,
) -> GroceryOptimization:
    """Grocery plan plus cost range, allergy swaps and shopping tips.

    The cost range and substitutions do not depend on the calorie target.
    """
    if price_mode not in PRICE_RANGES:
        raise ValidationError([f"price_mode: must be one of {', '.join(PRICE_RANGES)}"])

    allergies = list(allergies)
    plan = build_grocery_plan(daily_calories, survey_id)
    low, high = PRICE_RANGES[price_mode]
    substitutions, unmatched = find_substitutions(allergies)

    return GroceryOptimization(
        plan=plan,
        price_mode=price_mode,
        cost_estimate=CostEstimate(currency="NIS", min_amount=low, max_amount=high),
        substitutions=substitutions,
        flagged_items=flag_allergen_items(allergies),
        unmatched_allergies=unmatched,
        tips=list(OPTIMIZATION_TIPS[price_mode]),
    )
