"""
Nutrition aggregation for meals and days.

Totals are plain elementwise sums; rounding is left to whoever displays them.
"""

from collections import OrderedDict
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fat", "fiber", "sugar")


def _nutrient(item: Any, field: str) -> float:
    """Reads a nutrient from a dict or an object, treating missing values as 0."""
    if isinstance(item, Mapping):
        value = item.get(field)
    else:
        value = getattr(item, field, None)
    return value or 0


def empty_nutrition() -> Dict[str, float]:
    return {field: 0 for field in NUTRIENT_FIELDS}


def sum_nutrition(items: Iterable[Any]) -> Dict[str, float]:
    """
    Sums the six nutrient fields across a sequence of items.

    Args:
        items: Food items or nutrition totals, as dicts or objects with
            calories/protein/carbs/fat/fiber/sugar attributes.

    Returns:
        Dict[str, float]: One total per nutrient field.
    """
    total = empty_nutrition()
    for item in items:
        for field in NUTRIENT_FIELDS:
            total[field] += _nutrient(item, field)
    return total


def meal_total(foods: Iterable[Any]) -> Dict[str, float]:
    """Total nutrition of a meal from its food list."""
    return sum_nutrition(foods)


def day_total(meals: Iterable[Any]) -> Dict[str, float]:
    """Total nutrition of a day from the stored totals of its meals."""
    return sum_nutrition(meal.total_nutrition or {} for meal in meals)


# --- Nutrition Stats ---

def daily_nutrition_series(meals: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Groups meals by calendar date and sums the macro totals of each day.

    Returns:
        List[Dict]: One row per date, oldest first.
    """
    days: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for meal in sorted(meals, key=lambda m: m.date):
        key = meal.date.strftime("%Y-%m-%d")
        row = days.setdefault(key, {
            "date": key,
            "total_calories": 0,
            "total_protein": 0,
            "total_carbs": 0,
            "total_fat": 0,
            "meal_count": 0,
        })
        totals = meal.total_nutrition or {}
        row["total_calories"] += _nutrient(totals, "calories")
        row["total_protein"] += _nutrient(totals, "protein")
        row["total_carbs"] += _nutrient(totals, "carbs")
        row["total_fat"] += _nutrient(totals, "fat")
        row["meal_count"] += 1
    return list(days.values())


def nutrition_averages(meals: Iterable[Any]) -> Dict[str, float]:
    """Average calories and macros per logged meal."""
    meals = list(meals)
    if not meals:
        return {"avg_calories": 0, "avg_protein": 0, "avg_carbs": 0, "avg_fat": 0}

    total = day_total(meals)
    count = len(meals)
    return {
        "avg_calories": total["calories"] / count,
        "avg_protein": total["protein"] / count,
        "avg_carbs": total["carbs"] / count,
        "avg_fat": total["fat"] / count,
    }
