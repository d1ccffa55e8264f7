from datetime import datetime
from types import SimpleNamespace

from fitness_service.services.nutrition import (
    daily_nutrition_series,
    day_total,
    meal_total,
    nutrition_averages,
    sum_nutrition,
)


def _meal(day, **totals):
    return SimpleNamespace(date=day, total_nutrition=totals)


def test_meal_total_sums_each_field():
    foods = [
        {"name": "Rice", "calories": 200, "protein": 10},
        {"name": "Chicken", "calories": 150, "protein": 5, "fat": 3.5},
    ]
    assert meal_total(foods) == {"calories": 350, "protein": 15, "carbs": 0, "fat": 3.5, "fiber": 0, "sugar": 0}


def test_missing_and_null_values_count_as_zero():
    total = sum_nutrition([{"calories": None}, SimpleNamespace(calories=40, sugar=2)])
    assert total["calories"] == 40
    assert total["sugar"] == 2
    assert total["fiber"] == 0


def test_empty_food_list_gives_zeros():
    assert set(meal_total([]).values()) == {0}


def test_no_rounding_at_summation():
    total = meal_total([{"protein": 0.1}, {"protein": 0.2}])
    assert total["protein"] == 0.1 + 0.2


def test_day_total_uses_stored_meal_totals():
    meals = [
        _meal(datetime(2024, 5, 1, 8), calories=300, fiber=4),
        _meal(datetime(2024, 5, 1, 13), calories=650, fiber=6),
        SimpleNamespace(date=datetime(2024, 5, 1, 20), total_nutrition=None),
    ]
    total = day_total(meals)
    assert total["calories"] == 950
    assert total["fiber"] == 10


def test_daily_series_groups_by_date_ascending():
    meals = [
        _meal(datetime(2024, 5, 2, 9), calories=400, protein=20, carbs=50, fat=10),
        _meal(datetime(2024, 5, 1, 12), calories=500, protein=30, carbs=40, fat=20),
        _meal(datetime(2024, 5, 2, 19), calories=600, protein=35, carbs=70, fat=15),
    ]
    series = daily_nutrition_series(meals)
    assert [row["date"] for row in series] == ["2024-05-01", "2024-05-02"]
    assert series[1] == {
        "date": "2024-05-02",
        "total_calories": 1000,
        "total_protein": 55,
        "total_carbs": 120,
        "total_fat": 25,
        "meal_count": 2,
    }


def test_averages_are_per_meal():
    meals = [
        _meal(datetime(2024, 5, 1), calories=300, protein=10, carbs=40, fat=5),
        _meal(datetime(2024, 5, 2), calories=500, protein=30, carbs=60, fat=15),
    ]
    assert nutrition_averages(meals) == {"avg_calories": 400, "avg_protein": 20, "avg_carbs": 50, "avg_fat": 10}


def test_averages_without_meals_are_zero():
    assert nutrition_averages([]) == {"avg_calories": 0, "avg_protein": 0, "avg_carbs": 0, "avg_fat": 0}
