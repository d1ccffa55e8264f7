"""
Workout calorie totals and period stats.
"""

from collections import Counter
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional


def total_calories_burned(exercises: Optional[Iterable[Any]], supplied: Optional[float] = 0) -> float:
    """
    Calories for a workout: the sum over its exercises when it has any,
    otherwise the value logged directly on the workout.
    """
    exercises = list(exercises or ())
    if not exercises:
        return supplied or 0
    total = 0
    for exercise in exercises:
        if isinstance(exercise, Mapping):
            total += exercise.get("calories_burned") or 0
        else:
            total += getattr(exercise, "calories_burned", 0) or 0
    return total


def workout_summary(workouts: Iterable[Any]) -> Dict[str, float]:
    """Totals and average duration across the given workouts."""
    workouts = list(workouts)
    total_duration = sum(w.duration or 0 for w in workouts)
    return {
        "total_workouts": len(workouts),
        "total_duration": total_duration,
        "total_calories": sum(w.total_calories_burned or 0 for w in workouts),
        "avg_duration": total_duration / len(workouts) if workouts else 0,
    }


def workouts_by_type(workouts: Iterable[Any]) -> List[Dict[str, Any]]:
    """Number of workouts per type, most frequent first."""
    counts = Counter(w.type for w in workouts)
    return [{"type": workout_type, "count": count} for workout_type, count in counts.most_common()]
