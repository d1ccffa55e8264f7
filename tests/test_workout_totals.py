from types import SimpleNamespace

from fitness_service.services.workouts import total_calories_burned, workout_summary, workouts_by_type


def test_exercise_calories_are_summed():
    exercises = [{"name": "Squat", "calories_burned": 120}, {"name": "Row", "calories_burned": 80.5}]
    assert total_calories_burned(exercises, supplied=999) == 200.5


def test_supplied_total_used_without_exercises():
    assert total_calories_burned([], supplied=350) == 350
    assert total_calories_burned(None, supplied=None) == 0


def test_summary_and_type_counts():
    workouts = [
        SimpleNamespace(type="cardio", duration=30, total_calories_burned=300),
        SimpleNamespace(type="strength", duration=45, total_calories_burned=250),
        SimpleNamespace(type="cardio", duration=15, total_calories_burned=None),
    ]
    assert workout_summary(workouts) == {
        "total_workouts": 3,
        "total_duration": 90,
        "total_calories": 550,
        "avg_duration": 30,
    }
    assert workouts_by_type(workouts) == [{"type": "cardio", "count": 2}, {"type": "strength", "count": 1}]


def test_summary_of_nothing():
    assert workout_summary([]) == {"total_workouts": 0, "total_duration": 0, "total_calories": 0, "avg_duration": 0}
