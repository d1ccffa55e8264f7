"""
Body-mass index calculations.
"""

from typing import Dict, Optional

from ..errors import InvalidInput

# Lower bounds of each category, checked from the top down
BMI_CATEGORIES = (
    (30.0, "Obese"),
    (25.0, "Overweight"),
    (18.5, "Normal"),
)
HEALTHY_BMI_MIN = 18.5
HEALTHY_BMI_MAX = 24.9


def bmi_category(bmi: float) -> str:
    """Maps a BMI value onto its category name."""
    for lower_bound, name in BMI_CATEGORIES:
        if bmi >= lower_bound:
            return name
    return "Underweight"


def compute_bmi(weight_kg: float, height_cm: float) -> Dict:
    """
    Calculates BMI, its category and the healthy weight range for a height.

    Args:
        weight_kg (float): Body weight in kilograms.
        height_cm (float): Height in centimeters.

    Raises:
        InvalidInput: If either value is missing or not positive.

    Returns:
        Dict: `bmi` (2 decimals), `category`, and `healthy_weight_range`
        with `min`/`max` in kilograms (1 decimal).
    """
    if not weight_kg or weight_kg <= 0 or not height_cm or height_cm <= 0:
        raise InvalidInput("Please provide a positive weight and height")

    height_m = height_cm / 100
    bmi = round(weight_kg / (height_m ** 2), 2)

    return {
        "bmi": bmi,
        "category": bmi_category(bmi),
        "healthy_weight_range": {
            "min": round(HEALTHY_BMI_MIN * height_m ** 2, 1),
            "max": round(HEALTHY_BMI_MAX * height_m ** 2, 1),
        },
    }


def derive_bmi(weight_kg: Optional[float], height_cm: Optional[float]) -> float:
    """
    BMI for a progress entry; 0 when the user's height is not known yet.
    """
    if not weight_kg or not height_cm or weight_kg <= 0 or height_cm <= 0:
        return 0
    return compute_bmi(weight_kg, height_cm)["bmi"]
