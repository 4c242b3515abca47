import logging

from dietplan.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

"""
Nutrition Service
-----------------
Body-measure arithmetic used when a meal plan request arrives without a BMI.
This module is pure business logic and does not depend on the Database or Models.
"""

ACTIVITY_MULTIPLIERS = {
    'sedentary': 1.2,        # Little or no exercise
    'light': 1.375,          # Light exercise 1-3 days/week
    'moderate': 1.55,        # Moderate exercise 3-5 days/week
    'active': 1.725,         # Hard exercise 6-7 days/week
    'extra_active': 1.9      # Very hard exercise & physical job
}


def calculate_bmi(height_cm: float, weight_kg: float) -> float:
    """BMI = kg / m^2, rounded to one decimal."""
    if not height_cm or height_cm <= 0 or not weight_kg or weight_kg <= 0:
        raise InvalidArgumentError("Height and weight must be positive numbers", field="height_cm")
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 1)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def calculate_daily_calories(weight: float, height: float, age: int, gender: str,
                             activity_level: str = "sedentary") -> int:
    """
    Maintenance calories.

    1. BMR (Mifflin-St Jeor)
    2. TDEE (Activity Multiplier, unknown levels count as sedentary)
    """
    if not weight or not height:
        return 0

    gender = (gender or "").lower()
    if gender == 'male':
        bmr = (10 * weight) + (6.25 * height) - (5 * age) + 5
    else:
        bmr = (10 * weight) + (6.25 * height) - (5 * age) - 161

    multiplier = ACTIVITY_MULTIPLIERS.get((activity_level or 'sedentary').lower(), 1.2)
    calories = int(round(bmr * multiplier))
    logger.info(f"[Nutrition Service] {weight}kg, {height}cm, {age}yrs, {gender}: BMR {bmr:.0f}, TDEE {calories}")
    return calories
