from typing import Optional

"""
Macro-balance arithmetic.
A food is "balanced" when each macro's share of its energy falls inside the
ranges below (Acceptable Macronutrient Distribution Ranges).
"""

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARB = 4
KCAL_PER_G_FAT = 9

PROTEIN_RANGE = (0.10, 0.35)
FAT_RANGE = (0.20, 0.35)
CARB_RANGE = (0.45, 0.65)


def macro_energy_fractions(energy_kcal, protein_g, fat_g, carbohydrate_g) -> Optional[dict]:
    """
    Share of energy coming from each macro.
    Returns None when energy is missing/zero or any macro is unknown.
    """
    if energy_kcal is None or energy_kcal <= 0:
        return None
    if protein_g is None or fat_g is None or carbohydrate_g is None:
        return None

    return {
        "protein": (protein_g * KCAL_PER_G_PROTEIN) / energy_kcal,
        "fat": (fat_g * KCAL_PER_G_FAT) / energy_kcal,
        "carbs": (carbohydrate_g * KCAL_PER_G_CARB) / energy_kcal,
    }


def _within(value: float, bounds: tuple) -> bool:
    low, high = bounds
    return low <= value <= high


def is_macro_balanced(energy_kcal, protein_g, fat_g, carbohydrate_g) -> bool:
    fractions = macro_energy_fractions(energy_kcal, protein_g, fat_g, carbohydrate_g)
    if fractions is None:
        return False
    return (
        _within(fractions["protein"], PROTEIN_RANGE)
        and _within(fractions["fat"], FAT_RANGE)
        and _within(fractions["carbs"], CARB_RANGE)
    )


def is_nutrient_balanced(nutrient) -> bool:
    """Same test applied to a `Nutrient` row (or anything with the same attributes)."""
    return is_macro_balanced(
        nutrient.energy_kcal,
        nutrient.protein_g,
        nutrient.total_fat_g,
        nutrient.carbohydrate_g,
    )
