import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from dietplan.crud import food as food_crud
from dietplan.crud import nutrient as nutrient_crud
from dietplan.exceptions import InvalidArgumentError
from dietplan.schemas.common import Page
from dietplan.schemas.food import FoodResponse, NutrientResponse
from dietplan.utils.nutrition_calc import is_nutrient_balanced

logger = logging.getLogger(__name__)

# Defaults substituted when a threshold is missing (or negative)
DEFAULT_MIN_PROTEIN_G = 10.0
DEFAULT_MAX_CALORIES_KCAL = 100.0
DEFAULT_MIN_FIBER_G = 3.0
DEFAULT_MAX_SODIUM_MG = 140.0
DEFAULT_CALORIE_RANGE_SPAN = 500.0

# Per-100g "rich in" minimums, mg except D (mcg)
VITAMIN_DEFAULT_MINIMUMS = {
    "C": 10.0,
    "D": 1.0,
    "CALCIUM": 50.0,
    "IRON": 2.0,
    "POTASSIUM": 200.0,
    "MAGNESIUM": 20.0,
}
VITAMIN_OPTIONS = ", ".join(VITAMIN_DEFAULT_MINIMUMS)


def _require_term(term: Optional[str], label: str = "Search term") -> str:
    if term is None or not str(term).strip():
        raise InvalidArgumentError(f"{label} cannot be empty", field=label.lower().replace(" ", "_"))
    return str(term).strip()


def _require_fdc_id(fdc_id) -> int:
    if fdc_id is None or int(fdc_id) <= 0:
        raise InvalidArgumentError("FDC ID must be a positive number", field="fdc_id")
    return int(fdc_id)


def _or_default(value: Optional[float], default: float) -> float:
    if value is None or value < 0:
        return default
    return value


def normalize_vitamin_type(vitamin_type: Optional[str]) -> str:
    if vitamin_type is None or not vitamin_type.strip():
        raise InvalidArgumentError("Vitamin type must be specified", field="vitamin_type")
    normalized = vitamin_type.strip().upper()
    if normalized not in VITAMIN_DEFAULT_MINIMUMS:
        raise InvalidArgumentError(
            f"Invalid vitamin type. Options: {VITAMIN_OPTIONS}", field="vitamin_type"
        )
    return normalized


class MealPlanningService:
    """
    Food catalog and nutrient-table queries.
    Arguments are validated (and thresholds defaulted) here; the crud layer only runs SQL.
    """

    def __init__(self, db: Session):
        self.db = db

    # ============ FOOD CATALOG ============

    def search_foods_by_name(self, search_term: str):
        return food_crud.search_foods_by_name(self.db, _require_term(search_term))

    def search_foods_paginated(self, search_term: str = None, page: int = 0, size: int = 20) -> Page:
        self._check_page(page, size)
        term = search_term.strip() if search_term and search_term.strip() else None
        items, total = food_crud.search_foods_page(self.db, term, skip=page * size, limit=size)
        return Page.build(items, page, size, total, FoodResponse)

    def get_food_by_id(self, fdc_id: int):
        return food_crud.get_food(self.db, _require_fdc_id(fdc_id))

    def get_food_categories(self) -> List[str]:
        return food_crud.get_distinct_categories(self.db)

    def get_foods_by_category(self, category: str):
        return food_crud.get_foods_by_category(self.db, _require_term(category, "Category"))

    def find_foods_without_allergens(self):
        return food_crud.get_foods_without_allergens(self.db)

    def find_foods_with_allergens(self):
        return food_crud.get_foods_with_allergens(self.db)

    # ============ NUTRIENTS ============

    def get_nutrients_by_fdc_id(self, fdc_id: int):
        return nutrient_crud.get_nutrient(self.db, _require_fdc_id(fdc_id))

    def search_nutrients_by_food_name(self, search_term: str):
        return nutrient_crud.search_nutrients_by_all_names(self.db, _require_term(search_term))

    def search_nutrients_paginated(self, search_term: str = None, page: int = 0, size: int = 20) -> Page:
        self._check_page(page, size)
        term = search_term.strip() if search_term and search_term.strip() else None
        items, total = nutrient_crud.search_nutrients_page(self.db, term, skip=page * size, limit=size)
        return Page.build(items, page, size, total, NutrientResponse)

    def find_high_protein_foods(self, min_protein_grams: Optional[float] = None):
        return nutrient_crud.get_high_protein(self.db, _or_default(min_protein_grams, DEFAULT_MIN_PROTEIN_G))

    def find_low_calorie_foods(self, max_calories: Optional[float] = None):
        if max_calories is None or max_calories <= 0:
            max_calories = DEFAULT_MAX_CALORIES_KCAL
        return nutrient_crud.get_low_calorie(self.db, max_calories)

    def find_foods_in_calorie_range(self, min_calories: Optional[float] = None, max_calories: Optional[float] = None):
        min_calories = _or_default(min_calories, 0.0)
        if max_calories is None or max_calories <= min_calories:
            max_calories = min_calories + DEFAULT_CALORIE_RANGE_SPAN
        return nutrient_crud.get_in_calorie_range(self.db, min_calories, max_calories)

    def find_high_fiber_foods(self, min_fiber_grams: Optional[float] = None):
        return nutrient_crud.get_high_fiber(self.db, _or_default(min_fiber_grams, DEFAULT_MIN_FIBER_G))

    def find_low_sodium_foods(self, max_sodium_mg: Optional[float] = None):
        return nutrient_crud.get_low_sodium(self.db, _or_default(max_sodium_mg, DEFAULT_MAX_SODIUM_MG))

    def find_vitamin_rich_foods(self, vitamin_type: str, min_amount: Optional[float] = None):
        normalized = normalize_vitamin_type(vitamin_type)
        amount = _or_default(min_amount, VITAMIN_DEFAULT_MINIMUMS[normalized])
        return nutrient_crud.get_rich_in(self.db, normalized, amount)

    def find_foods_for_diet(self, low_sodium: Optional[bool] = None, low_fat: Optional[bool] = None,
                            high_fiber: Optional[bool] = None, low_sugar: Optional[bool] = None):
        """Conjunction of the enabled flags; None counts as False."""
        return nutrient_crud.get_for_dietary_flags(
            self.db, bool(low_sodium), bool(low_fat), bool(high_fiber), bool(low_sugar)
        )

    def find_balanced_foods(self):
        """Protein 10-35%, fat 20-35%, carbs 45-65% of calories."""
        candidates = nutrient_crud.get_with_positive_energy(self.db)
        balanced = [n for n in candidates if is_nutrient_balanced(n)]
        logger.info(f"[MealPlanning] Balanced foods: {len(balanced)} of {len(candidates)}")
        return balanced

    @staticmethod
    def _check_page(page: int, size: int):
        if page < 0:
            raise InvalidArgumentError("page must not be negative", field="page")
        if size <= 0:
            raise InvalidArgumentError("size must be a positive number", field="size")
