import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import ELIGIBLE_FOODS_LIMIT
from dietplan.exceptions import InvalidArgumentError
from dietplan.models.diet_rule import DietType, RULE_MODELS, ELIGIBLE_LIMITATIONS
from dietplan.models.food import Food
from dietplan.models.nutrient import Nutrient, NUTRIENT_FIELDS
from dietplan.schemas.diet import EligibleFood
from dietplan.utils.allergens import parse_allergens, excluded_by_allergens

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

"""
Diet Eligibility Query Engine
-----------------------------
Builds the list of foods a diner may eat under a diet:

1. rules of the diet whose limitation is in ELIGIBLE_LIMITATIONS
2. catalog foods whose name CONTAINS the rule name (case-insensitive)
3. minus foods whose allergen tags (or name) contain any requested allergen
4. left-joined to their nutrient profile
5. de-duplicated by food name

Step 2 is a fuzzy many-to-many join: there is no key between the rule tables
and the catalog, so "egg" also selects "Eggplant, raw". That is the intended
linkage and must stay a substring test.
"""


def _literal_pattern(column):
    """Lower-cased column with LIKE wildcards escaped, so '_' and '%' match only themselves."""
    escaped = func.replace(func.lower(column), LIKE_ESCAPE, LIKE_ESCAPE + LIKE_ESCAPE)
    escaped = func.replace(escaped, "%", LIKE_ESCAPE + "%")
    return func.replace(escaped, "_", LIKE_ESCAPE + "_")


def _eligible_rows(db: Session, diet_type: DietType):
    """(Food, rule, Nutrient|None) rows for every permissive rule/food name match."""
    rule = RULE_MODELS[diet_type]
    tiers = [t.value.lower() for t in ELIGIBLE_LIMITATIONS[diet_type]]

    return (
        db.query(Food, rule, Nutrient)
        .join(rule, func.lower(Food.food_name).contains(_literal_pattern(rule.name), escape=LIKE_ESCAPE))
        .outerjoin(Nutrient, Nutrient.fdc_id == Food.fdc_id)
        .filter(func.lower(rule.limitation).in_(tiers))
        .order_by(Food.food_name, Food.fdc_id, rule.id)
        .all()
    )


def _to_eligible_food(food: Food, rule, nutrient: Optional[Nutrient]) -> EligibleFood:
    profile = {field: getattr(nutrient, field) if nutrient is not None else None for field in NUTRIENT_FIELDS}
    return EligibleFood(
        fdc_id=food.fdc_id,
        food_name=food.food_name,
        food_category=food.food_category,
        rule_name=rule.name,
        limitation=rule.limitation,
        allergen_flags=food.allergen_flags,
        **profile,
    )


def find_eligible_foods(db: Session, diet_type, allergens: Optional[str] = "", limit: Optional[int] = None) -> List[EligibleFood]:
    """
    Foods permitted by `diet_type` and free of every allergen in the
    comma-separated `allergens` string.

    An empty list is a valid answer. Database errors are not caught here.
    """
    diet = DietType.parse(diet_type)
    if limit is not None and limit <= 0:
        raise InvalidArgumentError("limit must be a positive number", field="limit")

    tokens = parse_allergens(allergens)
    rows = _eligible_rows(db, diet)

    results: List[EligibleFood] = []
    seen_names = set()
    excluded = 0
    for food, rule, nutrient in rows:
        if food.food_name in seen_names:
            continue
        if excluded_by_allergens(food.food_name, food.allergen_flags, tokens):
            excluded += 1
            continue
        seen_names.add(food.food_name)
        results.append(_to_eligible_food(food, rule, nutrient))
        if limit is not None and len(results) >= limit:
            break

    logger.info(
        f"[Eligibility] {diet.value}: {len(rows)} rule matches, {excluded} dropped for allergens "
        f"{tokens or '-'}, {len(results)} foods returned (limit: {limit})"
    )
    return results


def find_eligible_foods_for_prompt(db: Session, diet_type, allergens: Optional[str] = "") -> List[EligibleFood]:
    """Capped variant used when the list is pasted into an LLM prompt."""
    return find_eligible_foods(db, diet_type, allergens, limit=ELIGIBLE_FOODS_LIMIT)


def eligible_food_names(db: Session, diet_type, allergens: Optional[str] = "", limit: Optional[int] = None) -> List[str]:
    return [f.food_name for f in find_eligible_foods(db, diet_type, allergens, limit=limit)]
