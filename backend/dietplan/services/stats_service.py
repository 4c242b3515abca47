import logging
from typing import Dict, Any

from sqlalchemy.orm import Session

from dietplan.crud import food as food_crud
from dietplan.crud import nutrient as nutrient_crud
from dietplan.crud import diet_rule as rule_crud
from dietplan.exceptions import InvalidArgumentError
from dietplan.models.diet_rule import DietType
from dietplan.schemas.food import NutritionalStatistics

logger = logging.getLogger(__name__)


class StatsService:
    """
    The Auditor: aggregate numbers over the catalog, the nutrient table
    and the diet rule tables.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_nutritional_statistics(self) -> NutritionalStatistics:
        """Count and average macros over foods whose energy is known."""
        row = nutrient_crud.get_statistics(self.db)
        stats = NutritionalStatistics(
            food_count=row.food_count or 0,
            avg_calories=_round(row.avg_calories),
            avg_protein=_round(row.avg_protein),
            avg_fat=_round(row.avg_fat),
            avg_carbs=_round(row.avg_carbs),
        )
        logger.info(f"[Stats] Nutrition statistics over {stats.food_count} foods")
        return stats

    def count_foods_by_category(self, category: str) -> int:
        if category is None or not category.strip():
            raise InvalidArgumentError("Category cannot be empty", field="category")
        return food_crud.count_foods_by_category(self.db, category.strip())

    def get_rule_summary(self, diet_type) -> Dict[str, Any]:
        """Rule count per limitation tier for one diet."""
        diet = DietType.parse(diet_type)
        tiers = rule_crud.get_distinct_limitations(self.db, diet)
        by_limitation = {tier: rule_crud.count_by_limitation(self.db, diet, tier) for tier in tiers}
        return {
            "diet_type": diet.value,
            "total_rules": sum(by_limitation.values()),
            "by_limitation": by_limitation,
        }


def _round(value):
    return round(float(value), 2) if value is not None else None
