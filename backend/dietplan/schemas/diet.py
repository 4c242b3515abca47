from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from dietplan.schemas.food import NutrientProfile


class DietRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    limitation: str
    notes: Optional[str] = None


class DietRuleSeed(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    limitation: str
    notes: Optional[str] = None


class EligibleFood(NutrientProfile):
    """
    One row of the eligibility join: a catalog food that matched a permissive
    diet rule, carries none of the excluded allergens, and (when known) its
    nutrient profile.
    """
    fdc_id: int
    food_name: str
    food_category: Optional[str] = None
    rule_name: str
    limitation: str
    allergen_flags: Optional[str] = None
