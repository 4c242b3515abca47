import logging
from typing import Any, Dict, List, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from dietplan.exceptions import ToolNotFoundError
from dietplan.schemas.diet import DietRuleResponse
from dietplan.schemas.food import FoodResponse, NutrientResponse
from dietplan.services.diet_service import DietRuleService
from dietplan.services.eligibility_service import find_eligible_foods, find_eligible_foods_for_prompt
from dietplan.services.meal_planning_service import MealPlanningService
from dietplan.services.stats_service import StatsService

logger = logging.getLogger(__name__)

"""
Tool Registry
-------------
Every query the backend answers is also published as a LangChain
StructuredTool so a chat model can call it. Tools return plain
lists/dicts (JSON-serializable), never ORM rows.
"""


# ============ ARGUMENT SCHEMAS ============

class DietAllergenArgs(BaseModel):
    diet_type: str = Field(..., description="Diet type: LCHF or LFV")
    allergens: Optional[str] = Field("", description="Comma-separated allergens to exclude, e.g. 'milk, soy'")


class DietArgs(BaseModel):
    diet_type: str = Field(..., description="Diet type: LCHF or LFV")


class DietTermArgs(BaseModel):
    diet_type: str = Field(..., description="Diet type: LCHF or LFV")
    term: str = Field(..., description="Case-insensitive text to search for")


class DietLimitationArgs(BaseModel):
    diet_type: str = Field(..., description="Diet type: LCHF or LFV")
    limitation: str = Field(..., description="Limitation tier, e.g. OK, Limited, Restricted")


class DietCategoryArgs(BaseModel):
    diet_type: str = Field(..., description="Diet type: LCHF or LFV")
    category: str = Field(..., description="Rule category, e.g. Vegetables")


class SearchArgs(BaseModel):
    search_term: str = Field(..., description="Case-insensitive text to search for")


class FdcIdArgs(BaseModel):
    fdc_id: int = Field(..., description="FoodData Central id")


class CategoryArgs(BaseModel):
    category: str = Field(..., description="Food category")


class MinProteinArgs(BaseModel):
    min_protein_grams: Optional[float] = Field(None, description="Minimum protein per 100g (default 10)")


class MaxCaloriesArgs(BaseModel):
    max_calories: Optional[float] = Field(None, description="Maximum kcal per 100g (default 100)")


class CalorieRangeArgs(BaseModel):
    min_calories: Optional[float] = Field(None, description="Minimum kcal per 100g (default 0)")
    max_calories: Optional[float] = Field(None, description="Maximum kcal per 100g (default min + 500)")


class MinFiberArgs(BaseModel):
    min_fiber_grams: Optional[float] = Field(None, description="Minimum fiber per 100g (default 3)")


class MaxSodiumArgs(BaseModel):
    max_sodium_mg: Optional[float] = Field(None, description="Maximum sodium mg per 100g (default 140)")


class VitaminArgs(BaseModel):
    vitamin_type: str = Field(..., description="One of C, D, CALCIUM, IRON, POTASSIUM, MAGNESIUM")
    min_amount: Optional[float] = Field(None, description="Minimum amount per 100g (per-type default when omitted)")


class DietaryFlagArgs(BaseModel):
    low_sodium: Optional[bool] = Field(None, description="Sodium under 140mg")
    low_fat: Optional[bool] = Field(None, description="Total fat under 3g")
    high_fiber: Optional[bool] = Field(None, description="Fiber over 3g")
    low_sugar: Optional[bool] = Field(None, description="Sugars under 5g")


class NoArgs(BaseModel):
    pass


# ============ SERIALIZATION ============

def _dump(items, schema) -> List[Dict[str, Any]]:
    return [schema.model_validate(i).model_dump(mode="json") for i in items]


def _dump_one(item, schema) -> Optional[Dict[str, Any]]:
    return schema.model_validate(item).model_dump(mode="json") if item is not None else None


# ============ REGISTRY ============

def build_diet_tools(db: Session) -> List[StructuredTool]:
    """Tools bound to one database session."""
    meals = MealPlanningService(db)
    rules = DietRuleService(db)
    stats = StatsService(db)

    def eligible_foods(diet_type: str, allergens: Optional[str] = ""):
        return [f.model_dump(mode="json") for f in find_eligible_foods(db, diet_type, allergens)]

    def eligible_foods_for_prompt(diet_type: str, allergens: Optional[str] = ""):
        return [f.model_dump(mode="json") for f in find_eligible_foods_for_prompt(db, diet_type, allergens)]

    specs = [
        ("find_eligible_foods", DietAllergenArgs, eligible_foods,
         "Find foods permitted by an LCHF or LFV diet, excluding foods that contain any listed allergen"),
        ("find_eligible_foods_for_prompt", DietAllergenArgs, eligible_foods_for_prompt,
         "Find a short list of diet-eligible, allergen-free foods suitable for a meal plan prompt"),
        ("search_diet_rules_by_name", DietTermArgs,
         lambda diet_type, term: _dump(rules.search_by_name(diet_type, term), DietRuleResponse),
         "Search diet rule entries by food name"),
        ("get_diet_rules_by_category", DietCategoryArgs,
         lambda diet_type, category: _dump(rules.list_by_category(diet_type, category), DietRuleResponse),
         "List diet rule entries in a category"),
        ("get_diet_rules_by_limitation", DietLimitationArgs,
         lambda diet_type, limitation: _dump(rules.list_by_limitation(diet_type, limitation), DietRuleResponse),
         "List diet rule entries with a given limitation tier"),
        ("get_allowed_diet_foods", DietArgs,
         lambda diet_type: _dump(rules.allowed(diet_type), DietRuleResponse),
         "List foods a diet allows"),
        ("get_restricted_diet_foods", DietArgs,
         lambda diet_type: _dump(rules.restricted(diet_type), DietRuleResponse),
         "List foods a diet restricts or avoids"),
        ("search_foods_by_name", SearchArgs,
         lambda search_term: _dump(meals.search_foods_by_name(search_term), FoodResponse),
         "Search the food catalog by name"),
        ("get_food_by_id", FdcIdArgs,
         lambda fdc_id: _dump_one(meals.get_food_by_id(fdc_id), FoodResponse),
         "Get one catalog food by its FDC id"),
        ("get_foods_by_category", CategoryArgs,
         lambda category: _dump(meals.get_foods_by_category(category), FoodResponse),
         "List catalog foods in a food category"),
        ("get_food_categories", NoArgs,
         lambda: meals.get_food_categories(),
         "List all food categories in the catalog"),
        ("find_foods_without_allergens", NoArgs,
         lambda: _dump(meals.find_foods_without_allergens(), FoodResponse),
         "List catalog foods that carry no allergen tags"),
        ("find_foods_with_allergens", NoArgs,
         lambda: _dump(meals.find_foods_with_allergens(), FoodResponse),
         "List catalog foods that carry allergen tags"),
        ("get_nutrients_by_fdc_id", FdcIdArgs,
         lambda fdc_id: _dump_one(meals.get_nutrients_by_fdc_id(fdc_id), NutrientResponse),
         "Get the nutrient profile of one food by FDC id"),
        ("search_nutrients_by_food_name", SearchArgs,
         lambda search_term: _dump(meals.search_nutrients_by_food_name(search_term), NutrientResponse),
         "Search nutrient profiles by food name, simplified name or synonym"),
        ("find_high_protein_foods", MinProteinArgs,
         lambda min_protein_grams=None: _dump(meals.find_high_protein_foods(min_protein_grams), NutrientResponse),
         "Find high protein foods"),
        ("find_low_calorie_foods", MaxCaloriesArgs,
         lambda max_calories=None: _dump(meals.find_low_calorie_foods(max_calories), NutrientResponse),
         "Find low calorie foods"),
        ("find_foods_in_calorie_range", CalorieRangeArgs,
         lambda min_calories=None, max_calories=None: _dump(
             meals.find_foods_in_calorie_range(min_calories, max_calories), NutrientResponse),
         "Find foods whose calories fall inside a range"),
        ("find_high_fiber_foods", MinFiberArgs,
         lambda min_fiber_grams=None: _dump(meals.find_high_fiber_foods(min_fiber_grams), NutrientResponse),
         "Find high fiber foods"),
        ("find_low_sodium_foods", MaxSodiumArgs,
         lambda max_sodium_mg=None: _dump(meals.find_low_sodium_foods(max_sodium_mg), NutrientResponse),
         "Find low sodium foods"),
        ("find_vitamin_rich_foods", VitaminArgs,
         lambda vitamin_type, min_amount=None: _dump(
             meals.find_vitamin_rich_foods(vitamin_type, min_amount), NutrientResponse),
         "Find foods rich in a vitamin or mineral"),
        ("find_foods_for_diet", DietaryFlagArgs,
         lambda low_sodium=None, low_fat=None, high_fiber=None, low_sugar=None: _dump(
             meals.find_foods_for_diet(low_sodium, low_fat, high_fiber, low_sugar), NutrientResponse),
         "Find foods matching low sodium, low fat, high fiber and low sugar flags"),
        ("find_balanced_foods", NoArgs,
         lambda: _dump(meals.find_balanced_foods(), NutrientResponse),
         "Find foods with a balanced macronutrient split"),
        ("get_nutritional_statistics", NoArgs,
         lambda: stats.get_nutritional_statistics().model_dump(mode="json"),
         "Average calories, protein, fat and carbs across the nutrient table"),
    ]

    return [
        StructuredTool.from_function(func=func, name=name, description=description, args_schema=schema)
        for name, schema, func, description in specs
    ]


def call_tool(tools: List[StructuredTool], name: str, args: Optional[Dict[str, Any]] = None):
    """Run the tool called `name` with `args`. Unknown names raise ToolNotFoundError."""
    tool = next((t for t in tools if t.name == name), None)
    if tool is None:
        raise ToolNotFoundError(name)

    logger.info(f"[Tools] Calling {name} with {args or {}}")
    return tool.invoke(args or {})


def describe_tools(tools: List[StructuredTool]) -> List[Dict[str, Any]]:
    return [
        {"name": t.name, "description": t.description, "parameters": t.args}
        for t in tools
    ]
