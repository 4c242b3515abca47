from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from dietplan.database import get_db
from dietplan.schemas.common import Page
from dietplan.schemas.diet import DietRuleResponse
from dietplan.schemas.food import FoodResponse, NutrientResponse, NutritionalStatistics
from dietplan.services.diet_service import DietRuleService
from dietplan.services.meal_planning_service import MealPlanningService
from dietplan.services.stats_service import StatsService

router = APIRouter(
    prefix="/api/v1/diet_plan",
    tags=["Foods & Nutrients"]
)


@router.get("/health")
def health():
    return {"status": "UP", "service": "diet-plan"}


# ============ FOODS ============

@router.get("/foods/search", response_model=Page[FoodResponse])
def search_foods(
    search_term: Optional[str] = None,
    page: int = 0,
    size: int = 20,
    db: Session = Depends(get_db)
):
    return MealPlanningService(db).search_foods_paginated(search_term, page, size)


@router.get("/foods/search/all", response_model=List[FoodResponse])
def search_foods_by_name(search_term: str, db: Session = Depends(get_db)):
    return MealPlanningService(db).search_foods_by_name(search_term)


@router.get("/foods/categories", response_model=List[str])
def get_food_categories(db: Session = Depends(get_db)):
    return MealPlanningService(db).get_food_categories()


@router.get("/foods/category/{category}", response_model=List[FoodResponse])
def get_foods_by_category(category: str, db: Session = Depends(get_db)):
    return MealPlanningService(db).get_foods_by_category(category)


@router.get("/foods/allergen-free", response_model=List[FoodResponse])
def get_allergen_free_foods(db: Session = Depends(get_db)):
    return MealPlanningService(db).find_foods_without_allergens()


@router.get("/foods/with-allergens", response_model=List[FoodResponse])
def get_foods_with_allergens(db: Session = Depends(get_db)):
    return MealPlanningService(db).find_foods_with_allergens()


@router.get("/foods/{fdc_id}", response_model=FoodResponse)
def get_food(fdc_id: int, db: Session = Depends(get_db)):
    food = MealPlanningService(db).get_food_by_id(fdc_id)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Food {fdc_id} not found")
    return food


# ============ NUTRIENTS ============

@router.get("/nutrients/search", response_model=Page[NutrientResponse])
def search_nutrients(
    search_term: Optional[str] = None,
    page: int = 0,
    size: int = 20,
    db: Session = Depends(get_db)
):
    return MealPlanningService(db).search_nutrients_paginated(search_term, page, size)


@router.get("/nutrients/search/all", response_model=List[NutrientResponse])
def search_nutrients_by_all_names(search_term: str, db: Session = Depends(get_db)):
    return MealPlanningService(db).search_nutrients_by_food_name(search_term)


@router.get("/nutrients/high-protein", response_model=List[NutrientResponse])
def high_protein(min_protein: Optional[float] = None, db: Session = Depends(get_db)):
    return MealPlanningService(db).find_high_protein_foods(min_protein)


@router.get("/nutrients/low-calorie", response_model=List[NutrientResponse])
def low_calorie(max_calories: Optional[float] = None, db: Session = Depends(get_db)):
    return MealPlanningService(db).find_low_calorie_foods(max_calories)


@router.get("/nutrients/calorie-range", response_model=List[NutrientResponse])
def calorie_range(
    min_calories: Optional[float] = None,
    max_calories: Optional[float] = None,
    db: Session = Depends(get_db)
):
    return MealPlanningService(db).find_foods_in_calorie_range(min_calories, max_calories)


@router.get("/nutrients/high-fiber", response_model=List[NutrientResponse])
def high_fiber(min_fiber: Optional[float] = None, db: Session = Depends(get_db)):
    return MealPlanningService(db).find_high_fiber_foods(min_fiber)


@router.get("/nutrients/low-sodium", response_model=List[NutrientResponse])
def low_sodium(max_sodium: Optional[float] = None, db: Session = Depends(get_db)):
    return MealPlanningService(db).find_low_sodium_foods(max_sodium)


@router.get("/nutrients/vitamin-rich", response_model=List[NutrientResponse])
def vitamin_rich(
    vitamin_type: str = Query(..., description="C, D, CALCIUM, IRON, POTASSIUM or MAGNESIUM"),
    min_amount: Optional[float] = None,
    db: Session = Depends(get_db)
):
    return MealPlanningService(db).find_vitamin_rich_foods(vitamin_type, min_amount)


@router.get("/nutrients/dietary", response_model=List[NutrientResponse])
def dietary_flags(
    low_sodium: Optional[bool] = None,
    low_fat: Optional[bool] = None,
    high_fiber: Optional[bool] = None,
    low_sugar: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    return MealPlanningService(db).find_foods_for_diet(low_sodium, low_fat, high_fiber, low_sugar)


@router.get("/nutrients/balanced", response_model=List[NutrientResponse])
def balanced(db: Session = Depends(get_db)):
    return MealPlanningService(db).find_balanced_foods()


@router.get("/nutrients/{fdc_id}", response_model=NutrientResponse)
def get_nutrients(fdc_id: int, db: Session = Depends(get_db)):
    nutrient = MealPlanningService(db).get_nutrients_by_fdc_id(fdc_id)
    if nutrient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Nutrients for {fdc_id} not found")
    return nutrient


# ============ LCHF TIERS ============

@router.get("/lchf/recommended", response_model=List[DietRuleResponse])
def lchf_recommended(db: Session = Depends(get_db)):
    return DietRuleService(db).recommended_lchf()


@router.get("/lchf/avoid", response_model=List[DietRuleResponse])
def lchf_avoid(db: Session = Depends(get_db)):
    return DietRuleService(db).avoid_lchf()


# ============ STATS ============

@router.get("/stats/nutrition", response_model=NutritionalStatistics)
def nutrition_stats(db: Session = Depends(get_db)):
    return StatsService(db).get_nutritional_statistics()


@router.get("/stats/category-count")
def category_count(category: str, db: Session = Depends(get_db)):
    return {"category": category, "count": StatsService(db).count_foods_by_category(category)}
