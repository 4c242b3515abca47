import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dietplan.database import get_db
from dietplan.schemas.meal_plan import (
    BmiRequest,
    BmiResponse,
    ChatRequest,
    ChatResponse,
    MealPlanRequest,
    MealPlanResponse,
)
from dietplan.services.chat_memory_service import ChatMemoryService
from dietplan.services.chat_service import ChatService
from dietplan.services.nutrition_service import bmi_category, calculate_bmi, calculate_daily_calories
from dietplan.services.prompt_service import build_meal_plan_prompt, generate_meal_plan

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Chat & Meal Plans"]
)


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, db: Session = Depends(get_db)):
    """Free-text question answered by the model, with diet tools picked from the query."""
    return ChatService(db).get_chat_response(request.query, request.session_id)


@router.delete("/chat/{session_id}")
def clear_chat(session_id: str):
    ChatMemoryService(session_id).clear()
    return {"session_id": session_id, "cleared": True}


@router.post("/meal-plans/prompt")
def meal_plan_prompt(request: MealPlanRequest, db: Session = Depends(get_db)):
    return {"prompt": build_meal_plan_prompt(db, request)}


@router.post("/meal-plans", response_model=MealPlanResponse)
def create_meal_plan(request: MealPlanRequest, db: Session = Depends(get_db)):
    logger.info(f"[Meal Plan API] Generating {request.diet_type} plan, allergens '{request.allergens}'")
    return generate_meal_plan(db, request)


@router.post("/bmi", response_model=BmiResponse)
def bmi(request: BmiRequest):
    value = calculate_bmi(request.height_cm, request.weight_kg)
    calories = None
    if request.age:
        calories = calculate_daily_calories(
            request.weight_kg, request.height_cm, request.age, request.gender, request.activity_level
        )
    return BmiResponse(bmi=value, category=bmi_category(value), daily_calories=calories)
