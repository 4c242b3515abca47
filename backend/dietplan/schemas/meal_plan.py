from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class MealPlanRequest(BaseModel):
    age: int = Field(40, gt=0)
    bmi: float = Field(20.0, gt=0)
    diet_type: str = "LCHF"
    diabetic_type: str = "Type 2"
    cuisine_type: str = "Indian"
    allergens: Optional[str] = "Dairy"
    other_food_restrictions: Optional[str] = ""
    other_medical_conditions: Optional[str] = ""


class MealPlanResponse(BaseModel):
    diet_type: str
    source: str  # "llm" or "fallback"
    foods: List[str]
    meal_plan: Dict[str, Any]


class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1)
    session_id: str = "default"


class ChatResponse(BaseModel):
    response: str
    source: str
    session_id: str
    tools_used: List[str] = []


class BmiRequest(BaseModel):
    height_cm: float = Field(..., gt=0)
    weight_kg: float = Field(..., gt=0)
    age: Optional[int] = Field(None, gt=0)
    gender: Optional[str] = None
    activity_level: Optional[str] = "sedentary"


class BmiResponse(BaseModel):
    bmi: float
    category: str
    daily_calories: Optional[int] = None
