import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from dietplan.models.diet_rule import DietType
from dietplan.schemas.meal_plan import MealPlanRequest, MealPlanResponse
from dietplan.services.llm_service import call_llm, parse_json_from_text
from dietplan.services.tool_registry import build_diet_tools, call_tool

logger = logging.getLogger(__name__)

PROMPT_TOOL_NAME = "find_eligible_foods_for_prompt"

# Used when the diet is neither LCHF nor LFV, or nothing eligible survived the allergen filter
FALLBACK_FOODS = [
    "Spinach",
    "Broccoli",
    "Cauliflower",
    "Cucumber",
    "Tomato",
    "Mushrooms",
    "Lettuce",
    "Bell peppers",
    "Zucchini",
    "Cabbage",
]


def _meal(pre_name, pre_time, pre_kcal, main_time, main_kcal, total_kcal, carbs, protein, fat, fiber):
    return {
        "preMealName": pre_name,
        "preMealTime": pre_time,
        "preMealCalories": pre_kcal,
        "mainMealName": "Unable to generate custom meal plan",
        "mainMealPortionSize": "Please try again later",
        "mainMealTime": main_time,
        "mainMealCalories": main_kcal,
        "totalCalories": total_kcal,
        "mainMealNutrients": {
            "carbs": f"{carbs}g",
            "protein": f"{protein}g",
            "fat": f"{fat}g",
            "fiber": f"{fiber}g",
        },
        "carbs": carbs,
        "protein": protein,
        "fat": fat,
        "fiber": fiber,
    }


FALLBACK_MEAL_PLAN = {
    "breakfast": _meal("Fresh fruit salad", "7:00 AM", 60, "7:30 AM", 250, 310, 30, 15, 10, 5),
    "lunch": _meal("Mixed greens salad", "12:30 PM", 70, "1:00 PM", 350, 420, 45, 20, 15, 7),
    "dinner": _meal("Cucumber raita", "7:30 PM", 60, "8:00 PM", 320, 380, 40, 18, 15, 6),
    "snacks": _meal("Herbal tea", "4:00 PM", 5, "4:30 PM", 150, 155, 20, 5, 3, 2),
}

DIET_GUIDELINES = {
    DietType.LCHF: """IMPORTANT DIETARY GUIDELINES FOR LCHF (LOW CARB HIGH FAT):
- Leafy greens and above-ground vegetables (broccoli, cauliflower, bell peppers, mushrooms, tomatoes, eggplant) are allowed
- Restrict root vegetables (yams, beets, parsnips, turnips, carrots) and pumpkin/squash
- Onion, garlic, turmeric and ginger only as spices in limited quantities
- Butter, ghee, hard cheese, paneer, cottage cheese, sour cream and Greek yogurt are allowed
- Restrict whole milk, low-fat milk, curd, buttermilk, ice cream and soft cheese
- All nuts and seeds are allowed
- Meat, poultry, fish and eggs are allowed and encouraged
- NEVER include grains, dal/lentils, seed oils, added sugars, oats, or fruits other than blueberry, blackberry and limited strawberries
- Carbohydrate content should not exceed 20% of total calories""",
    DietType.LFV: """IMPORTANT DIETARY GUIDELINES FOR LFV (LOW FAT VEGAN):
- All vegetables are allowed including root vegetables, sweet potatoes and yams
- All fruits are allowed but limit avocados, coconuts and olives to once daily
- All whole grains and millets are allowed
- Dal and pulses in moderation, once daily, preferably sprouted; avoid soy products
- Nuts and seeds in moderation, one palm-sized serving daily
- NEVER include dairy, seafood, meat, eggs, cooking oils, added sugars, or oats
- Fat content should not exceed 5% of total calories""",
}

SYSTEM_PROMPT = (
    "You are a clinical nutrition assistant that writes diabetes-friendly meal plans. "
    "Respond with a single JSON object only."
)


def _optional_diet(diet_type: str) -> Optional[DietType]:
    try:
        return DietType.parse(diet_type)
    except ValueError:
        return None


def resolve_prompt_foods(db: Session, request: MealPlanRequest) -> List[str]:
    """
    Eligible food names for the request's diet and allergens, or FALLBACK_FOODS.
    Storage errors propagate.
    """
    diet = _optional_diet(request.diet_type)
    if diet is None:
        logger.warning(f"[Prompt] Diet type '{request.diet_type}' has no rule table. Using fallback foods.")
        return list(FALLBACK_FOODS)

    tools = build_diet_tools(db)
    rows = call_tool(tools, PROMPT_TOOL_NAME, {"diet_type": diet.value, "allergens": request.allergens or ""})
    names = [row["food_name"] for row in rows]
    if not names:
        logger.warning(f"[Prompt] No eligible foods for {diet.value} / allergens '{request.allergens}'. Using fallback foods.")
        return list(FALLBACK_FOODS)
    return names


def build_meal_plan_prompt(db: Session, request: MealPlanRequest, foods: Optional[List[str]] = None) -> str:
    if foods is None:
        foods = resolve_prompt_foods(db, request)
    diet = _optional_diet(request.diet_type)
    guidelines = DIET_GUIDELINES.get(diet, "")

    parts = [
        f"Generate a personalized diabetes-friendly seven-day meal plan with detailed recipes for a "
        f"{request.age}-year-old person with {request.diabetic_type} diabetes and a BMI of {request.bmi}. "
        f"Cuisine preference: {request.cuisine_type}.\n",
    ]
    if request.allergens and request.allergens.strip():
        parts.append(
            f"CRITICAL ALLERGY SAFETY REQUIREMENTS:\nSTRICTLY AVOID ALL FOODS CONTAINING: {request.allergens}.\n"
        )
    parts.append(
        "MEDICAL CONDITION SAFETY REQUIREMENTS:\n"
        f"{request.other_medical_conditions or 'None reported'}. "
        "Completely exclude foods that may worsen or aggravate these conditions.\n"
    )
    parts.append(f"ADDITIONAL DIETARY RESTRICTIONS:\n{request.other_food_restrictions or 'None reported'}.\n")
    parts.append(
        f"This meal plan must strictly follow a {request.diet_type} diet. Refer the food from the below list:\n"
        f"{json.dumps(foods)}\n"
    )
    if guidelines:
        parts.append(guidelines + "\n")
    parts.append(
        "For each day, create:\n"
        "- Pre-meal salads or appetizers\n"
        "- Main meals (breakfast, lunch, dinner)\n"
        "- Snacks\n\n"
        "Each meal must include:\n"
        "- Exact portion sizes\n"
        "- Calories\n"
        "- Suggested meal timing\n"
        "- Nutritional breakdown (carbohydrates, protein, fat, and fiber)\n\n"
        "STRICTLY follow the dietary guidelines and restrictions mentioned above.\n"
        "Ensure that the same main ingredient is NOT used more than once across all meals in a single day.\n\n"
        "Format the response as a JSON object with the specified structure."
    )
    return "\n".join(parts)


def generate_meal_plan(db: Session, request: MealPlanRequest, llm=None) -> MealPlanResponse:
    """
    Prompt the model with the eligible food list. Any model failure
    (call error or unparseable reply) yields FALLBACK_MEAL_PLAN.
    """
    foods = resolve_prompt_foods(db, request)
    prompt = build_meal_plan_prompt(db, request, foods=foods)

    meal_plan: Optional[Dict[str, Any]] = None
    try:
        reply = call_llm(SYSTEM_PROMPT, prompt, temperature=0.4, max_tokens=4000, llm=llm)
        meal_plan = parse_json_from_text(reply)
        if meal_plan is None:
            logger.warning("[Prompt] Model reply was not valid JSON. Using fallback meal plan.")
    except Exception as e:
        logger.error(f"[Prompt] LLM call failed: {e}. Using fallback meal plan.")

    if meal_plan is None:
        return MealPlanResponse(
            diet_type=request.diet_type, source="fallback", foods=foods, meal_plan=FALLBACK_MEAL_PLAN
        )
    return MealPlanResponse(diet_type=request.diet_type, source="llm", foods=foods, meal_plan=meal_plan)
