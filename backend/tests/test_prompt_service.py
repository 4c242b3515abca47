import json
import unittest
from unittest.mock import MagicMock

from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.exc import OperationalError

from dietplan.schemas.meal_plan import MealPlanRequest
from dietplan.services.llm_service import parse_json_from_text
from dietplan.services.prompt_service import (
    FALLBACK_FOODS,
    FALLBACK_MEAL_PLAN,
    build_meal_plan_prompt,
    generate_meal_plan,
    resolve_prompt_foods,
)

from helpers import make_session_factory, load_sample_data

PLAN = {"day1": {"breakfast": {"mainMealName": "Spinach omelette", "mainMealCalories": 300}}}


class BrokenModel:
    def invoke(self, messages):
        raise ConnectionError("model unreachable")


class TestPromptFoods(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_eligible_foods_embedded(self):
        request = MealPlanRequest(diet_type="LCHF", allergens="milk")
        foods = resolve_prompt_foods(self.db, request)
        self.assertEqual(foods, ["Almond butter", "Grilled Chicken Breast", "Spinach, raw", "Strawberries, raw"])

        prompt = build_meal_plan_prompt(self.db, request)
        self.assertIn(json.dumps(foods), prompt)
        self.assertIn("STRICTLY AVOID ALL FOODS CONTAINING: milk", prompt)
        self.assertIn("LOW CARB HIGH FAT", prompt)

    def test_unknown_diet_uses_fallback_foods(self):
        request = MealPlanRequest(diet_type="KETO")
        self.assertEqual(resolve_prompt_foods(self.db, request), FALLBACK_FOODS)
        self.assertIn(json.dumps(FALLBACK_FOODS), build_meal_plan_prompt(self.db, request))

    def test_everything_filtered_uses_fallback_foods(self):
        request = MealPlanRequest(diet_type="LFV", allergens="spinach, strawberr")
        self.assertEqual(resolve_prompt_foods(self.db, request), FALLBACK_FOODS)

    def test_no_allergy_section_without_allergens(self):
        prompt = build_meal_plan_prompt(self.db, MealPlanRequest(diet_type="LFV", allergens=""))
        self.assertNotIn("CRITICAL ALLERGY", prompt)
        self.assertIn("LOW FAT VEGAN", prompt)


class TestGenerateMealPlan(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_model_reply_is_parsed(self):
        llm = FakeListChatModel(responses=["```json\n" + json.dumps(PLAN) + "\n```"])
        result = generate_meal_plan(self.db, MealPlanRequest(), llm=llm)
        self.assertEqual(result.source, "llm")
        self.assertEqual(result.meal_plan, PLAN)

    def test_unparseable_reply_falls_back(self):
        llm = FakeListChatModel(responses=["Sorry, I cannot help with that."])
        result = generate_meal_plan(self.db, MealPlanRequest(), llm=llm)
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.meal_plan, FALLBACK_MEAL_PLAN)

    def test_model_failure_falls_back(self):
        result = generate_meal_plan(self.db, MealPlanRequest(diet_type="LFV", allergens=""), llm=BrokenModel())
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.foods, ["Spinach, raw", "Strawberries, raw"])
        self.assertEqual(result.meal_plan["breakfast"]["mainMealName"], "Unable to generate custom meal plan")

    def test_storage_error_propagates(self):
        broken = MagicMock()
        broken.query.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
        with self.assertRaises(OperationalError):
            generate_meal_plan(broken, MealPlanRequest(), llm=FakeListChatModel(responses=["{}"]))


class TestParseJson(unittest.TestCase):

    def test_embedded_object(self):
        self.assertEqual(parse_json_from_text('Here you go: {"a": 1} enjoy'), {"a": 1})
        self.assertIsNone(parse_json_from_text(""))
        self.assertIsNone(parse_json_from_text("no json"))


if __name__ == '__main__':
    unittest.main()
