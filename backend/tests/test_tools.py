import unittest

from fastapi.testclient import TestClient
from pydantic import ValidationError

from dietplan.database import get_db
from dietplan.exceptions import InvalidArgumentError, ToolNotFoundError
from dietplan.main import app
from dietplan.services.tool_registry import build_diet_tools, call_tool, describe_tools

from helpers import make_session_factory, load_sample_data


class TestToolRegistry(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)
        self.tools = build_diet_tools(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_registry_names(self):
        names = [t.name for t in self.tools]
        self.assertEqual(len(names), len(set(names)))
        for expected in ("find_eligible_foods", "find_eligible_foods_for_prompt", "get_allowed_diet_foods",
                         "find_high_protein_foods", "find_vitamin_rich_foods", "get_nutritional_statistics"):
            self.assertIn(expected, names)

    def test_eligible_foods_tool(self):
        result = call_tool(self.tools, "find_eligible_foods", {"diet_type": "LCHF", "allergens": "milk"})
        names = [row["food_name"] for row in result]
        self.assertNotIn("Cheddar cheese", names)
        self.assertIn("Spinach, raw", names)
        self.assertIsInstance(result[0], dict)

    def test_tool_defaults(self):
        result = call_tool(self.tools, "find_high_protein_foods")
        self.assertEqual([row["fdc_id"] for row in result], [1, 4, 6, 2])

        self.assertIsNone(call_tool(self.tools, "get_food_by_id", {"fdc_id": 999}))

    def test_unknown_tool(self):
        with self.assertRaises(ToolNotFoundError):
            call_tool(self.tools, "drop_tables", {})

    def test_bad_arguments(self):
        with self.assertRaises(InvalidArgumentError):
            call_tool(self.tools, "find_vitamin_rich_foods", {"vitamin_type": "B12"})
        with self.assertRaises(ValidationError):
            call_tool(self.tools, "get_allowed_diet_foods", {})

    def test_describe_tools(self):
        described = {d["name"]: d for d in describe_tools(self.tools)}
        self.assertIn("diet_type", described["find_eligible_foods"]["parameters"])
        self.assertEqual(described["get_food_categories"]["parameters"], {})


class TestToolsApi(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        db = Session()
        load_sample_data(db)
        db.close()

        def override_get_db():
            session = Session()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def test_list_tools(self):
        response = self.client.get("/api/v1/tools")
        self.assertEqual(response.status_code, 200)
        self.assertIn("find_eligible_foods", [t["name"] for t in response.json()])

    def test_invoke_tool(self):
        response = self.client.post("/api/v1/tools/get_restricted_diet_foods", json={"diet_type": "LFV"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["tool"], "get_restricted_diet_foods")
        self.assertEqual(sorted(r["name"] for r in body["result"]), ["Avocado", "Cheese"])

    def test_invoke_errors(self):
        self.assertEqual(self.client.post("/api/v1/tools/nope", json={}).status_code, 404)
        self.assertEqual(self.client.post("/api/v1/tools/get_allowed_diet_foods", json={}).status_code, 422)
        response = self.client.post("/api/v1/tools/get_allowed_diet_foods", json={"diet_type": "KETO"})
        self.assertEqual(response.status_code, 400)


if __name__ == '__main__':
    unittest.main()
