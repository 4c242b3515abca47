import unittest

import httpx

from dietplan.models.food import Food
from dietplan.models.nutrient import Nutrient
from dietplan.services.food_api_service import FoodAPIService

from helpers import make_session_factory

BROCCOLI = {
    "fdcId": 747447,
    "description": "Broccoli, raw",
    "dataType": "Foundation",
    "foodCategory": "Vegetables and Vegetable Products",
    "publishedDate": "2020-04-01",
    "foodNutrients": [
        {"nutrientId": 1003, "nutrientNumber": "203", "value": 2.57},
        {"nutrientId": 1004, "nutrientNumber": "204", "value": 0.34},
        {"nutrientId": 1005, "nutrientNumber": "205", "value": 6.27},
        {"nutrientId": 1079, "nutrientNumber": "291", "value": 2.4},
        {"nutrientId": 1162, "nutrientNumber": "401", "value": 91.3},
    ],
}

ALMONDS = {
    "fdcId": 170567,
    "description": "Nuts, almonds",
    "dataType": "SR Legacy",
    "foodNutrients": [
        {"nutrientId": 1008, "nutrientNumber": "208", "value": 579},
        {"nutrientNumber": "307", "value": 1},
    ],
}


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestFoodAPIService(unittest.TestCase):

    def test_search_prefers_filtered_results(self):
        seen = []

        def handler(request):
            seen.append(request.url.params.get_list("dataType"))
            return httpx.Response(200, json={"foods": [BROCCOLI]})

        service = FoodAPIService(api_key="test", client=_client(handler))
        self.assertEqual(service.search_food("broccoli"), [BROCCOLI])
        self.assertEqual(seen, [["Foundation", "SR Legacy"]])

    def test_search_retries_without_data_type(self):
        seen = []

        def handler(request):
            data_types = request.url.params.get_list("dataType")
            seen.append(data_types)
            return httpx.Response(200, json={"foods": [] if data_types else [ALMONDS]})

        service = FoodAPIService(api_key="test", client=_client(handler))
        self.assertEqual(service.search_food("almonds"), [ALMONDS])
        self.assertEqual(seen, [["Foundation", "SR Legacy"], []])

    def test_http_error_gives_empty_list(self):
        service = FoodAPIService(api_key="test", client=_client(lambda request: httpx.Response(503)))
        self.assertEqual(service.search_food("broccoli"), [])

    def test_missing_key_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        service = FoodAPIService(api_key="", client=_client(handler))
        service.api_key = None
        self.assertEqual(service.search_food("broccoli"), [])

    def test_to_models(self):
        food, nutrient = FoodAPIService(api_key="test").to_models(BROCCOLI)
        self.assertEqual(food.fdc_id, 747447)
        self.assertEqual(food.food_category, "Vegetables and Vegetable Products")
        self.assertEqual(nutrient.simplified_name, "Broccoli")
        self.assertEqual(nutrient.vitamin_c_mg, 91.3)
        self.assertIsNone(nutrient.sodium_mg)
        # no energy reported: 2.57*4 + 6.27*4 + 0.34*9
        self.assertAlmostEqual(nutrient.energy_kcal, 38.42, places=2)

    def test_legacy_nutrient_numbers(self):
        _, nutrient = FoodAPIService(api_key="test").to_models(ALMONDS)
        self.assertEqual(nutrient.energy_kcal, 579)
        self.assertEqual(nutrient.sodium_mg, 1)


class TestImportFoods(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_import_is_an_upsert(self):
        service = FoodAPIService(
            api_key="test",
            client=_client(lambda request: httpx.Response(200, json={"foods": [BROCCOLI, ALMONDS]})),
        )
        self.assertEqual(len(service.import_foods(self.db, "mixed")), 2)
        service.import_foods(self.db, "mixed")

        self.assertEqual(self.db.query(Food).count(), 2)
        self.assertEqual(self.db.query(Nutrient).count(), 2)
        self.assertEqual(self.db.get(Food, 170567).food_name, "Nuts, almonds")


if __name__ == '__main__':
    unittest.main()
