import unittest

from dietplan.exceptions import InvalidArgumentError
from dietplan.models.food import Food
from dietplan.schemas.food import FoodResponse
from dietplan.services.meal_planning_service import MealPlanningService
from dietplan.services.stats_service import StatsService

from helpers import make_session_factory, load_sample_data


def _ids(rows):
    return [r.fdc_id for r in rows]


class TestThresholdQueries(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)
        self.service = MealPlanningService(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_high_protein_default_matches_explicit_ten(self):
        self.assertEqual(_ids(self.service.find_high_protein_foods(None)),
                         _ids(self.service.find_high_protein_foods(10.0)))
        # 10g is included, highest first
        self.assertEqual(_ids(self.service.find_high_protein_foods()), [1, 4, 6, 2])

    def test_negative_threshold_uses_default(self):
        self.assertEqual(_ids(self.service.find_high_fiber_foods(-1)), _ids(self.service.find_high_fiber_foods(3.0)))
        self.assertEqual(_ids(self.service.find_high_fiber_foods()), [6, 2])

    def test_low_calorie(self):
        self.assertEqual(_ids(self.service.find_low_calorie_foods()), [3, 5])
        self.assertEqual(_ids(self.service.find_low_calorie_foods(0)), [3, 5])
        self.assertEqual(_ids(self.service.find_low_calorie_foods(165)), [3, 5, 1])

    def test_calorie_range_defaults(self):
        # max <= min falls back to min + 500
        self.assertEqual(sorted(_ids(self.service.find_foods_in_calorie_range(150, 100))), [1, 2, 4, 6, 100])
        self.assertNotIn(6, _ids(self.service.find_foods_in_calorie_range()))

    def test_low_sodium_skips_unknown_values(self):
        self.assertEqual(sorted(_ids(self.service.find_low_sodium_foods())), [1, 3, 5, 6])

    def test_vitamin_rich(self):
        self.assertEqual(_ids(self.service.find_vitamin_rich_foods("c")), [5, 3])
        self.assertEqual(_ids(self.service.find_vitamin_rich_foods("CALCIUM", 500)), [4])
        self.assertEqual(_ids(self.service.find_vitamin_rich_foods(" magnesium ")), [6, 3])

    def test_invalid_vitamin_type(self):
        for value in ("B12", "", "   ", None):
            with self.assertRaises(InvalidArgumentError):
                self.service.find_vitamin_rich_foods(value)

    def test_dietary_flags(self):
        self.assertEqual(_ids(self.service.find_foods_for_diet(low_sodium=True, high_fiber=True)), [6])
        self.assertEqual(len(self.service.find_foods_for_diet()), 7)

    def test_balanced(self):
        self.assertEqual(_ids(self.service.find_balanced_foods()), [2])


class TestFoodCatalog(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)
        self.service = MealPlanningService(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_search_and_lookup(self):
        self.assertEqual(sorted(_ids(self.service.search_foods_by_name("SPINACH"))), [3, 7])
        self.assertEqual(self.service.get_food_by_id(4).food_name, "Cheddar cheese")
        self.assertIsNone(self.service.get_food_by_id(999))

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidArgumentError):
            self.service.search_foods_by_name(" ")
        with self.assertRaises(InvalidArgumentError):
            self.service.get_food_by_id(0)
        with self.assertRaises(InvalidArgumentError):
            self.service.get_nutrients_by_fdc_id(-5)
        with self.assertRaises(InvalidArgumentError):
            self.service.get_foods_by_category("")

    def test_categories(self):
        self.assertIn("Vegetables", self.service.get_food_categories())
        self.assertEqual(sorted(_ids(self.service.get_foods_by_category("vegetables"))), [3, 7])

    def test_allergen_split(self):
        self.assertEqual(sorted(_ids(self.service.find_foods_without_allergens())), [2, 3, 5, 7])
        self.assertEqual(sorted(_ids(self.service.find_foods_with_allergens())), [1, 4, 6])

    def test_placeholder_tags_count_as_untagged(self):
        self.db.add_all([
            Food(fdc_id=30, food_name="Tofu", allergen_flags=" NaN "),
            Food(fdc_id=31, food_name="Rice", allergen_flags="   "),
        ])
        self.db.commit()
        without = _ids(self.service.find_foods_without_allergens())
        self.assertIn(30, without)
        self.assertIn(31, without)
        self.assertNotIn(30, _ids(self.service.find_foods_with_allergens()))

    def test_nutrient_search_covers_synonyms(self):
        self.assertEqual(_ids(self.service.search_nutrients_by_food_name("palak")), [3])
        self.assertEqual(_ids(self.service.search_nutrients_by_food_name("chicken breast")), [1])

    def test_paginated_search(self):
        page = self.service.search_foods_paginated(None, page=0, size=2)
        self.assertEqual(page.total_elements, 7)
        self.assertEqual(page.total_pages, 4)
        self.assertIsInstance(page.content[0], FoodResponse)

        page = self.service.search_nutrients_paginated("raw", page=0, size=10)
        self.assertEqual(page.total_elements, 2)


class TestStats(unittest.TestCase):

    def setUp(self):
        self.engine, Session = make_session_factory()
        self.db = Session()
        load_sample_data(self.db)
        self.stats = StatsService(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_nutritional_statistics(self):
        stats = self.stats.get_nutritional_statistics()
        self.assertEqual(stats.food_count, 7)
        self.assertAlmostEqual(stats.avg_calories, 233.86, places=2)

    def test_counts(self):
        self.assertEqual(self.stats.count_foods_by_category("Vegetables"), 2)
        summary = self.stats.get_rule_summary("LCHF")
        self.assertEqual(summary["total_rules"], 8)
        self.assertEqual(summary["by_limitation"]["OK"], 4)
        with self.assertRaises(InvalidArgumentError):
            self.stats.count_foods_by_category(" ")


if __name__ == '__main__':
    unittest.main()
