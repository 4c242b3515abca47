import httpx
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from config import USDA_API_KEY
from dietplan.crud import food as food_crud
from dietplan.crud import nutrient as nutrient_crud
from dietplan.models.food import Food
from dietplan.models.nutrient import Nutrient

logger = logging.getLogger(__name__)

# Nutrient column -> FoodData Central nutrient ids (new id, legacy number)
USDA_NUTRIENT_IDS = {
    "energy_kcal": [1008, 208],
    "total_fat_g": [1004, 204],
    "protein_g": [1003, 203],
    "carbohydrate_g": [1005, 205],
    "fiber_g": [1079, 291],
    "sugars_g": [2000, 269],
    "added_sugars_g": [1235, 539],
    "sodium_mg": [1093, 307],
    "potassium_mg": [1092, 306],
    "calcium_mg": [1087, 301],
    "iron_mg": [1089, 303],
    "vitamin_c_mg": [1162, 401],
    "cholesterol_mg": [1253, 601],
    "saturated_fat_g": [1258, 606],
    "vitamin_d_mcg": [1114, 328],
    "magnesium_mg": [1090, 304],
}


class FoodAPIService:
    """Pulls foods from USDA FoodData Central into the `foods` / `nutrients` tables."""

    BASE_URL = "https://api.nal.usda.gov/fdc/v1"

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.Client] = None):
        self.api_key = api_key or USDA_API_KEY
        self.client = client
        if not self.api_key:
            logger.warning("[USDA-API] USDA_API_KEY not set. Food API service will not work.")

    def search_food(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Search hits for `query`, preferring "Foundation" and "SR Legacy" data.
        HTTP failures are logged and produce an empty list.
        """
        if not self.api_key:
            return []

        params = {
            "api_key": self.api_key,
            "query": query.strip(),
            "pageSize": limit,
            "dataType": ["Foundation", "SR Legacy"],
        }

        client = self.client or httpx.Client()
        try:
            data = self._get(client, params)
            if not data.get("foods"):
                # Retry without dataType filter if no results
                params.pop("dataType")
                data = self._get(client, params)
            return data.get("foods") or []
        except httpx.HTTPError as e:
            logger.error(f"[USDA-API] Error searching for '{query}': {e}")
            return []
        finally:
            if self.client is None:
                client.close()

    def _get(self, client: httpx.Client, params: dict) -> dict:
        response = client.get(f"{self.BASE_URL}/foods/search", params=params, timeout=10.0)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _extract_nutrient(food_data: Dict, nutrient_ids: list) -> Optional[float]:
        """Value of the first matching nutrient, or None when USDA does not report it."""
        for n in food_data.get("foodNutrients", []):
            if n.get("nutrientId") in nutrient_ids or n.get("nutrientNumber") in [str(i) for i in nutrient_ids]:
                value = n.get("value")
                return float(value) if value is not None else None
        return None

    def to_models(self, match: Dict[str, Any]) -> Tuple[Food, Nutrient]:
        """One search hit -> (Food, Nutrient) sharing the hit's fdcId."""
        fdc_id = int(match["fdcId"])
        name = match.get("description") or f"FDC {fdc_id}"

        food = Food(
            fdc_id=fdc_id,
            food_name=name,
            data_type=match.get("dataType"),
            food_category=match.get("foodCategory"),
            publication_date=match.get("publishedDate") or match.get("publicationDate"),
            allergen_flags=None,
        )

        values = {column: self._extract_nutrient(match, ids) for column, ids in USDA_NUTRIENT_IDS.items()}

        # If calories missing but macros present, calculate
        if values["energy_kcal"] is None and any(
            values[k] is not None for k in ("protein_g", "total_fat_g", "carbohydrate_g")
        ):
            values["energy_kcal"] = (
                (values["protein_g"] or 0) * 4 + (values["carbohydrate_g"] or 0) * 4 + (values["total_fat_g"] or 0) * 9
            )

        nutrient = Nutrient(
            fdc_id=fdc_id,
            food_name=name,
            simplified_name=name.split(",")[0].strip(),
            synonyms=None,
            **values,
        )
        return food, nutrient

    def import_foods(self, db: Session, query: str, limit: int = 10) -> List[Food]:
        """Search USDA and upsert every hit. Database errors propagate."""
        imported = []
        for match in self.search_food(query, limit=limit):
            food, nutrient = self.to_models(match)
            imported.append(food_crud.upsert_food(db, food))
            nutrient_crud.upsert_nutrient(db, nutrient)
        logger.info(f"[USDA-API] Imported {len(imported)} foods for '{query}'")
        return imported
