from pydantic import BaseModel, ConfigDict
from typing import Optional


class FoodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fdc_id: int
    food_name: str
    data_type: Optional[str] = None
    food_category: Optional[str] = None
    publication_date: Optional[str] = None
    allergen_flags: Optional[str] = None


class NutrientProfile(BaseModel):
    """Nutrient values per 100g; None means unknown for that food."""
    model_config = ConfigDict(from_attributes=True)

    energy_kcal: Optional[float] = None
    total_fat_g: Optional[float] = None
    protein_g: Optional[float] = None
    carbohydrate_g: Optional[float] = None
    fiber_g: Optional[float] = None
    sugars_g: Optional[float] = None
    added_sugars_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    potassium_mg: Optional[float] = None
    calcium_mg: Optional[float] = None
    iron_mg: Optional[float] = None
    vitamin_c_mg: Optional[float] = None
    cholesterol_mg: Optional[float] = None
    saturated_fat_g: Optional[float] = None
    vitamin_d_mcg: Optional[float] = None
    magnesium_mg: Optional[float] = None


class NutrientResponse(NutrientProfile):
    fdc_id: int
    food_name: str
    simplified_name: Optional[str] = None
    synonyms: Optional[str] = None


class NutritionalStatistics(BaseModel):
    food_count: int
    avg_calories: Optional[float] = None
    avg_protein: Optional[float] = None
    avg_fat: Optional[float] = None
    avg_carbs: Optional[float] = None
