from sqlalchemy import Column, Integer, String, Float
from dietplan.database import Base

class Nutrient(Base):
    """
    Per-food nutrient values (per 100g), keyed by the same fdc_id as `foods`.
    There is no FK constraint: the USDA export loads both tables independently.
    """
    __tablename__ = "nutrients"

    fdc_id = Column(Integer, primary_key=True, autoincrement=False)
    food_name = Column(String, index=True, nullable=False)
    simplified_name = Column(String, nullable=True)
    synonyms = Column(String, nullable=True)

    # Macronutrients
    energy_kcal = Column(Float, nullable=True)
    total_fat_g = Column(Float, nullable=True)
    protein_g = Column(Float, nullable=True)
    carbohydrate_g = Column(Float, nullable=True)
    fiber_g = Column(Float, nullable=True)
    sugars_g = Column(Float, nullable=True)
    added_sugars_g = Column(Float, nullable=True)

    # Micronutrients
    sodium_mg = Column(Float, nullable=True)
    potassium_mg = Column(Float, nullable=True)
    calcium_mg = Column(Float, nullable=True)
    iron_mg = Column(Float, nullable=True)
    vitamin_c_mg = Column(Float, nullable=True)
    cholesterol_mg = Column(Float, nullable=True)
    saturated_fat_g = Column(Float, nullable=True)
    vitamin_d_mcg = Column(Float, nullable=True)
    magnesium_mg = Column(Float, nullable=True)


# Column names shared by every nutrient-profile payload
NUTRIENT_FIELDS = (
    "energy_kcal",
    "total_fat_g",
    "protein_g",
    "carbohydrate_g",
    "fiber_g",
    "sugars_g",
    "added_sugars_g",
    "sodium_mg",
    "potassium_mg",
    "calcium_mg",
    "iron_mg",
    "vitamin_c_mg",
    "cholesterol_mg",
    "saturated_fat_g",
    "vitamin_d_mcg",
    "magnesium_mg",
)
