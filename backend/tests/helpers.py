from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dietplan.database import Base
import dietplan.models
from dietplan.models.diet_rule import LchfFood, LfvFood
from dietplan.models.food import Food
from dietplan.models.nutrient import Nutrient


def make_session_factory():
    """Fresh in-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


FOODS = [
    # fdc_id, name, category, allergen_flags
    (1, "Grilled Chicken Breast", "Poultry Products", "none"),
    (2, "Chickpea Salad", "Legumes", None),
    (3, "Spinach, raw", "Vegetables", None),
    (4, "Cheddar cheese", "Dairy and Egg Products", "milk"),
    (5, "Strawberries, raw", "Fruits", ""),
    (6, "Almond butter", "Nut and Seed Products", "tree nuts, soy lecithin"),
    (7, "Spinach, raw", "Vegetables", "nan"),
]

NUTRIENTS = [
    dict(fdc_id=1, food_name="Grilled Chicken Breast", simplified_name="chicken breast",
         energy_kcal=165, protein_g=31, total_fat_g=3.6, carbohydrate_g=0, fiber_g=0, sugars_g=0,
         sodium_mg=74, iron_mg=1.0, vitamin_c_mg=0),
    dict(fdc_id=2, food_name="Chickpea Salad", simplified_name="chickpea salad",
         energy_kcal=200, protein_g=10, total_fat_g=6, carbohydrate_g=25, fiber_g=7, sugars_g=3,
         sodium_mg=300),
    dict(fdc_id=3, food_name="Spinach, raw", simplified_name="spinach", synonyms="palak",
         energy_kcal=23, protein_g=2.9, total_fat_g=0.4, carbohydrate_g=3.6, fiber_g=2.2, sugars_g=0.4,
         sodium_mg=79, vitamin_c_mg=28.1, iron_mg=2.71, calcium_mg=99, potassium_mg=558, magnesium_mg=79),
    dict(fdc_id=4, food_name="Cheddar cheese", simplified_name="cheddar",
         energy_kcal=403, protein_g=25, total_fat_g=33, carbohydrate_g=1.3, fiber_g=0, sugars_g=0.5,
         sodium_mg=621, calcium_mg=721),
    dict(fdc_id=5, food_name="Strawberries, raw", simplified_name="strawberries",
         energy_kcal=32, protein_g=0.7, total_fat_g=0.3, carbohydrate_g=7.7, fiber_g=2, sugars_g=4.9,
         sodium_mg=1, vitamin_c_mg=58.8),
    dict(fdc_id=6, food_name="Almond butter", simplified_name="almond butter",
         energy_kcal=614, protein_g=21, total_fat_g=56, carbohydrate_g=19, fiber_g=10, sugars_g=4.4,
         sodium_mg=7, magnesium_mg=279),
    dict(fdc_id=100, food_name="Rice cake, plain", simplified_name="rice cake",
         energy_kcal=200, protein_g=1, total_fat_g=2, carbohydrate_g=5),
]

LCHF = [
    ("chicken", "Meat & Poultry", "OK"),
    ("chickpea", "Pulses", "Restricted"),
    ("Spinach", "Vegetables", "OK"),
    ("Cheese", "Dairy", "OK"),
    ("Strawberr", "Fruits", "Limited"),
    ("Almond", "Nuts & Seeds", "OK"),
    ("Oat", "Grains", "Avoid"),
    ("Salmon", "Fish & Seafood", "Recommended"),
]

LFV = [
    ("Spinach", "Vegetables", "OK"),
    ("chickpea", "Pulses", "Moderation"),
    ("Cheese", "Dairy", "Restricted"),
    ("Strawberr", "Fruits", "OK"),
    ("Almond", "Nuts & Seeds", "Moderation"),
    ("Avocado", "Fruits", "Limited"),
]


def load_sample_data(db):
    for fdc_id, name, category, flags in FOODS:
        db.add(Food(fdc_id=fdc_id, food_name=name, food_category=category,
                    data_type="Foundation", allergen_flags=flags))
    for row in NUTRIENTS:
        db.add(Nutrient(**row))
    for name, category, limitation in LCHF:
        db.add(LchfFood(name=name, category=category, limitation=limitation))
    for name, category, limitation in LFV:
        db.add(LfvFood(name=name, category=category, limitation=limitation))
    db.commit()
