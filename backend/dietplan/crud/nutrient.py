from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from dietplan.models.nutrient import Nutrient

"""
Nutrient Table CRUD
-------------------
Parametrised scans over `nutrients`. Thresholds arrive here already defaulted
and validated; NULL values never satisfy a comparison.
"""

# Vitamin / mineral type -> column
VITAMIN_COLUMNS = {
    "C": Nutrient.vitamin_c_mg,
    "D": Nutrient.vitamin_d_mcg,
    "CALCIUM": Nutrient.calcium_mg,
    "IRON": Nutrient.iron_mg,
    "POTASSIUM": Nutrient.potassium_mg,
    "MAGNESIUM": Nutrient.magnesium_mg,
}

def get_nutrient(db: Session, fdc_id: int):
    return db.query(Nutrient).filter(Nutrient.fdc_id == fdc_id).first()

def search_nutrients_page(db: Session, search_term: str = None, skip: int = 0, limit: int = 20):
    query = db.query(Nutrient)
    if search_term:
        query = query.filter(func.lower(Nutrient.food_name).contains(search_term.lower(), autoescape=True))
    total = query.count()
    items = query.order_by(Nutrient.fdc_id).offset(skip).limit(limit).all()
    return items, total

def search_nutrients_by_all_names(db: Session, search_term: str):
    """Matches food_name, simplified_name or synonyms"""
    term = search_term.lower()
    return db.query(Nutrient).filter(
        or_(
            func.lower(Nutrient.food_name).contains(term, autoescape=True),
            func.lower(Nutrient.simplified_name).contains(term, autoescape=True),
            func.lower(Nutrient.synonyms).contains(term, autoescape=True),
        )
    ).order_by(Nutrient.food_name).all()

def get_high_protein(db: Session, min_protein: float):
    return db.query(Nutrient).filter(
        Nutrient.protein_g >= min_protein
    ).order_by(Nutrient.protein_g.desc(), Nutrient.fdc_id).all()

def get_low_calorie(db: Session, max_calories: float):
    return db.query(Nutrient).filter(
        Nutrient.energy_kcal <= max_calories
    ).order_by(Nutrient.energy_kcal.asc(), Nutrient.fdc_id).all()

def get_high_fiber(db: Session, min_fiber: float):
    return db.query(Nutrient).filter(
        Nutrient.fiber_g >= min_fiber
    ).order_by(Nutrient.fiber_g.desc(), Nutrient.fdc_id).all()

def get_low_sodium(db: Session, max_sodium: float):
    return db.query(Nutrient).filter(
        Nutrient.sodium_mg <= max_sodium
    ).order_by(Nutrient.sodium_mg.asc(), Nutrient.fdc_id).all()

def get_in_calorie_range(db: Session, min_calories: float, max_calories: float):
    return db.query(Nutrient).filter(
        Nutrient.energy_kcal.between(min_calories, max_calories)
    ).order_by(Nutrient.energy_kcal.asc(), Nutrient.fdc_id).all()

def get_rich_in(db: Session, vitamin_type: str, min_amount: float):
    column = VITAMIN_COLUMNS[vitamin_type]
    return db.query(Nutrient).filter(
        column >= min_amount
    ).order_by(column.desc(), Nutrient.fdc_id).all()

def get_for_dietary_flags(db: Session, low_sodium: bool, low_fat: bool, high_fiber: bool, low_sugar: bool):
    query = db.query(Nutrient)
    if low_sodium:
        query = query.filter(Nutrient.sodium_mg < 140)
    if low_fat:
        query = query.filter(Nutrient.total_fat_g < 3)
    if high_fiber:
        query = query.filter(Nutrient.fiber_g > 3)
    if low_sugar:
        query = query.filter(Nutrient.sugars_g < 5)
    return query.order_by(Nutrient.fdc_id).all()

def get_with_positive_energy(db: Session):
    return db.query(Nutrient).filter(
        Nutrient.energy_kcal > 0
    ).order_by(Nutrient.fdc_id).all()

def get_statistics(db: Session):
    """Averages over rows with known energy. Returns a Row with count + 4 averages."""
    return db.query(
        func.count(Nutrient.fdc_id).label("food_count"),
        func.avg(Nutrient.energy_kcal).label("avg_calories"),
        func.avg(Nutrient.protein_g).label("avg_protein"),
        func.avg(Nutrient.total_fat_g).label("avg_fat"),
        func.avg(Nutrient.carbohydrate_g).label("avg_carbs"),
    ).filter(Nutrient.energy_kcal.isnot(None)).one()

def upsert_nutrient(db: Session, nutrient: Nutrient) -> Nutrient:
    merged = db.merge(nutrient)
    db.commit()
    return merged
