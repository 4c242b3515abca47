from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from dietplan.models.food import Food
from dietplan.utils.allergens import EMPTY_ALLERGEN_MARKERS

"""
Food Catalog CRUD
-----------------
Read-only access to the `foods` table. Argument validation lives in
dietplan.services.meal_planning_service.
"""

def get_food(db: Session, fdc_id: int):
    return db.query(Food).filter(Food.fdc_id == fdc_id).first()

def search_foods_by_name(db: Session, search_term: str):
    """Case-insensitive substring search on food_name"""
    return db.query(Food).filter(
        func.lower(Food.food_name).contains(search_term.lower(), autoescape=True)
    ).order_by(Food.food_name).all()

def search_foods_page(db: Session, search_term: str = None, skip: int = 0, limit: int = 20):
    """Returns (items, total). A blank term pages through the whole catalog."""
    query = db.query(Food)
    if search_term:
        query = query.filter(func.lower(Food.food_name).contains(search_term.lower(), autoescape=True))
    total = query.count()
    items = query.order_by(Food.fdc_id).offset(skip).limit(limit).all()
    return items, total

def get_foods_by_category(db: Session, category: str):
    return db.query(Food).filter(
        func.lower(Food.food_category) == category.lower()
    ).order_by(Food.food_name).all()

def get_distinct_categories(db: Session):
    rows = db.query(Food.food_category).filter(
        Food.food_category.isnot(None)
    ).distinct().order_by(Food.food_category).all()
    return [r[0] for r in rows]

def count_foods_by_category(db: Session, category: str) -> int:
    return db.query(func.count(Food.fdc_id)).filter(
        func.lower(Food.food_category) == category.lower()
    ).scalar() or 0

def _without_allergen_tags():
    return or_(
        Food.allergen_flags.is_(None),
        func.lower(func.trim(Food.allergen_flags)).in_(EMPTY_ALLERGEN_MARKERS),
    )

def get_foods_with_allergens(db: Session):
    return db.query(Food).filter(~_without_allergen_tags()).order_by(Food.food_name).all()

def get_foods_without_allergens(db: Session):
    return db.query(Food).filter(_without_allergen_tags()).order_by(Food.food_name).all()

def upsert_food(db: Session, food: Food) -> Food:
    """Insert or replace by fdc_id (used by the importers only)."""
    merged = db.merge(food)
    db.commit()
    return merged
