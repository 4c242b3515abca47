from sqlalchemy import func
from sqlalchemy.orm import Session
from dietplan.models.diet_rule import DietType, RULE_MODELS

"""
Diet Rule CRUD
--------------
LCHF and LFV tables share one column layout, so every accessor takes the
DietType and resolves the model through RULE_MODELS.
"""

def _model(diet_type: DietType):
    return RULE_MODELS[diet_type]

def get_rule(db: Session, diet_type: DietType, rule_id: int):
    model = _model(diet_type)
    return db.query(model).filter(model.id == rule_id).first()

def search_rules_by_name(db: Session, diet_type: DietType, term: str):
    model = _model(diet_type)
    return db.query(model).filter(
        func.lower(model.name).contains(term.lower(), autoescape=True)
    ).order_by(model.id).all()

def get_rules_by_category(db: Session, diet_type: DietType, category: str):
    model = _model(diet_type)
    return db.query(model).filter(
        func.lower(model.category) == category.lower()
    ).order_by(model.id).all()

def get_rules_by_limitations(db: Session, diet_type: DietType, limitations):
    """`limitations` is an iterable of vocabulary members (or plain strings)."""
    model = _model(diet_type)
    wanted = [str(getattr(l, "value", l)).lower() for l in limitations]
    return db.query(model).filter(
        func.lower(model.limitation).in_(wanted)
    ).order_by(model.id).all()

def search_rules(db: Session, diet_type: DietType, name: str = None, category: str = None, limitation: str = None):
    """Conjunction of the optional filters; None/blank filters are ignored."""
    model = _model(diet_type)
    query = db.query(model)
    if name:
        query = query.filter(func.lower(model.name).contains(name.lower(), autoescape=True))
    if category:
        query = query.filter(func.lower(model.category) == category.lower())
    if limitation:
        query = query.filter(func.lower(model.limitation) == limitation.lower())
    return query.order_by(model.id).all()

def search_rules_page(db: Session, diet_type: DietType, name: str = None, category: str = None,
                      limitation: str = None, skip: int = 0, limit: int = 20):
    model = _model(diet_type)
    query = db.query(model)
    if name:
        query = query.filter(func.lower(model.name).contains(name.lower(), autoescape=True))
    if category:
        query = query.filter(func.lower(model.category) == category.lower())
    if limitation:
        query = query.filter(func.lower(model.limitation) == limitation.lower())
    total = query.count()
    return query.order_by(model.id).offset(skip).limit(limit).all(), total

def get_distinct_categories(db: Session, diet_type: DietType):
    model = _model(diet_type)
    return [r[0] for r in db.query(model.category).distinct().order_by(model.category).all()]

def get_distinct_limitations(db: Session, diet_type: DietType):
    model = _model(diet_type)
    return [r[0] for r in db.query(model.limitation).distinct().order_by(model.limitation).all()]

def count_by_category(db: Session, diet_type: DietType, category: str) -> int:
    model = _model(diet_type)
    return db.query(func.count(model.id)).filter(
        func.lower(model.category) == category.lower()
    ).scalar() or 0

def count_by_limitation(db: Session, diet_type: DietType, limitation: str) -> int:
    model = _model(diet_type)
    return db.query(func.count(model.id)).filter(
        func.lower(model.limitation) == limitation.lower()
    ).scalar() or 0
