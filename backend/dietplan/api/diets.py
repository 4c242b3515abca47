from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from dietplan.database import get_db
from dietplan.schemas.common import Page
from dietplan.schemas.diet import DietRuleResponse, EligibleFood
from dietplan.services.diet_service import DietRuleService
from dietplan.services.eligibility_service import find_eligible_foods
from dietplan.services.stats_service import StatsService

router = APIRouter(
    prefix="/api/v1/diet_plan/diets/{diet_type}",
    tags=["Diet Rules"]
)


@router.get("/eligible-foods", response_model=List[EligibleFood])
def eligible_foods(
    diet_type: str,
    allergens: Optional[str] = "",
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Catalog foods the diet permits (OK / Limited), minus the listed allergens."""
    return find_eligible_foods(db, diet_type, allergens, limit=limit)


@router.get("/search", response_model=List[DietRuleResponse])
def search_rules(diet_type: str, term: str, db: Session = Depends(get_db)):
    return DietRuleService(db).search_by_name(diet_type, term)


@router.get("/search/paginated", response_model=Page[DietRuleResponse])
def search_rules_paginated(
    diet_type: str,
    term: Optional[str] = None,
    page: int = 0,
    size: int = 20,
    db: Session = Depends(get_db)
):
    return DietRuleService(db).search_paginated(diet_type, term, page, size)


@router.get("/category/{category}", response_model=List[DietRuleResponse])
def rules_by_category(diet_type: str, category: str, db: Session = Depends(get_db)):
    return DietRuleService(db).list_by_category(diet_type, category)


@router.get("/category/{category}/paginated", response_model=Page[DietRuleResponse])
def rules_by_category_paginated(
    diet_type: str,
    category: str,
    page: int = 0,
    size: int = 20,
    db: Session = Depends(get_db)
):
    return DietRuleService(db).category_paginated(diet_type, category, page, size)


@router.get("/limitation/{limitation}", response_model=List[DietRuleResponse])
def rules_by_limitation(diet_type: str, limitation: str, db: Session = Depends(get_db)):
    return DietRuleService(db).list_by_limitation(diet_type, limitation)


@router.get("/limitation/{limitation}/paginated", response_model=Page[DietRuleResponse])
def rules_by_limitation_paginated(
    diet_type: str,
    limitation: str,
    page: int = 0,
    size: int = 20,
    db: Session = Depends(get_db)
):
    return DietRuleService(db).limitation_paginated(diet_type, limitation, page, size)


@router.get("/allowed", response_model=List[DietRuleResponse])
def allowed(diet_type: str, db: Session = Depends(get_db)):
    return DietRuleService(db).allowed(diet_type)


@router.get("/restricted", response_model=List[DietRuleResponse])
def restricted(diet_type: str, db: Session = Depends(get_db)):
    return DietRuleService(db).restricted(diet_type)


@router.get("/categories", response_model=List[str])
def categories(diet_type: str, db: Session = Depends(get_db)):
    return DietRuleService(db).categories(diet_type)


@router.get("/limitations", response_model=List[str])
def limitations(diet_type: str, db: Session = Depends(get_db)):
    return DietRuleService(db).limitations(diet_type)


@router.get("/advanced", response_model=List[DietRuleResponse])
def advanced_search(
    diet_type: str,
    name: Optional[str] = None,
    category: Optional[str] = None,
    limitation: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return DietRuleService(db).advanced_search(diet_type, name, category, limitation)


@router.get("/count/category/{category}")
def count_by_category(diet_type: str, category: str, db: Session = Depends(get_db)):
    return {"category": category, "count": DietRuleService(db).count_by_category(diet_type, category)}


@router.get("/count/limitation/{limitation}")
def count_by_limitation(diet_type: str, limitation: str, db: Session = Depends(get_db)):
    return {"limitation": limitation, "count": DietRuleService(db).count_by_limitation(diet_type, limitation)}


@router.get("/summary")
def rule_summary(diet_type: str, db: Session = Depends(get_db)):
    return StatsService(db).get_rule_summary(diet_type)


@router.get("/rules/{rule_id}", response_model=DietRuleResponse)
def get_rule(diet_type: str, rule_id: int, db: Session = Depends(get_db)):
    rule = DietRuleService(db).get_rule(diet_type, rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Rule {rule_id} not found")
    return rule
