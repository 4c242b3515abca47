import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from dietplan.crud import diet_rule as rule_crud
from dietplan.exceptions import InvalidArgumentError
from dietplan.models.diet_rule import (
    DietType,
    LchfLimitation,
    parse_limitation,
    ALLOWED_LIMITATIONS,
    RESTRICTED_LIMITATIONS,
)
from dietplan.schemas.common import Page
from dietplan.schemas.diet import DietRuleResponse

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{label} cannot be empty", field=label.lower().replace(" ", "_"))
    return value.strip()


def _require_page(page: int, size: int):
    if page < 0:
        raise InvalidArgumentError("page must not be negative", field="page")
    if size <= 0:
        raise InvalidArgumentError("size must be a positive number", field="size")


class DietRuleService:
    """
    Read accessors over the curated LCHF / LFV classification tables.
    Every argument is validated before a query is issued.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---- single-criterion lookups -------------------------------------------------

    def search_by_name(self, diet_type, term: str):
        diet = DietType.parse(diet_type)
        return rule_crud.search_rules_by_name(self.db, diet, _require_text(term, "Search term"))

    def list_by_category(self, diet_type, category: str):
        diet = DietType.parse(diet_type)
        return rule_crud.get_rules_by_category(self.db, diet, _require_text(category, "Category"))

    def list_by_limitation(self, diet_type, limitation: str):
        """Rows whose tier equals `limitation`; an unknown tier is an error, not an empty list."""
        diet = DietType.parse(diet_type)
        tier = parse_limitation(diet, limitation)
        return rule_crud.get_rules_by_limitations(self.db, diet, [tier])

    def get_rule(self, diet_type, rule_id: int):
        diet = DietType.parse(diet_type)
        if rule_id is None or rule_id <= 0:
            raise InvalidArgumentError("Rule ID must be a positive number", field="rule_id")
        return rule_crud.get_rule(self.db, diet, rule_id)

    # ---- tier groups --------------------------------------------------------------

    def allowed(self, diet_type):
        """LCHF: OK + Recommended. LFV: OK + Moderation."""
        diet = DietType.parse(diet_type)
        return rule_crud.get_rules_by_limitations(self.db, diet, ALLOWED_LIMITATIONS[diet])

    def restricted(self, diet_type):
        diet = DietType.parse(diet_type)
        return rule_crud.get_rules_by_limitations(self.db, diet, RESTRICTED_LIMITATIONS[diet])

    def recommended_lchf(self):
        return rule_crud.get_rules_by_limitations(self.db, DietType.LCHF, [LchfLimitation.RECOMMENDED])

    def avoid_lchf(self):
        return rule_crud.get_rules_by_limitations(self.db, DietType.LCHF, [LchfLimitation.AVOID])

    # ---- distinct values / counts -------------------------------------------------

    def categories(self, diet_type) -> List[str]:
        return rule_crud.get_distinct_categories(self.db, DietType.parse(diet_type))

    def limitations(self, diet_type) -> List[str]:
        return rule_crud.get_distinct_limitations(self.db, DietType.parse(diet_type))

    def count_by_category(self, diet_type, category: str) -> int:
        diet = DietType.parse(diet_type)
        return rule_crud.count_by_category(self.db, diet, _require_text(category, "Category"))

    def count_by_limitation(self, diet_type, limitation: str) -> int:
        diet = DietType.parse(diet_type)
        tier = parse_limitation(diet, limitation)
        return rule_crud.count_by_limitation(self.db, diet, tier.value)

    # ---- multi-criteria -----------------------------------------------------------

    def advanced_search(self, diet_type, name: str = None, category: str = None, limitation: str = None):
        diet = DietType.parse(diet_type)
        tier = parse_limitation(diet, limitation).value if limitation and limitation.strip() else None
        return rule_crud.search_rules(
            self.db,
            diet,
            name=name.strip() if name else None,
            category=category.strip() if category else None,
            limitation=tier,
        )

    def search_paginated(self, diet_type, term: str = None, page: int = 0, size: int = 20) -> Page:
        diet = DietType.parse(diet_type)
        _require_page(page, size)
        items, total = rule_crud.search_rules_page(
            self.db, diet, name=term.strip() if term else None, skip=page * size, limit=size
        )
        return Page.build(items, page, size, total, DietRuleResponse)

    def category_paginated(self, diet_type, category: str, page: int = 0, size: int = 20) -> Page:
        diet = DietType.parse(diet_type)
        _require_page(page, size)
        items, total = rule_crud.search_rules_page(
            self.db, diet, category=_require_text(category, "Category"), skip=page * size, limit=size
        )
        return Page.build(items, page, size, total, DietRuleResponse)

    def limitation_paginated(self, diet_type, limitation: str, page: int = 0, size: int = 20) -> Page:
        diet = DietType.parse(diet_type)
        _require_page(page, size)
        tier = parse_limitation(diet, limitation)
        items, total = rule_crud.search_rules_page(
            self.db, diet, limitation=tier.value, skip=page * size, limit=size
        )
        return Page.build(items, page, size, total, DietRuleResponse)
