import enum
from sqlalchemy import Column, Integer, String, Text
from dietplan.database import Base
from dietplan.exceptions import InvalidArgumentError


class DietType(str, enum.Enum):
    LCHF = "LCHF"   # Low Carb High Fat
    LFV = "LFV"     # Low Fat Vegetarian / Vegan

    @classmethod
    def parse(cls, value) -> "DietType":
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            raise InvalidArgumentError("Diet type must be specified. Options: LCHF, LFV")
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidArgumentError(f"Unknown diet type '{value}'. Options: LCHF, LFV")


class _Limitation(str, enum.Enum):
    """Closed, case-insensitive limitation vocabulary of one diet."""

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            raise InvalidArgumentError("Limitation cannot be empty")
        wanted = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        options = ", ".join(m.value for m in cls)
        raise InvalidArgumentError(f"Invalid limitation '{value}'. Options: {options}")


class LchfLimitation(_Limitation):
    OK = "OK"
    RESTRICTED = "Restricted"
    LIMIT = "Limit"
    AVOID = "Avoid"
    LIMITED = "Limited"
    RECOMMENDED = "Recommended"


class LfvLimitation(_Limitation):
    OK = "OK"
    MODERATION = "Moderation"
    RESTRICTED = "Restricted"
    LIMITED = "Limited"


class _DietRuleColumns:
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)
    limitation = Column(String, nullable=False)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name!r} {self.category!r} {self.limitation!r}>"


class LchfFood(_DietRuleColumns, Base):
    __tablename__ = "lchf_tbl"


class LfvFood(_DietRuleColumns, Base):
    __tablename__ = "lfv_tbl"


RULE_MODELS = {
    DietType.LCHF: LchfFood,
    DietType.LFV: LfvFood,
}

LIMITATIONS = {
    DietType.LCHF: LchfLimitation,
    DietType.LFV: LfvLimitation,
}

# Tiers joined against the food catalog when building eligible-food lists
ELIGIBLE_LIMITATIONS = {
    DietType.LCHF: (LchfLimitation.OK, LchfLimitation.LIMITED),
    DietType.LFV: (LfvLimitation.OK, LfvLimitation.LIMITED),
}

# Tiers returned by the "allowed foods" accessors
ALLOWED_LIMITATIONS = {
    DietType.LCHF: (LchfLimitation.OK, LchfLimitation.RECOMMENDED),
    DietType.LFV: (LfvLimitation.OK, LfvLimitation.MODERATION),
}

RESTRICTED_LIMITATIONS = {
    DietType.LCHF: (LchfLimitation.RESTRICTED, LchfLimitation.AVOID, LchfLimitation.LIMITED),
    DietType.LFV: (LfvLimitation.RESTRICTED, LfvLimitation.LIMITED),
}


def parse_limitation(diet_type, value):
    """Validate `value` against the vocabulary of `diet_type`."""
    return LIMITATIONS[DietType.parse(diet_type)].parse(value)
