from typing import Iterable, List, Optional

"""
Allergen Filter
---------------
Food allergen tags are free text ("Contains: milk, soy lecithin").
Exclusion is a case-insensitive substring test of every requested token
against that text, so "soy" also hits "soy lecithin".
"""

# Placeholders the USDA export writes when a food carries no allergen tags
EMPTY_ALLERGEN_MARKERS = ("", "nan")


def parse_allergens(raw: Optional[str]) -> List[str]:
    """
    Splits a comma-separated allergen string into trimmed, lower-cased tokens.
    Blank tokens are dropped, so "" / " , " produce an empty list.
    """
    if not raw:
        return []
    tokens = []
    for part in raw.split(","):
        token = part.strip().lower()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def matches_allergen(allergen_flags: Optional[str], tokens: Iterable[str]) -> bool:
    """True when any token occurs inside the food's allergen tag string."""
    if not allergen_flags:
        return False
    flags = allergen_flags.lower()
    return any(token in flags for token in tokens)


def excluded_by_allergens(food_name: Optional[str], allergen_flags: Optional[str], tokens: Iterable[str]) -> bool:
    """
    A food is excluded when a token occurs in its allergen tags or in its name,
    so "peanut" drops "Peanut butter" even when the tags are missing.
    """
    tokens = list(tokens)
    if not tokens:
        return False
    if matches_allergen(allergen_flags, tokens):
        return True
    return matches_allergen(food_name, tokens)
