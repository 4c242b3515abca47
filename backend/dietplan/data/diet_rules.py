import logging

from sqlalchemy.orm import Session

from dietplan.models.diet_rule import DietType, RULE_MODELS, parse_limitation

logger = logging.getLogger(__name__)

"""
Curated LCHF / LFV classification tables.
Names are matched as case-insensitive substrings of catalog food names,
so they are kept short and generic ("Egg", not "Eggs, whole, raw").
"""

# (name, category, limitation, notes)
LCHF_RULES = [
    # Vegetables
    ("Spinach", "Vegetables", "OK", "Leafy green"),
    ("Kale", "Vegetables", "OK", "Leafy green"),
    ("Lettuce", "Vegetables", "OK", "Leafy green"),
    ("Cabbage", "Vegetables", "OK", "Leafy green"),
    ("Broccoli", "Vegetables", "OK", "Above-ground vegetable"),
    ("Cauliflower", "Vegetables", "OK", "Above-ground vegetable"),
    ("Bell pepper", "Vegetables", "OK", "Above-ground vegetable"),
    ("Mushroom", "Vegetables", "OK", "Above-ground vegetable"),
    ("Tomato", "Vegetables", "OK", "Above-ground vegetable"),
    ("Eggplant", "Vegetables", "OK", "Above-ground vegetable"),
    ("Cucumber", "Vegetables", "OK", None),
    ("Zucchini", "Vegetables", "OK", None),
    ("Carrot", "Vegetables", "Restricted", "Root vegetable"),
    ("Beet", "Vegetables", "Restricted", "Root vegetable"),
    ("Parsnip", "Vegetables", "Restricted", "Root vegetable"),
    ("Turnip", "Vegetables", "Restricted", "Root vegetable"),
    ("Yam", "Vegetables", "Restricted", "Root vegetable"),
    ("Pumpkin", "Vegetables", "Restricted", None),
    ("Squash", "Vegetables", "Restricted", None),
    ("Potato", "Vegetables", "Avoid", "Starchy root"),
    # Spices
    ("Onion", "Spices", "Limit", "Only as a spice"),
    ("Garlic", "Spices", "Limit", "Only as a spice"),
    ("Ginger", "Spices", "Limit", "Only as a spice"),
    ("Turmeric", "Spices", "Limit", "Only as a spice"),
    # Dairy
    ("Butter", "Dairy", "OK", None),
    ("Ghee", "Dairy", "OK", None),
    ("Cheese, cheddar", "Dairy", "OK", "Hard cheese"),
    ("Paneer", "Dairy", "OK", None),
    ("Cottage cheese", "Dairy", "OK", None),
    ("Sour cream", "Dairy", "OK", None),
    ("Greek yogurt", "Dairy", "OK", None),
    ("Milk", "Dairy", "Restricted", "Whole and low-fat"),
    ("Buttermilk", "Dairy", "Restricted", None),
    ("Curd", "Dairy", "Restricted", None),
    ("Ice cream", "Dairy", "Restricted", None),
    # Nuts & seeds
    ("Almond", "Nuts & Seeds", "OK", None),
    ("Walnut", "Nuts & Seeds", "OK", None),
    ("Pistachio", "Nuts & Seeds", "OK", None),
    ("Macadamia", "Nuts & Seeds", "OK", None),
    ("Pecan", "Nuts & Seeds", "OK", None),
    ("Hazelnut", "Nuts & Seeds", "OK", None),
    ("Chia seed", "Nuts & Seeds", "OK", None),
    ("Flaxseed", "Nuts & Seeds", "OK", None),
    ("Sunflower seed", "Nuts & Seeds", "OK", None),
    ("Sesame seed", "Nuts & Seeds", "OK", None),
    # Protein
    ("Chicken", "Meat & Poultry", "Recommended", None),
    ("Beef", "Meat & Poultry", "Recommended", None),
    ("Lamb", "Meat & Poultry", "Recommended", None),
    ("Pork", "Meat & Poultry", "Recommended", None),
    ("Turkey", "Meat & Poultry", "Recommended", None),
    ("Salmon", "Fish & Seafood", "Recommended", None),
    ("Sardine", "Fish & Seafood", "Recommended", None),
    ("Tuna", "Fish & Seafood", "Recommended", None),
    ("Shrimp", "Fish & Seafood", "Recommended", None),
    ("Egg", "Eggs", "Recommended", None),
    # Fruits
    ("Blueberr", "Fruits", "OK", None),
    ("Blackberr", "Fruits", "OK", None),
    ("Strawberr", "Fruits", "Limited", "Small portions"),
    ("Avocado", "Fruits", "OK", None),
    ("Banana", "Fruits", "Avoid", None),
    ("Mango", "Fruits", "Avoid", None),
    ("Apple", "Fruits", "Avoid", None),
    ("Grape", "Fruits", "Avoid", None),
    # Grains & pulses
    ("Rice", "Grains", "Avoid", None),
    ("Wheat", "Grains", "Avoid", None),
    ("Millet", "Grains", "Avoid", None),
    ("Corn", "Grains", "Avoid", None),
    ("Oat", "Grains", "Avoid", "Including oat-based products"),
    ("Lentil", "Pulses", "Avoid", None),
    ("Chickpea", "Pulses", "Avoid", None),
    ("Kidney bean", "Pulses", "Avoid", None),
    # Oils & sugar
    ("Olive oil", "Oils", "OK", None),
    ("Coconut oil", "Oils", "OK", None),
    ("Soybean oil", "Oils", "Avoid", "Seed oil"),
    ("Sunflower oil", "Oils", "Avoid", "Seed oil"),
    ("Canola oil", "Oils", "Avoid", "Seed oil"),
    ("Sugar", "Sweeteners", "Avoid", None),
    ("Honey", "Sweeteners", "Avoid", None),
    ("Jaggery", "Sweeteners", "Avoid", None),
]

LFV_RULES = [
    # Vegetables
    ("Spinach", "Vegetables", "OK", None),
    ("Kale", "Vegetables", "OK", None),
    ("Lettuce", "Vegetables", "OK", None),
    ("Cabbage", "Vegetables", "OK", None),
    ("Broccoli", "Vegetables", "OK", None),
    ("Cauliflower", "Vegetables", "OK", None),
    ("Tomato", "Vegetables", "OK", None),
    ("Cucumber", "Vegetables", "OK", None),
    ("Carrot", "Vegetables", "OK", "Root vegetables allowed"),
    ("Beet", "Vegetables", "OK", "Root vegetables allowed"),
    ("Sweet potato", "Vegetables", "OK", None),
    ("Yam", "Vegetables", "OK", None),
    ("Pumpkin", "Vegetables", "OK", None),
    ("Mushroom", "Vegetables", "OK", None),
    ("Onion", "Vegetables", "OK", None),
    # Fruits
    ("Apple", "Fruits", "OK", None),
    ("Banana", "Fruits", "OK", None),
    ("Orange", "Fruits", "OK", None),
    ("Papaya", "Fruits", "OK", None),
    ("Berr", "Fruits", "OK", "All berries"),
    ("Mango", "Fruits", "OK", None),
    ("Avocado", "Fruits", "Limited", "Max 1/4 medium, once daily"),
    ("Coconut", "Fruits", "Limited", "Max 1/8 medium, once daily"),
    ("Olive", "Fruits", "Limited", "1-2 pieces, once daily"),
    # Grains
    ("Brown rice", "Grains", "OK", None),
    ("Quinoa", "Grains", "OK", None),
    ("Buckwheat", "Grains", "OK", None),
    ("Millet", "Grains", "OK", None),
    ("Amaranth", "Grains", "OK", None),
    ("Barley", "Grains", "OK", None),
    ("Oat", "Grains", "Restricted", "Including oat-based products"),
    # Pulses
    ("Lentil", "Pulses", "Moderation", "Once daily, preferably sprouted"),
    ("Chickpea", "Pulses", "Moderation", "Once daily, preferably sprouted"),
    ("Mung bean", "Pulses", "Moderation", "Once daily, preferably sprouted"),
    ("Kidney bean", "Pulses", "Moderation", "Once daily"),
    ("Pea", "Pulses", "Moderation", None),
    ("Soy", "Pulses", "Restricted", "Avoid soy products"),
    ("Tofu", "Pulses", "Restricted", "Soy product"),
    # Nuts & seeds
    ("Almond", "Nuts & Seeds", "Moderation", "One palm-sized serving daily"),
    ("Walnut", "Nuts & Seeds", "Moderation", "One palm-sized serving daily"),
    ("Chia seed", "Nuts & Seeds", "Moderation", "2 tbsp daily"),
    ("Flaxseed", "Nuts & Seeds", "Moderation", "2 tbsp daily"),
    # Animal products
    ("Milk", "Dairy", "Restricted", None),
    ("Cheese", "Dairy", "Restricted", None),
    ("Butter", "Dairy", "Restricted", None),
    ("Ghee", "Dairy", "Restricted", None),
    ("Yogurt", "Dairy", "Restricted", None),
    ("Paneer", "Dairy", "Restricted", None),
    ("Chicken", "Meat & Poultry", "Restricted", None),
    ("Beef", "Meat & Poultry", "Restricted", None),
    ("Pork", "Meat & Poultry", "Restricted", None),
    ("Fish", "Fish & Seafood", "Restricted", None),
    ("Shrimp", "Fish & Seafood", "Restricted", None),
    ("Egg", "Eggs", "Restricted", None),
    # Oils & sugar
    ("Oil", "Oils", "Restricted", "All cooking oils"),
    ("Sugar", "Sweeteners", "Restricted", None),
    ("Jaggery", "Sweeteners", "Restricted", None),
    ("Honey", "Sweeteners", "Restricted", None),
]

SEED_RULES = {
    DietType.LCHF: LCHF_RULES,
    DietType.LFV: LFV_RULES,
}


def seed_diet_rules(db: Session) -> dict:
    """
    Load the curated rule tables. A table that already has rows is left alone,
    so calling this twice is harmless. Returns inserted row counts per diet.
    """
    inserted = {}
    for diet, rules in SEED_RULES.items():
        model = RULE_MODELS[diet]
        if db.query(model).count() > 0:
            logger.info(f"[Seed] {diet.value} rules already seeded.")
            inserted[diet.value] = 0
            continue

        for name, category, limitation, notes in rules:
            tier = parse_limitation(diet, limitation)
            db.add(model(name=name, category=category, limitation=tier.value, notes=notes))
        db.commit()
        inserted[diet.value] = len(rules)
        logger.info(f"[Seed] Inserted {len(rules)} {diet.value} rules.")
    return inserted
