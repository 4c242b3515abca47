import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"))

# Add the backend directory to python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dietplan.database import SessionLocal, engine, Base
import dietplan.models
from dietplan.data.diet_rules import seed_diet_rules
from dietplan.services.food_api_service import FoodAPIService

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# Ensure tables exist
Base.metadata.create_all(bind=engine)

DEFAULT_USDA_QUERIES = [
    "spinach", "broccoli", "cauliflower", "chicken breast", "salmon", "egg",
    "almonds", "cheddar cheese", "lentils", "chickpeas", "brown rice", "apple",
]


def main():
    parser = argparse.ArgumentParser(description="Seed diet rule tables and (optionally) import USDA foods.")
    parser.add_argument("--usda", nargs="*", metavar="QUERY",
                        help="Import foods from USDA FoodData Central (defaults to a starter list)")
    parser.add_argument("--limit", type=int, default=5, help="Hits imported per USDA query")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        print(f"Seeded rules: {seed_diet_rules(db)}")

        if args.usda is not None:
            service = FoodAPIService()
            for query in args.usda or DEFAULT_USDA_QUERIES:
                foods = service.import_foods(db, query, limit=args.limit)
                print(f"{query}: {len(foods)} foods imported")
    finally:
        db.close()


if __name__ == "__main__":
    main()
