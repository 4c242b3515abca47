from sqlalchemy import Column, Integer, String
from dietplan.database import Base

class Food(Base):
    __tablename__ = "foods"

    # FoodData Central reference number, also the key into `nutrients`
    fdc_id = Column(Integer, primary_key=True, autoincrement=False)
    food_name = Column(String, index=True, nullable=False)
    data_type = Column(String, nullable=True)  # "Foundation", "SR Legacy", "Branded", ...
    food_category = Column(String, index=True, nullable=True)
    publication_date = Column(String, nullable=True)

    # Free text, e.g. "milk, soy" - matched by substring, never parsed
    allergen_flags = Column(String, nullable=True)

    def __repr__(self):
        return f"<Food fdc_id={self.fdc_id} name={self.food_name!r}>"
