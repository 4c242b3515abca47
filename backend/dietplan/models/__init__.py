# Import all models here
from dietplan.models.food import Food
from dietplan.models.nutrient import Nutrient
from dietplan.models.diet_rule import LchfFood, LfvFood
