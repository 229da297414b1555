"""Controlled tag vocabulary offered to the model by the extraction prompt."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional


class RecipeTag(Enum):
    # Dietary restrictions
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "glutenFree"
    LACTOSE_FREE = "lactoseFree"
    NUT_FREE = "nutFree"

    # Diet styles
    LOW_CARB = "lowCarb"
    KETO = "keto"
    PALEO = "paleo"

    # Meal types
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    DESSERT = "dessert"
    SNACK = "snack"
    BEVERAGE = "beverage"

    # Courses
    APPETIZER = "appetizer"
    MAIN_COURSE = "mainCourse"
    SIDE_DISH = "sideDish"
    SOUP = "soup"
    SALAD = "salad"

    # Protein types
    PORK = "pork"
    CHICKEN = "chicken"
    BEEF = "beef"
    LAMB = "lamb"
    TURKEY = "turkey"
    FISH = "fish"
    SEAFOOD = "seafood"

    # Cooking style
    QUICK_EASY = "quickEasy"
    SLOW_COOK = "slowCook"

    @property
    def key(self) -> str:
        return self.value

    @classmethod
    def from_key(cls, key: str) -> Optional["RecipeTag"]:
        try:
            return cls(key)
        except ValueError:
            return None


TAG_KEYS: List[str] = [tag.key for tag in RecipeTag]
