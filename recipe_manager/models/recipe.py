from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return str(uuid.uuid4())


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Language(Enum):
    ENGLISH = ("en", "English")
    SWEDISH = ("sv", "Svenska")
    ROMANIAN = ("ro", "Română")

    def __init__(self, code: str, display_name: str):
        self.code = code
        self.display_name = display_name

    @property
    def suffix(self) -> str:
        """Field-name suffix used by the recipe JSON, e.g. 'English'."""
        return self.name.capitalize()

    @classmethod
    def from_code(cls, code: str) -> "Language":
        for lang in cls:
            if lang.code == code:
                return lang
        return cls.ENGLISH


class _CamelModel(BaseModel):
    # snake_case attributes, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Ingredient(_CamelModel):
    id: str = Field(default_factory=new_id)
    text: str
    amount: Optional[str] = None
    unit: Optional[str] = None
    name: str


class Recipe(_CamelModel):
    id: str = Field(default_factory=new_id)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)

    title_english: str = ""
    title_swedish: str = ""
    title_romanian: str = ""

    ingredients_english: List[Ingredient] = Field(default_factory=list)
    ingredients_swedish: List[Ingredient] = Field(default_factory=list)
    ingredients_romanian: List[Ingredient] = Field(default_factory=list)

    instructions_english: List[str] = Field(default_factory=list)
    instructions_swedish: List[str] = Field(default_factory=list)
    instructions_romanian: List[str] = Field(default_factory=list)

    notes_english: Optional[str] = None
    notes_swedish: Optional[str] = None
    notes_romanian: Optional[str] = None
    # legacy, language-independent
    notes: Optional[str] = None

    tags: List[str] = Field(default_factory=list)
    servings: Optional[int] = Field(default=None, ge=1)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    detected_language: Optional[str] = None

    def title_for(self, language: Language) -> str:
        return getattr(self, f"title_{language.name.lower()}")

    def ingredients_for(self, language: Language) -> List[Ingredient]:
        return getattr(self, f"ingredients_{language.name.lower()}")

    def instructions_for(self, language: Language) -> List[str]:
        return getattr(self, f"instructions_{language.name.lower()}")

    def notes_for(self, language: Language) -> Optional[str]:
        note = getattr(self, f"notes_{language.name.lower()}")
        return note if note is not None else self.notes

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class MealType(str, Enum):
    LUNCH = "LUNCH"
    DINNER = "DINNER"


class MealSlot(_CamelModel):
    id: str = Field(default_factory=new_id)
    meal_type: MealType
    recipe_id: Optional[str] = None
    # cached title so a plan can be shown without loading the recipe
    recipe_name: Optional[str] = None

    def assign(self, recipe: Recipe) -> "MealSlot":
        return self.model_copy(update={"recipe_id": recipe.id, "recipe_name": recipe.title_english})

    def clear(self) -> "MealSlot":
        return self.model_copy(update={"recipe_id": None, "recipe_name": None})


class MealPlan(_CamelModel):
    id: str = Field(default_factory=new_id)
    # ISO 8601 date, e.g. 2024-05-01
    date: str
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)
    lunch_slot: MealSlot = Field(default_factory=lambda: MealSlot(meal_type=MealType.LUNCH))
    dinner_slot: MealSlot = Field(default_factory=lambda: MealSlot(meal_type=MealType.DINNER))
