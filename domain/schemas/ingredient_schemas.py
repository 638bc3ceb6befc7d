from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

from domain.enums import IngredientCategory, Language
from domain.labels import category_label


class Ingredient(BaseModel):
    """A row of the ``ingredients`` table."""

    model_config = {"from_attributes": True, "extra": "ignore"}

    id: str
    name_bg: str = ""
    name_en: str = ""
    category: IngredientCategory = IngredientCategory.OTHER
    created_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def single_name_rows(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # Rows created before names were split carry a single ``name``
        for key in ("name_bg", "name_en"):
            if data.get(key) is None:
                data[key] = data.get("name") or ""
        if data.get("category") is None:
            data.pop("category", None)
        return data

    def display_name(self, lang: Language = Language.BG) -> str:
        if Language(lang) == Language.EN:
            return self.name_en or self.name_bg
        return self.name_bg or self.name_en

    def category_label(self, lang: Language = Language.BG) -> str:
        return category_label(self.category, lang)


class IngredientCreate(BaseModel):
    name_bg: str = Field(..., min_length=1, max_length=100)
    name_en: str = Field(..., min_length=1, max_length=100)
    category: IngredientCategory = IngredientCategory.OTHER

    @model_validator(mode="after")
    def strip_names(self):
        self.name_bg = self.name_bg.strip()
        self.name_en = self.name_en.strip()
        if not self.name_bg or not self.name_en:
            raise ValueError("Both Bulgarian and English names are required")
        return self


class IngredientUpdate(BaseModel):
    name_bg: Optional[str] = Field(None, min_length=1, max_length=100)
    name_en: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[IngredientCategory] = None


class IngredientView(BaseModel):
    """Ingredient as listed to the UI in the active language."""

    id: str
    name: str
    name_bg: str
    name_en: str
    category: IngredientCategory
    category_label: str

    @classmethod
    def from_ingredient(cls, ingredient: Ingredient, lang: Language) -> "IngredientView":
        return cls(
            id=ingredient.id,
            name=ingredient.display_name(lang),
            name_bg=ingredient.name_bg,
            name_en=ingredient.name_en,
            category=ingredient.category,
            category_label=ingredient.category_label(lang),
        )
