"""Pydantic schemas for recipes, their ingredient rows and saved-recipe markers."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from domain.enums import Difficulty, IngredientUnit, Language, PrepTimeRange


class Recipe(BaseModel):
    """A row of the ``recipes`` table."""

    model_config = {"from_attributes": True, "extra": "ignore"}

    id: str
    title: str
    slug: str
    description: str = ""
    image_url: Optional[str] = None
    prep_time: int = Field(0, ge=0, description="Preparation time in minutes")
    servings: int = Field(1, ge=1)
    difficulty: Difficulty = Difficulty.EASY
    author_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    steps: List[str] = []

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v if v is not None else ""

    @field_validator("steps", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v if v is not None else []


class RecipeIngredientDetail(BaseModel):
    """An ingredient line as shown on a recipe page."""

    model_config = {"extra": "ignore"}

    id: str
    name_bg: str = ""
    name_en: str = ""
    quantity: str = ""
    unit: str = ""

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, v):
        return "" if v is None else str(v)

    def display_name(self, lang: Language = Language.BG) -> str:
        if Language(lang) == Language.EN:
            return self.name_en or self.name_bg
        return self.name_bg or self.name_en


class RecipeWithIngredients(Recipe):
    ingredients: List[RecipeIngredientDetail] = []


class RecipeIngredient(BaseModel):
    """A row of the ``recipe_ingredients`` join table."""

    model_config = {"extra": "ignore"}

    id: Optional[str] = None
    recipe_id: str
    ingredient_id: str
    quantity: str
    unit: str
    created_at: Optional[datetime] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, v):
        return "" if v is None else str(v)


class RecipeIngredientInput(BaseModel):
    """An ingredient line submitted with a recipe form."""

    ingredient_id: str = Field(..., min_length=1)
    quantity: str = Field("", description="Free text or decimal, e.g. '200' or '1/2'")
    unit: IngredientUnit = IngredientUnit.GRAM

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, v):
        return "" if v is None else str(v).strip()

    def to_row(self, recipe_id: str) -> dict:
        return {
            "recipe_id": recipe_id,
            "ingredient_id": self.ingredient_id,
            "quantity": self.quantity,
            "unit": self.unit.value,
        }


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, description="Generated from the title when omitted")
    description: str = ""
    image_url: Optional[str] = None
    prep_time: int = Field(0, ge=0)
    servings: int = Field(4, ge=1)
    difficulty: Difficulty = Difficulty.EASY
    steps: List[str] = []
    ingredients: List[RecipeIngredientInput] = []


class RecipeUpdate(BaseModel):
    """Partial update; ``ingredients=None`` leaves the ingredient rows untouched."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=1)
    difficulty: Optional[Difficulty] = None
    steps: Optional[List[str]] = None
    ingredients: Optional[List[RecipeIngredientInput]] = None


class RecipeFilters(BaseModel):
    difficulty: Optional[Difficulty] = None
    prep_time: Optional[PrepTimeRange] = None
    search: Optional[str] = None


class SavedRecipe(BaseModel):
    """A row of the ``saved_recipes`` table."""

    model_config = {"extra": "ignore"}

    id: Optional[str] = None
    user_id: str
    recipe_id: str
    saved_at: Optional[datetime] = None


class SavedStatus(BaseModel):
    recipe_id: str
    saved: bool


class IngredientSearchRequest(BaseModel):
    """Pantry search: the ingredients the user has at hand."""

    ingredient_ids: List[str] = Field(default_factory=list)


class DashboardStats(BaseModel):
    total_recipes: int
    total_ingredients: int
