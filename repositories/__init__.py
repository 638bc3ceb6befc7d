"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.recipe_repository import RecipeRepository, RecipeIngredientRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.saved_recipe_repository import SavedRecipeRepository
from repositories.profile_repository import ProfileRepository

__all__ = [
    "BaseRepository",
    "RecipeRepository",
    "RecipeIngredientRepository",
    "IngredientRepository",
    "SavedRecipeRepository",
    "ProfileRepository",
]
