"""Services package - Business logic layer"""

from services.recipe_service import RecipeService
from services.saved_recipe_service import SavedRecipeService
from services.ingredient_service import IngredientService
from services.profile_service import ProfileService
from services.session_service import SessionService
from services.language_service import LANGUAGE_COOKIE, resolve_language

__all__ = [
    "RecipeService",
    "SavedRecipeService",
    "IngredientService",
    "ProfileService",
    "SessionService",
    "LANGUAGE_COOKIE",
    "resolve_language",
]
