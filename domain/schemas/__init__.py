"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.recipe_schemas import (
    Recipe,
    RecipeWithIngredients,
    RecipeIngredient,
    RecipeIngredientDetail,
    RecipeIngredientInput,
    RecipeCreate,
    RecipeUpdate,
    RecipeFilters,
    SavedRecipe,
    SavedStatus,
    IngredientSearchRequest,
    DashboardStats,
)
from domain.schemas.ingredient_schemas import (
    Ingredient,
    IngredientCreate,
    IngredientUpdate,
    IngredientView,
)
from domain.schemas.profile_schemas import (
    Profile,
    ProfileUpdate,
    AuthUser,
    AuthSession,
    SignInRequest,
    SignUpRequest,
    SessionStatus,
    VisibilityChange,
    LanguagePreference,
)
from domain.schemas.results import ServiceResult

__all__ = [
    # Recipe schemas
    "Recipe",
    "RecipeWithIngredients",
    "RecipeIngredient",
    "RecipeIngredientDetail",
    "RecipeIngredientInput",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeFilters",
    "SavedRecipe",
    "SavedStatus",
    "IngredientSearchRequest",
    "DashboardStats",
    # Ingredient schemas
    "Ingredient",
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientView",
    # Profile and auth schemas
    "Profile",
    "ProfileUpdate",
    "AuthUser",
    "AuthSession",
    "SignInRequest",
    "SignUpRequest",
    "SessionStatus",
    "VisibilityChange",
    "LanguagePreference",
    # Results
    "ServiceResult",
]
