"""API routes package"""

from . import admin, auth, health, ingredients, pantry, preferences, profiles, recipes, saved

__all__ = [
    "admin",
    "auth",
    "health",
    "ingredients",
    "pantry",
    "preferences",
    "profiles",
    "recipes",
    "saved",
]
