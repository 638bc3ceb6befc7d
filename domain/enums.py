"""
Domain enums for CookSmart.
Contains all enumeration types used across the domain models.
"""

import enum


class Difficulty(str, enum.Enum):
    """Recipe difficulty"""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class PrepTimeRange(str, enum.Enum):
    """Prep time buckets offered by the recipe list filter"""

    LESS_THAN_15 = "less_than_15"
    FROM_15_TO_30 = "15_to_30"
    FROM_30_TO_60 = "30_to_60"
    MORE_THAN_60 = "more_than_60"


class IngredientCategory(str, enum.Enum):
    """Closed set of ingredient categories"""

    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    MEAT = "meat"
    FISH = "fish"
    DAIRY = "dairy"
    GRAINS = "grains"
    LEGUMES = "legumes"
    NUTS_SEEDS = "nuts_seeds"
    HERBS_SPICES = "herbs_spices"
    OILS_FATS = "oils_fats"
    CONDIMENTS = "condiments"
    BAKING = "baking"
    BEVERAGES = "beverages"
    OTHER = "other"


class IngredientUnit(str, enum.Enum):
    """Units a recipe ingredient quantity can be expressed in"""

    # Weight
    GRAM = "g"
    KILOGRAM = "kg"
    MILLIGRAM = "mg"
    OUNCE = "oz"
    POUND = "lb"

    # Volume
    MILLILITER = "ml"
    LITER = "l"
    TEASPOON = "tsp"
    TABLESPOON = "tbsp"
    CUP = "cup"
    FLUID_OUNCE = "fl oz"
    PINT = "pint"
    QUART = "quart"
    GALLON = "gallon"

    # Pieces
    PIECE = "piece"
    SLICE = "slice"
    CLOVE = "clove"
    BUNCH = "bunch"
    HANDFUL = "handful"
    PINCH = "pinch"
    DASH = "dash"

    # Containers
    CAN = "can"
    JAR = "jar"
    PACKAGE = "package"
    BOX = "box"
    BAG = "bag"

    # Cooking-specific
    TO_TASTE = "to taste"
    AS_NEEDED = "as needed"
    WHOLE = "whole"
    HALF = "half"
    QUARTER = "quarter"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Language(str, enum.Enum):
    """Languages the UI is offered in"""

    BG = "bg"
    EN = "en"


class AuthEvent(str, enum.Enum):
    """Auth state changes pushed to subscribers"""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


class SessionState(str, enum.Enum):
    """Lifecycle of the session/identity service"""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
