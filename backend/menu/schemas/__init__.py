from menu.schemas.auth import UserResponse
from menu.schemas.ingredient import (
    AddIngredientData,
    IngredientResponse,
    IngredientSearchResult,
    UserIngredientResponse,
)
from menu.schemas.recipe import (
    GeneratedRecipe,
    RecipeFilters,
    RecipeIngredient,
    RecipeResponse,
    SaveRecipeData,
)

__all__ = [
    "UserResponse",
    "AddIngredientData",
    "IngredientResponse",
    "IngredientSearchResult",
    "UserIngredientResponse",
    "GeneratedRecipe",
    "RecipeFilters",
    "RecipeIngredient",
    "RecipeResponse",
    "SaveRecipeData",
]
