from menu.models.base import Base, TimestampMixin
from menu.models.user import User
from menu.models.session import Session
from menu.models.ingredient import Ingredient, UserIngredient
from menu.models.recipe import Recipe
from menu.models.recipe_cache import RecipeCache

__all__ = [
    "Base", "TimestampMixin",
    "User",
    "Session",
    "Ingredient", "UserIngredient",
    "Recipe",
    "RecipeCache",
]
