# backend/menu/api/recipes.py
import json
import logging

from fastapi import APIRouter, Depends, Form, Query
from pydantic import ValidationError

from menu.api.forms import parse_id
from menu.core.deps import get_ingredient_service, get_recipe_cache, get_recipe_service, require_user
from menu.models.user import User
from menu.schemas.auth import UserResponse
from menu.schemas.ingredient import UserIngredientResponse
from menu.schemas.recipe import GeneratedRecipe, RecipeFilters, RecipeResponse
from menu.services.ingredients.service import IngredientService, IngredientServiceError
from menu.services.recipes.cache import RecipeGenerationCache
from menu.services.recipes.generator import RecipeGenerationError
from menu.services.recipes.service import RecipeErrorCode, RecipeService, RecipeServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    search: str | None = Query(default=None),
    rating: int | None = Query(default=None),
    user: User = Depends(require_user),
    service: RecipeService = Depends(get_recipe_service),
) -> dict:
    """Saved recipes, optionally filtered by title and minimum rating."""
    filters = RecipeFilters(search=search or None, min_rating=rating)
    try:
        recipes = await service.get_user_recipes(user.id, filters)
    except RecipeServiceError as e:
        logger.error(f"Error loading recipes: {e.message}")
        return {
            "user": UserResponse.model_validate(user),
            "recipes": [],
            "filters": {"search": "", "min_rating": 0},
        }

    return {
        "user": UserResponse.model_validate(user),
        "recipes": [RecipeResponse.model_validate(r) for r in recipes],
        "filters": {"search": search or "", "min_rating": rating or 0},
    }


@router.post("/rate")
async def rate(
    recipe_id: str | None = Form(default=None),
    rating: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: RecipeService = Depends(get_recipe_service),
) -> dict:
    if not recipe_id or not rating:
        return {"error": "Recipe ID and rating are required."}

    try:
        rating_num = int(rating)
    except ValueError:
        return {"error": "Rating must be between 1 and 5."}

    target = parse_id(recipe_id)
    if target is None:
        return {"error": "Recipe not found."}

    try:
        updated = await service.update_rating(user.id, target, rating_num)
    except RecipeServiceError as e:
        if e.code == RecipeErrorCode.INVALID_RATING:
            return {"error": "Rating must be between 1 and 5."}
        return {"error": "Failed to rate recipe. Please try again."}

    if updated is None:
        return {"error": "Recipe not found."}

    plural = "" if rating_num == 1 else "s"
    return {"success": True, "message": f"Recipe rated {rating_num} star{plural}!"}


@router.post("/delete")
async def delete(
    recipe_id: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: RecipeService = Depends(get_recipe_service),
) -> dict:
    if not recipe_id:
        return {"error": "Recipe ID is required."}

    target = parse_id(recipe_id)
    try:
        deleted = target is not None and await service.delete_recipe(user.id, target)
    except RecipeServiceError:
        return {"error": "Failed to delete recipe. Please try again."}

    if not deleted:
        return {"error": "Recipe not found or already deleted."}
    return {"success": True, "message": "Recipe deleted successfully."}


@router.get("/generate")
async def generate_page(
    user: User = Depends(require_user),
    ingredients: IngredientService = Depends(get_ingredient_service),
) -> dict:
    """Available pantry ingredients to choose from."""
    try:
        entries = await ingredients.get_user_ingredients(user.id, available_only=True)
    except IngredientServiceError as e:
        logger.error(f"Error loading ingredients: {e.message}")
        entries = []

    return {
        "user": UserResponse.model_validate(user),
        "ingredients": [UserIngredientResponse.model_validate(e) for e in entries],
        "available_ingredient_names": [e.ingredient.name for e in entries],
    }


@router.post("/generate")
async def generate(
    selected_ingredients: list[str] = Form(default=[]),
    user: User = Depends(require_user),
    cache: RecipeGenerationCache = Depends(get_recipe_cache),
) -> dict:
    """Generate vegan recipes for the selected ingredients, reusing a fresh cached batch."""
    selected = [name for name in selected_ingredients if name and name.strip()]
    if not selected:
        return {"error": "Please select at least one ingredient to generate recipes."}

    try:
        recipes = await cache.get_or_generate(user.id, selected)
    except RecipeGenerationError:
        return {"error": "Failed to generate recipes. Please try again later."}

    return {
        "success": True,
        "recipes": [r.model_dump(by_alias=True) for r in recipes],
        "selected_ingredients": selected,
    }


@router.post("/save")
async def save(
    recipe_data: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: RecipeService = Depends(get_recipe_service),
) -> dict:
    """Save a generated recipe (posted back as JSON) to the user's collection."""
    if not recipe_data:
        return {"error": "Invalid recipe data."}

    try:
        recipe = GeneratedRecipe.model_validate(json.loads(recipe_data))
    except (json.JSONDecodeError, ValidationError):
        return {"error": "Invalid recipe data."}

    try:
        saved = await service.save_generated_recipe(user.id, recipe)
    except RecipeServiceError:
        return {"error": "Failed to save recipe. Please try again."}

    return {
        "success": True,
        "message": f'Recipe "{recipe.title}" saved to your collection!',
        "saved_recipe_id": str(saved.id),
    }
