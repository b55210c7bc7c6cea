# backend/menu/api/ingredients.py
import logging

from fastapi import APIRouter, Depends, Form

from menu.api.forms import parse_id
from menu.core.deps import get_ingredient_api, get_ingredient_service, require_user
from menu.models.user import User
from menu.schemas.auth import UserResponse
from menu.schemas.ingredient import AddIngredientData, UserIngredientResponse
from menu.services.ingredients.names import validate_ingredient_name
from menu.services.ingredients.openfoodfacts import IngredientAPI, IngredientAPIError
from menu.services.ingredients.service import IngredientService, IngredientServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ingredients", tags=["ingredients"])

SEARCH_RESULT_LIMIT = 10


@router.get("")
async def list_ingredients(
    user: User = Depends(require_user),
    service: IngredientService = Depends(get_ingredient_service),
) -> dict:
    """The user's pantry, newest first."""
    try:
        entries = await service.get_user_ingredients(user.id)
    except IngredientServiceError as e:
        logger.error(f"Error loading ingredients: {e.message}")
        entries = []

    return {
        "user": UserResponse.model_validate(user),
        "ingredients": [UserIngredientResponse.model_validate(e) for e in entries],
    }


@router.post("/add")
async def add_manual(
    name: str | None = Form(default=None),
    quantity: str | None = Form(default=None),
    unit: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: IngredientService = Depends(get_ingredient_service),
) -> dict:
    if not name:
        return {"error": "Ingredient name is required", "name": name, "quantity": quantity, "unit": unit}

    if not validate_ingredient_name(name):
        return {
            "error": "Please enter a valid ingredient name (2-100 characters)",
            "name": name,
            "quantity": quantity,
            "unit": unit,
        }

    try:
        await service.add_ingredient(user.id, AddIngredientData(
            name=name.strip(),
            quantity=quantity or None,
            unit=unit or None,
        ))
    except IngredientServiceError:
        return {
            "error": "Failed to add ingredient. Please try again.",
            "name": name,
            "quantity": quantity,
            "unit": unit,
        }

    return {"success": True, "message": f"Added {name} to your ingredients!"}


@router.post("/search")
async def search(
    query: str | None = Form(default=None),
    api: IngredientAPI = Depends(get_ingredient_api),
) -> dict:
    """Look up candidate ingredients in OpenFoodFacts."""
    if not query or len(query) < 2:
        return {"search_results": [], "search_query": query}

    try:
        results = await api.search(query, limit=SEARCH_RESULT_LIMIT)
    except IngredientAPIError as e:
        logger.error(f"Ingredient search failed (status={e.status}): {e.message}")
        return {"search_error": "Failed to search ingredients. Please try again.", "search_query": query}

    return {"search_results": results, "search_query": query}


@router.post("/add-from-search")
async def add_from_search(
    name: str | None = Form(default=None),
    image_url: str | None = Form(default=None),
    category: str | None = Form(default=None),
    quantity: str | None = Form(default=None),
    unit: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: IngredientService = Depends(get_ingredient_service),
) -> dict:
    if not name:
        return {"error": "Ingredient name is required"}

    try:
        await service.add_ingredient(user.id, AddIngredientData(
            name=name.strip(),
            image_url=image_url or None,
            category=category or None,
            quantity=quantity or None,
            unit=unit or None,
        ))
    except IngredientServiceError:
        return {"error": "Failed to add ingredient. Please try again."}

    return {"success": True, "message": f"Added {name} to your ingredients!"}


@router.post("/toggle")
async def toggle_availability(
    ingredient_id: str | None = Form(default=None),
    is_available: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: IngredientService = Depends(get_ingredient_service),
) -> dict:
    entry_id = parse_id(ingredient_id)
    if entry_id is None:
        return {"error": "Invalid ingredient ID"}

    available = is_available == "true"
    try:
        updated = await service.update_availability(user.id, entry_id, available)
    except IngredientServiceError:
        return {"error": "Failed to update ingredient. Please try again."}

    if updated is None:
        return {"error": "Ingredient not found"}

    state = "marked as available" if available else "marked as unavailable"
    return {"success": True, "message": f"Ingredient {state}"}


@router.post("/remove")
async def remove(
    ingredient_id: str | None = Form(default=None),
    user: User = Depends(require_user),
    service: IngredientService = Depends(get_ingredient_service),
) -> dict:
    entry_id = parse_id(ingredient_id)
    if entry_id is None:
        return {"error": "Invalid ingredient ID"}

    try:
        removed = await service.remove(user.id, entry_id)
    except IngredientServiceError:
        return {"error": "Failed to remove ingredient. Please try again."}

    if not removed:
        return {"error": "Ingredient not found or already removed"}
    return {"success": True, "message": "Ingredient removed successfully"}
