"""Saved recipe collection. Every query is scoped to the owning user."""
import enum
import logging
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from menu.core.security import generate_id
from menu.models.recipe import Recipe
from menu.schemas.recipe import GeneratedRecipe, RecipeFilters, SaveRecipeData

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class RecipeErrorCode(str, enum.Enum):
    RECIPE_ERROR = "RECIPE_ERROR"
    SAVE_FAILED = "SAVE_FAILED"
    INVALID_RATING = "INVALID_RATING"


class RecipeServiceError(Exception):
    def __init__(self, message: str, code: RecipeErrorCode = RecipeErrorCode.RECIPE_ERROR):
        super().__init__(message)
        self.message = message
        self.code = code


class RecipeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_recipe(self, user_id: UUID, data: SaveRecipeData) -> Recipe:
        instructions = data.instructions
        if isinstance(instructions, list):
            instructions = "\n".join(instructions)

        recipe = Recipe(
            id=generate_id(),
            user_id=user_id,
            title=data.title,
            description=data.description or None,
            instructions=instructions,
            ingredients_json=[i.model_dump(exclude_none=True) for i in data.ingredients],
            prep_time=data.prep_time or None,
            cook_time=data.cook_time or None,
            servings=data.servings or None,
            rating=None,
        )
        try:
            self.db.add(recipe)
            await self.db.commit()
            await self.db.refresh(recipe)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error saving recipe: {e}")
            raise RecipeServiceError("Failed to save recipe", RecipeErrorCode.SAVE_FAILED) from e
        return recipe

    async def save_generated_recipe(self, user_id: UUID, generated: GeneratedRecipe) -> Recipe:
        return await self.save_recipe(user_id, SaveRecipeData(
            title=generated.title,
            description=generated.description,
            instructions=generated.instructions,
            ingredients=generated.ingredients,
            prep_time=generated.prep_time,
            cook_time=generated.cook_time,
            servings=generated.servings,
        ))

    async def get_user_recipes(self, user_id: UUID, filters: RecipeFilters | None = None) -> list[Recipe]:
        """List a user's recipes, newest first, optionally filtered by title and rating."""
        query = select(Recipe).where(Recipe.user_id == user_id)
        if filters and filters.search:
            query = query.where(Recipe.title.ilike(f"%{filters.search}%"))
        if filters and filters.min_rating:
            query = query.where(Recipe.rating >= filters.min_rating)

        try:
            result = await self.db.execute(query.order_by(Recipe.created_at.desc()))
        except SQLAlchemyError as e:
            logger.exception(f"Error fetching recipes for user {user_id}: {e}")
            raise RecipeServiceError("Failed to fetch recipes") from e
        return list(result.scalars().all())

    async def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe | None:
        try:
            result = await self.db.execute(
                select(Recipe).where(Recipe.id == recipe_id, Recipe.user_id == user_id)
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error fetching recipe {recipe_id}: {e}")
            raise RecipeServiceError("Failed to fetch recipe") from e
        return result.scalar_one_or_none()

    async def update_rating(self, user_id: UUID, recipe_id: UUID, rating: int) -> Recipe | None:
        if rating < MIN_RATING or rating > MAX_RATING:
            raise RecipeServiceError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                RecipeErrorCode.INVALID_RATING,
            )

        recipe = await self.get_recipe(user_id, recipe_id)
        if recipe is None:
            return None
        try:
            recipe.rating = rating
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error updating rating for recipe {recipe_id}: {e}")
            raise RecipeServiceError("Failed to update recipe rating") from e
        return recipe

    async def delete_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(Recipe).where(Recipe.id == recipe_id, Recipe.user_id == user_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error deleting recipe {recipe_id}: {e}")
            raise RecipeServiceError("Failed to delete recipe") from e
        return (result.rowcount or 0) > 0
