"""Per-user pantry management."""
import enum
import logging
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from menu.core.security import generate_id
from menu.models.ingredient import Ingredient, UserIngredient
from menu.schemas.ingredient import AddIngredientData

logger = logging.getLogger(__name__)


class IngredientErrorCode(str, enum.Enum):
    INGREDIENT_ERROR = "INGREDIENT_ERROR"
    ADD_FAILED = "ADD_FAILED"


class IngredientServiceError(Exception):
    def __init__(self, message: str, code: IngredientErrorCode = IngredientErrorCode.INGREDIENT_ERROR):
        super().__init__(message)
        self.message = message
        self.code = code


class IngredientService:
    """CRUD over a user's pantry. Every lookup and mutation filters on ``user_id``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_ingredient(self, user_id: UUID, data: AddIngredientData) -> UserIngredient:
        """Record an ingredient and add it to the user's pantry as available."""
        ingredient = Ingredient(
            id=generate_id(),
            user_id=user_id,
            name=data.name,
            category=data.category or None,
            image_url=data.image_url or None,
        )
        user_ingredient = UserIngredient(
            id=generate_id(),
            user_id=user_id,
            ingredient=ingredient,
            quantity=data.quantity or None,
            unit=data.unit or None,
            expiry_date=data.expiry_date,
            is_available=True,
        )
        try:
            self.db.add(user_ingredient)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error adding ingredient for user {user_id}: {e}")
            raise IngredientServiceError("Failed to add ingredient", IngredientErrorCode.ADD_FAILED) from e

        return user_ingredient

    async def get_user_ingredients(self, user_id: UUID, available_only: bool = False) -> list[UserIngredient]:
        """Pantry entries with their ingredient, newest first."""
        query = select(UserIngredient).where(UserIngredient.user_id == user_id)
        if available_only:
            query = query.where(UserIngredient.is_available.is_(True))

        try:
            result = await self.db.execute(query.order_by(UserIngredient.created_at.desc()))
        except SQLAlchemyError as e:
            logger.exception(f"Error fetching ingredients for user {user_id}: {e}")
            raise IngredientServiceError("Failed to fetch ingredients") from e
        return list(result.unique().scalars().all())

    async def _get_owned(self, user_id: UUID, user_ingredient_id: UUID) -> UserIngredient | None:
        result = await self.db.execute(
            select(UserIngredient).where(
                UserIngredient.id == user_ingredient_id,
                UserIngredient.user_id == user_id,
            )
        )
        return result.unique().scalar_one_or_none()

    async def update_availability(
        self, user_id: UUID, user_ingredient_id: UUID, is_available: bool
    ) -> UserIngredient | None:
        try:
            entry = await self._get_owned(user_id, user_ingredient_id)
            if entry is None:
                return None
            entry.is_available = is_available
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error updating availability of {user_ingredient_id}: {e}")
            raise IngredientServiceError("Failed to update ingredient availability") from e
        return entry

    async def update_quantity(
        self,
        user_id: UUID,
        user_ingredient_id: UUID,
        quantity: str,
        unit: str | None = None,
    ) -> UserIngredient | None:
        try:
            entry = await self._get_owned(user_id, user_ingredient_id)
            if entry is None:
                return None
            entry.quantity = quantity
            entry.unit = unit or None
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error updating quantity of {user_ingredient_id}: {e}")
            raise IngredientServiceError("Failed to update ingredient quantity") from e
        return entry

    async def remove(self, user_id: UUID, user_ingredient_id: UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(UserIngredient).where(
                    UserIngredient.id == user_ingredient_id,
                    UserIngredient.user_id == user_id,
                )
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error removing ingredient {user_ingredient_id}: {e}")
            raise IngredientServiceError("Failed to remove ingredient") from e
        return (result.rowcount or 0) > 0

    async def get_available_ingredient_names(self, user_id: UUID) -> list[str]:
        entries = await self.get_user_ingredients(user_id, available_only=True)
        return [entry.ingredient.name for entry in entries]
