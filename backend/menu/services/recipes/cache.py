"""Per-user recipe generation cache keyed by ingredient fingerprint."""
import asyncio
import logging
from datetime import timedelta
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from menu.core.config import settings
from menu.models.recipe_cache import RecipeCache
from menu.schemas.recipe import GeneratedRecipe
from menu.services.recipes.fingerprint import SEPARATOR, fingerprint
from menu.utils.datetime import as_utc, utcnow

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    async def generate(self, ingredients: list[str]) -> list[GeneratedRecipe]: ...


def _key_name(name: str) -> str:
    # Case and whitespace folding only; every other character is kept.
    # "%" and the separator are percent-escaped so distinct names stay distinct.
    folded = " ".join(name.split()).casefold()
    return folded.replace("%", "%25").replace(SEPARATOR, "%7C")


def ingredients_key(names: list[str]) -> str:
    """Cache key for a selection of ingredient names, ignoring order, case and spacing."""
    return fingerprint(_key_name(name) for name in names)


class RecipeGenerationCache:
    """
    Get-or-generate wrapper around a generation client.

    Entries are keyed by (user, ingredient fingerprint). Entries older than
    the freshness window (24 hours by default) are deleted on lookup and
    treated as absent. Stores after a miss run as detached tasks: a failed
    cache write is logged and never fails the request. Concurrent misses for
    the same key may each call the generation client.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        generator: GenerationClient,
        freshness: timedelta | None = None,
    ):
        self.session_factory = session_factory
        self.generator = generator
        if freshness is None:
            freshness = timedelta(hours=settings.recipe_cache_ttl_hours)
        self.freshness = freshness
        self._pending: set[asyncio.Task] = set()

    async def get_cached(self, user_id: UUID, key: str) -> list[GeneratedRecipe] | None:
        """Newest fresh batch for (user, key), or None. Stale entries are purged."""
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(RecipeCache)
                    .where(
                        RecipeCache.user_id == user_id,
                        RecipeCache.ingredients_hash == key,
                    )
                    .order_by(RecipeCache.created_at.desc())
                    .limit(1)
                )
                entry = result.scalar_one_or_none()
                if entry is None:
                    return None

                cutoff = utcnow() - self.freshness
                if as_utc(entry.created_at) < cutoff:
                    await db.execute(
                        delete(RecipeCache).where(
                            RecipeCache.user_id == user_id,
                            RecipeCache.ingredients_hash == key,
                            RecipeCache.created_at <= entry.created_at,
                        )
                    )
                    await db.commit()
                    logger.info(f"Purged stale recipe cache for user {user_id}")
                    return None

                return [GeneratedRecipe.model_validate(item) for item in entry.recipes_json]
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Error fetching cached recipes for user {user_id}: {e}")
            return None

    async def store(self, user_id: UUID, key: str, recipes: list[GeneratedRecipe]) -> None:
        """Persist a batch. Failures are logged and swallowed."""
        try:
            async with self.session_factory() as db:
                db.add(RecipeCache(
                    user_id=user_id,
                    ingredients_hash=key,
                    recipes_json=[recipe.model_dump(by_alias=True) for recipe in recipes],
                    created_at=utcnow(),
                ))
                await db.commit()
        except Exception as e:
            logger.exception(f"Error caching recipe generation for user {user_id}: {e}")

    def _schedule_store(self, user_id: UUID, key: str, recipes: list[GeneratedRecipe]) -> None:
        task = asyncio.create_task(self.store(user_id, key, recipes))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def get_or_generate(self, user_id: UUID, ingredient_names: list[str]) -> list[GeneratedRecipe]:
        """
        Return cached recipes for this ingredient selection, generating on a miss.

        Raises:
            RecipeGenerationError: if the generation client fails (never cached)
        """
        key = ingredients_key(ingredient_names)

        cached = await self.get_cached(user_id, key)
        if cached is not None:
            logger.info(f"Recipe cache hit for user {user_id}")
            return cached

        logger.info(f"Recipe cache miss for user {user_id}, generating")
        recipes = await self.generator.generate(ingredient_names)
        self._schedule_store(user_id, key, recipes)
        return recipes

    async def drain(self) -> None:
        """Wait for outstanding cache writes."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
