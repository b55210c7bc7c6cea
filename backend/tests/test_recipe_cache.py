"""Tests for the per-user recipe generation cache."""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from menu.models.recipe_cache import RecipeCache
from menu.schemas.recipe import GeneratedRecipe, RecipeIngredient
from menu.services.recipes.cache import RecipeGenerationCache, ingredients_key
from menu.services.recipes.generator import RecipeGenerationError
from menu.utils.datetime import utcnow


def make_recipe(title: str = "Apple Onion Chutney") -> GeneratedRecipe:
    return GeneratedRecipe(
        title=title,
        description="Sweet and sharp",
        ingredients=[RecipeIngredient(name="apple", quantity="2"), RecipeIngredient(name="onion", quantity="1")],
        instructions=["Chop", "Simmer"],
        prep_time=10,
        cook_time=30,
        servings=4,
    )


@pytest.fixture
def generator():
    gen = MagicMock()
    gen.generate = AsyncMock(return_value=[make_recipe()])
    return gen


@pytest.fixture
def cache(session_factory, generator):
    return RecipeGenerationCache(session_factory, generator)


async def _entries(session_factory) -> int:
    async with session_factory() as db:
        result = await db.execute(select(func.count()).select_from(RecipeCache))
        return result.scalar_one()


@pytest.mark.asyncio
async def test_miss_generates_and_stores(cache, generator, session_factory, user):
    recipes = await cache.get_or_generate(user.id, ["apple", "onion"])
    await cache.drain()

    assert [r.title for r in recipes] == ["Apple Onion Chutney"]
    generator.generate.assert_awaited_once_with(["apple", "onion"])
    assert await _entries(session_factory) == 1


@pytest.mark.asyncio
async def test_hit_ignores_order_and_case(cache, generator, user):
    """Generating for Onion+apple then apple+onion calls the generator once."""
    first = await cache.get_or_generate(user.id, ["Onion", "apple"])
    await cache.drain()
    second = await cache.get_or_generate(user.id, ["apple", "onion"])

    assert generator.generate.await_count == 1
    assert second == first


@pytest.mark.asyncio
async def test_hit_preserves_recipe_fields(cache, user):
    await cache.get_or_generate(user.id, ["apple", "onion"])
    await cache.drain()

    cached = await cache.get_cached(user.id, ingredients_key(["apple", "onion"]))

    assert cached == [make_recipe()]
    assert cached[0].prep_time == 10
    assert cached[0].ingredients[0].name == "apple"


@pytest.mark.asyncio
async def test_stale_entry_is_purged(cache, generator, session_factory, user):
    key = ingredients_key(["apple", "onion"])
    async with session_factory() as db:
        db.add(RecipeCache(
            user_id=user.id,
            ingredients_hash=key,
            recipes_json=[make_recipe("Old").model_dump(by_alias=True)],
            created_at=utcnow() - timedelta(hours=25),
        ))
        await db.commit()

    assert await cache.get_cached(user.id, key) is None
    assert await _entries(session_factory) == 0

    recipes = await cache.get_or_generate(user.id, ["apple", "onion"])
    assert recipes[0].title == "Apple Onion Chutney"
    generator.generate.assert_awaited_once()


@pytest.mark.asyncio
async def test_fresh_entry_within_window_is_served(cache, generator, session_factory, user):
    key = ingredients_key(["apple"])
    async with session_factory() as db:
        db.add(RecipeCache(
            user_id=user.id,
            ingredients_hash=key,
            recipes_json=[make_recipe("Baked Apple").model_dump(by_alias=True)],
            created_at=utcnow() - timedelta(hours=23),
        ))
        await db.commit()

    recipes = await cache.get_or_generate(user.id, ["Apple"])

    assert recipes[0].title == "Baked Apple"
    generator.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_newest_entry_wins(cache, session_factory, user):
    key = ingredients_key(["apple"])
    async with session_factory() as db:
        db.add_all([
            RecipeCache(
                user_id=user.id,
                ingredients_hash=key,
                recipes_json=[make_recipe("Older").model_dump(by_alias=True)],
                created_at=utcnow() - timedelta(hours=2),
            ),
            RecipeCache(
                user_id=user.id,
                ingredients_hash=key,
                recipes_json=[make_recipe("Newer").model_dump(by_alias=True)],
                created_at=utcnow() - timedelta(hours=1),
            ),
        ])
        await db.commit()

    cached = await cache.get_cached(user.id, key)

    assert cached[0].title == "Newer"


@pytest.mark.asyncio
async def test_entries_are_per_user(cache, generator, user, other_user):
    await cache.get_or_generate(user.id, ["apple"])
    await cache.drain()
    await cache.get_or_generate(other_user.id, ["apple"])

    assert generator.generate.await_count == 2


@pytest.mark.asyncio
async def test_generation_failure_is_not_cached(cache, generator, session_factory, user):
    generator.generate.side_effect = RecipeGenerationError()

    with pytest.raises(RecipeGenerationError):
        await cache.get_or_generate(user.id, ["apple"])
    await cache.drain()

    assert await _entries(session_factory) == 0


@pytest.mark.asyncio
async def test_store_failure_does_not_fail_request(generator, user):
    failure = OperationalError("insert", {}, Exception("disk full"))
    db = MagicMock()
    db.execute = AsyncMock(side_effect=failure)
    db.commit = AsyncMock(side_effect=failure)
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=db)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    cache = RecipeGenerationCache(factory, generator)

    recipes = await cache.get_or_generate(user.id, ["apple"])
    await cache.drain()

    assert recipes[0].title == "Apple Onion Chutney"
    generator.generate.assert_awaited_once()


@pytest.mark.asyncio
async def test_custom_freshness_window(session_factory, generator, user):
    cache = RecipeGenerationCache(session_factory, generator, freshness=timedelta(minutes=5))
    key = ingredients_key(["apple"])
    async with session_factory() as db:
        db.add(RecipeCache(
            user_id=user.id,
            ingredients_hash=key,
            recipes_json=[make_recipe().model_dump(by_alias=True)],
            created_at=utcnow() - timedelta(minutes=10),
        ))
        await db.commit()

    assert await cache.get_cached(user.id, key) is None


@pytest.mark.asyncio
async def test_drain_without_pending_writes(cache):
    await cache.drain()


@pytest.mark.asyncio
async def test_accented_names_do_not_share_entries(cache, generator, user):
    generator.generate.side_effect = [[make_recipe("Jalapeño Salsa")], [make_recipe("Plain Salsa")]]

    first = await cache.get_or_generate(user.id, ["Jalapeño"])
    await cache.drain()
    second = await cache.get_or_generate(user.id, ["Jalapeo"])

    assert first[0].title == "Jalapeño Salsa"
    assert second[0].title == "Plain Salsa"
    assert generator.generate.await_count == 2


@pytest.mark.asyncio
async def test_non_ascii_and_punctuated_names_get_own_entries(cache, generator, user):
    for names in (["豆腐"], ["味噌"], ["Tofu (firm)"], ["tofu firm"]):
        await cache.get_or_generate(user.id, names)
        await cache.drain()

    assert generator.generate.await_count == 4

    await cache.get_or_generate(user.id, ["TOFU (FIRM)"])
    assert generator.generate.await_count == 4


@pytest.mark.asyncio
async def test_zero_freshness_is_not_replaced_by_default(session_factory, generator, user):
    cache = RecipeGenerationCache(session_factory, generator, freshness=timedelta(0))

    await cache.get_or_generate(user.id, ["apple"])
    await cache.drain()
    await cache.get_or_generate(user.id, ["apple"])

    assert generator.generate.await_count == 2
