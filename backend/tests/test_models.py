# backend/tests/test_models.py
from uuid import uuid4
from datetime import datetime, timezone, timedelta

from menu.models import Base, TimestampMixin, User, Session, Ingredient, UserIngredient, Recipe, RecipeCache


def test_base_has_metadata():
    assert Base.metadata is not None


def test_timestamp_mixin_has_fields():
    assert hasattr(TimestampMixin, "created_at")
    assert hasattr(TimestampMixin, "updated_at")


def test_all_tables_registered():
    assert set(Base.metadata.tables) == {
        "users",
        "sessions",
        "ingredients",
        "user_ingredients",
        "recipes",
        "recipe_cache",
    }


def test_user_has_required_fields():
    assert hasattr(User, "id")
    assert hasattr(User, "username")
    assert hasattr(User, "email")
    assert hasattr(User, "age")


def test_user_email_is_unique():
    assert User.__table__.c.email.unique is True


def test_session_model_exists():
    """Session rows are keyed by the hashed token."""
    session = Session(
        id="a" * 64,
        user_id=uuid4(),
        expires_at=datetime.now(timezone.utc) + timedelta(days=30),
    )
    assert session.id == "a" * 64
    assert session.user_id is not None


def test_session_has_no_raw_token_column():
    columns = set(Session.__table__.c.keys())
    assert columns == {"id", "user_id", "expires_at"}


def test_user_ingredient_links_ingredient():
    assert hasattr(UserIngredient, "ingredient")
    assert hasattr(Ingredient, "image_url")


def test_recipe_and_cache_are_user_scoped():
    assert "user_id" in Recipe.__table__.c
    assert "user_id" in RecipeCache.__table__.c
    assert "ingredients_hash" in RecipeCache.__table__.c
