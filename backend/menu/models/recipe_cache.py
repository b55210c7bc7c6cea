"""Recipe generation cache model."""
from uuid import UUID, uuid4
from datetime import datetime
from sqlalchemy import Text, JSON, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from menu.models.base import Base
from menu.utils.datetime import utcnow


class RecipeCache(Base):
    """A generated recipe batch keyed by (user, ingredient fingerprint)."""
    __tablename__ = "recipe_cache"
    __table_args__ = (
        Index("ix_recipe_cache_user_hash", "user_id", "ingredients_hash"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    ingredients_hash: Mapped[str] = mapped_column(Text, nullable=False)
    recipes_json: Mapped[list] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
