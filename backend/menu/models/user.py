# backend/menu/models/user.py
from uuid import UUID, uuid4
from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column
from menu.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    age: Mapped[int | None] = mapped_column(Integer)
