from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import datetime


class IngredientSearchResult(BaseModel):
    """A candidate ingredient from the external lookup API."""
    id: str
    name: str
    category: str | None = None
    image_url: str | None = None
    brands: list[str] | None = None


class AddIngredientData(BaseModel):
    name: str
    category: str | None = None
    image_url: str | None = None
    quantity: str | None = None
    unit: str | None = None
    expiry_date: datetime | None = None


class IngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str | None
    image_url: str | None


class UserIngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ingredient_id: UUID
    quantity: str | None
    unit: str | None
    expiry_date: datetime | None
    is_available: bool
    created_at: datetime
    ingredient: IngredientResponse
