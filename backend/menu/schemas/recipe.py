from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime


class RecipeIngredient(BaseModel):
    name: str
    quantity: str | None = None
    unit: str | None = None


class GeneratedRecipe(BaseModel):
    """A recipe as returned by the generation client (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    ingredients: list[RecipeIngredient]
    instructions: list[str]
    prep_time: int = Field(alias="prepTime")
    cook_time: int = Field(alias="cookTime")
    servings: int


class SaveRecipeData(BaseModel):
    title: str
    description: str | None = None
    instructions: str | list[str]
    ingredients: list[RecipeIngredient]
    prep_time: int | None = None
    cook_time: int | None = None
    servings: int | None = None


class RecipeFilters(BaseModel):
    search: str | None = None
    min_rating: int | None = None


class RecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None
    instructions: str
    ingredients_json: list
    prep_time: int | None
    cook_time: int | None
    servings: int | None
    rating: float | None
    created_at: datetime
