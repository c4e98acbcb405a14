from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from recipe_reality.app.schemas.recipe import IngredientCategory, Recipe


class PantryItem(BaseModel):
    id: Optional[str] = None
    name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    category: IngredientCategory = IngredientCategory.OTHER
    expiration_date: Optional[datetime] = None


class RankedRecipe(BaseModel):
    recipe: Recipe
    match_percentage: int = Field(ge=0, le=100)
    missing_count: int = Field(ge=0)
