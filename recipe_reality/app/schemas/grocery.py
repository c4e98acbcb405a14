from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from recipe_reality.app.schemas.quantity import Quantity
from recipe_reality.app.schemas.recipe import IngredientCategory


class ConsolidatedGroceryItem(BaseModel):
    name: str
    quantity: Optional[Quantity] = None
    unit: Optional[str] = None
    category: IngredientCategory = IngredientCategory.OTHER
    source_recipe_ids: List[str] = Field(default_factory=list)

    @field_validator("source_recipe_ids")
    @classmethod
    def validate_source_recipe_ids(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one source recipe is required")
        return value
