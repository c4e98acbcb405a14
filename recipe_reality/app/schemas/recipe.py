import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, enum.Enum):
    URL = "url"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    MANUAL = "manual"


class VideoPlatform(str, enum.Enum):
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    UNKNOWN = "unknown"


class IngredientCategory(str, enum.Enum):
    PRODUCE = "Produce"
    MEAT = "Meat & Seafood"
    DAIRY = "Dairy & Eggs"
    BAKERY = "Bakery"
    PANTRY = "Pantry"
    FROZEN = "Frozen"
    BEVERAGES = "Beverages"
    CONDIMENTS = "Condiments & Sauces"
    SPICES = "Spices & Seasonings"
    OTHER = "Other"


class ExtractedIngredient(BaseModel):
    name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    category: IngredientCategory = IngredientCategory.OTHER


class ExtractedRecipe(BaseModel):
    title: str
    servings: Optional[int] = None
    prep_time: Optional[str] = Field(None, alias="prepTime")
    cook_time: Optional[str] = Field(None, alias="cookTime")
    ingredients: List[ExtractedIngredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, alias="imageURL")
    source_url: str = Field(alias="sourceURL")
    source_type: SourceType = Field(SourceType.URL, alias="sourceType")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Ingredient(BaseModel):
    id: Optional[str] = None
    name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    category: IngredientCategory = IngredientCategory.OTHER
    is_optional: bool = False


class Recipe(BaseModel):
    id: str
    title: str
    servings: Optional[int] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    source_url: Optional[str] = None
    source_type: SourceType = SourceType.MANUAL
    image_url: Optional[str] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
