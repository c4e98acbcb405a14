from typing import Union

from recipe_reality.app.schemas.recipe import IngredientCategory

CATEGORY_SYNONYMS = {
    "produce": IngredientCategory.PRODUCE,
    "fruit": IngredientCategory.PRODUCE,
    "fruits": IngredientCategory.PRODUCE,
    "vegetable": IngredientCategory.PRODUCE,
    "vegetables": IngredientCategory.PRODUCE,
    "meat": IngredientCategory.MEAT,
    "seafood": IngredientCategory.MEAT,
    "fish": IngredientCategory.MEAT,
    "poultry": IngredientCategory.MEAT,
    "meat & seafood": IngredientCategory.MEAT,
    "meat and seafood": IngredientCategory.MEAT,
    "dairy": IngredientCategory.DAIRY,
    "eggs": IngredientCategory.DAIRY,
    "dairy & eggs": IngredientCategory.DAIRY,
    "dairy and eggs": IngredientCategory.DAIRY,
    "bakery": IngredientCategory.BAKERY,
    "bread": IngredientCategory.BAKERY,
    "pantry": IngredientCategory.PANTRY,
    "dry goods": IngredientCategory.PANTRY,
    "frozen": IngredientCategory.FROZEN,
    "beverages": IngredientCategory.BEVERAGES,
    "beverage": IngredientCategory.BEVERAGES,
    "drinks": IngredientCategory.BEVERAGES,
    "condiments": IngredientCategory.CONDIMENTS,
    "condiment": IngredientCategory.CONDIMENTS,
    "sauces": IngredientCategory.CONDIMENTS,
    "condiments & sauces": IngredientCategory.CONDIMENTS,
    "condiments and sauces": IngredientCategory.CONDIMENTS,
    "spices": IngredientCategory.SPICES,
    "spice": IngredientCategory.SPICES,
    "seasonings": IngredientCategory.SPICES,
    "herbs": IngredientCategory.SPICES,
    "spices & seasonings": IngredientCategory.SPICES,
    "spices and seasonings": IngredientCategory.SPICES,
    "other": IngredientCategory.OTHER,
}


def normalize_category(label: Union[str, IngredientCategory, None]) -> IngredientCategory:
    """Map a free-form category label onto the fixed category set."""
    if isinstance(label, IngredientCategory):
        return label
    if not isinstance(label, str):
        return IngredientCategory.OTHER
    key = " ".join(label.lower().split())
    return CATEGORY_SYNONYMS.get(key, IngredientCategory.OTHER)
