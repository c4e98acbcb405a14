from decimal import Decimal

from recipe_reality.app.schemas.recipe import Ingredient, Recipe
from recipe_reality.app.services.quantity_parser import parse_quantity, scale_quantity


def _scale_ingredient(ingredient: Ingredient, factor: Decimal) -> Ingredient:
    if not ingredient.quantity:
        return ingredient
    quantity = parse_quantity(ingredient.quantity, ingredient.unit)
    if quantity.amount is None:
        return ingredient
    scaled = scale_quantity(quantity, factor)
    return ingredient.model_copy(
        update={"quantity": scaled.text, "unit": ingredient.unit or scaled.unit}
    )


def scale_recipe(recipe: Recipe, servings: int) -> Recipe:
    """Return a copy of ``recipe`` with every numeric quantity scaled to ``servings``.

    A recipe without a serving count is treated as serving one.
    """
    if servings < 1:
        raise ValueError("Servings must be at least 1")
    factor = Decimal(servings) / Decimal(recipe.servings or 1)
    ingredients = [_scale_ingredient(ing, factor) for ing in recipe.ingredients]
    return recipe.model_copy(update={"servings": servings, "ingredients": ingredients})
