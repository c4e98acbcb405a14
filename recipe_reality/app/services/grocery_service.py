import logging
from typing import Dict, List

from recipe_reality.app.schemas.grocery import ConsolidatedGroceryItem
from recipe_reality.app.schemas.quantity import Quantity
from recipe_reality.app.schemas.recipe import Recipe
from recipe_reality.app.services.quantity_parser import combine_quantities, parse_quantity

logger = logging.getLogger(__name__)


class _GroceryGroup:
    def __init__(self, name: str, unit, category) -> None:
        self.name = name
        self.first_unit = unit
        self.category = category
        self.quantity: Quantity | None = None
        self.recipe_ids: List[str] = []

    def add_quantity(self, quantity: Quantity) -> None:
        if self.quantity is None:
            self.quantity = quantity
            return
        self.quantity = combine_quantities(self.quantity, quantity)

    def add_recipe(self, recipe_id: str) -> None:
        if recipe_id not in self.recipe_ids:
            self.recipe_ids.append(recipe_id)

    def to_item(self) -> ConsolidatedGroceryItem:
        unit = self.quantity.unit if self.quantity is not None else self.first_unit
        return ConsolidatedGroceryItem(
            name=self.name,
            quantity=self.quantity,
            unit=unit,
            category=self.category,
            source_recipe_ids=self.recipe_ids,
        )


def consolidate_ingredients(recipes: List[Recipe]) -> List[ConsolidatedGroceryItem]:
    """Merge same-named ingredients across recipes into grocery items.

    Ingredients are grouped by lower-cased, trimmed name. Quantities are
    combined pairwise in recipe order, the first-seen ingredient supplies the
    display name and category, and items come back in first-seen order.
    """
    groups: Dict[str, _GroceryGroup] = {}
    for recipe in recipes:
        for ingredient in recipe.ingredients:
            key = ingredient.name.strip().lower()
            if not key:
                continue
            group = groups.get(key)
            if group is None:
                group = _GroceryGroup(ingredient.name.strip(), ingredient.unit, ingredient.category)
                groups[key] = group
            if ingredient.quantity and ingredient.quantity.strip():
                group.add_quantity(parse_quantity(ingredient.quantity, ingredient.unit))
            group.add_recipe(recipe.id)

    logger.debug("Consolidated %d recipes into %d grocery items", len(recipes), len(groups))
    return [group.to_item() for group in groups.values()]
