"""Rank saved recipes by how much of each the pantry already covers."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from recipe_reality.app.schemas.pantry import PantryItem, RankedRecipe
from recipe_reality.app.schemas.recipe import Ingredient, Recipe

EXPIRING_SOON_DAYS = 3


def matches_ingredient(pantry_name: str, ingredient_name: str) -> bool:
    """Case-insensitive containment in either direction; blank names never match."""
    pantry_key = (pantry_name or "").strip().lower()
    ingredient_key = (ingredient_name or "").strip().lower()
    if not pantry_key or not ingredient_key:
        return False
    return pantry_key in ingredient_key or ingredient_key in pantry_key


def _in_pantry(ingredient: Ingredient, pantry: List[PantryItem]) -> bool:
    return any(matches_ingredient(item.name, ingredient.name) for item in pantry)


def matched_ingredients(recipe: Recipe, pantry: List[PantryItem]) -> List[Ingredient]:
    return [ing for ing in recipe.ingredients if _in_pantry(ing, pantry)]


def missing_ingredients(recipe: Recipe, pantry: List[PantryItem]) -> List[Ingredient]:
    return [ing for ing in recipe.ingredients if not _in_pantry(ing, pantry)]


def calculate_match_percentage(recipe: Recipe, pantry: List[PantryItem]) -> int:
    total = len(recipe.ingredients)
    if total == 0:
        return 0
    present = len(matched_ingredients(recipe, pantry))
    # Integer half-up rounding of 100 * present / total.
    return (200 * present + total) // (2 * total)


def rank_recipes(recipes: List[Recipe], pantry: List[PantryItem]) -> List[RankedRecipe]:
    """Best-covered recipes first; ties go to fewer missing ingredients, then input order."""
    ranked = [
        RankedRecipe(
            recipe=recipe,
            match_percentage=calculate_match_percentage(recipe, pantry),
            missing_count=len(missing_ingredients(recipe, pantry)),
        )
        for recipe in recipes
    ]
    return sorted(ranked, key=lambda r: (-r.match_percentage, r.missing_count))


def _now_like(value: datetime, now: Optional[datetime]) -> datetime:
    if now is not None:
        return now
    if value.tzinfo is not None:
        return datetime.now(timezone.utc)
    return datetime.now()


def is_expired(item: PantryItem, now: Optional[datetime] = None) -> bool:
    if item.expiration_date is None:
        return False
    return item.expiration_date < _now_like(item.expiration_date, now)


def is_expiring_soon(
    item: PantryItem, now: Optional[datetime] = None, days: int = EXPIRING_SOON_DAYS
) -> bool:
    if item.expiration_date is None:
        return False
    current = _now_like(item.expiration_date, now)
    if item.expiration_date < current:
        return False
    return item.expiration_date <= current + timedelta(days=days)
