import pytest

from recipe_reality.app.schemas.recipe import Ingredient, Recipe
from recipe_reality.app.services.scaling_service import scale_recipe


@pytest.fixture
def soup():
    return Recipe(
        id="soup",
        title="Soup",
        servings=4,
        ingredients=[
            Ingredient(name="stock", quantity="2", unit="cups"),
            Ingredient(name="salt", quantity="1/2", unit="tsp"),
            Ingredient(name="pepper", quantity="to taste"),
            Ingredient(name="parsley"),
            Ingredient(name="rice", quantity="1 1/2 cups"),
            Ingredient(name="carrots", quantity="3"),
        ],
    )


def test_doubling(soup):
    scaled = scale_recipe(soup, 8)

    assert scaled.servings == 8
    assert [(i.quantity, i.unit) for i in scaled.ingredients] == [
        ("4", "cups"),
        ("1", "tsp"),
        ("to taste", None),
        (None, None),
        ("3", "cups"),
        ("6", None),
    ]


def test_halving_renders_clean_fractions(soup):
    scaled = scale_recipe(soup, 2)
    quantities = {i.name: i.quantity for i in scaled.ingredients}
    assert quantities["salt"] == "1/4"
    assert quantities["carrots"] == "1 1/2"
    assert quantities["rice"] == "3/4"


def test_original_recipe_is_unchanged(soup):
    scale_recipe(soup, 8)
    assert soup.servings == 4
    assert soup.ingredients[0].quantity == "2"


def test_recipe_without_servings_counts_as_one():
    recipe = Recipe(id="r", title="Toast", ingredients=[Ingredient(name="bread", quantity="1", unit="slice")])
    scaled = scale_recipe(recipe, 3)
    assert scaled.servings == 3
    assert scaled.ingredients[0].quantity == "3"


def test_servings_must_be_positive(soup):
    with pytest.raises(ValueError):
        scale_recipe(soup, 0)
