from decimal import Decimal

import pytest
from pydantic import ValidationError

from recipe_reality.app.schemas.quantity import Quantity
from recipe_reality.app.services.quantity_parser import (
    combine_quantities,
    format_ingredient,
    format_number,
    parse_quantity,
    parse_quantity_display,
    scale_quantity,
)


def test_parse_quantity_valid():
    assert parse_quantity_display("1") == Decimal("1")
    assert parse_quantity_display("0.5") == Decimal("0.5")
    assert parse_quantity_display("1/2") == Decimal("0.5")
    assert parse_quantity_display("1 1/2") == Decimal("1.5")
    assert parse_quantity_display("1½") == Decimal("1.5")
    assert parse_quantity_display("  3  ") == Decimal("3")


def test_parse_quantity_invalid():
    assert parse_quantity_display(None) is None
    assert parse_quantity_display("") is None
    assert parse_quantity_display("   ") is None
    assert parse_quantity_display("1/0") is None
    assert parse_quantity_display("abc") is None


def test_parse_quantity_with_embedded_unit():
    q = parse_quantity("1 1/2 cups")
    assert q.amount == Decimal("1.5")
    assert q.unit == "cups"
    assert q.text == "1 1/2"
    assert q.raw_text == "1 1/2 cups"

    half = parse_quantity("½ cup")
    assert half.amount == Decimal("0.5")
    assert half.unit == "cup"


def test_explicit_unit_wins_over_embedded_unit():
    assert parse_quantity("2 cups", "tbsp").unit == "tbsp"


def test_unparseable_quantity_keeps_raw_text():
    q = parse_quantity("to taste")
    assert q.amount is None
    assert q.text == "to taste"
    assert q.raw_text == "to taste"


def test_ranges_are_not_numeric():
    q = parse_quantity("2-3 cups")
    assert q.amount is None
    assert q.raw_text == "2-3 cups"


def test_quantity_rejects_negative_amounts():
    with pytest.raises(ValidationError):
        Quantity(amount=Decimal("-1"))


@pytest.mark.parametrize("raw", ["2", "0.5", "1/2", "1 1/2", "3/4", "1½", "0"])
def test_rendered_quantity_reads_back_to_same_amount(raw):
    q = parse_quantity(raw)
    assert parse_quantity(format_ingredient("flour", q)).amount == q.amount
    assert parse_quantity(format_number(q.amount)).amount == q.amount


def test_scale_collapses_to_clean_values():
    doubled = scale_quantity(parse_quantity("1"), 2)
    assert doubled.amount == 2
    assert doubled.text == "2"

    half_doubled = scale_quantity(parse_quantity("1/2"), 2)
    assert half_doubled.amount == 1
    assert half_doubled.text == "1"

    assert scale_quantity(parse_quantity("1 1/2"), 2).text == "3"
    assert scale_quantity(parse_quantity("3"), Decimal("0.5")).text == "1 1/2"
    assert scale_quantity(parse_quantity("1"), Decimal(1) / Decimal(3)).text == "1/3"


def test_scaling_does_not_leave_decimal_residue():
    third_tripled = scale_quantity(parse_quantity("1/3"), 3)
    assert third_tripled.text == "1"
    assert str(third_tripled.amount) == "1"

    combined = combine_quantities(third_tripled, parse_quantity("1"))
    assert str(combined.amount) == "2"


def test_scaling_keeps_precision_that_rendering_rounds():
    scaled = scale_quantity(parse_quantity("1"), Decimal("1.84"))
    assert scaled.text == "1.8"
    assert scaled.amount == Decimal("1.84")


def test_scale_keeps_unit_and_raw_text():
    scaled = scale_quantity(parse_quantity("2 cups"), 2)
    assert scaled.unit == "cups"
    assert scaled.raw_text == "2 cups"


def test_scale_rejects_non_positive_factor():
    with pytest.raises(ValueError):
        scale_quantity(parse_quantity("1"), 0)
    with pytest.raises(ValueError):
        scale_quantity(parse_quantity("1"), -2)


def test_scale_leaves_amountless_quantity_unchanged():
    q = parse_quantity("a pinch")
    assert scale_quantity(q, 3) is q


def test_format_number():
    assert format_number(Decimal("2")) == "2"
    assert format_number(Decimal("0.5")) == "1/2"
    assert format_number(Decimal("0.75")) == "3/4"
    assert format_number(Decimal("2.66")) == "2 2/3"
    assert format_number(Decimal("2.98")) == "3"
    assert format_number(Decimal("3.02")) == "3"
    assert format_number(Decimal("0.2")) == "0.2"
    assert format_number(Decimal("1.6")) == "1.6"
    assert format_number(Decimal("0.01")) == "0.01"


def test_combine_same_unit_sums():
    combined = combine_quantities(parse_quantity("1 cup"), parse_quantity("1 cup"))
    assert combined.amount == 2
    assert combined.unit == "cup"
    assert combined.text == "2"


def test_combine_ignores_case_plural_and_period_in_units():
    combined = combine_quantities(parse_quantity("1", "cups"), parse_quantity("1", "Cup."))
    assert combined.amount == 2


def test_combine_unitless_amounts():
    assert combine_quantities(parse_quantity("2"), parse_quantity("3")).amount == 5


def test_combine_different_units_keeps_both():
    combined = combine_quantities(parse_quantity("1 cup"), parse_quantity("2 tbsp"))
    assert combined.amount is None
    assert combined.unit is None
    assert combined.text == "1 cup + 2 tbsp"


def test_combine_with_unparseable_side_keeps_both():
    combined = combine_quantities(parse_quantity("to taste"), parse_quantity("1", "tsp"))
    assert combined.amount is None
    assert combined.text == "to taste + 1 tsp"


def test_format_ingredient():
    assert format_ingredient("flour", "2", "cups") == "2 cups flour"
    assert format_ingredient("flour", "1 1/2 cups") == "1 1/2 cups flour"
    assert format_ingredient("flour", parse_quantity("1 cup")) == "1 cup flour"
    assert format_ingredient("salt", None) == "salt"
    assert format_ingredient("salt", None, "pinch") == "pinch salt"
    assert format_ingredient("eggs", "0") == "0 eggs"
