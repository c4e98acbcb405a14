"""Ingredient quantity parsing, rendering, scaling and combination."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from recipe_reality.app.schemas.quantity import Quantity
from recipe_reality.app.services.url_parsing.parsing_utils import (
    clean_text,
    is_known_unit,
    normalize_fraction_display,
    normalize_unit_token,
)

# Nearest clean fraction must be closer than this to be used when rendering.
FRACTION_TOLERANCE = Decimal("0.05")
# Arithmetic residue below this is snapped onto the rendered value.
_DRIFT = Decimal("1e-9")

CLEAN_FRACTIONS = (
    (Decimal(1) / Decimal(4), "1/4"),
    (Decimal(1) / Decimal(3), "1/3"),
    (Decimal(1) / Decimal(2), "1/2"),
    (Decimal(2) / Decimal(3), "2/3"),
    (Decimal(3) / Decimal(4), "3/4"),
)

_NUMBER_RE = re.compile(
    r"""^\s*(?:
        (?P<whole>\d+)\s+(?P<mixed_num>\d+)\s*/\s*(?P<mixed_den>\d+)
        |(?P<num>\d+)\s*/\s*(?P<den>\d+)
        |(?P<decimal>\d*\.\d+|\d+(?:\.\d+)?)
    )(?P<rest>.*)$""",
    re.VERBOSE | re.DOTALL,
)
_RANGE_RE = re.compile(r"^\s*(-|–|to\s)\s*\d")

Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _split_unit(rest: str) -> Optional[str]:
    tokens = [tok.strip(",;") for tok in rest.split()]
    if len(tokens) >= 2 and is_known_unit(f"{tokens[0]} {tokens[1]}"):
        return f"{tokens[0]} {tokens[1]}".rstrip(".")
    if tokens and is_known_unit(tokens[0]):
        return tokens[0].rstrip(".")
    return None


def parse_quantity(raw: Optional[str], unit: Optional[str] = None) -> Quantity:
    """Parse a quantity string such as "2", "0.5", "1/2", "1 1/2 cups" or "1½".

    An explicit ``unit`` wins over one embedded in ``raw``. When no leading
    numeral can be read the quantity keeps the raw text and has no amount.
    """
    explicit_unit = clean_text(unit) if unit else None
    if raw is None:
        return Quantity(unit=explicit_unit or None)
    original = raw.strip()
    normalized = normalize_fraction_display(clean_text(original)) or ""

    match = _NUMBER_RE.match(normalized)
    if not match or _RANGE_RE.match(match.group("rest")):
        return Quantity(unit=explicit_unit or None, text=original, raw_text=original)

    try:
        if match.group("whole") is not None:
            whole = Decimal(match.group("whole"))
            num = Decimal(match.group("mixed_num"))
            den = Decimal(match.group("mixed_den"))
            if den == 0:
                raise ZeroDivisionError
            amount = whole + num / den
            text = f"{match.group('whole')} {match.group('mixed_num')}/{match.group('mixed_den')}"
        elif match.group("num") is not None:
            num = Decimal(match.group("num"))
            den = Decimal(match.group("den"))
            if den == 0:
                raise ZeroDivisionError
            amount = num / den
            text = f"{match.group('num')}/{match.group('den')}"
        else:
            amount = Decimal(match.group("decimal"))
            text = match.group("decimal")
    except (InvalidOperation, ZeroDivisionError):
        return Quantity(unit=explicit_unit or None, text=original, raw_text=original)

    return Quantity(
        amount=amount,
        unit=explicit_unit or _split_unit(match.group("rest")),
        text=text,
        raw_text=original,
    )


def parse_quantity_display(raw: Optional[str]) -> Optional[Decimal]:
    if raw is None or not raw.strip():
        return None
    return parse_quantity(raw).amount


def format_number(value: Number) -> str:
    """Render a number using the nearest clean fraction (halves, thirds, quarters).

    Values that are not within ``FRACTION_TOLERANCE`` of a clean fraction fall
    back to one decimal place.
    """
    value = _to_decimal(value)
    if value == value.to_integral_value():
        return str(int(value))

    whole = int(value)
    remainder = value - whole
    if whole > 0 and remainder < FRACTION_TOLERANCE:
        return str(whole)
    if Decimal(1) - remainder < FRACTION_TOLERANCE:
        return str(whole + 1)

    closest_label = None
    closest_diff = FRACTION_TOLERANCE
    for fraction, label in CLEAN_FRACTIONS:
        diff = abs(remainder - fraction)
        if diff < closest_diff:
            closest_diff = diff
            closest_label = label
    if closest_label:
        return closest_label if whole == 0 else f"{whole} {closest_label}"

    rounded = value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        # Tiny positive amounts must not render as "0".
        return format(value.normalize(), "f")
    rendered = format(rounded, "f")
    return rendered[:-2] if rendered.endswith(".0") else rendered


def _settle(amount: Decimal) -> Tuple[Decimal, str]:
    """Render ``amount`` and drop Decimal residue such as 0.999... for 1."""
    text = format_number(amount)
    snapped = parse_quantity(text).amount
    if snapped is not None and abs(snapped - amount) < _DRIFT:
        amount = snapped
    return amount, text


def scale_quantity(quantity: Quantity, factor: Number) -> Quantity:
    factor_value = _to_decimal(factor)
    if factor_value <= 0:
        raise ValueError("Scale factor must be positive")
    if quantity.amount is None:
        return quantity
    amount, text = _settle(quantity.amount * factor_value)
    return Quantity(
        amount=amount,
        unit=quantity.unit,
        text=text,
        raw_text=quantity.raw_text,
    )


def units_match(first: Optional[str], second: Optional[str]) -> bool:
    if not first and not second:
        return True
    if not first or not second:
        return False
    return normalize_unit_token(first) == normalize_unit_token(second)


def describe_quantity(quantity: Quantity) -> str:
    """Quantity text with its unit appended when the text does not already name it."""
    text = quantity.text or quantity.raw_text
    if not quantity.unit:
        return text
    unit_token = normalize_unit_token(quantity.unit)
    if any(normalize_unit_token(tok) == unit_token for tok in text.split()):
        return text
    return f"{text} {quantity.unit}".strip()


def combine_quantities(first: Quantity, second: Quantity) -> Quantity:
    """Sum two quantities with the same unit, otherwise keep both verbatim."""
    if first.amount is not None and second.amount is not None and units_match(
        first.unit, second.unit
    ):
        total, text = _settle(first.amount + second.amount)
        return Quantity(
            amount=total,
            unit=first.unit or second.unit,
            text=text,
            raw_text=" + ".join(t for t in (first.raw_text, second.raw_text) if t),
        )

    first_text = describe_quantity(first)
    second_text = describe_quantity(second)
    if not second_text:
        return first
    if not first_text:
        return second
    combined = f"{first_text} + {second_text}"
    return Quantity(amount=None, unit=None, text=combined, raw_text=combined)


def format_ingredient(
    name: str,
    quantity: Union[Quantity, str, None],
    unit: Optional[str] = None,
) -> str:
    """Display text for an ingredient: "{amount} {unit} {name}"."""
    if isinstance(quantity, str):
        quantity = parse_quantity(quantity, unit)
    parts = []
    if quantity is not None:
        text = quantity.text or quantity.raw_text
        if text:
            parts.append(text)
        unit = unit or quantity.unit
        if unit and text:
            unit_token = normalize_unit_token(unit)
            if any(normalize_unit_token(tok) == unit_token for tok in text.split()):
                unit = None
    if unit:
        parts.append(unit)
    parts.append(name)
    return " ".join(part for part in parts if part)
