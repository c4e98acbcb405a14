"""General parsing utilities for recipe extraction."""

import re
from typing import Optional

from recipe_reality.app.services.url_parsing.constants import COMMON_UNITS, FRACTION_MAP


def clean_text(text: str) -> str:
    """Normalize whitespace in text."""
    return re.sub(r"\s+", " ", text or "").strip()


def normalize_unit_token(unit: str) -> str:
    """Normalize a unit token for comparison."""
    token = unit.lower().strip().strip(".")
    if token in COMMON_UNITS:
        return token
    if token.endswith("es") and token[:-2] in COMMON_UNITS:
        token = token[:-2]
    elif token.endswith("s") and len(token) > 1:
        token = token[:-1]
    return token


def is_known_unit(unit: str) -> bool:
    """Check if a unit string is a recognized cooking unit."""
    return normalize_unit_token(unit) in COMMON_UNITS


def normalize_fraction_display(qty: Optional[str]) -> Optional[str]:
    """Normalize unicode fraction characters, e.g. "1½" -> "1 1/2"."""
    if not qty:
        return qty
    s = qty
    fraction_chars = "".join(FRACTION_MAP.keys())
    s = re.sub(rf"(\d)([{fraction_chars}])", r"\1 \2", s)
    for k, v in FRACTION_MAP.items():
        s = s.replace(k, v)
    s = re.sub(r"\s+", " ", s).strip()
    return s or None


def format_iso_duration(value: str) -> str:
    """Render an ISO-8601 time duration (PT1H30M) as "1 hour 30 minutes".

    Anything that is not a ``PT`` duration is returned unchanged.
    """
    if not value or not value.startswith("PT"):
        return value
    hours = re.search(r"(\d+)H", value)
    minutes = re.search(r"(\d+)M", value)
    parts = []
    if hours:
        count = int(hours.group(1))
        parts.append(f"{count} hour{'' if count == 1 else 's'}")
    if minutes:
        count = int(minutes.group(1))
        parts.append(f"{count} minute{'' if count == 1 else 's'}")
    return " ".join(parts) or value


def resolve_image_url(value, fallback: Optional[str] = None) -> Optional[str]:
    """Extract an image URL from the schema.org image shapes.

    Accepts a plain string, a list (first element wins), or an ImageObject
    with a ``url`` field. Falls back to ``fallback`` (usually og:image).
    """
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("url")
        if isinstance(value, list):
            value = value[0] if value else None
    if isinstance(value, str) and value.strip():
        return value.strip()
    return fallback or None


def first_value(value):
    """Return the first element of a list, or the value itself."""
    if isinstance(value, list):
        return value[0] if value else None
    return value
