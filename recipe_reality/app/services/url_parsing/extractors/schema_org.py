"""Schema.org JSON-LD recipe extraction."""

import json
import logging
from typing import Any, Iterator, List, Optional

from bs4 import BeautifulSoup

from recipe_reality.app.services.url_parsing.models import PageMetadata
from recipe_reality.app.services.url_parsing.parsing_utils import (
    clean_text,
    first_value,
    format_iso_duration,
    resolve_image_url,
)

logger = logging.getLogger(__name__)


def iter_json_ld_blocks(html: str) -> Iterator[Any]:
    """Yield every parseable JSON-LD block in document order."""
    soup = BeautifulSoup(html, "lxml")
    scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
    logger.info("Found %d JSON-LD script blocks", len(scripts))

    for idx, script in enumerate(scripts):
        raw_json = script.string or script.get_text()
        if not raw_json or not raw_json.strip():
            logger.debug("JSON-LD block %d is empty", idx)
            continue
        try:
            yield json.loads(raw_json)
        except json.JSONDecodeError as exc:
            logger.warning(
                "JSON-LD block %d failed to parse: %s (first 200 chars: %s)",
                idx,
                exc,
                raw_json[:200],
            )


def _is_recipe_type(declared) -> bool:
    types = [declared] if isinstance(declared, str) else declared
    if not isinstance(types, list):
        return False
    return any(isinstance(t, str) and t.lower() == "recipe" for t in types)


def find_recipe_node(node: Any) -> Optional[dict]:
    """Depth-first search of a JSON-LD tree for the first Recipe object.

    Lists are searched in order, a ``@graph`` container is searched through
    its members, and an object whose ``@type`` is or includes ``Recipe`` is
    the match. Scalars never match.
    """
    if isinstance(node, list):
        for item in node:
            found = find_recipe_node(item)
            if found is not None:
                return found
        return None
    if not isinstance(node, dict):
        return None
    graph = node.get("@graph")
    if isinstance(graph, list):
        return find_recipe_node(graph)
    if _is_recipe_type(node.get("@type")):
        return node
    return None


def extract_page_metadata(html: str) -> PageMetadata:
    """Collect ``og:*`` meta tags; the first occurrence of each property wins."""
    soup = BeautifulSoup(html, "lxml")
    properties = {}
    for tag in soup.find_all("meta"):
        prop = tag.get("property") or ""
        content = tag.get("content")
        if prop.startswith("og:") and content is not None and prop not in properties:
            properties[prop] = content.strip()
    return PageMetadata(properties=properties)


def _instruction_lines(instructions) -> List[str]:
    steps: List[str] = []
    if isinstance(instructions, str):
        cleaned = clean_text(instructions)
        if cleaned:
            steps.append(cleaned)
    elif isinstance(instructions, list):
        for entry in instructions:
            steps.extend(_instruction_lines(entry))
    elif isinstance(instructions, dict):
        # HowToSection groups its steps under itemListElement.
        nested = instructions.get("itemListElement")
        if isinstance(nested, list):
            steps.extend(_instruction_lines(nested))
        else:
            text_val = instructions.get("text") or instructions.get("name") or ""
            cleaned = clean_text(text_val) if isinstance(text_val, str) else ""
            if cleaned:
                steps.append(cleaned)
    return steps


def build_recipe_digest(recipe: dict, metadata: Optional[PageMetadata] = None) -> str:
    """Render a Recipe node as the plain-text digest handed to the AI provider."""
    metadata = metadata or PageMetadata()
    lines: List[str] = []

    name = recipe.get("name")
    title = clean_text(name) if isinstance(name, str) else ""
    title = title or metadata.title or ""
    if title:
        lines.append(f"Title: {title}")

    servings = first_value(recipe.get("recipeYield"))
    if servings not in (None, ""):
        lines.append(f"Servings: {servings}")
    if recipe.get("prepTime"):
        lines.append(f"Prep Time: {format_iso_duration(str(recipe['prepTime']))}")
    if recipe.get("cookTime"):
        lines.append(f"Cook Time: {format_iso_duration(str(recipe['cookTime']))}")

    image_url = resolve_image_url(recipe.get("image"), metadata.image)
    if image_url:
        lines.append(f"Image: {image_url}")

    ingredients = recipe.get("recipeIngredient")
    if isinstance(ingredients, list):
        lines.append("\nIngredients:")
        for ingredient in ingredients:
            if isinstance(ingredient, str) and clean_text(ingredient):
                lines.append(f"- {clean_text(ingredient)}")

    instructions = recipe.get("recipeInstructions")
    if isinstance(instructions, (list, str)):
        lines.append("\nInstructions:")
        for step_number, step in enumerate(_instruction_lines(instructions), start=1):
            lines.append(f"{step_number}. {step}")

    return "\n".join(lines)


def extract_recipe_digest(html: str) -> Optional[str]:
    """Return the structured-record digest for a page, or None when it has no Recipe."""
    for idx, data in enumerate(iter_json_ld_blocks(html)):
        recipe = find_recipe_node(data)
        if recipe is None:
            logger.debug("JSON-LD block %d has no Recipe node", idx)
            continue
        logger.info("Using JSON-LD Recipe node: %s", str(recipe.get("name"))[:50])
        return build_recipe_digest(recipe, extract_page_metadata(html))
    return None
