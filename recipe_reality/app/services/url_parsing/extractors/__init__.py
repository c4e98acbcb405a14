"""Page content extractors for different parsing strategies."""

from recipe_reality.app.services.url_parsing.extractors.plain_text import reduce_html_to_text
from recipe_reality.app.services.url_parsing.extractors.schema_org import (
    build_recipe_digest,
    extract_recipe_digest,
    find_recipe_node,
)

__all__ = [
    "build_recipe_digest",
    "extract_recipe_digest",
    "find_recipe_node",
    "reduce_html_to_text",
]
