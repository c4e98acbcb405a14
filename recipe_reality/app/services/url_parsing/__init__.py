"""URL recipe parsing package.

This package turns fetched pages into the text handed to the AI provider:
a schema.org JSON-LD digest when the page carries one, otherwise the page's
reduced plain text.
"""

from recipe_reality.app.services.url_parsing.extractors import (
    build_recipe_digest,
    extract_recipe_digest,
    find_recipe_node,
    reduce_html_to_text,
)
from recipe_reality.app.services.url_parsing.html_fetcher import (
    fetch_html,
    is_private_host,
    validate_url,
)
from recipe_reality.app.services.url_parsing.models import PageContent, PageMetadata
from recipe_reality.app.services.url_parsing.parsing_utils import (
    clean_text,
    format_iso_duration,
    is_known_unit,
    normalize_fraction_display,
    normalize_unit_token,
    resolve_image_url,
)

__all__ = [
    # Models
    "PageContent",
    "PageMetadata",
    # HTML fetching
    "fetch_html",
    "is_private_host",
    "validate_url",
    # Extractors
    "build_recipe_digest",
    "extract_recipe_digest",
    "find_recipe_node",
    "reduce_html_to_text",
    # Parsing utilities
    "clean_text",
    "format_iso_duration",
    "is_known_unit",
    "normalize_fraction_display",
    "normalize_unit_token",
    "resolve_image_url",
]
