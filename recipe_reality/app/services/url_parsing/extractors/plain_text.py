"""Plain-text reduction of pages that carry no structured recipe."""

import logging

from bs4 import BeautifulSoup

from recipe_reality.app.services.url_parsing.parsing_utils import clean_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 15000


def reduce_html_to_text(html: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Strip markup down to whitespace-collapsed text, truncated to ``max_chars``."""
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = clean_text(soup.get_text(" "))
    if len(text) > max_chars:
        logger.info("Truncating page text from %d to %d characters", len(text), max_chars)
        text = text[:max_chars]
    return text.strip()
