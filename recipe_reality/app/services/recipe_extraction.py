"""Recipe extraction orchestration.

Pages are reduced to a schema.org digest or plain text, video URLs to a
transcript, and the result is handed to an AI provider whose JSON reply is
mapped onto ``ExtractedRecipe``.
"""

import json
import logging
import math
import re
from typing import Any, List, Optional

from recipe_reality.app.core.config import get_settings
from recipe_reality.app.core.errors import ErrorKind, RecipeCoreError
from recipe_reality.app.schemas.recipe import (
    ExtractedIngredient,
    ExtractedRecipe,
    SourceType,
    VideoPlatform,
)
from recipe_reality.app.services.ai_provider import (
    PAGE_SYSTEM_PROMPT,
    PAGE_USER_PREFIX,
    TRANSCRIPT_SYSTEM_PROMPT,
    TRANSCRIPT_USER_PREFIX,
    AIProvider,
)
from recipe_reality.app.services.categories import normalize_category
from recipe_reality.app.services.url_parsing.extractors import (
    extract_recipe_digest,
    reduce_html_to_text,
)
from recipe_reality.app.services.url_parsing.html_fetcher import fetch_html, validate_url
from recipe_reality.app.services.url_parsing.models import PageContent
from recipe_reality.app.services.video_transcript import detect_platform, fetch_transcript

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Recipe"

_SOURCE_TYPE_BY_PLATFORM = {
    VideoPlatform.YOUTUBE: SourceType.YOUTUBE,
    VideoPlatform.TIKTOK: SourceType.TIKTOK,
    VideoPlatform.INSTAGRAM: SourceType.INSTAGRAM,
    VideoPlatform.UNKNOWN: SourceType.URL,
}

# Platforms whose transcript failures fall back to reading the page itself.
_PAGE_FALLBACK_PLATFORMS = {VideoPlatform.TIKTOK, VideoPlatform.INSTAGRAM}


def determine_source_type(url: str) -> SourceType:
    return _SOURCE_TYPE_BY_PLATFORM[detect_platform(url)]


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text``.

    Braces inside JSON strings (including escaped quotes) do not count
    toward the balance. Returns None when no complete object is present.
    """
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for idx in range(start, len(text)):
            char = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : idx + 1]
        start = text.find("{", start + 1)
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            value = int(value)
    text = str(value).strip()
    return text or None


def _as_servings(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value) if value > 0 else None
    if isinstance(value, str):
        match = re.search(r"\d+", value)
        if match:
            servings = int(match.group(0))
            return servings if servings > 0 else None
    return None


def _as_ingredients(items: Any) -> List[ExtractedIngredient]:
    ingredients: List[ExtractedIngredient] = []
    if not isinstance(items, list):
        return ingredients
    for item in items:
        if not isinstance(item, dict):
            continue
        name = _as_text(item.get("name"))
        if not name:
            continue
        ingredients.append(
            ExtractedIngredient(
                name=name,
                quantity=_as_text(item.get("quantity")),
                unit=_as_text(item.get("unit")),
                category=normalize_category(item.get("category")),
            )
        )
    return ingredients


def _as_instructions(items: Any) -> List[str]:
    if isinstance(items, str):
        items = [items]
    if not isinstance(items, list):
        return []
    steps = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("text") or item.get("name")
        step = _as_text(item)
        if step:
            steps.append(step)
    return steps


def parse_recipe_response(text: str, url: str) -> ExtractedRecipe:
    """Map an AI provider reply onto an ``ExtractedRecipe``."""
    span = extract_json_object(text)
    if span is None:
        logger.warning("AI reply for %s contained no JSON object: %s", url, (text or "")[:500])
        raise RecipeCoreError.extraction(
            "Invalid response format from AI",
            suggestion="Please try again or use a different recipe URL",
            source_url=url,
            raw_response=text,
        )
    try:
        data = json.loads(span)
    except json.JSONDecodeError as exc:
        logger.warning("AI reply for %s is not valid JSON: %s", url, exc)
        raise RecipeCoreError.extraction(
            f"Invalid response format from AI: {exc}",
            suggestion="Please try again or use a different recipe URL",
            source_url=url,
            raw_response=text,
        ) from exc

    if data.get("error"):
        raise RecipeCoreError.extraction(
            str(data["error"]),
            user_message="No recipe found",
            suggestion="Make sure the URL points to a recipe page",
            source_url=url,
            raw_response=text,
        )

    return ExtractedRecipe(
        title=_as_text(data.get("title")) or DEFAULT_TITLE,
        servings=_as_servings(data.get("servings")),
        prep_time=_as_text(data.get("prepTime")),
        cook_time=_as_text(data.get("cookTime")),
        ingredients=_as_ingredients(data.get("ingredients")),
        instructions=_as_instructions(data.get("instructions")),
        image_url=_as_text(data.get("imageURL")),
        source_url=url,
        source_type=determine_source_type(url),
    )


async def load_page_content(url: str, max_chars: Optional[int] = None) -> PageContent:
    """Fetch a page and reduce it to the text sent to the AI provider."""
    html = await fetch_html(url)
    digest = extract_recipe_digest(html)
    if digest:
        logger.info("Using schema.org digest for %s", url)
        return PageContent(text=digest, parser_strategy="schema_org_json_ld", source_url=url)

    limit = max_chars or get_settings().recipe_max_content_chars
    text = reduce_html_to_text(html, max_chars=limit)
    if not text:
        raise RecipeCoreError.extraction(
            "No readable content found on page",
            user_message="No recipe found",
            source_url=url,
        )
    logger.info("No JSON-LD recipe on %s; using plain text (%d chars)", url, len(text))
    return PageContent(text=text, parser_strategy="plain_text", source_url=url)


async def _complete(
    provider: AIProvider, system_prompt: str, user_content: str, url: str
) -> ExtractedRecipe:
    try:
        reply = await provider.complete(system_prompt, user_content)
    except RecipeCoreError as exc:
        if exc.source_url is None:
            exc.source_url = url
        raise
    logger.info("AI reply for %s: %s", url, reply[:500])
    return parse_recipe_response(reply, url)


async def extract_recipe(
    url: str,
    provider: AIProvider,
    transcript_api_key: Optional[str] = None,
) -> ExtractedRecipe:
    """Extract a recipe from a web page or recipe video URL.

    Video URLs are read through their transcript. A TikTok or Instagram
    transcript failure falls back to the page itself unless the failure is a
    credential error; YouTube failures always propagate.
    """
    validate_url(url)
    platform = detect_platform(url)
    if platform == VideoPlatform.UNKNOWN:
        page = await load_page_content(url)
        return await _complete(provider, PAGE_SYSTEM_PROMPT, PAGE_USER_PREFIX + page.text, url)

    try:
        transcript = await fetch_transcript(url, platform, transcript_api_key)
        user_content = TRANSCRIPT_USER_PREFIX + transcript
    except RecipeCoreError as exc:
        if platform not in _PAGE_FALLBACK_PLATFORMS or exc.kind == ErrorKind.CREDENTIAL:
            raise
        logger.warning(
            "%s transcript failed for %s (%s: %s); falling back to page content",
            platform.value,
            url,
            exc.kind.value,
            exc.message,
        )
        page = await load_page_content(url)
        user_content = PAGE_USER_PREFIX + page.text

    return await _complete(provider, TRANSCRIPT_SYSTEM_PROMPT, user_content, url)


async def extract_recipe_from_transcript(
    url: str, transcript: str, provider: AIProvider
) -> ExtractedRecipe:
    """Extract a recipe from transcript text the caller already retrieved."""
    if not transcript or not transcript.strip():
        raise ValueError("Transcript text is required")
    return await _complete(
        provider, TRANSCRIPT_SYSTEM_PROMPT, TRANSCRIPT_USER_PREFIX + transcript.strip(), url
    )
