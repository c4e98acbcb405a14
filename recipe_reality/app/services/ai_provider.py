"""AI provider clients used to turn page text and transcripts into recipe JSON.

Each provider exposes ``complete(system_prompt, user_content)`` and returns the
model's raw text reply. Providers are constructed from settings by
``build_ai_provider`` and passed to the extraction functions explicitly.
"""

import abc
import logging
from typing import Any, Dict, Optional

import httpx

from recipe_reality.app.core.config import Settings, get_settings
from recipe_reality.app.core.errors import RecipeCoreError

logger = logging.getLogger(__name__)

PAGE_SYSTEM_PROMPT = """You are a recipe extraction assistant. Extract recipe information from the provided webpage content.
Return a JSON object with the following structure:
{
    "title": "Recipe Title",
    "servings": 4,
    "prepTime": "15 minutes",
    "cookTime": "30 minutes",
    "ingredients": [
        {"name": "ingredient name", "quantity": "2", "unit": "cups", "category": "produce"},
        ...
    ],
    "instructions": ["Step 1...", "Step 2...", ...],
    "imageURL": "https://..." (if found)
}

For ingredient categories, use one of: produce, meat, dairy, bakery, pantry, frozen, beverages, condiments, spices, other

If you cannot find a recipe in the content, return:
{"error": "No recipe found"}

Only return valid JSON, no other text."""

TRANSCRIPT_SYSTEM_PROMPT = """You are a recipe extraction assistant specializing in cooking video transcripts.
Extract recipe information from the spoken content of a cooking video.

The transcript may contain:
- Casual spoken language and filler words
- Approximate measurements ("a good handful", "about two cups")
- Steps described conversationally rather than formally
- Comments, tips, and personal stories mixed with recipe instructions

Your job is to:
1. Identify all ingredients mentioned, inferring reasonable quantities if only approximate amounts are given
2. Extract clear step-by-step instructions from the conversational content
3. Infer prep time and cook time from context if mentioned
4. Create a descriptive title if one isn't explicitly stated

Return a JSON object with the following structure:
{
    "title": "Recipe Title",
    "servings": 4,
    "prepTime": "15 minutes",
    "cookTime": "30 minutes",
    "ingredients": [
        {"name": "ingredient name", "quantity": "2", "unit": "cups", "category": "produce"},
        ...
    ],
    "instructions": ["Step 1...", "Step 2...", ...]
}

For ingredient categories, use one of: produce, meat, dairy, bakery, pantry, frozen, beverages, condiments, spices, other

Convert casual measurements to standard when possible:
- "a pinch" → quantity: "1", unit: "pinch"
- "a handful" → estimate cups or grams
- "some" or "a bit" → use reasonable default amounts

If the transcript doesn't contain a recipe, return:
{"error": "No recipe found"}

Only return valid JSON, no other text."""

PAGE_USER_PREFIX = "Extract the recipe from this webpage content:\n\n"
TRANSCRIPT_USER_PREFIX = "Extract the recipe from this cooking video transcript:\n\n"


def _error_message(resp: httpx.Response) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return None
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return error
    return None


class AIProvider(abc.ABC):
    name: str = "AI provider"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        max_tokens: int = 4096,
        timeout_seconds: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

    @abc.abstractmethod
    async def complete(self, system_prompt: str, user_content: str) -> str:
        """Send one system instruction and one user message; return the reply text."""

    async def _post(
        self, url: str, payload: Dict[str, Any], headers: Dict[str, str]
    ) -> Dict[str, Any]:
        timeout = httpx.Timeout(self.timeout_seconds, connect=10.0)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("%s request timed out: %s", self.name, exc)
            raise RecipeCoreError.timeout() from exc
        except httpx.RequestError as exc:
            logger.warning("%s request failed: %s", self.name, exc)
            raise RecipeCoreError.network(str(exc) or None) from exc

        if resp.status_code >= 400:
            self._raise_for_status(resp)
        try:
            data = resp.json()
        except ValueError as exc:
            raise RecipeCoreError.extraction(
                f"{self.name} returned a non-JSON response",
                raw_response=resp.text[:2000],
            ) from exc
        if not isinstance(data, dict):
            raise RecipeCoreError.extraction(
                f"{self.name} returned an unexpected response",
                raw_response=resp.text[:2000],
            )
        return data

    def _raise_for_status(self, resp: httpx.Response) -> None:
        status = resp.status_code
        message = _error_message(resp)
        logger.warning("%s returned status %s: %s", self.name, status, (message or "")[:500])
        if status in (401, 403):
            raise RecipeCoreError.credential(self.name, "Invalid API key", status_code=status)
        if status == 429:
            raise RecipeCoreError.rate_limit("Rate limited. Try again later.")
        if status >= 500:
            raise RecipeCoreError.server(message or f"HTTP {status}", status_code=status)
        raise RecipeCoreError.extraction(message or f"HTTP {status}", status_code=status)

    def _require_text(self, content: Any) -> str:
        if not isinstance(content, str) or not content.strip():
            logger.warning("%s returned empty content", self.name)
            raise RecipeCoreError.extraction("No response from AI")
        return content


class AnthropicProvider(AIProvider):
    name = "Anthropic"

    async def complete(self, system_prompt: str, user_content: str) -> str:
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_content}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "Content-Type": "application/json",
        }
        data = await self._post(f"{self.base_url}/v1/messages", payload, headers)
        blocks = data.get("content") or []
        text_block = next(
            (block for block in blocks if isinstance(block, dict) and block.get("type") == "text"),
            {},
        )
        return self._require_text(text_block.get("text"))


class OpenAIProvider(AIProvider):
    name = "OpenAI"

    async def complete(self, system_prompt: str, user_content: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": 0.1,
            "response_format": {"type": "json_object"},
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        data = await self._post(f"{self.base_url}/v1/chat/completions", payload, headers)
        content = (data.get("choices") or [{}])[0].get("message", {}).get("content")
        return self._require_text(content)


class GoogleProvider(AIProvider):
    name = "Google"

    async def complete(self, system_prompt: str, user_content: str) -> str:
        payload = {
            "contents": [{"parts": [{"text": f"{system_prompt}\n\n{user_content}"}]}],
            "generationConfig": {
                "temperature": 0.1,
                "responseMimeType": "application/json",
            },
        }
        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent?key={self.api_key}"
        data = await self._post(url, payload, {"Content-Type": "application/json"})
        try:
            content = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            content = None
        return self._require_text(content)


def build_ai_provider(settings: Optional[Settings] = None) -> AIProvider:
    """Construct the configured provider; a missing key is a credential error."""
    settings = settings or get_settings()
    provider = (settings.ai_provider or "anthropic").strip().lower()
    if provider == "anthropic":
        cls, api_key, model, base_url = (
            AnthropicProvider,
            settings.anthropic_api_key,
            settings.anthropic_model,
            settings.anthropic_base_url,
        )
    elif provider == "openai":
        cls, api_key, model, base_url = (
            OpenAIProvider,
            settings.openai_api_key,
            settings.openai_model,
            settings.openai_base_url,
        )
    elif provider == "google":
        cls, api_key, model, base_url = (
            GoogleProvider,
            settings.google_api_key,
            settings.google_model,
            settings.google_base_url,
        )
    else:
        raise ValueError(f"Unsupported AI provider: {settings.ai_provider}")

    if not api_key:
        raise RecipeCoreError.credential(cls.name)
    return cls(
        api_key,
        model,
        base_url,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=max(settings.http_timeout_seconds, 60.0),
    )
