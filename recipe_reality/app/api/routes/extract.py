import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from recipe_reality.app.api.deps import get_ai_provider
from recipe_reality.app.core.config import get_settings
from recipe_reality.app.schemas.extraction import ErrorResponse, ExtractRequest
from recipe_reality.app.schemas.recipe import ExtractedRecipe
from recipe_reality.app.services import recipe_extraction
from recipe_reality.app.services.ai_provider import AIProvider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["extraction"])


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


@router.post(
    "/extract",
    response_model=ExtractedRecipe,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 429, 500)},
)
async def extract(
    payload: ExtractRequest,
    provider: AIProvider = Depends(get_ai_provider),
):
    """Extract a recipe from a URL, or from transcript text the client already fetched.

    Errors are reported as ``{"error": ...}``; provider and transcript
    failures are mapped onto status codes by the application's error handler.
    """
    url = payload.url.strip()
    if not url:
        return _bad_request("Missing required field: url")

    try:
        if payload.is_transcript:
            if not payload.transcript or not payload.transcript.strip():
                return _bad_request("Missing required field: transcript")
            return await recipe_extraction.extract_recipe_from_transcript(
                url, payload.transcript, provider
            )
        transcript_api_key: Optional[str] = get_settings().supadata_api_key
        return await recipe_extraction.extract_recipe(url, provider, transcript_api_key)
    except ValueError as exc:
        logger.info("Rejected extraction request for %s: %s", url, exc)
        return _bad_request(str(exc))
