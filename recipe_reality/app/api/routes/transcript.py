import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from recipe_reality.app.core.config import get_settings
from recipe_reality.app.core.errors import RecipeCoreError
from recipe_reality.app.schemas.extraction import ErrorResponse, TranscriptRequest, TranscriptResponse
from recipe_reality.app.schemas.recipe import VideoPlatform
from recipe_reality.app.services import video_transcript

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcripts"])


@router.post(
    "/transcript",
    response_model=TranscriptResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def transcript(payload: TranscriptRequest):
    url = payload.url.strip()
    if not url:
        return JSONResponse(
            status_code=400, content={"error": "Missing required fields: url, platform"}
        )
    if payload.platform == VideoPlatform.UNKNOWN:
        return JSONResponse(status_code=400, content={"error": "Unsupported platform"})

    api_key = payload.api_key or get_settings().supadata_api_key
    if payload.platform in (VideoPlatform.TIKTOK, VideoPlatform.INSTAGRAM) and not api_key:
        return JSONResponse(
            status_code=400,
            content={"error": f"Supadata API key required for {payload.platform.value} videos"},
        )

    try:
        text = await video_transcript.fetch_transcript(url, payload.platform, api_key)
    except RecipeCoreError as exc:
        logger.warning("Transcript extraction failed for %s: %s", url, exc.message)
        return JSONResponse(status_code=500, content={"error": exc.message})
    return TranscriptResponse(transcript=text, platform=payload.platform)
