"""Caption and transcript retrieval for recipe videos.

YouTube captions are read directly from the watch page's caption tracks.
TikTok and Instagram have no public caption endpoint, so their transcripts
come from the Supadata transcription service and need a user-supplied key.
"""

import json
import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

import httpx
from bs4 import BeautifulSoup

from recipe_reality.app.core.config import get_settings
from recipe_reality.app.core.errors import RecipeCoreError
from recipe_reality.app.schemas.recipe import VideoPlatform
from recipe_reality.app.services.url_parsing.constants import (
    INSTAGRAM_HOSTS,
    TIKTOK_HOSTS,
    YOUTUBE_HOSTS,
)
from recipe_reality.app.services.url_parsing.parsing_utils import clean_text

logger = logging.getLogger(__name__)

_CAPTION_TRACKS_RE = re.compile(r'"captionTracks":\s*(\[.*?\])')


def _host_matches(host: str, candidates) -> bool:
    return any(host == candidate or host.endswith("." + candidate) for candidate in candidates)


def detect_platform(url: str) -> VideoPlatform:
    host = (urlparse(url).hostname or "").lower()
    if _host_matches(host, YOUTUBE_HOSTS):
        return VideoPlatform.YOUTUBE
    if _host_matches(host, TIKTOK_HOSTS):
        return VideoPlatform.TIKTOK
    if _host_matches(host, INSTAGRAM_HOSTS):
        return VideoPlatform.INSTAGRAM
    return VideoPlatform.UNKNOWN


def is_video_url(url: str) -> bool:
    return detect_platform(url) != VideoPlatform.UNKNOWN


def extract_youtube_video_id(url: str) -> Optional[str]:
    """Video id from youtu.be, watch?v=, /shorts/ and /embed/ links."""
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if _host_matches(host, ("youtu.be",)):
        return parsed.path.strip("/").split("/")[0] or None
    v_param = parse_qs(parsed.query).get("v")
    if v_param and v_param[0]:
        return v_param[0]
    for marker in ("/shorts/", "/embed/"):
        if marker in parsed.path:
            return parsed.path.split(marker, 1)[1].strip("/").split("/")[0] or None
    return None


def _timeout() -> httpx.Timeout:
    return httpx.Timeout(get_settings().http_timeout_seconds, connect=5.0)


def _select_caption_track(tracks: list) -> dict:
    for track in tracks:
        if not isinstance(track, dict):
            continue
        language = track.get("languageCode") or ""
        vss_id = track.get("vssId") or ""
        if language.startswith("en") or ".en" in vss_id:
            return track
    return tracks[0] if isinstance(tracks[0], dict) else {}


def parse_caption_segments(caption_xml: str) -> list[str]:
    """Text segments of a timed-text caption document in document order."""
    soup = BeautifulSoup(caption_xml, "xml")
    segments = []
    for node in soup.find_all("text"):
        text = clean_text(node.get_text())
        if text:
            segments.append(text)
    return segments


async def fetch_youtube_transcript(url: str) -> str:
    platform = VideoPlatform.YOUTUBE.value
    video_id = extract_youtube_video_id(url)
    if not video_id:
        raise RecipeCoreError.transcript(
            platform, "Could not extract video ID from URL", source_url=url
        )

    headers = {"User-Agent": get_settings().scraper_user_agent}
    try:
        async with httpx.AsyncClient(
            timeout=_timeout(), follow_redirects=True, headers=headers
        ) as client:
            page = await client.get("https://www.youtube.com/watch", params={"v": video_id})
            if page.status_code >= 500:
                raise RecipeCoreError.server(
                    status_code=page.status_code, platform=platform, source_url=url
                )
            match = _CAPTION_TRACKS_RE.search(page.text)
            if not match:
                raise RecipeCoreError.transcript(
                    platform, "No captions available for this video", source_url=url
                )
            try:
                tracks = json.loads(match.group(1))
            except json.JSONDecodeError as exc:
                logger.warning("Caption track list for %s is not valid JSON: %s", video_id, exc)
                tracks = []
            if not tracks:
                raise RecipeCoreError.transcript(
                    platform, "No captions available for this video", source_url=url
                )

            track = _select_caption_track(tracks)
            base_url = track.get("baseUrl")
            if not base_url:
                raise RecipeCoreError.transcript(platform, "No caption URL found", source_url=url)
            logger.info(
                "Using caption track %s for video %s", track.get("languageCode"), video_id
            )
            captions = await client.get(base_url)
    except httpx.TimeoutException as exc:
        raise RecipeCoreError.timeout(platform=platform, source_url=url) from exc
    except httpx.RequestError as exc:
        raise RecipeCoreError.network(str(exc) or None, platform=platform, source_url=url) from exc

    segments = parse_caption_segments(captions.text)
    if not segments:
        raise RecipeCoreError.transcript(platform, "No transcript content found", source_url=url)
    return " ".join(segments)


def _normalize_supadata_payload(data) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    transcript = data.get("transcript")
    if isinstance(transcript, list):
        parts = []
        for segment in transcript:
            text = segment.get("text") if isinstance(segment, dict) else None
            if isinstance(text, str) and text.strip():
                parts.append(text.strip())
        return " ".join(parts) or None
    text = data.get("text")
    if isinstance(text, str) and text.strip():
        return text.strip()
    return None


async def fetch_supadata_transcript(
    url: str, platform: VideoPlatform, api_key: Optional[str]
) -> str:
    """Transcript for a TikTok or Instagram video from the Supadata service.

    A missing key is reported before any request is made so callers can tell
    it apart from transient failures.
    """
    platform_name = platform.value
    if not api_key:
        raise RecipeCoreError.credential(
            "Supadata",
            f"Supadata API key required for {platform_name} videos",
            suggestion="Go to Settings > Video Platforms to add your Supadata API key",
            platform=platform_name,
            source_url=url,
        )

    settings = get_settings()
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
    try:
        async with httpx.AsyncClient(timeout=_timeout()) as client:
            resp = await client.post(
                f"{settings.supadata_base_url.rstrip('/')}/transcript",
                json={"url": url},
                headers=headers,
            )
    except httpx.TimeoutException as exc:
        raise RecipeCoreError.timeout(platform=platform_name, source_url=url) from exc
    except httpx.RequestError as exc:
        raise RecipeCoreError.network(
            str(exc) or None, platform=platform_name, source_url=url
        ) from exc

    status = resp.status_code
    if status == 401:
        raise RecipeCoreError.credential(
            "Supadata",
            "Invalid Supadata API key",
            platform=platform_name,
            source_url=url,
            status_code=status,
        )
    if status == 403:
        raise RecipeCoreError.credential(
            "Supadata",
            "Supadata API access forbidden. Check your plan.",
            platform=platform_name,
            source_url=url,
            status_code=status,
        )
    if status == 404:
        raise RecipeCoreError.transcript(
            platform_name,
            "No transcript available for this video",
            source_url=url,
            status_code=status,
        )
    if status == 429:
        raise RecipeCoreError.rate_limit(
            "Supadata rate limit exceeded", platform=platform_name, source_url=url
        )
    if status >= 500:
        raise RecipeCoreError.server(
            f"Supadata service error: {status}",
            status_code=status,
            platform=platform_name,
            source_url=url,
        )
    if status >= 400:
        logger.warning("Supadata returned %s for %s: %s", status, url, resp.text[:200])
        raise RecipeCoreError.transcript(
            platform_name, f"Supadata API error: {status}", source_url=url, status_code=status
        )

    try:
        data = resp.json()
    except ValueError:
        data = None
    transcript = _normalize_supadata_payload(data)
    if not transcript:
        raise RecipeCoreError.transcript(
            platform_name, "Unexpected response format from Supadata", source_url=url
        )
    return transcript


async def fetch_transcript(
    url: str,
    platform: Optional[VideoPlatform] = None,
    api_key: Optional[str] = None,
) -> str:
    platform = platform or detect_platform(url)
    logger.info("Fetching %s transcript for %s", platform.value, url)
    if platform == VideoPlatform.YOUTUBE:
        return await fetch_youtube_transcript(url)
    if platform in (VideoPlatform.TIKTOK, VideoPlatform.INSTAGRAM):
        return await fetch_supadata_transcript(url, platform, api_key)
    raise RecipeCoreError.transcript(
        platform.value, "Unsupported video platform", source_url=url
    )
