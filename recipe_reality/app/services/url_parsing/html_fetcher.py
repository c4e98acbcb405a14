"""HTML fetching and URL validation utilities."""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from recipe_reality.app.core.config import get_settings
from recipe_reality.app.core.errors import RecipeCoreError

logger = logging.getLogger(__name__)


def is_private_host(host: str) -> bool:
    """Check if a host is private/localhost."""
    hostname = host.split(":")[0]
    try:
        ip = ipaddress.ip_address(hostname)
        return ip.is_private or ip.is_loopback
    except ValueError:
        return hostname.lower() in {"localhost"}


def validate_url(url: str) -> None:
    parsed_url = urlparse(url)
    if parsed_url.scheme not in {"http", "https"} or not parsed_url.netloc:
        raise ValueError("Invalid URL")
    if is_private_host(parsed_url.hostname or ""):
        raise ValueError("URL points to a private or disallowed host")


def build_headers() -> dict:
    settings = get_settings()
    headers = {
        "User-Agent": settings.scraper_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }
    if settings.scraper_cookies:
        headers["Cookie"] = settings.scraper_cookies
    return headers


def _charset_from_content_type(content_type: str) -> Optional[str]:
    if "charset=" not in content_type.lower():
        return None
    try:
        return content_type.lower().split("charset=")[1].split(";")[0].strip().strip("\"'")
    except IndexError:
        return None


def decode_html(response: httpx.Response) -> str:
    """Decode a page body using the header charset, then any ``<meta charset>``."""
    content_bytes = response.content
    encoding = _charset_from_content_type(response.headers.get("content-type", "")) or "utf-8"
    try:
        return content_bytes.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        text = content_bytes.decode("utf-8", errors="replace")
        encoding_match = re.search(r'<meta[^>]+charset=["\']?([^"\'>\s]+)', text, re.I)
        if encoding_match:
            detected_encoding = encoding_match.group(1).lower()
            if detected_encoding != "utf-8":
                try:
                    return content_bytes.decode(detected_encoding)
                except (UnicodeDecodeError, LookupError):
                    logger.warning(
                        "Declared charset %s failed for %s", detected_encoding, response.url
                    )
        return text


async def fetch_html(url: str) -> str:
    """Fetch a page with browser-like headers.

    Raises ``ValueError`` for URLs that are not public http(s) addresses and
    ``RecipeCoreError`` for transport failures and non-2xx responses.
    """
    validate_url(url)
    settings = get_settings()
    timeout = httpx.Timeout(settings.http_timeout_seconds, connect=5.0)

    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, headers=build_headers()
        ) as client:
            response = await client.get(url)
    except httpx.TimeoutException as exc:
        logger.warning("Timed out fetching %s: %s", url, exc)
        raise RecipeCoreError.timeout(source_url=url) from exc
    except httpx.RequestError as exc:
        logger.warning("Network error fetching %s: %s", url, exc)
        raise RecipeCoreError.network(f"Failed to fetch page: {exc}", source_url=url) from exc

    if response.status_code >= 500:
        raise RecipeCoreError.server(
            f"Failed to fetch page: {response.status_code}",
            status_code=response.status_code,
            source_url=url,
        )
    if response.status_code >= 400:
        raise RecipeCoreError.extraction(
            f"Failed to fetch page: {response.status_code}",
            user_message="Could not load the recipe page",
            source_url=url,
            status_code=response.status_code,
        )

    html = decode_html(response)
    logger.info("Fetched %s (%d characters)", url, len(html))
    return html
