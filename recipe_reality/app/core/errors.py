"""Error taxonomy for recipe extraction and transcript retrieval.

Every failure raised by the core is a ``RecipeCoreError`` tagged with one
``ErrorKind``. Callers branch on ``error.kind`` rather than on exception
subclasses. Each error carries the user-facing message, recovery suggestion
and retry hint that the UI renders.
"""

import enum
from typing import Optional

import httpx


class ErrorKind(str, enum.Enum):
    CREDENTIAL = "credential"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER = "server"
    EXTRACTION = "extraction"
    TRANSCRIPT = "transcript"


class RecipeCoreError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        user_message: str,
        suggestion: str,
        retryable: bool,
        platform: Optional[str] = None,
        source_url: Optional[str] = None,
        status_code: Optional[int] = None,
        raw_response: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.user_message = user_message
        self.suggestion = suggestion
        self.retryable = retryable
        self.platform = platform
        self.source_url = source_url
        self.status_code = status_code
        self.raw_response = raw_response

    def __repr__(self) -> str:
        return f"RecipeCoreError(kind={self.kind.value!r}, message={self.message!r})"

    @classmethod
    def credential(
        cls,
        provider: str,
        message: Optional[str] = None,
        *,
        suggestion: Optional[str] = None,
        platform: Optional[str] = None,
        source_url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> "RecipeCoreError":
        return cls(
            ErrorKind.CREDENTIAL,
            message or f"Invalid or missing API key for {provider}",
            user_message=f"No valid API key configured for {provider}",
            suggestion=suggestion or f"Go to Settings to add your {provider} API key",
            retryable=False,
            platform=platform,
            source_url=source_url,
            status_code=status_code,
        )

    @classmethod
    def rate_limit(
        cls,
        message: Optional[str] = None,
        *,
        platform: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> "RecipeCoreError":
        return cls(
            ErrorKind.RATE_LIMIT,
            message or "Rate limit exceeded",
            user_message="Too many requests",
            suggestion="Please wait a moment and try again",
            retryable=True,
            platform=platform,
            source_url=source_url,
            status_code=429,
        )

    @classmethod
    def network(
        cls,
        message: Optional[str] = None,
        *,
        platform: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> "RecipeCoreError":
        return cls(
            ErrorKind.NETWORK,
            message or "Network request failed",
            user_message="Connection failed",
            suggestion="Check your internet connection and try again",
            retryable=True,
            platform=platform,
            source_url=source_url,
        )

    @classmethod
    def timeout(
        cls,
        message: Optional[str] = None,
        *,
        platform: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> "RecipeCoreError":
        return cls(
            ErrorKind.TIMEOUT,
            message or "Request timed out",
            user_message="Request timed out",
            suggestion="Check your connection and try again",
            retryable=True,
            platform=platform,
            source_url=source_url,
        )

    @classmethod
    def server(
        cls,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        platform: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> "RecipeCoreError":
        return cls(
            ErrorKind.SERVER,
            message or "Server error occurred",
            user_message="Server error",
            suggestion="Please try again later",
            retryable=True,
            platform=platform,
            source_url=source_url,
            status_code=status_code,
        )

    @classmethod
    def extraction(
        cls,
        message: str,
        *,
        user_message: str = "Failed to extract recipe",
        suggestion: str = "Try a different URL or manually enter the recipe",
        source_url: Optional[str] = None,
        raw_response: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> "RecipeCoreError":
        return cls(
            ErrorKind.EXTRACTION,
            message,
            user_message=user_message,
            suggestion=suggestion,
            retryable=False,
            source_url=source_url,
            raw_response=raw_response,
            status_code=status_code,
        )

    @classmethod
    def transcript(
        cls,
        platform: str,
        message: Optional[str] = None,
        *,
        suggestion: Optional[str] = None,
        source_url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> "RecipeCoreError":
        if suggestion is None:
            if platform == "youtube":
                suggestion = "This video may not have captions. Try a different video."
            elif platform in {"tiktok", "instagram"}:
                suggestion = "Check your Supadata API key in Settings, or try a different video."
            else:
                suggestion = "Try using a supported video platform (YouTube, TikTok, Instagram)."
        return cls(
            ErrorKind.TRANSCRIPT,
            message or f"Failed to extract transcript from {platform}",
            user_message=f"Could not get {platform} transcript",
            suggestion=suggestion,
            retryable=platform in {"tiktok", "instagram"},
            platform=platform,
            source_url=source_url,
            status_code=status_code,
        )


def categorize_error(exc: BaseException, *, source_url: Optional[str] = None) -> RecipeCoreError:
    """Map an arbitrary exception onto the error taxonomy."""
    if isinstance(exc, RecipeCoreError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return RecipeCoreError.timeout(str(exc) or None, source_url=source_url)
    if isinstance(exc, httpx.RequestError):
        return RecipeCoreError.network(str(exc) or None, source_url=source_url)

    message = str(exc)
    lowered = message.lower()
    if "api key" in lowered or "unauthorized" in lowered or "401" in lowered:
        return RecipeCoreError.credential("unknown", message, source_url=source_url)
    if "rate limit" in lowered or "too many requests" in lowered or "429" in lowered:
        return RecipeCoreError.rate_limit(message, source_url=source_url)
    if "timeout" in lowered or "timed out" in lowered:
        return RecipeCoreError.timeout(message, source_url=source_url)
    if any(word in lowered for word in ("network", "connection", "offline", "fetch")):
        return RecipeCoreError.network(message, source_url=source_url)
    if "500" in lowered or "server" in lowered:
        return RecipeCoreError.server(message, source_url=source_url)
    return RecipeCoreError.extraction(
        message or "Unknown error",
        user_message="Something went wrong",
        suggestion="Please try again",
        source_url=source_url,
    )


_HTTP_STATUS_BY_KIND = {
    ErrorKind.CREDENTIAL: 401,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.NETWORK: 500,
    ErrorKind.TIMEOUT: 500,
    ErrorKind.SERVER: 500,
    ErrorKind.EXTRACTION: 500,
    ErrorKind.TRANSCRIPT: 500,
}


def http_status_for(error: RecipeCoreError) -> int:
    return _HTTP_STATUS_BY_KIND[error.kind]
