import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ai_provider: str = Field("anthropic", alias="AI_PROVIDER")
    ai_max_tokens: int = Field(4096, alias="AI_MAX_TOKENS")
    anthropic_api_key: str | None = Field(None, alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field("claude-3-5-haiku-latest", alias="ANTHROPIC_MODEL")
    anthropic_base_url: str = Field("https://api.anthropic.com", alias="ANTHROPIC_BASE_URL")
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: str = Field("https://api.openai.com", alias="OPENAI_BASE_URL")
    google_api_key: str | None = Field(None, alias="GOOGLE_API_KEY")
    google_model: str = Field("gemini-1.5-flash", alias="GOOGLE_MODEL")
    google_base_url: str = Field(
        "https://generativelanguage.googleapis.com", alias="GOOGLE_BASE_URL"
    )
    # Server-side default; requests may supply their own key.
    supadata_api_key: str | None = Field(None, alias="SUPADATA_API_KEY")
    supadata_base_url: str = Field("https://api.supadata.ai/v1", alias="SUPADATA_BASE_URL")
    scraper_user_agent: str = Field(
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15",
        alias="SCRAPER_USER_AGENT",
    )
    scraper_cookies: str | None = Field(None, alias="SCRAPER_COOKIES")
    recipe_max_content_chars: int = Field(15000, alias="RECIPE_MAX_CONTENT_CHARS")
    http_timeout_seconds: float = Field(20.0, alias="HTTP_TIMEOUT_SECONDS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
