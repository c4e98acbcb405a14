"""Pydantic models for URL recipe parsing."""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class PageMetadata(BaseModel):
    """Page-level Open Graph metadata used to fill gaps in structured records."""

    properties: Dict[str, str] = Field(default_factory=dict)

    @property
    def title(self) -> Optional[str]:
        return self.properties.get("og:title") or None

    @property
    def image(self) -> Optional[str]:
        return self.properties.get("og:image") or None


class PageContent(BaseModel):
    """Text prepared for the AI provider from a fetched page."""

    text: str
    parser_strategy: str
    source_url: Optional[str] = None
