from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from recipe_reality.app.schemas.recipe import VideoPlatform


class ExtractRequest(BaseModel):
    url: str
    is_transcript: bool = Field(False, alias="isTranscript")
    transcript: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class TranscriptRequest(BaseModel):
    url: str
    platform: VideoPlatform
    api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("supadataApiKey", "thirdPartyApiKey", "api_key"),
    )


class TranscriptResponse(BaseModel):
    transcript: str
    platform: VideoPlatform


class ErrorResponse(BaseModel):
    error: str
