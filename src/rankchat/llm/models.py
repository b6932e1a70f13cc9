"""Request and response models for the assistant API."""

from pydantic import BaseModel, ConfigDict, Field

from ..session.models import Attachment, DataSource, Source


class GenerationRequest(BaseModel):
    """One prompt to answer, with the options that shape the answer."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(description="Full prompt text including response style guidance")
    data_source: DataSource = DataSource.NONE
    attachment: Attachment | None = None
    thinking_mode: bool = False


class GenerationResult(BaseModel):
    """Response from an assistant provider."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Raw answer text, possibly with reasoning and promotion sections")
    sources: list[Source] = Field(default_factory=list, description="De-duplicated web citations")
    model: str = Field(description="Model that produced the answer")
