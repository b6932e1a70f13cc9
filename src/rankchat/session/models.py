"""Data models for the chat session.

These models define messages, citations, attachments and settings as plain
JSON-compatible records, independent of the store they are persisted in.
"""

import base64
import mimetypes
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid_extensions import uuid7

from .sources import dedupe_sources


class DataSource(str, Enum):
    """External site a grounded search is focused on."""

    AHREFS = "ahrefs"
    MOZ = "moz"
    SEMRUSH = "semrush"
    SEJ = "sej"
    KWFINDER = "kwfinder"
    GOOGLE_TRENDS = "googletrends"
    NONE = "none"


class ResponseMode(str, Enum):
    """Requested verbosity of the answer."""

    CONCISE = "concise"
    BALANCED = "balanced"
    DEEP = "deep"


class DataSourceConfig(BaseModel):
    """Display and search configuration for one data source."""

    model_config = ConfigDict(frozen=True)

    id: DataSource
    label: str
    site_query: str
    description: str


DATA_SOURCES: dict[DataSource, DataSourceConfig] = {
    config.id: config
    for config in [
        DataSourceConfig(
            id=DataSource.AHREFS,
            label="Ahrefs Data",
            site_query="site:ahrefs.com",
            description="Backlink analysis, keyword research",
        ),
        DataSourceConfig(
            id=DataSource.MOZ,
            label="MOZ Data",
            site_query="site:moz.com",
            description="Domain authority, SEO guides",
        ),
        DataSourceConfig(
            id=DataSource.SEMRUSH,
            label="Semrush Data",
            site_query="site:semrush.com",
            description="Competitive analysis, PPC data",
        ),
        DataSourceConfig(
            id=DataSource.SEJ,
            label="SEJ Data",
            site_query="site:searchenginejournal.com",
            description="SEO news, algorithm updates",
        ),
        DataSourceConfig(
            id=DataSource.KWFINDER,
            label="KW Finder Data",
            site_query="site:mangools.com OR site:kwfinder.com",
            description="Keyword difficulty, SERP analysis",
        ),
        DataSourceConfig(
            id=DataSource.GOOGLE_TRENDS,
            label="Google Trends",
            site_query="site:trends.google.com",
            description="Trending topics, search interest",
        ),
        DataSourceConfig(
            id=DataSource.NONE,
            label="No External Data",
            site_query="",
            description="Use AI knowledge only",
        ),
    ]
}


class Source(BaseModel):
    """One web citation attached to an answer."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(description="Page title as reported by the search grounding")
    uri: str = Field(description="Cited URL")


class Attachment(BaseModel):
    """A file sent along with a prompt.

    Inline attachments (images, PDFs) carry base64 data and are sent as
    binary parts; all other files carry their decoded text.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    data: str
    is_inline: bool

    @classmethod
    def from_path(cls, path: str | Path) -> "Attachment":
        """Read a file from disk into an attachment."""
        file_path = Path(path)
        mime_type = mimetypes.guess_type(file_path.name)[0] or "text/plain"
        if mime_type.startswith("image/") or mime_type == "application/pdf":
            return cls(
                name=file_path.name,
                mime_type=mime_type,
                data=base64.b64encode(file_path.read_bytes()).decode("ascii"),
                is_inline=True,
            )
        return cls(
            name=file_path.name,
            mime_type="text/plain",
            data=file_path.read_text(encoding="utf-8", errors="replace"),
            is_inline=False,
        )

    def decoded_bytes(self) -> bytes:
        """Raw bytes of an inline attachment."""
        return base64.b64decode(self.data)


class MessageMetadata(BaseModel):
    """Request settings that produced a message."""

    model_config = ConfigDict(frozen=True)

    data_source: DataSource = DataSource.NONE
    thinking_mode: bool = False
    response_mode: ResponseMode = ResponseMode.BALANCED
    model: str | None = None

    @property
    def is_grounded(self) -> bool:
        return self.data_source is not DataSource.NONE


class ChatMessage(BaseModel):
    """A message in the session log.

    The raw text is immutable; parsed sections, revealed text and exports
    are derived from it on demand.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid7()))
    role: Literal["user", "assistant"]
    text: str
    sources: list[Source] = Field(default_factory=list)
    metadata: MessageMetadata | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @field_validator("sources")
    @classmethod
    def _unique_sources(cls, sources: list[Source]) -> list[Source]:
        return dedupe_sources(sources)

    @property
    def is_assistant(self) -> bool:
        return self.role == "assistant"


class SessionSettings(BaseModel):
    """User choices that persist across sessions."""

    data_source: DataSource = DataSource.NONE
    thinking_mode: bool = False
    response_mode: ResponseMode = ResponseMode.BALANCED
