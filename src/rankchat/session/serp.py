"""Search result snippet checks for titles and meta descriptions.

Rates title and description lengths against the limits Google shows in
results and builds the truncated snippet a searcher would see.
"""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

TITLE_MIN_LENGTH = 30
TITLE_LIMIT = 60
DESCRIPTION_MIN_LENGTH = 120
DESCRIPTION_LIMIT = 160

DEFAULT_URL = "https://example.com/page"


class LengthStatus(str, Enum):
    """How a snippet field's length compares to the recommended range."""

    EMPTY = "empty"
    SHORT = "short"
    GOOD = "good"
    LONG = "long"


def rate_length(length: int, minimum: int, limit: int) -> LengthStatus:
    if length == 0:
        return LengthStatus.EMPTY
    if length < minimum:
        return LengthStatus.SHORT
    if length <= limit:
        return LengthStatus.GOOD
    return LengthStatus.LONG


def truncate(text: str, limit: int) -> str:
    """Cut text at limit characters and mark the cut with ``...``."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def display_url(url: str) -> str:
    """URL as shown above a result: no scheme, no trailing slash."""
    return re.sub(r"/$", "", re.sub(r"^https?://", "", url))


class SerpPreview(BaseModel):
    """A rated search result snippet."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    url: str
    title_status: LengthStatus
    description_status: LengthStatus

    @property
    def title_length(self) -> int:
        return len(self.title)

    @property
    def description_length(self) -> int:
        return len(self.description)

    @property
    def shown_title(self) -> str:
        return truncate(self.title, TITLE_LIMIT)

    @property
    def shown_description(self) -> str:
        return truncate(self.description, DESCRIPTION_LIMIT)

    @property
    def shown_url(self) -> str:
        return display_url(self.url)

    @property
    def is_good(self) -> bool:
        return self.title_status is LengthStatus.GOOD and self.description_status is LengthStatus.GOOD

    @classmethod
    def check(cls, title: str, description: str = "", url: str = DEFAULT_URL) -> "SerpPreview":
        return cls(
            title=title,
            description=description,
            url=url,
            title_status=rate_length(len(title), TITLE_MIN_LENGTH, TITLE_LIMIT),
            description_status=rate_length(len(description), DESCRIPTION_MIN_LENGTH, DESCRIPTION_LIMIT),
        )
