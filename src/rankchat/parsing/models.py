"""Data models for response section extraction.

These models describe what the extractor produces, independent of the
patterns used to find each section.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ParsedContent(BaseModel):
    """A model response split into its display sections.

    Derived from the raw message text on every render and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    reasoning: str | None = Field(default=None, description="Reasoning preamble, if one was found")
    main_content: str = Field(description="The answer text shown to the user")
    promotion: str | None = Field(default=None, description="Promotional footer, if one was found")

    @property
    def has_reasoning(self) -> bool:
        return bool(self.reasoning)

    @property
    def has_promotion(self) -> bool:
        return bool(self.promotion)


class MatchKind(str, Enum):
    """Outcome of a single matcher."""

    NO_MATCH = "no_match"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class MatchResult(BaseModel):
    """Tagged result of running one reasoning matcher against a text.

    Attributes:
        kind: Whether the pattern was absent, found but too small, or accepted
        matcher: Name of the matcher that produced this result
        reasoning: Extracted reasoning (empty for NO_MATCH)
        remaining: The answer text left after the match (empty for NO_MATCH)
    """

    model_config = ConfigDict(frozen=True)

    kind: MatchKind
    matcher: str
    reasoning: str = ""
    remaining: str = ""

    @property
    def accepted(self) -> bool:
        return self.kind is MatchKind.ACCEPTED

    @classmethod
    def no_match(cls, matcher: str) -> "MatchResult":
        return cls(kind=MatchKind.NO_MATCH, matcher=matcher)


class ExtractionThresholds(BaseModel):
    """Length thresholds that decide whether a match is trusted.

    A cascade match counts only when both its reasoning and its remaining
    answer are longer than the ``min_*`` values. After extraction, a main
    content shorter than ``fallback_main_length`` combined with reasoning
    shorter than ``fallback_reasoning_length`` discards everything.
    """

    model_config = ConfigDict(frozen=True)

    min_reasoning_length: int = Field(default=10, ge=0)
    min_answer_length: int = Field(default=10, ge=0)
    fallback_main_length: int = Field(default=5, ge=0)
    fallback_reasoning_length: int = Field(default=20, ge=0)


DEFAULT_THRESHOLDS = ExtractionThresholds()
