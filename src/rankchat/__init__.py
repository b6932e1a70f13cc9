"""
Rankchat: a terminal SEO assistant with grounded answers, printable reports
and read-aloud.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .errors import (
    GenerationError,
    PlaybackError,
    RankChatError,
    SpeechSynthesisError,
    StorageError,
)
from .export import markdown_to_html, to_printable_html
from .parsing import ParsedContent, extract_sections
from .session import ChatMessage, ChatSession, Source

__all__ = [
    "ChatMessage",
    "ChatSession",
    "GenerationError",
    "ParsedContent",
    "PlaybackError",
    "RankChatError",
    "Source",
    "SpeechSynthesisError",
    "StorageError",
    "extract_sections",
    "markdown_to_html",
    "to_printable_html",
]
