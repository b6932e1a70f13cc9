"""Chat session module.

Module structure (each module hides a design decision):
- models.py: Messages, citations, attachments and settings
- sources.py: Citation de-duplication and grouping
- analytics.py: Session statistics
- history.py: The persisted message log, pins and settings
- serp.py: Search result snippet length checks
"""

from .analytics import SessionStats, count_words, format_duration, response_latency_ms
from .history import MESSAGES_KEY, PINS_KEY, SETTINGS_KEY, ChatSession
from .models import (
    DATA_SOURCES,
    Attachment,
    ChatMessage,
    DataSource,
    DataSourceConfig,
    MessageMetadata,
    ResponseMode,
    SessionSettings,
    Source,
)
from .serp import LengthStatus, SerpPreview
from .sources import dedupe_sources, group_sources_by_domain, source_domain

__all__ = [
    "DATA_SOURCES",
    "MESSAGES_KEY",
    "PINS_KEY",
    "SETTINGS_KEY",
    "Attachment",
    "ChatMessage",
    "ChatSession",
    "DataSource",
    "DataSourceConfig",
    "LengthStatus",
    "MessageMetadata",
    "ResponseMode",
    "SessionSettings",
    "SerpPreview",
    "SessionStats",
    "Source",
    "count_words",
    "dedupe_sources",
    "format_duration",
    "group_sources_by_domain",
    "response_latency_ms",
    "source_domain",
]
