"""Markdown transcript export for a whole session."""

from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

from ..session.models import ChatMessage

TRANSCRIPT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def export_transcript(messages: Iterable[ChatMessage]) -> str:
    """Render messages as a markdown transcript, one section per message."""
    sections = []
    for message in messages:
        label = "User" if message.role == "user" else "Assistant"
        timestamp = message.timestamp.strftime(TRANSCRIPT_TIMESTAMP_FORMAT)
        sections.append(f"### {label} • {timestamp}\n{message.text}\n")
    return "\n".join(sections)


def transcript_filename(day: date | None = None) -> str:
    """Default file name for a transcript exported on ``day``."""
    day = day or datetime.now().date()
    return f"rabbit-rank-session-{day.isoformat()}.md"


def write_transcript(messages: Iterable[ChatMessage], path: str | Path) -> Path:
    """Write the transcript to ``path`` and return it."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(export_transcript(messages), encoding="utf-8")
    return target
