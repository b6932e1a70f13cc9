"""Text formatting utilities for the TUI and CLI.

Hides the details of markdown rendering, citation layout and clipboard
access.
"""

from collections.abc import Sequence

from rich.console import Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from ..parsing import ParsedContent
from ..session import DATA_SOURCES, ChatMessage, Source, group_sources_by_domain
from .config import CHAT_MESSAGE_MAX_PREVIEW, SOURCES_PER_DOMAIN_PREVIEW


def preview(text: str, limit: int = CHAT_MESSAGE_MAX_PREVIEW) -> str:
    """Single-line preview of a message."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[:limit - 1] + "…"


def message_label(message: ChatMessage) -> str:
    """Header line: role, time and the data source that grounded it."""
    role = "You" if message.role == "user" else "Assistant"
    icon = ">" if message.role == "user" else "<"
    label = f"{icon} {role} [{message.timestamp:%H:%M:%S}]"
    if message.metadata is not None and message.metadata.is_grounded:
        label += f" · {DATA_SOURCES[message.metadata.data_source].label}"
    if message.metadata is not None and message.role == "assistant" and message.metadata.thinking_mode:
        label += " · thinking"
    return label


def format_sources(sources: Sequence[Source], per_domain: int = SOURCES_PER_DOMAIN_PREVIEW) -> Text:
    """Citations grouped by domain, as styled text with links."""
    text = Text()
    for domain, group in group_sources_by_domain(sources).items():
        if text:
            text.append("\n")
        text.append(f"{domain}", style="bold")
        text.append(f" ({len(group)})\n", style="dim")
        for source in group[:per_domain]:
            text.append("  • ")
            text.append(source.title, style=f"link {source.uri}")
            text.append("\n")
        if len(group) > per_domain:
            text.append(f"  +{len(group) - per_domain} more\n", style="dim")
    return text


def render_answer(parsed: ParsedContent, sources: Sequence[Source] = (), show_reasoning: bool = False) -> Group:
    """Rich renderable for an answer, used by the CLI."""
    parts = []
    if parsed.has_reasoning:
        if show_reasoning:
            parts.append(Panel(Markdown(parsed.reasoning), title="Reasoning", border_style="magenta"))
        else:
            parts.append(Text("Reasoning available (use --reasoning to show)", style="dim italic"))
    parts.append(Markdown(parsed.main_content))
    if parsed.has_promotion:
        parts.append(Panel(Markdown(parsed.promotion), border_style="cyan"))
    if sources:
        parts.append(Panel(format_sources(sources), title=f"Sources ({len(sources)})", border_style="blue"))
    return Group(*parts)


def copy_text(text: str) -> bool:
    """Copy text to the system clipboard.

    Returns:
        False if no system clipboard is available
    """
    import pyperclip

    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException:
        return False
    return True
