"""Provider factory functions for CLI.

Centralizes creation of the store, session and assistant provider from
environment variables. Hides configuration details from command
implementations.
"""

import os
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..llm import AssistantProvider, create_assistant_provider
from ..llm.providers.gemini import DEFAULT_MODEL, DEFAULT_TTS_MODEL
from ..session import ChatSession
from ..storage import KeyValueStore, create_key_value_store
from ..storage.json_file import DEFAULT_STORE_PATH
from ..ui.config import LogLevel

# Default console for output
_console = Console()

_LEVEL_STYLES = {
    "debug": "dim white",
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}


def console_debug_callback(
    log_level: str | None,
    console: Console | None = None,
) -> Callable[[str, str, str], None] | None:
    """Debug callback printing to the console, or None when logging is off.

    Args:
        log_level: Threshold (debug, info, warning, error), None to disable
        console: Optional Rich console for output
    """
    if log_level is None:
        return None
    con = console or _console
    threshold = LogLevel.from_string(log_level)

    def _print(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < threshold:
            return
        style = _LEVEL_STYLES.get(level, "white")
        con.print(f"[{style}]{level.upper():<7}[/] [bold]\\[{component}][/] {escape(message)}")

    return _print


def get_store() -> KeyValueStore:
    """Create the key-value store from environment variables.

    Environment variables:
        RANKCHAT_STORE: JSON store path (default: ~/.rankchat/store.json),
            or ``:memory:`` for a store that is not persisted
    """
    location = os.getenv("RANKCHAT_STORE")
    if location == ":memory:":
        return create_key_value_store("memory")
    path = Path(location).expanduser() if location else DEFAULT_STORE_PATH
    return create_key_value_store("file", path=path)


def get_session(log_level: str | None = None, console: Console | None = None) -> ChatSession:
    """Create and load the chat session."""
    session = ChatSession(get_store())
    session.set_debug_callback(console_debug_callback(log_level, console))
    session.load()
    return session


def get_assistant_provider(console: Console | None = None) -> AssistantProvider | None:
    """Create assistant provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Assistant provider instance, or None if not configured

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required)
        GEMINI_MODEL: Gemini model (default: gemini-2.5-flash)
        GEMINI_TTS_MODEL: Text-to-speech model (default: gemini-2.5-flash-preview-tts)
    """
    con = console or _console
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        con.print("[yellow]Warning: GEMINI_API_KEY not set, assistant features disabled[/yellow]")
        return None
    return create_assistant_provider(
        "gemini",
        api_key=api_key,
        model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        tts_model=os.getenv("GEMINI_TTS_MODEL", DEFAULT_TTS_MODEL),
    )


def require_assistant_provider(console: Console | None = None) -> AssistantProvider:
    """Get assistant provider, raising error if not configured.

    Raises:
        SystemExit: If the provider is not configured
    """
    import typer

    con = console or _console
    provider = get_assistant_provider(con)
    if not provider:
        con.print("[red]Error: assistant provider not configured[/red]")
        raise typer.Exit(code=1)
    return provider
