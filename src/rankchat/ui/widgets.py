"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message rendering (reasoning, revealed answer, promotion, sources)
- Input history management
- Stats and settings display
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Collapsible, Markdown, RichLog, Static, TextArea

from ..parsing import ParsedContent, extract_sections
from ..playback import MessageResources, RevealController, RevealPhase
from ..session import DATA_SOURCES, ChatMessage, SessionSettings, SessionStats
from .config import INPUT_HISTORY_MAX_SIZE, LOG_MAX_MESSAGE_LENGTH, LOG_TIMESTAMP_FORMAT, LogLevel
from .formatting import format_sources, message_label, preview


class MessageView(Vertical):
    """One message in the chat history.

    Assistant messages are split into a collapsed reasoning block, the
    main answer (revealed incrementally when new), an optional promotion
    callout and the grouped sources. Clicking selects the message.
    """

    class Selected(Message):
        """Posted when the user clicks a message."""

        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    def __init__(
        self,
        message: ChatMessage,
        resources: MessageResources | None = None,
        pinned: bool = False,
        animate: bool = False,
        **kwargs,
    ) -> None:
        role_class = "user-message" if message.role == "user" else "assistant-message"
        super().__init__(classes=f"chat-message {role_class}", **kwargs)
        self._message = message
        self._pinned = pinned
        self._parsed: ParsedContent | None = None
        self._reveal: RevealController | None = None
        if message.is_assistant:
            self._parsed = extract_sections(message.text)
            if resources is not None:
                self._reveal = resources.reveal_for(
                    message.id,
                    self._parsed.main_content,
                    enabled=animate,
                )

    @property
    def message(self) -> ChatMessage:
        return self._message

    @property
    def parsed(self) -> ParsedContent | None:
        return self._parsed

    @property
    def main_content(self) -> str:
        """Answer text without reasoning or promotion (whole text for user messages)."""
        return self._parsed.main_content if self._parsed is not None else self._message.text

    @property
    def is_revealing(self) -> bool:
        return self._reveal is not None and self._reveal.phase is not RevealPhase.COMPLETE

    def compose(self):
        yield Static(self._header_text(), classes="message-header")
        if self._parsed is None:
            yield Static(Text(self._message.text), classes="message-content")
            return

        if self._parsed.has_reasoning:
            with Collapsible(title="Reasoning", collapsed=True, classes="reasoning"):
                yield Markdown(self._parsed.reasoning)

        revealing = self.is_revealing
        partial = Static(Text(self._reveal.revealed_text if revealing else ""), classes="message-content reveal")
        partial.display = revealing
        yield partial
        answer = Markdown(self._parsed.main_content, classes="message-content answer")
        answer.display = not revealing
        yield answer

        if self._parsed.has_promotion:
            yield Markdown(self._parsed.promotion, classes="promotion")
        if self._message.sources:
            yield Static(format_sources(self._message.sources), classes="sources")

    def on_mount(self) -> None:
        if self._reveal is not None and self.is_revealing:
            self._reveal.set_on_update(self._show_revealed)
            self._reveal.start()

    def on_unmount(self) -> None:
        if self._reveal is not None:
            self._reveal.set_on_update(None)

    def _show_revealed(self, text: str) -> None:
        if self._reveal is None or not self.is_mounted:
            return
        partial = self.query_one(".reveal", Static)
        if self._reveal.phase is RevealPhase.COMPLETE:
            partial.display = False
            self.query_one(".answer", Markdown).display = True
        else:
            partial.update(Text(text))

    def skip_reveal(self) -> None:
        """Show the whole answer now."""
        if self._reveal is not None:
            self._reveal.skip()

    def _header_text(self) -> str:
        label = message_label(self._message)
        return f"{label}  📌" if self._pinned else label

    def set_pinned(self, pinned: bool) -> None:
        self._pinned = pinned
        self.query_one(".message-header", Static).update(self._header_text())

    def on_click(self, event: Click) -> None:
        event.stop()
        self.post_message(self.Selected(self._message.id))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history with a selected message."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, MessageView] = {}
        self._selected_id: str | None = None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def get_view(self, message_id: str) -> MessageView | None:
        return self._views.get(message_id)

    def add_message(
        self,
        message: ChatMessage,
        resources: MessageResources | None = None,
        pinned: bool = False,
        animate: bool = False,
    ) -> MessageView:
        """Mount a message at the end of the history."""
        view = MessageView(message, resources=resources, pinned=pinned, animate=animate)
        self._views[message.id] = view
        self.mount(view)
        if message.is_assistant:
            self.select(message.id)
        self.border_subtitle = f"{len(self._views)} messages"
        self.scroll_end(animate=False)
        return view

    def select(self, message_id: str | None) -> None:
        """Highlight a message; actions apply to the selection."""
        if self._selected_id in self._views:
            self._views[self._selected_id].remove_class("-selected")
        self._selected_id = message_id if message_id in self._views else None
        if self._selected_id is not None:
            self._views[self._selected_id].add_class("-selected")

    def clear_history(self) -> None:
        """Remove every message view."""
        self._views.clear()
        self._selected_id = None
        self.remove_children()
        self.border_subtitle = "Conversation history"

    def skip_reveals(self) -> None:
        for view in self._views.values():
            view.skip_reveal()


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self.allow_empty = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Send message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        last_row = len(lines) - 1
        last_col = len(lines[-1]) if lines else 0
        return text_area.cursor_location == (last_row, last_col)

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value and not self.allow_empty:
            return
        if value and (not self._history or self._history[-1] != value):
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class SettingsPanel(Static):
    """One-line summary of the request settings and pending attachment."""

    def show_settings(self, settings: SessionSettings, attachment_name: str | None = None, busy: bool = False) -> None:
        source = DATA_SOURCES[settings.data_source].label
        parts = [
            f"[bold cyan]Source:[/] {source}",
            f"[bold magenta]Thinking:[/] {'on' if settings.thinking_mode else 'off'}",
            f"[bold yellow]Style:[/] {settings.response_mode.value}",
        ]
        if attachment_name:
            parts.append(f"[bold green]Attached:[/] {attachment_name}")
        if busy:
            parts.append("[bold]Thinking…[/]")
        self.update("  ".join(parts))


class StatsPanel(Static):
    """Session statistics."""

    BORDER_TITLE = "Session"

    def show_stats(self, stats: SessionStats) -> None:
        self.update(
            f"[bold]Messages:[/] {stats.total_messages} "
            f"[dim]({stats.user_messages} you / {stats.assistant_messages} assistant)[/]\n"
            f"[bold]Avg answer:[/] {stats.average_answer_words} words\n"
            f"[bold]Last answer:[/] {stats.last_answer_words} words\n"
            f"[bold]Grounded:[/] {stats.grounded_answers}\n"
            f"[bold]Pinned:[/] {stats.pinned_messages}\n"
            f"[bold]Latency:[/] {stats.latency_label}"
        )


class MessageListPanel(Static):
    """Previews of a list of messages (pins or search results)."""

    def __init__(self, *args, empty_text: str = "Nothing here yet", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._empty_text = empty_text

    def show_messages(self, messages: list[ChatMessage]) -> None:
        if not messages:
            self.update(f"[dim]{self._empty_text}[/]")
            return
        text = Text()
        for message in messages:
            if text:
                text.append("\n")
            role_style = "green" if message.role == "user" else "magenta"
            text.append(f"{message.timestamp:%H:%M} ", style="dim")
            text.append("You: " if message.role == "user" else "AI: ", style=role_style)
            text.append(preview(message.text))
        self.update(text)


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Assistant": "magenta",
        "Session": "green",
        "Parser": "bright_blue",
        "Speech": "yellow",
        "Resources": "bright_cyan",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Assistant, Session, Parser, ...)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "…"
        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] "
        )
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def route(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: ``callback(level, component, message)``."""
        self.log(component, message, LogLevel.from_string(level))

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
