"""Main Textual TUI application.

Orchestrates the UI components and handles user interaction with the
SEO assistant.
"""

import asyncio
import contextlib
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..assistant import SEOAssistant
from ..export import transcript_filename, write_printable_html, write_transcript
from ..parsing import extract_sections
from ..playback import ProviderSpeechSynthesizer
from ..prompts import PROMPT_PRESETS, QUICK_ACTIONS, get_preset
from ..session import Attachment, ChatMessage, DataSource, ResponseMode
from .config import COPY_NOTICE_TIMEOUT, ERROR_NOTICE_TIMEOUT, EXPORT_HTML_PREFIX, STATUS_NOTICE_TIMEOUT
from .formatting import copy_text
from .screens import ConfirmScreen
from .styles import APP_CSS
from .themes import RABBIT_RANK_DARK
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    LogLevel,
    MessageListPanel,
    MessageView,
    SettingsPanel,
    StatsPanel,
)

HELP_TEXT = """Commands:
  /attach <path>   attach a file to the next message
  /detach          drop the pending attachment
  /search <text>   filter messages (empty clears)
  /quick <action>  rework the selected answer: {actions}
  /prompt <name>   ask a ready-made question: {prompts}
  /help            show this help

Click a message to select it. Copy, export, speak and pin act on the
selected answer (or the latest one)."""

_SOURCES = list(DataSource)
_MODES = list(ResponseMode)


def _next(options: list, current):
    return options[(options.index(current) + 1) % len(options)]


class RankChatApp(App):
    """Textual TUI for the SEO assistant."""

    CSS = APP_CSS
    TITLE = "Rabbit Rank SEO Assistant"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+r", "copy_answer", "Copy"),
        Binding("ctrl+p", "export_html", "Export HTML"),
        Binding("ctrl+s", "speak", "Speak"),
        Binding("ctrl+t", "toggle_pin", "Pin"),
        Binding("ctrl+g", "toggle_thinking", "Thinking"),
        Binding("ctrl+o", "cycle_source", "Source"),
        Binding("ctrl+e", "cycle_mode", "Style"),
        Binding("ctrl+x", "export_transcript", "Transcript"),
        Binding("ctrl+up", "select_previous", "Prev", show=False),
        Binding("ctrl+down", "select_next", "Next", show=False),
        Binding("escape", "skip_reveal", "Skip", show=False),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        assistant: SEOAssistant,
        log_level: str | None = None,
        export_dir: str | Path = ".",
    ) -> None:
        super().__init__()
        self._assistant = assistant
        self._session = assistant.session
        self._log_level = log_level
        self._export_dir = Path(export_dir)
        self._attachment: Attachment | None = None

        resources = self._session.resources
        if not resources.has_synthesizer:
            resources.set_synthesizer(ProviderSpeechSynthesizer(assistant.provider))
        resources.set_notifier(self._notify_from_component)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        yield ChatHistoryWidget(id="chat-history")

        with Vertical(id="side-panel"):
            stats = StatsPanel(id="stats-panel")
            yield stats
            pinned = MessageListPanel(id="pinned-panel", empty_text="Pin answers with Ctrl+T")
            pinned.border_title = "Pinned"
            yield pinned
            search = MessageListPanel(id="search-panel", empty_text="No matches")
            search.border_title = "Search"
            search.display = False
            yield search
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield SettingsPanel(id="settings-bar")
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(RABBIT_RANK_DARK)
        self.theme = "rabbit-rank-dark"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._session.set_debug_callback(log_panel.route)
        self._assistant.set_debug_callback(log_panel.route)
        self._session.load()

        self.sub_title = self._assistant.provider.model
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        for message in self._session.messages:
            self._mount_message(message, animate=False)
        if not self._session.messages:
            self.notify(
                "Ask any SEO question, or try /prompt keywords. Type /help for commands.",
                timeout=STATUS_NOTICE_TIMEOUT,
            )
        chat.scroll_end(animate=False)
        self._refresh_panels()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Release reveal timers and audio players."""
        self._session.resources.release_all()

    def _log(self, level: str, message: str) -> None:
        self.query_one("#debug-panel", DebugPanel).route(level, "TUI", message)

    def _notify_from_component(self, message: str, severity: str) -> None:
        self.notify(message, severity="warning" if severity == "warning" else "error", timeout=ERROR_NOTICE_TIMEOUT)

    def _mount_message(self, message: ChatMessage, animate: bool) -> MessageView:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        return chat.add_message(
            message,
            resources=self._session.resources,
            pinned=self._session.is_pinned(message.id),
            animate=animate,
        )

    def _refresh_panels(self) -> None:
        self.query_one("#stats-panel", StatsPanel).show_stats(self._session.stats())
        self.query_one("#pinned-panel", MessageListPanel).show_messages(self._session.pinned_messages())
        self.query_one("#settings-bar", SettingsPanel).show_settings(
            self._session.settings,
            attachment_name=self._attachment.name if self._attachment else None,
            busy=self._assistant.is_busy,
        )
        self.query_one("#chat-input-bar", ChatInputBar).allow_empty = self._attachment is not None

    def _selected_message(self) -> ChatMessage | None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        if chat.selected_id is not None:
            message = self._session.get(chat.selected_id)
            if message is not None:
                return message
        return self._session.last_answer()

    def _selected_answer(self) -> ChatMessage | None:
        message = self._selected_message()
        if message is None or not message.is_assistant:
            self.notify("Select an assistant answer first", severity="warning", timeout=STATUS_NOTICE_TIMEOUT)
            return None
        return message

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        value = event.value
        if value.startswith("/"):
            self._run_command(value)
            return
        if self._assistant.is_busy:
            self.notify("Still working on the previous question", severity="warning", timeout=STATUS_NOTICE_TIMEOUT)
            return
        attachment, self._attachment = self._attachment, None
        self._generate(value, attachment)

    def _run_command(self, line: str) -> None:
        command, _, argument = line[1:].partition(" ")
        argument = argument.strip()
        if command == "attach":
            self._attach(argument)
        elif command == "detach":
            self._attachment = None
            self.notify("Attachment removed", timeout=STATUS_NOTICE_TIMEOUT)
        elif command == "search":
            self._search(argument)
        elif command == "quick":
            self._quick_action(argument)
        elif command == "prompt":
            self._ask_preset(argument)
        elif command == "help":
            self.notify(
                HELP_TEXT.format(actions=", ".join(QUICK_ACTIONS), prompts=", ".join(PROMPT_PRESETS)),
                timeout=15,
            )
        else:
            self.notify(f"Unknown command: /{command}", severity="warning", timeout=STATUS_NOTICE_TIMEOUT)
        self._refresh_panels()

    def _attach(self, path: str) -> None:
        if not path:
            self.notify("Usage: /attach <path>", severity="warning", timeout=STATUS_NOTICE_TIMEOUT)
            return
        try:
            self._attachment = Attachment.from_path(Path(path).expanduser())
        except OSError as e:
            self.notify(f"Cannot read {path}: {e.strerror or e}", severity="error", timeout=ERROR_NOTICE_TIMEOUT)
            return
        self._log("info", f"Attached {self._attachment.name} ({self._attachment.mime_type})")
        self.notify(f"Attached {self._attachment.name}", timeout=STATUS_NOTICE_TIMEOUT)

    def _search(self, query: str) -> None:
        panel = self.query_one("#search-panel", MessageListPanel)
        if not query:
            panel.display = False
            return
        results = self._session.search(query)
        panel.border_title = f"Search: {query} ({len(results)})"
        panel.show_messages(results)
        panel.display = True

    def _quick_action(self, action: str) -> None:
        if action not in QUICK_ACTIONS:
            self.notify(
                f"Quick actions: {', '.join(QUICK_ACTIONS)}",
                severity="warning",
                timeout=STATUS_NOTICE_TIMEOUT,
            )
            return
        message = self._selected_answer()
        if message is None:
            return
        if self._assistant.is_busy:
            self.notify("Still working on the previous question", severity="warning", timeout=STATUS_NOTICE_TIMEOUT)
            return
        self._generate_quick_action(action, message)

    def _ask_preset(self, name: str) -> None:
        try:
            preset = get_preset(name)
        except ValueError:
            self.notify(
                f"Prompts: {', '.join(PROMPT_PRESETS)}",
                severity="warning",
                timeout=STATUS_NOTICE_TIMEOUT,
            )
            return
        if self._assistant.is_busy:
            self.notify("Still working on the previous question", severity="warning", timeout=STATUS_NOTICE_TIMEOUT)
            return
        attachment, self._attachment = self._attachment, None
        self._generate(preset.text, attachment)

    def _show_user_message(self, message: ChatMessage) -> None:
        self._mount_message(message, animate=False)
        self._refresh_panels()

    def _show_answer(self, answer: ChatMessage | None) -> None:
        if answer is None:
            return
        self._mount_message(answer, animate=True)
        self._refresh_panels()
        if answer.text.startswith("**Error:**"):
            self.notify("Failed to generate response", severity="error", timeout=ERROR_NOTICE_TIMEOUT)

    def _record_failure(self, error: Exception) -> None:
        self._log("error", f"Exception: {error}")
        answer = self._session.add_assistant_message(f"**Error:** {error}", model=self._assistant.provider.model)
        self._show_answer(answer)

    @work(exclusive=True, group="generate")
    async def _generate(self, text: str, attachment: Attachment | None) -> None:
        """Ask the assistant as a background async worker."""
        self._log("info", f"Starting: '{text[:50]}'")
        try:
            answer = await self._assistant.ask(text, attachment, on_user_message=self._show_user_message)
        except asyncio.CancelledError:
            self.notify("Cancelled", severity="warning", timeout=COPY_NOTICE_TIMEOUT)
            raise
        except Exception as e:
            self._record_failure(e)
            return
        self._show_answer(answer)

    @work(exclusive=True, group="generate")
    async def _generate_quick_action(self, action: str, message: ChatMessage) -> None:
        self._log("info", f"Quick action '{action}' on {message.id}")
        try:
            answer = await self._assistant.quick_action(action, message, on_user_message=self._show_user_message)
        except Exception as e:
            self._record_failure(e)
            return
        self._show_answer(answer)

    @work(group="speech")
    async def _toggle_speech(self, message: ChatMessage) -> None:
        main_content = extract_sections(message.text).main_content
        controller = self._session.resources.speech_for(message.id, main_content)
        phase = await controller.toggle()
        self._log("debug", f"Speech for {message.id}: {phase.value}")

    def on_message_view_selected(self, event: MessageView.Selected) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).select(event.message_id)

    def _step_selection(self, step: int) -> None:
        messages = self._session.messages
        if not messages:
            return
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        ids = [m.id for m in messages]
        current = ids.index(chat.selected_id) if chat.selected_id in ids else len(ids)
        target = ids[max(0, min(len(ids) - 1, current + step))]
        chat.select(target)
        view = chat.get_view(target)
        if view is not None:
            chat.scroll_to_widget(view, animate=False)

    def action_select_previous(self) -> None:
        self._step_selection(-1)

    def action_select_next(self) -> None:
        self._step_selection(1)

    def action_new_chat(self) -> None:
        """Start a new chat after confirmation."""

        def _confirmed(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self.workers.cancel_group(self, "generate")
            self.workers.cancel_group(self, "speech")
            self._session.new_chat()
            self.query_one("#chat-history", ChatHistoryWidget).clear_history()
            self._search("")
            self._refresh_panels()
            self.notify("Started a new SEO chat session", timeout=STATUS_NOTICE_TIMEOUT)

        if not self._session.messages:
            return
        self.push_screen(ConfirmScreen("Clear this conversation and start a new chat?"), _confirmed)

    def action_copy_answer(self) -> None:
        """Copy the selected answer's main content (or a user message's text)."""
        message = self._selected_message()
        if message is None:
            self.notify("Nothing to copy", severity="warning", timeout=COPY_NOTICE_TIMEOUT)
            return
        text = extract_sections(message.text).main_content if message.is_assistant else message.text
        if copy_text(text):
            self.notify("Copied to clipboard", timeout=COPY_NOTICE_TIMEOUT)
        else:
            self.copy_to_clipboard(text)
            self.notify("Copied (terminal)", timeout=COPY_NOTICE_TIMEOUT)

    def action_export_html(self) -> None:
        """Write the selected answer as a printable HTML report."""
        message = self._selected_answer()
        if message is None:
            return
        main_content = extract_sections(message.text).main_content
        path = self._export_dir / f"{EXPORT_HTML_PREFIX}-{datetime.now():%Y%m%d-%H%M%S}.html"
        try:
            write_printable_html(main_content, path)
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error", timeout=ERROR_NOTICE_TIMEOUT)
            return
        self._log("info", f"Exported answer to {path}")
        self.notify(f"Saved {path}", timeout=STATUS_NOTICE_TIMEOUT)

    def action_export_transcript(self) -> None:
        """Write the whole session as a markdown transcript."""
        if not self._session.messages:
            self.notify("No messages to export yet", timeout=STATUS_NOTICE_TIMEOUT)
            return
        path = self._export_dir / transcript_filename()
        try:
            write_transcript(self._session.messages, path)
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error", timeout=ERROR_NOTICE_TIMEOUT)
            return
        self.notify(f"Chat exported to {path}", timeout=STATUS_NOTICE_TIMEOUT)

    def action_speak(self) -> None:
        """Read the selected answer aloud, or pause/resume it."""
        message = self._selected_answer()
        if message is not None:
            self._toggle_speech(message)

    def action_toggle_pin(self) -> None:
        message = self._selected_message()
        if message is None:
            return
        pinned = self._session.toggle_pin(message.id)
        view = self.query_one("#chat-history", ChatHistoryWidget).get_view(message.id)
        if view is not None:
            view.set_pinned(pinned)
        self._refresh_panels()
        self.notify("Pinned" if pinned else "Unpinned", timeout=COPY_NOTICE_TIMEOUT)

    def _update_settings(self, **changes) -> None:
        try:
            self._session.update_settings(**changes)
        except ValidationError as e:
            self.notify(f"Invalid setting: {e.error_count()} error(s)", severity="error", timeout=ERROR_NOTICE_TIMEOUT)
        self._refresh_panels()

    def action_toggle_thinking(self) -> None:
        self._update_settings(thinking_mode=not self._session.settings.thinking_mode)

    def action_cycle_source(self) -> None:
        self._update_settings(data_source=_next(_SOURCES, self._session.settings.data_source))

    def action_cycle_mode(self) -> None:
        self._update_settings(response_mode=_next(_MODES, self._session.settings.response_mode))

    def action_skip_reveal(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).skip_reveals()

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=COPY_NOTICE_TIMEOUT)


async def run_tui(
    assistant: SEOAssistant,
    log_level: str | None = None,
    export_dir: str | Path = ".",
) -> None:
    """Run the Textual TUI.

    Args:
        assistant: Assistant wired to a session and provider
        log_level: Log level for panel (debug/info/warning/error), None to hide
        export_dir: Directory exported reports and transcripts are written to
    """
    app = RankChatApp(assistant=assistant, log_level=log_level, export_dir=export_dir)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await assistant.provider.close()
