"""The session log and its persistence.

Hides how messages, pins and settings are stored and restored. The message
list is replaced, never mutated in place, so readers always see a complete
snapshot.
"""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from .. import prompts
from ..errors import StorageError
from ..playback import MessageResources
from ..storage import KeyValueStore
from .analytics import SessionStats
from .models import Attachment, ChatMessage, MessageMetadata, SessionSettings, Source

MESSAGES_KEY = "seo-assistant-messages"
PINS_KEY = "seo-assistant-pins"
SETTINGS_KEY = "seo-assistant-settings"

DebugCallback = Callable[[str, str, str], None]


class ChatSession:
    """Ordered message log with pins and settings.

    Owns the per-message resources (reveal timers, audio) and releases
    them before messages leave the log.
    """

    def __init__(
        self,
        store: KeyValueStore,
        resources: MessageResources | None = None,
    ) -> None:
        self._store = store
        self._resources = resources or MessageResources()
        self._messages: tuple[ChatMessage, ...] = ()
        self._pinned: tuple[str, ...] = ()
        self._settings = SessionSettings()
        self._debug_callback: DebugCallback | None = None

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._messages

    @property
    def pinned_ids(self) -> tuple[str, ...]:
        return self._pinned

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def resources(self) -> MessageResources:
        return self._resources

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback
        self._resources.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Session", message)

    def _read(self, key: str) -> Any | None:
        try:
            return self._store.get(key)
        except StorageError as e:
            self._debug("error", f"Failed to load {key}: {e}")
            return None

    def load(self) -> None:
        """Restore messages, pins and settings from the store.

        Unreadable or invalid entries are reported and treated as empty.
        """
        raw_messages = self._read(MESSAGES_KEY)
        messages: list[ChatMessage] = []
        if isinstance(raw_messages, list):
            for item in raw_messages:
                try:
                    messages.append(ChatMessage.model_validate(item))
                except ValidationError as e:
                    self._debug("warning", f"Skipping invalid stored message: {e.error_count()} error(s)")
        elif raw_messages is not None:
            self._debug("warning", f"Ignoring {MESSAGES_KEY}: expected a list")
        self._messages = tuple(messages)

        raw_pins = self._read(PINS_KEY)
        if isinstance(raw_pins, list):
            self._pinned = tuple(str(pid) for pid in raw_pins)
        else:
            self._pinned = ()

        raw_settings = self._read(SETTINGS_KEY)
        if raw_settings is not None:
            try:
                self._settings = SessionSettings.model_validate(raw_settings)
            except ValidationError:
                self._debug("warning", f"Ignoring invalid {SETTINGS_KEY}")
                self._settings = SessionSettings()

        self._debug("info", f"Loaded {len(self._messages)} message(s), {len(self._pinned)} pin(s)")

    def _save_messages(self) -> None:
        self._store.set(MESSAGES_KEY, [m.model_dump(mode="json") for m in self._messages])

    def _save_pins(self) -> None:
        self._store.set(PINS_KEY, list(self._pinned))

    def append(self, message: ChatMessage) -> ChatMessage:
        """Add a message to the end of the log and persist the log."""
        self._messages = (*self._messages, message)
        self._save_messages()
        return message

    def add_user_message(self, text: str, attachment: Attachment | None = None, model: str | None = None) -> ChatMessage:
        """Append the user's side of an exchange, stamped with the current settings."""
        display_text = text or (f"[Attached File: {attachment.name}]" if attachment else "")
        return self.append(ChatMessage(role="user", text=display_text, metadata=self.current_metadata(model)))

    def add_assistant_message(
        self,
        text: str,
        sources: list[Source] | None = None,
        model: str | None = None,
    ) -> ChatMessage:
        """Append an answer, stamped with the current settings."""
        return self.append(ChatMessage(
            role="assistant",
            text=text,
            sources=sources or [],
            metadata=self.current_metadata(model),
        ))

    def current_metadata(self, model: str | None = None) -> MessageMetadata:
        return MessageMetadata(
            data_source=self._settings.data_source,
            thinking_mode=self._settings.thinking_mode,
            response_mode=self._settings.response_mode,
            model=model,
        )

    def get(self, message_id: str) -> ChatMessage | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def resolve(self, ref: str) -> ChatMessage | None:
        """Find a message by id, by 1-based position, or ``last`` (last answer)."""
        ref = ref.strip()
        if ref == "last":
            return self.last_answer()
        if ref.isdigit():
            index = int(ref) - 1
            return self._messages[index] if 0 <= index < len(self._messages) else None
        return self.get(ref)

    def last_answer(self) -> ChatMessage | None:
        for message in reversed(self._messages):
            if message.role == "assistant":
                return message
        return None

    def new_chat(self) -> None:
        """Start over: release all message resources, then drop messages and pins."""
        self._resources.release_all()
        self._messages = ()
        self._pinned = ()
        self._store.delete(MESSAGES_KEY)
        self._store.delete(PINS_KEY)
        self._debug("info", "Started a new chat session")

    def toggle_pin(self, message_id: str) -> bool:
        """Pin or unpin a message. New pins go first.

        Returns:
            True if the message is now pinned
        """
        if message_id in self._pinned:
            self._pinned = tuple(pid for pid in self._pinned if pid != message_id)
            pinned = False
        else:
            self._pinned = (message_id, *self._pinned)
            pinned = True
        self._save_pins()
        return pinned

    def is_pinned(self, message_id: str) -> bool:
        return message_id in self._pinned

    def pinned_messages(self) -> list[ChatMessage]:
        """Pinned messages in log order."""
        return [m for m in self._messages if m.id in self._pinned]

    def search(self, query: str) -> list[ChatMessage]:
        """Messages whose text contains query, ignoring case. Empty query matches all."""
        needle = query.strip().lower()
        if not needle:
            return list(self._messages)
        return [m for m in self._messages if needle in m.text.lower()]

    def update_settings(self, **changes: Any) -> SessionSettings:
        """Change settings and persist them.

        Raises:
            pydantic.ValidationError: If a value is invalid
        """
        self._settings = SessionSettings.model_validate({**self._settings.model_dump(), **changes})
        self._store.set(SETTINGS_KEY, self._settings.model_dump(mode="json"))
        return self._settings

    def build_prompt(self, text: str) -> str:
        """Prompt for a user message in the current response mode."""
        return prompts.build_prompt(text, self._settings.response_mode)

    def quick_action_prompt(self, action: str, content: str) -> str:
        return prompts.build_quick_action_prompt(action, content)

    def stats(self) -> SessionStats:
        return SessionStats.compute(self._messages, self._pinned)
