"""Ownership of per-message background resources.

Every message may own a reveal timer and an audio handle. This registry
creates them on demand and releases them deterministically when a message
is removed or the session is reset.
"""

from collections.abc import Callable

from .reveal import RevealController, RevealRegistry
from .speech import Notifier, SpeechController, SpeechSynthesizer

DebugCallback = Callable[[str, str, str], None]


class MessageResources:
    """Reveal and speech controllers keyed by message id."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizer | None = None,
        notifier: Notifier | None = None,
        reveal_registry: RevealRegistry | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._notifier = notifier
        self._reveal_registry = reveal_registry or RevealRegistry()
        self._reveals: dict[str, RevealController] = {}
        self._speech: dict[str, SpeechController] = {}
        self._debug_callback: DebugCallback | None = None

    @property
    def reveal_registry(self) -> RevealRegistry:
        return self._reveal_registry

    @property
    def has_synthesizer(self) -> bool:
        return self._synthesizer is not None

    def set_synthesizer(self, synthesizer: SpeechSynthesizer | None) -> None:
        self._synthesizer = synthesizer

    def set_notifier(self, notifier: Notifier | None) -> None:
        self._notifier = notifier

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Resources", message)

    def reveal_for(
        self,
        message_id: str,
        text: str,
        enabled: bool = True,
        on_update: Callable[[str], None] | None = None,
    ) -> RevealController:
        """Get the message's reveal controller, creating it on first use.

        An existing controller is pointed at ``text`` (cancelling its timer
        if the text changed) and given the new ``on_update`` callback.
        """
        controller = self._reveals.get(message_id)
        if controller is None:
            controller = RevealController(
                message_id,
                text,
                enabled=enabled,
                registry=self._reveal_registry,
                on_update=on_update,
            )
            self._reveals[message_id] = controller
        else:
            controller.set_on_update(on_update)
            controller.set_text(text)
        return controller

    def speech_for(self, message_id: str, text: str) -> SpeechController:
        """Get the message's speech controller, creating it on first use.

        Raises:
            RuntimeError: If no synthesizer is configured
        """
        controller = self._speech.get(message_id)
        if controller is not None:
            return controller
        if self._synthesizer is None:
            raise RuntimeError("Speech is not available: no synthesizer configured")
        controller = SpeechController(self._synthesizer, text, notifier=self._notifier)
        controller.set_debug_callback(self._debug_callback)
        self._speech[message_id] = controller
        return controller

    def release(self, message_id: str) -> None:
        """Cancel the message's reveal timer and free its audio."""
        reveal = self._reveals.pop(message_id, None)
        if reveal is not None:
            reveal.release()
        speech = self._speech.pop(message_id, None)
        if speech is not None:
            speech.release()
        self._reveal_registry.forget(message_id)
        if reveal is not None or speech is not None:
            self._debug("debug", f"Released resources of {message_id}")

    def release_all(self) -> None:
        """Release every message's resources."""
        for message_id in list(self._reveals.keys() | self._speech.keys()):
            self.release(message_id)
        self._reveal_registry.clear()
