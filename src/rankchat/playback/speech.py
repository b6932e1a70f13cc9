"""Speech playback for a single message.

Hides the synthesize-once, toggle play/pause lifecycle of a message's
audio. The synthesizer and the audio handle are abstract so the controller
can be driven without a sound device.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..errors import PlaybackError

Notifier = Callable[[str, str], None]  # (message, severity)
DebugCallback = Callable[[str, str, str], None]


class AudioHandle(ABC):
    """A playable audio resource owned by one message."""

    @abstractmethod
    def play(self) -> None:
        """Start or resume playback."""

    @abstractmethod
    def pause(self) -> None:
        """Pause playback, keeping the position."""

    @abstractmethod
    def release(self) -> None:
        """Stop playback and free the underlying resource."""

    @property
    def finished(self) -> bool:
        """True once playback has reached the end."""
        return False


class SpeechSynthesizer(ABC):
    """Turns text into a playable audio handle."""

    @abstractmethod
    async def synthesize(self, text: str) -> AudioHandle:
        """Synthesize speech for text.

        Raises:
            SpeechSynthesisError: If synthesis fails
        """


class PlaybackPhase(str, Enum):
    """Lifecycle of a message's audio."""

    IDLE = "idle"
    SYNTHESIZING = "synthesizing"
    READY = "ready"
    PLAYING = "playing"


class PlaybackState(BaseModel):
    """Snapshot of a message's audio for display."""

    model_config = ConfigDict(frozen=True)

    has_handle: bool
    is_synthesizing: bool
    is_playing: bool


class SpeechController:
    """Per-message speech playback.

    ``toggle()`` synthesizes on first use, then alternates pause and resume
    on the cached handle. Audio is synthesized at most once per message.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        text: str,
        notifier: Notifier | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._text = text
        self._notifier = notifier
        self._handle: AudioHandle | None = None
        self._phase = PlaybackPhase.IDLE
        self._released = False
        self._synthesis_count = 0
        self._debug_callback: DebugCallback | None = None

    @property
    def phase(self) -> PlaybackPhase:
        return self._phase

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            has_handle=self._handle is not None,
            is_synthesizing=self._phase is PlaybackPhase.SYNTHESIZING,
            is_playing=self._phase is PlaybackPhase.PLAYING,
        )

    @property
    def synthesis_count(self) -> int:
        """How many times synthesis was requested (0 or 1)."""
        return self._synthesis_count

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Speech", message)

    def _notify(self, message: str, severity: str = "error") -> None:
        self._debug(severity, message)
        if self._notifier:
            self._notifier(message, severity)

    async def toggle(self) -> PlaybackPhase:
        """Play, pause or resume depending on the current phase.

        Returns:
            The phase after the toggle
        """
        if self._released or self._phase is PlaybackPhase.SYNTHESIZING:
            return self._phase

        if self._phase is PlaybackPhase.PLAYING:
            if self._handle is not None and self._handle.finished:
                self._play()
            else:
                self._pause()
            return self._phase

        if self._phase is PlaybackPhase.READY:
            self._play()
            return self._phase

        await self._synthesize_and_play()
        return self._phase

    async def _synthesize_and_play(self) -> None:
        self._phase = PlaybackPhase.SYNTHESIZING
        self._synthesis_count += 1
        self._debug("info", f"Synthesizing {len(self._text)} characters")
        try:
            handle = await self._synthesizer.synthesize(self._text)
        except Exception as e:
            self._phase = PlaybackPhase.IDLE
            if not self._released:
                self._notify(f"Speech generation failed: {e}")
            return

        if self._released:
            # Message went away while synthesis was in flight
            handle.release()
            self._phase = PlaybackPhase.IDLE
            return

        self._handle = handle
        self._phase = PlaybackPhase.READY
        self._play()

    def _play(self) -> None:
        try:
            self._handle.play()
        except PlaybackError as e:
            self._phase = PlaybackPhase.READY
            self._notify(f"Audio playback failed: {e}")
            return
        self._phase = PlaybackPhase.PLAYING

    def _pause(self) -> None:
        try:
            self._handle.pause()
        except PlaybackError as e:
            self._notify(f"Audio pause failed: {e}", severity="warning")
        self._phase = PlaybackPhase.READY

    def release(self) -> None:
        """Stop playback and free the audio. Safe to call more than once."""
        self._released = True
        if self._handle is not None:
            try:
                self._handle.pause()
            except PlaybackError as e:
                self._debug("warning", f"Pause before release failed: {e}")
            self._handle.release()
            self._handle = None
        if self._phase is not PlaybackPhase.SYNTHESIZING:
            self._phase = PlaybackPhase.IDLE
