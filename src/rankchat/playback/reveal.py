"""Incremental reveal ("typing") animation for answers.

Hides the timing of the reveal and the rule for when it plays at all.
Each controller owns at most one timer task; changing the text or
releasing the controller cancels it.
"""

import asyncio
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .config import REVEAL_CHUNK_SIZE, REVEAL_MAX_LENGTH, REVEAL_TICK_SECONDS


class RevealPhase(str, Enum):
    """Lifecycle of a reveal."""

    IDLE = "idle"
    REVEALING = "revealing"
    COMPLETE = "complete"


class RevealState(BaseModel):
    """Snapshot of how much of a message is visible."""

    model_config = ConfigDict(frozen=True)

    revealed_length: int
    is_complete: bool


class RevealRegistry:
    """Remembers which messages have finished revealing.

    Lives with the session rather than with a widget, so a message that
    completed once never animates again even if its view is rebuilt.
    """

    def __init__(self) -> None:
        self._completed: set[str] = set()

    def is_complete(self, message_id: str) -> bool:
        return message_id in self._completed

    def mark_complete(self, message_id: str) -> None:
        self._completed.add(message_id)

    def forget(self, message_id: str) -> None:
        self._completed.discard(message_id)

    def clear(self) -> None:
        self._completed.clear()


class RevealController:
    """Reveals a message's main content a few characters per tick.

    The animation runs only when enabled (assistant messages), when the
    text is shorter than ``max_length`` and when the message has not
    completed before. Otherwise the full text is shown immediately.

    ``tick()`` is a synchronous step usable without an event loop;
    ``start()`` drives it from an asyncio task.
    """

    def __init__(
        self,
        message_id: str,
        text: str,
        *,
        enabled: bool = True,
        registry: RevealRegistry | None = None,
        interval: float = REVEAL_TICK_SECONDS,
        chunk_size: int = REVEAL_CHUNK_SIZE,
        max_length: int = REVEAL_MAX_LENGTH,
        on_update: Callable[[str], None] | None = None,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._message_id = message_id
        self._enabled = enabled
        self._registry = registry or RevealRegistry()
        self._interval = interval
        self._chunk_size = chunk_size
        self._max_length = max_length
        self._on_update = on_update
        self._task: asyncio.Task[None] | None = None
        self._text = text
        self._revealed = 0
        self._phase = RevealPhase.IDLE
        self._reset(text)

    @property
    def message_id(self) -> str:
        return self._message_id

    @property
    def text(self) -> str:
        return self._text

    @property
    def phase(self) -> RevealPhase:
        return self._phase

    @property
    def state(self) -> RevealState:
        return RevealState(
            revealed_length=self._revealed,
            is_complete=self._phase is RevealPhase.COMPLETE,
        )

    @property
    def revealed_text(self) -> str:
        return self._text[:self._revealed]

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_on_update(self, callback: Callable[[str], None] | None) -> None:
        """Set the callback receiving the visible text after every change."""
        self._on_update = callback

    def _should_animate(self, text: str) -> bool:
        return (
            self._enabled
            and len(text) < self._max_length
            and not self._registry.is_complete(self._message_id)
        )

    def _reset(self, text: str) -> None:
        self._text = text
        self._revealed = 0
        if self._should_animate(text):
            self._phase = RevealPhase.IDLE
        else:
            self._complete()

    def _notify(self) -> None:
        if self._on_update:
            self._on_update(self.revealed_text)

    def _complete(self) -> None:
        self._revealed = len(self._text)
        self._phase = RevealPhase.COMPLETE
        self._registry.mark_complete(self._message_id)
        self._notify()

    def set_text(self, text: str) -> None:
        """Replace the text being revealed.

        Cancels the running timer first. If a timer was running and the new
        text still animates, a fresh timer is started for it.
        """
        if text == self._text:
            return
        was_running = self.is_running
        self._cancel_timer()
        self._reset(text)
        if was_running and self._phase is RevealPhase.IDLE:
            self.start()

    def begin(self) -> None:
        """Move from IDLE to REVEALING."""
        if self._phase is not RevealPhase.IDLE:
            return
        if not self._text:
            self._complete()
            return
        self._phase = RevealPhase.REVEALING
        self._notify()

    def tick(self) -> bool:
        """Reveal the next chunk.

        Returns:
            True while more text remains to be revealed
        """
        if self._phase is RevealPhase.COMPLETE:
            return False
        if self._phase is RevealPhase.IDLE:
            self.begin()
            if self._phase is RevealPhase.COMPLETE:
                return False

        self._revealed = min(self._revealed + self._chunk_size, len(self._text))
        if self._revealed >= len(self._text):
            self._complete()
            return False
        self._notify()
        return True

    def start(self) -> "asyncio.Task[None] | None":
        """Start the timer task on the running event loop.

        Returns:
            The timer task, or None when there is nothing to animate
        """
        self.begin()
        if self._phase is not RevealPhase.REVEALING:
            return None
        self._cancel_timer()
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        while self._phase is RevealPhase.REVEALING:
            await asyncio.sleep(self._interval)
            self.tick()

    async def run_to_completion(self) -> None:
        """Start the animation and wait until the whole text is visible."""
        task = self.start()
        if task is not None:
            await task

    def skip(self) -> None:
        """Show the whole text now and stop the timer."""
        self._cancel_timer()
        if self._phase is not RevealPhase.COMPLETE:
            self._complete()

    def _cancel_timer(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def release(self) -> None:
        """Stop the timer. Must be called when the message goes away."""
        self._cancel_timer()
