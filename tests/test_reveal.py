"""Unit tests for the reveal animation."""
import asyncio
import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rankchat.playback import RevealController, RevealPhase, RevealRegistry


class TestRevealController:
    """Tests for the synchronous reveal state machine."""

    def test_starts_idle_then_reveals(self):
        controller = RevealController("m1", "abcdefgh")
        assert controller.phase is RevealPhase.IDLE

        controller.begin()
        assert controller.phase is RevealPhase.REVEALING
        assert controller.revealed_text == ""

        assert controller.tick() is True
        assert controller.revealed_text == "abc"

    @given(st.text(min_size=1, max_size=500))
    def test_tick_count_is_ceil_of_length_over_three(self, text: str):
        """Property test: a reveal takes ceil(L/3) ticks and never overshoots."""
        controller = RevealController("m1", text)
        lengths = []
        ticks = 0

        while controller.phase is not RevealPhase.COMPLETE:
            controller.tick()
            ticks += 1
            lengths.append(controller.state.revealed_length)

        assert ticks == math.ceil(len(text) / 3)
        assert lengths == sorted(lengths)
        assert max(lengths) == len(text)
        assert controller.revealed_text == text

    def test_complete_is_terminal(self):
        controller = RevealController("m1", "abc")
        controller.tick()

        assert controller.phase is RevealPhase.COMPLETE
        assert controller.tick() is False
        controller.begin()
        assert controller.phase is RevealPhase.COMPLETE

    def test_long_text_is_shown_at_once(self):
        text = "x" * 3000
        controller = RevealController("m1", text)

        assert controller.phase is RevealPhase.COMPLETE
        assert controller.revealed_text == text

    def test_text_just_below_limit_animates(self):
        assert RevealController("m1", "x" * 2999).phase is RevealPhase.IDLE

    def test_disabled_is_shown_at_once(self):
        controller = RevealController("m1", "user text", enabled=False)

        assert controller.state.is_complete
        assert controller.revealed_text == "user text"

    def test_empty_text_completes_on_begin(self):
        controller = RevealController("m1", "")
        controller.begin()
        assert controller.phase is RevealPhase.COMPLETE

    def test_completion_is_sticky_across_controllers(self):
        """Test that a rebuilt controller for a finished message does not animate."""
        registry = RevealRegistry()
        first = RevealController("m1", "some answer", registry=registry)
        first.skip()

        second = RevealController("m1", "some answer", registry=registry)

        assert second.phase is RevealPhase.COMPLETE
        assert second.start() is None

    def test_other_messages_are_independent(self):
        registry = RevealRegistry()
        RevealController("m1", "answer", registry=registry).skip()

        assert RevealController("m2", "answer", registry=registry).phase is RevealPhase.IDLE

    def test_on_update_receives_visible_text(self):
        updates = []
        controller = RevealController("m1", "abcdef", on_update=updates.append)

        controller.tick()
        controller.tick()

        assert updates == ["", "abc", "abcdef"]

    def test_set_text_restarts_reveal(self):
        controller = RevealController("m1", "first answer")
        controller.tick()

        controller.set_text("second answer")

        assert controller.phase is RevealPhase.IDLE
        assert controller.state.revealed_length == 0
        assert controller.text == "second answer"

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            RevealController("m1", "abc", chunk_size=0)


class TestRevealTimer:
    """Tests for the asyncio timer driving the reveal."""

    @pytest.mark.asyncio
    async def test_run_to_completion(self):
        controller = RevealController("m1", "a short answer", interval=0)

        await controller.run_to_completion()

        assert controller.phase is RevealPhase.COMPLETE
        assert controller.revealed_text == "a short answer"
        assert not controller.is_running

    @pytest.mark.asyncio
    async def test_skip_cancels_timer(self):
        controller = RevealController("m1", "a long enough answer", interval=10)
        task = controller.start()
        assert controller.is_running

        controller.skip()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert controller.phase is RevealPhase.COMPLETE
        assert controller.revealed_text == "a long enough answer"

    @pytest.mark.asyncio
    async def test_release_cancels_timer(self):
        controller = RevealController("m1", "a long enough answer", interval=10)
        task = controller.start()

        controller.release()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert not controller.is_running

    @pytest.mark.asyncio
    async def test_set_text_replaces_running_timer(self):
        """Test that a text change never leaves two timers running."""
        controller = RevealController("m1", "first answer", interval=10)
        old_task = controller.start()

        controller.set_text("replacement answer")

        with pytest.raises(asyncio.CancelledError):
            await old_task
        assert controller.is_running
        assert controller.phase is RevealPhase.REVEALING
        controller.release()
