"""Playback module for rankchat.

Scoped, cancelable activity tied to a message's lifetime.

Module structure (each module hides a design decision):
- config.py: Timing and audio constants
- reveal.py: Incremental reveal state machine and its timer
- speech.py: Synthesize-once play/pause controller and its abstractions
- audio.py: WAV container and system audio player
- resources.py: Per-message ownership and release
"""

from .audio import ProviderSpeechSynthesizer, WavFileAudio, pcm_to_wav
from .resources import MessageResources
from .reveal import RevealController, RevealPhase, RevealRegistry, RevealState
from .speech import (
    AudioHandle,
    PlaybackPhase,
    PlaybackState,
    SpeechController,
    SpeechSynthesizer,
)

__all__ = [
    "AudioHandle",
    "MessageResources",
    "PlaybackPhase",
    "PlaybackState",
    "ProviderSpeechSynthesizer",
    "RevealController",
    "RevealPhase",
    "RevealRegistry",
    "RevealState",
    "SpeechController",
    "SpeechSynthesizer",
    "WavFileAudio",
    "pcm_to_wav",
]
