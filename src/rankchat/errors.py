"""Exception hierarchy for rankchat.

Parsing and export never raise; these cover the collaborators that can fail:
the assistant API, speech synthesis, audio playback and storage.
"""


class RankChatError(Exception):
    """Base class for all rankchat errors."""


class GenerationError(RankChatError):
    """The assistant API failed to produce a response."""


class SpeechSynthesisError(RankChatError):
    """Text-to-speech synthesis failed."""


class PlaybackError(RankChatError):
    """An audio resource could not be played, paused or resumed."""


class StorageError(RankChatError):
    """The key-value store could not be read or written."""
