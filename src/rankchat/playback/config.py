"""Playback configuration constants.

Centralizes the timing and size values of the reveal animation and audio.
"""

# Reveal animation
REVEAL_MAX_LENGTH = 3000  # Main content at or above this length is shown at once
REVEAL_TICK_SECONDS = 0.008  # Interval between reveal steps
REVEAL_CHUNK_SIZE = 3  # Characters revealed per step

# Speech synthesis output (16-bit mono PCM)
SPEECH_SAMPLE_RATE = 24000
SPEECH_SAMPLE_WIDTH = 2
SPEECH_CHANNELS = 1
SPEECH_VOICE = "Kore"

# Players tried in order; each entry is the command prefix before the file path
AUDIO_PLAYERS = [
    ["afplay"],
    ["paplay"],
    ["aplay", "-q"],
    ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"],
]
