"""WAV audio handles played through a system player.

Hides the container format of synthesized speech and how it reaches the
speakers: PCM is wrapped as WAV, written to a temporary file, and played by
the first available command line player. Pause and resume use job-control
signals on the player process.
"""

import io
import os
import shutil
import signal
import subprocess
import tempfile
import wave
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import PlaybackError, RankChatError, SpeechSynthesisError
from .config import AUDIO_PLAYERS, SPEECH_CHANNELS, SPEECH_SAMPLE_RATE, SPEECH_SAMPLE_WIDTH
from .speech import AudioHandle, SpeechSynthesizer

if TYPE_CHECKING:
    from ..llm.base import AssistantProvider


def pcm_to_wav(
    pcm: bytes,
    sample_rate: int = SPEECH_SAMPLE_RATE,
    sample_width: int = SPEECH_SAMPLE_WIDTH,
    channels: int = SPEECH_CHANNELS,
) -> bytes:
    """Wrap raw little-endian PCM samples in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()


def find_audio_player() -> list[str] | None:
    """Return the command prefix of the first installed player, if any."""
    for command in AUDIO_PLAYERS:
        if shutil.which(command[0]):
            return list(command)
    return None


class WavFileAudio(AudioHandle):
    """WAV data in a temporary file, played by a subprocess."""

    def __init__(self, wav_bytes: bytes, player: list[str] | None = None):
        self._player = player
        self._process: subprocess.Popen | None = None
        self._paused = False
        fd, name = tempfile.mkstemp(prefix="rankchat-", suffix=".wav")
        with os.fdopen(fd, "wb") as handle:
            handle.write(wav_bytes)
        self._path: Path | None = Path(name)

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def finished(self) -> bool:
        return self._process is not None and self._process.poll() is not None

    def play(self) -> None:
        if self._path is None:
            raise PlaybackError("Audio has been released")

        if self._process is not None and self._process.poll() is None:
            if self._paused:
                self._signal(getattr(signal, "SIGCONT", None))
                self._paused = False
            return

        player = self._player or find_audio_player()
        if player is None:
            raise PlaybackError("No audio player found (tried afplay, paplay, aplay, ffplay)")
        try:
            self._process = subprocess.Popen(
                [*player, str(self._path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise PlaybackError(f"Cannot start {player[0]}: {e}") from e
        self._paused = False

    def pause(self) -> None:
        if self._process is None or self._process.poll() is not None:
            return
        self._signal(getattr(signal, "SIGSTOP", None))
        self._paused = True

    def _signal(self, signum: int | None) -> None:
        if signum is None:
            raise PlaybackError("Pausing audio is not supported on this platform")
        try:
            self._process.send_signal(signum)
        except ProcessLookupError as e:
            raise PlaybackError("Audio player exited") from e

    def release(self) -> None:
        if self._process is not None and self._process.poll() is None:
            if self._paused:
                self._process.send_signal(signal.SIGCONT)
            self._process.terminate()
            try:
                self._process.wait(timeout=2)
            except subprocess.TimeoutExpired:
                self._process.kill()
        self._process = None
        if self._path is not None:
            self._path.unlink(missing_ok=True)
            self._path = None


class ProviderSpeechSynthesizer(SpeechSynthesizer):
    """Synthesizes speech through an assistant provider's TTS model."""

    def __init__(self, provider: "AssistantProvider", player: list[str] | None = None):
        self._provider = provider
        self._player = player

    async def synthesize(self, text: str) -> AudioHandle:
        if not text.strip():
            raise SpeechSynthesisError("Nothing to read aloud")
        try:
            pcm = await self._provider.synthesize_speech(text)
        except SpeechSynthesisError:
            raise
        except (RankChatError, OSError) as e:
            raise SpeechSynthesisError(str(e)) from e
        try:
            return WavFileAudio(pcm_to_wav(pcm), player=self._player)
        except OSError as e:
            raise SpeechSynthesisError(f"Cannot save audio: {e.strerror or e}") from e
