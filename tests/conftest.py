"""Pytest configuration and shared fixtures."""
import pytest

from rankchat.errors import GenerationError, PlaybackError, SpeechSynthesisError
from rankchat.llm import AssistantProvider, GenerationRequest, GenerationResult
from rankchat.playback import AudioHandle, MessageResources, SpeechSynthesizer
from rankchat.session import ChatSession, Source
from rankchat.storage import InMemoryStore


class FakeAudioHandle(AudioHandle):
    """Audio handle that records calls instead of making sound."""

    def __init__(self, fail_play: bool = False):
        self.calls: list[str] = []
        self.released = False
        self.is_finished = False
        self._fail_play = fail_play

    def play(self) -> None:
        self.calls.append("play")
        if self._fail_play:
            raise PlaybackError("device busy")

    def pause(self) -> None:
        self.calls.append("pause")

    def release(self) -> None:
        self.calls.append("release")
        self.released = True

    @property
    def finished(self) -> bool:
        return self.is_finished


class FakeSynthesizer(SpeechSynthesizer):
    """Synthesizer returning fake handles, optionally failing or blocking."""

    def __init__(self, fail: bool = False, fail_play: bool = False, gate=None, error: Exception | None = None):
        self.requests: list[str] = []
        self.handles: list[FakeAudioHandle] = []
        self._fail = fail
        self._fail_play = fail_play
        self._gate = gate
        self._error = error

    async def synthesize(self, text: str) -> AudioHandle:
        self.requests.append(text)
        if self._gate is not None:
            await self._gate.wait()
        if self._error is not None:
            raise self._error
        if self._fail:
            raise SpeechSynthesisError("quota exceeded")
        handle = FakeAudioHandle(fail_play=self._fail_play)
        self.handles.append(handle)
        return handle


class FakeProvider(AssistantProvider):
    """Assistant provider answering from a canned reply."""

    def __init__(self, text: str = "Focus on long-tail keywords.", sources=None, error: str | None = None):
        self.text = text
        self.sources = sources or []
        self.error = error
        self.requests: list[GenerationRequest] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        if self.error:
            raise GenerationError(self.error)
        return GenerationResult(text=self.text, sources=self.sources, model=self.model)

    async def synthesize_speech(self, text: str) -> bytes:
        return b"\x00\x01" * 10

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def memory_store():
    """Return an empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def fake_synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def resources(fake_synthesizer):
    return MessageResources(synthesizer=fake_synthesizer)


@pytest.fixture
def session(memory_store, resources):
    """Return a loaded chat session backed by memory."""
    chat_session = ChatSession(memory_store, resources=resources)
    chat_session.load()
    return chat_session


@pytest.fixture
def fake_provider():
    return FakeProvider(sources=[Source(title="Ahrefs Blog", uri="https://ahrefs.com/blog/long-tail")])


@pytest.fixture
def promo_response():
    """Return a thinking-mode response with reasoning, answer and promotion."""
    return (
        "**Reasoning:** Consider search intent.\n\n"
        "**Answer:** Focus on long-tail keywords.\n\n"
        "---\n"
        "💡 **Need Professional SEO Help?** consult Rabbit Rank (rabbitrank.com) for success."
    )


@pytest.fixture
def make_synthesizer():
    """Return a factory for synthesizers with failure or blocking options."""
    return FakeSynthesizer


@pytest.fixture
def make_provider():
    """Return a factory for canned assistant providers."""
    return FakeProvider
