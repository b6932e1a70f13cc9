"""Unit tests for the llm module."""
import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import errors as genai_errors

from rankchat.errors import GenerationError, SpeechSynthesisError
from rankchat.llm import (
    AssistantProvider,
    GeminiProvider,
    GenerationRequest,
    create_assistant_provider,
)
from rankchat.llm.providers.gemini import EMPTY_RESPONSE_TEXT
from rankchat.prompts import load_prompt
from rankchat.session import Attachment, DataSource, Source


def make_response(text=None, chunks=(), audio=None):
    """Build a minimal object shaped like a GenerateContentResponse."""
    parts = []
    if text is not None:
        parts.append(SimpleNamespace(text=text, inline_data=None))
    if audio is not None:
        parts.append(SimpleNamespace(text=None, inline_data=SimpleNamespace(data=audio)))
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts),
        grounding_metadata=SimpleNamespace(grounding_chunks=[
            SimpleNamespace(web=SimpleNamespace(uri=uri, title=title)) for title, uri in chunks
        ]),
    )
    return SimpleNamespace(candidates=[candidate])


def make_client(*responses):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=list(responses))
    return client


def api_error(code: int = 429, message: str = "Quota exceeded"):
    return genai_errors.APIError(code, {"error": {"code": code, "message": message, "status": "RESOURCE_EXHAUSTED"}})


class TestAssistantProvider:
    """Tests for AssistantProvider interface."""

    def test_provider_is_abstract(self):
        """Test that AssistantProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            AssistantProvider()  # type: ignore


class TestGenerationRequest:
    """Tests for request models."""

    def test_defaults(self):
        request = GenerationRequest(prompt="hi")

        assert request.data_source is DataSource.NONE
        assert request.attachment is None
        assert not request.thinking_mode

    def test_frozen(self):
        request = GenerationRequest(prompt="hi")
        with pytest.raises(ValueError):
            request.prompt = "changed"


class TestGeminiProvider:
    """Tests for GeminiProvider with a mocked client."""

    @pytest.mark.asyncio
    async def test_generate_returns_text_and_sources(self):
        client = make_client(make_response(
            text="Build topical clusters.",
            chunks=[
                ("Ahrefs Blog", "https://ahrefs.com/blog"),
                ("Duplicate", "https://ahrefs.com/blog"),
                (None, "https://moz.com/learn"),
            ],
        ))
        provider = GeminiProvider(api_key="test", client=client)

        result = await provider.generate(GenerationRequest(prompt="How?", data_source=DataSource.AHREFS))

        assert result.text == "Build topical clusters."
        assert result.model == "gemini-2.5-flash"
        assert result.sources == [
            Source(title="Ahrefs Blog", uri="https://ahrefs.com/blog"),
            Source(title="https://moz.com/learn", uri="https://moz.com/learn"),
        ]

    @pytest.mark.asyncio
    async def test_data_source_adds_search_tool_and_note(self):
        client = make_client(make_response(text="ok"))
        provider = GeminiProvider(api_key="test", client=client)

        await provider.generate(GenerationRequest(prompt="How?", data_source=DataSource.AHREFS))

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["config"].tools is not None
        assert len(kwargs["config"].tools) == 1
        prompt_text = kwargs["contents"][0].parts[0].text
        assert prompt_text.startswith("How?")
        assert (
            "(System Note: Focus your search on Ahrefs Data. "
            "Use Google Search with query modifier: site:ahrefs.com)"
        ) in prompt_text

    @pytest.mark.asyncio
    async def test_no_data_source_means_no_tools(self):
        client = make_client(make_response(text="ok"))
        provider = GeminiProvider(api_key="test", client=client)

        await provider.generate(GenerationRequest(prompt="How?"))

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert not kwargs["config"].tools
        assert "System Note" not in kwargs["contents"][0].parts[0].text

    @pytest.mark.asyncio
    async def test_attachment_disables_search(self):
        client = make_client(make_response(text="ok"))
        provider = GeminiProvider(api_key="test", client=client)
        attachment = Attachment(name="audit.txt", mime_type="text/plain", data="Title tags missing", is_inline=False)

        await provider.generate(GenerationRequest(prompt="Review", data_source=DataSource.MOZ, attachment=attachment))

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert not kwargs["config"].tools
        prompt_text = kwargs["contents"][0].parts[0].text
        assert "--- Attached File Content: audit.txt ---\nTitle tags missing\n" in prompt_text

    @pytest.mark.asyncio
    async def test_inline_attachment_is_sent_as_bytes(self):
        client = make_client(make_response(text="ok"))
        provider = GeminiProvider(api_key="test", client=client)
        attachment = Attachment(
            name="shot.png",
            mime_type="image/png",
            data=base64.b64encode(b"\x89PNG").decode("ascii"),
            is_inline=True,
        )

        await provider.generate(GenerationRequest(prompt="Review", attachment=attachment))

        parts = client.aio.models.generate_content.call_args.kwargs["contents"][0].parts
        assert len(parts) == 2
        assert parts[1].inline_data.data == b"\x89PNG"
        assert parts[1].inline_data.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_thinking_mode_selects_system_instruction(self):
        client = make_client(make_response(text="ok"))
        provider = GeminiProvider(api_key="test", client=client)

        await provider.generate(GenerationRequest(prompt="How?", thinking_mode=True))

        config = client.aio.models.generate_content.call_args.kwargs["config"]
        assert load_prompt("thinking") in config.system_instruction
        assert config.temperature == 0.7
        assert config.max_output_tokens == 8192

    @pytest.mark.asyncio
    async def test_empty_response_is_retried(self):
        client = make_client(make_response(text=None), make_response(text="Second try"))
        provider = GeminiProvider(api_key="test", client=client, max_retries=2)

        result = await provider.generate(GenerationRequest(prompt="How?"))

        assert result.text == "Second try"
        assert client.aio.models.generate_content.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_response_fallback(self):
        client = make_client(SimpleNamespace(candidates=[]))
        provider = GeminiProvider(api_key="test", client=client, max_retries=1)

        result = await provider.generate(GenerationRequest(prompt="How?"))

        assert result.text == EMPTY_RESPONSE_TEXT
        assert result.sources == []

    @pytest.mark.asyncio
    async def test_api_error_becomes_generation_error(self):
        client = make_client(api_error())
        provider = GeminiProvider(api_key="test", client=client)

        with pytest.raises(GenerationError, match="API Error 429"):
            await provider.generate(GenerationRequest(prompt="How?"))

    @pytest.mark.asyncio
    async def test_synthesize_speech(self):
        client = make_client(make_response(audio=b"\x01\x02"))
        provider = GeminiProvider(api_key="test", client=client)

        assert await provider.synthesize_speech("Read me") == b"\x01\x02"
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-preview-tts"
        assert kwargs["config"].response_modalities == ["AUDIO"]
        voice = kwargs["config"].speech_config.voice_config.prebuilt_voice_config
        assert voice.voice_name == "Kore"

    @pytest.mark.asyncio
    async def test_synthesize_speech_without_audio(self):
        provider = GeminiProvider(api_key="test", client=make_client(make_response(text="no audio")))

        with pytest.raises(SpeechSynthesisError, match="No audio generated"):
            await provider.synthesize_speech("Read me")

    @pytest.mark.asyncio
    async def test_synthesize_speech_api_error(self):
        provider = GeminiProvider(api_key="test", client=make_client(api_error(500, "Internal")))

        with pytest.raises(SpeechSynthesisError):
            await provider.synthesize_speech("Read me")

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        provider = GeminiProvider(api_key="test", client=MagicMock())

        async with provider as entered:
            assert entered is provider


class TestCreateAssistantProvider:
    """Tests for the provider factory."""

    def test_create_gemini(self):
        provider = create_assistant_provider("Gemini", api_key="test", model="gemini-2.5-pro", client=MagicMock())

        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-pro"

    def test_missing_api_key(self):
        with pytest.raises(TypeError, match="api_key"):
            create_assistant_provider("gemini")

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_assistant_provider("openai", api_key="test")
