"""Google Gemini assistant provider.

Uses the official Google GenAI SDK for answers and text-to-speech.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return empty responses due to safety filtering or service
issues. Empty answers are retried before falling back to a fixed message.
"""

import asyncio
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ...errors import GenerationError, SpeechSynthesisError
from ...playback.config import SPEECH_VOICE
from ...prompts import get_system_instruction
from ...session.models import DATA_SOURCES, DataSource, Source
from ...session.sources import dedupe_sources
from ..base import AssistantProvider
from ..models import GenerationRequest, GenerationResult

EMPTY_RESPONSE_TEXT = "No response generated."

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 8192


class GeminiProvider(AssistantProvider):
    """Google Gemini assistant provider.

    Hidden design decisions:
    - Google GenAI client initialization
    - System instruction and data source search note
    - Attachment encoding (inline bytes part or appended text)
    - Google Search grounding and citation extraction
    - Retry logic for empty responses (known Gemini issue)
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        tts_model: str = DEFAULT_TTS_MODEL,
        max_retries: int = 2,
        client: genai.Client | None = None,
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Model answering prompts
            tts_model: Model used for speech synthesis
            max_retries: Attempts for empty responses (default 2)
            client: Pre-built client (used instead of creating one)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._tts_model = tts_model
        self._max_retries = max(1, max_retries)
        self._client = client or genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    @property
    def tts_model(self) -> str:
        return self._tts_model

    def _build_prompt_text(self, request: GenerationRequest) -> str:
        text = request.prompt
        if request.data_source is not DataSource.NONE:
            config = DATA_SOURCES[request.data_source]
            text += (
                f"\n\n(System Note: Focus your search on {config.label}. "
                f"Use Google Search with query modifier: {config.site_query})"
            )
        attachment = request.attachment
        if attachment is not None and not attachment.is_inline:
            text += (
                f"\n\n--- Attached File Content: {attachment.name} ---\n"
                f"{attachment.data}\n"
                "-----------------------------------\n"
            )
        return text

    def _build_contents(self, request: GenerationRequest) -> list[types.Content]:
        parts = [types.Part(text=self._build_prompt_text(request))]
        attachment = request.attachment
        if attachment is not None and attachment.is_inline:
            parts.append(types.Part.from_bytes(
                data=attachment.decoded_bytes(),
                mime_type=attachment.mime_type,
            ))
        return [types.Content(role="user", parts=parts)]

    def _build_config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        config = types.GenerateContentConfig(
            system_instruction=get_system_instruction(request.thinking_mode),
            temperature=DEFAULT_TEMPERATURE,
            max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        )
        # Search grounding cannot be combined with attachments
        if request.data_source is not DataSource.NONE and request.attachment is None:
            config.tools = [types.Tool(google_search=types.GoogleSearch())]
        return config

    def _extract_content(self, response) -> str:
        """Join the text parts of the first candidate, or return empty string."""
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                if texts:
                    return "".join(texts)
        return ""

    def _extract_sources(self, response) -> list[Source]:
        if not response.candidates:
            return []
        metadata = getattr(response.candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []
        sources = []
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            if web is None or not web.uri:
                continue
            sources.append(Source(title=web.title or web.uri, uri=web.uri))
        return dedupe_sources(sources)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Answer a prompt using Google Gemini.

        Includes retry logic for empty responses (known Gemini service issue).
        """
        contents = self._build_contents(request)
        config = self._build_config(request)

        text = ""
        sources: list[Source] = []
        for attempt in range(self._max_retries):
            try:
                response = await self._client.aio.models.generate_content(
                    model=self._model,
                    contents=contents,
                    config=config,
                )
            except genai_errors.APIError as e:
                raise GenerationError(f"API Error {e.code}: {e.message}") from e

            text = self._extract_content(response)
            sources = self._extract_sources(response)
            if text:
                break

            if attempt < self._max_retries - 1:
                await asyncio.sleep(0.5 * (attempt + 1))

        return GenerationResult(
            text=text or EMPTY_RESPONSE_TEXT,
            sources=sources,
            model=self._model,
        )

    async def synthesize_speech(self, text: str) -> bytes:
        """Read text aloud with the TTS model; returns raw PCM."""
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=SPEECH_VOICE)
                )
            ),
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._tts_model,
                contents=text,
                config=config,
            )
        except genai_errors.APIError as e:
            raise SpeechSynthesisError(f"TTS generation failed: {e.message}") from e

        if response.candidates:
            content = response.candidates[0].content
            for part in (content.parts if content and content.parts else []):
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    return inline.data
        raise SpeechSynthesisError("No audio generated")

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
