from abc import ABC, abstractmethod
from typing import Any

from .models import GenerationRequest, GenerationResult


class AssistantProvider(ABC):
    """Abstract base class for assistant providers.

    This module hides the design decision of which model API answers
    questions and reads answers aloud. Implementations must handle:
    - API client setup and authentication
    - Building the system instruction and request parts
    - Extracting citations from the response
    - Mapping API failures to rankchat errors

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            result = await provider.generate(request)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model name."""
        pass

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Answer a prompt.

        Args:
            request: Prompt, data source, attachment and thinking mode

        Returns:
            GenerationResult with the raw answer text and its sources

        Raises:
            GenerationError: If the API call fails
        """
        pass

    @abstractmethod
    async def synthesize_speech(self, text: str) -> bytes:
        """Read text aloud.

        Returns:
            Raw 16-bit mono PCM samples at 24 kHz

        Raises:
            SpeechSynthesisError: If no audio is produced
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "AssistantProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors raised by the HTTP
        client when the loop shuts down first.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
