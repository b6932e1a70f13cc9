from .base import AssistantProvider
from .factory import create_assistant_provider
from .models import GenerationRequest, GenerationResult
from .providers import GeminiProvider

__all__ = [
    "AssistantProvider",
    "create_assistant_provider",
    "GenerationRequest",
    "GenerationResult",
    "GeminiProvider",
]
