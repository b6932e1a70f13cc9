"""SEO assistant: one question-and-answer exchange at a time."""

import time
from collections.abc import Callable

from .errors import GenerationError
from .llm import AssistantProvider, GenerationRequest
from .parsing import extract_sections
from .session import Attachment, ChatMessage, ChatSession

DebugCallback = Callable[[str, str, str], None]


class SEOAssistant:
    """Runs exchanges between a chat session and an assistant provider.

    Hidden design decisions:
    - Prompt assembly from the session settings
    - How failures are recorded in the log
    - At most one request in flight
    """

    def __init__(self, session: ChatSession, provider: AssistantProvider):
        self._session = session
        self._provider = provider
        self._busy = False
        self._debug_callback: DebugCallback | None = None

    @property
    def session(self) -> ChatSession:
        return self._session

    @property
    def provider(self) -> AssistantProvider:
        return self._provider

    @property
    def is_busy(self) -> bool:
        return self._busy

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Assistant", message)

    async def ask(
        self,
        text: str,
        attachment: Attachment | None = None,
        on_user_message: Callable[[ChatMessage], None] | None = None,
    ) -> ChatMessage | None:
        """Send a message and append both sides of the exchange to the log.

        A generation failure is recorded as an ``**Error:**`` answer rather
        than raised. ``on_user_message`` is called once the user's message is
        in the log, before the request is sent.

        Returns:
            The answer message, or None if the input was empty or a request
            is already running
        """
        text = text.strip()
        if (not text and attachment is None) or self._busy:
            return None

        self._busy = True
        try:
            user_message = self._session.add_user_message(text, attachment, model=self._provider.model)
            if on_user_message is not None:
                on_user_message(user_message)
            settings = self._session.settings
            request = GenerationRequest(
                prompt=self._session.build_prompt(text),
                data_source=settings.data_source,
                attachment=attachment,
                thinking_mode=settings.thinking_mode,
            )
            self._debug(
                "info",
                f"Generating (source={settings.data_source.value}, "
                f"thinking={settings.thinking_mode}, mode={settings.response_mode.value})",
            )
            start = time.perf_counter()
            try:
                result = await self._provider.generate(request)
            except GenerationError as e:
                self._debug("error", f"Generation failed: {e}")
                return self._session.add_assistant_message(f"**Error:** {e}", model=self._provider.model)

            self._debug(
                "info",
                f"Answer in {time.perf_counter() - start:.2f}s, "
                f"{len(result.text)} chars, {len(result.sources)} source(s)",
            )
            return self._session.add_assistant_message(result.text, result.sources, model=result.model)
        finally:
            self._busy = False

    async def quick_action(
        self,
        action: str,
        message: ChatMessage,
        on_user_message: Callable[[ChatMessage], None] | None = None,
    ) -> ChatMessage | None:
        """Rework an answer with a quick action (summarize, checklist, ...).

        Only the main content is sent; reasoning and promotion are dropped.

        Raises:
            ValueError: If the action is unknown
        """
        prompt = self._session.quick_action_prompt(action, extract_sections(message.text).main_content)
        return await self.ask(prompt, on_user_message=on_user_message)
