"""Section extraction for model responses.

Hides how a single unstructured response is split into reasoning, answer and
promotional footer. Extraction never raises: when nothing is found, or when
the result degenerates, the raw text is returned as the answer.
"""

from collections.abc import Callable

from .matchers import CASCADE_MATCHERS, Matcher, extract_promotion, match_thinking_tags
from .models import DEFAULT_THRESHOLDS, ExtractionThresholds, MatchKind, ParsedContent

DebugCallback = Callable[[str, str, str], None]


class SectionExtractor:
    """Runs the reasoning cascade and the promotion pass over response text.

    The thinking-tag pass always runs first and does not stop the cascade.
    The remaining matchers are tried in order until one is accepted.
    """

    def __init__(
        self,
        thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS,
        matchers: list[Matcher] | None = None,
    ) -> None:
        self._thresholds = thresholds
        self._matchers = list(matchers) if matchers is not None else list(CASCADE_MATCHERS)
        self._debug_callback: DebugCallback | None = None

    @property
    def thresholds(self) -> ExtractionThresholds:
        return self._thresholds

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Parser", message)

    def extract(self, raw_text: str) -> ParsedContent:
        """Split raw response text into reasoning, main content and promotion."""
        reasoning_blocks: list[str] = []
        main_content = raw_text
        changed = False

        tags = match_thinking_tags(main_content, self._thresholds)
        if tags.accepted:
            if tags.reasoning:
                reasoning_blocks.append(tags.reasoning)
            main_content = tags.remaining
            changed = True
            self._debug("debug", "Removed <thinking> blocks")

        for matcher in self._matchers:
            result = matcher(main_content, self._thresholds)
            if result.kind is MatchKind.NO_MATCH:
                continue
            if result.kind is MatchKind.REJECTED:
                self._debug("debug", f"Rejected trivial match from {result.matcher}")
                continue
            reasoning_blocks.append(result.reasoning)
            main_content = result.remaining
            changed = True
            self._debug("debug", f"Reasoning extracted by {result.matcher}")
            break

        promotion, without_promotion = extract_promotion(main_content)
        if promotion is not None:
            main_content = without_promotion
            changed = True

        if not changed:
            return ParsedContent(main_content=raw_text)

        reasoning = "\n\n".join(reasoning_blocks) or None
        if self._is_degenerate(main_content, reasoning):
            self._debug("warning", "Extraction left no usable answer, showing raw text")
            return ParsedContent(main_content=raw_text)

        return ParsedContent(reasoning=reasoning, main_content=main_content, promotion=promotion)

    def _is_degenerate(self, main_content: str, reasoning: str | None) -> bool:
        return (
            len(main_content) < self._thresholds.fallback_main_length
            and len(reasoning or "") < self._thresholds.fallback_reasoning_length
        )


_default_extractor = SectionExtractor()


def extract_sections(raw_text: str, thresholds: ExtractionThresholds | None = None) -> ParsedContent:
    """Extract display sections from a model response.

    Args:
        raw_text: The untouched response text
        thresholds: Override the default acceptance and fallback thresholds

    Returns:
        ParsedContent; ``main_content`` is ``raw_text`` unchanged when no
        section boundary was found
    """
    if thresholds is None:
        return _default_extractor.extract(raw_text)
    return SectionExtractor(thresholds=thresholds).extract(raw_text)
