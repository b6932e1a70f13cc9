"""Pattern matchers for reasoning and promotion sections.

Each reasoning matcher is a pure function ``(text, thresholds) -> MatchResult``.
The matchers know nothing about precedence; the extractor walks
``CASCADE_MATCHERS`` in order and stops at the first accepted result.
"""

import re
from collections.abc import Callable

from .models import DEFAULT_THRESHOLDS, ExtractionThresholds, MatchKind, MatchResult

Matcher = Callable[[str, ExtractionThresholds], MatchResult]

_ANSWER = r"(?:Answer|Final\s+Answer|Response)"

THINKING_TAG = re.compile(r"<thinking>(.*?)</thinking>", re.IGNORECASE | re.DOTALL)

BRACKET_BLOCK = re.compile(r"\[Reasoning\](?P<reasoning>.*?)\[/Reasoning\]", re.IGNORECASE | re.DOTALL)

BOLD_SPLIT = re.compile(
    r"\*\*(?:(?:Internal\s+)?Reasoning|Thought\s+Process):\*\*\s*(?P<reasoning>.*?)"
    r"\*\*" + _ANSWER + r":\*\*(?P<answer>.*)",
    re.IGNORECASE | re.DOTALL,
)

PLAIN_SPLIT = re.compile(
    r"^Reasoning:[ \t]*(?P<reasoning>.*?)(?=\n" + _ANSWER + r":)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)

THINKING_SPLIT = re.compile(
    r"^Thinking:[ \t]*(?P<reasoning>.*?)(?=\n" + _ANSWER + r":)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)

DASH_SPLIT = re.compile(
    r"-{3}\s*Reasoning\s*-{3}\s*(?P<reasoning>.*?)(?=-{3}\s*" + _ANSWER + r"\s*-{3})",
    re.IGNORECASE | re.DOTALL,
)

HEADER_SPLIT = re.compile(
    r"^#{2,3}[ \t]*Reasoning[ \t]*:?[ \t]*(?:\r?\n)+(?P<reasoning>.*?)(?=\n#{2,3}[ \t]*" + _ANSWER + r"\b)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)

# Leftover answer labels, tried in order on the start of the answer text
ANSWER_LABELS = [
    re.compile(r"^\*\*" + _ANSWER + r":\*\*\s*", re.IGNORECASE),
    re.compile(r"^-{3}\s*" + _ANSWER + r"\s*-{3}\s*", re.IGNORECASE),
    re.compile(r"^#{1,3}[ \t]*" + _ANSWER + r"[ \t]*:?[ \t]*(?:\n|$)", re.IGNORECASE),
    re.compile(r"^" + _ANSWER + r":\s*", re.IGNORECASE),
]

PROMOTION = re.compile(
    r"(?:-{3,}[ \t]*\n\s*)?"
    r"(?:💡\s*\**|\*\*)\s*Need Professional SEO Help\??\**"
    r".*?(?:Rabbit Rank|rabbitrank\.com).*?(?:success\.|\Z)",
    re.IGNORECASE | re.DOTALL,
)

_LEADING_RULE = re.compile(r"^-{3,}[ \t]*\n?\s*")


def strip_answer_label(text: str) -> str:
    """Remove a residual answer label such as ``**Answer:**`` from the start of text."""
    text = text.strip()
    for pattern in ANSWER_LABELS:
        text = pattern.sub("", text, count=1).strip()
    return text


def _classify(
    name: str,
    reasoning: str,
    remaining: str,
    thresholds: ExtractionThresholds,
) -> MatchResult:
    """Accept a match only when both sides carry real content."""
    reasoning = reasoning.strip()
    remaining = strip_answer_label(remaining)
    if len(reasoning) > thresholds.min_reasoning_length and len(remaining) > thresholds.min_answer_length:
        kind = MatchKind.ACCEPTED
    else:
        kind = MatchKind.REJECTED
    return MatchResult(kind=kind, matcher=name, reasoning=reasoning, remaining=remaining)


def _remove_span(text: str, match: re.Match[str]) -> str:
    return text[:match.start()] + text[match.end():]


def match_thinking_tags(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """Collect every ``<thinking>`` block and remove them all.

    Tags are explicit delimiters, so any occurrence is accepted without
    length checks. Empty blocks are still removed from the answer.
    """
    blocks = THINKING_TAG.findall(text)
    if not blocks:
        return MatchResult.no_match("thinking_tags")

    reasoning = "\n\n".join(block.strip() for block in blocks if block.strip())
    remaining = THINKING_TAG.sub("", text).strip()
    return MatchResult(
        kind=MatchKind.ACCEPTED,
        matcher="thinking_tags",
        reasoning=reasoning,
        remaining=remaining,
    )


def match_bracket_block(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """``[Reasoning] ... [/Reasoning]``."""
    match = BRACKET_BLOCK.search(text)
    if match is None:
        return MatchResult.no_match("bracket_block")
    return _classify("bracket_block", match.group("reasoning"), _remove_span(text, match), thresholds)


def match_bold_labels(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """``**Reasoning:** ... **Answer:** ...``.

    Everything after the answer label becomes the answer, including any
    preamble that came before the reasoning label being dropped.
    """
    match = BOLD_SPLIT.search(text)
    if match is None:
        return MatchResult.no_match("bold_labels")
    return _classify("bold_labels", match.group("reasoning"), match.group("answer"), thresholds)


def match_plain_labels(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """Line-anchored ``Reasoning:`` ... ``Answer:``."""
    match = PLAIN_SPLIT.search(text)
    if match is None:
        return MatchResult.no_match("plain_labels")
    return _classify("plain_labels", match.group("reasoning"), _remove_span(text, match), thresholds)


def match_thinking_labels(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """Line-anchored ``Thinking:`` ... ``Answer:``."""
    match = THINKING_SPLIT.search(text)
    if match is None:
        return MatchResult.no_match("thinking_labels")
    return _classify("thinking_labels", match.group("reasoning"), _remove_span(text, match), thresholds)


def match_dash_delimiters(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """``--- Reasoning --- ... --- Answer ---``."""
    match = DASH_SPLIT.search(text)
    if match is None:
        return MatchResult.no_match("dash_delimiters")
    return _classify("dash_delimiters", match.group("reasoning"), _remove_span(text, match), thresholds)


def match_markdown_headers(text: str, thresholds: ExtractionThresholds = DEFAULT_THRESHOLDS) -> MatchResult:
    """``## Reasoning`` ... ``## Answer`` (level 2 or 3)."""
    match = HEADER_SPLIT.search(text)
    if match is None:
        return MatchResult.no_match("markdown_headers")
    return _classify("markdown_headers", match.group("reasoning"), _remove_span(text, match), thresholds)


# Most distinctive first, so prose that merely mentions "Reasoning" is not split
CASCADE_MATCHERS: list[Matcher] = [
    match_bracket_block,
    match_bold_labels,
    match_plain_labels,
    match_thinking_labels,
    match_dash_delimiters,
    match_markdown_headers,
]


def extract_promotion(text: str) -> tuple[str | None, str]:
    """Split the promotional footer off the answer.

    Returns:
        Tuple of (promotion or None, text with the promotion removed)
    """
    match = PROMOTION.search(text)
    if match is None:
        return None, text
    promotion = _LEADING_RULE.sub("", match.group(0)).strip()
    return promotion, _remove_span(text, match).strip()
