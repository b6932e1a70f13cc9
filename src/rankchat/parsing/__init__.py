"""Response parsing module.

Splits a model response into reasoning, main answer and promotional footer.

Module structure:
- models.py: ParsedContent, MatchResult and thresholds
- matchers.py: One pure function per recognised section format
- extractor.py: Precedence, rejection and fallback policy
"""

from .extractor import SectionExtractor, extract_sections
from .matchers import CASCADE_MATCHERS, extract_promotion, strip_answer_label
from .models import ExtractionThresholds, MatchKind, MatchResult, ParsedContent

__all__ = [
    "CASCADE_MATCHERS",
    "ExtractionThresholds",
    "MatchKind",
    "MatchResult",
    "ParsedContent",
    "SectionExtractor",
    "extract_promotion",
    "extract_sections",
    "strip_answer_label",
]
