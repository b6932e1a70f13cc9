"""Unit tests for the parsing module."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from rankchat.parsing import (
    ExtractionThresholds,
    MatchKind,
    ParsedContent,
    SectionExtractor,
    extract_promotion,
    extract_sections,
    strip_answer_label,
)
from rankchat.parsing.matchers import match_bold_labels, match_bracket_block, match_thinking_tags

# Letters that cannot spell any section marker
PLAIN_ALPHABET = "abcdefghijklm .,\n"


class TestExtractSections:
    """Tests for the reasoning cascade on each supported format."""

    def test_bold_labels_with_promotion(self, promo_response):
        """Test the full split into reasoning, answer and promotion."""
        parsed = extract_sections(promo_response)

        assert parsed.reasoning == "Consider search intent."
        assert parsed.main_content == "Focus on long-tail keywords."
        assert parsed.promotion.startswith("💡 **Need Professional SEO Help?**")
        assert "rabbitrank.com" in parsed.promotion

    def test_no_markers_returns_raw_text(self):
        """Test that unstructured text passes through unchanged."""
        parsed = extract_sections("Use schema markup for rich snippets.")

        assert parsed == ParsedContent(main_content="Use schema markup for rich snippets.")
        assert parsed.reasoning is None
        assert parsed.promotion is None

    def test_thinking_tags(self):
        """Test that <thinking> blocks become reasoning."""
        parsed = extract_sections("<thinking>Check the intent first.</thinking>Use canonical tags on duplicates.")

        assert parsed.reasoning == "Check the intent first."
        assert parsed.main_content == "Use canonical tags on duplicates."

    def test_multiple_thinking_tags_are_joined(self):
        """Test that every <thinking> block is collected in order."""
        text = (
            "<THINKING>First look at crawl budget.</THINKING>"
            "Fix the sitemap before anything else."
            "<thinking>Then look at redirects.</thinking>"
        )
        parsed = extract_sections(text)

        assert parsed.reasoning == "First look at crawl budget.\n\nThen look at redirects."
        assert parsed.main_content == "Fix the sitemap before anything else."

    def test_bracket_block(self):
        parsed = extract_sections("[Reasoning]The page lacks internal links.[/Reasoning]\nAdd links from pillar pages.")

        assert parsed.reasoning == "The page lacks internal links."
        assert parsed.main_content == "Add links from pillar pages."

    def test_plain_labels(self):
        parsed = extract_sections("Reasoning: Users look for prices first.\nAnswer: Put pricing above the fold.")

        assert parsed.reasoning == "Users look for prices first."
        assert parsed.main_content == "Put pricing above the fold."

    def test_thinking_labels(self):
        parsed = extract_sections("Thinking: Mobile traffic is dominant.\nFinal Answer: Optimize for Core Web Vitals.")

        assert parsed.reasoning == "Mobile traffic is dominant."
        assert parsed.main_content == "Optimize for Core Web Vitals."

    def test_dash_delimiters(self):
        text = "--- Reasoning ---\nCompetitors rank with long guides.\n--- Answer ---\nWrite a complete guide."
        parsed = extract_sections(text)

        assert parsed.reasoning == "Competitors rank with long guides."
        assert parsed.main_content == "Write a complete guide."

    def test_markdown_headers(self):
        text = "## Reasoning\nThe keyword has low difficulty.\n## Answer\nTarget it with a new post."
        parsed = extract_sections(text)

        assert parsed.reasoning == "The keyword has low difficulty."
        assert parsed.main_content == "Target it with a new post."

    def test_labels_are_case_insensitive(self):
        parsed = extract_sections("**reasoning:** Consider search intent.\n\n**answer:** Focus on long-tail keywords.")

        assert parsed.reasoning == "Consider search intent."
        assert parsed.main_content == "Focus on long-tail keywords."

    def test_trivial_reasoning_is_rejected(self):
        """Test that a match with too little reasoning is not trusted."""
        text = "**Reasoning:** ok **Answer:** Use descriptive page titles."
        parsed = extract_sections(text)

        assert parsed.reasoning is None
        assert parsed.main_content == text

    def test_rejected_match_lets_later_format_win(self):
        """Test that a trivial match does not stop the cascade."""
        logs = []
        extractor = SectionExtractor()
        extractor.set_debug_callback(lambda level, component, message: logs.append(message))
        text = (
            "[Reasoning]ok[/Reasoning]\n\n"
            "**Reasoning:** Consider search intent.\n\n"
            "**Answer:** Focus on long-tail keywords."
        )

        parsed = extractor.extract(text)

        assert parsed.reasoning == "Consider search intent."
        assert parsed.main_content == "Focus on long-tail keywords."
        assert logs.index("Rejected trivial match from bracket_block") < logs.index(
            "Reasoning extracted by bold_labels"
        )

    def test_bracket_reasoning_follows_tag_reasoning(self):
        text = (
            "<thinking>Check the SERP first.</thinking>"
            "[Reasoning]Consider search intent.[/Reasoning]"
            "Focus on long-tail keywords."
        )

        parsed = extract_sections(text)

        assert parsed.reasoning == "Check the SERP first.\n\nConsider search intent."
        assert parsed.main_content == "Focus on long-tail keywords."

    def test_bracket_block_takes_priority_over_bold_labels(self):
        text = (
            "[Reasoning]Consider search intent.[/Reasoning]\n"
            "**Reasoning:** Look at competitor pages.\n"
            "**Answer:** Focus on long-tail keywords."
        )

        parsed = extract_sections(text)

        assert parsed.reasoning == "Consider search intent."
        assert "**Reasoning:** Look at competitor pages." in parsed.main_content

    def test_prose_mentioning_reasoning_is_untouched(self):
        text = "The reasoning behind this is simple: links still matter."
        assert extract_sections(text).main_content == text

    def test_degenerate_result_falls_back_to_raw(self):
        """Test that a tiny answer with short reasoning shows the raw text."""
        text = "<thinking>short</thinking>Hi"
        parsed = extract_sections(text)

        assert parsed.reasoning is None
        assert parsed.main_content == text

    def test_promotion_without_reasoning(self):
        text = "Use HTTPS everywhere.\n\n**Need Professional SEO Help?** Rabbit Rank can help you find success."
        parsed = extract_sections(text)

        assert parsed.reasoning is None
        assert parsed.main_content == "Use HTTPS everywhere."
        assert parsed.promotion.startswith("**Need Professional SEO Help?**")

    def test_custom_thresholds_accept_short_reasoning(self):
        thresholds = ExtractionThresholds(min_reasoning_length=0)
        parsed = extract_sections("**Reasoning:** ok **Answer:** Use descriptive page titles.", thresholds)

        assert parsed.reasoning == "ok"
        assert parsed.main_content == "Use descriptive page titles."

    @given(st.text(alphabet=PLAIN_ALPHABET))
    def test_marker_free_text_is_unchanged(self, text: str):
        """Property test: text without markers is returned as is."""
        parsed = extract_sections(text)

        assert parsed.reasoning is None
        assert parsed.main_content == text

    @given(st.text(alphabet=PLAIN_ALPHABET + "*:"))
    def test_extraction_is_idempotent(self, text: str):
        """Property test: extracting the main content again changes nothing."""
        once = extract_sections(text).main_content
        assert extract_sections(once).main_content == once

    @given(
        st.text(alphabet="abcdefghijklm ", min_size=11).filter(lambda s: len(s.strip()) > 10),
        st.text(alphabet="abcdefghijklm ", min_size=11).filter(lambda s: len(s.strip()) > 10),
    )
    def test_bold_split_property(self, reasoning: str, answer: str):
        """Property test: a bold split yields the trimmed text on each side."""
        parsed = extract_sections(f"**Reasoning:** {reasoning}\n\n**Answer:** {answer}")

        assert parsed.reasoning == reasoning.strip()
        assert parsed.main_content == answer.strip()
        assert "**Answer:**" not in parsed.main_content


class TestMatchers:
    """Tests for individual matcher results."""

    def test_no_match(self):
        result = match_bracket_block("nothing here")

        assert result.kind is MatchKind.NO_MATCH
        assert result.matcher == "bracket_block"
        assert not result.accepted

    def test_rejected_match_keeps_parts(self):
        result = match_bold_labels("**Reasoning:** ok **Answer:** Use descriptive page titles.")

        assert result.kind is MatchKind.REJECTED
        assert result.reasoning == "ok"
        assert result.remaining == "Use descriptive page titles."

    def test_empty_thinking_block_is_accepted(self):
        """Test that empty tags are still removed from the answer."""
        result = match_thinking_tags("<thinking>  </thinking>Answer text here.")

        assert result.accepted
        assert result.reasoning == ""
        assert result.remaining == "Answer text here."

    @pytest.mark.parametrize("text", [
        "**Answer:** Add alt text.",
        "--- Answer --- Add alt text.",
        "## Answer\nAdd alt text.",
        "Final Answer: Add alt text.",
    ])
    def test_strip_answer_label(self, text: str):
        assert strip_answer_label(text) == "Add alt text."

    def test_extract_promotion_missing(self):
        assert extract_promotion("Plain answer.") == (None, "Plain answer.")


class TestSectionExtractor:
    """Tests for SectionExtractor logging."""

    def test_debug_callback_reports_matcher(self, promo_response):
        logs = []
        extractor = SectionExtractor()
        extractor.set_debug_callback(lambda level, component, message: logs.append((level, component, message)))

        extractor.extract(promo_response)

        assert ("debug", "Parser", "Reasoning extracted by bold_labels") in logs

    def test_thresholds_property(self):
        thresholds = ExtractionThresholds(fallback_main_length=1)
        assert SectionExtractor(thresholds=thresholds).thresholds.fallback_main_length == 1

    def test_thresholds_reject_negative(self):
        with pytest.raises(ValueError):
            ExtractionThresholds(min_answer_length=-1)
