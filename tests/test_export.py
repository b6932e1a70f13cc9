"""Unit tests for the export module."""
from datetime import date, datetime

from rankchat.export import (
    export_transcript,
    markdown_to_html,
    to_printable_html,
    transcript_filename,
    write_printable_html,
    write_transcript,
)
from rankchat.session import ChatMessage


class TestMarkdownToHtml:
    """Tests for the markdown subset conversion."""

    def test_headings(self):
        html = markdown_to_html("# Audit\n## Findings\n### Details")

        assert "<h1>Audit</h1>" in html
        assert "<h2>Findings</h2>" in html
        assert "<h3>Details</h3>" in html

    def test_ampersand_escaped_once(self):
        html = markdown_to_html("Q&A pages")
        assert "Q&amp;A pages" in html
        assert "&amp;amp;" not in html

    def test_emphasis(self):
        html = markdown_to_html("***both*** and **bold** and *italic*")

        assert "<strong><em>both</em></strong>" in html
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html

    def test_underscores_inside_words_are_literal(self):
        assert "snake_case_name" in markdown_to_html("Use snake_case_name in slugs")

    def test_inline_code_and_links(self):
        html = markdown_to_html("Add `rel=canonical` per [Guide](https://example.com/guide)")

        assert "<code>rel=canonical</code>" in html
        assert '<a href="https://example.com/guide" style="color: #0891B2;">Guide</a>' in html

    def test_fenced_code_block_is_opaque(self):
        """Test that code blocks are neither styled nor wrapped in paragraphs."""
        html = markdown_to_html("```html\n**not bold**\n\n<title>\n```")

        assert html.startswith("<pre><code>")
        assert "**not bold**" in html
        assert "<p style" not in html

    def test_horizontal_rule(self):
        assert markdown_to_html("---").startswith("<hr")

    def test_unordered_list_is_grouped(self):
        html = markdown_to_html("- one\n- two\n  - nested")

        assert html.count("<ul") == 1
        assert html.count("<li") == 3
        assert "margin-left: 20px" in html

    def test_ordered_list_items(self):
        html = markdown_to_html("1. First\n2. Second")

        assert html.count("<li") == 2
        assert "<ul" not in html

    def test_blockquote(self):
        assert "<blockquote" in markdown_to_html("> Tip: compress images")

    def test_table(self):
        """Test that a header, separator and row produce one table."""
        html = markdown_to_html("| Keyword | Volume |\n| --- | :---: |\n| seo tools | 1200 |")

        assert html.count("<table") == 1
        assert html.count("<tr>") == 2
        assert html.index(">Keyword</th>") < html.index(">Volume</th>")
        assert html.index(">seo tools</td>") < html.index(">1200</td>")

    def test_pipe_line_without_separator_is_literal(self):
        html = markdown_to_html("| just | text |")

        assert "<table" not in html
        assert "| just | text |" in html

    def test_paragraphs_and_line_breaks(self):
        html = markdown_to_html("line one\nline two\n\nsecond")

        assert html.count("<p ") == 2
        assert "line one<br>line two" in html

    def test_placeholder_lookalike_in_input(self):
        html = markdown_to_html("see \x00CODEBLOCK3\x00 here\n\n```\ncode\n```")

        assert "see CODEBLOCK3 here" in html
        assert "<pre><code>code\n</code></pre>" in html
        assert "\x00" not in html


class TestPrintableHtml:
    """Tests for the standalone print document."""

    def test_document_branding(self):
        html = to_printable_html("## Plan", title="Report <1>", generated_at=datetime(2026, 10, 18, 9, 30))

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Report &lt;1&gt;</title>" in html
        assert "Rabbit Rank AI" in html
        assert "Sunday, October 18, 2026" in html
        assert "© 2026 Rabbit Rank" in html
        assert "<h2>Plan</h2>" in html

    def test_write_creates_parent_directory(self, tmp_path):
        target = tmp_path / "exports" / "answer.html"

        written = write_printable_html("Use **HTTPS**.", target)

        assert written == target
        assert "<strong>HTTPS</strong>" in target.read_text(encoding="utf-8")


class TestTranscript:
    """Tests for markdown session transcripts."""

    def test_sections_in_order(self):
        messages = [
            ChatMessage(role="user", text="How do I rank?", timestamp=datetime(2026, 10, 18, 9, 0, 0)),
            ChatMessage(role="assistant", text="Write useful pages.", timestamp=datetime(2026, 10, 18, 9, 0, 5)),
        ]

        transcript = export_transcript(messages)

        assert transcript == (
            "### User • 2026-10-18 09:00:00\nHow do I rank?\n\n"
            "### Assistant • 2026-10-18 09:00:05\nWrite useful pages.\n"
        )

    def test_empty_session(self):
        assert export_transcript([]) == ""

    def test_filename(self):
        assert transcript_filename(date(2026, 10, 18)) == "rabbit-rank-session-2026-10-18.md"

    def test_write_transcript(self, tmp_path):
        message = ChatMessage(role="user", text="hello")
        path = write_transcript([message], tmp_path / "t.md")

        assert "hello" in path.read_text(encoding="utf-8")
