"""Unit tests for the session module."""
from datetime import datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from rankchat.session import (
    MESSAGES_KEY,
    PINS_KEY,
    SETTINGS_KEY,
    Attachment,
    ChatMessage,
    ChatSession,
    DataSource,
    MessageMetadata,
    ResponseMode,
    SessionStats,
    Source,
    dedupe_sources,
    format_duration,
    group_sources_by_domain,
    source_domain,
)


class TestSources:
    """Tests for citation helpers."""

    def test_dedupe_keeps_first_title_and_order(self):
        sources = [
            Source(title="First", uri="https://moz.com/a"),
            Source(title="Other", uri="https://ahrefs.com/b"),
            Source(title="Second", uri="https://moz.com/a"),
        ]

        unique = dedupe_sources(sources)

        assert [s.title for s in unique] == ["First", "Other"]

    @given(st.lists(st.sampled_from(["https://a.com/1", "https://b.com/2", "https://c.com/3"])))
    def test_dedupe_property(self, uris: list[str]):
        """Property test: one entry per URI, in first-seen order."""
        sources = [Source(title=str(i), uri=uri) for i, uri in enumerate(uris)]

        unique = dedupe_sources(sources)

        assert [s.uri for s in unique] == list(dict.fromkeys(uris))
        assert all(s.title == str(uris.index(s.uri)) for s in unique)

    def test_message_dedupes_sources(self):
        source = Source(title="Guide", uri="https://moz.com/guide")
        message = ChatMessage(role="assistant", text="answer", sources=[source, source])
        assert len(message.sources) == 1

    @pytest.mark.parametrize("uri,expected", [
        ("https://www.semrush.com/blog", "semrush.com"),
        ("https://trends.google.com/x", "trends.google.com"),
        ("not a url", "other"),
    ])
    def test_source_domain(self, uri: str, expected: str):
        assert source_domain(uri) == expected

    def test_group_by_domain(self):
        groups = group_sources_by_domain([
            Source(title="a", uri="https://moz.com/a"),
            Source(title="b", uri="https://ahrefs.com/b"),
            Source(title="c", uri="https://www.moz.com/c"),
        ])

        assert list(groups) == ["moz.com", "ahrefs.com"]
        assert [s.title for s in groups["moz.com"]] == ["a", "c"]


class TestModels:
    """Tests for session models."""

    def test_message_defaults(self):
        message = ChatMessage(role="user", text="hi")

        assert message.id
        assert message.sources == []
        assert not message.is_assistant

    def test_message_ids_are_unique(self):
        assert ChatMessage(role="user", text="a").id != ChatMessage(role="user", text="a").id

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="system", text="hi")

    def test_grounded_metadata(self):
        assert MessageMetadata(data_source=DataSource.MOZ).is_grounded
        assert not MessageMetadata().is_grounded

    def test_text_attachment_from_path(self, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("# Keywords", encoding="utf-8")

        attachment = Attachment.from_path(path)

        assert attachment.name == "notes.md"
        assert attachment.mime_type == "text/plain"
        assert attachment.data == "# Keywords"
        assert not attachment.is_inline

    def test_image_attachment_from_path(self, tmp_path):
        path = tmp_path / "shot.png"
        path.write_bytes(b"\x89PNG")

        attachment = Attachment.from_path(path)

        assert attachment.is_inline
        assert attachment.mime_type == "image/png"
        assert attachment.decoded_bytes() == b"\x89PNG"


class TestChatSession:
    """Tests for the persisted message log."""

    def test_append_persists_messages(self, session, memory_store):
        session.add_user_message("How do I rank?")

        stored = memory_store.get(MESSAGES_KEY)
        assert len(stored) == 1
        assert stored[0]["text"] == "How do I rank?"

    def test_load_restores_everything(self, memory_store):
        first = ChatSession(memory_store)
        first.load()
        question = first.add_user_message("How do I rank?")
        first.toggle_pin(question.id)
        first.update_settings(thinking_mode=True, data_source=DataSource.AHREFS)

        second = ChatSession(memory_store)
        second.load()

        assert second.messages == first.messages
        assert second.pinned_ids == (question.id,)
        assert second.settings.thinking_mode
        assert second.settings.data_source is DataSource.AHREFS

    def test_load_skips_invalid_messages(self, memory_store):
        logs = []
        valid = ChatMessage(role="user", text="kept").model_dump(mode="json")
        memory_store.set(MESSAGES_KEY, [valid, {"role": "robot"}])
        memory_store.set(SETTINGS_KEY, {"response_mode": "verbose"})
        memory_store.set(PINS_KEY, "not a list")

        session = ChatSession(memory_store)
        session.set_debug_callback(lambda level, component, message: logs.append((level, component)))
        session.load()

        assert [m.text for m in session.messages] == ["kept"]
        assert session.settings.response_mode is ResponseMode.BALANCED
        assert session.pinned_ids == ()
        assert ("warning", "Session") in logs

    def test_load_with_non_list_messages(self, memory_store):
        memory_store.set(MESSAGES_KEY, {"oops": True})
        session = ChatSession(memory_store)
        session.load()
        assert session.messages == ()

    def test_attachment_only_message(self, session):
        attachment = Attachment(name="audit.txt", mime_type="text/plain", data="x", is_inline=False)

        message = session.add_user_message("", attachment)

        assert message.text == "[Attached File: audit.txt]"

    def test_messages_are_stamped_with_settings(self, session):
        session.update_settings(data_source=DataSource.MOZ, response_mode=ResponseMode.DEEP)

        message = session.add_assistant_message("answer", model="gemini")

        assert message.metadata == MessageMetadata(
            data_source=DataSource.MOZ,
            response_mode=ResponseMode.DEEP,
            model="gemini",
        )

    def test_messages_snapshot_is_immutable(self, session):
        snapshot = session.messages
        session.add_user_message("later")
        assert snapshot == ()

    def test_resolve(self, session):
        question = session.add_user_message("q")
        answer = session.add_assistant_message("a")

        assert session.resolve("last") == answer
        assert session.resolve("1") == question
        assert session.resolve(answer.id) == answer
        assert session.resolve("3") is None
        assert session.resolve("0") is None
        assert session.resolve("missing") is None

    def test_last_answer_none(self, session):
        session.add_user_message("q")
        assert session.last_answer() is None

    def test_pins_newest_first(self, session, memory_store):
        a = session.add_assistant_message("first")
        b = session.add_assistant_message("second")

        assert session.toggle_pin(a.id) is True
        assert session.toggle_pin(b.id) is True

        assert session.pinned_ids == (b.id, a.id)
        assert memory_store.get(PINS_KEY) == [b.id, a.id]
        assert session.pinned_messages() == [a, b]

    def test_unpin(self, session):
        a = session.add_assistant_message("first")
        session.toggle_pin(a.id)

        assert session.toggle_pin(a.id) is False
        assert not session.is_pinned(a.id)

    def test_search_is_case_insensitive(self, session):
        session.add_user_message("Tell me about Backlinks")
        session.add_assistant_message("Backlinks from trusted sites help.")
        session.add_assistant_message("Use alt text.")

        assert len(session.search("backlinks")) == 2
        assert len(session.search("  ")) == 3
        assert session.search("sitemap") == []

    def test_new_chat_releases_resources(self, session, memory_store, resources):
        answer = session.add_assistant_message("answer")
        session.toggle_pin(answer.id)
        resources.reveal_for(answer.id, "answer").skip()

        session.new_chat()

        assert session.messages == ()
        assert session.pinned_ids == ()
        assert memory_store.get(MESSAGES_KEY) is None
        assert memory_store.get(PINS_KEY) is None
        assert not resources.reveal_registry.is_complete(answer.id)

    def test_new_chat_keeps_settings(self, session, memory_store):
        session.update_settings(thinking_mode=True)
        session.new_chat()

        assert session.settings.thinking_mode
        assert memory_store.get(SETTINGS_KEY)["thinking_mode"] is True

    def test_invalid_settings_rejected(self, session):
        with pytest.raises(ValidationError):
            session.update_settings(response_mode="verbose")
        assert session.settings.response_mode is ResponseMode.BALANCED

    def test_build_prompt_uses_response_mode(self, session):
        session.update_settings(response_mode=ResponseMode.CONCISE)
        concise = session.build_prompt("What is E-E-A-T?")
        session.update_settings(response_mode=ResponseMode.DEEP)
        deep = session.build_prompt("What is E-E-A-T?")

        assert "What is E-E-A-T?" in concise
        assert concise != deep

    def test_unknown_quick_action(self, session):
        with pytest.raises(ValueError):
            session.quick_action_prompt("translate", "text")


class TestSessionStats:
    """Tests for session analytics."""

    def test_empty_session(self):
        stats = SessionStats.compute([])

        assert stats.total_messages == 0
        assert stats.average_answer_words == 0
        assert stats.latency_ms is None
        assert stats.latency_label == "—"

    def test_counts_and_latency(self):
        start = datetime(2026, 10, 18, 9, 0, 0)
        question = ChatMessage(role="user", text="How?", timestamp=start)
        answer = ChatMessage(
            role="assistant",
            text="Use internal links wisely",
            metadata=MessageMetadata(data_source=DataSource.SEJ),
            timestamp=start + timedelta(milliseconds=2500),
        )
        plain = ChatMessage(role="assistant", text="Yes", timestamp=start + timedelta(seconds=3))

        stats = SessionStats.compute([question, answer, plain], pinned_ids=[answer.id, "gone"])

        assert stats.total_messages == 3
        assert stats.user_messages == 1
        assert stats.assistant_messages == 2
        assert stats.average_answer_words == 2
        assert stats.grounded_answers == 1
        assert stats.last_answer_words == 1
        assert stats.pinned_messages == 1
        assert stats.latency_label == "3.0s"

    def test_session_stats_method(self, session):
        session.add_user_message("q")
        session.add_assistant_message("one two three")

        assert session.stats().last_answer_words == 3

    @pytest.mark.parametrize("ms,expected", [
        (None, "—"),
        (0, "—"),
        (-5, "—"),
        (420.4, "420ms"),
        (1500, "1.5s"),
    ])
    def test_format_duration(self, ms, expected):
        assert format_duration(ms) == expected
