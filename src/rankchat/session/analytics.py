"""Session analytics shown in the stats panel."""

from collections.abc import Sequence

from pydantic import BaseModel

from .models import ChatMessage


def count_words(text: str | None) -> int:
    if not text:
        return 0
    return len(text.split())


def format_duration(ms: float | None) -> str:
    """Human readable latency: ``—`` when unknown, ``Nms`` or ``N.Ns``."""
    if not ms or ms <= 0:
        return "—"
    if ms < 1000:
        return f"{round(ms)}ms"
    return f"{ms / 1000:.1f}s"


def response_latency_ms(messages: Sequence[ChatMessage]) -> float | None:
    """Time between the last answer and the user message before it."""
    for i in range(len(messages) - 1, -1, -1):
        if messages[i].role != "assistant":
            continue
        for j in range(i - 1, -1, -1):
            if messages[j].role == "user":
                delta = messages[i].timestamp - messages[j].timestamp
                return delta.total_seconds() * 1000
        return None
    return None


class SessionStats(BaseModel):
    """Aggregate numbers for the current session."""

    total_messages: int
    user_messages: int
    assistant_messages: int
    average_answer_words: int
    grounded_answers: int
    last_answer_words: int
    pinned_messages: int
    latency_ms: float | None

    @property
    def latency_label(self) -> str:
        return format_duration(self.latency_ms)

    @classmethod
    def compute(cls, messages: Sequence[ChatMessage], pinned_ids: Sequence[str] = ()) -> "SessionStats":
        answers = [m for m in messages if m.role == "assistant"]
        average = round(sum(count_words(m.text) for m in answers) / len(answers)) if answers else 0
        grounded = sum(1 for m in answers if m.metadata is not None and m.metadata.is_grounded)
        message_ids = {m.id for m in messages}
        return cls(
            total_messages=len(messages),
            user_messages=len(messages) - len(answers),
            assistant_messages=len(answers),
            average_answer_words=average,
            grounded_answers=grounded,
            last_answer_words=count_words(answers[-1].text) if answers else 0,
            pinned_messages=sum(1 for pid in pinned_ids if pid in message_ids),
            latency_ms=response_latency_ms(messages),
        )
