"""Prompt management module.

Externalizes prompts to text files for easy customization.
Prompts can be overridden by placing files in the working directory.
Also builds the per-request prompt text (response style, quick actions)
and holds the ready-made starter and tool questions.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from ..session.models import ResponseMode

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent

ATTACHMENT_ONLY_PROMPT = "Analyze the attached content and provide SEO insights, priorities, and next steps."

RESPONSE_MODE_GUIDANCE: dict[ResponseMode, str] = {
    ResponseMode.CONCISE: "Keep the response concise. Prioritize key insights, short bullets, and clear actions.",
    ResponseMode.BALANCED: "Provide a balanced response with practical steps, brief rationale, and clear prioritization.",
    ResponseMode.DEEP: "Provide a deep, comprehensive strategy with examples, checklists, and measurable outcomes.",
}

QUICK_ACTION_MAX_CHARS = 4000

QUICK_ACTIONS: dict[str, str] = {
    "summarize": "Summarize the answer below in 5 executive bullets with clear takeaways.",
    "checklist": "Turn the answer below into a step-by-step SEO checklist with priorities.",
    "metatags": "Generate an SEO title (<=60 chars) and meta description (<=160 chars) based on the answer below.",
    "actionplan": "Create a 30-day SEO action plan with milestones and KPIs based on the answer below.",
}


class PromptPreset(BaseModel):
    """A ready-made question offered as a starter or sidebar tool."""

    model_config = ConfigDict(frozen=True)

    label: str
    description: str
    text: str


# Starter questions shown on an empty chat
STARTER_PROMPTS: dict[str, PromptPreset] = {
    "keywords": PromptPreset(
        label="Keyword Research Strategy",
        description="Research",
        text=(
            "Help me develop a comprehensive keyword research strategy for my website. "
            "I need to identify high-volume, low-competition keywords in my niche."
        ),
    ),
    "audit": PromptPreset(
        label="Technical SEO Audit",
        description="Technical",
        text=(
            "What are the most critical technical SEO elements I should audit on my website? "
            "Provide a comprehensive checklist with prioritization."
        ),
    ),
    "content": PromptPreset(
        label="Content Optimization",
        description="Content",
        text=(
            "How can I optimize my existing blog content to rank higher for competitive keywords? "
            "Give me actionable on-page SEO tips."
        ),
    ),
    "backlinks": PromptPreset(
        label="Backlink Strategy",
        description="Off-Page",
        text=(
            "Create a white-hat backlink building strategy for my website. "
            "Focus on sustainable link acquisition methods."
        ),
    ),
}

# SEO tool shortcuts
TOOL_PRESETS: dict[str, PromptPreset] = {
    "keyword-research": PromptPreset(
        label="Keyword Research",
        description="Find high-value keywords",
        text=(
            "Help me conduct comprehensive keyword research for my website. I need to identify "
            "high-volume, low-competition keywords that align with my niche. Provide a step-by-step "
            "approach including tools and techniques."
        ),
    ),
    "rank-tracking": PromptPreset(
        label="Rank Tracking",
        description="Monitor SERP positions",
        text=(
            "How can I set up effective rank tracking for my website? Explain the best practices for "
            "monitoring SERP positions, tracking keyword rankings over time, and identifying ranking "
            "fluctuations."
        ),
    ),
    "content-audit": PromptPreset(
        label="Content Audit",
        description="Optimize existing content",
        text=(
            "Guide me through performing a comprehensive content audit for my website. How do I identify "
            "underperforming pages, content gaps, and opportunities for content optimization to improve SEO?"
        ),
    ),
    "backlink-analysis": PromptPreset(
        label="Backlink Analysis",
        description="Analyze link profile",
        text=(
            "Help me analyze my website's backlink profile. What metrics should I focus on, how do I "
            "identify toxic backlinks, and what strategies can I use to build high-quality backlinks?"
        ),
    ),
    "technical-seo": PromptPreset(
        label="Technical SEO",
        description="Site health check",
        text=(
            "Perform a technical SEO audit checklist for my website. Cover site speed, mobile-friendliness, "
            "crawlability, indexation issues, Core Web Vitals, and structured data implementation."
        ),
    ),
    "serp-preview": PromptPreset(
        label="SERP Preview",
        description="Preview Google results",
        text=(
            "Help me optimize my title tag and meta description for SEO. Provide best practices for crafting "
            "compelling titles and descriptions that improve click-through rates in Google search results."
        ),
    ),
}

PROMPT_PRESETS: dict[str, PromptPreset] = {**STARTER_PROMPTS, **TOOL_PRESETS}


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: rankchat/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    # Check working directory first (allows user overrides)
    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    # Fall back to package prompts
    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_system_instruction(thinking_mode: bool) -> str:
    """System prompt plus the reasoning or direct-answer addendum."""
    addendum = load_prompt("thinking" if thinking_mode else "direct")
    return load_prompt("system").rstrip("\n") + "\n" + addendum


def build_prompt(text: str, response_mode: ResponseMode = ResponseMode.BALANCED) -> str:
    """Prompt sent to the model for a user's message.

    An empty message (attachment only) asks for an analysis of the attachment.
    """
    base = text.strip() or ATTACHMENT_ONLY_PROMPT
    return f"{base}\n\n[Response Style]\n{RESPONSE_MODE_GUIDANCE[response_mode]}"


def build_quick_action_prompt(action: str, content: str) -> str:
    """Follow-up prompt that reworks a previous answer.

    Raises:
        ValueError: If the action is unknown
    """
    instruction = QUICK_ACTIONS.get(action)
    if instruction is None:
        raise ValueError(
            f"Unknown quick action: {action}. "
            f"Supported actions: {', '.join(QUICK_ACTIONS)}"
        )
    if len(content) > QUICK_ACTION_MAX_CHARS:
        content = content[:QUICK_ACTION_MAX_CHARS] + "..."
    return f"{instruction}\n\nAnswer:\n{content}"


def get_preset(name: str) -> PromptPreset:
    """Look up a starter or tool question by name.

    Raises:
        ValueError: If the name is unknown
    """
    preset = PROMPT_PRESETS.get(name.strip().lower())
    if preset is None:
        raise ValueError(
            f"Unknown prompt: {name}. "
            f"Available prompts: {', '.join(PROMPT_PRESETS)}"
        )
    return preset


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "PROMPT_PRESETS",
    "QUICK_ACTIONS",
    "STARTER_PROMPTS",
    "TOOL_PRESETS",
    "PromptPreset",
    "RESPONSE_MODE_GUIDANCE",
    "build_prompt",
    "build_quick_action_prompt",
    "clear_cache",
    "get_preset",
    "get_system_instruction",
    "load_prompt",
]
