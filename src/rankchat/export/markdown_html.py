"""Markdown to print HTML conversion.

A small, self-contained markdown subset renderer for export. It is a fixed
sequence of textual rewrites; each pass assumes the earlier ones already ran.
Unsupported syntax is left as literal text, so conversion never fails.
"""

import re

# Inline styles for print output (no external stylesheet for these elements)
LINK_STYLE = "color: #0891B2;"
RULE_STYLE = "border: none; border-top: 2px solid #e2e8f0; margin: 20px 0;"
LIST_STYLE = "list-style-type: disc; padding-left: 20px; margin: 12px 0;"
LIST_ITEM_STYLE = "margin-bottom: 8px;"
QUOTE_STYLE = (
    "border-left: 4px solid #00D9FF; padding-left: 16px; margin: 16px 0; "
    "background: #f0fdfa; padding: 12px 16px;"
)
TABLE_STYLE = (
    "border-collapse: collapse; width: 100%; margin: 24px 0; border-radius: 8px; "
    "overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1);"
)
HEADER_CELL_STYLE = (
    "border: 1px solid #d1d5db; padding: 12px 16px; "
    "background: linear-gradient(135deg, #f8fafc, #f1f5f9); "
    "font-weight: 600; text-align: left; color: #0891B2;"
)
BODY_CELL_STYLE = "border: 1px solid #e5e7eb; padding: 10px 16px; background: white;"
PARAGRAPH_STYLE = "margin: 12px 0; line-height: 1.7;"

INDENT_WIDTH = 2  # Spaces per list nesting level
INDENT_MARGIN_PX = 20  # Left margin per nesting level

BLOCK_PREFIXES = ("<h", "<ul", "<ol", "<li", "<pre", "<table", "<blockquote", "<hr")

_FENCE = re.compile(r"```\w*\n(.*?)```", re.DOTALL)
_PLACEHOLDER = "\x00CODEBLOCK{}\x00"
_PLACEHOLDER_PATTERN = re.compile(r"\x00CODEBLOCK(\d+)\x00")

_EMPHASIS = [
    (re.compile(r"\*\*\*(?!\s)(.+?)(?<!\s)\*\*\*"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(?!\s)(.+?)(?<!\s)\*"), r"<em>\1</em>"),
    (re.compile(r"(?<!\w)___(?!\s)(.+?)(?<!\s)___(?!\w)"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)"), r"<strong>\1</strong>"),
    (re.compile(r"(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)"), r"<em>\1</em>"),
]

_TABLE_SEPARATOR = re.compile(r"^\|[\s\-:|]+\|$")


def _stash_code_blocks(text: str) -> tuple[str, list[str]]:
    """Replace fenced code blocks with placeholders so later passes skip them."""
    blocks: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        blocks.append(f"<pre><code>{match.group(1)}</code></pre>")
        return _PLACEHOLDER.format(len(blocks) - 1)

    return _FENCE.sub(_stash, text), blocks


def _restore_code_blocks(text: str, blocks: list[str]) -> str:
    return _PLACEHOLDER_PATTERN.sub(lambda m: blocks[int(m.group(1))], text)


def _convert_headings(text: str) -> str:
    text = re.sub(r"^### (.+)$", r"<h3>\1</h3>", text, flags=re.MULTILINE)
    text = re.sub(r"^## (.+)$", r"<h2>\1</h2>", text, flags=re.MULTILINE)
    return re.sub(r"^# (.+)$", r"<h1>\1</h1>", text, flags=re.MULTILINE)


def _convert_emphasis(text: str) -> str:
    for pattern, replacement in _EMPHASIS:
        text = pattern.sub(replacement, text)
    return text


def _convert_unordered_lists(text: str) -> str:
    def _item(match: re.Match[str]) -> str:
        level = len(match.group(1)) // INDENT_WIDTH
        margin = level * INDENT_MARGIN_PX
        return f'<li style="margin-left: {margin}px; {LIST_ITEM_STYLE}">{match.group(2)}</li>'

    text = re.sub(r"^([ \t]*)[-*•] (.+)$", _item, text, flags=re.MULTILINE)
    # Merge each run of adjacent items into one list
    return re.sub(
        r"(?:<li[^>]*>.*?</li>\n?)+",
        lambda m: f'<ul style="{LIST_STYLE}">{m.group(0)}</ul>',
        text,
    )


def _split_cells(row: str) -> list[str]:
    # Drop the empty fields produced by the outer pipes
    return [cell.strip() for cell in row.strip().split("|")[1:-1]]


def _render_table(lines: list[str]) -> str | None:
    """Render a run of pipe lines, or return None when it is not a table."""
    if len(lines) < 2 or not _TABLE_SEPARATOR.match(lines[1].strip()):
        return None

    header_html = "".join(
        f'<th style="{HEADER_CELL_STYLE}">{cell}</th>' for cell in _split_cells(lines[0])
    )
    body_html = "".join(
        "<tr>"
        + "".join(f'<td style="{BODY_CELL_STYLE}">{cell}</td>' for cell in _split_cells(row))
        + "</tr>"
        for row in lines[2:]
    )
    return (
        f'<table style="{TABLE_STYLE}">'
        f'<thead style="background: #f8fafc;"><tr>{header_html}</tr></thead>'
        f"<tbody>{body_html}</tbody>"
        "</table>"
    )


def _convert_tables(text: str) -> str:
    """Replace each contiguous run of pipe-delimited lines that forms a table."""
    output: list[str] = []
    run: list[str] = []

    def _flush() -> None:
        if not run:
            return
        table = _render_table(run)
        if table is None:
            output.extend(run)
        else:
            output.extend(["", table, ""])
        run.clear()

    for line in text.split("\n"):
        stripped = line.strip()
        if len(stripped) > 1 and stripped.startswith("|") and stripped.endswith("|"):
            run.append(line)
        else:
            _flush()
            output.append(line)
    _flush()
    return "\n".join(output)


def _wrap_paragraphs(text: str) -> str:
    blocks = []
    for block in re.split(r"\n{2,}", text):
        block = block.strip("\n")
        if not block.strip():
            continue
        if block.lstrip().startswith(BLOCK_PREFIXES) or _PLACEHOLDER_PATTERN.fullmatch(block.strip()):
            blocks.append(block)
        else:
            body = block.replace("\n", "<br>")
            blocks.append(f'<p style="{PARAGRAPH_STYLE}">{body}</p>')
    return "\n".join(blocks)


def markdown_to_html(markdown: str) -> str:
    """Convert a markdown answer to an HTML fragment for printing.

    Args:
        markdown: Markdown text (typically a message's main content)

    Returns:
        HTML fragment; unsupported syntax is kept as literal text
    """
    # NUL delimits code block placeholders, so it cannot come from the input
    html = markdown.replace("\x00", "").replace("&", "&amp;")
    html, code_blocks = _stash_code_blocks(html)

    html = _convert_headings(html)
    html = _convert_emphasis(html)
    html = re.sub(r"`([^`\n]+)`", r"<code>\1</code>", html)
    html = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", rf'<a href="\2" style="{LINK_STYLE}">\1</a>', html)
    html = re.sub(r"^-{3,}[ \t]*$", f'<hr style="{RULE_STYLE}">', html, flags=re.MULTILINE)
    html = _convert_unordered_lists(html)
    html = re.sub(r"^\d+\. (.+)$", rf'<li style="{LIST_ITEM_STYLE}">\1</li>', html, flags=re.MULTILINE)
    html = re.sub(r"^> (.+)$", rf'<blockquote style="{QUOTE_STYLE}">\1</blockquote>', html, flags=re.MULTILINE)
    html = _convert_tables(html)
    html = _wrap_paragraphs(html)

    return _restore_code_blocks(html, code_blocks)
