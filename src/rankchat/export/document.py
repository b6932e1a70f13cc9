"""Standalone print document for an exported answer.

Hides the branding, page layout and print CSS of the export.
"""

import html
from datetime import datetime
from pathlib import Path

from .markdown_html import markdown_to_html

PRODUCT_NAME = "Rabbit Rank AI"
PRODUCT_URL = "https://rabbitrank.com"
DEFAULT_TITLE = "SEO-Assistant-Response"

PRINT_CSS = """
    * { box-sizing: border-box; }
    body {
      font-family: 'Segoe UI', -apple-system, BlinkMacSystemFont, Tahoma, Geneva, Verdana, sans-serif;
      padding: 50px;
      max-width: 850px;
      margin: 0 auto;
      color: #1f2937;
      line-height: 1.7;
      font-size: 14px;
    }
    h1 { color: #0891B2; font-size: 24px; border-bottom: 3px solid #00D9FF; padding-bottom: 12px; margin-top: 30px; }
    h2 { color: #0891B2; font-size: 20px; margin-top: 28px; border-bottom: 1px solid #e2e8f0; padding-bottom: 8px; }
    h3 { color: #0891B2; font-size: 16px; margin-top: 24px; }
    code {
      background: #f1f5f9;
      padding: 3px 8px;
      border-radius: 6px;
      font-family: 'Consolas', 'Monaco', monospace;
      font-size: 13px;
      color: #0891B2;
    }
    pre {
      background: #1e293b;
      color: #e2e8f0;
      padding: 20px;
      border-radius: 12px;
      overflow-x: auto;
      font-family: 'Consolas', 'Monaco', monospace;
      font-size: 13px;
      line-height: 1.5;
      margin: 20px 0;
    }
    pre code { background: transparent; color: inherit; padding: 0; }
    strong { color: #0f172a; }
    a { color: #0891B2; text-decoration: none; }
    a:hover { text-decoration: underline; }
    .header { text-align: center; margin-bottom: 40px; padding-bottom: 30px; border-bottom: 2px solid #e2e8f0; }
    .header h1 { border: none; margin: 0; padding: 0; }
    .logo {
      width: 60px;
      height: 60px;
      background: linear-gradient(135deg, #22d3ee, #0891b2);
      border-radius: 16px;
      display: inline-flex;
      align-items: center;
      justify-content: center;
      margin-bottom: 16px;
      font-size: 28px;
    }
    .content { padding: 20px 0; }
    .footer {
      margin-top: 50px;
      padding-top: 25px;
      border-top: 2px solid #e2e8f0;
      text-align: center;
      color: #6b7280;
      font-size: 12px;
    }
    .footer a { color: #0891B2; font-weight: 600; }
    @media print {
      body { padding: 30px; }
      .header { page-break-after: avoid; }
    }
"""


def format_report_date(moment: datetime) -> str:
    """Long report date, e.g. ``Sunday, October 18, 2026``."""
    return f"{moment:%A}, {moment:%B} {moment.day}, {moment.year}"


def to_printable_html(
    markdown: str,
    title: str = DEFAULT_TITLE,
    generated_at: datetime | None = None,
) -> str:
    """Build a complete HTML document for printing or saving as PDF.

    Args:
        markdown: Answer text to export
        title: Document title
        generated_at: Timestamp shown in the header (defaults to now)

    Returns:
        Standalone HTML document string
    """
    moment = generated_at or datetime.now()
    content = markdown_to_html(markdown)

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{html.escape(title)}</title>
  <style>{PRINT_CSS}</style>
</head>
<body>
  <div class="header">
    <div class="logo">🤖</div>
    <h1>{PRODUCT_NAME}</h1>
    <p style="color: #6b7280; margin-top: 8px;">SEO Assistant Report • Generated on {format_report_date(moment)}</p>
  </div>
  <div class="content">
{content}
  </div>
  <div class="footer">
    <p>💡 For professional SEO implementation and measurable results, visit <a href="{PRODUCT_URL}">Rabbit Rank</a></p>
    <p style="margin-top: 8px; color: #9ca3af;">© {moment.year} Rabbit Rank. All rights reserved.</p>
  </div>
</body>
</html>
"""


def write_printable_html(
    markdown: str,
    path: str | Path,
    title: str = DEFAULT_TITLE,
    generated_at: datetime | None = None,
) -> Path:
    """Write the print document to a file and return its path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(to_printable_html(markdown, title=title, generated_at=generated_at), encoding="utf-8")
    return target
