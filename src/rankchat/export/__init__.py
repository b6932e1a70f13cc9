"""Export module.

Hides how answers and sessions are turned into files:
- markdown_html.py: Markdown subset to print HTML fragment
- document.py: Branded standalone print document
- transcript.py: Markdown transcript of a whole session
"""

from .document import to_printable_html, write_printable_html
from .markdown_html import markdown_to_html
from .transcript import export_transcript, transcript_filename, write_transcript

__all__ = [
    "export_transcript",
    "markdown_to_html",
    "to_printable_html",
    "transcript_filename",
    "write_printable_html",
    "write_transcript",
]
