"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Dark theme built around the Rabbit Rank cyan used in exported reports
RABBIT_RANK_DARK = Theme(
    name="rabbit-rank-dark",
    primary="#00D9FF",      # Brand cyan - main accent
    secondary="#0891B2",    # Deep cyan - assistant messages
    accent="#f9e2af",       # Gold - promotion callouts, highlights
    foreground="#e2e8f0",   # Light text
    background="#0b1120",   # Deepest background
    success="#10b981",      # Green - user messages, send button
    warning="#f59e0b",      # Amber - warnings, log panel
    error="#f87171",        # Red - errors
    surface="#111827",      # Main surface
    panel="#0f172a",        # Panel backgrounds
    dark=True,
    variables={
        "block-cursor-foreground": "#0b1120",
        "block-cursor-background": "#00D9FF",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#1e293b 20%",

        "input-cursor-background": "#e2e8f0",
        "input-cursor-foreground": "#0b1120",
        "input-selection-background": "#00D9FF 30%",

        "border": "#334155",
        "border-blurred": "#1e293b",

        "scrollbar": "#1e293b",
        "scrollbar-hover": "#334155",
        "scrollbar-active": "#00D9FF",
        "scrollbar-background": "#0f172a",
        "scrollbar-corner-color": "#0f172a",

        "footer-foreground": "#cbd5e1",
        "footer-background": "#0b1120",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#1e293b",
        "footer-description-foreground": "#94a3b8",

        "text-muted": "#64748b",
        "text-disabled": "#334155",

        "link-color": "#00D9FF",
        "link-style": "underline",
        "link-color-hover": "#67e8f9",
        "link-style-hover": "bold",
    },
)
