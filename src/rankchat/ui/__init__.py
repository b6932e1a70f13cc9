"""Terminal UI module for rankchat.

Provides a Textual-based TUI for chatting with the SEO assistant.

Module structure (each module hides a design decision):
- config.py: Constants and log levels
- formatting.py: Citation layout, previews, clipboard
- widgets.py: Message view, input bar, stats and log panels
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- screens.py: Modal dialogs (confirmation)
- app.py: Application orchestration (user interaction flow)
"""

from .app import RankChatApp, run_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MessageView, StatsPanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "MessageView",
    "RankChatApp",
    "StatsPanel",
    "run_tui",
]
