"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - chat | side panel
   ============================================ */
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 3fr 1fr;
    grid-rows: 1fr auto;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Side Panel - stats, pins, search, log
   ============================================ */
#side-panel {
    height: 100%;
    padding: 0;
}

#stats-panel, #pinned-panel, #search-panel {
    height: auto;
    background: $panel;
    border: round $secondary 60%;
    border-title-color: $secondary;
    border-title-style: bold;
    padding: 0 1;
    margin-bottom: 1;
}

#pinned-panel {
    max-height: 12;
    overflow-y: auto;
}

#search-panel {
    max-height: 14;
    overflow-y: auto;
    border: round $accent 60%;
    border-title-color: $accent;
}

#debug-panel {
    height: 1fr;
    min-height: 6;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
}

/* ============================================
   Bottom Bar - settings + input
   ============================================ */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#settings-bar {
    height: 1;
    padding: 0 2;
    margin: 1 0;
    background: $surface;
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    border: tall $success;
    background: $success;
    color: $background;
    text-style: bold;

    &:hover {
        background: $success-lighten-1;
    }
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    background: transparent;
}

.user-message {
    border-left: tall $success;
    background: $success 8%;

    & .message-header {
        color: $success;
        text-style: bold;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }
}

.chat-message.-selected {
    border-left: thick $accent;
    background: $accent 8%;
}

.message-header, .message-content {
    height: auto;
    padding: 0;
    margin: 0;
}

.reasoning {
    background: $surface;
    border: round $border;
    margin: 0 0 1 0;
    padding: 0;
}

.promotion {
    margin: 1 0 0 0;
    padding: 0 1;
    border-left: wide $accent;
    background: $accent 10%;
}

.sources {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    border: round $primary 40%;
    color: $text-muted;
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
    }

    &.-error {
        border: tall $error;
    }

    &.-warning {
        border: tall $warning;
    }
}

Header {
    background: $panel;
    height: 1;
}

HeaderTitle {
    color: $primary;
    text-style: bold;
}

Footer {
    background: $panel;
}

/* ============================================
   Markdown Content Styling
   ============================================ */
Markdown {
    margin: 0;
    padding: 0;
}

MarkdownH1, MarkdownH2, MarkdownH3 {
    color: $primary;
    text-style: bold;
    margin: 1 0 0 0;
}

MarkdownFence {
    background: $panel;
    border: round $border;
    margin: 1 0;
}

MarkdownTable {
    margin: 1 0;
}
"""
