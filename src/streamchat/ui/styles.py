"""CSS styles for the chat TUI.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* Transcript panel */
#transcript {
    height: 1fr;
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

/* Log panel, hidden until toggled */
#log-panel {
    display: none;
    height: 10;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    padding: 0 1;
}

/* Input bar */
ChatInputBar {
    height: auto;
    padding: 1 0 0 0;
    background: $background;
}

#chat-input {
    width: 1fr;
    border: round $primary 60%;

    &:focus {
        border: round $primary;
    }
}

#send-btn {
    width: 10;
    min-width: 8;
    margin: 0 0 0 1;
    text-style: bold;
}

/* Chat messages */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 2;
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

    &.typing .message-content {
        color: $text-muted;
    }
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    color: $foreground;
}
"""
