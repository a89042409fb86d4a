"""Terminal UI for the chat client.

Module structure (each module hides a design decision):
- styles.py: CSS styling (layout decisions)
- widgets.py: Transcript bubbles, input bar, log panel
- app.py: Application orchestration (user interaction flow)
"""

from .app import StreamChatApp, run_textual_tui
from .widgets import ChatInputBar, LogPanel, MessageBubble, TranscriptView

__all__ = [
    "ChatInputBar",
    "LogPanel",
    "MessageBubble",
    "StreamChatApp",
    "TranscriptView",
    "run_textual_tui",
]
